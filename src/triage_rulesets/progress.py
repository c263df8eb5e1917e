"""Progress calculation for the wizard's progress bar.

While a session is running the question currently on screen is credited,
so a fresh session already shows ``round(100 / N)``.  Some traversals reach
``N + 1`` credited questions before the final submission; the clamp to
``MAX_PROGRESS`` keeps the bar at 100 in that case.
"""

import math

from triage_rulesets.constants import MAX_PROGRESS
from triage_rulesets.models.session import SessionState


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Python's ``round`` uses banker's rounding (``round(2.5) == 2``); the
    progress bar has always rounded halves up.
    """
    return math.floor(value + 0.5)


def progress_percent(answered: int, total: int, *, finished: bool) -> int:
    """Percentage complete for ``answered`` of ``total`` questions."""
    if total <= 0:
        raise ValueError(f"total must be positive, got {total}")
    count = answered if finished else answered + 1
    return min(MAX_PROGRESS, round_half_up(100 * count / total))


def progress(state: SessionState, total: int) -> int:
    """Percentage complete for ``state`` in a catalog of ``total`` questions."""
    return progress_percent(state.answered_count, total, finished=state.is_finished)

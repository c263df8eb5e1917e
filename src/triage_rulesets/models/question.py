"""Question definition model for the triage catalog.

Every question is a binary (yes/no) prompt.  Each answer maps to its own
``Outcome``:

    on_yes / on_no
        AdvanceOutcome   -> continue at an explicit next question
        CandidateOutcome -> register a candidate recommendation

Questions may also carry a ``tally`` point, used only by the weighted-tally
strategy: answering with ``tally.answer`` adds one point to
``tally.recommendation``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .outcome import CandidateOutcome, Outcome


class TallyPoint(BaseModel):
    """One point towards ``recommendation`` when the answer equals ``answer``."""

    model_config = ConfigDict(frozen=True)

    recommendation: str
    answer: bool = True


class QuestionDefinition(BaseModel):
    """A single catalog question with its per-answer outcomes."""

    model_config = ConfigDict(frozen=True)

    qid: str
    question: str = Field(min_length=1)
    on_yes: Outcome
    on_no: Outcome
    tally: Optional[TallyPoint] = None

    def outcome_for(self, answer: bool) -> Outcome:
        """Return ``on_yes`` for True, ``on_no`` for False."""
        return self.on_yes if answer else self.on_no

    @property
    def outcomes(self) -> tuple[Outcome, Outcome]:
        return (self.on_yes, self.on_no)

    @property
    def candidate_recommendations(self) -> set[str]:
        """Recommendation ids this question can produce through its outcomes."""
        return {
            o.recommendation for o in self.outcomes if isinstance(o, CandidateOutcome)
        }

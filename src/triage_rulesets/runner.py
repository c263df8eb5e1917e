"""WizardRunner — in-process session holder for a single front end.

The engine is stateless; a front end that drives one session at a time
(a terminal UI, a desktop widget) needs something that owns the current
``SessionState`` and forwards button presses into the engine.  That is the
runner's whole job:

  - ``answer_yes`` / ``answer_no`` / ``reset`` map the three user intents
  - a lock serialises intents, so a double click cannot interleave two
    submissions against the same state
  - ``on_result`` fires once per session, when the final result lands

Usage::

    runner = WizardRunner(engine, on_result=show_toast)
    while runner.result is None:
        step = runner.step()
        ...
        runner.answer_yes()
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from triage_rulesets.display.renderer import NOTIFICATION_DESCRIPTION, NOTIFICATION_TITLE
from triage_rulesets.engine import DecisionEngine
from triage_rulesets.models.session import Notification, SessionState, StepResult
from triage_rulesets.models.strategy import StrategyName

logger = logging.getLogger(__name__)


class WizardRunner:
    """Owns one session and serialises user intents against it.

    Args:
        engine: the :class:`DecisionEngine` to drive
        strategy: strategy for the session (engine default if None)
        on_result: optional callback receiving a :class:`Notification`
            when a submission produces the final result
    """

    def __init__(
        self,
        engine: DecisionEngine,
        strategy: StrategyName | str | None = None,
        on_result: Optional[Callable[[Notification], None]] = None,
    ) -> None:
        self._engine = engine
        self._on_result = on_result
        self._lock = threading.Lock()
        self._state = engine.new_session(strategy)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def result(self) -> str | None:
        return self._engine.final_result(self._state)

    @property
    def prompt(self) -> str | None:
        return self._engine.current_prompt(self._state)

    @property
    def progress(self) -> int:
        return self._engine.progress(self._state)

    def step(self) -> StepResult:
        return self._engine.current_step(self._state)

    def answer(self, value: bool) -> SessionState:
        """Submit ``value`` for the current question."""
        notification = None
        with self._lock:
            before = self._state
            self._state = self._engine.submit_answer(before, value)
            if not before.is_finished and self._state.is_finished:
                notification = Notification(
                    title=NOTIFICATION_TITLE,
                    description=NOTIFICATION_DESCRIPTION,
                    recommendation=self._state.final_result,
                )
            state = self._state

        # Callback runs outside the lock so it may query the runner
        if notification is not None and self._on_result is not None:
            self._on_result(notification)
        return state

    def answer_yes(self) -> SessionState:
        return self.answer(True)

    def answer_no(self) -> SessionState:
        return self.answer(False)

    def reset(self) -> SessionState:
        """Start over with the same strategy."""
        with self._lock:
            self._state = self._engine.reset(self._state)
            logger.debug("Session reset (strategy=%s)", self._state.strategy.value)
            return self._state

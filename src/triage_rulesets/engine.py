"""DecisionEngine — the yes/no question state machine.

Stateless engine pattern: the engine keeps no session data of its own.
Every operation takes a ``SessionState`` and, where it changes anything,
returns a new one.  Callers own the state they hold; the in-process
``WizardRunner`` and the REST API are the two callers shipped here.

Submission flow (``submit_answer``):

    1. look up the current question
    2. append (qid, answer) to the answered log
    3. resolve on_yes / on_no
    4. a candidate outcome is captured into ``saved_result``
       (first candidate wins unless the strategy says otherwise)
    5. the session terminates at the terminal question; the ``graph``
       strategy also terminates on any candidate
    6. on termination: final = saved candidate, else the candidate just
       resolved, else the catalog default (``weighted_tally`` computes the
       final result from tally points instead)
    7. otherwise move on: advance outcomes follow their edge, candidate
       outcomes fall back to the next question in catalog order

Answers submitted after the session finished are ignored (strict engines
raise ``InvalidTransition`` instead).
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from triage_rulesets.catalog import QuestionCatalog
from triage_rulesets.constants import DEFAULT_STRATEGY
from triage_rulesets.errors import InvalidSessionState, InvalidTransition
from triage_rulesets.models.outcome import AdvanceOutcome, CandidateOutcome
from triage_rulesets.models.session import (
    AnsweredQuestion,
    QuestionStep,
    RecommendationView,
    ResultStep,
    SessionState,
    StepResult,
)
from triage_rulesets.models.strategy import STRATEGIES, DecisionStrategy, StrategyName
from triage_rulesets.progress import progress
from triage_rulesets.scoring import tally_recommendation

logger = logging.getLogger(__name__)


class DecisionEngine:
    """Drives wizard sessions over a validated catalog.

    Args:
        catalog: a validated :class:`QuestionCatalog`
        default_strategy: strategy for sessions created without an explicit
            one (defaults to ``TRIAGE_STRATEGY`` / sequential_memory)
        strict: raise ``InvalidTransition`` on answers submitted after the
            session finished instead of ignoring them
        strategies: optional overrides for the built-in presets, keyed by
            name (e.g. a sequential_memory variant with tie_break="last")
    """

    def __init__(
        self,
        catalog: QuestionCatalog,
        *,
        default_strategy: StrategyName | str | None = None,
        strict: bool = False,
        strategies: Mapping[StrategyName, DecisionStrategy] | None = None,
    ) -> None:
        self._catalog = catalog
        self._default_strategy = StrategyName(default_strategy or DEFAULT_STRATEGY)
        self._strict = strict
        for key, strategy in (strategies or {}).items():
            if StrategyName(key) != strategy.name:
                raise ValueError(
                    f"Strategy override keyed '{StrategyName(key).value}' is named "
                    f"'{strategy.name.value}'"
                )
        self._strategies: dict[StrategyName, DecisionStrategy] = {
            **STRATEGIES,
            **{StrategyName(k): v for k, v in (strategies or {}).items()},
        }

    @property
    def catalog(self) -> QuestionCatalog:
        return self._catalog

    @property
    def default_strategy(self) -> StrategyName:
        return self._default_strategy

    def strategy_for(self, state: SessionState) -> DecisionStrategy:
        """The decision rule that governs ``state``."""
        return self._strategies[state.strategy]

    # ==================================================================
    # Session lifecycle
    # ==================================================================

    def new_session(self, strategy: StrategyName | str | None = None) -> SessionState:
        """Return a fresh session positioned at the entry question."""
        name = StrategyName(strategy) if strategy is not None else self._default_strategy
        return SessionState(strategy=name, current_qid=self._catalog.entry_question())

    def reset(self, state: SessionState) -> SessionState:
        """Discard all answers; keeps the session's strategy.  Always succeeds."""
        return self.new_session(state.strategy)

    def replay(
        self,
        answers: Iterable[bool],
        strategy: StrategyName | str | None = None,
    ) -> SessionState:
        """Run a fresh session through ``answers`` and return the last state."""
        state = self.new_session(strategy)
        for answer in answers:
            state = self.submit_answer(state, answer)
        return state

    # ==================================================================
    # Step API
    # ==================================================================

    def submit_answer(self, state: SessionState, answer: bool) -> SessionState:
        """Record ``answer`` for the current question and advance the session.

        Returns the unchanged ``state`` when the session already finished
        (non-strict engines).

        Raises:
            InvalidTransition: strict engine, session already finished.
            UnknownQuestion: the state names a question outside the catalog.
        """
        if state.is_finished:
            if self._strict:
                raise InvalidTransition(
                    f"Session already finished with '{state.final_result}'"
                )
            logger.debug("Ignoring answer after completion (result=%s)", state.final_result)
            return state

        strategy = self.strategy_for(state)
        qid = state.current_qid
        question = self._catalog.lookup(qid)
        log = state.answered_log + (AnsweredQuestion(qid=qid, answer=answer),)
        outcome = question.outcome_for(answer)

        # --- Candidate capture ---
        saved = state.saved_result
        candidate = None
        if strategy.scoring == "routing" and isinstance(outcome, CandidateOutcome):
            candidate = outcome.recommendation
            if saved is None or strategy.tie_break == "last":
                saved = candidate

        # --- Termination ---
        terminal = qid == self._catalog.last_question()
        if candidate is not None and strategy.candidate_ends_session:
            terminal = True

        if terminal:
            final = self._final_result(strategy, log, saved, candidate)
            logger.info(
                "Session finished at %s after %d answers: %s (strategy=%s)",
                qid, len(log), final, strategy.name.value,
            )
            return state.model_copy(update={
                "answered_log": log,
                "current_qid": None,
                "saved_result": saved,
                "final_result": final,
            })

        # --- Advance ---
        if strategy.scoring == "routing" and isinstance(outcome, AdvanceOutcome):
            next_qid = outcome.qid
        else:
            # Sequential fallback: candidate (or tally) moves by catalog order
            next_qid = self._catalog.successor(qid)

        logger.debug(
            "%s answered %s -> %s (saved=%s)", qid, "yes" if answer else "no", next_qid, saved,
        )
        return state.model_copy(update={
            "answered_log": log,
            "current_qid": next_qid,
            "saved_result": saved,
        })

    def _final_result(
        self,
        strategy: DecisionStrategy,
        log: tuple[AnsweredQuestion, ...],
        saved: str | None,
        candidate: str | None,
    ) -> str:
        if strategy.scoring == "tally":
            return tally_recommendation(
                self._catalog, {entry.qid: entry.answer for entry in log},
            )
        if saved is not None:
            return saved
        if candidate is not None:
            return candidate
        return self._catalog.default_recommendation

    # ==================================================================
    # Queries
    # ==================================================================

    def current_prompt(self, state: SessionState) -> str | None:
        """Prompt text of the current question, or None once finished."""
        if state.is_finished:
            return None
        return self._catalog.lookup(state.current_qid).question

    def progress(self, state: SessionState) -> int:
        """Percentage complete in [0, 100]."""
        return progress(state, self._catalog.size())

    def final_result(self, state: SessionState) -> str | None:
        """Recommendation id once the session finished, else None."""
        return state.final_result

    def current_step(self, state: SessionState) -> StepResult:
        """Bundle the queries into a single view for presentation."""
        pct = self.progress(state)
        if state.is_finished:
            rec = self._catalog.recommendation(state.final_result)
            return ResultStep(
                recommendation=RecommendationView(
                    id=rec.id,
                    label=rec.label,
                    description=rec.description,
                    cta_url=rec.cta_url,
                ),
                progress=pct,
                answered=state.answered_count,
            )
        question = self._catalog.lookup(state.current_qid)
        return QuestionStep(
            qid=question.qid,
            question=question.question,
            position=self._catalog.ordinal(question.qid) + 1,
            total=self._catalog.size(),
            progress=pct,
            answered=state.answered_count,
        )

    # ==================================================================
    # Caller-supplied state checks
    # ==================================================================

    def check_state(self, state: SessionState) -> SessionState:
        """Verify that ``state`` fits this engine's catalog.

        Used where states come from outside the process (REST clients post
        back the state they were given).  Beyond id checks, the answered log
        is replayed and must reproduce the posted current_qid, saved_result
        and final_result, so an open state never holds more than N answers.

        Raises:
            InvalidSessionState: describing the first inconsistency found.
        """
        catalog = self._catalog
        if state.answered_count > catalog.size():
            raise InvalidSessionState(
                f"Invalid session state: {state.answered_count} answers for "
                f"{catalog.size()} questions"
            )
        unknown = [e.qid for e in state.answered_log if e.qid not in catalog]
        if unknown:
            raise InvalidSessionState(f"Invalid session state: unknown answered qids {unknown}")
        if state.is_finished:
            if state.current_qid is not None:
                raise InvalidSessionState(
                    "Invalid session state: finished session still names a current question"
                )
        elif state.current_qid not in catalog:
            raise InvalidSessionState(
                f"Invalid session state: unknown current question {state.current_qid!r}"
            )
        for field_name in ("saved_result", "final_result"):
            value = getattr(state, field_name)
            if value is not None and not catalog.has_recommendation(value):
                raise InvalidSessionState(
                    f"Invalid session state: {field_name} '{value}' is not a recommendation"
                )

        # The log must be a path this engine would have produced, and the
        # remaining fields must follow from it
        expected = self.new_session(state.strategy)
        for i, entry in enumerate(state.answered_log):
            if expected.is_finished or entry.qid != expected.current_qid:
                raise InvalidSessionState(
                    f"Invalid session state: answer {i + 1} is for {entry.qid!r}, "
                    f"expected {expected.current_qid!r}"
                )
            expected = self.submit_answer(expected, entry.answer)
        derived = ("current_qid", "saved_result", "final_result")
        if any(getattr(expected, f) != getattr(state, f) for f in derived):
            raise InvalidSessionState(
                "Invalid session state: current_qid / saved_result / final_result "
                "do not follow from the answered log"
            )
        return state

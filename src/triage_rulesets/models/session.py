"""Session and step models — the contract between the engine and its callers.

``SessionState`` is an immutable value: every engine operation takes a state
and returns a new one.  Nothing is persisted; a caller that needs to keep a
session (the REST client, the in-process ``WizardRunner``) simply holds on to
the latest state.

Step types returned by ``DecisionEngine.current_step``:
  - QuestionStep: show a question and wait for yes/no
  - ResultStep: the session has finished with a recommendation

The ``StepResult`` union covers both cases so callers can dispatch on ``type``.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from .strategy import StrategyName


class AnsweredQuestion(BaseModel):
    """One entry of the answered log."""

    model_config = ConfigDict(frozen=True)

    qid: str
    answer: bool


class SessionState(BaseModel):
    """Complete decision state of one wizard session.

    ``current_qid`` is None only once ``final_result`` is set.
    ``saved_result`` holds the candidate captured so far.
    """

    model_config = ConfigDict(frozen=True)

    strategy: StrategyName = StrategyName.SEQUENTIAL_MEMORY
    answered_log: tuple[AnsweredQuestion, ...] = ()
    current_qid: Optional[str] = None
    saved_result: Optional[str] = None
    final_result: Optional[str] = None

    @property
    def is_finished(self) -> bool:
        return self.final_result is not None

    @property
    def answered_count(self) -> int:
        return len(self.answered_log)

    def answers(self) -> dict[str, bool]:
        """Answers keyed by qid (later entries win if a qid repeats)."""
        return {entry.qid: entry.answer for entry in self.answered_log}


class RecommendationView(BaseModel):
    """Flattened recommendation for presentation."""

    id: str
    label: str
    description: str = ""
    cta_url: str | None = None


class QuestionStep(BaseModel):
    """Engine step: present one yes/no question."""

    type: Literal["question"] = "question"
    qid: str
    question: str
    # 1-based ordinal of the question in the catalog, for "question i of N"
    position: int
    total: int
    progress: int
    answered: int


class ResultStep(BaseModel):
    """Engine step: the session finished with a recommendation."""

    type: Literal["result"] = "result"
    recommendation: RecommendationView
    progress: int
    answered: int


# Callers can match on step.type to dispatch rendering logic.
StepResult = QuestionStep | ResultStep


class Notification(BaseModel):
    """Transient message the presentation layer shows when a result lands."""

    title: str
    description: str
    recommendation: str

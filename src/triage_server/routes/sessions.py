"""Session endpoints — start, answer, reset and view a wizard session.

The API is stateless: the client keeps the ``SessionState`` returned by
every call and posts it back with the next intent.  Each request is a pure
function of (state, intent), so concurrent requests cannot interleave
transitions on shared server-side state.

Every response is a ``WizardStep``: the new state plus the step to render.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from triage_rulesets.display import ResultCopyRenderer
from triage_rulesets.engine import DecisionEngine
from triage_rulesets.models.session import (
    Notification,
    QuestionStep,
    ResultStep,
    SessionState,
)
from triage_rulesets.models.strategy import StrategyName

from triage_server.dependencies import get_engine, get_renderer

router = APIRouter(tags=["sessions"])


# ------------------------------------------------------------------
# Request / response models
# ------------------------------------------------------------------

class CreateSessionRequest(BaseModel):
    """Body for POST /sessions."""
    strategy: StrategyName | None = None


class AnswerRequest(BaseModel):
    """Body for POST /sessions/answer."""
    state: SessionState
    answer: bool


class StateRequest(BaseModel):
    """Body for POST /sessions/reset and POST /sessions/view."""
    state: SessionState


class WizardStep(BaseModel):
    """State to keep plus the step to render.

    ``notification`` is set only on the answer that produced the result.
    """
    state: SessionState
    step: QuestionStep | ResultStep
    notification: Notification | None = None


def _wizard_step(
    engine: DecisionEngine,
    state: SessionState,
    notification: Notification | None = None,
) -> WizardStep:
    return WizardStep(
        state=state,
        step=engine.current_step(state),
        notification=notification,
    )


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/sessions", status_code=201)
def create_session(
    body: CreateSessionRequest | None = None,
    engine: DecisionEngine = Depends(get_engine),
) -> WizardStep:
    """Start a new session at the entry question.

    Without a body (or without ``strategy``) the server default applies.
    """
    strategy = body.strategy if body is not None else None
    return _wizard_step(engine, engine.new_session(strategy))


@router.post("/sessions/answer")
def submit_answer(
    body: AnswerRequest,
    engine: DecisionEngine = Depends(get_engine),
    renderer: ResultCopyRenderer = Depends(get_renderer),
) -> WizardStep:
    """Submit a yes/no answer for the state's current question.

    Answers posted to a finished session return the state unchanged
    (409 when the server runs in strict mode).
    """
    state = engine.check_state(body.state)
    new_state = engine.submit_answer(state, body.answer)

    notification = None
    if not state.is_finished and new_state.is_finished:
        notification = renderer.notification(new_state.final_result)
    return _wizard_step(engine, new_state, notification)


@router.post("/sessions/reset")
def reset_session(
    body: StateRequest,
    engine: DecisionEngine = Depends(get_engine),
) -> WizardStep:
    """Discard all answers, keeping the session's strategy."""
    return _wizard_step(engine, engine.reset(body.state))


@router.post("/sessions/view")
def view_session(
    body: StateRequest,
    engine: DecisionEngine = Depends(get_engine),
) -> WizardStep:
    """Return the step for a state without changing it."""
    return _wizard_step(engine, engine.check_state(body.state))

"""Public model re-exports for triage_rulesets.

Consumers should import from ``triage_rulesets.models`` rather than
reaching into sub-modules directly.
"""

# --- Outcomes ---
from triage_rulesets.models.outcome import AdvanceOutcome, CandidateOutcome, Outcome

# --- Questions ---
from triage_rulesets.models.question import QuestionDefinition, TallyPoint

# --- Schema / reference data ---
from triage_rulesets.models.schema import CombinedTally, Recommendation, TallyConfig

# --- Strategy ---
from triage_rulesets.models.strategy import (
    STRATEGIES,
    DecisionStrategy,
    StrategyName,
    get_strategy,
)

# --- Session / step ---
from triage_rulesets.models.session import (
    AnsweredQuestion,
    Notification,
    QuestionStep,
    RecommendationView,
    ResultStep,
    SessionState,
    StepResult,
)

__all__ = [
    # Outcomes
    "AdvanceOutcome",
    "CandidateOutcome",
    "Outcome",
    # Questions
    "QuestionDefinition",
    "TallyPoint",
    # Schema
    "CombinedTally",
    "Recommendation",
    "TallyConfig",
    # Strategy
    "STRATEGIES",
    "DecisionStrategy",
    "StrategyName",
    "get_strategy",
    # Session
    "AnsweredQuestion",
    "Notification",
    "QuestionStep",
    "RecommendationView",
    "ResultStep",
    "SessionState",
    "StepResult",
]

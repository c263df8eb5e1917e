"""triage_rulesets — yes/no health triage wizard SDK.

Public API:
    QuestionCatalog    — validated, immutable question graph (load_catalog)
    DecisionEngine     — stateless state machine over the catalog
    WizardRunner       — owns one session for an in-process front end
    ResultCopyRenderer — Jinja2 display copy for steps and notifications
    build_catalog_graph — nodes/edges view of the catalog routing

Strategies:
    DecisionStrategy   — decision rule as data
    StrategyName       — sequential_memory | graph | weighted_tally

Session / step models:
    SessionState       — immutable decision state passed in and out
    QuestionStep       — step: show a question
    ResultStep         — step: session finished with a recommendation
    StepResult         — union of both step types
    Notification       — completion toast payload

Errors:
    TriageError, UnknownQuestion, CatalogValidationError,
    InvalidSessionState, InvalidTransition
"""

from triage_rulesets.catalog import QuestionCatalog, load_catalog
from triage_rulesets.display import ResultCopyRenderer
from triage_rulesets.engine import DecisionEngine
from triage_rulesets.errors import (
    CatalogValidationError,
    InvalidSessionState,
    InvalidTransition,
    TriageError,
    UnknownQuestion,
)
from triage_rulesets.graph import build_catalog_graph
from triage_rulesets.models.session import (
    Notification,
    QuestionStep,
    ResultStep,
    SessionState,
    StepResult,
)
from triage_rulesets.models.strategy import DecisionStrategy, StrategyName
from triage_rulesets.runner import WizardRunner

__all__ = [
    # Catalog & engine
    "DecisionEngine",
    "QuestionCatalog",
    "ResultCopyRenderer",
    "WizardRunner",
    "build_catalog_graph",
    "load_catalog",
    # Strategy
    "DecisionStrategy",
    "StrategyName",
    # Session / step
    "Notification",
    "QuestionStep",
    "ResultStep",
    "SessionState",
    "StepResult",
    # Errors
    "CatalogValidationError",
    "InvalidSessionState",
    "InvalidTransition",
    "TriageError",
    "UnknownQuestion",
]

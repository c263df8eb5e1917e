"""FastAPI dependency injection — provides the engine and catalog.

Both are built once during the lifespan handler and stashed on
``app.state``; the API itself is stateless, so there is no per-request
session or transaction to manage.
"""

from fastapi import Request

from triage_rulesets.catalog import QuestionCatalog
from triage_rulesets.display import ResultCopyRenderer
from triage_rulesets.engine import DecisionEngine


def get_engine(request: Request) -> DecisionEngine:
    """Return the engine singleton from ``app.state``."""
    return request.app.state.engine


def get_catalog(request: Request) -> QuestionCatalog:
    """Return the catalog singleton from ``app.state``."""
    return request.app.state.catalog


def get_renderer(request: Request) -> ResultCopyRenderer:
    """Return the copy renderer singleton from ``app.state``."""
    return request.app.state.renderer

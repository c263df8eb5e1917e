"""Reference data endpoints — questions, recommendations, strategies, graph.

These are read-only endpoints that expose the loaded catalog and the
built-in strategy presets.
"""

from fastapi import APIRouter, Depends

from triage_rulesets.catalog import QuestionCatalog
from triage_rulesets.graph import build_catalog_graph
from triage_rulesets.models.strategy import STRATEGIES

from triage_server.dependencies import get_catalog

router = APIRouter(prefix="/reference", tags=["reference"])


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("/questions")
def list_questions(
    catalog: QuestionCatalog = Depends(get_catalog),
) -> list[dict]:
    """Return all questions in catalog order with their routing."""
    return [
        {
            "qid": q.qid,
            "question": q.question,
            "position": catalog.ordinal(q.qid) + 1,
            "on_yes": q.on_yes.model_dump(),
            "on_no": q.on_no.model_dump(),
        }
        for q in catalog.questions
    ]


@router.get("/recommendations")
def list_recommendations(
    catalog: QuestionCatalog = Depends(get_catalog),
) -> list[dict]:
    """Return the closed set of recommendations with their CTA links."""
    return [
        {
            "id": rec.id,
            "label": rec.label,
            "description": rec.description,
            "cta_url": rec.cta_url,
            "default": rec.id == catalog.default_recommendation,
        }
        for rec in catalog.recommendations
    ]


@router.get("/recommendations/{rec_id}")
def get_recommendation(
    rec_id: str,
    catalog: QuestionCatalog = Depends(get_catalog),
) -> dict:
    """Return one recommendation; unknown ids raise KeyError → 404."""
    rec = catalog.recommendation(rec_id)
    return rec.model_dump()


@router.get("/strategies")
def list_strategies() -> list[dict]:
    """Return the built-in decision strategy presets."""
    return [s.model_dump(mode="json") for s in STRATEGIES.values()]


@router.get("/graph")
def catalog_graph(
    catalog: QuestionCatalog = Depends(get_catalog),
) -> dict:
    """Return the catalog routing as cytoscape-style nodes and edges."""
    return build_catalog_graph(catalog)

from __future__ import annotations
from typing import Any, Dict, List

from triage_rulesets.catalog import QuestionCatalog
from triage_rulesets.models.outcome import AdvanceOutcome


def _rec_node_id(rec_id: str) -> str:
    return f"rec:{rec_id}"


def build_catalog_graph(catalog: QuestionCatalog) -> Dict[str, Any]:
    """Cytoscape-style {nodes, edges} view of the catalog's routing.

    Question nodes carry their prompt; recommendations become virtual nodes.
    Candidate answers get an edge to their recommendation and, for
    non-terminal questions, a dashed "fallback" edge to the next question.
    """
    nodes: List[Dict[str, Any]] = []
    edges: List[Dict[str, Any]] = []
    terminal = catalog.last_question()

    for q in catalog.questions:
        data = {
            "id": q.qid,
            "label": q.question,
            "type": "question",
            "entry": q.qid == catalog.entry_question(),
            "terminal": q.qid == terminal,
        }
        if q.tally is not None:
            data["tally"] = q.tally.model_dump()
        nodes.append({"data": data})

    for q in catalog.questions:
        for label, outcome in (("yes", q.on_yes), ("no", q.on_no)):
            if isinstance(outcome, AdvanceOutcome):
                # the terminal question's advance edge goes nowhere
                if q.qid == terminal:
                    continue
                edges.append({"data": {"source": q.qid, "target": outcome.qid, "label": label}})
            else:
                edges.append({"data": {
                    "source": q.qid,
                    "target": _rec_node_id(outcome.recommendation),
                    "label": label,
                    "kind": "candidate",
                }})
                nxt = catalog.successor(q.qid)
                if nxt is not None:
                    edges.append({"data": {
                        "source": q.qid, "target": nxt, "label": label, "kind": "fallback",
                    }})

    # add virtual recommendation nodes
    for rec in catalog.recommendations:
        nodes.append({"data": {
            "id": _rec_node_id(rec.id),
            "label": rec.label,
            "type": "recommendation",
            "default": rec.id == catalog.default_recommendation,
        }})
    return {"nodes": nodes, "edges": edges}

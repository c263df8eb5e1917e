from triage_rulesets.graph import build_catalog_graph

from helpers.catalogs import skipping_catalog


def _edges(graph, source):
    return [e["data"] for e in graph["edges"] if e["data"]["source"] == source]


def test_graph_nodes(catalog):
    graph = build_catalog_graph(catalog)
    ids = [n["data"]["id"] for n in graph["nodes"]]
    assert ids[:7] == catalog.qids
    assert set(ids[7:]) == {"rec:ferritina", "rec:vitamina_d", "rec:ambas", "rec:consulta"}

    by_id = {n["data"]["id"]: n["data"] for n in graph["nodes"]}
    assert by_id["Q1"]["entry"] is True
    assert by_id["Q7"]["terminal"] is True
    assert by_id["Q7"]["tally"] == {"recommendation": "ferritina", "answer": False}
    assert by_id["rec:consulta"]["default"] is True
    assert by_id["rec:ferritina"]["default"] is False


def test_candidate_edges_have_fallback(catalog):
    graph = build_catalog_graph(catalog)
    q2 = _edges(graph, "Q2")
    assert {"source": "Q2", "target": "rec:ferritina", "label": "yes", "kind": "candidate"} in q2
    assert {"source": "Q2", "target": "Q3", "label": "yes", "kind": "fallback"} in q2
    assert {"source": "Q2", "target": "Q3", "label": "no"} in q2


def test_terminal_question_has_no_question_edges(catalog):
    graph = build_catalog_graph(catalog)
    q7 = _edges(graph, "Q7")
    assert q7 == [{"source": "Q7", "target": "rec:ferritina", "label": "no", "kind": "candidate"}]


def test_skip_edge():
    graph = build_catalog_graph(skipping_catalog())
    assert {"source": "Q1", "target": "Q4", "label": "yes"} in _edges(graph, "Q1")

"""QuestionCatalog loading and validation tests.

Covers the packaged catalog (shape, lookups, CTA overrides) and every
validation rule that must reject a malformed catalog before a session
can start.
"""

import pytest

from triage_rulesets.catalog import QuestionCatalog, load_catalog, load_yaml
from triage_rulesets.constants import PACKAGED_CATALOG_PATH
from triage_rulesets.errors import CatalogValidationError, UnknownQuestion
from triage_rulesets.models.outcome import AdvanceOutcome, CandidateOutcome
from triage_rulesets.models.schema import CombinedTally, TallyConfig

from helpers.catalogs import RECOMMENDATIONS, adv, build, cand, q, skipping_catalog


# =====================================================================
# Packaged catalog
# =====================================================================

def test_packaged_catalog_shape(catalog):
    assert catalog.size() == 7
    assert catalog.qids == ["Q1", "Q2", "Q3", "Q4", "Q5", "Q6", "Q7"]
    assert catalog.entry_question() == "Q1"
    assert catalog.last_question() == "Q7"
    assert catalog.default_recommendation == "consulta"
    assert {r.id for r in catalog.recommendations} == {
        "ferritina", "vitamina_d", "ambas", "consulta",
    }


def test_packaged_catalog_prompts_non_empty(catalog):
    for question in catalog.questions:
        assert question.question.strip(), f"{question.qid} has an empty prompt"


def test_packaged_catalog_outcomes(catalog):
    assert catalog.lookup("Q1").on_yes == AdvanceOutcome(qid="Q2")
    assert catalog.lookup("Q2").on_yes == CandidateOutcome(recommendation="ferritina")
    assert catalog.lookup("Q4").on_yes == CandidateOutcome(recommendation="vitamina_d")
    assert catalog.lookup("Q7").on_no == CandidateOutcome(recommendation="ferritina")
    assert catalog.lookup("Q2").candidate_recommendations == {"ferritina"}
    assert catalog.lookup("Q1").candidate_recommendations == set()


def test_packaged_catalog_tally(catalog):
    assert catalog.tally.thresholds == {"ferritina": 2, "vitamina_d": 2}
    assert catalog.tally.combined.recommendation == "ambas"
    assert catalog.lookup("Q7").tally.answer is False


# =====================================================================
# Lookups
# =====================================================================

def test_lookup_unknown_question(catalog):
    with pytest.raises(UnknownQuestion) as exc_info:
        catalog.lookup("Q99")
    assert exc_info.value.qid == "Q99"
    assert "Q99" in str(exc_info.value)
    # Still a KeyError for callers that only know the builtin
    assert isinstance(exc_info.value, KeyError)


def test_ordinal_and_successor(catalog):
    assert catalog.ordinal("Q1") == 0
    assert catalog.ordinal("Q7") == 6
    assert catalog.successor("Q3") == "Q4"
    assert catalog.successor("Q7") is None
    with pytest.raises(UnknownQuestion):
        catalog.ordinal("nope")


def test_contains(catalog):
    assert "Q4" in catalog
    assert "Q8" not in catalog


def test_recommendation_lookup(catalog):
    assert catalog.recommendation("ferritina").label == "Ferritina"
    assert catalog.has_recommendation("ambas")
    assert not catalog.has_recommendation("iron")
    with pytest.raises(KeyError):
        catalog.recommendation("iron")


# =====================================================================
# Loading
# =====================================================================

def test_load_catalog_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_catalog(tmp_path / "missing.yaml")


def test_load_catalog_from_custom_path(tmp_path):
    path = tmp_path / "mini.yaml"
    path.write_text(
        "version: '2'\n"
        "default_recommendation: consulta\n"
        "recommendations:\n"
        "  - {id: consulta, label: Consulta}\n"
        "  - {id: ferritina, label: Ferritina}\n"
        "questions:\n"
        "  - qid: A\n"
        "    question: First?\n"
        "    on_yes: {outcome: candidate, recommendation: ferritina}\n"
        "    on_no: {outcome: advance, qid: B}\n"
        "  - qid: B\n"
        "    question: Second?\n"
        "    on_yes: {outcome: advance, qid: B}\n"
        "    on_no: {outcome: advance, qid: B}\n",
        encoding="utf-8",
    )
    catalog = load_catalog(path)
    assert catalog.version == "2"
    assert catalog.qids == ["A", "B"]
    assert catalog.tally is None


def test_from_dict_rejects_non_mapping():
    with pytest.raises(CatalogValidationError, match="mapping"):
        QuestionCatalog.from_dict(["Q1"])


def test_from_dict_requires_default():
    raw = load_yaml(PACKAGED_CATALOG_PATH)
    del raw["default_recommendation"]
    with pytest.raises(CatalogValidationError, match="default_recommendation"):
        QuestionCatalog.from_dict(raw)


def test_from_dict_wraps_schema_errors():
    raw = load_yaml(PACKAGED_CATALOG_PATH)
    raw["questions"][0]["question"] = ""
    with pytest.raises(CatalogValidationError, match="schema error"):
        QuestionCatalog.from_dict(raw)


def test_from_dict_rejects_unknown_outcome_kind():
    raw = load_yaml(PACKAGED_CATALOG_PATH)
    raw["questions"][0]["on_yes"] = {"outcome": "jump", "qid": "Q3"}
    with pytest.raises(CatalogValidationError, match="schema error"):
        QuestionCatalog.from_dict(raw)


def test_cta_url_env_override(monkeypatch):
    monkeypatch.setenv("TRIAGE_CTA_URL_FERRITINA", "https://lab.example.org/ferritina")
    catalog = QuestionCatalog.from_dict(load_yaml(PACKAGED_CATALOG_PATH))
    assert catalog.recommendation("ferritina").cta_url == "https://lab.example.org/ferritina"
    # Others keep their packaged links
    assert catalog.recommendation("vitamina_d").cta_url == "/agendar?prueba=vitamina-d"


# =====================================================================
# Validation
# =====================================================================

def test_in_code_catalog_is_valid():
    catalog = skipping_catalog()
    assert catalog.size() == 5
    assert catalog.last_question() == "Q5"


def test_empty_catalog_rejected():
    with pytest.raises(CatalogValidationError, match="no questions"):
        build([])


def test_dangling_advance_rejected():
    with pytest.raises(CatalogValidationError, match="unknown question 'Q9'"):
        build([
            q("Q1", adv("Q9"), adv("Q2")),
            q("Q2", adv("Q2"), adv("Q2")),
        ])


def test_undeclared_candidate_rejected():
    with pytest.raises(CatalogValidationError, match="undeclared recommendation 'iron'"):
        build([
            q("Q1", cand("iron"), adv("Q2")),
            q("Q2", adv("Q2"), adv("Q2")),
        ])


def test_undeclared_tally_recommendation_rejected():
    with pytest.raises(CatalogValidationError, match="tally names undeclared"):
        build([
            q("Q1", adv("Q2"), adv("Q2"), tally=("iron", True)),
            q("Q2", adv("Q2"), adv("Q2")),
        ])


def test_duplicate_question_ids_rejected():
    with pytest.raises(CatalogValidationError, match="duplicate question ids"):
        build([
            q("Q1", adv("Q2"), adv("Q2")),
            q("Q1", adv("Q2"), adv("Q2")),
            q("Q2", adv("Q2"), adv("Q2")),
        ])


def test_duplicate_recommendation_ids_rejected():
    with pytest.raises(CatalogValidationError, match="duplicate recommendation ids"):
        build(
            [q("Q1", adv("Q1"), adv("Q1"))],
            recommendations=RECOMMENDATIONS + [RECOMMENDATIONS[0]],
        )


def test_undeclared_default_rejected():
    with pytest.raises(CatalogValidationError, match="default recommendation"):
        build([q("Q1", adv("Q1"), adv("Q1"))], default="nothing")


def test_missing_entry_rejected():
    with pytest.raises(CatalogValidationError, match="entry question"):
        build([q("Q1", adv("Q1"), adv("Q1"))], entry="Q0")


def test_self_advance_only_allowed_on_terminal():
    with pytest.raises(CatalogValidationError, match="advances to itself"):
        build([
            q("Q1", adv("Q1"), adv("Q2")),
            q("Q2", adv("Q2"), adv("Q2")),
        ])


def test_unreachable_question_rejected():
    with pytest.raises(CatalogValidationError, match="unreachable questions: \\['Q2'\\]"):
        build([
            q("Q1", adv("Q3"), adv("Q3")),
            q("Q2", adv("Q3"), adv("Q3")),
            q("Q3", adv("Q3"), adv("Q3")),
        ])


def test_routing_cycle_rejected():
    with pytest.raises(CatalogValidationError, match="routing cycle"):
        build([
            q("Q1", adv("Q2"), adv("Q2")),
            q("Q2", adv("Q1"), adv("Q3")),
            q("Q3", adv("Q3"), adv("Q3")),
        ])


def test_candidate_fallback_counts_for_reachability():
    # Q2 is only reachable through Q1's candidate fallback
    catalog = build([
        q("Q1", cand("ferritina"), cand("vitamina_d")),
        q("Q2", adv("Q2"), adv("Q2")),
    ])
    assert catalog.successor("Q1") == "Q2"


def test_tally_threshold_must_be_positive():
    with pytest.raises(CatalogValidationError, match="must be >= 1"):
        build(
            [q("Q1", adv("Q1"), adv("Q1"))],
            tally=TallyConfig(thresholds={"ferritina": 0}),
        )


def test_tally_combined_needs_thresholds():
    with pytest.raises(CatalogValidationError, match="kinds without thresholds"):
        build(
            [q("Q1", adv("Q1"), adv("Q1"))],
            tally=TallyConfig(
                thresholds={"ferritina": 1},
                combined=CombinedTally(when=["ferritina", "vitamina_d"], recommendation="ambas"),
            ),
        )


def test_validation_collects_every_problem():
    with pytest.raises(CatalogValidationError) as exc_info:
        build(
            [
                q("Q1", adv("Q9"), cand("iron")),
                q("Q2", adv("Q2"), adv("Q2")),
            ],
            default="nothing",
        )
    assert len(exc_info.value.problems) == 3

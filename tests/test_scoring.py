"""Weighted-tally scoring and strategy preset tests."""

import logging

import pytest

from triage_rulesets.models.strategy import STRATEGIES, StrategyName, get_strategy
from triage_rulesets.scoring import tally_recommendation, tally_scores

from helpers.catalogs import adv, build, q, tally_config


def _answers(seq: str) -> dict[str, bool]:
    return {f"Q{i}": c == "y" for i, c in enumerate(seq, start=1)}


# =====================================================================
# Scores
# =====================================================================

def test_scores_all_yes(catalog):
    assert tally_scores(catalog, _answers("yyyyyyy")) == {"ferritina": 3, "vitamina_d": 3}


def test_scores_all_no(catalog):
    # Only Q7 scores on "no"
    assert tally_scores(catalog, _answers("nnnnnnn")) == {"ferritina": 1, "vitamina_d": 0}


def test_scores_partial_answers(catalog):
    assert tally_scores(catalog, {"Q1": True, "Q4": True}) == {"ferritina": 1, "vitamina_d": 1}


# =====================================================================
# Recommendation
# =====================================================================

@pytest.mark.parametrize(
    "seq, expected",
    [
        ("yyyyyyy", "ambas"),
        ("nnnnnnn", "consulta"),
        ("yynnnny", "ferritina"),
        ("nnnyyny", "vitamina_d"),
        ("ynnynnn", "ferritina"),
        ("ynnyynn", "ambas"),
    ],
)
def test_tally_recommendation(catalog, seq, expected):
    assert tally_recommendation(catalog, _answers(seq)) == expected


def test_threshold_order_breaks_ties_without_combined_rule():
    catalog = build(
        [
            q("Q1", adv("Q2"), adv("Q2"), tally=("vitamina_d", True)),
            q("Q2", adv("Q2"), adv("Q2"), tally=("ferritina", True)),
        ],
        tally=tally_config().model_copy(
            update={"thresholds": {"vitamina_d": 1, "ferritina": 1}, "combined": None},
        ),
    )
    assert tally_recommendation(catalog, {"Q1": True, "Q2": True}) == "vitamina_d"


def test_catalog_without_tally_section_reports_default(caplog):
    catalog = build([q("Q1", adv("Q1"), adv("Q1"))])
    with caplog.at_level(logging.WARNING, logger="triage_rulesets.scoring"):
        assert tally_recommendation(catalog, {"Q1": True}) == "consulta"
    assert "no tally section" in caplog.text


# =====================================================================
# Strategy presets
# =====================================================================

def test_presets_cover_every_name():
    assert set(STRATEGIES) == set(StrategyName)
    for name, strategy in STRATEGIES.items():
        assert strategy.name == name


def test_preset_knobs():
    assert STRATEGIES[StrategyName.SEQUENTIAL_MEMORY].candidate_ends_session is False
    assert STRATEGIES[StrategyName.SEQUENTIAL_MEMORY].tie_break == "first"
    assert STRATEGIES[StrategyName.GRAPH].candidate_ends_session is True
    assert STRATEGIES[StrategyName.WEIGHTED_TALLY].scoring == "tally"


def test_get_strategy():
    assert get_strategy("graph") is STRATEGIES[StrategyName.GRAPH]
    with pytest.raises(ValueError):
        get_strategy("coin_flip")

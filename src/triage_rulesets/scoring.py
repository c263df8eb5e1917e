"""Weighted-tally scoring used by the ``weighted_tally`` strategy.

Each question may carry a tally point (``QuestionDefinition.tally``).  When
the session ends, points are summed per recommendation and compared with
the catalog's thresholds:

  1. if a ``combined`` rule exists and every kind it names qualifies,
     the combined recommendation wins
  2. otherwise the first qualifying kind in threshold order wins
  3. otherwise the catalog default is reported
"""

from __future__ import annotations

import logging

from triage_rulesets.catalog import QuestionCatalog

logger = logging.getLogger(__name__)


def tally_scores(catalog: QuestionCatalog, answers: dict[str, bool]) -> dict[str, int]:
    """Sum tally points per recommendation id for the given answers.

    Every kind that has a threshold appears in the result, even with 0.
    """
    scores: dict[str, int] = {}
    if catalog.tally is not None:
        scores = {rec_id: 0 for rec_id in catalog.tally.thresholds}
    for q in catalog.questions:
        if q.tally is None or q.qid not in answers:
            continue
        if answers[q.qid] == q.tally.answer:
            scores[q.tally.recommendation] = scores.get(q.tally.recommendation, 0) + 1
    return scores


def tally_recommendation(catalog: QuestionCatalog, answers: dict[str, bool]) -> str:
    """Derive the recommendation id from tally points and thresholds."""
    tally = catalog.tally
    if tally is None:
        logger.warning("weighted_tally used with a catalog that has no tally section")
        return catalog.default_recommendation

    scores = tally_scores(catalog, answers)
    qualifying = [
        rec_id for rec_id, threshold in tally.thresholds.items()
        if scores.get(rec_id, 0) >= threshold
    ]
    logger.debug("tally scores=%s qualifying=%s", scores, qualifying)

    if tally.combined is not None and all(k in qualifying for k in tally.combined.when):
        return tally.combined.recommendation
    if qualifying:
        return qualifying[0]
    return catalog.default_recommendation

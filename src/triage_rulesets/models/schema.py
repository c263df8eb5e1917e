"""Pydantic models for catalog reference data.

These models mirror the top-level sections of ``rules/catalog.yaml``:

  - Recommendation: one member of the closed set of triage outcomes, with
    its display label and optional call-to-action URL
  - TallyConfig: thresholds for the weighted-tally strategy
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Recommendation(BaseModel):
    """A triage recommendation the wizard can report.

    ``cta_url`` is the external call-to-action link the presentation layer
    shows next to the result (e.g. a booking page for the lab test).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    description: str = ""
    cta_url: Optional[str] = None


class CombinedTally(BaseModel):
    """Emit ``recommendation`` when every kind in ``when`` reaches its threshold."""

    model_config = ConfigDict(frozen=True)

    when: List[str] = Field(min_length=1)
    recommendation: str


class TallyConfig(BaseModel):
    """Scoring rules for the weighted-tally strategy.

    ``thresholds`` maps a recommendation id to the minimum number of points
    it needs.  Threshold order is the priority order when more than one kind
    qualifies and no ``combined`` rule matches.
    """

    model_config = ConfigDict(frozen=True)

    thresholds: Dict[str, int]
    combined: Optional[CombinedTally] = None

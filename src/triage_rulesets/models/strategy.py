"""Decision strategies — the engine's decision rule expressed as data.

The wizard has shipped in three mutually inconsistent shapes.  Rather than
keeping three engines, a single ``DecisionEngine`` is parameterised by a
``DecisionStrategy``:

  sequential_memory (default)
      Every question slot is visited.  The first candidate answer is
      remembered; the session only ends at the terminal question.
      A candidate before the terminal question advances by catalog order.

  graph
      Plain directed-graph traversal: a candidate ends the session at once
      with that recommendation.

  weighted_tally
      Outcomes are ignored for routing; every question is asked in catalog
      order and the recommendation is computed from per-question points and
      thresholds once the terminal question is answered.

Callers select the strategy explicitly; the engine never mixes them.
"""

import enum
from typing import Literal

from pydantic import BaseModel, ConfigDict


class StrategyName(str, enum.Enum):
    """Names of the built-in strategy presets."""

    SEQUENTIAL_MEMORY = "sequential_memory"
    GRAPH = "graph"
    WEIGHTED_TALLY = "weighted_tally"


class DecisionStrategy(BaseModel):
    """Decision rule knobs consumed by the engine.

    - candidate_ends_session: a candidate outcome terminates immediately
    - tie_break: which candidate wins when several fire ("first" keeps the
      earliest, "last" lets later candidates overwrite)
    - scoring: "routing" derives the result from outcomes, "tally" from
      the catalog's tally section
    """

    model_config = ConfigDict(frozen=True)

    name: StrategyName
    description: str
    candidate_ends_session: bool = False
    tie_break: Literal["first", "last"] = "first"
    scoring: Literal["routing", "tally"] = "routing"


STRATEGIES: dict[StrategyName, DecisionStrategy] = {
    StrategyName.SEQUENTIAL_MEMORY: DecisionStrategy(
        name=StrategyName.SEQUENTIAL_MEMORY,
        description="Visit every question, remember the first candidate",
    ),
    StrategyName.GRAPH: DecisionStrategy(
        name=StrategyName.GRAPH,
        description="Follow graph edges, stop at the first candidate",
        candidate_ends_session=True,
    ),
    StrategyName.WEIGHTED_TALLY: DecisionStrategy(
        name=StrategyName.WEIGHTED_TALLY,
        description="Ask every question, score answers against thresholds",
        scoring="tally",
    ),
}


def get_strategy(name: StrategyName | str) -> DecisionStrategy:
    """Return the preset for ``name``.

    Raises:
        ValueError: if ``name`` is not a known strategy.
    """
    return STRATEGIES[StrategyName(name)]

"""QuestionCatalog — the fixed, ordered set of yes/no questions.

The catalog is built once (normally from ``rules/catalog.yaml``), validated
as a whole, and never mutated afterwards.  It is the single source of truth
the engine consults for prompts, routing and recommendations.

Usage::

    catalog = load_catalog()                 # packaged rules/catalog.yaml
    q = catalog.lookup("Q2")
    first = catalog.entry_question()
    last = catalog.last_question()

Validation runs at construction and rejects, before any session exists:
  - duplicate question or recommendation ids
  - advance outcomes that point at unknown questions (dangling edges)
  - candidates / tally points naming undeclared recommendations
  - questions that cannot be reached from the entry question
  - routing cycles (a session must end within ``size()`` answers)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml
from pydantic import ValidationError

from triage_rulesets.constants import CTA_URL_ENV_PREFIX, DEFAULT_CATALOG_PATH
from triage_rulesets.errors import CatalogValidationError, UnknownQuestion
from triage_rulesets.models.outcome import AdvanceOutcome, CandidateOutcome
from triage_rulesets.models.question import QuestionDefinition
from triage_rulesets.models.schema import Recommendation, TallyConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# YAML helpers
# ---------------------------------------------------------------------------

def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


# ---------------------------------------------------------------------------
# QuestionCatalog
# ---------------------------------------------------------------------------

class QuestionCatalog:
    """Immutable, validated question graph plus its recommendation set.

    Args:
        questions: question definitions in catalog order; the last one is
            the terminal question
        recommendations: the closed set of recommendations, including the
            default
        default_recommendation: id reported when no candidate fired
        entry: id of the first question (defaults to the first in order)
        tally: scoring rules for the weighted-tally strategy
        version: free-form catalog version string
    """

    def __init__(
        self,
        questions: Iterable[QuestionDefinition],
        recommendations: Iterable[Recommendation],
        *,
        default_recommendation: str,
        entry: str | None = None,
        tally: TallyConfig | None = None,
        version: str = "1",
    ) -> None:
        self._questions: tuple[QuestionDefinition, ...] = tuple(questions)
        self._recommendations: tuple[Recommendation, ...] = tuple(recommendations)
        self._by_qid = {q.qid: q for q in self._questions}
        self._ordinal = {q.qid: i for i, q in enumerate(self._questions)}
        self._recs_by_id = {r.id: r for r in self._recommendations}
        self._default = default_recommendation
        self._entry = entry if entry is not None else (
            self._questions[0].qid if self._questions else ""
        )
        self._tally = tally
        self.version = version

        self._validate()

    # ------------------------------------------------------------------
    # Construction from plain data
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "QuestionCatalog":
        """Build a catalog from the parsed YAML structure.

        ``TRIAGE_CTA_URL_<ID>`` environment variables override the
        ``cta_url`` of the matching recommendation.

        Raises:
            CatalogValidationError: if the data does not describe a valid
                catalog (schema errors included).
        """
        if not isinstance(raw, dict):
            raise CatalogValidationError(["catalog root must be a mapping"])
        try:
            questions = [QuestionDefinition(**q) for q in raw.get("questions") or []]
            recommendations = [
                _with_cta_override(Recommendation(**r))
                for r in raw.get("recommendations") or []
            ]
            tally = TallyConfig(**raw["tally"]) if raw.get("tally") else None
        except (TypeError, ValidationError) as exc:
            raise CatalogValidationError([f"schema error: {exc}"]) from exc

        if "default_recommendation" not in raw:
            raise CatalogValidationError(["missing default_recommendation"])

        return cls(
            questions,
            recommendations,
            default_recommendation=raw["default_recommendation"],
            entry=raw.get("entry"),
            tally=tally,
            version=str(raw.get("version", "1")),
        )

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def lookup(self, qid: str) -> QuestionDefinition:
        """Return the definition for ``qid``.

        Raises:
            UnknownQuestion: if ``qid`` is not in the catalog.
        """
        try:
            return self._by_qid[qid]
        except KeyError:
            raise UnknownQuestion(qid) from None

    def __contains__(self, qid: object) -> bool:
        return qid in self._by_qid

    def entry_question(self) -> str:
        """Id of the question a fresh session starts at."""
        return self._entry

    def last_question(self) -> str:
        """Id of the terminal question (highest ordinal)."""
        return self._questions[-1].qid

    def size(self) -> int:
        """Number of questions (N)."""
        return len(self._questions)

    def ordinal(self, qid: str) -> int:
        """0-based position of ``qid`` in catalog order."""
        try:
            return self._ordinal[qid]
        except KeyError:
            raise UnknownQuestion(qid) from None

    def successor(self, qid: str) -> Optional[str]:
        """The next question in catalog order, or None for the terminal one."""
        idx = self.ordinal(qid) + 1
        if idx >= len(self._questions):
            return None
        return self._questions[idx].qid

    @property
    def questions(self) -> tuple[QuestionDefinition, ...]:
        return self._questions

    @property
    def qids(self) -> list[str]:
        return [q.qid for q in self._questions]

    @property
    def recommendations(self) -> tuple[Recommendation, ...]:
        return self._recommendations

    def recommendation(self, rec_id: str) -> Recommendation:
        """Look up a recommendation by id.

        Raises:
            KeyError: if the id is not declared.
        """
        return self._recs_by_id[rec_id]

    def has_recommendation(self, rec_id: str) -> bool:
        return rec_id in self._recs_by_id

    @property
    def default_recommendation(self) -> str:
        return self._default

    @property
    def tally(self) -> TallyConfig | None:
        return self._tally

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate(self) -> None:
        problems: list[str] = []

        if not self._questions:
            raise CatalogValidationError(["catalog has no questions"])

        if len(self._by_qid) != len(self._questions):
            problems.append(f"duplicate question ids: {_duplicates(q.qid for q in self._questions)}")
        if len(self._recs_by_id) != len(self._recommendations):
            problems.append(
                f"duplicate recommendation ids: {_duplicates(r.id for r in self._recommendations)}"
            )
        if self._default not in self._recs_by_id:
            problems.append(f"default recommendation '{self._default}' is not declared")
        if self._entry not in self._by_qid:
            problems.append(f"entry question '{self._entry}' is not in the catalog")

        terminal = self.last_question()
        for q in self._questions:
            for label, outcome in (("on_yes", q.on_yes), ("on_no", q.on_no)):
                if isinstance(outcome, AdvanceOutcome):
                    if outcome.qid not in self._by_qid:
                        problems.append(f"{q.qid}.{label} advances to unknown question '{outcome.qid}'")
                    elif outcome.qid == q.qid and q.qid != terminal:
                        problems.append(f"{q.qid}.{label} advances to itself")
                elif outcome.recommendation not in self._recs_by_id:
                    problems.append(
                        f"{q.qid}.{label} names undeclared recommendation '{outcome.recommendation}'"
                    )
            if q.tally is not None and q.tally.recommendation not in self._recs_by_id:
                problems.append(
                    f"{q.qid}.tally names undeclared recommendation '{q.tally.recommendation}'"
                )

        problems.extend(self._validate_tally())

        # Graph checks only make sense once every edge points somewhere real
        if not problems:
            problems.extend(self._validate_graph())

        if problems:
            raise CatalogValidationError(problems)

        logger.debug(
            "QuestionCatalog v%s validated: %d questions, %d recommendations",
            self.version, len(self._questions), len(self._recommendations),
        )

    def _validate_tally(self) -> list[str]:
        if self._tally is None:
            return []
        problems = []
        for rec_id, threshold in self._tally.thresholds.items():
            if rec_id not in self._recs_by_id:
                problems.append(f"tally threshold names undeclared recommendation '{rec_id}'")
            if threshold < 1:
                problems.append(f"tally threshold for '{rec_id}' must be >= 1")
        combined = self._tally.combined
        if combined is not None:
            if combined.recommendation not in self._recs_by_id:
                problems.append(
                    f"tally combined names undeclared recommendation '{combined.recommendation}'"
                )
            missing = [k for k in combined.when if k not in self._tally.thresholds]
            if missing:
                problems.append(f"tally combined refers to kinds without thresholds: {missing}")
        return problems

    def _next_qids(self, q: QuestionDefinition) -> set[str]:
        """Questions a session can move to from ``q`` (terminal has none)."""
        if q.qid == self.last_question():
            return set()
        targets = set()
        for outcome in q.outcomes:
            if isinstance(outcome, AdvanceOutcome):
                targets.add(outcome.qid)
            elif isinstance(outcome, CandidateOutcome):
                targets.add(self.successor(q.qid))
        return targets

    def _validate_graph(self) -> list[str]:
        problems = []

        # Reachability from the entry question
        seen = {self._entry}
        frontier = [self._entry]
        while frontier:
            qid = frontier.pop()
            for nxt in self._next_qids(self._by_qid[qid]):
                if nxt not in seen:
                    seen.add(nxt)
                    frontier.append(nxt)
        unreachable = [qid for qid in self.qids if qid not in seen]
        if unreachable:
            problems.append(f"unreachable questions: {unreachable}")

        # Cycle detection (iterative DFS, white/grey/black colouring)
        colour = {qid: 0 for qid in self._by_qid}
        for root in self.qids:
            if colour[root]:
                continue
            stack = [(root, iter(sorted(self._next_qids(self._by_qid[root]))))]
            colour[root] = 1
            while stack:
                qid, children = stack[-1]
                child = next(children, None)
                if child is None:
                    colour[qid] = 2
                    stack.pop()
                elif colour[child] == 1:
                    problems.append(f"routing cycle through '{child}'")
                    return problems
                elif colour[child] == 0:
                    colour[child] = 1
                    stack.append((child, iter(sorted(self._next_qids(self._by_qid[child])))))
        return problems


def _duplicates(ids: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    dupes: list[str] = []
    for i in ids:
        if i in seen and i not in dupes:
            dupes.append(i)
        seen.add(i)
    return dupes


def _with_cta_override(rec: Recommendation) -> Recommendation:
    env_key = CTA_URL_ENV_PREFIX + rec.id.upper()
    override = os.getenv(env_key)
    if override:
        logger.info("cta_url for '%s' overridden by %s", rec.id, env_key)
        return rec.model_copy(update={"cta_url": override})
    return rec


def load_catalog(path: str | Path | None = None) -> QuestionCatalog:
    """Load and validate a catalog YAML file.

    Args:
        path: YAML file to read; defaults to ``TRIAGE_CATALOG_PATH`` or the
            packaged ``rules/catalog.yaml``.

    Raises:
        FileNotFoundError: if the file does not exist.
        CatalogValidationError: if the catalog is malformed.
    """
    path = Path(path) if path is not None else DEFAULT_CATALOG_PATH
    catalog = QuestionCatalog.from_dict(load_yaml(path))
    logger.info(
        "QuestionCatalog loaded from %s: %d questions, %d recommendations",
        path, catalog.size(), len(catalog.recommendations),
    )
    return catalog

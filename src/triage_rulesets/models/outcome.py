"""Outcome models for the yes/no question graph.

An outcome defines what happens after a question is answered:
  - AdvanceOutcome: continue the session at a specific next question
  - CandidateOutcome: qualify the session for a recommendation

A candidate does not end the session on its own under the default
sequential-with-memory strategy; see ``models.strategy`` for the rules that
decide termination.

The discriminated ``Outcome`` union uses the ``outcome`` field as its
discriminator so Pydantic can deserialise YAML dicts directly into the
correct type.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class AdvanceOutcome(BaseModel):
    """Continue the session at the question named by ``qid``."""

    model_config = ConfigDict(frozen=True)

    outcome: Literal["advance"] = "advance"
    qid: str


class CandidateOutcome(BaseModel):
    """Qualify the session for ``recommendation`` (a recommendation id)."""

    model_config = ConfigDict(frozen=True)

    outcome: Literal["candidate"] = "candidate"
    recommendation: str


# Discriminated union: Pydantic picks the right type based on the "outcome" field.
Outcome = Annotated[Union[AdvanceOutcome, CandidateOutcome], Field(discriminator="outcome")]

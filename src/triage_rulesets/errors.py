"""Exception hierarchy for the triage SDK.

  TriageError
    ├── UnknownQuestion (KeyError)          engine state named a qid the
    │                                       catalog does not contain; this is
    │                                       an invariant violation, not a
    │                                       user error
    ├── CatalogValidationError (ValueError) malformed catalog at load time
    ├── InvalidSessionState (ValueError)    caller-supplied state does not
    │                                       fit the catalog
    └── InvalidTransition (ValueError)      answer submitted after the
                                            session finished (strict engines
                                            only; the default is to ignore)
"""


class TriageError(Exception):
    """Base class for all triage SDK errors."""


class UnknownQuestion(TriageError, KeyError):
    """Lookup of a question id that is not in the catalog."""

    def __init__(self, qid: str) -> None:
        self.qid = qid
        super().__init__(f"Unknown question: qid={qid!r}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]


class CatalogValidationError(TriageError, ValueError):
    """The catalog definition is inconsistent (dangling or unreachable refs)."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__("Invalid catalog: " + "; ".join(problems))


class InvalidSessionState(TriageError, ValueError):
    """A session state does not belong to the loaded catalog."""


class InvalidTransition(TriageError, ValueError):
    """An answer was submitted to a session that already has a final result."""

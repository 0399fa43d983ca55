"""Domain Types — submission, identity projection, and the tagged insert outcome.

Invariants:
    - EntrantSubmission is only built by validate_submission (email/name already checked)
    - RegisterResult is exhaustive: Registered | DuplicateEmail | StorageUnavailable
    - Callers branch on the result type, never on error message text

Design Decisions:
    - Frozen dataclasses over pydantic here: core stays free of IO/serialization concerns
    - Tagged result over exceptions at the gateway boundary: duplicate email is an
      expected outcome, not a failure
"""

from dataclasses import dataclass
from datetime import datetime
from typing import NewType, Union


EntrantId = NewType("EntrantId", int)


@dataclass(frozen=True)
class EntrantSubmission:
    """A validated signup, ready to insert."""
    email: str
    name: str
    interest: str | None = None
    message: str | None = None


@dataclass(frozen=True)
class EntrantRecord:
    """Identity projection returned by a successful insert."""
    id: EntrantId
    email: str
    name: str
    created_at: datetime


# ─── Insert outcomes ─────────────────────────────────────────────

@dataclass(frozen=True)
class Registered:
    entrant: EntrantRecord


@dataclass(frozen=True)
class DuplicateEmail:
    email: str


@dataclass(frozen=True)
class StorageUnavailable:
    reason: str


RegisterResult = Union[Registered, DuplicateEmail, StorageUnavailable]

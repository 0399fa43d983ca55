"""Boundary Protocols — contract between the registration handler and storage.

Invariants:
    - Services depend on EntrantRepository, never on the SQLAlchemy gateway directly
    - register_entrant never raises for duplicates or storage failures;
      it returns a RegisterResult

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no inheritance
"""

from typing import Protocol

from waitlist_api.core.domain_types import EntrantSubmission, RegisterResult


class EntrantRepository(Protocol):
    """Contract for waiting-list persistence — implemented by infrastructure."""
    async def ensure_schema(self) -> bool: ...
    async def schema_ready(self) -> bool: ...
    async def register_entrant(
        self, entry: EntrantSubmission,
    ) -> RegisterResult: ...

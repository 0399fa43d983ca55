"""Registration Handler — decode, validate, persist, and map the outcome.

Invariants:
    - Three terminal outcomes: WaitlistJoined, ConflictError, StorageError
      (plus ValidationError before any storage call)
    - No retries: every failure is reported on the first attempt
    - Any body json cannot decode (syntax, NaN/Infinity, nesting too deep)
      is "Invalid request"
    - Storage details travel in StorageError.context; the global handler logs
      them once and never puts them in the response body

Design Decisions:
    - Takes raw bytes instead of a pydantic body: malformed JSON must map to
      "Invalid request", not FastAPI's 422 shape
    - match on RegisterResult: the gateway's tagged result, no string matching
"""

import json

from waitlist_api.core.domain_types import (
    DuplicateEmail, RegisterResult, Registered, StorageUnavailable,
)
from waitlist_api.core.errors import ConflictError, StorageError, ValidationError
from waitlist_api.core.repository_protocols import EntrantRepository
from waitlist_api.core.validate_submission import INVALID_REQUEST, validate_submission
from waitlist_api.schemas.waitlist import WaitlistJoined


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} is not valid JSON")


def decode_body(raw_body: bytes) -> object:
    """Parse the request body as strict JSON. Anything unparseable → ValidationError."""
    try:
        return json.loads(raw_body, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        raise ValidationError(INVALID_REQUEST, field="body")


def map_outcome(result: RegisterResult) -> WaitlistJoined:
    """Translate the gateway's tagged result into the response or a typed error."""
    match result:
        case Registered():
            return WaitlistJoined()
        case DuplicateEmail():
            raise ConflictError()
        case StorageUnavailable(reason=reason):
            raise StorageError("register", reason)
    raise TypeError(f"Unknown register result: {result!r}")


async def register_submission(
    raw_body: bytes, repository: EntrantRepository,
) -> WaitlistJoined:
    """Run the full registration path for one request body."""
    submission = validate_submission(decode_body(raw_body))
    try:
        result = await repository.register_entrant(submission)
    except Exception as e:
        raise StorageError("register", f"{type(e).__name__}: {e}") from e
    return map_outcome(result)

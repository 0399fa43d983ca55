"""Waitlist Route — POST /api/waitlist.

Invariants:
    - Body is read raw and handed to the registration service unparsed
    - Errors propagate as WaitlistError; the global handler renders them
"""

from fastapi import APIRouter, Depends, Request

from waitlist_api.infrastructure.database import DatabaseSessionManager, get_db_manager
from waitlist_api.infrastructure.storage_gateway import EntrantGateway
from waitlist_api.schemas.waitlist import ErrorBody, WaitlistJoined
from waitlist_api.services.registration import register_submission

router = APIRouter(prefix="/api", tags=["waitlist"])


def get_entrant_gateway(
    manager: DatabaseSessionManager = Depends(get_db_manager),
) -> EntrantGateway:
    return EntrantGateway(manager)


@router.post(
    "/waitlist",
    response_model=WaitlistJoined,
    responses={
        400: {"model": ErrorBody},
        409: {"model": ErrorBody},
        500: {"model": ErrorBody},
    },
)
async def join_waitlist(
    request: Request, gateway: EntrantGateway = Depends(get_entrant_gateway),
):
    """Add an entrant to the waiting list."""
    return await register_submission(await request.body(), gateway)

"""Waitlist Schemas — Pydantic models for the public response contract.

Invariants:
    - WaitlistJoined is the only 200 body: success flag + fixed message, no entrant data
    - ErrorBody mirrors WaitlistError.to_response()
"""

from pydantic import BaseModel

JOINED_MESSAGE = "Joined waitlist successfully"


class WaitlistJoined(BaseModel):
    """Successful signup."""
    success: bool = True
    message: str = JOINED_MESSAGE


class ErrorBody(BaseModel):
    """Error envelope for 400/409/500 responses (OpenAPI documentation)."""
    error: str

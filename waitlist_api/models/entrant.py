"""Entrant ORM — one row per waitlist registration.

Invariants:
    - email is unique (uq_waiting_list_email) — the deduplication key
    - id and created_at are assigned by the database, never by the application
    - Rows are create-only: nothing in this service updates or deletes them

Design Decisions:
    - Integer autoincrement id over UUID: matches the SERIAL column the landing
      page already ships with
    - server_default for created_at: the INSERT ... RETURNING path reads it back
      without a second query
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from waitlist_api.db.base import Base


class Entrant(Base):
    """A waitlist signup."""
    __tablename__ = "waiting_list"
    __table_args__ = (
        UniqueConstraint("email", name="uq_waiting_list_email"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    interest: Mapped[str | None] = mapped_column(String(100), nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )

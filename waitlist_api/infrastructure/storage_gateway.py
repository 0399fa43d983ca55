"""Storage Gateway — owns the waiting_list table: idempotent DDL and the single insert.

Invariants:
    - ensure_schema() never raises; failure is logged and reported as False
    - register_entrant() is one INSERT ... RETURNING statement: full row or nothing
    - Duplicate detection uses the driver's constraint code, not message text
    - Input is trusted: validation belongs to the registration handler

Design Decisions:
    - CREATE TABLE IF NOT EXISTS over metadata.create_all(checkfirst): the
      inspect-then-create pair races when several workers start at once
    - Tagged RegisterResult over raising: the handler branches on type
"""

import logging

from sqlalchemy import inspect, insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.schema import CreateTable

from waitlist_api.core.domain_types import (
    DuplicateEmail, EntrantId, EntrantRecord, EntrantSubmission,
    RegisterResult, Registered, StorageUnavailable,
)
from waitlist_api.core.errors import StorageError
from waitlist_api.infrastructure.database import DatabaseSessionManager
from waitlist_api.models.entrant import Entrant

logger = logging.getLogger(__name__)

PG_UNIQUE_VIOLATION = "23505"
SQLITE_UNIQUE_VIOLATION = "SQLITE_CONSTRAINT_UNIQUE"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the driver reports a uniqueness (not NOT NULL / FK) violation."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == PG_UNIQUE_VIOLATION
    return getattr(orig, "sqlite_errorname", None) == SQLITE_UNIQUE_VIOLATION


class EntrantGateway:
    """SQLAlchemy implementation of EntrantRepository."""

    def __init__(self, manager: DatabaseSessionManager):
        self._manager = manager

    async def ensure_schema(self) -> bool:
        """Create waiting_list if absent. Safe to call repeatedly and concurrently."""
        try:
            async with self._manager.engine.begin() as conn:
                await conn.execute(
                    CreateTable(Entrant.__table__, if_not_exists=True),
                )
        except Exception as e:
            # Logged only: startup proceeds without the store
            logger.error(
                f"Failed to ensure waiting list schema: {e}",
                exc_info=True, extra={"operation": "ensure_schema"},
            )
            return False
        logger.info("Waiting list schema ensured")
        return True

    async def schema_ready(self) -> bool:
        """True when waiting_list exists. Errors read as not ready, never raised."""
        try:
            async with self._manager.engine.connect() as conn:
                return await conn.run_sync(
                    lambda sync_conn: inspect(sync_conn).has_table(
                        Entrant.__tablename__,
                    ),
                )
        except Exception as e:
            logger.warning(
                f"Waiting list schema check failed: {e}",
                extra={"operation": "schema_ready"},
            )
            return False

    async def register_entrant(self, entry: EntrantSubmission) -> RegisterResult:
        stmt = (
            insert(Entrant)
            .values(
                email=entry.email,
                name=entry.name,
                interest=entry.interest,
                message=entry.message,
            )
            .returning(
                Entrant.id, Entrant.email, Entrant.name, Entrant.created_at,
            )
        )
        try:
            async with self._manager.session() as db:
                try:
                    row = (await db.execute(stmt)).one()
                    await db.commit()
                except IntegrityError as e:
                    if not is_unique_violation(e):
                        raise
                    await db.rollback()
                    logger.info(
                        "Duplicate waitlist email rejected",
                        extra={"error_code": "EMAIL_ALREADY_REGISTERED"},
                    )
                    return DuplicateEmail(email=entry.email)
        except StorageError as e:
            return StorageUnavailable(reason=e.context.debug_info or e.message)
        except OSError as e:
            # Connection refused/reset raised by the driver before SQLAlchemy wraps it
            logger.error(
                f"DB connection error: {e}", extra={"operation": "connect"},
            )
            return StorageUnavailable(reason=str(e))

        entrant = EntrantRecord(
            id=EntrantId(row.id),
            email=row.email,
            name=row.name,
            created_at=row.created_at,
        )
        logger.info("Entrant registered", extra={"entrant_id": entrant.id})
        return Registered(entrant=entrant)

"""Registration store.

Owns the registrations table. Uniqueness of the (eth_address, rgb_address)
pair is enforced by the database constraint; the store never checks for an
existing row before writing, it interprets the engine's constraint
violation instead.
"""

import asyncio
import logging
from contextlib import nullcontext
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from rgbreg.registry.contracts import RegistrationRecord
from rgbreg.registry.database import (
    create_engine,
    create_session_factory,
    is_memory_url,
    is_sqlite_url,
    normalize_database_url,
)
from rgbreg.registry.errors import RegistrationStoreError
from rgbreg.registry.models import Base, Registration, utcnow

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION_SQLSTATE = "23505"


class InsertOutcome(str, Enum):
    """Result kind of an insert."""

    CREATED = "created"
    CONFLICT = "conflict"
    STORE_FAILURE = "store_failure"


@dataclass(frozen=True)
class InsertResult:
    """Result of RegistrationStore.insert.

    Attributes:
        outcome: CREATED, CONFLICT or STORE_FAILURE
        id: Assigned id when CREATED
        created_at: Stored creation time when CREATED
        cause: Internal description of a STORE_FAILURE (never sent to clients)
    """

    outcome: InsertOutcome
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    cause: Optional[str] = None

    @classmethod
    def created(cls, record_id: int, created_at: datetime) -> "InsertResult":
        return cls(outcome=InsertOutcome.CREATED, id=record_id, created_at=created_at)

    @classmethod
    def conflict(cls) -> "InsertResult":
        return cls(outcome=InsertOutcome.CONFLICT)

    @classmethod
    def failure(cls, cause: str) -> "InsertResult":
        return cls(outcome=InsertOutcome.STORE_FAILURE, cause=cause)


def is_unique_violation(exc: IntegrityError) -> bool:
    """Check whether an IntegrityError comes from a unique constraint."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == UNIQUE_VIOLATION_SQLSTATE:
        return True
    if getattr(orig, "sqlite_errorname", None) == "SQLITE_CONSTRAINT_UNIQUE":
        return True
    return "UNIQUE constraint failed" in str(orig)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_record(row: Registration) -> RegistrationRecord:
    return RegistrationRecord(
        id=row.id,
        eth_address=row.eth_address,
        rgb_address=row.rgb_address,
        signature=row.signature,
        message=row.message,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class RegistrationStore:
    """Durable store of registrations.

    Create one instance per database at process start and share it between
    requests. Writes are serialized by an asyncio.Lock; reads run alongside
    them under the WAL journal, except on an in-memory database where all
    sessions share one connection and reads take the lock too.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = normalize_database_url(database_url)
        self._engine = create_engine(self.database_url, echo=echo)
        self._session_factory = create_session_factory(self._engine)
        self._lock = asyncio.Lock()
        self._shared_connection = is_memory_url(self.database_url)
        self._initialized = False
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def init(self) -> None:
        """Create the table, its unique constraint and indexes if absent."""
        async with self._lock:
            await self._ensure_schema()

    def _read_guard(self):
        return self._lock if self._shared_connection else nullcontext()

    async def _ensure_schema(self) -> None:
        if self._closed:
            raise RegistrationStoreError("Registration store is closed")
        if self._initialized:
            return
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self._initialized = True
        logger.info("Registration schema ready")

    async def insert(
        self,
        eth_address: str,
        rgb_address: str,
        signature: str,
        message: str,
    ) -> InsertResult:
        """Insert a registration in its own transaction.

        Returns:
            InsertResult with CREATED and the new id, CONFLICT when the pair
            is already registered, or STORE_FAILURE for any other error
        """
        now = utcnow()
        row = Registration(
            eth_address=eth_address,
            rgb_address=rgb_address,
            signature=signature,
            message=message,
            created_at=now,
            updated_at=now,
        )

        try:
            async with self._lock:
                await self._ensure_schema()
                async with self._session_factory() as session:
                    async with session.begin():
                        session.add(row)
        except IntegrityError as e:
            if is_unique_violation(e):
                logger.info(
                    "Duplicate registration rejected: %s -> %s", eth_address, rgb_address
                )
                return InsertResult.conflict()
            logger.exception("Integrity error while inserting registration")
            return InsertResult.failure(str(e.orig))
        except RegistrationStoreError as e:
            logger.error("Insert refused: %s", e.message)
            return InsertResult.failure(e.message)
        except (SQLAlchemyError, OSError) as e:
            logger.exception("Failed to insert registration")
            return InsertResult.failure(str(e))

        logger.info("Registration saved with ID: %s", row.id)
        return InsertResult.created(row.id, now)

    async def list_all(self) -> list[RegistrationRecord]:
        """Return every registration ordered by ascending id.

        Raises:
            RegistrationStoreError: If the database cannot be read
        """
        try:
            if self._closed or not self._initialized:
                async with self._lock:
                    await self._ensure_schema()
            async with self._read_guard():
                async with self._session_factory() as session:
                    stmt = select(Registration).order_by(Registration.id)
                    result = await session.execute(stmt)
                    rows = list(result.scalars().all())
        except RegistrationStoreError as e:
            logger.error("Read refused: %s", e.message)
            raise RegistrationStoreError("Failed to fetch registrations") from e
        except (SQLAlchemyError, OSError) as e:
            logger.exception("Failed to fetch registrations")
            raise RegistrationStoreError("Failed to fetch registrations") from e

        return [_to_record(row) for row in rows]

    async def close(self) -> None:
        """Flush the SQLite WAL into the main file and release connections."""
        async with self._lock:
            if self._closed:
                return
            self._closed = True

            if self._initialized and is_sqlite_url(self.database_url):
                try:
                    async with self._engine.connect() as conn:
                        await conn.execute(text("PRAGMA wal_checkpoint(TRUNCATE)"))
                except SQLAlchemyError as e:
                    logger.warning("WAL checkpoint failed on close: %s", e)

            await self._engine.dispose()
            logger.info("Registration store closed")

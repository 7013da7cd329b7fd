"""SQL-backed conversation storage.

Each operation opens its own session from the shared pool, runs one short
transaction and releases the connection. No connection is ever held while
the caller waits on the LLM provider.
"""

import uuid
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import exc as sa_exc
from sqlalchemy import func, insert, select

from spur_chat.db.resources import DatabaseResource
from spur_chat.db.schema import conversations, messages
from spur_chat.exceptions import StorageConstraintError, StorageError, StorageUnavailableError
from spur_chat.models.messages import SENDERS, Conversation, ConversationWithMessages, Message, Sender
from spur_chat.utils.logging import get_logger

logger = get_logger(__name__)

FOREIGN_KEY_VIOLATION = "23503"
UNIQUE_VIOLATION = "23505"


def _classify_integrity_error(error: sa_exc.IntegrityError) -> str | None:
    """Work out which constraint an IntegrityError violated."""
    orig = error.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code == FOREIGN_KEY_VIOLATION:
        return StorageConstraintError.REFERENCE
    if code == UNIQUE_VIOLATION:
        return StorageConstraintError.CONFLICT

    # SQLite reports no SQLSTATE, only a message
    detail = str(orig).lower()
    if "foreign key" in detail:
        return StorageConstraintError.REFERENCE
    if "unique" in detail or "duplicate key" in detail:
        return StorageConstraintError.CONFLICT
    return None


@contextmanager
def translate_storage_errors(operation: str) -> Iterator[None]:
    """Re-raise driver and pool failures as domain storage errors."""
    try:
        yield
    except sa_exc.IntegrityError as e:
        violation = _classify_integrity_error(e)
        logger.warning(f"Constraint violation during {operation}: {e.orig}")
        if violation is None:
            raise StorageError(details={"operation": operation}) from e
        raise StorageConstraintError(violation, details={"operation": operation}) from e
    except (sa_exc.TimeoutError, sa_exc.OperationalError, sa_exc.InterfaceError, OSError) as e:
        logger.error(f"Database unavailable during {operation}: {e}")
        raise StorageUnavailableError(details={"operation": operation}) from e


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _row_to_message(row: Mapping[str, Any]) -> Message:
    return Message(
        id=str(row["id"]),
        conversation_id=str(row["conversation_id"]),
        sender=row["sender"],
        text=row["text"],
        created_at=_as_utc(row["created_at"]),
    )


class SqlConversationRepository:
    """Conversation repository over an async SQLAlchemy engine."""

    def __init__(self, database: DatabaseResource):
        """Initialize with the shared database resource.

        Args:
            database: Resource owning the engine and connection pool
        """
        self.database = database

    def _now(self):
        """Timestamp for new rows.

        The database clock stamps rows so every app host orders turns the
        same way. SQLite keeps the app clock: its now() has one-second
        resolution and it only ever serves a single process.
        """
        if self.database.is_sqlite:
            return datetime.now(UTC)
        return func.now()

    async def conversation_exists(self, conversation_id: str) -> bool:
        try:
            key = uuid.UUID(conversation_id)
        except ValueError:
            return False

        with translate_storage_errors("conversation_exists"):
            async with self.database.get_session() as session:
                result = await session.execute(select(conversations.c.id).where(conversations.c.id == key))
                return result.first() is not None

    async def create_conversation(self) -> str:
        key = uuid.uuid4()
        with translate_storage_errors("create_conversation"):
            async with self.database.get_session() as session, session.begin():
                await session.execute(insert(conversations).values(id=key, created_at=self._now()))
        return str(key)

    async def save_message(self, conversation_id: str, sender: Sender, text: str) -> Message:
        if sender not in SENDERS:
            raise ValueError(f"Invalid sender: {sender}")

        key = uuid.uuid4()
        stmt = (
            insert(messages)
            .values(
                id=key,
                conversation_id=uuid.UUID(conversation_id),
                sender=sender,
                text=text,
                created_at=self._now(),
            )
            .returning(messages.c.created_at)
        )
        with translate_storage_errors("save_message"):
            async with self.database.get_session() as session, session.begin():
                result = await session.execute(stmt)
                created_at = result.scalar_one()

        return Message(
            id=str(key),
            conversation_id=conversation_id,
            sender=sender,
            text=text,
            created_at=_as_utc(created_at),
        )

    async def get_history(self, conversation_id: str, limit: int) -> list[Message]:
        if limit <= 0:
            return []

        stmt = (
            select(messages)
            .where(messages.c.conversation_id == uuid.UUID(conversation_id))
            .order_by(messages.c.created_at.desc(), messages.c.id.desc())
            .limit(limit)
        )
        with translate_storage_errors("get_history"):
            async with self.database.get_session() as session:
                result = await session.execute(stmt)
                rows = result.mappings().all()

        # Newest rows were selected; hand them back oldest first
        return [_row_to_message(row) for row in reversed(rows)]

    async def get_conversation_with_messages(self, conversation_id: str) -> ConversationWithMessages | None:
        try:
            key = uuid.UUID(conversation_id)
        except ValueError:
            return None

        with translate_storage_errors("get_conversation_with_messages"):
            async with self.database.get_session() as session:
                conv_result = await session.execute(select(conversations).where(conversations.c.id == key))
                conv_row = conv_result.mappings().first()
                if conv_row is None:
                    return None

                msg_result = await session.execute(
                    select(messages)
                    .where(messages.c.conversation_id == key)
                    .order_by(messages.c.created_at.asc(), messages.c.id.asc())
                )
                msg_rows = msg_result.mappings().all()

        return ConversationWithMessages(
            conversation=Conversation(id=str(conv_row["id"]), created_at=_as_utc(conv_row["created_at"])),
            messages=[_row_to_message(row) for row in msg_rows],
        )

"""Table definitions for conversations and messages.

Plain SQLAlchemy Core tables so the same statements run on PostgreSQL in
production and SQLite in tests.
"""

import sqlalchemy as sa

metadata = sa.MetaData()

conversations = sa.Table(
    "conversations",
    metadata,
    sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
    sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    ),
)

messages = sa.Table(
    "messages",
    metadata,
    sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
    sa.Column(
        "conversation_id",
        sa.Uuid(as_uuid=True),
        sa.ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
    ),
    sa.Column("sender", sa.String(20), nullable=False),
    sa.Column("text", sa.Text, nullable=False),
    sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    ),
    sa.CheckConstraint("sender IN ('user', 'assistant')", name="ck_messages_sender"),
    sa.Index("idx_messages_conversation_id", "conversation_id"),
    sa.Index("idx_messages_created_at", "conversation_id", "created_at"),
)

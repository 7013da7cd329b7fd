"""Database engine and connection pool lifecycle."""

import time

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from spur_chat.db.schema import metadata
from spur_chat.utils.logging import get_logger

logger = get_logger(__name__)


class DatabaseResource:
    """Owns the process-wide engine and its connection pool.

    Nothing is opened until ``init()``; ``shutdown()`` drains and closes the
    pool. Repositories receive this object and open one short session per
    operation through ``get_session()``.
    """

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 10,
        pool_timeout: float = 5.0,
        connect_timeout: float = 5.0,
        pool_recycle: int = 1800,
        echo: bool = False,
    ):
        self.database_url = database_url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.connect_timeout = connect_timeout
        self.pool_recycle = pool_recycle
        self.echo = echo
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.database_url).get_backend_name() == "sqlite"

    @property
    def is_asyncpg(self) -> bool:
        return make_url(self.database_url).get_driver_name() == "asyncpg"

    async def init(self) -> "DatabaseResource":
        """Create the engine and session factory."""
        if self.engine is not None:
            return self

        engine_kwargs: dict = {"echo": self.echo, "pool_pre_ping": True}
        if not self.is_sqlite:
            engine_kwargs.update(
                pool_size=self.pool_size,
                max_overflow=self.max_overflow,
                pool_timeout=self.pool_timeout,
                pool_recycle=self.pool_recycle,
            )
        if self.is_asyncpg:
            # Bounds opening a new connection, including the server handshake
            engine_kwargs["connect_args"] = {"timeout": self.connect_timeout}

        self.engine = create_async_engine(self.database_url, **engine_kwargs)

        if self.is_sqlite:
            # SQLite only enforces foreign keys when asked to, per connection
            @event.listens_for(self.engine.sync_engine, "connect")
            def _enable_foreign_keys(dbapi_connection, _connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info(f"Database engine created for {make_url(self.database_url).render_as_string(hide_password=True)}")
        return self

    def get_session(self) -> AsyncSession:
        """Get a new database session."""
        if self.session_factory is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self.session_factory()

    async def check_connection(self) -> bool:
        """Run a trivial query to confirm the database is reachable."""
        if self.engine is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        start = time.time()
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return False
        logger.info(f"Database connection established in {time.time() - start:.2f}s")
        return True

    async def create_schema(self) -> None:
        """Create tables and indexes that do not exist yet."""
        if self.engine is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        logger.info("Database schema ready")

    async def shutdown(self) -> None:
        """Dispose of the engine and close pooled connections."""
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Database pool closed")
        self.engine = None
        self.session_factory = None

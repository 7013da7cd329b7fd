#!/usr/bin/env python3
"""Create the conversations and messages tables if they do not exist."""

import asyncio
import sys

from spur_chat.config import get_settings
from spur_chat.db.resources import DatabaseResource
from spur_chat.utils.logging import LogConfig, get_logger, setup_logging

logger = get_logger("spur_chat.migrate")


async def migrate(database_url: str) -> None:
    database = DatabaseResource(database_url)
    await database.init()
    try:
        logger.info("Running database migrations...")
        await database.create_schema()
        logger.info("All migrations completed successfully")
    finally:
        await database.shutdown()


def main() -> int:
    """Main entry point for the migration script."""
    settings = get_settings()
    setup_logging(LogConfig(level=settings.APP.LOG_LEVEL))
    database_url = sys.argv[1] if len(sys.argv) > 1 else settings.DATABASE.DATABASE_URL

    try:
        asyncio.run(migrate(database_url))
    except Exception as e:
        logger.error(f"Migration failed: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

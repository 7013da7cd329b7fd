"""Main FastAPI application."""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from spur_chat import __version__
from spur_chat.api.endpoints import router
from spur_chat.api.errors import register_exception_handlers
from spur_chat.clients.anthropic import AnthropicClient, AnthropicConfig
from spur_chat.config import Settings, get_settings
from spur_chat.db.resources import DatabaseResource
from spur_chat.exceptions import StorageUnavailableError
from spur_chat.repositories.base import ConversationRepository
from spur_chat.repositories.memory import InMemoryConversationRepository
from spur_chat.repositories.sql import SqlConversationRepository
from spur_chat.services.completion import CompletionGateway, CompletionService
from spur_chat.services.conversation import ChatConfig, ConversationService
from spur_chat.utils.logging import LogConfig, get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    database: DatabaseResource | None = app.state.database

    if database is not None:
        await database.init()
        if not await database.check_connection():
            await database.shutdown()
            raise StorageUnavailableError("Failed to connect to database")

    logger.info(
        f"Spur chat backend ready - port: {settings.APP.PORT}, environment: {settings.APP.ENVIRONMENT}, "
        f"storage: {settings.APP.STORAGE_BACKEND}, model: {settings.LLM.LLM_MODEL}"
    )

    yield

    if database is not None:
        await database.shutdown()
    logger.info("Application shutdown complete")


def build_database(settings: Settings) -> DatabaseResource:
    db = settings.DATABASE
    return DatabaseResource(
        database_url=db.DATABASE_URL,
        pool_size=db.DB_POOL_SIZE,
        max_overflow=db.DB_MAX_OVERFLOW,
        pool_timeout=db.DB_POOL_TIMEOUT,
        connect_timeout=db.DB_CONNECT_TIMEOUT,
        pool_recycle=db.DB_POOL_RECYCLE,
    )


def build_completion(settings: Settings) -> CompletionService:
    llm = settings.LLM
    client = AnthropicClient(
        api_key=llm.ANTHROPIC_API_KEY.get_secret_value(),
        config=AnthropicConfig(
            model=llm.LLM_MODEL,
            max_tokens=llm.LLM_MAX_TOKENS,
            temperature=llm.LLM_TEMPERATURE,
            timeout=llm.LLM_TIMEOUT_SECONDS,
        ),
    )
    return CompletionService(client)


def create_app(
    settings: Settings | None = None,
    *,
    repository: ConversationRepository | None = None,
    completion: CompletionGateway | None = None,
) -> FastAPI:
    """Build the application with all of its collaborators.

    Args:
        settings: Application settings (defaults to the environment)
        repository: Persistence gateway; built from settings when omitted
        completion: Completion gateway; built from settings when omitted

    Raises:
        ConfigurationError: If settings needed to build a collaborator are missing
    """
    settings = settings or get_settings()
    setup_logging(LogConfig(level=settings.APP.LOG_LEVEL))

    database: DatabaseResource | None = None
    if repository is None:
        if settings.APP.STORAGE_BACKEND == "memory":
            logger.warning("Using in-memory storage; conversations are lost on restart")
            repository = InMemoryConversationRepository()
        else:
            database = build_database(settings)
            repository = SqlConversationRepository(database)

    if completion is None:
        settings.ensure_valid()
        completion = build_completion(settings)

    app = FastAPI(
        title="Spur Customer Support Chat",
        description="Customer-support chat API that stores conversations and answers with an LLM.",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {"name": "Chat", "description": "Send messages and read conversation history."},
            {"name": "Health", "description": "Service health monitoring and status checks."},
        ],
    )

    app.state.settings = settings
    app.state.database = database
    app.state.conversation_service = ConversationService(
        repository=repository,
        completion=completion,
        config=ChatConfig(
            max_message_length=settings.CHAT.MAX_MESSAGE_LENGTH,
            max_history_messages=settings.CHAT.MAX_HISTORY_MESSAGES,
        ),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.APP.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} in {(time.time() - start) * 1000:.0f}ms"
        )
        return response

    register_exception_handlers(app)
    app.include_router(router)

    return app


def main() -> None:
    """Run the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "spur_chat.main:create_app",
        factory=True,
        host=settings.APP.HOST,
        port=settings.APP.PORT,
        reload=settings.APP.ENVIRONMENT == "development",
        log_level=settings.APP.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()

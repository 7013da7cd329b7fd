"""Application settings loaded from the environment and an optional .env file."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from spur_chat.exceptions import ConfigurationError


class CustomSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


class AppSettings(CustomSettings):
    ENVIRONMENT: Literal["development", "production", "test"] = Field(default="development")
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3001)
    LOG_LEVEL: str = Field(default="INFO")
    CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])
    STORAGE_BACKEND: Literal["sql", "memory"] = Field(default="sql")


class DatabaseSettings(CustomSettings):
    DB_DRIVER: str = Field(default="postgresql+asyncpg")
    DB_HOST: str = Field(default="localhost")
    DB_PORT: int = Field(default=5432)
    DB_NAME: str = Field(default="ai_chat")
    DB_USER: str = Field(default="postgres")
    DB_PASSWORD: SecretStr = Field(default=SecretStr(""))
    DATABASE_URL: str = Field(default="")

    DB_POOL_SIZE: int = Field(default=10)
    DB_MAX_OVERFLOW: int = Field(default=10)
    DB_POOL_TIMEOUT: float = Field(default=5.0)
    DB_CONNECT_TIMEOUT: float = Field(default=5.0, gt=0)
    DB_POOL_RECYCLE: int = Field(default=1800)

    @model_validator(mode="before")
    def build_database_url(cls, data: dict):
        if isinstance(data, dict) and not data.get("DATABASE_URL"):
            password = data.get("DB_PASSWORD", "")
            if isinstance(password, SecretStr):
                password = password.get_secret_value()
            data["DATABASE_URL"] = URL.create(
                drivername=data.get("DB_DRIVER", "postgresql+asyncpg"),
                username=data.get("DB_USER", "postgres"),
                password=password or None,
                host=data.get("DB_HOST", "localhost"),
                port=int(data.get("DB_PORT", 5432)),
                database=data.get("DB_NAME", "ai_chat"),
            ).render_as_string(hide_password=False)
        return data


class LLMSettings(CustomSettings):
    ANTHROPIC_API_KEY: SecretStr = Field(default=SecretStr(""))
    LLM_MODEL: str = Field(default="claude-3-5-sonnet-20241022")
    LLM_MAX_TOKENS: int = Field(default=500, gt=0)
    LLM_TEMPERATURE: float = Field(default=0.7, ge=0.0, le=1.0)
    LLM_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)


class ChatSettings(CustomSettings):
    MAX_MESSAGE_LENGTH: int = Field(default=2000, gt=0)
    MAX_HISTORY_MESSAGES: int = Field(default=10, gt=0)


class Settings(BaseModel):
    APP: AppSettings = Field(default_factory=AppSettings)
    DATABASE: DatabaseSettings = Field(default_factory=DatabaseSettings)
    LLM: LLMSettings = Field(default_factory=LLMSettings)
    CHAT: ChatSettings = Field(default_factory=ChatSettings)

    def problems(self) -> list[str]:
        """List configuration problems that must stop the service from starting."""
        errors: list[str] = []
        if not self.LLM.ANTHROPIC_API_KEY.get_secret_value():
            errors.append("ANTHROPIC_API_KEY is required")
        if (
            self.APP.ENVIRONMENT == "production"
            and self.APP.STORAGE_BACKEND == "sql"
            and not self.DATABASE.DB_PASSWORD.get_secret_value()
        ):
            errors.append("DB_PASSWORD is required in production")
        return errors

    def ensure_valid(self) -> None:
        """Raise ConfigurationError describing every problem found."""
        errors = self.problems()
        if errors:
            raise ConfigurationError(
                "Configuration errors: " + "; ".join(errors),
                {"errors": errors},
            )


@lru_cache
def get_settings() -> Settings:
    return Settings()

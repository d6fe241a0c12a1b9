from functools import lru_cache
import os

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    openrouter_api_key: str = Field(default="", description="Bearer token for OpenRouter")
    openrouter_base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="Base URL of the OpenAI-compatible completion API",
    )
    openrouter_model: str = Field(
        default="deepseek/deepseek-r1:free",
        description="Model identifier sent with every completion request",
    )
    openrouter_timeout: float = Field(
        default=60.0,
        description="Timeout (in seconds) for a single completion request",
    )
    app_url: str = Field(
        default="http://localhost:3000",
        description="Public base URL, sent upstream as Referer and used for CORS",
    )
    app_title: str = Field(default="Beacon Light AI", description="Sent upstream as X-Title")
    port: int = Field(default=3000)
    environment: str = Field(default="production")
    max_sessions: int = Field(
        default=1000,
        description="Number of client histories kept before LRU eviction",
    )
    session_ttl_seconds: float = Field(
        default=3600.0,
        description="Idle time after which a client history is dropped (0 disables)",
    )
    max_history_messages: int = Field(
        default=0,
        description="Newest turns kept per client history (0 keeps everything)",
    )
    static_dir: str = Field(default="public")
    log_level: str = Field(default="INFO")

    class Config:
        frozen = True

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance."""

    load_dotenv(find_dotenv(usecwd=True))
    defaults = Settings()
    return Settings(
        openrouter_api_key=os.getenv("OPENROUTER_API_KEY", defaults.openrouter_api_key),
        openrouter_base_url=os.getenv("OPENROUTER_BASE_URL", defaults.openrouter_base_url),
        openrouter_model=os.getenv("OPENROUTER_MODEL", defaults.openrouter_model),
        openrouter_timeout=float(
            os.getenv("OPENROUTER_TIMEOUT", defaults.openrouter_timeout)
        ),
        app_url=os.getenv("APP_URL", defaults.app_url),
        app_title=os.getenv("APP_TITLE", defaults.app_title),
        port=int(os.getenv("PORT", defaults.port)),
        environment=os.getenv("ENVIRONMENT")
        or os.getenv("NODE_ENV")
        or defaults.environment,
        max_sessions=int(os.getenv("MAX_SESSIONS", defaults.max_sessions)),
        session_ttl_seconds=float(
            os.getenv("SESSION_TTL_SECONDS", defaults.session_ttl_seconds)
        ),
        max_history_messages=int(
            os.getenv("MAX_HISTORY_MESSAGES", defaults.max_history_messages)
        ),
        static_dir=os.getenv("STATIC_DIR", defaults.static_dir),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level),
    )

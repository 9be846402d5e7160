# backend/agora/core/config.py
import logging
import os
from pathlib import Path
from typing import List, Literal

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    environment: Literal["development", "test", "production"] = "development"

    # Use a default secret key for local/testing environments
    secret_key: SecretStr = Field(
        default=SecretStr("dev-secret-key-not-for-production"),
        description="Secret key for JWT tokens",
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    database_url: str = Field(
        default="sqlite:///./agora.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = False

    cors_allowed_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API and open sockets",
    )

    # History pagination
    global_history_default_limit: int = 30
    private_history_default_limit: int = 20
    history_max_limit: int = 100

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return (value or "INFO").strip().upper()


settings = Settings()

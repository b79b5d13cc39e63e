"""
Twitter Clone Backend - Application Configuration
==================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and exposes a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; checked again during startup.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Default shared secret of v1 deployments. Tokens signed with it stay
# valid, but startup logs a warning while it is in use.
DEFAULT_JWT_SECRET = "MY_SECRET_KEY"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. Production deployments must
    override JWT_SECRET and usually DATABASE_URL.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Format: sqlite+aiosqlite:///path.db or postgresql+asyncpg://user:pw@host/db
    database_url: str = Field(
        default="sqlite+aiosqlite:///./twitterClone.db",
        description="Async SQLAlchemy connection URL",
    )

    # Pool sizing only applies to server databases; SQLite ignores it.
    db_pool_size: int = Field(default=20, ge=5, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # Runs Base.metadata.create_all during startup. The schema is otherwise
    # owned by whoever provisions the database.
    create_tables_on_startup: bool = Field(default=True)

    # ── Tokens ────────────────────────────────────────────────────────────
    jwt_secret: str = Field(default=DEFAULT_JWT_SECRET, min_length=1)
    jwt_algorithm: str = Field(default="HS256")

    # Unset means tokens carry no `exp` claim and never expire.
    jwt_expire_minutes: Optional[int] = Field(default=None, ge=1)

    # ── Passwords ─────────────────────────────────────────────────────────
    # bcrypt cost factor; each +1 doubles hashing time.
    bcrypt_rounds: int = Field(default=10, ge=4, le=16)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated URLs (parsed by the property below)
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """Only shared-secret HMAC algorithms make sense with a single secret."""
        upper = v.upper()
        if upper not in {"HS256", "HS384", "HS512"}:
            raise ValueError(f"Unsupported jwt_algorithm '{v}'. Use HS256, HS384 or HS512")
        return upper

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Checks settings that are unsafe to ship with their defaults.
        When:  Called during app startup (lifespan).
        Raises: ValueError listing every problem found.
        """
        errors = []
        if self.jwt_secret == DEFAULT_JWT_SECRET:
            errors.append(
                "JWT_SECRET is using the built-in default. "
                "Set a long random value before exposing the service."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance imported throughout the application
settings = Settings()

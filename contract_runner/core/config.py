"""Runner configuration using Pydantic Settings.

Configuration is loaded from environment variables prefixed with `CONTRACT_`.

Optionally, point `CONTRACT_ENV_FILE` at a local env file. It is opt-in so a
stray `.env` in the working directory never changes a run.
"""

import logging
import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runner settings with type validation.

    CLI flags override these per run (see `contract_runner.main`).
    """

    model_config = SettingsConfigDict(
        env_file=os.getenv("CONTRACT_ENV_FILE") or None,
        env_prefix="CONTRACT_",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    structured_logs: bool = True

    # Per-case budget enforced by the test framework (pytest-timeout)
    case_timeout: float = 10.0

    # httpx timeout for a single request
    request_timeout: float = 10.0

    # Diagnostics
    pretty_diagnostics: bool = True
    diagnostic_body_limit: int = 2000

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level and reject unknown names."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"log_level must be a logging level name, got '{v}'")
        return level

    @field_validator("case_timeout", "request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeouts must be positive, got {v}")
        return v

    @field_validator("diagnostic_body_limit")
    @classmethod
    def validate_body_limit(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"diagnostic_body_limit must not be negative, got {v}")
        return v


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()


settings = Settings()

"""Runtime configuration for the manuscript unlock suite.

Everything environment-specific (portal URL, credentials, the cipher API
endpoint and the download retry policy) is read once from environment
variables and kept immutable for the rest of the run.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, Field, field_validator

DEFAULT_CHALLENGE_URL = "https://backend-production-9d875.up.railway.app/api/cipher/challenge"


class Settings(BaseModel):
    """Settings shared by the e2e suite and the manuscript tools."""

    base_url: str = Field(
        "http://localhost:3000",
        description="Base URL of the manuscript portal (without trailing slash)",
    )

    user_email: str = Field(
        "monje@sherpa.local",
        description="Login e-mail of the portal user",
    )

    user_password: str = Field(
        "cript@123",
        description="Login password of the portal user",
    )

    challenge_url: str = Field(
        DEFAULT_CHALLENGE_URL,
        description="Endpoint of the cipher challenge API",
    )

    api_timeout: float = Field(
        30.0,
        description="Timeout in seconds for cipher challenge API requests",
    )

    download_max_attempts: int = Field(
        5,
        description="Maximum number of PDF download attempts per manuscript",
    )

    download_retry_delay: float = Field(
        15.0,
        description="Seconds to wait between two download attempts (rate limiting)",
    )

    download_settle_delay: float = Field(
        1.0,
        description="Seconds to wait after a download before checking the error banner",
    )

    log_level: str = Field(
        "INFO",
        description="Log level of the console handler",
    )

    @field_validator("base_url", "challenge_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"URL must start with http:// or https:// -> '{v}'")
        return v.rstrip("/")

    @field_validator("download_max_attempts")
    @classmethod
    def at_least_one_attempt(cls, v: int) -> int:
        if v < 1:
            raise ValueError("download_max_attempts must be >= 1")
        return v

    @field_validator("download_retry_delay", "download_settle_delay", "api_timeout")
    @classmethod
    def non_negative_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Delays and timeouts must not be negative")
        return v

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level '{v}'. Allowed values: {sorted(allowed)}")
        return v.upper()

    @classmethod
    def from_env(cls) -> Settings:
        """Load the settings from MANUSCRIPTS_* environment variables."""

        defaults = cls()

        return cls(
            base_url=os.getenv("MANUSCRIPTS_BASE_URL", defaults.base_url),
            user_email=os.getenv("MANUSCRIPTS_USER_EMAIL", defaults.user_email),
            user_password=os.getenv("MANUSCRIPTS_USER_PASSWORD", defaults.user_password),
            challenge_url=os.getenv("MANUSCRIPTS_CHALLENGE_URL", defaults.challenge_url),
            api_timeout=float(os.getenv("MANUSCRIPTS_API_TIMEOUT", defaults.api_timeout)),
            download_max_attempts=int(
                os.getenv("MANUSCRIPTS_DOWNLOAD_MAX_ATTEMPTS", defaults.download_max_attempts)
            ),
            download_retry_delay=float(
                os.getenv("MANUSCRIPTS_DOWNLOAD_RETRY_DELAY", defaults.download_retry_delay)
            ),
            download_settle_delay=float(
                os.getenv("MANUSCRIPTS_DOWNLOAD_SETTLE_DELAY", defaults.download_settle_delay)
            ),
            log_level=os.getenv("MANUSCRIPTS_LOG_LEVEL", defaults.log_level),
        )

    model_config = {
        "frozen": True,
    }

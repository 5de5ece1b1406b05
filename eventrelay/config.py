"""Runtime configuration — env-driven via pydantic-settings.

Reads from a .env file and EVENTRELAY_* environment variables.  Only the
CLI reads this module; the Dispatcher itself is always constructed with
explicit arguments (see ``Dispatcher.from_config``).
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from eventrelay.models.dispatch import FaultPolicy, RetryPolicy


class RelayConfig(BaseSettings):
    """Dispatcher and demo settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export EVENTRELAY_BACKOFF_SECONDS=0.25
        export EVENTRELAY_RETRY_POLICY=resend
        export EVENTRELAY_LOG_LEVEL=DEBUG

    Or via .env file::

        EVENTRELAY_ENVIRONMENT=production
        EVENTRELAY_FAULT_POLICY=propagate
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="EVENTRELAY_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"

    # Dispatch
    backoff_seconds: float = Field(default=5.0, ge=0)
    retry_policy: RetryPolicy = RetryPolicy.ADVANCE
    max_attempts: int = Field(default=3, ge=1)  # only used by RetryPolicy.RESEND
    fault_policy: FaultPolicy = FaultPolicy.RECOVER

    # Mock collaborators used by `eventrelay demo`
    mock_read_delay: float = Field(default=1.0, ge=0)
    mock_send_delay: float = Field(default=0.5, ge=0)

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


# Module-level singleton: `from eventrelay.config import config`
config = RelayConfig()

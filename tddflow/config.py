"""Process configuration: env-driven, computed once at startup.

Settings come from ``TDDFLOW_*`` environment variables or a ``.env`` file.
The telemetry decision also honours the conventional ``TDD_TELEMETRY``,
``DO_NOT_TRACK`` and ``CI`` variables. It is resolved once and passed
explicitly to whatever reports usage; nothing reads it from global state.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_FALSE_VALUES = ("0", "false")


class Settings(BaseSettings):
    """Runtime settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export TDDFLOW_LOG_LEVEL=DEBUG
        export TDDFLOW_TELEMETRY_ENABLED=false
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TDDFLOW_",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = "WARNING"

    # Explicit opt-in/opt-out; None defers to the conventional variables below
    telemetry_enabled: bool | None = None

    tdd_telemetry: str | None = Field(None, validation_alias="TDD_TELEMETRY")
    do_not_track: str | None = Field(None, validation_alias="DO_NOT_TRACK")
    ci: str | None = Field(None, validation_alias="CI")

    @property
    def telemetry_active(self) -> bool:
        """Whether anonymous usage reporting is allowed."""
        if self.telemetry_enabled is not None:
            return self.telemetry_enabled
        for value in (self.tdd_telemetry, self.do_not_track):
            if value is not None and value.strip().lower() in _FALSE_VALUES:
                return False
        if self.ci:
            return False
        return True

"""
DME Intake Configuration
Settings for note intake, device configuration, API submission and logging.
Source: https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from pathlib import Path
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_API_ENDPOINT = "https://alert-api.com/DrExtract"


class IntakeSettings(BaseSettings):
    """
    DME intake configuration settings.

    Every value can be overridden with a ``DME_`` prefixed environment
    variable or an entry in ``.env``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="DME_",
    )

    # =========================================================================
    # Note Input
    # =========================================================================
    NOTE_FILE_PATH: Path = Field(
        default=Path("physician_note.txt"),
        description="Physician note read when no path is given",
    )

    # =========================================================================
    # Device Configuration
    # =========================================================================
    DEVICES: Optional[str] = Field(
        default=None,
        description=(
            "Inline device definitions as JSON or YAML text; parsed by the "
            "device registry and wins over DEVICES_CONFIG_PATH"
        ),
    )
    DEVICES_CONFIG_PATH: Optional[Path] = Field(
        default=Path("config/dme_devices.yaml"),
        description="YAML or JSON file holding device definitions",
    )

    # =========================================================================
    # Intake API
    # =========================================================================
    API_ENDPOINT: str = Field(
        default=DEFAULT_API_ENDPOINT,
        description="Intake API endpoint receiving extracted orders",
    )
    API_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout for a single submission attempt",
    )
    API_RETRY_ATTEMPTS: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per submission on transport errors",
    )
    API_RETRY_DELAY_SECONDS: float = Field(
        default=1.0,
        ge=0,
        description="Initial delay between attempts (doubles each retry)",
    )

    # =========================================================================
    # Logging
    # =========================================================================
    LOG_LEVEL: str = Field(default="INFO", description="Log level")
    LOG_FILE: Optional[str] = Field(default=None, description="Optional log file")
    JSON_LOGS: bool = Field(default=False, description="Emit JSON log records")
    LOG_PHI: bool = Field(
        default=False,
        description="Allow note-derived values (names, payloads) in DEBUG logs",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate log level."""
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return level

    @property
    def device_config_source(self) -> Any:
        """Configuration source handed to the device registry loader."""
        if self.DEVICES:
            return self.DEVICES
        return self.DEVICES_CONFIG_PATH


# Singleton instance
_intake_settings: Optional[IntakeSettings] = None


def get_intake_settings() -> IntakeSettings:
    """
    Get cached intake settings instance.

    Returns:
        IntakeSettings instance
    """
    global _intake_settings
    if _intake_settings is None:
        _intake_settings = IntakeSettings()
    return _intake_settings

"""
Logging Configuration
Structured logging with loguru, configured from IntakeSettings.
Source: https://github.com/Delgan/loguru

Physician notes carry PHI. Log calls that include note-derived values
(names, providers, payloads) go through ``get_phi_logger`` and are dropped
by every sink unless ``LOG_PHI`` is enabled, and even then only at DEBUG
or TRACE.
"""

import sys
from pathlib import Path
from typing import Any, Callable, Optional

from loguru import logger

from dme_intake.core.config import IntakeSettings, get_intake_settings

PHI_EXTRA_KEY = "phi"

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}"
)


def phi_filter(allow_phi: bool) -> Callable[[dict[str, Any]], bool]:
    """
    Build a sink filter for PHI-tagged records.

    Args:
        allow_phi: Whether PHI-tagged records may be emitted at all

    Returns:
        Filter that passes untagged records, and tagged records only when
        allowed and logged at DEBUG or below
    """
    debug_level = logger.level("DEBUG").no

    def _filter(record: dict[str, Any]) -> bool:
        if not record["extra"].get(PHI_EXTRA_KEY):
            return True
        return allow_phi and record["level"].no <= debug_level

    return _filter


def setup_logging(
    settings: Optional[IntakeSettings] = None,
    level: Optional[str] = None,
    json_logs: Optional[bool] = None,
) -> None:
    """
    Configure application logging.

    Args:
        settings: Intake settings; the cached settings when omitted
        level: Overrides ``settings.LOG_LEVEL``
        json_logs: Overrides ``settings.JSON_LOGS``
    """
    settings = settings or get_intake_settings()
    level = level or settings.LOG_LEVEL
    json_logs = settings.JSON_LOGS if json_logs is None else json_logs
    record_filter = phi_filter(settings.LOG_PHI)

    logger.remove()
    logger.configure(extra={"name": "dme_intake"})

    if json_logs:
        logger.add(
            sys.stderr,
            format="{message}",
            level=level,
            filter=record_filter,
            serialize=True,
        )
    else:
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level=level,
            filter=record_filter,
            colorize=True,
        )

    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            rotation="10 MB",
            retention="30 days",
            format=FILE_FORMAT,
            level=level,
            filter=record_filter,
            serialize=json_logs,
        )

    logger.info(
        f"Logging configured: level={level}, json_logs={json_logs}, "
        f"log_phi={settings.LOG_PHI}"
    )


def get_logger(name: str = __name__):  # type: ignore[no-untyped-def]
    """
    Get a logger instance bound to a module name.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Extraction started")
    """
    return logger.bind(name=name)


def get_phi_logger(name: str = __name__):  # type: ignore[no-untyped-def]
    """Get a module logger whose records are tagged as containing PHI."""
    return logger.bind(name=name, **{PHI_EXTRA_KEY: True})

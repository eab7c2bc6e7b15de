"""
Base Gateway Support for External APIs.

Shared configuration and retry logic for outbound HTTP
gateways.
"""

from dataclasses import dataclass
from typing import Callable, Optional
import asyncio
from functools import wraps

from dme_intake.core.config import IntakeSettings, get_intake_settings
from dme_intake.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class GatewayConfig:
    """Configuration for a gateway instance."""

    endpoint: str
    timeout_seconds: float = 30.0
    retry_attempts: int = 3
    retry_delay_seconds: float = 1.0
    backoff_factor: float = 2.0

    @classmethod
    def from_settings(cls, settings: Optional[IntakeSettings] = None) -> "GatewayConfig":
        """Build gateway configuration from intake settings."""
        settings = settings or get_intake_settings()
        return cls(
            endpoint=settings.API_ENDPOINT,
            timeout_seconds=settings.API_TIMEOUT_SECONDS,
            retry_attempts=settings.API_RETRY_ATTEMPTS,
            retry_delay_seconds=settings.API_RETRY_DELAY_SECONDS,
        )


def with_retry(
    max_attempts: int = 3,
    delay: float = 1.0,
    backoff_factor: float = 2.0,
    exceptions: tuple = (Exception,),
):
    """Decorator for retry logic with exponential backoff."""

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            last_exception = None
            current_delay = delay

            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    last_exception = e
                    if attempt < max_attempts - 1:
                        logger.warning(
                            f"Attempt {attempt + 1}/{max_attempts} failed: {e}. "
                            f"Retrying in {current_delay:.1f}s..."
                        )
                        await asyncio.sleep(current_delay)
                        current_delay *= backoff_factor
                    else:
                        logger.error(
                            f"All {max_attempts} attempts failed. Last error: {e}"
                        )

            raise last_exception

        return wrapper

    return decorator

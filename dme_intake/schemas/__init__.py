"""Pydantic schemas for device definitions and extraction results."""

from dme_intake.schemas.dme import (
    DEFAULT_DEVICE_PRIORITY,
    DeviceDefinition,
    ExtractionResult,
)

__all__ = [
    "DEFAULT_DEVICE_PRIORITY",
    "DeviceDefinition",
    "ExtractionResult",
]

"""
DME Data Extractor.

Top-level extraction pipeline for one physician note:
classify device, extract note-level fields, extract device-specific fields.

The extractor holds only the read-only device registry, so one instance can
be shared across threads and tasks.
"""

from typing import Any, Optional

from dme_intake.core.config import get_intake_settings
from dme_intake.schemas.dme import ExtractionResult
from dme_intake.services.extraction.device_classifier import classify_device
from dme_intake.services.extraction.device_registry import (
    DeviceRegistry,
    load_device_registry,
)
from dme_intake.services.extraction.field_extractor import (
    extract_device_fields,
    extract_note_fields,
)
from dme_intake.utils.errors import InvalidInputError
from dme_intake.utils.logging import get_logger

logger = get_logger(__name__)


class DmeDataExtractor:
    """
    Extracts structured DME orders from physician notes.

    Usage:
        extractor = DmeDataExtractor(load_device_registry("config/dme_devices.yaml"))
        result = extractor.extract(note_text)
    """

    def __init__(self, registry: Optional[DeviceRegistry] = None):
        """
        Initialize DmeDataExtractor.

        Args:
            registry: Loaded device registry; loaded from settings when omitted
        """
        if registry is None:
            registry = load_device_registry(get_intake_settings().device_config_source)
        self.registry = registry

    def classify(self, note: str) -> str:
        """Classify a note to a device label without extracting fields."""
        self._validate_note(note)
        return classify_device(note, self.registry)

    def extract(self, note: str) -> ExtractionResult:
        """
        Extract a DME order from a physician note.

        Args:
            note: Physician note text

        Returns:
            ExtractionResult; device is "Unknown" when nothing matched

        Raises:
            InvalidInputError: If the note is empty or whitespace only
        """
        self._validate_note(note)
        logger.debug("Starting DME data extraction from physician note")

        device = classify_device(note, self.registry)
        fields: dict[str, Any] = extract_note_fields(note)
        fields.update(extract_device_fields(note, device))

        result = ExtractionResult(device=device, **fields)
        logger.info(f"DME data extraction completed. Device: {result.device}")
        return result

    @staticmethod
    def _validate_note(note: Optional[str]) -> None:
        if note is None or not note.strip():
            logger.warning("Physician note is empty or null")
            raise InvalidInputError("Physician note cannot be empty or null")


# Singleton instance
_dme_extractor: Optional[DmeDataExtractor] = None


def get_dme_extractor() -> DmeDataExtractor:
    """Get or create the singleton DME extractor."""
    global _dme_extractor
    if _dme_extractor is None:
        _dme_extractor = DmeDataExtractor()
    return _dme_extractor

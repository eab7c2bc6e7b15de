"""
Device Classifier.

Assigns a single device label to a physician note by keyword containment.
Definitions are checked in registry order and the first definition with any
matching keyword wins, so a note mentioning two devices resolves to the one
with the lower priority value.
"""

from collections.abc import Iterable
from typing import Optional

from dme_intake.core.enums import UNKNOWN_DEVICE
from dme_intake.schemas.dme import DeviceDefinition
from dme_intake.utils.logging import get_logger

logger = get_logger(__name__)


def contains_ignore_case(text: str, phrase: str) -> bool:
    """Case-insensitive substring check."""
    return phrase.lower() in text.lower()


def match_device(
    note: str, registry: Iterable[DeviceDefinition]
) -> Optional[tuple[DeviceDefinition, str]]:
    """
    Find the first device definition matched by a note.

    Args:
        note: Physician note text
        registry: Definitions in classification order

    Returns:
        (definition, matched keyword), or None when nothing matches
    """
    note_lower = note.lower()
    for definition in registry:
        for keyword in definition.keywords:
            if keyword.lower() in note_lower:
                return definition, keyword
            logger.trace(f"Keyword '{keyword}' not found for device {definition.name}")
    return None


def classify_device(note: str, registry: Iterable[DeviceDefinition]) -> str:
    """
    Classify a note to a device label.

    Args:
        note: Physician note text
        registry: Definitions in classification order

    Returns:
        Canonical device name, or "Unknown" when no keyword matches
    """
    logger.debug(f"Starting device type detection for note with {len(note)} characters")

    match = match_device(note, registry)
    if match is None:
        logger.warning("Could not identify device type from note. No configured keywords matched.")
        return UNKNOWN_DEVICE

    definition, keyword = match
    logger.info(f"Identified device type: {definition.name} (matched keyword: '{keyword}')")
    return definition.name

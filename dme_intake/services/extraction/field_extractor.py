"""
Field Extractors for Physician Notes.

Note-level fields (ordering provider, patient name, date of birth, diagnosis)
are extracted from every note. Device-specific fields are extracted by a
handler looked up by device name; devices without a registered handler get
no device-specific fields.

Every extractor returns None (or the "Unknown" provider placeholder) when
its pattern is absent; none of them raise.
"""

import re
from collections.abc import Callable
from typing import Any, Optional

from dme_intake.core.enums import (
    UNKNOWN_PROVIDER,
    CpapAddOn,
    DeviceName,
    MaskType,
    UsageScenario,
)
from dme_intake.services.extraction.device_classifier import contains_ignore_case
from dme_intake.utils.logging import get_logger, get_phi_logger

logger = get_logger(__name__)
phi_logger = get_phi_logger(__name__)


# =============================================================================
# Patterns
# =============================================================================

# "Dr. House", "dr.Cuddy"; name stays on the line it starts on
PROVIDER_PATTERN = re.compile(r"Dr\.\s*([A-Za-z][A-Za-z \t]*)", re.IGNORECASE)

# Labelled lines; the capture may be empty when the label has no value
PATIENT_NAME_PATTERN = re.compile(r"Patient\s+Name:[ \t]*([^\n\r]*)", re.IGNORECASE)
DATE_OF_BIRTH_PATTERN = re.compile(r"DOB:[ \t]*([^\n\r]*)", re.IGNORECASE)
DIAGNOSIS_PATTERN = re.compile(r"Diagnosis:[ \t]*([^\n\r]*)", re.IGNORECASE)

# "2 L", "2L", "2.5 liters", "3 Liter"
LITERS_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*L(?:iters?)?", re.IGNORECASE)

AHI_THRESHOLD_QUALIFIER = "AHI > 20"
AHI_VALUE_PATTERN = re.compile(r"AHI:\s*(\d+)", re.IGNORECASE)

USAGE_CONNECTOR = " and "


# =============================================================================
# Note-Level Fields
# =============================================================================


def extract_ordering_provider(note: str) -> str:
    """Extract the ordering physician as "Dr. <name>", or "Unknown"."""
    match = PROVIDER_PATTERN.search(note)
    if match:
        provider = match.group(1).strip()
        phi_logger.debug(f"Identified ordering provider: {provider}")
        return f"Dr. {provider}"

    logger.warning("Could not identify ordering provider from note")
    return UNKNOWN_PROVIDER


def _extract_labelled_line(pattern: re.Pattern[str], note: str) -> Optional[str]:
    match = pattern.search(note)
    if match:
        return match.group(1).strip()
    return None


def extract_patient_name(note: str) -> Optional[str]:
    """Extract the text after "Patient Name:" on its line."""
    return _extract_labelled_line(PATIENT_NAME_PATTERN, note)


def extract_date_of_birth(note: str) -> Optional[str]:
    """Extract the text after "DOB:" on its line."""
    return _extract_labelled_line(DATE_OF_BIRTH_PATTERN, note)


def extract_diagnosis(note: str) -> Optional[str]:
    """Extract the text after "Diagnosis:" on its line."""
    return _extract_labelled_line(DIAGNOSIS_PATTERN, note)


def extract_note_fields(note: str) -> dict[str, Any]:
    """Extract the device-agnostic fields of a note."""
    fields = {
        "ordering_provider": extract_ordering_provider(note),
        "patient_name": extract_patient_name(note),
        "date_of_birth": extract_date_of_birth(note),
        "diagnosis": extract_diagnosis(note),
    }
    logger.debug(
        "Note-level fields found: "
        f"{[name for name, value in fields.items() if value is not None]}"
    )
    return fields


# =============================================================================
# Device Handler Registry
# =============================================================================

DeviceFieldHandler = Callable[[str], dict[str, Any]]

_device_handlers: dict[str, DeviceFieldHandler] = {}


def register_device_handler(
    device_name: str,
) -> Callable[[DeviceFieldHandler], DeviceFieldHandler]:
    """
    Register a device-specific field extractor.

    Args:
        device_name: Canonical device label the handler applies to

    Example:
        >>> @register_device_handler("Hospital Bed")
        ... def extract_bed_fields(note: str) -> dict[str, Any]:
        ...     return {}
    """

    def decorator(handler: DeviceFieldHandler) -> DeviceFieldHandler:
        _device_handlers[device_name] = handler
        return handler

    return decorator


def no_device_fields(note: str) -> dict[str, Any]:
    """Default handler for devices without specific extraction."""
    return {}


def get_device_handler(device_name: str) -> DeviceFieldHandler:
    """Look up the handler for a device, falling back to the no-op handler."""
    return _device_handlers.get(device_name, no_device_fields)


def get_registered_devices() -> list[str]:
    """Device names that have a specific handler."""
    return list(_device_handlers)


def extract_device_fields(note: str, device_name: str) -> dict[str, Any]:
    """Run the device-specific handler for a classified device."""
    handler = get_device_handler(device_name)
    if handler is no_device_fields:
        logger.debug(f"No specific extraction logic for device type: {device_name}")
    return handler(note)


# =============================================================================
# CPAP
# =============================================================================


def extract_mask_type(note: str) -> Optional[str]:
    """Most specific mask phrase present in the note."""
    for mask_type in MaskType:
        if contains_ignore_case(note, mask_type.value):
            return mask_type.value
    return None


def extract_cpap_add_ons(note: str) -> frozenset[str]:
    """At most one humidifier add-on; heated wins over plain."""
    for add_on in CpapAddOn:
        if contains_ignore_case(note, add_on.value):
            return frozenset({add_on.value})
    return frozenset()


def extract_cpap_qualifier(note: str) -> Optional[str]:
    """AHI qualifier: the literal threshold, else a reported AHI value."""
    if contains_ignore_case(note, AHI_THRESHOLD_QUALIFIER):
        return AHI_THRESHOLD_QUALIFIER

    if contains_ignore_case(note, "AHI:"):
        match = AHI_VALUE_PATTERN.search(note)
        if match:
            return f"AHI: {match.group(1)}"
    return None


@register_device_handler(DeviceName.CPAP.value)
def extract_cpap_fields(note: str) -> dict[str, Any]:
    """Extract mask type, add-ons and qualifier for a CPAP order."""
    fields = {
        "mask_type": extract_mask_type(note),
        "add_ons": extract_cpap_add_ons(note),
        "qualifier": extract_cpap_qualifier(note),
    }
    logger.debug(
        f"CPAP fields: mask_type={fields['mask_type']}, "
        f"add_ons={sorted(fields['add_ons'])}, qualifier={fields['qualifier']}"
    )
    return fields


# =============================================================================
# Oxygen Tank
# =============================================================================


def extract_flow_rate(note: str) -> Optional[str]:
    """Oxygen flow rate rendered as "<number> L"."""
    match = LITERS_PATTERN.search(note)
    if match:
        return f"{match.group(1)} L"
    return None


def extract_usage(note: str) -> Optional[str]:
    """All usage scenarios mentioned, joined in fixed order."""
    scenarios = [
        scenario.value
        for scenario in UsageScenario
        if contains_ignore_case(note, scenario.value)
    ]
    if scenarios:
        return USAGE_CONNECTOR.join(scenarios)
    return None


@register_device_handler(DeviceName.OXYGEN_TANK.value)
def extract_oxygen_fields(note: str) -> dict[str, Any]:
    """Extract flow rate and usage for an oxygen order."""
    fields = {
        "liters": extract_flow_rate(note),
        "usage": extract_usage(note),
    }
    logger.debug(f"Oxygen fields: liters={fields['liters']}, usage={fields['usage']}")
    return fields

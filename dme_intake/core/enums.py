"""
Core Enumerations for DME Intake.

Fixed vocabularies used by the field extractors. Member order is the order
in which the extractors check the note, so more specific phrases come first.
"""

from enum import Enum


UNKNOWN_DEVICE = "Unknown"
UNKNOWN_PROVIDER = "Unknown"


# =============================================================================
# Device Names
# =============================================================================


class DeviceName(str, Enum):
    """Built-in device labels that have device-specific extraction.

    Configured devices are an open set; names outside this enum are
    classified normally and skip device-specific extraction.
    """

    CPAP = "CPAP"
    OXYGEN_TANK = "Oxygen Tank"
    WHEELCHAIR = "Wheelchair"


# =============================================================================
# CPAP Vocabulary
# =============================================================================


class MaskType(str, Enum):
    """CPAP mask types, most specific phrase first."""

    FULL_FACE = "full face"
    NASAL_PILLOW = "nasal pillow"
    NASAL = "nasal"


class CpapAddOn(str, Enum):
    """CPAP humidifier add-ons. Mutually exclusive; first match wins."""

    HEATED_HUMIDIFIER = "heated humidifier"
    HUMIDIFIER = "humidifier"


# =============================================================================
# Oxygen Vocabulary
# =============================================================================


class UsageScenario(str, Enum):
    """Oxygen usage scenarios. Accumulated, reported in this order."""

    SLEEP = "sleep"
    EXERTION = "exertion"
    CONTINUOUS = "continuous"
    AS_NEEDED = "as needed"


# =============================================================================
# Registry / Reader Enums
# =============================================================================


class RegistrySource(str, Enum):
    """Where the loaded device definitions came from."""

    CONFIGURED = "configured"
    DEFAULT = "default"


class NoteFormat(str, Enum):
    """Format detected when reading a physician note file."""

    PLAIN_TEXT = "plain_text"
    JSON_WRAPPED = "json_wrapped"
    FALLBACK = "fallback"

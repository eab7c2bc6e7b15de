"""
DME Extraction Services.

Configuration-driven device classification and field extraction for
physician notes:
- Device registry (configured devices with built-in defaults)
- Device classifier (first match in priority order)
- Field extractors (note-level and per-device)
"""

from dme_intake.services.extraction.device_registry import (
    DEFAULT_DEVICE_DEFINITIONS,
    DeviceRegistry,
    get_default_registry,
    load_device_definitions,
    load_device_registry,
)
from dme_intake.services.extraction.device_classifier import (
    classify_device,
    match_device,
)
from dme_intake.services.extraction.field_extractor import (
    extract_device_fields,
    extract_note_fields,
    get_device_handler,
    register_device_handler,
)
from dme_intake.services.extraction.dme_extractor import (
    DmeDataExtractor,
    get_dme_extractor,
)

__all__ = [
    # Device Registry
    "DEFAULT_DEVICE_DEFINITIONS",
    "DeviceRegistry",
    "get_default_registry",
    "load_device_definitions",
    "load_device_registry",
    # Device Classifier
    "classify_device",
    "match_device",
    # Field Extraction
    "extract_device_fields",
    "extract_note_fields",
    "get_device_handler",
    "register_device_handler",
    # Pipeline
    "DmeDataExtractor",
    "get_dme_extractor",
]

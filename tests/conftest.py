"""
Pytest Configuration and Fixtures.
Shared test fixtures for all test modules.
"""

import pytest

from dme_intake.schemas.dme import DeviceDefinition
from dme_intake.services.extraction.device_registry import (
    DeviceRegistry,
    get_default_registry,
)
from dme_intake.services.extraction.dme_extractor import DmeDataExtractor


CPAP_NOTE = (
    "Patient Name: John Doe\n"
    "CPAP therapy with full face mask and humidifier needed.\n"
    "AHI > 20 documented.\n"
    "Ordering Physician: Dr. House"
)

OXYGEN_NOTE = (
    "Patient Name: Harold Finch\n"
    "DOB: 04/12/1952\n"
    "Diagnosis: COPD\n"
    "Requires portable oxygen tank delivering 2 L per minute.\n"
    "Usage: During sleep and exertion.\n"
    "Ordering Physician: Dr. Cuddy"
)


@pytest.fixture
def cpap_note() -> str:
    """CPAP order with mask, humidifier and AHI threshold."""
    return CPAP_NOTE


@pytest.fixture
def oxygen_note() -> str:
    """Oxygen order with demographics, flow rate and usage."""
    return OXYGEN_NOTE


@pytest.fixture
def default_registry() -> DeviceRegistry:
    """Registry built from the built-in device list."""
    return get_default_registry()


@pytest.fixture
def extractor(default_registry) -> DmeDataExtractor:
    """Extractor using the built-in device list."""
    return DmeDataExtractor(default_registry)


@pytest.fixture
def hospital_bed_definition() -> DeviceDefinition:
    """Device that exists only in configuration."""
    return DeviceDefinition(
        name="Hospital Bed",
        keywords=("hospital bed", "adjustable bed"),
        priority=1,
    )


# Configure pytest markers
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )

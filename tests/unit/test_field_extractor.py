"""
Unit Tests for Field Extractors
Tests note-level fields, CPAP and oxygen fields, and handler dispatch
"""

import pytest

from dme_intake.services.extraction.field_extractor import (
    extract_cpap_add_ons,
    extract_cpap_fields,
    extract_cpap_qualifier,
    extract_date_of_birth,
    extract_device_fields,
    extract_diagnosis,
    extract_flow_rate,
    extract_mask_type,
    extract_note_fields,
    extract_ordering_provider,
    extract_oxygen_fields,
    extract_patient_name,
    extract_usage,
    get_device_handler,
    get_registered_devices,
    no_device_fields,
    register_device_handler,
)


# =============================================================================
# Note-Level Fields
# =============================================================================


@pytest.mark.unit
class TestOrderingProvider:
    """Test ordering provider extraction"""

    def test_extracts_provider(self):
        """Test a standard physician line"""
        assert extract_ordering_provider("Ordering Physician: Dr. House") == "Dr. House"

    def test_full_name(self):
        """Test a provider with first and last name"""
        assert extract_ordering_provider("Ordered by Dr. Gregory House.") == "Dr. Gregory House"

    def test_case_insensitive_prefix(self):
        """Test a lower-case prefix"""
        assert extract_ordering_provider("signed dr. cuddy") == "Dr. cuddy"

    def test_no_space_after_prefix(self):
        """Test a prefix directly followed by the name"""
        assert extract_ordering_provider("Dr.Wilson") == "Dr. Wilson"

    def test_name_stays_on_its_line(self):
        """Test that the name does not run into the next line"""
        note = "Ordering Physician: Dr. House\nDiagnosis: OSA"

        assert extract_ordering_provider(note) == "Dr. House"

    def test_missing_provider_is_unknown(self):
        """Test the placeholder when no provider is present"""
        assert extract_ordering_provider("No physician listed.") == "Unknown"


@pytest.mark.unit
class TestLabelledLines:
    """Test patient name, date of birth and diagnosis extraction"""

    def test_patient_name(self):
        """Test the rest of the line is captured and trimmed"""
        assert extract_patient_name("Patient Name:   John Doe  \nCPAP") == "John Doe"

    def test_patient_name_case_insensitive(self):
        """Test a lower-case label"""
        assert extract_patient_name("patient name: Jane Roe") == "Jane Roe"

    def test_date_of_birth(self):
        """Test date of birth extraction"""
        assert extract_date_of_birth("DOB: 04/12/1952\nDiagnosis: COPD") == "04/12/1952"

    def test_diagnosis(self):
        """Test diagnosis extraction"""
        assert extract_diagnosis("Diagnosis: COPD, chronic hypoxemia\n") == "COPD, chronic hypoxemia"

    def test_windows_line_endings(self):
        """Test that carriage returns end the captured value"""
        assert extract_patient_name("Patient Name: John Doe\r\nDOB: 01/01/1950") == "John Doe"

    def test_absent_labels_are_none(self):
        """Test that missing labels leave fields unset"""
        note = "CPAP needed."

        assert extract_patient_name(note) is None
        assert extract_date_of_birth(note) is None
        assert extract_diagnosis(note) is None

    def test_blank_label_value_is_empty_string(self):
        """Test that a present but empty label differs from an absent one"""
        note = "Patient Name:\nDOB: 01/01/1950"

        assert extract_patient_name(note) == ""
        assert extract_date_of_birth(note) == "01/01/1950"

    def test_note_fields(self, oxygen_note):
        """Test all note-level fields together"""
        fields = extract_note_fields(oxygen_note)

        assert fields == {
            "ordering_provider": "Dr. Cuddy",
            "patient_name": "Harold Finch",
            "date_of_birth": "04/12/1952",
            "diagnosis": "COPD",
        }


# =============================================================================
# CPAP Fields
# =============================================================================


@pytest.mark.unit
class TestCpapFields:
    """Test CPAP-specific extraction"""

    @pytest.mark.parametrize(
        "note,expected",
        [
            ("full face mask", "full face"),
            ("Full Face mask with nasal bridge cushion", "full face"),
            ("nasal pillow mask", "nasal pillow"),
            ("Nasal Pillows preferred", "nasal pillow"),
            ("nasal mask", "nasal"),
            ("mask type not specified", None),
        ],
    )
    def test_mask_type(self, note, expected):
        """Test mask type specificity order"""
        assert extract_mask_type(note) == expected

    def test_nasal_pillow_never_reported_as_nasal(self):
        """Test that the specific phrase wins over the generic substring"""
        assert extract_mask_type("CPAP with nasal pillow interface") == "nasal pillow"

    def test_heated_humidifier(self):
        """Test that the heated variant wins and is the only add-on"""
        assert extract_cpap_add_ons("with heated humidifier") == frozenset({"heated humidifier"})

    def test_plain_humidifier(self):
        """Test the plain humidifier add-on"""
        assert extract_cpap_add_ons("with humidifier") == frozenset({"humidifier"})

    def test_add_ons_are_exclusive(self):
        """Test that at most one humidifier is recorded"""
        add_ons = extract_cpap_add_ons("heated humidifier; spare humidifier chamber")

        assert add_ons == frozenset({"heated humidifier"})

    def test_no_add_ons(self):
        """Test that no humidifier yields an empty set"""
        assert extract_cpap_add_ons("CPAP only") == frozenset()

    def test_ahi_threshold_qualifier(self):
        """Test the literal AHI threshold"""
        assert extract_cpap_qualifier("AHI > 20 documented") == "AHI > 20"

    def test_ahi_value_qualifier(self):
        """Test a reported AHI value"""
        assert extract_cpap_qualifier("Sleep study AHI: 32 events/hr") == "AHI: 32"

    def test_ahi_threshold_wins_over_value(self):
        """Test that the threshold phrase is checked first"""
        assert extract_cpap_qualifier("AHI: 25, AHI > 20") == "AHI > 20"

    def test_ahi_label_without_number(self):
        """Test that an AHI label without digits leaves the qualifier unset"""
        assert extract_cpap_qualifier("AHI: pending") is None

    def test_no_qualifier(self):
        """Test that no AHI mention leaves the qualifier unset"""
        assert extract_cpap_qualifier("CPAP needed") is None

    def test_cpap_fields(self, cpap_note):
        """Test all CPAP fields together"""
        assert extract_cpap_fields(cpap_note) == {
            "mask_type": "full face",
            "add_ons": frozenset({"humidifier"}),
            "qualifier": "AHI > 20",
        }


# =============================================================================
# Oxygen Fields
# =============================================================================


@pytest.mark.unit
class TestOxygenFields:
    """Test oxygen-specific extraction"""

    @pytest.mark.parametrize(
        "note,expected",
        [
            ("delivering 2 L per minute", "2 L"),
            ("2L via nasal cannula", "2 L"),
            ("1.5 liters per minute", "1.5 L"),
            ("3 Liter continuous", "3 L"),
            ("flow rate to be determined", None),
        ],
    )
    def test_flow_rate(self, note, expected):
        """Test flow rate formats"""
        assert extract_flow_rate(note) == expected

    def test_usage_single(self):
        """Test a single usage scenario"""
        assert extract_usage("Use during sleep.") == "sleep"

    def test_usage_fixed_order(self):
        """Test that scenarios are reported in fixed order, not text order"""
        note = "Use as needed, with exertion, continuous at night during sleep"

        assert extract_usage(note) == "sleep and exertion and continuous and as needed"

    def test_usage_none(self):
        """Test that no scenario leaves usage unset"""
        assert extract_usage("Oxygen 2 L") is None

    def test_oxygen_fields(self, oxygen_note):
        """Test all oxygen fields together"""
        assert extract_oxygen_fields(oxygen_note) == {
            "liters": "2 L",
            "usage": "sleep and exertion",
        }


# =============================================================================
# Handler Dispatch
# =============================================================================


@pytest.mark.unit
class TestDeviceHandlers:
    """Test device handler lookup"""

    def test_built_in_handlers_registered(self):
        """Test that CPAP and oxygen have handlers"""
        registered = get_registered_devices()

        assert "CPAP" in registered
        assert "Oxygen Tank" in registered

    def test_unknown_device_uses_no_op(self):
        """Test that unrecognized devices get no fields"""
        assert get_device_handler("Wheelchair") is no_device_fields
        assert extract_device_fields("wheelchair with 2 L oxygen", "Wheelchair") == {}
        assert extract_device_fields("anything", "Unknown") == {}

    def test_dispatch_by_name(self, cpap_note):
        """Test that dispatch uses the device name"""
        assert extract_device_fields(cpap_note, "CPAP")["mask_type"] == "full face"
        assert "mask_type" not in extract_device_fields(cpap_note, "Oxygen Tank")

    def test_register_new_handler(self):
        """Test registering a handler for a configured device"""

        @register_device_handler("Test Bed")
        def extract_bed_fields(note: str) -> dict:
            return {"qualifier": "rails" if "rails" in note else None}

        assert get_device_handler("Test Bed") is extract_bed_fields
        assert extract_device_fields("bed with rails", "Test Bed") == {"qualifier": "rails"}

"""
Unit Tests for Logging Configuration
Tests sink setup from settings and PHI filtering
"""

import sys

import pytest
from loguru import logger

from dme_intake.core.config import IntakeSettings
from dme_intake.utils.logging import (
    get_logger,
    get_phi_logger,
    phi_filter,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_log_sinks():
    """Drop sinks bound to captured streams once the test ends."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def collected():
    """Collect DEBUG+ messages into a list using the given PHI policy."""
    messages = []

    def _collect(allow_phi: bool) -> list:
        logger.remove()
        logger.add(messages.append, level="DEBUG", format="{message}", filter=phi_filter(allow_phi))
        return messages

    return _collect


@pytest.mark.unit
class TestPhiFilter:
    """Test PHI-tagged record filtering"""

    def test_untagged_records_pass(self, collected):
        """Test that ordinary records are never filtered"""
        messages = collected(allow_phi=False)

        get_logger("tests").info("Identified device type: CPAP")

        assert [m.strip() for m in messages] == ["Identified device type: CPAP"]

    def test_phi_dropped_by_default(self, collected):
        """Test that PHI records are dropped when PHI logging is off"""
        messages = collected(allow_phi=False)

        get_phi_logger("tests").debug("Identified ordering provider: Dr. House")

        assert messages == []

    def test_phi_allowed_at_debug(self, collected):
        """Test that PHI records pass at DEBUG when enabled"""
        messages = collected(allow_phi=True)

        get_phi_logger("tests").debug("Identified ordering provider: Dr. House")

        assert [m.strip() for m in messages] == ["Identified ordering provider: Dr. House"]

    def test_phi_never_above_debug(self, collected):
        """Test that PHI records logged at INFO or higher are always dropped"""
        messages = collected(allow_phi=True)

        phi_logger = get_phi_logger("tests")
        phi_logger.info("Patient Name: John Doe")
        phi_logger.warning("Patient Name: John Doe")

        assert messages == []


@pytest.mark.unit
class TestSetupLogging:
    """Test sink configuration from settings"""

    def test_console_sink_uses_settings(self, capsys):
        """Test the level and PHI policy taken from settings"""
        setup_logging(IntakeSettings(_env_file=None, LOG_LEVEL="DEBUG"))

        get_logger("tests").debug("Starting DME data extraction")
        get_phi_logger("tests").debug("Generated JSON payload: John Doe")

        err = capsys.readouterr().err
        assert "Starting DME data extraction" in err
        assert "John Doe" not in err

    def test_level_override(self, capsys):
        """Test that an explicit level wins over settings"""
        setup_logging(IntakeSettings(_env_file=None, LOG_LEVEL="DEBUG"), level="WARNING")

        get_logger("tests").info("Loaded 3 DME device configurations")

        assert "Loaded 3 DME device configurations" not in capsys.readouterr().err

    def test_file_sink(self, tmp_path):
        """Test the optional log file with PHI enabled"""
        log_file = tmp_path / "logs" / "dme_intake.log"
        settings = IntakeSettings(
            _env_file=None, LOG_LEVEL="DEBUG", LOG_FILE=str(log_file), LOG_PHI=True
        )

        setup_logging(settings)
        get_phi_logger("tests").debug("Identified ordering provider: Dr. Cuddy")
        logger.remove()

        content = log_file.read_text()
        assert "Identified ordering provider: Dr. Cuddy" in content
        assert "tests:" in content

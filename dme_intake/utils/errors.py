"""
Custom Exceptions
Error taxonomy for note intake, extraction and submission.
"""

from typing import Optional


class DmeIntakeError(Exception):
    """Base exception for DME intake errors."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail


class InvalidInputError(DmeIntakeError, ValueError):
    """Raised when a physician note is empty or whitespace only."""

    def __init__(self, detail: str = "Physician note cannot be empty"):
        super().__init__(detail, detail=detail)


class ConfigurationLoadError(DmeIntakeError):
    """Raised when a device configuration source is malformed or unreadable.

    Never leaves the registry loader; the loader substitutes the default
    device list and keeps the message for diagnostics.
    """

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message, detail=source)
        self.source = source


class NoteReadError(DmeIntakeError):
    """Raised when a physician note file exists but cannot be read."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, detail=path)
        self.path = path


class SubmissionError(DmeIntakeError):
    """Raised when the intake API does not accept an extraction result."""

    pass

"""
Physician Note Reader.

Reads a physician note from disk. Supports plain-text notes and JSON-wrapped
notes ({"data": ...}, {"note": ...} or {"content": ...}). A missing or empty
file yields a fallback note so the pipeline always has input.
"""

import json
from functools import partial
from pathlib import Path
from typing import Optional

from anyio import to_thread

from dme_intake.core.config import get_intake_settings
from dme_intake.core.enums import NoteFormat
from dme_intake.utils.errors import NoteReadError
from dme_intake.utils.logging import get_logger

logger = get_logger(__name__)


FALLBACK_NOTE = (
    "Patient needs a CPAP with full face mask and humidifier. "
    "AHI > 20. Ordered by Dr. Cameron."
)

# Checked in order
JSON_NOTE_KEYS = ("data", "note", "content")


class PhysicianNoteReader:
    """Reads physician notes from files."""

    def __init__(
        self,
        default_path: Optional[Path] = None,
        fallback_note: str = FALLBACK_NOTE,
    ):
        """
        Initialize PhysicianNoteReader.

        Args:
            default_path: Note file read when no path is given
            fallback_note: Note returned when the file is missing or empty
        """
        self.default_path = default_path or get_intake_settings().NOTE_FILE_PATH
        self.fallback_note = fallback_note

    async def read_physician_note(self, file_path: Optional[str | Path] = None) -> str:
        """
        Read a physician note.

        Args:
            file_path: Note file; defaults to the configured path

        Returns:
            Note text, unwrapped from JSON when applicable

        Raises:
            NoteReadError: If the file exists but cannot be read
        """
        note, _ = await self.read_note_with_format(file_path)
        return note

    async def read_note_with_format(
        self, file_path: Optional[str | Path] = None
    ) -> tuple[str, NoteFormat]:
        """
        Read a physician note and report how it was obtained.

        Args:
            file_path: Note file; defaults to the configured path

        Returns:
            (note text, NoteFormat)

        Raises:
            NoteReadError: If the file exists but cannot be read
        """
        target_path = Path(file_path) if file_path else Path(self.default_path)

        if not target_path.exists():
            logger.warning(
                f"Physician note file not found at path: {target_path}. Using fallback content."
            )
            return self.fallback_note, NoteFormat.FALLBACK

        logger.info(f"Reading physician note from file: {target_path}")
        try:
            file_content = await to_thread.run_sync(
                partial(target_path.read_text, encoding="utf-8", errors="replace")
            )
        except PermissionError as e:
            logger.error(f"Access denied when reading physician note file: {target_path}")
            raise NoteReadError(
                f"Cannot access physician note file: {target_path}", path=str(target_path)
            ) from e
        except OSError as e:
            logger.error(f"Error reading physician note file {target_path}: {e}")
            raise NoteReadError(
                f"Error reading physician note file: {target_path}", path=str(target_path)
            ) from e

        if not file_content.strip():
            logger.warning("Physician note file is empty. Using fallback content.")
            return self.fallback_note, NoteFormat.FALLBACK

        note, note_format = unwrap_note_content(file_content)
        logger.debug(f"Successfully processed physician note content ({note_format.value})")
        return note, note_format


def unwrap_note_content(raw_content: str) -> tuple[str, NoteFormat]:
    """
    Detect a JSON-wrapped note and return its text.

    Args:
        raw_content: File content

    Returns:
        (note text, detected format). JSON objects without a recognized
        key and non-object JSON are returned verbatim as plain text.
    """
    try:
        payload = json.loads(raw_content)
    except json.JSONDecodeError:
        return raw_content, NoteFormat.PLAIN_TEXT

    if not isinstance(payload, dict):
        return raw_content, NoteFormat.PLAIN_TEXT

    for key in JSON_NOTE_KEYS:
        value = payload.get(key)
        if value is not None:
            logger.debug(f"Found JSON-wrapped note with '{key}' property")
            text = value if isinstance(value, str) else json.dumps(value)
            return text, NoteFormat.JSON_WRAPPED

    logger.debug("JSON detected but no recognized note property found. Using raw JSON.")
    return raw_content, NoteFormat.PLAIN_TEXT

"""
DME Data Processor.

Coordinates the intake workflow for one physician note:
read the note, extract the DME order, submit it to the intake API.
"""

from pathlib import Path
from typing import Optional

from dme_intake.gateways.intake_gateway import DmeIntakeGateway
from dme_intake.schemas.dme import ExtractionResult
from dme_intake.services.extraction.dme_extractor import DmeDataExtractor
from dme_intake.services.note_reader import PhysicianNoteReader
from dme_intake.utils.errors import SubmissionError
from dme_intake.utils.logging import get_logger

logger = get_logger(__name__)


class DmeDataProcessor:
    """Runs read, extract and submit for physician notes."""

    def __init__(
        self,
        note_reader: Optional[PhysicianNoteReader] = None,
        extractor: Optional[DmeDataExtractor] = None,
        gateway: Optional[DmeIntakeGateway] = None,
    ):
        """
        Initialize DmeDataProcessor.

        Args:
            note_reader: PhysicianNoteReader instance
            extractor: DmeDataExtractor instance
            gateway: DmeIntakeGateway instance
        """
        self.note_reader = note_reader or PhysicianNoteReader()
        self.extractor = extractor or DmeDataExtractor()
        self.gateway = gateway or DmeIntakeGateway()

    async def extract_physician_note(
        self, file_path: Optional[str | Path] = None
    ) -> ExtractionResult:
        """
        Read and extract a physician note without submitting it.

        Args:
            file_path: Note file; defaults to the reader's configured path

        Returns:
            ExtractionResult
        """
        physician_note = await self.note_reader.read_physician_note(file_path)
        logger.info(
            f"Successfully read physician note (length: {len(physician_note)} characters)"
        )

        result = self.extractor.extract(physician_note)
        logger.info(f"Extracted DME data for device: {result.device}")
        return result

    async def process_physician_note(
        self, file_path: Optional[str | Path] = None
    ) -> ExtractionResult:
        """
        Read, extract and submit a physician note.

        Args:
            file_path: Note file; defaults to the reader's configured path

        Returns:
            The submitted ExtractionResult

        Raises:
            SubmissionError: If the intake API does not accept the result
            NoteReadError: If the note file cannot be read
            InvalidInputError: If the note text is blank
        """
        try:
            logger.info("Beginning physician note processing")
            result = await self.extract_physician_note(file_path)

            if not await self.gateway.submit(result):
                logger.warning("Failed to submit DME data to external API")
                raise SubmissionError(
                    "API submission failed", detail=self.gateway.endpoint
                )

            logger.info("Successfully submitted DME data to external API")
            return result
        except Exception as e:
            logger.error(f"Error occurred during physician note processing: {e}")
            raise

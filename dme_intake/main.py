"""
DME Intake Command Line.

Reads a physician note, extracts the DME order and submits it to the intake
API.

Usage:
    dme-intake [--note PATH] [--devices PATH] [--endpoint URL] [--dry-run]

Options:
    --note        Physician note file (default: DME_NOTE_FILE_PATH)
    --devices     YAML/JSON device configuration (default: DME_DEVICES_CONFIG_PATH)
    --endpoint    Intake API endpoint (default: DME_API_ENDPOINT)
    --dry-run     Print the payload instead of submitting it
    --log-level   Log level (default: DME_LOG_LEVEL)
    --json-logs   Emit JSON log records
"""

import argparse
import asyncio
import json
import sys
from dataclasses import replace
from typing import Optional

from dme_intake.core.config import get_intake_settings
from dme_intake.gateways.base import GatewayConfig
from dme_intake.gateways.intake_gateway import DmeIntakeGateway, build_intake_payload
from dme_intake.services.extraction.device_registry import load_device_registry
from dme_intake.services.extraction.dme_extractor import DmeDataExtractor
from dme_intake.services.note_reader import PhysicianNoteReader
from dme_intake.services.processor import DmeDataProcessor
from dme_intake.utils.errors import DmeIntakeError
from dme_intake.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="dme-intake",
        description="Extract DME orders from physician notes and submit them",
    )
    parser.add_argument("--note", help="Physician note file")
    parser.add_argument("--devices", help="YAML or JSON device configuration file")
    parser.add_argument("--endpoint", help="Intake API endpoint")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the extracted payload instead of submitting it",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level",
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log records")
    return parser


async def run(args: argparse.Namespace) -> int:
    """Run the intake workflow; returns the process exit code."""
    settings = get_intake_settings()

    device_source = args.devices or settings.device_config_source
    extractor = DmeDataExtractor(load_device_registry(device_source))
    reader = PhysicianNoteReader(default_path=settings.NOTE_FILE_PATH)

    config = GatewayConfig.from_settings(settings)
    if args.endpoint:
        config = replace(config, endpoint=args.endpoint)

    async with DmeIntakeGateway(config) as gateway:
        processor = DmeDataProcessor(note_reader=reader, extractor=extractor, gateway=gateway)
        try:
            logger.info("Starting DME data extraction process")
            if args.dry_run:
                result = await processor.extract_physician_note(args.note)
                print(json.dumps(build_intake_payload(result), indent=2))
            else:
                await processor.process_physician_note(args.note)
            logger.info("DME data extraction completed successfully")
            return 0
        except DmeIntakeError as e:
            logger.error(f"Fatal error occurred during DME processing: {e}")
            return 1


def main(argv: Optional[list[str]] = None) -> int:
    """Console entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(
        get_intake_settings(),
        level=args.log_level,
        json_logs=True if args.json_logs else None,
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())

"""
VIN report command line.

Usage:
    python -m vinreport.main render report.json out.pdf [--verbose]
    python -m vinreport.main decode 1HGCM82633A004352
    python -m vinreport.main deliver 1HGCM82633A004352 buyer@example.com
"""

import argparse
import asyncio
import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from vinreport.config import settings
from vinreport.clients import NhtsaClient, UpstreamFetchFailure, EmailDispatchError, VinDecodeError
from vinreport.services import RenderFailure, deliver_report, generate_report_pdf

# Configure logging
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
logger = logging.getLogger(__name__)


def setup_logging():
    """Console logging plus a rotating file for raw provider responses"""
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT
    )

    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(exist_ok=True)

    responses_logger = logging.getLogger('carsimulcast.responses')
    responses_logger.setLevel(logging.DEBUG)

    # File handler with rotation (10MB max, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_dir / 'carsimulcast_responses.log',
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    responses_logger.addHandler(file_handler)

    logger.info(f"Provider response logging configured: {log_dir / 'carsimulcast_responses.log'}")


async def cmd_render(args) -> int:
    payload = json.loads(Path(args.payload).read_text(encoding='utf-8'))
    pdf = await generate_report_pdf(payload, verbose=args.verbose or settings.REPORT_VERBOSE)
    Path(args.output).write_bytes(pdf)
    logger.info(f"Wrote {len(pdf)} bytes to {args.output}")
    return 0


async def cmd_decode(args) -> int:
    decoded = await NhtsaClient().decode_vin(args.vin)
    print(json.dumps(decoded, indent=2))
    return 0


async def cmd_deliver(args) -> int:
    result = await deliver_report(args.vin, args.email, verbose=args.verbose or None)
    logger.info(f"Delivered report for {result['vin']} ({result['size']} bytes)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Vehicle history report generator")
    sub = parser.add_subparsers(dest='command', required=True)

    p_render = sub.add_parser('render', help="Render a JSON payload to PDF")
    p_render.add_argument('payload', help="Path to provider JSON payload")
    p_render.add_argument('output', help="Output PDF path")
    p_render.add_argument('--verbose', action='store_true', help="Append raw payload dump")
    p_render.set_defaults(handler=cmd_render)

    p_decode = sub.add_parser('decode', help="Free NHTSA VIN decode")
    p_decode.add_argument('vin')
    p_decode.set_defaults(handler=cmd_decode)

    p_deliver = sub.add_parser('deliver', help="Fetch, render and email a report")
    p_deliver.add_argument('vin')
    p_deliver.add_argument('email')
    p_deliver.add_argument('--verbose', action='store_true', help="Append raw payload dump")
    p_deliver.set_defaults(handler=cmd_deliver)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    try:
        return asyncio.run(args.handler(args))
    except (UpstreamFetchFailure, VinDecodeError, RenderFailure, EmailDispatchError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

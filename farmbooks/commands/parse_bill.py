import argparse
import json
import logging
import sys
from pathlib import Path

from farmbooks.core.logging_config import setup_logging
from farmbooks.parsers.electricity_bill import parse_electricity_bill
from farmbooks.parsers.errors import BillParseError

log = logging.getLogger(__name__)


def main(argv=None) -> int:
    """
    Parses a single electricity bill PDF and prints the structured data as JSON.
    """
    parser = argparse.ArgumentParser(
        description="Parse an electricity bill PDF and output the parsed data."
    )
    parser.add_argument("pdf_path", type=Path, help="Path to the bill PDF file.")
    args = parser.parse_args(argv)

    setup_logging()
    log.info(f"Parsing bill: {args.pdf_path}")

    try:
        parsed = parse_electricity_bill(args.pdf_path.read_bytes())
    except BillParseError as e:
        log.error(f"Failed to parse bill: {e}")
        return 1

    print(json.dumps(parsed.model_dump(by_alias=True, mode="json"), indent=2))
    log.info("Successfully parsed bill.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

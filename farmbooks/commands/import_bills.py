import argparse
import logging
import sys
from pathlib import Path

from sqlmodel import Session

from farmbooks.core.config import settings
from farmbooks.core.logging_config import setup_logging
from farmbooks.db.database import create_db_and_tables
from farmbooks.db.database import engine
from farmbooks.services.bill_manager import BillManager

log = logging.getLogger(__name__)


def import_bills(bills_dir: Path) -> int:
    """
    Import every electricity bill PDF in a directory into the database.
    Returns the number of files that could not be parsed.
    """
    if not bills_dir.is_dir():
        log.error(f"Bills directory {bills_dir} not found!")
        return 1

    create_db_and_tables()
    with Session(engine) as session:
        report = BillManager(db=session).import_directory(bills_dir)

    for failure in report.failures:
        print(f"FAILED  {failure.file_name}: {failure.error}")
    for file_name in report.duplicates:
        print(f"SKIPPED {file_name}: already imported")
    print(
        f"{len(report.saved)} imported, {len(report.duplicates)} skipped, "
        f"{len(report.failures)} failed"
    )
    return len(report.failures)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Import a directory of electricity bill PDFs."
    )
    parser.add_argument(
        "bills_dir",
        type=Path,
        nargs="?",
        default=Path(settings.BILLS_DIR),
        help="Directory containing bill PDFs.",
    )
    args = parser.parse_args(argv)

    setup_logging()
    return 1 if import_bills(args.bills_dir) else 0


if __name__ == "__main__":
    sys.exit(main())

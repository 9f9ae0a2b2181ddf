import logging
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from farmbooks.db import crud
from farmbooks.db import models
from farmbooks.parsers.electricity_bill import ElectricityBillParser
from farmbooks.parsers.electricity_bill import ParsedBill
from farmbooks.parsers.electricity_bill import TextExtractor
from farmbooks.parsers.electricity_bill import extract_pdf_text
from farmbooks.parsers.errors import BillParseError
from farmbooks.parsers.expense_bill import BillSummary
from farmbooks.parsers.expense_bill import parse_expense_bill_text
from farmbooks.services.allocation import Allocation
from farmbooks.services.allocation import allocate_equally

log = logging.getLogger(__name__)


class DuplicateBillError(ValueError):
    def __init__(self, parsed: ParsedBill):
        super().__init__(
            "A bill with this date range and account number already exists"
        )
        self.account_number = parsed.account_number
        self.range_start = parsed.bill_date_range_start
        self.range_end = parsed.bill_date_range_end


class NoPartiesError(LookupError):
    pass


@dataclass
class ImportFailure:
    file_name: str
    error: str


@dataclass
class ImportReport:
    saved: list[models.ElectricityBill] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)
    failures: list[ImportFailure] = field(default_factory=list)


@dataclass
class ExpenseAllocation:
    bill: BillSummary
    allocations: list[Allocation]
    description: str


class BillManager:
    def __init__(self, db: Session, extract_text: TextExtractor = extract_pdf_text):
        self.db = db
        self.extract_text = extract_text
        self.parser = ElectricityBillParser(extract_text)

    def parse_pdf(self, data: bytes) -> ParsedBill:
        return self.parser.parse(data)

    def save_parsed_bill(
        self, parsed: ParsedBill, pdf_file_path: Optional[str] = None
    ) -> models.ElectricityBill:
        """
        Store a parsed bill. Raises DuplicateBillError if the account already
        has a bill for the same metering period.
        """
        existing = crud.get_electricity_bill_by_period(
            self.db,
            parsed.account_number,
            parsed.bill_date_range_start,
            parsed.bill_date_range_end,
        )
        if existing:
            raise DuplicateBillError(parsed)

        try:
            bill = crud.create_electricity_bill(
                self.db, models.ElectricityBill.from_parsed(parsed, pdf_file_path)
            )
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateBillError(parsed) from e

        log.info(
            f"Saved electricity bill {bill.id} for account {bill.account_number} "
            f"({bill.bill_date_range_start} - {bill.bill_date_range_end})"
        )
        return bill

    def ingest_pdf(
        self, data: bytes, pdf_file_path: Optional[str] = None
    ) -> models.ElectricityBill:
        """Parse a bill PDF and save the result."""
        return self.save_parsed_bill(self.parse_pdf(data), pdf_file_path)

    def import_directory(self, bills_dir: Path) -> ImportReport:
        """
        Parse and save every PDF in a directory. Each file is handled on its
        own: a duplicate, a parse failure or any other error is recorded and the
        import moves on.
        """
        report = ImportReport()
        pdf_files = sorted(bills_dir.glob("*.pdf"))
        log.info(f"Found {len(pdf_files)} PDF files to import from {bills_dir}")

        for pdf_file in pdf_files:
            log.info(f"Processing {pdf_file.name}...")
            try:
                bill = self.ingest_pdf(pdf_file.read_bytes(), str(pdf_file))
            except DuplicateBillError:
                log.info(f"Bill {pdf_file.name} already exists in database. Skipping.")
                report.duplicates.append(pdf_file.name)
            except BillParseError as e:
                log.error(f"Error parsing {pdf_file.name}: {e}")
                report.failures.append(ImportFailure(pdf_file.name, str(e)))
            except Exception as e:
                self.db.rollback()
                log.exception(f"Error processing {pdf_file.name}: {e}")
                report.failures.append(ImportFailure(pdf_file.name, str(e) or repr(e)))
            else:
                report.saved.append(bill)

        log.info(
            f"Finished import: {len(report.saved)} saved, "
            f"{len(report.duplicates)} duplicates, {len(report.failures)} failed"
        )
        return report

    def parse_expense_bill(self, data: bytes) -> BillSummary:
        return parse_expense_bill_text(self.extract_text(data))

    def allocate_expense_bill(self, summary: BillSummary) -> ExpenseAllocation:
        """
        Split an expense bill between the parties on its electricity account,
        or between every party when none is linked to that account.
        """
        parties = crud.get_parties_by_account_number(self.db, summary.account_number)
        if parties:
            return ExpenseAllocation(
                bill=summary,
                allocations=allocate_equally(parties),
                description=f"Synergy bill for {summary.account_number}",
            )

        parties = crud.get_all_parties(self.db)
        if not parties:
            raise NoPartiesError("No parties found in the system")

        log.info(
            f"No parties linked to account {summary.account_number}, splitting equally"
        )
        return ExpenseAllocation(
            bill=summary,
            allocations=allocate_equally(parties),
            description=f"Synergy bill for {summary.account_number} (equal split)",
        )

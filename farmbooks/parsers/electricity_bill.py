"""
Electricity Bill Parser

Turns an uploaded electricity bill PDF into a ParsedBill. The PDF-to-text
step is a pluggable collaborator (PyPDF2 by default); everything after it is
pure pattern matching over the extracted text.
"""

import io
import logging
from datetime import date
from typing import Callable

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import model_validator
from pydantic.alias_generators import to_camel
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from farmbooks.parsers import fields
from farmbooks.parsers.errors import PdfTextError
from farmbooks.parsers.meter_reading import find_meter_reading

log = logging.getLogger(__name__)

TextExtractor = Callable[[bytes], str]


class ParsedBill(BaseModel):
    """
    Structured fields of one electricity bill.

    Serialises with camelCase aliases (accountNumber, billDateRangeStart, ...)
    which is the shape stored against (account, period start, period end).
    """

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel
    )

    account_number: str = Field(min_length=1)
    bill_amount: float = Field(ge=0)
    bill_date: date
    bill_date_range_start: date
    bill_date_range_end: date
    total_units_consumed: float = Field(ge=0)
    units_per_day: float = Field(ge=0)
    is_estimated: bool
    meter_reading: float = Field(gt=0)

    @model_validator(mode="after")
    def _check_range(self) -> "ParsedBill":
        if self.bill_date_range_end < self.bill_date_range_start:
            raise ValueError("billDateRangeEnd must not be before billDateRangeStart")
        return self


def extract_pdf_text(data: bytes) -> str:
    """Concatenate the text of every page of a PDF."""
    try:
        reader = PdfReader(io.BytesIO(data))
        text = "\n".join(page.extract_text() or "" for page in reader.pages)
    except PdfReadError as e:
        raise PdfTextError(f"Could not read PDF: {e}") from e
    # Broken object trees surface as plain lookup/type errors from PyPDF2
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise PdfTextError(f"Malformed PDF structure: {e!r}") from e

    if not text.strip():
        raise PdfTextError("PDF contains no extractable text")
    log.debug(f"Extracted {len(text)} characters from PDF")
    return text


class ElectricityBillParser:
    """Parses electricity bills into ParsedBill records."""

    def __init__(self, extract_text: TextExtractor = extract_pdf_text):
        self.extract_text = extract_text

    def parse(self, data: bytes) -> ParsedBill:
        """Parse the raw bytes of one bill PDF."""
        return self.parse_text(self.extract_text(data))

    def parse_text(self, text: str) -> ParsedBill:
        """
        Assemble a ParsedBill from extracted bill text.

        Fails fast on the first missing required field (account number,
        amount, bill date, units consumed, meter reading). The date range and
        units per day fall back to defaults instead of failing.
        """
        account_number = fields.locate_account_number(text)
        bill_amount = fields.locate_amount(text)
        bill_date = fields.locate_bill_date(text)
        range_start, range_end = fields.locate_date_range(text, bill_date)
        total_units = fields.locate_units_consumed(text)
        units_per_day = fields.locate_units_per_day(
            text, total_units, range_start, range_end
        )
        reading = find_meter_reading(text)

        bill = ParsedBill(
            account_number=account_number,
            bill_amount=bill_amount,
            bill_date=bill_date,
            bill_date_range_start=range_start,
            bill_date_range_end=range_end,
            total_units_consumed=total_units,
            units_per_day=units_per_day,
            is_estimated=fields.is_estimated(text),
            meter_reading=reading.current,
        )
        log.info(
            f"Parsed bill for account {bill.account_number} "
            f"({bill.bill_date_range_start} - {bill.bill_date_range_end}), "
            f"meter reading {bill.meter_reading} via {reading.grouping}"
        )
        return bill


def parse_electricity_bill_text(text: str) -> ParsedBill:
    return ElectricityBillParser().parse_text(text)


def parse_electricity_bill(
    data: bytes, extract_text: TextExtractor = extract_pdf_text
) -> ParsedBill:
    return ElectricityBillParser(extract_text).parse(data)

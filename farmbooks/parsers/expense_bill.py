"""
Quick parse of a supplier bill into the three fields needed to pre-fill an
expense entry: account number, amount and date.
"""

import datetime
import logging

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic.alias_generators import to_camel

from farmbooks.parsers import fields
from farmbooks.parsers.electricity_bill import TextExtractor
from farmbooks.parsers.electricity_bill import extract_pdf_text

log = logging.getLogger(__name__)

EXPENSE_AMOUNT_PATTERNS = (
    fields.pattern_row(
        "bill amount label",
        rf"(?:This\s*bill|New\s*charges)[\s:]*\$?\s*{fields.NUMBER}",
    ),
)

EXPENSE_DATE_PATTERNS = (
    fields.pattern_row(
        "issue date label",
        rf"(?:Date\s*of\s*issue|Bill\s*Date)[\s:]*({fields.NAMED_DATE})",
    ),
    *fields.BILL_DATE_PATTERNS[1:],
)


class BillSummary(BaseModel):
    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel
    )

    account_number: str = Field(min_length=1)
    amount: float = Field(ge=0)
    date: datetime.date


def parse_expense_bill_text(text: str) -> BillSummary:
    summary = BillSummary(
        account_number=fields.locate_account_number(text),
        amount=fields.locate_amount(text, EXPENSE_AMOUNT_PATTERNS, field="amount"),
        date=fields.locate_bill_date(text, EXPENSE_DATE_PATTERNS, field="date"),
    )
    log.info(f"Parsed expense bill for account {summary.account_number}")
    return summary


def parse_expense_bill(
    data: bytes, extract_text: TextExtractor = extract_pdf_text
) -> BillSummary:
    return parse_expense_bill_text(extract_text(data))

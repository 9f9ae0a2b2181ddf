"""Parsers that turn uploaded bill PDFs into structured records."""

from .electricity_bill import ElectricityBillParser, ParsedBill
from .errors import (
    BillParseError,
    InvalidMeterReading,
    MeterReadingNotFound,
    MissingField,
    UnparsableAmount,
    UnparsableDate,
)
from .expense_bill import BillSummary

__all__ = [
    "BillParseError",
    "BillSummary",
    "ElectricityBillParser",
    "InvalidMeterReading",
    "MeterReadingNotFound",
    "MissingField",
    "ParsedBill",
    "UnparsableAmount",
    "UnparsableDate",
]

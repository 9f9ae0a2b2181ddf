"""
Field Locator

Finds the scalar fields of a bill in text extracted from its PDF. Bill layouts
differ between issuers and over time, and the extracted text is often
inconsistently kerned ("A c c o u n t"), so each field is described by a
ranked table of patterns. The first pattern that matches wins; supporting a
new layout means adding a row, not touching control flow.
"""

import logging
import math
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional
from typing import Sequence
from typing import Tuple

from farmbooks.parsers.dates import NAMED_DATE
from farmbooks.parsers.dates import NUMERIC_DATE
from farmbooks.parsers.dates import parse_date
from farmbooks.parsers.errors import MissingField
from farmbooks.parsers.errors import UnparsableAmount
from farmbooks.parsers.errors import UnparsableDate

log = logging.getLogger(__name__)

NUMBER = r"([\d,]+\.?\d*)"
ESTIMATED_MARKER = "^"


@dataclass(frozen=True)
class FieldPattern:
    description: str
    regex: re.Pattern


def pattern_row(description: str, pattern: str) -> FieldPattern:
    return FieldPattern(description, re.compile(pattern, re.IGNORECASE))


# --- Pattern Tables (most specific first) ---

ACCOUNT_PATTERNS = (
    pattern_row(
        "account label",
        r"(?:Account|A\s*c\s*c\s*o\s*u\s*n\s*t)(?:\s*Number|\s*n\s*u\s*m\s*b\s*e\s*r)?[\s:]*((?:\d[ \t]*){9,12})",
    ),
)

AMOUNT_PATTERNS = (
    pattern_row(
        "amount due label",
        rf"(?:This\s*bill|New\s*charges|Total\s*amount\s*due|Amount\s*due)[\s:]*\$?\s*{NUMBER}",
    ),
    pattern_row("generic total label", rf"(?:Total|Amount)[\s:]*\$?\s*{NUMBER}"),
    pattern_row("first numeral", rf"\$?\s*{NUMBER}"),
)

BILL_DATE_PATTERNS = (
    pattern_row(
        "issue date label",
        rf"(?:Date\s*of\s*issue|Bill\s*Date|Issue\s*Date)[\s:]*({NAMED_DATE})",
    ),
    pattern_row("first named date", rf"({NAMED_DATE})"),
    pattern_row("numeric date label", rf"(?:Bill\s*)?Date[\s:]*({NUMERIC_DATE})"),
)

_RANGE_SEPARATOR = r"[\s\-–]+(?:(?:to|and)\s+)?"

DATE_RANGE_PATTERNS = (
    pattern_row(
        "period label",
        rf"(?:Reading\s*period|Billing\s*period|Period|From|Between)[\s:]*({NAMED_DATE}){_RANGE_SEPARATOR}({NAMED_DATE})",
    ),
    pattern_row("adjacent dates", rf"({NAMED_DATE}){_RANGE_SEPARATOR}({NAMED_DATE})"),
)

UNITS_PATTERNS = (
    # Usage chart caption, the most reliable source
    pattern_row("usage chart caption", r"This\s*bill:\s*(\d+\.?\d*)"),
    pattern_row(
        "consumption label",
        rf"(?:Units\s*imported\s*\(kWh\)|Total\s*consumption|Total\s*usage|Units\s*consumed)[\s:]*{NUMBER}",
    ),
    pattern_row("bill kWh label", rf"(?:This\s*bill|Current\s*bill)[\s:]*{NUMBER}\s*kWh"),
    pattern_row("any kWh figure", rf"{NUMBER}\s*kWh"),
)

UNITS_PER_DAY_PATTERNS = (
    pattern_row(
        "average daily usage label",
        rf"(?:Your\s*average\s*daily\s*usage|Average\s*daily\s*usage)[\s:]*{NUMBER}",
    ),
)


def first_match(
    text: str, patterns: Sequence[FieldPattern]
) -> Optional[Tuple[FieldPattern, re.Match]]:
    """Return the first (pattern, match) pair in table order, or None."""
    for pattern in patterns:
        match = pattern.regex.search(text)
        if match:
            return pattern, match
    return None


def to_number(raw: str, field: str) -> float:
    """Parse a captured numeral, dropping thousands separators."""
    try:
        value = float(raw.replace(",", ""))
    except ValueError as e:
        raise UnparsableAmount(field, raw) from e
    if not math.isfinite(value):
        raise UnparsableAmount(field, raw)
    return value


def locate_account_number(
    text: str, patterns: Sequence[FieldPattern] = ACCOUNT_PATTERNS
) -> str:
    found = first_match(text, patterns)
    if not found:
        raise MissingField("accountNumber")
    pattern, match = found
    account_number = re.sub(r"\s+", "", match.group(1)).upper()
    log.debug(f"Found account number {account_number} via {pattern.description}")
    return account_number


def locate_amount(
    text: str,
    patterns: Sequence[FieldPattern] = AMOUNT_PATTERNS,
    field: str = "billAmount",
) -> float:
    found = first_match(text, patterns)
    if not found:
        raise MissingField(field)
    pattern, match = found
    amount = to_number(match.group(1), field)
    log.debug(f"Found {field} {amount} via {pattern.description}")
    return amount


def locate_bill_date(
    text: str,
    patterns: Sequence[FieldPattern] = BILL_DATE_PATTERNS,
    field: str = "billDate",
) -> date:
    found = first_match(text, patterns)
    if not found:
        raise MissingField(field)
    pattern, match = found
    raw = match.group(1).strip()
    try:
        bill_date = parse_date(raw)
    except UnparsableDate as e:
        raise UnparsableDate(raw, field=field) from e
    log.debug(f"Found {field} {bill_date} via {pattern.description}")
    return bill_date


def locate_date_range(
    text: str,
    bill_date: date,
    patterns: Sequence[FieldPattern] = DATE_RANGE_PATTERNS,
) -> Tuple[date, date]:
    """
    Find the metering period. Falls back to (bill_date, bill_date) when no
    usable range is present; this never fails.
    """
    found = first_match(text, patterns)
    if not found:
        log.info("No date range found, using bill date for both start and end")
        return bill_date, bill_date

    pattern, match = found
    try:
        start = parse_date(match.group(1))
        end = parse_date(match.group(2))
    except UnparsableDate as e:
        log.warning(f"Ignoring unparsable date range ({e}), using bill date")
        return bill_date, bill_date

    if end < start:
        log.warning(
            f"Ignoring reversed date range {start} - {end}, using bill date"
        )
        return bill_date, bill_date

    log.debug(f"Found date range {start} to {end} via {pattern.description}")
    return start, end


def locate_units_consumed(
    text: str, patterns: Sequence[FieldPattern] = UNITS_PATTERNS
) -> float:
    found = first_match(text, patterns)
    if not found:
        raise MissingField("totalUnitsConsumed")
    pattern, match = found
    units = to_number(match.group(1), "totalUnitsConsumed")
    log.debug(f"Found total units consumed {units} via {pattern.description}")
    return units


def days_in_range(start: date, end: date) -> int:
    return (end - start).days


def locate_units_per_day(
    text: str,
    total_units: float,
    start: date,
    end: date,
    patterns: Sequence[FieldPattern] = UNITS_PER_DAY_PATTERNS,
) -> float:
    """
    Prefer an explicit average daily usage figure, otherwise divide the
    total by the length of the period (at least one day).
    """
    found = first_match(text, patterns)
    if found:
        pattern, match = found
        try:
            units_per_day = to_number(match.group(1), "unitsPerDay")
        except UnparsableAmount as e:
            log.warning(f"{e}; computing units per day instead")
        else:
            log.debug(f"Found units per day {units_per_day} via {pattern.description}")
            return units_per_day

    units_per_day = total_units / max(1, days_in_range(start, end))
    log.debug(f"Calculated units per day: {units_per_day}")
    return units_per_day


def is_estimated(text: str) -> bool:
    """The bill marks estimated readings with a caret."""
    return ESTIMATED_MARKER in text

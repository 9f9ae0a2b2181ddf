import re
from datetime import date

from farmbooks.parsers.errors import UnparsableDate

MONTH_MAP = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4,
    "may": 5, "jun": 6, "jul": 7, "aug": 8,
    "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

# "13 Mar 2018", "3 January 2021"
NAMED_DATE = r"\d{1,2}\s+(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\s+\d{4}"
# "13/03/2018", "1 3-0 3-2 018" (PDF text can carry stray spaces between digits)
NUMERIC_DATE = r"(?:\d\s*){1,2}[/-]\s*(?:\d\s*){1,2}[/-]\s*(?:\d\s*){4}"

NAMED_DATE_REGEX = re.compile(
    r"(?P<day>\d{1,2})\s+(?P<month>Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\s+(?P<year>\d{4})",
    re.IGNORECASE,
)


def parse_date(date_str: str) -> date:
    """
    Parse a bill date in either "D MMM YYYY" or "D/M/YYYY" form.

    Raises UnparsableDate when neither grammar fits or the result is not a
    real calendar day.
    """
    named = NAMED_DATE_REGEX.search(date_str)
    if named:
        day = int(named.group("day"))
        month = MONTH_MAP[named.group("month").lower()]
        year = int(named.group("year"))
    else:
        parts = re.split(r"[/-]", re.sub(r"\s+", "", date_str))
        if len(parts) != 3 or not all(part.isdigit() for part in parts):
            raise UnparsableDate(date_str)
        day, month, year = (int(part) for part in parts)

    try:
        return date(year, month, day)
    except ValueError as e:
        raise UnparsableDate(date_str) from e


def normalize_date(date_str: str) -> str:
    """Return the ISO YYYY-MM-DD form of a bill date string."""
    return parse_date(date_str).isoformat()

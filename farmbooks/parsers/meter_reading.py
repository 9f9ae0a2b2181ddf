"""
Meter Reading Disambiguator

The usage summary table on a bill has three columns: previous reading,
current reading and units consumed. PDF text extraction frequently flattens
that row into a single run of digits, e.g.

    Anytime usage8409084220130.0000

which is 84090 | 84220 | 130.0000. The column boundaries cannot be recovered
from the string alone, so each supported digit grouping is treated as a
hypothesis and checked against the meter arithmetic:

    current == previous + consumed   (within ROUNDING_TOLERANCE)

The first grouping, in GROUPINGS order, that reconciles is accepted.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterator
from typing import Optional

from farmbooks.parsers.errors import InvalidMeterReading
from farmbooks.parsers.errors import MeterReadingNotFound
from farmbooks.parsers.fields import ESTIMATED_MARKER

log = logging.getLogger(__name__)

USAGE_ANCHOR = "Anytime usage"
ROUNDING_TOLERANCE = 1.0

USAGE_LINE_REGEX = re.compile(re.escape(USAGE_ANCHOR) + r"[^\n]*", re.IGNORECASE)
ANCHOR_REGEX = re.compile(re.escape(USAGE_ANCHOR), re.IGNORECASE)
SPACED_REGEX = re.compile(r"^(\d+)\s+(\d+)\s+(\d+\.?\d*)$")


@dataclass(frozen=True)
class Grouping:
    label: str
    regex: re.Pattern


def _grouping(previous: int, current: int, consumed: Optional[int] = None) -> Grouping:
    consumed_digits = r"\d+" if consumed is None else rf"\d{{{consumed}}}"
    label = f"{previous}+{current}" + ("" if consumed is None else f"+{consumed}")
    return Grouping(
        f"{label} digits",
        re.compile(rf"^(\d{{{previous}}})(\d{{{current}}})({consumed_digits}\.?\d*)$"),
    )


# Tuned to the bill samples seen so far; widths outside this list are not
# recognised. Order matters: earlier groupings win when several reconcile.
GROUPINGS = (
    _grouping(5, 5),
    _grouping(4, 4),
    _grouping(4, 5),
    _grouping(5, 4),
    _grouping(6, 6, 5),
    _grouping(6, 6, 4),
    _grouping(6, 6, 3),
    _grouping(6, 6, 2),
    _grouping(5, 6, 3),
    _grouping(3, 3, 3),
    _grouping(3, 4, 3),
    _grouping(5, 4, 3),
)


@dataclass(frozen=True)
class MeterReadingCandidate:
    previous: float
    current: float
    consumed: float
    grouping: str

    def reconciles(self, tolerance: float = ROUNDING_TOLERANCE) -> bool:
        return abs(self.current - (self.previous + self.consumed)) <= tolerance


def usage_lines(text: str) -> list[str]:
    return USAGE_LINE_REGEX.findall(text)


def strip_usage_line(line: str) -> str:
    """Drop the anchor phrase and estimation markers from a usage line."""
    return ANCHOR_REGEX.sub("", line, count=1).replace(ESTIMATED_MARKER, "").strip()


def _candidate(match: re.Match, grouping: str) -> MeterReadingCandidate:
    previous, current, consumed = (float(group) for group in match.groups())
    return MeterReadingCandidate(previous, current, consumed, grouping)


def candidates(numbers: str) -> Iterator[MeterReadingCandidate]:
    """Yield every shape-compatible reading of a usage remainder, in priority order."""
    if re.search(r"\s", numbers):
        match = SPACED_REGEX.match(numbers)
        if match:
            yield _candidate(match, "spaced")
        return

    for grouping in GROUPINGS:
        match = grouping.regex.match(numbers)
        if match:
            yield _candidate(match, grouping.label)


def reconcile(numbers: str) -> Optional[MeterReadingCandidate]:
    """Return the first candidate satisfying the meter arithmetic, if any."""
    for candidate in candidates(numbers):
        if candidate.reconciles():
            log.debug(
                f"Accepted {candidate.grouping}: {candidate.previous} + "
                f"{candidate.consumed} = {candidate.current}"
            )
            return candidate
        log.debug(
            f"Rejected {candidate.grouping}: {candidate.previous} + "
            f"{candidate.consumed} != {candidate.current}"
        )
    return None


def find_meter_reading(text: str) -> MeterReadingCandidate:
    """
    Recover the current meter reading from the usage summary of a bill.

    Raises MeterReadingNotFound if there is no usage line or no grouping
    reconciles, and InvalidMeterReading if the reconciled reading is not
    positive.
    """
    lines = usage_lines(text)
    if not lines:
        raise MeterReadingNotFound(f"no '{USAGE_ANCHOR}' line")

    for line in lines:
        numbers = strip_usage_line(line)
        candidate = reconcile(numbers)
        if candidate is None:
            log.debug(f"No grouping reconciled usage line {numbers!r}")
            continue
        if candidate.current <= 0:
            raise InvalidMeterReading(candidate.current)
        return candidate

    raise MeterReadingNotFound(
        f"no digit grouping reconciled across {len(lines)} usage line(s)"
    )

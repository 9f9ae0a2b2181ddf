from datetime import date

import pytest

from farmbooks.parsers.dates import MONTH_MAP
from farmbooks.parsers.dates import normalize_date
from farmbooks.parsers.dates import parse_date
from farmbooks.parsers.errors import UnparsableDate


@pytest.mark.parametrize("abbreviation", sorted(MONTH_MAP))
def test_named_dates_normalize_with_zero_padding(abbreviation: str) -> None:
    month = MONTH_MAP[abbreviation]
    assert normalize_date(f"3 {abbreviation.title()} 2021") == f"2021-{month:02d}-03"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("3 Jan 2021", "2021-01-03"),
        ("13 Mar 2018", "2018-03-13"),
        ("13 March 2018", "2018-03-13"),
        ("1 SEP 2019", "2019-09-01"),
        ("13/03/2018", "2018-03-13"),
        ("5-6-2020", "2020-06-05"),
        ("1 3/0 4/2 018", "2018-04-13"),
    ],
)
def test_normalize_date_accepts_both_grammars(raw: str, expected: str) -> None:
    assert normalize_date(raw) == expected


def test_parse_date_returns_date_object() -> None:
    assert parse_date("29 Feb 2020") == date(2020, 2, 29)


@pytest.mark.parametrize("raw", ["31 Feb 2020", "32/01/2020", "2020", "no date here", "1/2"])
def test_parse_date_rejects_invalid_input(raw: str) -> None:
    with pytest.raises(UnparsableDate) as exc_info:
        parse_date(raw)
    assert exc_info.value.raw == raw

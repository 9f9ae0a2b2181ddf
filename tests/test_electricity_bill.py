from datetime import date

import pytest
from pydantic import ValidationError

from farmbooks.parsers.electricity_bill import ElectricityBillParser
from farmbooks.parsers.electricity_bill import extract_pdf_text
from farmbooks.parsers.electricity_bill import parse_electricity_bill
from farmbooks.parsers.electricity_bill import parse_electricity_bill_text
from farmbooks.parsers.errors import MeterReadingNotFound
from farmbooks.parsers.errors import MissingField
from farmbooks.parsers.errors import PdfTextError


def test_parse_full_bill(bill_text: str) -> None:
    bill = parse_electricity_bill_text(bill_text)

    assert bill.account_number == "291431120"
    assert bill.bill_amount == 245.6
    assert bill.bill_date == date(2018, 3, 13)
    assert bill.bill_date_range_start == date(2018, 1, 10)
    assert bill.bill_date_range_end == date(2018, 3, 9)
    assert bill.total_units_consumed == 268
    assert bill.units_per_day == 4.6207
    assert bill.is_estimated is False
    assert bill.meter_reading == 1604


def test_minimal_bill_uses_documented_fallbacks() -> None:
    text = (
        "Account Number: 291 431 120\n"
        "This bill: 268\n"
        "13 Mar 2018\n"
        "Anytime usage876 1604 728.0000\n"
    )
    bill = parse_electricity_bill_text(text)

    assert bill.account_number == "291431120"
    assert bill.total_units_consumed == 268
    assert bill.bill_date == date(2018, 3, 13)
    assert bill.meter_reading == 1604
    assert bill.bill_date_range_start == bill.bill_date_range_end == bill.bill_date
    assert bill.units_per_day == 268


def test_estimated_run_on_bill() -> None:
    text = (
        "Account Number 8001 2345 678\n"
        "New charges $312.45\n"
        "Date of issue 2 Feb 2021\n"
        "Billing period 1 Dec 2020 - 31 Jan 2021\n"
        "Total consumption 130\n"
        "Anytime usage^8409084220130.0000\n"
    )
    bill = parse_electricity_bill_text(text)

    assert bill.account_number == "80012345678"
    assert bill.bill_amount == 312.45
    assert bill.meter_reading == 84220
    assert bill.is_estimated is True
    assert bill.units_per_day == pytest.approx(130 / 61)


def test_missing_account_number_fails_first(bill_text: str) -> None:
    text = bill_text.replace("Account Number", "Customer")
    with pytest.raises(MissingField) as exc_info:
        parse_electricity_bill_text(text)
    assert exc_info.value.field == "accountNumber"


def test_unreconciled_meter_reading_fails(bill_text: str) -> None:
    text = bill_text.replace("876 1604 728.0000", "876 1704 728.0000")
    with pytest.raises(MeterReadingNotFound):
        parse_electricity_bill_text(text)


def test_parsing_is_deterministic(bill_text: str) -> None:
    parser = ElectricityBillParser()
    assert parser.parse_text(bill_text) == parser.parse_text(bill_text)


def test_parsed_bill_is_immutable(bill_text: str) -> None:
    bill = parse_electricity_bill_text(bill_text)
    with pytest.raises(ValidationError):
        bill.meter_reading = 1


def test_parsed_bill_serialises_with_storage_field_names(bill_text: str) -> None:
    payload = parse_electricity_bill_text(bill_text).model_dump(by_alias=True, mode="json")
    assert payload == {
        "accountNumber": "291431120",
        "billAmount": 245.6,
        "billDate": "2018-03-13",
        "billDateRangeStart": "2018-01-10",
        "billDateRangeEnd": "2018-03-09",
        "totalUnitsConsumed": 268.0,
        "unitsPerDay": 4.6207,
        "isEstimated": False,
        "meterReading": 1604.0,
    }


def test_text_extractor_is_pluggable(bill_text: str) -> None:
    seen = []

    def fake_extract(data: bytes) -> str:
        seen.append(data)
        return bill_text

    bill = parse_electricity_bill(b"%PDF-fake", extract_text=fake_extract)
    assert seen == [b"%PDF-fake"]
    assert bill.meter_reading == 1604


def test_unreadable_pdf_raises_parse_error() -> None:
    with pytest.raises(PdfTextError):
        extract_pdf_text(b"this is not a pdf")


def test_pdf_with_broken_page_tree_raises_parse_error(pdf_without_pages: bytes) -> None:
    with pytest.raises(PdfTextError):
        extract_pdf_text(pdf_without_pages)


def test_account_number_not_extended_by_next_line() -> None:
    text = (
        "Account Number: 291 431 120\n"
        "13 Mar 2018\n"
        "This bill: 268\n"
        "Anytime usage876 1604 728.0000\n"
    )
    assert parse_electricity_bill_text(text).account_number == "291431120"

import json

from farmbooks.commands import parse_bill as parse_bill_command
from farmbooks.parsers.electricity_bill import parse_electricity_bill


def test_parse_bill_command_prints_json(monkeypatch, tmp_path, capsys, bill_text, extract_text) -> None:
    pdf_path = tmp_path / "bill.pdf"
    pdf_path.write_text(bill_text)
    monkeypatch.setattr(parse_bill_command, "setup_logging", lambda: None)
    monkeypatch.setattr(
        parse_bill_command,
        "parse_electricity_bill",
        lambda data: parse_electricity_bill(data, extract_text=extract_text),
    )

    assert parse_bill_command.main([str(pdf_path)]) == 0
    assert json.loads(capsys.readouterr().out)["meterReading"] == 1604


def test_parse_bill_command_reports_failure(monkeypatch, tmp_path, extract_text) -> None:
    pdf_path = tmp_path / "bill.pdf"
    pdf_path.write_text("nothing useful")
    monkeypatch.setattr(parse_bill_command, "setup_logging", lambda: None)
    monkeypatch.setattr(
        parse_bill_command,
        "parse_electricity_bill",
        lambda data: parse_electricity_bill(data, extract_text=extract_text),
    )

    assert parse_bill_command.main([str(pdf_path)]) == 1

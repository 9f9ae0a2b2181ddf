"""
Errors raised while turning extracted bill text into structured fields.

Every error is terminal for the document being parsed. They all derive from
ValueError so callers that only care about "bad input" can catch that.
"""

from typing import Optional


class BillParseError(ValueError):
    """Base class for all bill parsing failures."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class MissingField(BillParseError):
    """A required label-anchored pattern was never found in the text."""

    def __init__(self, field: str):
        super().__init__(f"Could not find {field} in bill", field=field)


class UnparsableAmount(BillParseError):
    """A numeric pattern matched but the capture is not a valid number."""

    def __init__(self, field: str, raw: str):
        super().__init__(
            f"Could not parse {field} as a valid number: {raw!r}", field=field
        )
        self.raw = raw


class UnparsableDate(BillParseError):
    def __init__(self, raw: str, field: Optional[str] = None):
        super().__init__(f"Unable to parse date: {raw!r}", field=field)
        self.raw = raw


class MeterReadingNotFound(BillParseError):
    def __init__(self, detail: str = "no usage line reconciled"):
        super().__init__(
            f"Could not find meter reading in bill ({detail})",
            field="meterReading",
        )


class InvalidMeterReading(BillParseError):
    def __init__(self, value: float):
        super().__init__(
            f"Invalid meter reading {value} - must be a positive number",
            field="meterReading",
        )
        self.value = value


class PdfTextError(BillParseError):
    """The PDF could not be opened or yielded no text."""

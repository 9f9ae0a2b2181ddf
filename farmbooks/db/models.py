from datetime import date
from datetime import datetime
from datetime import timezone
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field
from sqlmodel import SQLModel

from farmbooks.parsers.electricity_bill import ParsedBill


class Party(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True)  # e.g., "North Paddock Lease"
    electricity_account_number: Optional[str] = Field(default=None, index=True)


class ElectricityBill(SQLModel, table=True):
    # One bill per account and metering period
    __table_args__ = (
        UniqueConstraint(
            "account_number",
            "bill_date_range_start",
            "bill_date_range_end",
            name="uq_electricitybill_account_period",
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    account_number: str = Field(index=True)
    bill_amount: float
    bill_date: date
    bill_date_range_start: date
    bill_date_range_end: date
    total_units_consumed: float
    units_per_day: Optional[float] = Field(default=None)
    is_estimated: bool = Field(default=False)
    meter_reading: Optional[float] = Field(default=None)
    pdf_file_path: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_parsed(
        cls, parsed: ParsedBill, pdf_file_path: Optional[str] = None
    ) -> "ElectricityBill":
        """Map a ParsedBill onto a storage row field for field."""
        return cls(**parsed.model_dump(), pdf_file_path=pdf_file_path)

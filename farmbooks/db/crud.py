from datetime import date
from typing import Optional
from typing import Sequence

from sqlmodel import Session
from sqlmodel import desc
from sqlmodel import select

from farmbooks.db import models

# --- Electricity Bill CRUD Functions ---


def create_electricity_bill(
    db: Session, bill: models.ElectricityBill
) -> models.ElectricityBill:
    """
    Add a new electricity bill record to the database.
    """
    db.add(bill)
    db.commit()
    db.refresh(bill)
    return bill


def get_electricity_bill_by_id(
    db: Session, bill_id: int
) -> models.ElectricityBill | None:
    """
    Retrieve a single electricity bill by its primary key ID.
    """
    return db.get(models.ElectricityBill, bill_id)


def get_electricity_bill_by_period(
    db: Session, account_number: str, range_start: date, range_end: date
) -> models.ElectricityBill | None:
    """
    Retrieve the bill stored for an account and metering period, if any.
    """
    statement = select(models.ElectricityBill).where(
        models.ElectricityBill.account_number == account_number,
        models.ElectricityBill.bill_date_range_start == range_start,
        models.ElectricityBill.bill_date_range_end == range_end,
    )
    return db.exec(statement).first()


def get_electricity_bills(
    db: Session,
    account_number: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> Sequence[models.ElectricityBill]:
    """
    Retrieve electricity bills, most recent bill date first.
    """
    statement = select(models.ElectricityBill)
    if account_number is not None:
        statement = statement.where(
            models.ElectricityBill.account_number == account_number
        )
    statement = statement.order_by(
        desc(models.ElectricityBill.bill_date), desc(models.ElectricityBill.id)
    ).offset(offset)
    if limit is not None:
        statement = statement.limit(limit)
    return db.exec(statement).all()


def delete_electricity_bill(db: Session, bill: models.ElectricityBill):
    """
    Delete an electricity bill from the database.
    """
    db.delete(bill)
    db.commit()


# --- Party CRUD Functions ---


def create_party(db: Session, party: models.Party) -> models.Party:
    """
    Add a new party to the database.
    """
    db.add(party)
    db.commit()
    db.refresh(party)
    return party


def get_all_parties(db: Session) -> Sequence[models.Party]:
    """
    Retrieve all parties, ordered by name.
    """
    statement = select(models.Party).order_by(models.Party.name)
    return db.exec(statement).all()


def get_parties_by_account_number(
    db: Session, account_number: str
) -> Sequence[models.Party]:
    """
    Retrieve the parties supplied through a given electricity account.
    """
    statement = (
        select(models.Party)
        .where(models.Party.electricity_account_number == account_number)
        .order_by(models.Party.name)
    )
    return db.exec(statement).all()

import logging
from typing import Any
from typing import Optional

from fastapi import APIRouter
from fastapi import Body
from fastapi import Depends
from fastapi import File
from fastapi import Query
from fastapi import UploadFile
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlmodel import Session

from farmbooks.core.config import settings
from farmbooks.db import crud
from farmbooks.db.database import engine
from farmbooks.parsers.electricity_bill import ParsedBill
from farmbooks.parsers.electricity_bill import TextExtractor
from farmbooks.parsers.electricity_bill import extract_pdf_text
from farmbooks.parsers.errors import BillParseError
from farmbooks.services.bill_manager import BillManager
from farmbooks.services.bill_manager import DuplicateBillError
from farmbooks.services.bill_manager import NoPartiesError

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_db_session():
    """
    Dependency to get a database session.
    """
    with Session(engine) as session:
        yield session


def get_text_extractor() -> TextExtractor:
    """
    Dependency providing the PDF-to-text step.
    """
    return extract_pdf_text


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _read_pdf_upload(file: Optional[UploadFile]) -> bytes | JSONResponse:
    if file is None:
        return _error("No file provided", 400)
    if file.content_type not in settings.ALLOWED_UPLOAD_MIME_TYPES:
        return _error("File must be a PDF", 400)
    data = await file.read()
    log.info(f"File received: {file.filename} ({len(data)} bytes, type: {file.content_type})")
    return data


@router.post("/parse-electricity-bill")
async def parse_electricity_bill(
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db_session),
    extract_text: TextExtractor = Depends(get_text_extractor),
):
    """
    Parse an uploaded electricity bill PDF without saving it.
    """
    data = await _read_pdf_upload(file)
    if isinstance(data, JSONResponse):
        return data

    try:
        parsed = BillManager(db, extract_text).parse_pdf(data)
    except BillParseError as e:
        log.warning(f"Electricity bill parsing error for {file.filename}: {e}")
        return _error(str(e), 400)

    return {"success": True, "data": parsed.model_dump(by_alias=True, mode="json")}


@router.post("/parse-bill")
async def parse_bill(
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db_session),
    extract_text: TextExtractor = Depends(get_text_extractor),
):
    """
    Parse a supplier bill PDF into expense fields and a party allocation.
    """
    data = await _read_pdf_upload(file)
    if isinstance(data, JSONResponse):
        return data

    bill_manager = BillManager(db, extract_text)
    try:
        summary = bill_manager.parse_expense_bill(data)
    except BillParseError as e:
        log.warning(f"Bill parsing error for {file.filename}: {e}")
        return _error(str(e), 400)

    try:
        expense = bill_manager.allocate_expense_bill(summary)
    except NoPartiesError as e:
        return _error(str(e), 404)

    return {
        **summary.model_dump(by_alias=True, mode="json"),
        "allocations": [
            {"party_id": a.party_id, "percentage": a.percentage}
            for a in expense.allocations
        ],
        "description": expense.description,
    }


@router.get("/electricity-bills")
def read_electricity_bills(
    account_number: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db_session),
):
    """
    List stored electricity bills, most recent first.
    """
    bills = crud.get_electricity_bills(
        db, account_number=account_number, limit=limit, offset=offset
    )
    return {"bills": [bill.model_dump(mode="json") for bill in bills]}


@router.post("/electricity-bills")
def create_electricity_bill(
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_db_session),
):
    """
    Save a (possibly user-corrected) parsed bill.
    """
    try:
        parsed = ParsedBill.model_validate(payload)
    except ValidationError as e:
        invalid = sorted(
            {".".join(map(str, err["loc"])) or "billDateRange" for err in e.errors()}
        )
        return _error(f"Missing or invalid fields: {', '.join(invalid)}", 400)

    try:
        bill = BillManager(db).save_parsed_bill(parsed)
    except DuplicateBillError as e:
        return _error(str(e), 400)

    return {
        "success": True,
        "bill": bill.model_dump(mode="json"),
        "message": "Electricity bill created successfully",
    }


@router.delete("/electricity-bills")
def delete_electricity_bill(
    id: Optional[int] = None,
    db: Session = Depends(get_db_session),
):
    if id is None:
        return _error("Bill ID is required", 400)

    bill = crud.get_electricity_bill_by_id(db, id)
    if not bill:
        return _error("Bill not found", 404)

    crud.delete_electricity_bill(db, bill)
    return {"success": True, "message": "Electricity bill deleted successfully"}

"""GET /v1/bills - transfer invoices extracted from Nalo PDFs"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from nalo_connector.api.v1.schemas import BillSchema, BillsResponse
from nalo_connector.infrastructure.database.session import get_db
from nalo_connector.infrastructure.database.repositories import BillRepository

router = APIRouter()


@router.get("/bills", response_model=BillsResponse)
def list_bills(
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    bills = BillRepository(db).list_bills(limit=limit)

    return BillsResponse(
        bills=[
            BillSchema(
                bill_id=str(b.id),
                filename=b.file.filename,
                vendor=b.vendor,
                date=b.date,
                amount=b.amount,
                currency=b.currency,
                identifiers=b.identifiers,
            )
            for b in bills
        ]
    )

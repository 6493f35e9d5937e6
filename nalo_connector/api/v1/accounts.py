"""GET /v1/accounts - persisted accounts and their balance histories"""

import uuid
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from nalo_connector.api.v1.schemas import AccountSchema, AccountsResponse, BalanceHistoryResponse
from nalo_connector.infrastructure.database.session import get_db
from nalo_connector.infrastructure.database.repositories import AccountRepository, BalanceHistoryRepository

router = APIRouter()


@router.get("/accounts", response_model=AccountsResponse)
def list_accounts(db: Session = Depends(get_db)):
    """Retrieve every reconciled account"""
    accounts = AccountRepository(db).list_accounts()

    return AccountsResponse(
        accounts=[
            AccountSchema(
                account_id=str(a.id),
                label=a.label,
                institution_label=a.institution_label,
                balance=a.balance,
                type=a.type,
                number=a.number,
                vendor_id=a.vendor_id,
                currency=a.currency,
            )
            for a in accounts
        ]
    )


@router.get("/accounts/{account_id}/balances", response_model=BalanceHistoryResponse)
def get_balances(
    account_id: str,
    year: Optional[int] = Query(None, description="Year of the history, defaults to current year"),
    db: Session = Depends(get_db),
):
    """
    Retrieve the daily balances recorded for an account over one year.

    Returns:
        Mapping of ISO date to balance
    """
    try:
        account_uuid = uuid.UUID(account_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid account ID format")

    if AccountRepository(db).get_by_id(account_uuid) is None:
        raise HTTPException(status_code=404, detail="Account not found")

    year = year or date.today().year
    history = BalanceHistoryRepository(db).get_by_year_and_account(year, account_uuid)

    if not history:
        raise HTTPException(status_code=404, detail="No balance history for this year")

    return BalanceHistoryResponse(account_id=account_id, year=year, balances=history.balances)

"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
import datetime
from typing import Any, Dict, List, Optional


class SyncRequest(BaseModel):
    """Request body for POST /v1/sync"""

    login: str = Field(..., min_length=1, description="Nalo account email")
    password: str = Field(..., min_length=1, description="Nalo account password")
    parameters: Optional[Dict[str, Any]] = Field(default=None, description="Opaque run parameters")


class AccountSchema(BaseModel):
    """Persisted account"""

    account_id: str
    label: str
    institution_label: str = "Nalo"
    balance: float
    type: str = "LifeInsurance"
    number: Optional[str] = None
    vendor_id: str
    currency: str = "EUR"


class SyncResponse(BaseModel):
    """Response for POST /v1/sync"""

    files_saved: int
    bills_saved: int
    bills_ignored: int
    accounts: List[AccountSchema]


class AccountsResponse(BaseModel):
    """Response for GET /v1/accounts"""

    accounts: List[AccountSchema]


class BalanceHistoryResponse(BaseModel):
    """Response for GET /v1/accounts/{account_id}/balances"""

    account_id: str
    year: int
    balances: Dict[str, float]


class BillSchema(BaseModel):
    """Single transfer invoice"""

    bill_id: str
    filename: str
    vendor: str
    date: Optional[datetime.date] = None
    amount: Optional[float] = None
    currency: str
    identifiers: List[str]


class BillsResponse(BaseModel):
    """Response for GET /v1/bills"""

    bills: List[BillSchema]

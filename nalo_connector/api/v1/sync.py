"""POST /v1/sync - run the Nalo connector"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from nalo_connector.api.v1.schemas import AccountSchema, SyncRequest, SyncResponse
from nalo_connector.api.dependencies import get_nalo_client, get_request_id
from nalo_connector.connector import run_connector
from nalo_connector.domain.exceptions import AuthenticationFailure, ServiceUnavailable
from nalo_connector.domain.models import Credentials
from nalo_connector.infrastructure.clients.nalo import NaloClient
from nalo_connector.infrastructure.database.session import get_db

router = APIRouter()


@router.post("/sync", response_model=SyncResponse)
async def create_sync(
    request_body: SyncRequest,
    request: Request,
    db: Session = Depends(get_db),
    nalo_client: NaloClient = Depends(get_nalo_client),
):
    """
    Import documents, bills, accounts and today's balances from Nalo.

    Errors:
    - 401 LOGIN_FAILED: credentials refused or account listing unusable
    - 503 VENDOR_DOWN: Nalo API failed
    """
    request_id = get_request_id(request)
    credentials = Credentials(login=request_body.login, password=request_body.password)

    try:
        async with nalo_client:
            summary = await run_connector(credentials, nalo_client, db, parameters=request_body.parameters)

    except AuthenticationFailure as e:
        logging.warning(f"Nalo login failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=401, detail=e.code)

    except ServiceUnavailable as e:
        logging.error(f"Nalo API error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail=e.code)

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return SyncResponse(
        files_saved=summary.files_saved,
        bills_saved=summary.bills_saved,
        bills_ignored=summary.bills_ignored,
        accounts=[
            AccountSchema(
                account_id=str(a.id),
                label=a.label,
                balance=a.balance,
                number=a.vendor_id,
                vendor_id=a.vendor_id,
            )
            for a in summary.accounts
        ],
    )

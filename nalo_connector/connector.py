"""Connector run - logs into Nalo, saves documents, bills, accounts and balances"""

import asyncio
import logging
import time
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from nalo_connector.domain.exceptions import ConnectorError
from nalo_connector.domain.extraction import extract
from nalo_connector.domain.models import (
    Credentials,
    ExtractedFields,
    FetchedDocument,
    PersistedAccount,
    SyncSummary,
)
from nalo_connector.infrastructure.clients.nalo import NaloClient
from nalo_connector.infrastructure.database.repositories import (
    AccountRepository,
    BalanceHistoryRepository,
    BillRepository,
    FileRepository,
)
from nalo_connector.infrastructure.observability.logging import log_sync
from nalo_connector.infrastructure.observability.metrics import (
    bills_ignored_counter,
    documents_fetched_counter,
    record_sync,
)
from nalo_connector.infrastructure.pdf import read_pdf_text

logger = logging.getLogger(__name__)

# Words found in the label of bank operations related to Nalo bills
BILL_IDENTIFIERS = ["generali vie"]
CONTENT_TYPE = "application/pdf"


async def run_connector(
    credentials: Credentials,
    client: NaloClient,
    db: Session,
    parameters: Optional[Dict[str, Any]] = None,
    pdf_reader: Callable[[bytes], str] = read_pdf_text,
    today: date | None = None,
) -> SyncSummary:
    """
    Run one full synchronisation.

    Flow:
    1. Authenticate and get a session token
    2. Download signed documents and save them as files
    3. Download transactional PDFs, extract transfer fields, save bills
    4. Fetch contracts, reconcile them as accounts
    5. Record today's balance of each account

    Everything is written in one transaction: any error rolls back the
    session and is re-raised.

    Raises:
        AuthenticationFailure: Login refused or account listing without details
        ServiceUnavailable: Any other Nalo API failure
    """
    start_time = time.time()
    summary = SyncSummary()

    try:
        logger.info("Authenticating ...")
        if parameters is not None:
            logger.debug("Found parameters")
        token = await client.authenticate(credentials.login, credentials.password)
        logger.info("Successfully logged in")

        logger.info("Retrieve documents")
        await retrieve_documents(client, token, db, summary, pdf_reader)

        logger.info("Retrieving details of bank accounts")
        snapshots = await client.get_accounts(token)

        logger.info("Saving accounts and balances")
        accounts = AccountRepository(db).reconcile(snapshots)
        BalanceHistoryRepository(db).record_balances(accounts, today)

        db.commit()

    except ConnectorError as e:
        db.rollback()
        record_sync(e.code)
        raise

    except Exception:
        db.rollback()
        record_sync("error")
        raise

    summary.accounts = [
        PersistedAccount(id=a.id, label=a.label, balance=a.balance, vendor_id=a.vendor_id)
        for a in accounts
    ]
    record_sync("success")
    log_sync(summary, (time.time() - start_time) * 1000)
    logger.info("All done!")
    return summary


async def retrieve_documents(
    client: NaloClient,
    token: str,
    db: Session,
    summary: SyncSummary,
    pdf_reader: Callable[[bytes], str] = read_pdf_text,
) -> None:
    """List and download every document, one at a time in listing order"""
    signed_refs = await client.list_signed_documents(token)
    signed_docs: List[FetchedDocument] = []
    for ref in signed_refs:
        signed_docs.append(await client.fetch_signed_document(token, ref))
        documents_fetched_counter.labels(category="signed").inc()

    _, files_created = FileRepository(db).save_files(signed_docs, CONTENT_TYPE)
    summary.files_saved = files_created

    transactional_refs = await client.list_transactional_documents(token)
    entries: List[tuple[FetchedDocument, ExtractedFields]] = []
    for ref in transactional_refs:
        doc = await client.fetch_transactional_document(token, ref)
        documents_fetched_counter.labels(category="transactional").inc()
        text = await asyncio.to_thread(pdf_reader, doc.data)
        entries.append((doc, extract(text)))

    _, bills_created = BillRepository(db).save_bills(entries, BILL_IDENTIFIERS, CONTENT_TYPE)
    summary.bills_saved = bills_created
    summary.bills_ignored = sum(1 for _, fields in entries if fields.ignore)
    bills_ignored_counter.inc(summary.bills_ignored)

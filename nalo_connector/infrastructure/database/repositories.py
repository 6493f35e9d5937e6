"""Data access layer for files, bills, accounts and balance histories"""

import uuid
from datetime import date
from typing import List, Optional, Sequence, Tuple
from sqlalchemy.orm import Session
from nalo_connector.infrastructure.database.models import BalanceHistory, BankAccount, Bill, StoredFile
from nalo_connector.domain.models import AccountSnapshot, ExtractedFields, FetchedDocument


class FileRepository:
    """Repository for downloaded documents"""

    def __init__(self, db: Session):
        self.db = db

    def get_file(self, vendor: str, filename: str) -> Optional[StoredFile]:
        return (
            self.db.query(StoredFile)
            .filter(StoredFile.vendor == vendor, StoredFile.filename == filename)
            .first()
        )

    def save_files(
        self, documents: Sequence[FetchedDocument], content_type: str = "application/pdf"
    ) -> Tuple[List[StoredFile], int]:
        """
        Persist documents, skipping any file already stored under the same name.

        Returns the stored file for every document, existing or new, in input
        order, and the number of files actually created.
        """
        stored = []
        created = 0
        for doc in documents:
            db_file = self.get_file(doc.vendor, doc.filename)
            if db_file is None:
                db_file = StoredFile(
                    vendor=doc.vendor,
                    filename=doc.filename,
                    content_type=content_type,
                    content=doc.data,
                    import_date=doc.import_date,
                    version=doc.version,
                )
                self.db.add(db_file)
                self.db.flush()
                created += 1
            stored.append(db_file)
        return stored, created


class BillRepository:
    """Repository for transfer invoices"""

    def __init__(self, db: Session):
        self.db = db

    def save_bills(
        self,
        entries: Sequence[Tuple[FetchedDocument, ExtractedFields]],
        identifiers: List[str],
        content_type: str = "application/pdf",
        currency: str = "EUR",
    ) -> Tuple[List[Bill], int]:
        """
        Save each document as a file and attach a bill carrying the extracted fields.

        Entries flagged ignore are dropped before anything is written. Saving a
        bill again for the same file refreshes its date and amount, so entries
        sharing a filename end up as one bill holding the last entry's fields.

        Returns each distinct bill once, in input order, and the number of
        bills actually created.
        """
        kept = [(doc, fields) for doc, fields in entries if not fields.ignore]
        files = FileRepository(self.db).save_files([doc for doc, _ in kept], content_type)[0]

        bills = []
        created = 0
        for (doc, fields), db_file in zip(kept, files):
            db_bill = db_file.bill
            if db_bill is None:
                db_bill = Bill(
                    file=db_file,
                    vendor=doc.vendor,
                    currency=currency,
                    identifiers=list(identifiers),
                    import_date=doc.import_date,
                )
                self.db.add(db_bill)
                created += 1
            db_bill.date = fields.date
            db_bill.amount = fields.amount
            if db_bill not in bills:
                bills.append(db_bill)

        self.db.flush()
        return bills, created

    def list_bills(self, vendor: Optional[str] = None, limit: int = 100) -> List[Bill]:
        """Fetch most recent bills, newest transfer first"""
        query = self.db.query(Bill)
        if vendor is not None:
            query = query.filter(Bill.vendor == vendor)
        return query.order_by(Bill.date.desc()).limit(limit).all()


class AccountRepository:
    """Repository reconciling vendor accounts with stored ones"""

    def __init__(self, db: Session):
        self.db = db

    def reconcile(self, snapshots: Sequence[AccountSnapshot]) -> List[BankAccount]:
        """Create or update one account per snapshot, matched on vendor_id"""
        accounts = []
        for snapshot in snapshots:
            db_account = self.get_by_vendor_id(snapshot.vendor_id)
            if db_account is None:
                db_account = BankAccount(vendor_id=snapshot.vendor_id)
                self.db.add(db_account)

            db_account.label = snapshot.label
            db_account.institution_label = snapshot.institution_label
            db_account.balance = snapshot.balance
            db_account.type = snapshot.type
            db_account.number = snapshot.number
            db_account.currency = snapshot.currency
            accounts.append(db_account)

        self.db.flush()  # Assign IDs without committing
        return accounts

    def get_by_vendor_id(self, vendor_id: str) -> Optional[BankAccount]:
        return self.db.query(BankAccount).filter(BankAccount.vendor_id == vendor_id).first()

    def get_by_id(self, account_id: uuid.UUID) -> Optional[BankAccount]:
        return self.db.query(BankAccount).filter(BankAccount.id == account_id).first()

    def list_accounts(self) -> List[BankAccount]:
        return self.db.query(BankAccount).order_by(BankAccount.label).all()


class BalanceHistoryRepository:
    """Repository for yearly balance histories"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_year_and_account(self, year: int, account_id: uuid.UUID) -> Optional[BalanceHistory]:
        return (
            self.db.query(BalanceHistory)
            .filter(BalanceHistory.year == year, BalanceHistory.account_id == account_id)
            .first()
        )

    def record_balances(self, accounts: Sequence[BankAccount], today: date | None = None) -> List[BalanceHistory]:
        """
        Set today's balance in this year's history of every account.

        Existing entries for other days are kept; an entry for today is overwritten.
        """
        today = today or date.today()
        histories = []
        for account in accounts:
            history = self.get_by_year_and_account(today.year, account.id)
            if history is None:
                history = BalanceHistory(year=today.year, account_id=account.id, balances={})
                self.db.add(history)

            # Reassign so the JSON column is flagged dirty
            history.balances = {**(history.balances or {}), today.isoformat(): account.balance}
            histories.append(history)

        self.db.flush()
        return histories

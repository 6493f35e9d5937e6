"""Domain models - pure Python dataclasses representing connector entities"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

VENDOR = "Nalo"


@dataclass
class Credentials:
    """Login fields supplied from outside, never persisted"""

    login: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(login={self.login!r}, password='***')"


@dataclass
class RemoteDocumentRef:
    """Identifies a document to fetch; signed documents only carry an id"""

    id: str
    filename: Optional[str] = None
    contract_id: Optional[str] = None
    id_operation: Optional[str] = None


@dataclass(frozen=True)
class FetchedDocument:
    """Decoded document content as returned by Nalo"""

    filename: str
    data: bytes
    import_date: datetime
    vendor: str = VENDOR
    version: int = 1


@dataclass
class ExtractedFields:
    """Fields read from a transactional PDF; date and amount may be missing"""

    ignore: bool
    date: Optional[date] = None
    amount: Optional[float] = None


@dataclass
class AccountSnapshot:
    """Life insurance contract as listed by Nalo"""

    label: str
    balance: float
    number: str
    vendor_id: str
    institution_label: str = VENDOR
    type: str = "LifeInsurance"
    currency: str = "EUR"


@dataclass
class PersistedAccount:
    """Account after reconciliation, with its stable identifier"""

    id: uuid.UUID
    label: str
    balance: float
    vendor_id: str


@dataclass
class SyncSummary:
    """Outcome of one connector run"""

    files_saved: int = 0
    bills_saved: int = 0
    bills_ignored: int = 0
    accounts: List[PersistedAccount] = field(default_factory=list)

"""SQLAlchemy ORM models for the personal data store"""

import uuid
from sqlalchemy import (
    Column,
    String,
    Float,
    DateTime,
    Date,
    Integer,
    ForeignKey,
    LargeBinary,
    Text,
    JSON,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class StoredFile(Base):
    """Document downloaded from a vendor"""

    __tablename__ = "stored_file"
    __table_args__ = (UniqueConstraint("vendor", "filename", name="uq_stored_file_vendor_filename"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    vendor = Column(Text, nullable=False)
    filename = Column(Text, nullable=False)
    content_type = Column(String(100), nullable=False, default="application/pdf")
    content = Column(LargeBinary, nullable=False)
    import_date = Column(DateTime(timezone=True), nullable=False)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    bill = relationship("Bill", back_populates="file", uselist=False, cascade="all, delete-orphan")


class Bill(Base):
    """Transfer invoice linked to its PDF, matchable against bank operations"""

    __tablename__ = "bill"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    file_id = Column(UUID(as_uuid=True), ForeignKey("stored_file.id", ondelete="CASCADE"), nullable=False, unique=True)
    vendor = Column(Text, nullable=False)
    date = Column(Date, nullable=True)
    amount = Column(Float, nullable=True)
    currency = Column(String(3), nullable=False, default="EUR")
    identifiers = Column(JSON, nullable=False, default=list)
    import_date = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    file = relationship("StoredFile", back_populates="bill")


class BankAccount(Base):
    """Account reconciled on the vendor identifier"""

    __tablename__ = "bank_account"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    vendor_id = Column(Text, nullable=False, unique=True, index=True)
    label = Column(Text, nullable=False)
    institution_label = Column(Text, nullable=False)
    balance = Column(Float, nullable=False)
    type = Column(Text, nullable=False)
    number = Column(Text, nullable=False)
    currency = Column(String(3), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    histories = relationship("BalanceHistory", back_populates="account", cascade="all, delete-orphan")


class BalanceHistory(Base):
    """Daily balances of one account over one year, keyed by ISO date"""

    __tablename__ = "balance_history"
    __table_args__ = (UniqueConstraint("year", "account_id", name="uq_balance_history_year_account"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    year = Column(Integer, nullable=False)
    account_id = Column(UUID(as_uuid=True), ForeignKey("bank_account.id", ondelete="CASCADE"), nullable=False)
    balances = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    account = relationship("BankAccount", back_populates="histories")

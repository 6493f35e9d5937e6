"""Database session management for the API and the one-shot job"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from nalo_connector.config import settings
from nalo_connector.infrastructure.database.models import Base

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,  # Verify connections before using
    pool_size=5,
    max_overflow=5,
    pool_recycle=3600,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """Dependency injection for database sessions"""
    with session_scope() as db:
        yield db


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session closed on exit; commit and rollback are left to the caller"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create missing tables"""
    Base.metadata.create_all(bind=engine)

"""Database session management."""

from __future__ import annotations

import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from sif_safety.core.config import settings
from sif_safety.core.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)

_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    echo=settings.debug,
    connect_args=_connect_args,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Dependency for FastAPI to get DB session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit(db: Session) -> None:
    """Commit the unit of work, surfacing backend outages as StoreUnavailable."""
    try:
        db.commit()
    except OperationalError as exc:
        db.rollback()
        logger.error("Store commit failed: %s", exc)
        raise StoreUnavailable() from exc

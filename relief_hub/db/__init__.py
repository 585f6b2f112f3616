"""Database package: engine, session factory, init_db(), get_session()."""

import threading
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from relief_hub.config import DATABASE_URL
from relief_hub.db.base import Base

# Import all models so Base.metadata has all tables
from relief_hub.db.models import (  # noqa: F401
    Camp,
    CampDonation,
    CampDropOffLocation,
    CampHelpRequest,
    Donation,
    HelpRequest,
    InventoryItem,
    Item,
    Membership,
    RefreshToken,
    User,
    VolunteerClub,
)

SQLITE_BUSY_TIMEOUT_SECONDS = 30

_init_lock = threading.Lock()
_engine = None
_SessionLocal: sessionmaker | None = None


def _get_engine():
    """SQLite connections are shared with FastAPI's threadpool and wait on each other's write locks."""
    if DATABASE_URL.startswith("sqlite"):
        return create_engine(
            DATABASE_URL,
            echo=False,
            connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT_SECONDS},
        )
    return create_engine(DATABASE_URL, echo=False, pool_pre_ping=True)


def init_db() -> None:
    """Create engine and tables; seed the ration item catalog if it is empty. Safe to call repeatedly."""
    global _engine, _SessionLocal
    with _init_lock:
        if _SessionLocal is not None:
            return
        _engine = _get_engine()
        Base.metadata.create_all(bind=_engine)
        from relief_hub.db.seed_data import catalog_is_empty, seed_ration_items

        with Session(bind=_engine) as session:
            if catalog_is_empty(session):
                seed_ration_items(session)
                session.commit()
        _SessionLocal = sessionmaker(bind=_engine, autocommit=False, autoflush=False)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Context manager yielding a DB session. Calls init_db() on first use."""
    init_db()
    session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def detach_all(session: Session, rows: list) -> list:
    """Expunge loaded rows so callers can read them after the session closes."""
    for row in rows:
        session.expunge(row)
    return rows

# switchboard/infra/database.py

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from switchboard.core.config import settings
from switchboard.models.base import Base

logger = logging.getLogger(__name__)

# =========================
# ENGINE CONFIGURATION
# =========================


def build_engine(url: str):
    """Create an engine for PostgreSQL, or a single shared connection for SQLite."""
    if url.startswith("sqlite"):
        # In-memory databases only exist on one connection, so share it
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )

    return create_engine(
        url,
        pool_pre_ping=True,  # Check connections before using them
        pool_size=5,
        max_overflow=10,
        pool_recycle=3600,
        echo=False,
    )


engine = build_engine(settings.database_url)

# =========================
# SESSION CONFIGURATION
# =========================

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# =========================
# DATABASE FUNCTIONS
# =========================


def get_db() -> Iterator[Session]:
    """
    FastAPI dependency to provide a DB session to routes.
    Usage:
        def my_route(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def db_session(factory: Optional[Callable[[], Session]] = None) -> Iterator[Session]:
    """
    Unit of work: commit on success, roll back on any error, always close.
    Usage:
        with db_session() as db:
            db.add(obj)
    """
    session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        logger.warning("Rolling back database session")
        session.rollback()
        raise
    finally:
        session.close()


def init_db(bind=None) -> None:
    """Create all tables based on registered models."""
    # Import models here to register them with Base
    from switchboard.models import conversation, message, user  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables created")


def test_connection() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")
        return True
    except Exception as e:
        logger.error("Database connection failed: %s", e)
        return False

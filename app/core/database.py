"""Database connection, session management and store error translation."""

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.errors import ConflictError, UnavailableError

logger = logging.getLogger(__name__)


def engine_options(url: str) -> dict[str, Any]:
    """Engine keyword arguments for the given URL (sqlite needs a shared in-memory pool)."""
    if url.startswith("sqlite://"):
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options
    return {"pool_pre_ping": True}


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(url: str, **kwargs: Any) -> Engine:
    """Create an engine for ``url``; sqlite connections get foreign key enforcement turned on."""
    new_engine = create_engine(url, **engine_options(url), **kwargs)
    if url.startswith("sqlite://"):
        event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)
    return new_engine


engine = make_engine(settings.DATABASE_URL, echo=settings.DEBUG)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


@contextmanager
def store_call(
    db: Session,
    *,
    commit: bool = False,
    conflict_message: str = "Username already exists.",
) -> Iterator[Session]:
    """
    Run a block of store operations, optionally committing at the end.

    IntegrityError becomes ConflictError (the only unique constraint is the
    username). Any other driver failure rolls back and becomes UnavailableError.
    """
    try:
        yield db
        if commit:
            db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(conflict_message) from e
    except DBAPIError as e:
        db.rollback()
        logger.error("Store unavailable", extra={"error": type(e).__name__})
        raise UnavailableError("The journal store is unavailable.") from e

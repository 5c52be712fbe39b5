"""Shared helpers for service and API tests."""

from sqlalchemy.orm import Session, sessionmaker

from app.core.database import make_engine
from app.models import Base
from app.schemas.auth import Principal, Role


def make_session_factory() -> sessionmaker:
    """Fresh in-memory SQLite database with all tables; one per test."""
    engine = make_engine("sqlite://")
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_session() -> Session:
    return make_session_factory()()


def user_principal(username: str) -> Principal:
    return Principal(username=username, roles=frozenset({Role.USER}))


def admin_principal(username: str = "root") -> Principal:
    return Principal(username=username, roles=frozenset({Role.ADMIN}))

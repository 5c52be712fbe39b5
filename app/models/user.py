"""ORM model for application users (auth, RBAC and journal ownership)."""

from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from app.models.base import Base


def utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """
    User account for JWT authentication, role-based access control and entry ownership.

    roles: JSON list of role names, a non-empty subset of ["USER", "ADMIN"].
    """

    __tablename__ = "users"
    # Ids are never handed out twice, so a token for a deleted account cannot name a new one.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    roles = Column(JSON, nullable=False, default=lambda: ["USER"])
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    # Entries are purged explicitly before the user row is deleted; the ORM must
    # not try to null out owner_id on its own.
    entries = relationship(
        "JournalEntry",
        back_populates="owner",
        order_by="JournalEntry.id",
        passive_deletes="all",
    )

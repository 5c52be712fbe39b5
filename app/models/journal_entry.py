"""ORM model for journal entries; each belongs to exactly one user."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from app.models.base import Base
from app.models.user import utcnow


class JournalEntry(Base):
    """
    A single journal entry.

    created_at is stamped at insert time and never taken from a request.
    """

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    owner = relationship("User", back_populates="entries")

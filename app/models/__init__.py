"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.journal_entry import JournalEntry
from app.models.user import User

__all__ = ["Base", "JournalEntry", "User"]

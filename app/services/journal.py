"""
Journal store: per-owner create, read, list, partial update and delete of entries.

Every call names the owner by username and is checked against the access
engine before the store is touched. An entry id is only ever looked up
together with its owner, so an id that exists under someone else reads as
not found rather than forbidden.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.core.database import store_call
from app.core.errors import NotFoundError
from app.models.journal_entry import JournalEntry
from app.models.user import User
from app.schemas.auth import Principal
from app.services.access import Operation, enforce

logger = logging.getLogger(__name__)


def _read_operation(public_read: bool) -> Operation:
    return Operation.PUBLIC_READ if public_read else Operation.READ


def _owner(db: Session, owner_username: str) -> User:
    with store_call(db):
        owner = db.scalar(select(User).where(User.username == owner_username))
    if owner is None:
        raise NotFoundError("User not found.")
    return owner


def _owned_entry(db: Session, owner: User, entry_id: int) -> JournalEntry | None:
    with store_call(db):
        return db.scalar(
            select(JournalEntry).where(
                JournalEntry.id == entry_id,
                JournalEntry.owner_id == owner.id,
            )
        )


def create_entry(
    db: Session,
    principal: Principal,
    owner_username: str,
    title: str = "",
    content: str = "",
) -> JournalEntry:
    """Add an entry for ``owner_username``. The timestamp is always set here."""
    enforce(principal, owner_username, Operation.CREATE)
    owner = _owner(db, owner_username)
    entry = JournalEntry(owner_id=owner.id, title=title or "", content=content or "")
    with store_call(db, commit=True):
        db.add(entry)
    db.refresh(entry)
    logger.info(
        "Journal entry created",
        extra={"entry_id": entry.id, "owner": owner_username, "by": principal.username},
    )
    return entry


def get_entry(
    db: Session,
    principal: Principal,
    owner_username: str,
    entry_id: int,
    public_read: bool = False,
) -> JournalEntry:
    enforce(principal, owner_username, _read_operation(public_read))
    owner = _owner(db, owner_username)
    entry = _owned_entry(db, owner, entry_id)
    if entry is None:
        raise NotFoundError("Journal entry not found.")
    return entry


def list_entries(
    db: Session,
    principal: Principal,
    owner_username: str,
    public_read: bool = False,
) -> list[JournalEntry]:
    """All entries of the owner, oldest first."""
    enforce(principal, owner_username, _read_operation(public_read))
    owner = _owner(db, owner_username)
    with store_call(db):
        return list(
            db.scalars(
                select(JournalEntry)
                .where(JournalEntry.owner_id == owner.id)
                .order_by(JournalEntry.created_at, JournalEntry.id)
            ).all()
        )


def update_entry(
    db: Session,
    principal: Principal,
    owner_username: str,
    entry_id: int,
    title: str | None = None,
    content: str | None = None,
) -> JournalEntry:
    """
    Partial update. A missing or blank title/content keeps the stored value,
    so a non-blank field is never overwritten with a blank one.
    """
    enforce(principal, owner_username, Operation.UPDATE)
    owner = _owner(db, owner_username)
    entry = _owned_entry(db, owner, entry_id)
    if entry is None:
        raise NotFoundError("Journal entry not found.")
    with store_call(db, commit=True):
        if title is not None and title.strip():
            entry.title = title
        if content is not None and content.strip():
            entry.content = content
    db.refresh(entry)
    logger.info(
        "Journal entry updated",
        extra={"entry_id": entry.id, "owner": owner_username, "by": principal.username},
    )
    return entry


def delete_entry(
    db: Session,
    principal: Principal,
    owner_username: str,
    entry_id: int,
) -> bool:
    """
    Remove one entry. Returns False when the id does not exist under this owner,
    including when it was already deleted or belongs to someone else.
    """
    enforce(principal, owner_username, Operation.DELETE)
    owner = _owner(db, owner_username)
    with store_call(db, commit=True):
        result = db.execute(
            delete(JournalEntry)
            .where(
                JournalEntry.id == entry_id,
                JournalEntry.owner_id == owner.id,
            )
            .execution_options(synchronize_session=False)
        )
    removed = (result.rowcount or 0) > 0
    if removed:
        logger.info(
            "Journal entry deleted",
            extra={"entry_id": entry_id, "owner": owner_username, "by": principal.username},
        )
    return removed


def purge_entries(db: Session, owner_id: int) -> int:
    """
    Delete every entry of an owner and commit; the first step of account deletion.

    Callers must have authorized the deletion already. Idempotent: a second run
    deletes nothing and returns 0.
    """
    with store_call(db, commit=True):
        result = db.execute(
            delete(JournalEntry)
            .where(JournalEntry.owner_id == owner_id)
            .execution_options(synchronize_session=False)
        )
    return result.rowcount or 0

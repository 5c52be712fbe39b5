"""Journal entry endpoints, scoped by owner username."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_principal
from app.core.config import get_settings
from app.core.database import get_db
from app.models.journal_entry import JournalEntry
from app.schemas.auth import Principal
from app.schemas.journal import (
    EntriesListResponse,
    EntryCreateRequest,
    EntryDeleteResponse,
    EntryResponse,
    EntryUpdateRequest,
)
from app.services import journal

router = APIRouter()


def _entry_response(entry: JournalEntry, owner_username: str) -> EntryResponse:
    return EntryResponse(
        id=entry.id,
        title=entry.title,
        content=entry.content,
        created_at=entry.created_at,
        owner=owner_username,
    )


@router.get("/{username}", response_model=EntriesListResponse)
def list_entries(
    username: str,
    db: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> EntriesListResponse:
    """All entries of ``username``. Public when JOURNAL_PUBLIC_READ is set, else owner or admin."""
    entries = journal.list_entries(
        db, principal, username, public_read=get_settings().JOURNAL_PUBLIC_READ
    )
    return EntriesListResponse(
        owner=username, entries=[_entry_response(e, username) for e in entries]
    )


@router.post("/{username}", response_model=EntryResponse, status_code=status.HTTP_201_CREATED)
def create_entry(
    username: str,
    body: EntryCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> EntryResponse:
    """Create an entry for ``username``. Extra fields (e.g. a timestamp) are rejected."""
    entry = journal.create_entry(db, principal, username, title=body.title, content=body.content)
    return _entry_response(entry, username)


@router.get("/{username}/{entry_id}", response_model=EntryResponse)
def get_entry(
    username: str,
    entry_id: int,
    db: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> EntryResponse:
    entry = journal.get_entry(
        db, principal, username, entry_id, public_read=get_settings().JOURNAL_PUBLIC_READ
    )
    return _entry_response(entry, username)


@router.put("/{username}/{entry_id}", response_model=EntryResponse)
def update_entry(
    username: str,
    entry_id: int,
    body: EntryUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> EntryResponse:
    """Partial update; a missing or blank title/content keeps the stored value."""
    entry = journal.update_entry(
        db, principal, username, entry_id, title=body.title, content=body.content
    )
    return _entry_response(entry, username)


@router.delete("/{username}/{entry_id}", response_model=EntryDeleteResponse)
def delete_entry(
    username: str,
    entry_id: int,
    db: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> EntryDeleteResponse:
    """Delete one entry. removed=false when the id is not (or no longer) under this owner."""
    removed = journal.delete_entry(db, principal, username, entry_id)
    return EntryDeleteResponse(id=entry_id, removed=removed)

"""Schemas for journal entry endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.core.security import TITLE_MAX_LEN


class EntryCreateRequest(BaseModel):
    """New entry. The creation timestamp is set by the server; sending one is an error."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(default="", max_length=TITLE_MAX_LEN)
    content: str = Field(default="")


class EntryUpdateRequest(BaseModel):
    """Partial update: a missing or blank field leaves the stored value unchanged."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, max_length=TITLE_MAX_LEN)
    content: str | None = None


class EntryResponse(BaseModel):
    """A journal entry as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    created_at: datetime
    owner: str


class EntriesListResponse(BaseModel):
    """All entries of one owner, oldest first."""

    owner: str
    entries: list[EntryResponse]


class EntryDeleteResponse(BaseModel):
    """Result of deleting one entry."""

    id: int
    removed: bool

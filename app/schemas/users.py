"""Schemas for account endpoints. No response model carries a password or hash."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.auth import Role


class AccountView(BaseModel):
    """
    What the account service hands back for a user record.

    password_hash is only filled in when the caller is the account owner or an
    admin; API responses are built from UserResponse, which drops it entirely.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    roles: list[Role]
    created_at: datetime | None = None
    entry_count: int = 0
    password_hash: str | None = None


class UserResponse(BaseModel):
    """Public shape of a user account."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    roles: list[Role]
    created_at: datetime | None = None
    entry_count: int = 0


class UsersListResponse(BaseModel):
    """Response for GET /admin/users."""

    users: list[UserResponse]


class UserCountResponse(BaseModel):
    """Response for GET /admin/users/count."""

    count: int


class UserUpdateRequest(BaseModel):
    """Partial update: a missing or blank field leaves the stored value unchanged."""

    model_config = ConfigDict(extra="forbid")

    username: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)


class AdminCreateUserRequest(BaseModel):
    """Admin provisioning: may request any non-empty role set."""

    model_config = ConfigDict(extra="forbid")

    username: str = Field(..., max_length=255)
    password: str = Field(..., max_length=128)
    roles: list[Role] = Field(default_factory=lambda: [Role.USER], min_length=1)


class RolesUpdateRequest(BaseModel):
    """Replace the role set of an account (admin only)."""

    model_config = ConfigDict(extra="forbid")

    roles: list[Role] = Field(..., min_length=1)


class UserDeleteResponse(BaseModel):
    """Result of deleting an account and its entries."""

    id: int
    deleted: bool
    entries_deleted: int = 0

"""Pydantic request/response schemas."""

from app.schemas.auth import (
    LoginRequest,
    Principal,
    Role,
    SignupRequest,
    TokenResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.journal import (
    EntriesListResponse,
    EntryCreateRequest,
    EntryDeleteResponse,
    EntryResponse,
    EntryUpdateRequest,
)
from app.schemas.users import (
    AccountView,
    AdminCreateUserRequest,
    RolesUpdateRequest,
    UserCountResponse,
    UserDeleteResponse,
    UserResponse,
    UsersListResponse,
    UserUpdateRequest,
)

__all__ = [
    "AccountView",
    "AdminCreateUserRequest",
    "EntriesListResponse",
    "EntryCreateRequest",
    "EntryDeleteResponse",
    "EntryResponse",
    "EntryUpdateRequest",
    "HealthResponse",
    "LoginRequest",
    "Principal",
    "Role",
    "RolesUpdateRequest",
    "SignupRequest",
    "TokenResponse",
    "UserCountResponse",
    "UserDeleteResponse",
    "UserResponse",
    "UsersListResponse",
    "UserUpdateRequest",
]

"""Admin account management. Every route requires an ADMIN principal."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin
from app.api.v1.users import user_response
from app.core.database import get_db
from app.core.errors import NotFoundError
from app.schemas.auth import Principal
from app.schemas.users import (
    AdminCreateUserRequest,
    RolesUpdateRequest,
    UserCountResponse,
    UserDeleteResponse,
    UserResponse,
    UsersListResponse,
    UserUpdateRequest,
)
from app.services import accounts

logger = logging.getLogger(__name__)
router = APIRouter()

AdminPrincipal = Annotated[Principal, Depends(require_admin)]


@router.get("", response_model=UsersListResponse)
def list_users(
    admin: AdminPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(users=[user_response(v) for v in accounts.list_all(db, admin)])


@router.get("/count", response_model=UserCountResponse)
def count_users(
    admin: AdminPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> UserCountResponse:
    return UserCountResponse(count=accounts.count_all(db, admin))


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: AdminCreateUserRequest,
    admin: AdminPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Provision an account with any role set, ADMIN included."""
    view = accounts.register(db, admin, body.username, body.password, roles=body.roles)
    logger.info("Account provisioned by admin", extra={"by": admin.username, "user_id": view.id})
    return user_response(view)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    admin: AdminPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    return user_response(accounts.get_by_id(db, admin, user_id))


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: UserUpdateRequest,
    admin: AdminPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Partial update; a blank password keeps the stored hash."""
    view = accounts.update_account(
        db, admin, user_id, username=body.username, password=body.password
    )
    return user_response(view)


@router.put("/{user_id}/roles", response_model=UserResponse)
def update_user_roles(
    user_id: int,
    body: RolesUpdateRequest,
    admin: AdminPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    return user_response(accounts.update_roles(db, admin, user_id, body.roles))


@router.delete("/{user_id}", response_model=UserDeleteResponse)
def delete_user(
    user_id: int,
    admin: AdminPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> UserDeleteResponse:
    deleted, entries_deleted = accounts.delete_account(db, admin, user_id)
    if not deleted:
        raise NotFoundError("User not found.")
    return UserDeleteResponse(id=user_id, deleted=True, entries_deleted=entries_deleted)

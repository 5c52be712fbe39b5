"""Self-service account endpoints. Owners act on their own account; admins on any."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import get_principal
from app.core.database import get_db
from app.core.errors import NotFoundError, UnauthenticatedError
from app.schemas.auth import Principal
from app.schemas.users import AccountView, UserDeleteResponse, UserResponse, UserUpdateRequest
from app.services import accounts

router = APIRouter()


def user_response(view: AccountView) -> UserResponse:
    """Drop the credential hash before anything goes over the wire."""
    return UserResponse(**view.model_dump(exclude={"password_hash"}))


@router.get("/me", response_model=UserResponse)
def get_me(
    db: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> UserResponse:
    """The caller's own account."""
    if principal.is_anonymous:
        raise UnauthenticatedError("Authentication required.")
    return user_response(accounts.get_by_username(db, principal, principal.username))


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> UserResponse:
    return user_response(accounts.get_by_id(db, principal, user_id))


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: UserUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> UserResponse:
    """Partial update of username and/or password; omitted or blank fields are unchanged."""
    view = accounts.update_account(
        db, principal, user_id, username=body.username, password=body.password
    )
    return user_response(view)


@router.delete("/{user_id}", response_model=UserDeleteResponse)
def delete_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> UserDeleteResponse:
    """Delete an account together with all of its journal entries."""
    deleted, entries_deleted = accounts.delete_account(db, principal, user_id)
    if not deleted:
        raise NotFoundError("User not found.")
    return UserDeleteResponse(id=user_id, deleted=True, entries_deleted=entries_deleted)

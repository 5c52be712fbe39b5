"""JWT login and the request-to-Principal dependencies (get_principal, require_admin)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.database import get_db, store_call
from app.core.errors import UnauthenticatedError
from app.core.security import create_access_token, verify_password
from app.models.user import User
from app.schemas.auth import LoginRequest, Principal, TokenResponse
from app.services.access import Operation, enforce
from app.services.accounts import ADMIN_ONLY
from app.services.principal import ANONYMOUS, resolve_principal

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)

_METHOD_OPERATIONS: dict[str, Operation] = {
    "GET": Operation.READ,
    "HEAD": Operation.READ,
    "POST": Operation.CREATE,
    "PUT": Operation.UPDATE,
    "PATCH": Operation.UPDATE,
    "DELETE": Operation.DELETE,
}


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    # Stored usernames are stripped at registration.
    username = body.username.strip()
    with store_call(db):
        user = db.scalar(select(User).where(User.username == username))
    if user is None or not verify_password(body.password, user.password_hash):
        logger.info("Login failed", extra={"username": username})
        raise UnauthenticatedError("Invalid username or password.")
    token = create_access_token(sub=user.id)
    return TokenResponse(access_token=token, token_type="bearer")


def get_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> Principal:
    """Dependency: the Principal for this request, anonymous when no bearer token was sent."""
    token = credentials.credentials if credentials is not None else None
    return resolve_principal(db, token)


def get_principal_or_anonymous(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> Principal:
    """Dependency for open endpoints: a bad or stale token counts as no token."""
    token = credentials.credentials if credentials is not None else None
    try:
        return resolve_principal(db, token)
    except UnauthenticatedError:
        logger.info("Ignoring unusable token on open endpoint")
        return ANONYMOUS


def operation_for_method(method: str) -> Operation:
    """Access operation for an HTTP method; unknown methods are treated as updates."""
    return _METHOD_OPERATIONS.get(method.upper(), Operation.UPDATE)


def require_admin(
    request: Request,
    principal: Annotated[Principal, Depends(get_principal)],
) -> Principal:
    """Dependency: 401 for anonymous, 403 for non-admin."""
    enforce(
        principal,
        None,
        operation_for_method(request.method),
        required_roles=ADMIN_ONLY,
    )
    return principal

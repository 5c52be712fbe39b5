"""Resolve the Principal for a request from its bearer token."""

import logging
from datetime import UTC

import jwt
from sqlalchemy.orm import Session

from app.core.database import store_call
from app.core.errors import UnauthenticatedError
from app.core.security import decode_access_token
from app.models.user import User
from app.schemas.auth import Principal, Role

logger = logging.getLogger(__name__)

ANONYMOUS = Principal()

# Used by local, trusted entry points (the create_user script) that act on
# behalf of the operator rather than a logged-in user.
OPERATOR = Principal(username="operator", roles=frozenset({Role.ADMIN}))


def principal_for(user: User) -> Principal:
    """Principal carrying the user's current username and roles."""
    return Principal(
        username=user.username,
        roles=frozenset(Role(r) for r in (user.roles or [])),
    )


def _issued_before(iat, user: User) -> bool:
    # iat is whole seconds; a login in the same second as signup is still valid.
    if not isinstance(iat, (int, float)) or isinstance(iat, bool):
        return True
    created = user.created_at
    if created is None:
        return False
    if created.tzinfo is None:
        created = created.replace(tzinfo=UTC)
    return iat < int(created.timestamp())


def resolve_principal(db: Session, token: str | None) -> Principal:
    """
    Map a bearer token to a Principal.

    No token gives ANONYMOUS. A token that fails signature or expiry checks, has
    no usable subject, names an account that no longer exists, or was issued
    before that account was created raises UnauthenticatedError. Username and
    roles come from the stored account, not the token, so changes apply from
    the next request on.
    """
    if not token:
        return ANONYMOUS
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError as e:
        raise UnauthenticatedError("Invalid or expired token") from e
    sub = payload.get("sub")
    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        raise UnauthenticatedError("Invalid token payload")
    with store_call(db):
        user = db.get(User, user_id)
    if user is None:
        logger.info("Token for missing account", extra={"user_id": user_id})
        raise UnauthenticatedError("User not found")
    if _issued_before(payload.get("iat"), user):
        logger.info("Token predates account", extra={"user_id": user_id})
        raise UnauthenticatedError("Invalid or expired token")
    return principal_for(user)

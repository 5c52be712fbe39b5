"""
Access decisions for accounts and journal entries.

``decide`` is the single place where principal, ownership and roles are
combined into Allow or Deny. It is pure: no storage access, no exceptions.
``enforce`` is the caller-side translation of a Deny into an error.
"""

import logging
from enum import Enum

from app.core.errors import ForbiddenError, UnauthenticatedError
from app.schemas.auth import Principal, Role

logger = logging.getLogger(__name__)

NO_ROLES: frozenset[Role] = frozenset()


class Operation(str, Enum):
    """Operation kinds. PUBLIC_READ is only used where a deployment opts into public reads."""

    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    PUBLIC_READ = "public_read"


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


def decide(
    principal: Principal,
    owner_username: str | None,
    operation: Operation,
    required_roles: frozenset[Role] = NO_ROLES,
) -> Decision:
    """
    Return Allow or Deny for ``principal`` performing ``operation`` on a resource owned by ``owner_username``.

    Rules, in order:
      1. PUBLIC_READ is allowed for everyone, anonymous included.
      2. Anonymous is denied everything else.
      3. ADMIN is allowed everything, whoever the owner is.
      4. The owner is allowed, provided it holds every role in ``required_roles``.
      5. Anything else is denied.

    ``owner_username=None`` means the resource has no owner, so only ADMIN gets through.
    """
    if operation is Operation.PUBLIC_READ:
        return Decision.ALLOW
    if principal.is_anonymous:
        return Decision.DENY
    if principal.has_role(Role.ADMIN):
        return Decision.ALLOW
    if (
        owner_username is not None
        and principal.username == owner_username
        and required_roles <= principal.roles
    ):
        return Decision.ALLOW
    return Decision.DENY


def is_allowed(
    principal: Principal,
    owner_username: str | None,
    operation: Operation,
    required_roles: frozenset[Role] = NO_ROLES,
) -> bool:
    return decide(principal, owner_username, operation, required_roles) is Decision.ALLOW


def enforce(
    principal: Principal,
    owner_username: str | None,
    operation: Operation,
    required_roles: frozenset[Role] = NO_ROLES,
) -> None:
    """Raise UnauthenticatedError or ForbiddenError unless the decision is Allow."""
    if is_allowed(principal, owner_username, operation, required_roles):
        return
    logger.info(
        "Access denied",
        extra={
            "principal": principal.username or "<anonymous>",
            "owner": owner_username,
            "operation": operation.value,
        },
    )
    if principal.is_anonymous:
        raise UnauthenticatedError("Authentication required.")
    raise ForbiddenError("Not allowed to access this resource.")


def require_authenticated(principal: Principal) -> None:
    """Raise UnauthenticatedError for the anonymous principal."""
    if principal.is_anonymous:
        raise UnauthenticatedError("Authentication required.")

"""
Account directory: registration, lookup, credential/username/role changes and deletion.

Every function takes the acting Principal explicitly. A user's own account is
the resource it owns, so the owner username passed to the access engine is the
account's username. Stored hashes only leave this module for the owner or an
admin, and even then only inside AccountView.
"""

import logging
from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.database import store_call
from app.core.errors import ConflictError, InvalidInputError, NotFoundError
from app.core.security import USERNAME_MAX_LEN, hash_password
from app.models.user import User
from app.schemas.auth import Principal, Role
from app.schemas.users import AccountView
from app.services.access import Operation, enforce, is_allowed, require_authenticated
from app.services.journal import purge_entries

logger = logging.getLogger(__name__)

ADMIN_ONLY: frozenset[Role] = frozenset({Role.ADMIN})
DEFAULT_ROLES: frozenset[Role] = frozenset({Role.USER})


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _clean_username(username: str | None) -> str:
    if _blank(username):
        raise InvalidInputError("Username is required.")
    cleaned = username.strip()
    if len(cleaned) > USERNAME_MAX_LEN:
        raise InvalidInputError("Invalid username length.")
    return cleaned


def _clean_roles(roles: Iterable[Role | str] | None) -> list[str]:
    if roles is None:
        return sorted(r.value for r in DEFAULT_ROLES)
    try:
        role_set = {Role(r) for r in roles}
    except ValueError:
        raise InvalidInputError("Roles must be USER or ADMIN.")
    if not role_set:
        raise InvalidInputError("At least one role is required.")
    return sorted(r.value for r in role_set)


def _view(user: User, principal: Principal) -> AccountView:
    """Build the AccountView, keeping the hash only for the owner or an admin."""
    view = AccountView(
        id=user.id,
        username=user.username,
        roles=[Role(r) for r in user.roles],
        created_at=user.created_at,
        entry_count=len(user.entries),
    )
    if is_allowed(principal, user.username, Operation.READ):
        view.password_hash = user.password_hash
    return view


def _get_user(db: Session, user_id: int) -> User:
    with store_call(db):
        user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found.")
    return user


def _username_owner_id(db: Session, username: str) -> int | None:
    with store_call(db):
        return db.scalar(select(User.id).where(User.username == username))


def register(
    db: Session,
    principal: Principal,
    username: str,
    raw_password: str,
    roles: Iterable[Role | str] | None = None,
) -> AccountView:
    """
    Create an account. Anyone may register a USER account; asking for ADMIN
    requires an admin principal. Raises InvalidInputError, ConflictError.
    """
    cleaned = _clean_username(username)
    if _blank(raw_password):
        raise InvalidInputError("Password is required.")
    role_names = _clean_roles(roles)
    if Role.ADMIN.value in role_names:
        enforce(principal, None, Operation.CREATE, required_roles=ADMIN_ONLY)

    if _username_owner_id(db, cleaned) is not None:
        raise ConflictError("Username already exists.")

    user = User(
        username=cleaned,
        password_hash=hash_password(raw_password),
        roles=role_names,
    )
    with store_call(db, commit=True):
        db.add(user)
    db.refresh(user)
    logger.info(
        "Account registered",
        extra={"user_id": user.id, "username": user.username, "roles": role_names},
    )
    return _view(user, principal)


def get_by_id(db: Session, principal: Principal, user_id: int) -> AccountView:
    require_authenticated(principal)
    return _view(_get_user(db, user_id), principal)


def get_by_username(db: Session, principal: Principal, username: str) -> AccountView:
    require_authenticated(principal)
    with store_call(db):
        user = db.scalar(select(User).where(User.username == username))
    if user is None:
        raise NotFoundError("User not found.")
    return _view(user, principal)


def list_all(db: Session, principal: Principal) -> list[AccountView]:
    """All accounts by id; each record is stripped unless the caller owns it or is an admin."""
    require_authenticated(principal)
    with store_call(db):
        users = db.scalars(select(User).order_by(User.id)).all()
    return [_view(u, principal) for u in users]


def count_all(db: Session, principal: Principal) -> int:
    """Number of accounts (admin only)."""
    enforce(principal, None, Operation.READ, required_roles=ADMIN_ONLY)
    with store_call(db):
        return db.scalar(select(func.count(User.id))) or 0


def _apply_username(db: Session, user: User, new_username: str | None) -> bool:
    if _blank(new_username):
        return False
    cleaned = _clean_username(new_username)
    if cleaned == user.username:
        return False
    owner_id = _username_owner_id(db, cleaned)
    if owner_id is not None and owner_id != user.id:
        raise ConflictError("Username already exists.")
    user.username = cleaned
    return True


def _apply_password(user: User, new_raw_password: str | None) -> bool:
    # Blank keeps the existing hash rather than clearing it.
    if _blank(new_raw_password):
        return False
    user.password_hash = hash_password(new_raw_password)
    return True


def update_account(
    db: Session,
    principal: Principal,
    user_id: int,
    username: str | None = None,
    password: str | None = None,
) -> AccountView:
    """Partial update of username and/or password in one write; blank fields are left as they are."""
    require_authenticated(principal)
    user = _get_user(db, user_id)
    enforce(principal, user.username, Operation.UPDATE)

    old_username = user.username
    # Hash first so an invalid password cannot leave a half-applied rename behind.
    new_hash = None if _blank(password) else hash_password(password)
    with store_call(db, commit=True):
        renamed = _apply_username(db, user, username)
        if new_hash is not None:
            user.password_hash = new_hash

    if renamed or new_hash is not None:
        logger.info(
            "Account updated",
            extra={
                "user_id": user.id,
                "renamed_from": old_username if renamed else None,
                "credential_changed": new_hash is not None,
            },
        )
    return _view(user, principal)


def update_credential(
    db: Session, principal: Principal, user_id: int, new_raw_password: str | None
) -> AccountView:
    """Re-hash and replace the password. A blank password is a no-op."""
    require_authenticated(principal)
    user = _get_user(db, user_id)
    enforce(principal, user.username, Operation.UPDATE)
    with store_call(db, commit=True):
        changed = _apply_password(user, new_raw_password)
    if changed:
        logger.info("Credential changed", extra={"user_id": user.id})
    return _view(user, principal)


def update_username(
    db: Session, principal: Principal, user_id: int, new_username: str | None
) -> AccountView:
    """Rename an account. ConflictError if the name belongs to a different account."""
    require_authenticated(principal)
    user = _get_user(db, user_id)
    enforce(principal, user.username, Operation.UPDATE)
    old_username = user.username
    with store_call(db, commit=True):
        renamed = _apply_username(db, user, new_username)
    if renamed:
        logger.info(
            "Username changed",
            extra={"user_id": user.id, "renamed_from": old_username, "renamed_to": user.username},
        )
    return _view(user, principal)


def update_roles(
    db: Session, principal: Principal, user_id: int, roles: Iterable[Role | str]
) -> AccountView:
    """Replace the role set of an account. Only an admin may do this, including on their own account."""
    require_authenticated(principal)
    user = _get_user(db, user_id)
    enforce(principal, user.username, Operation.UPDATE, required_roles=ADMIN_ONLY)
    role_names = _clean_roles(roles)
    with store_call(db, commit=True):
        user.roles = role_names
    logger.info("Roles changed", extra={"user_id": user.id, "roles": role_names})
    return _view(user, principal)


def delete_account(db: Session, principal: Principal, user_id: int) -> tuple[bool, int]:
    """
    Delete an account and all its entries. Returns (deleted, entries_deleted).

    Runs as two steps that each commit: purge the entries, then remove the user.
    If the second step fails the account survives with no entries, and a retry
    finds nothing left to purge. A missing account gives (False, 0).
    """
    require_authenticated(principal)
    with store_call(db):
        user = db.get(User, user_id)
    if user is None:
        return (False, 0)
    enforce(principal, user.username, Operation.DELETE)

    entries_deleted = purge_entries(db, user.id)
    with store_call(db, commit=True):
        db.delete(user)
    logger.info(
        "Account deleted",
        extra={"user_id": user_id, "entries_deleted": entries_deleted},
    )
    return (True, entries_deleted)

"""Tests for app.services.accounts against an in-memory database."""

import unittest

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    UnauthenticatedError,
)
from app.core.security import verify_password
from app.models import JournalEntry, User
from app.schemas.auth import Role
from app.services import accounts, journal
from app.services.principal import ANONYMOUS, OPERATOR
from tests.support import admin_principal, make_session, user_principal


class AccountsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session()
        self.alice = accounts.register(self.db, ANONYMOUS, "alice", "secret")
        self.bob = accounts.register(self.db, ANONYMOUS, "bob", "hunter2")

    def tearDown(self) -> None:
        self.db.close()

    def stored(self, user_id: int) -> User:
        self.db.expire_all()
        return self.db.get(User, user_id)


class TestRegister(AccountsTestCase):
    def test_defaults_to_user_role(self) -> None:
        self.assertEqual(self.alice.roles, [Role.USER])

    def test_stores_hash_not_plain(self) -> None:
        user = self.stored(self.alice.id)
        self.assertNotEqual(user.password_hash, "secret")
        self.assertTrue(verify_password("secret", user.password_hash))

    def test_anonymous_registration_view_has_no_hash(self) -> None:
        self.assertIsNone(self.alice.password_hash)

    def test_duplicate_username_conflicts(self) -> None:
        with self.assertRaises(ConflictError):
            accounts.register(self.db, ANONYMOUS, "alice", "other")

    def test_username_is_case_sensitive(self) -> None:
        view = accounts.register(self.db, ANONYMOUS, "Alice", "other")
        self.assertEqual(view.username, "Alice")

    def test_blank_username_rejected(self) -> None:
        for name in ("", "   "):
            with self.subTest(name=name):
                with self.assertRaises(InvalidInputError):
                    accounts.register(self.db, ANONYMOUS, name, "pw")

    def test_blank_password_rejected(self) -> None:
        with self.assertRaises(InvalidInputError):
            accounts.register(self.db, ANONYMOUS, "carol", "  ")

    def test_overlong_username_rejected(self) -> None:
        with self.assertRaises(InvalidInputError):
            accounts.register(self.db, ANONYMOUS, "x" * 256, "pw")

    def test_empty_role_set_rejected(self) -> None:
        with self.assertRaises(InvalidInputError):
            accounts.register(self.db, ANONYMOUS, "carol", "pw", roles=[])

    def test_unknown_role_rejected(self) -> None:
        with self.assertRaises(InvalidInputError):
            accounts.register(self.db, ANONYMOUS, "carol", "pw", roles=["ROOT"])

    def test_admin_role_needs_admin(self) -> None:
        with self.assertRaises(UnauthenticatedError):
            accounts.register(self.db, ANONYMOUS, "carol", "pw", roles=[Role.ADMIN])
        with self.assertRaises(ForbiddenError):
            accounts.register(self.db, user_principal("alice"), "carol", "pw", roles=[Role.ADMIN])

    def test_admin_can_provision_admin(self) -> None:
        view = accounts.register(self.db, admin_principal(), "carol", "pw", roles=["ADMIN"])
        self.assertEqual(view.roles, [Role.ADMIN])
        self.assertIsNotNone(view.password_hash)


class TestReadPaths(AccountsTestCase):
    def test_owner_sees_hash(self) -> None:
        view = accounts.get_by_id(self.db, user_principal("alice"), self.alice.id)
        self.assertIsNotNone(view.password_hash)

    def test_admin_sees_hash(self) -> None:
        view = accounts.get_by_username(self.db, admin_principal(), "alice")
        self.assertIsNotNone(view.password_hash)

    def test_other_user_gets_stripped_view(self) -> None:
        view = accounts.get_by_id(self.db, user_principal("bob"), self.alice.id)
        self.assertEqual(view.username, "alice")
        self.assertIsNone(view.password_hash)

    def test_list_all_strips_per_record(self) -> None:
        views = {v.username: v for v in accounts.list_all(self.db, user_principal("alice"))}
        self.assertIsNotNone(views["alice"].password_hash)
        self.assertIsNone(views["bob"].password_hash)

    def test_anonymous_cannot_read(self) -> None:
        with self.assertRaises(UnauthenticatedError):
            accounts.get_by_id(self.db, ANONYMOUS, self.alice.id)
        with self.assertRaises(UnauthenticatedError):
            accounts.list_all(self.db, ANONYMOUS)

    def test_missing_user(self) -> None:
        with self.assertRaises(NotFoundError):
            accounts.get_by_id(self.db, admin_principal(), 9999)
        with self.assertRaises(NotFoundError):
            accounts.get_by_username(self.db, admin_principal(), "nobody")

    def test_count_is_admin_only(self) -> None:
        self.assertEqual(accounts.count_all(self.db, admin_principal()), 2)
        with self.assertRaises(ForbiddenError):
            accounts.count_all(self.db, user_principal("alice"))

    def test_entry_count(self) -> None:
        journal.create_entry(self.db, user_principal("alice"), "alice", "T", "C")
        view = accounts.get_by_id(self.db, user_principal("alice"), self.alice.id)
        self.assertEqual(view.entry_count, 1)


class TestUpdateCredential(AccountsTestCase):
    def test_owner_changes_password(self) -> None:
        accounts.update_credential(self.db, user_principal("alice"), self.alice.id, "newpass")
        user = self.stored(self.alice.id)
        self.assertTrue(verify_password("newpass", user.password_hash))
        self.assertFalse(verify_password("secret", user.password_hash))

    def test_blank_password_keeps_existing_hash(self) -> None:
        before = self.stored(self.alice.id).password_hash
        for blank in ("", "   ", None):
            with self.subTest(blank=blank):
                accounts.update_credential(self.db, user_principal("alice"), self.alice.id, blank)
                self.assertEqual(self.stored(self.alice.id).password_hash, before)

    def test_other_user_forbidden(self) -> None:
        with self.assertRaises(ForbiddenError):
            accounts.update_credential(self.db, user_principal("bob"), self.alice.id, "pwned")

    def test_admin_allowed(self) -> None:
        accounts.update_credential(self.db, admin_principal(), self.alice.id, "reset")
        self.assertTrue(verify_password("reset", self.stored(self.alice.id).password_hash))


class TestUpdateUsername(AccountsTestCase):
    def test_rename(self) -> None:
        view = accounts.update_username(self.db, user_principal("alice"), self.alice.id, "alicia")
        self.assertEqual(view.username, "alicia")

    def test_rename_to_taken_name_conflicts(self) -> None:
        with self.assertRaises(ConflictError):
            accounts.update_username(self.db, user_principal("alice"), self.alice.id, "bob")
        self.assertEqual(self.stored(self.alice.id).username, "alice")

    def test_rename_to_own_name_is_noop(self) -> None:
        view = accounts.update_username(self.db, user_principal("alice"), self.alice.id, "alice")
        self.assertEqual(view.username, "alice")

    def test_blank_is_noop(self) -> None:
        view = accounts.update_username(self.db, user_principal("alice"), self.alice.id, " ")
        self.assertEqual(view.username, "alice")

    def test_other_user_forbidden(self) -> None:
        with self.assertRaises(ForbiddenError):
            accounts.update_username(self.db, user_principal("bob"), self.alice.id, "mallory")


class TestUpdateAccount(AccountsTestCase):
    def test_username_and_password_together(self) -> None:
        accounts.update_account(
            self.db, user_principal("alice"), self.alice.id, username="alicia", password="pw2"
        )
        user = self.stored(self.alice.id)
        self.assertEqual(user.username, "alicia")
        self.assertTrue(verify_password("pw2", user.password_hash))

    def test_conflict_changes_nothing(self) -> None:
        before = self.stored(self.alice.id).password_hash
        with self.assertRaises(ConflictError):
            accounts.update_account(
                self.db, user_principal("alice"), self.alice.id, username="bob", password="pw2"
            )
        user = self.stored(self.alice.id)
        self.assertEqual(user.username, "alice")
        self.assertEqual(user.password_hash, before)

    def test_invalid_password_changes_nothing(self) -> None:
        with self.assertRaises(InvalidInputError):
            accounts.update_account(
                self.db, user_principal("alice"), self.alice.id, username="alicia", password="x" * 80
            )
        self.assertEqual(self.stored(self.alice.id).username, "alice")


class TestUpdateRoles(AccountsTestCase):
    def test_admin_grants_admin(self) -> None:
        view = accounts.update_roles(self.db, admin_principal(), self.bob.id, [Role.USER, Role.ADMIN])
        self.assertEqual(set(view.roles), {Role.USER, Role.ADMIN})

    def test_owner_cannot_change_own_roles(self) -> None:
        with self.assertRaises(ForbiddenError):
            accounts.update_roles(self.db, user_principal("bob"), self.bob.id, [Role.ADMIN])

    def test_empty_roles_rejected(self) -> None:
        with self.assertRaises(InvalidInputError):
            accounts.update_roles(self.db, admin_principal(), self.bob.id, [])


class TestDeleteAccount(AccountsTestCase):
    def count_entries(self, owner_id: int) -> int:
        return self.db.scalar(
            select(func.count(JournalEntry.id)).where(JournalEntry.owner_id == owner_id)
        )

    def test_delete_cascades_to_entries(self) -> None:
        alice = user_principal("alice")
        journal.create_entry(self.db, alice, "alice", "one", "1")
        journal.create_entry(self.db, alice, "alice", "two", "2")
        journal.create_entry(self.db, user_principal("bob"), "bob", "bob's", "b")

        deleted, entries_deleted = accounts.delete_account(self.db, alice, self.alice.id)

        self.assertTrue(deleted)
        self.assertEqual(entries_deleted, 2)
        self.assertIsNone(self.stored(self.alice.id))
        self.assertEqual(self.count_entries(self.alice.id), 0)
        self.assertEqual(self.count_entries(self.bob.id), 1)

    def test_store_refuses_user_row_while_entries_remain(self) -> None:
        journal.create_entry(self.db, user_principal("alice"), "alice", "T", "C")
        self.db.delete(self.db.get(User, self.alice.id))
        with self.assertRaises(IntegrityError):
            self.db.commit()
        self.db.rollback()
        self.assertEqual(self.count_entries(self.alice.id), 1)
        # Purging first is what lets the account row go.
        self.assertEqual(accounts.delete_account(self.db, OPERATOR, self.alice.id), (True, 1))
        self.assertIsNone(self.stored(self.alice.id))

    def test_second_delete_is_not_an_error(self) -> None:
        admin = admin_principal()
        self.assertEqual(accounts.delete_account(self.db, admin, self.alice.id), (True, 0))
        self.assertEqual(accounts.delete_account(self.db, admin, self.alice.id), (False, 0))

    def test_cascade_step_is_idempotent(self) -> None:
        journal.create_entry(self.db, user_principal("alice"), "alice", "T", "C")
        self.assertEqual(journal.purge_entries(self.db, self.alice.id), 1)
        self.assertEqual(journal.purge_entries(self.db, self.alice.id), 0)
        # A retried account delete after a partial cascade still completes.
        self.assertEqual(
            accounts.delete_account(self.db, user_principal("alice"), self.alice.id), (True, 0)
        )

    def test_other_user_forbidden(self) -> None:
        with self.assertRaises(ForbiddenError):
            accounts.delete_account(self.db, user_principal("bob"), self.alice.id)
        self.assertIsNotNone(self.stored(self.alice.id))

    def test_anonymous_unauthenticated(self) -> None:
        with self.assertRaises(UnauthenticatedError):
            accounts.delete_account(self.db, ANONYMOUS, self.alice.id)

    def test_operator_can_delete(self) -> None:
        self.assertEqual(accounts.delete_account(self.db, OPERATOR, self.bob.id), (True, 0))


if __name__ == "__main__":
    unittest.main()

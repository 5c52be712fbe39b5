"""
Create a user (e.g. first admin). Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [role]
Example:
  python -m app.scripts.create_user admin your-secure-password admin
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.core.errors import JournalError
from app.schemas.auth import Role
from app.services.accounts import register
from app.services.principal import OPERATOR

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a journal user from the command line.")
    parser.add_argument("username", help="Username (1-255 chars, case-sensitive)")
    parser.add_argument("password", help="Password (non-blank, at most 72 bytes)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    role = Role(args.role.upper())
    db = SessionLocal()
    try:
        view = register(db, OPERATOR, args.username, args.password, roles=[role])
    except JournalError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{view.username}' with role '{role.value}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

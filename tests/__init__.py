"""Test package. Points the app at an in-memory database and a cheap bcrypt cost before anything imports it."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("JOURNAL_PUBLIC_READ", "false")

"""Test environment: in-memory SQLite and a fixed signing secret, set before the app is imported."""

import os

os.environ.setdefault("APP_ENV", "dev")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-0123456789abcdef0123"
os.environ["PUBLIC_BASE_URL"] = "http://testserver"
os.environ["BCRYPT_ROUNDS"] = "5"

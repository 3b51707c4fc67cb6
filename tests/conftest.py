"""
Test environment defaults.

Settings are read once at import of app.core.config, so these must be in place
before any app module is imported: an in-memory SQLite database shared across
threads and a low bcrypt cost to keep hashing fast.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret")

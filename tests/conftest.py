"""
Main conftest file: pins a test environment before any app module is imported,
then re-exports the fixtures from the modular files under tests/fixtures.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
for key in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "STRIPE_SECRET_KEY", "REDIS_URL"):
    os.environ[key] = ""

from tests.fixtures.client import client  # noqa: E402,F401
from tests.fixtures.db import db_engine, db_session  # noqa: E402,F401
from tests.fixtures.helpers import admin, buyer, other_buyer, seller  # noqa: E402,F401
from tests.fixtures.mocks import mock_payment_client, mock_supabase_client  # noqa: E402,F401

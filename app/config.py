"""
Application configuration.

Defaults live on `Config`; any key can be overridden with a CARHIRE_-prefixed
environment variable (e.g. CARHIRE_DATA_PATH=/var/lib/carhire/data.pkl).
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]


class Config:
    SECRET_KEY = "dev-secret-change-me"
    DATA_PATH = str(BASE_DIR / "data.pkl")

    # "today" for booking validation is evaluated in this zone
    BUSINESS_TIMEZONE = "Africa/Nairobi"

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Create director/staff/owner/client demo logins on an empty store
    SEED_DEMO_USERS = True


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test"
    SEED_DEMO_USERS = False

# config/settings/test.py
from .base import *  # noqa

SECRET_KEY = "test-secret-key"
DEBUG = False

# PostgreSQL-only behavior (ranked search) needs TEST_DB_ENGINE=postgresql
if os.getenv("TEST_DB_ENGINE", "sqlite").lower() != "postgresql":  # noqa: F405
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": ":memory:",
        }
    }

IDENTITY_SERVICE_URL = "http://identity.test"

LOGGING["loggers"]["clinic_core"]["level"] = "WARNING"  # noqa: F405

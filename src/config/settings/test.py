"""Test settings - uses SQLite for fast local testing."""
import os

# base.py validates SECRET_KEY against DEBUG at import time
os.environ.setdefault("DEBUG", "True")
os.environ.setdefault(
    "SECRET_KEY",
    "test-secret-key-that-is-long-enough-for-the-weak-key-check-0123456789",
)

from .base import *  # noqa: E402,F401,F403

DEBUG = True
SECRET_KEY = os.environ["SECRET_KEY"]

# Use SQLite for tests (no PostgreSQL dependency)
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}
DATABASES["default"]["ATOMIC_REQUESTS"] = False

# Faster password hashing in tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# Disable Redis cache in tests
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# Disable Celery in tests
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

# Disable default API throttling; auth views keep their own scoped throttle
REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []  # noqa: F405
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {  # noqa: F405
    "auth_burst": "1000/min",
    "auth_sustained": "1000/min",
    "public_documents": "1000/min",
}

# Email
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

# Integrations never reach the network in tests
CLICKUP_API_TOKEN = ""
STRIPE_SECRET_KEY = ""
RESEND_API_KEY = ""
ANTHROPIC_API_KEY = ""
GOOGLE_PLACES_API_KEY = ""
YELP_FUSION_API_KEY = ""
AGENCY_COMPANY_ID = ""

# Disable logging noise during tests
LOGGING["root"]["level"] = "WARNING"  # noqa: F405
LOGGING["loggers"]["portal"]["handlers"] = ["console"]  # noqa: F405
LOGGING["loggers"]["portal"]["level"] = "WARNING"  # noqa: F405

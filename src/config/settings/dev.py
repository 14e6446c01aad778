"""Development settings."""
import os

os.environ.setdefault("DEBUG", "True")

from .base import *  # noqa: E402,F401,F403

DEBUG = True

# Debug toolbar
try:
    import debug_toolbar  # noqa: F401
    INSTALLED_APPS += ["debug_toolbar"]  # noqa: F405
    MIDDLEWARE.insert(0, "debug_toolbar.middleware.DebugToolbarMiddleware")  # noqa: F405
    INTERNAL_IPS = ["127.0.0.1"]
except ImportError:
    pass

# Email
EMAIL_BACKEND = env(  # noqa: F405
    "EMAIL_BACKEND",
    default="django.core.mail.backends.console.EmailBackend",
)

# CORS
CORS_ALLOW_ALL_ORIGINS = True

# Logging
LOGGING["root"]["level"] = "DEBUG"  # noqa: F405

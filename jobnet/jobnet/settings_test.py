"""Settings for the test suite: in-memory SQLite, fast hashing, throwaway media."""
import tempfile
from pathlib import Path

from .settings import *  # noqa: F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

MEDIA_ROOT = Path(tempfile.mkdtemp(prefix="jobnet-media-"))

LOGGING["root"]["handlers"] = ["console"]  # noqa: F405
LOGGING["root"]["level"] = "WARNING"  # noqa: F405

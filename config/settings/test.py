# config/settings/test.py
from .base import *  # noqa

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

EMR_ROOT_DOMAIN = "emr.test"
EMR_TENANT_FALLBACK_ENABLED = True

GOOGLE_GENERATIVE_AI_API_KEY = "test-key"

LOGGING["loggers"]["emr_core"]["level"] = "WARNING"

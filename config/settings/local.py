# config/settings/local.py
from .base import *  # noqa

DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"

EMR_TENANT_FALLBACK_ENABLED = os.getenv("EMR_TENANT_FALLBACK_ENABLED", "1") == "1"

# emr_core/tenants/domain.py
"""
Host header -> tenant subdomain.

Tenants live on <subdomain>.<EMR_ROOT_DOMAIN>. In development any
<subdomain>.localhost[:port] host also works.
"""
from __future__ import annotations

import re
from typing import Optional

from django.conf import settings

SUBDOMAIN_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")


def root_domain() -> str:
    return getattr(settings, "EMR_ROOT_DOMAIN", "localhost:8000")


def protocol() -> str:
    return "http" if settings.DEBUG else "https"


def hostname_from_host_header(host_header: Optional[str]) -> str:
    return (host_header or "").split(":")[0].strip().lower()


def extract_subdomain(hostname: str) -> Optional[str]:
    """
    foo.localhost -> "foo"; localhost -> None
    foo.<root> -> "foo"; <root> / www.<root> -> None
    anything else -> None
    """
    hostname = (hostname or "").lower()
    if not hostname:
        return None

    if hostname == "localhost" or hostname.endswith(".localhost"):
        parts = hostname.split(".")
        if len(parts) > 1 and parts[0] != "localhost":
            return parts[0]
        return None

    base = root_domain().split(":")[0].lower()
    if hostname in (base, f"www.{base}"):
        return None
    if hostname.endswith(f".{base}"):
        return hostname[: -len(base) - 1] or None
    return None


def is_valid_subdomain(value: str) -> bool:
    return bool(SUBDOMAIN_RE.match(value or ""))


def tenant_url(subdomain: str) -> str:
    return f"{protocol()}://{subdomain}.{root_domain()}"

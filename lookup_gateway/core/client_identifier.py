"""Heuristic client identification for quota accounting.

The key is derived from a forwarded IP header and the first 20 characters
of the User-Agent. Both headers are supplied by the caller, so the key is
spoofable (a client can rotate either header to get a fresh quota) and
collidable (clients behind one NAT with the same browser share a quota).
It is a coarse limiter, not an identity or a security boundary.
"""

from __future__ import annotations

import base64
import re
from typing import Mapping, Optional, Sequence

UNKNOWN_IP = "unknown"
USER_AGENT_PREFIX = 20

DEFAULT_IP_HEADERS = ("CF-Connecting-IP", "X-Forwarded-For")


def client_key(ip: Optional[str], user_agent: Optional[str] = None) -> str:
    """Build a deterministic, alphanumeric-only key from IP and UA prefix."""
    raw = (ip or UNKNOWN_IP) + (user_agent or "")[:USER_AGENT_PREFIX]
    encoded = base64.b64encode(raw.encode("utf-8")).decode("ascii")
    return re.sub(r"[^A-Za-z0-9]", "", encoded)


def forwarded_ip(headers: Mapping[str, str], ip_headers: Sequence[str] = DEFAULT_IP_HEADERS) -> Optional[str]:
    """Return the first non-empty forwarded IP among ``ip_headers``.

    For list-valued headers such as X-Forwarded-For only the first hop is used.
    """
    for name in ip_headers:
        value = headers.get(name)
        if value:
            first = value.split(",")[0].strip()
            if first:
                return first
    return None


def client_key_from_headers(
    headers: Mapping[str, str],
    ip_headers: Sequence[str] = DEFAULT_IP_HEADERS,
) -> str:
    return client_key(forwarded_ip(headers, ip_headers), headers.get("User-Agent"))

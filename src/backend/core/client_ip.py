"""
Client IP extraction from proxy headers.
"""

from collections.abc import Mapping
from typing import Optional


def _get_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup for plain dicts and header objects."""
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def extract_client_ip(headers: Mapping[str, str], socket_ip: Optional[str] = None) -> Optional[str]:
    """
    Extract the client IP address from request headers.

    Checks, in order:
    1. X-Forwarded-For (first address of "client, proxy1, proxy2")
    2. X-Real-IP (nginx style)
    3. The socket peer address, if given

    Returns:
        Client IP string or None if nothing usable was found
    """
    forwarded_for = _get_header(headers, "X-Forwarded-For")
    if forwarded_for:
        first_ip = forwarded_for.split(",")[0].strip()
        if first_ip:
            return first_ip

    real_ip = _get_header(headers, "X-Real-IP")
    if real_ip:
        trimmed = real_ip.strip()
        if trimmed:
            return trimmed

    if socket_ip:
        return socket_ip

    return None

"""
Timezone mismatch detection.

Compares the browser-reported timezone with the one derived from IP
geolocation. A mismatch hints at a VPN or proxy.
"""

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# Different names, same zone
TIMEZONE_ALIASES: tuple[tuple[str, str], ...] = (
    ("UTC", "GMT"),
    ("US/Eastern", "America/New_York"),
    ("US/Central", "America/Chicago"),
    ("US/Mountain", "America/Denver"),
    ("US/Pacific", "America/Los_Angeles"),
    ("US/Hawaii", "Pacific/Honolulu"),
    ("Europe/London", "GB"),
    ("Asia/Calcutta", "Asia/Kolkata"),
    ("Asia/Ulaanbaatar", "Asia/Ulan_Bator"),
)


def get_utc_offset(tz_name: str, at: Optional[datetime] = None) -> Optional[int]:
    """
    Get the UTC offset in minutes of an IANA zone at a given instant.

    Args:
        tz_name: IANA timezone name (e.g. "Asia/Kolkata")
        at: Instant to evaluate (defaults to now); DST is taken into account

    Returns:
        Offset in minutes, or None if the zone name is invalid
    """
    try:
        zone = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return None

    instant = at or datetime.now(timezone.utc)
    offset = instant.astimezone(zone).utcoffset()
    if offset is None:
        return None
    return int(offset.total_seconds() // 60)


def are_timezones_equivalent(tz1: str, tz2: str) -> bool:
    """Check the alias table in both directions."""
    return any((tz1 == a and tz2 == b) or (tz1 == b and tz2 == a) for a, b in TIMEZONE_ALIASES)


def get_timezone_mismatch(
    browser_timezone: Optional[str],
    geo_timezone: Optional[str],
    at: Optional[datetime] = None,
) -> int:
    """
    Compare two IANA timezone names.

    Returns:
        0 if they match or cannot be compared, 1 if they mismatch
    """
    if not browser_timezone or not geo_timezone:
        return 0

    if browser_timezone == geo_timezone:
        return 0

    now = at or datetime.now(timezone.utc)
    browser_offset = get_utc_offset(browser_timezone, now)
    geo_offset = get_utc_offset(geo_timezone, now)

    if browser_offset is not None and geo_offset is not None and browser_offset == geo_offset:
        return 0

    if are_timezones_equivalent(browser_timezone, geo_timezone):
        return 0

    # Unknown zone names get the benefit of the doubt
    if browser_offset is None or geo_offset is None:
        return 0

    return 1

"""
IPv4 CIDR range matching.

Shared by the VPN, datacenter and private-address checks. All helpers are
total: malformed input yields INVALID_IP or False, never an exception.
"""

from collections.abc import Iterable

INVALID_IP = -1

_FULL_MASK = 0xFFFFFFFF

PRIVATE_RANGES = (
    "10.0.0.0/8",
    "172.16.0.0/12",
    "192.168.0.0/16",
    "127.0.0.0/8",
    "169.254.0.0/16",
    "::1/128",
)


def ip_to_int(ip: str) -> int:
    """Pack a dotted-quad IPv4 string into an unsigned 32-bit integer."""
    if not isinstance(ip, str):
        return INVALID_IP

    parts = ip.split(".")
    if len(parts) != 4:
        return INVALID_IP

    value = 0
    for part in parts:
        if not part.isascii() or not part.isdigit():
            return INVALID_IP
        octet = int(part)
        if octet > 255:
            return INVALID_IP
        value = (value << 8) | octet
    return value


def _prefix_mask(cidr: str, slash_idx: int) -> int | None:
    """Parse the prefix after the slash into a netmask, or None if invalid."""
    bits_text = cidr[slash_idx + 1 :].strip()
    if not bits_text.isascii() or not bits_text.isdigit():
        return None
    bits = int(bits_text)
    if bits > 32:
        return None
    if bits == 0:
        return 0
    return (_FULL_MASK << (32 - bits)) & _FULL_MASK


def is_in_cidr(ip: str, cidr: str) -> bool:
    """Check if an IPv4 address falls within a CIDR range (e.g. "10.0.0.0/8")."""
    slash_idx = cidr.find("/")
    if slash_idx == -1:
        # Bare address: exact string match
        return ip == cidr

    mask = _prefix_mask(cidr, slash_idx)
    if mask is None:
        return False

    ip_int = ip_to_int(ip)
    range_int = ip_to_int(cidr[:slash_idx])
    if ip_int == INVALID_IP or range_int == INVALID_IP:
        return False

    return (ip_int & mask) == (range_int & mask)


def is_in_cidr_list(ip: str, cidrs: Iterable[str]) -> bool:
    """Check if an IP is in any of the ranges; bad entries are skipped."""
    ip_int = ip_to_int(ip)
    if ip_int == INVALID_IP:
        return False

    for cidr in cidrs:
        slash_idx = cidr.find("/")
        if slash_idx == -1:
            if ip_to_int(cidr) == ip_int:
                return True
            continue

        mask = _prefix_mask(cidr, slash_idx)
        if mask is None:
            continue
        range_int = ip_to_int(cidr[:slash_idx])
        if range_int == INVALID_IP:
            continue

        if (ip_int & mask) == (range_int & mask):
            return True

    return False


def is_private_ip(ip: str) -> bool:
    """Check if an IP is a private, loopback or link-local address."""
    return is_in_cidr_list(ip, PRIVATE_RANGES)


def is_ipv6(ip: str) -> bool:
    """Simplified IPv6 check: any colon means IPv6."""
    return ":" in ip

"""
IP reputation lists (VPN ranges, Tor exit nodes, datacenter ranges).

Each list is read from a flat file produced by the list refresh job:

- VPN: one CIDR range (or bare IPv4) per line
- Tor: one exit node IPv4 per line
- Datacenter: "startIP,endIP,Provider" CSV lines

Lines starting with "#" and blank lines are ignored. A list is parsed on
first lookup, kept for the life of the process, and can be reset or
replaced from a string in tests. A missing or unreadable file leaves the
list empty: reputation checks degrade to "not flagged", never to an error.
"""

import re
import threading
from abc import ABC, abstractmethod
from bisect import bisect_right
from collections.abc import Iterator, Sized
from functools import lru_cache
from operator import attrgetter
from pathlib import Path
from typing import Generic, NamedTuple, Optional, TypeVar, Union

import structlog

from core.cidr import INVALID_IP, ip_to_int, is_in_cidr_list, is_ipv6
from core.config import settings

logger = structlog.get_logger(__name__)

TOR_IP_PATTERN = re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}$")

EntriesT = TypeVar("EntriesT", bound=Sized)


def iter_list_lines(content: str) -> Iterator[str]:
    """Yield trimmed, non-empty, non-comment lines."""
    for line in content.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            yield stripped


class IPReputationList(ABC, Generic[EntriesT]):
    """
    Lazily loaded, process-wide IP list.

    The first lookup parses the backing file under a lock so concurrent
    first requests load it once. After that the parsed structure is
    read-only.
    """

    name: str = "ip"

    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path) if path is not None else None
        self._entries: Optional[EntriesT] = None
        self._lock = threading.Lock()

    @abstractmethod
    def parse(self, content: str) -> EntriesT:
        """Parse file content into the lookup structure."""

    @property
    def is_loaded(self) -> bool:
        return self._entries is not None

    def entries(self) -> EntriesT:
        """Return the parsed list, loading it on first use."""
        entries = self._entries
        if entries is not None:
            return entries

        with self._lock:
            if self._entries is None:
                self._entries = self._load()
            return self._entries

    def _load(self) -> EntriesT:
        if self.path is None or not self.path.exists():
            logger.warning(
                "ip_list_missing",
                list=self.name,
                path=str(self.path),
                hint="run the IP list update job to download it",
            )
            return self.parse("")

        try:
            content = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("ip_list_unreadable", list=self.name, path=str(self.path), error=str(e))
            return self.parse("")

        entries = self.parse(content)
        logger.info("ip_list_loaded", list=self.name, count=len(entries))
        return entries

    def size(self) -> int:
        """Number of loaded entries (for monitoring)."""
        return len(self.entries())

    def load_from_content(self, content: str) -> None:
        """Replace the cached list with entries parsed from a string."""
        parsed = self.parse(content)
        with self._lock:
            self._entries = parsed

    def reset(self) -> None:
        """Drop the cached list; the next lookup reloads from the file."""
        with self._lock:
            self._entries = None


class VpnList(IPReputationList[tuple[str, ...]]):
    """Known VPN provider CIDR ranges (IPv4 only)."""

    name = "vpn"

    def parse(self, content: str) -> tuple[str, ...]:
        return tuple(iter_list_lines(content))

    def contains(self, ip: Optional[str]) -> bool:
        """Check if an IP belongs to a known VPN provider."""
        if not ip or is_ipv6(ip):
            return False

        cidrs = self.entries()
        if not cidrs:
            return False

        # Ranges cannot be hashed, so this is a linear scan
        return is_in_cidr_list(ip, cidrs)


class TorExitList(IPReputationList[frozenset[str]]):
    """Current Tor exit nodes (exact IPv4 addresses, set lookup)."""

    name = "tor"

    def parse(self, content: str) -> frozenset[str]:
        return frozenset(line for line in iter_list_lines(content) if TOR_IP_PATTERN.match(line))

    def contains(self, ip: Optional[str]) -> bool:
        """Check if an IP is a known Tor exit node."""
        if not ip or is_ipv6(ip):
            return False
        return ip in self.entries()


class DatacenterRange(NamedTuple):
    start: int
    end: int
    provider: str


class DatacenterList(IPReputationList[tuple[DatacenterRange, ...]]):
    """
    Cloud/hosting provider address ranges.

    Ranges are kept sorted by start address and searched with bisect.
    """

    name = "datacenter"

    def parse(self, content: str) -> tuple[DatacenterRange, ...]:
        ranges = []
        for line in iter_list_lines(content):
            parts = line.split(",")
            if len(parts) < 3:
                continue

            start = ip_to_int(parts[0].strip())
            end = ip_to_int(parts[1].strip())
            provider = ",".join(parts[2:]).strip().removeprefix('"').removesuffix('"')

            if start != INVALID_IP and end != INVALID_IP and start <= end:
                ranges.append(DatacenterRange(start, end, provider))

        ranges.sort(key=attrgetter("start"))
        return tuple(ranges)

    def provider_for(self, ip: Optional[str]) -> Optional[str]:
        """Return the provider name (e.g. "Amazon") owning the IP, or None."""
        if not ip or is_ipv6(ip):
            return None

        ip_int = ip_to_int(ip)
        if ip_int == INVALID_IP:
            return None

        ranges = self.entries()
        if not ranges:
            return None

        idx = bisect_right(ranges, ip_int, key=attrgetter("start")) - 1
        if idx >= 0 and ip_int <= ranges[idx].end:
            return ranges[idx].provider
        return None


class IPLists(NamedTuple):
    vpn: VpnList
    tor: TorExitList
    datacenter: DatacenterList


@lru_cache
def get_ip_lists() -> IPLists:
    """Process-wide lists backed by the configured data files."""
    return IPLists(
        vpn=VpnList(settings.vpn_list_path),
        tor=TorExitList(settings.tor_list_path),
        datacenter=DatacenterList(settings.datacenter_list_path),
    )

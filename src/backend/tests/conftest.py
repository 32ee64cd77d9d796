"""
Pytest fixtures for the risk scoring backend tests.
"""

import os
from pathlib import Path

import pytest

# Set test environment variables before importing settings
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from schemas.signals import SignalBag  # noqa: E402
from services.detection import DetectionService  # noqa: E402
from services.ip_lists import DatacenterList, TorExitList, VpnList  # noqa: E402

VPN_LIST_CONTENT = """\
# VPN provider ranges
1.2.3.0/24
5.6.7.0/24
9.9.9.9
"""

TOR_LIST_CONTENT = """\
# Tor exit nodes
185.220.101.1
185.220.101.2
"""

DATACENTER_LIST_CONTENT = """\
52.0.0.0,52.255.255.255,Amazon
34.0.0.0,34.127.255.255,Google
"""


@pytest.fixture
def vpn_list() -> VpnList:
    """VPN list loaded from in-memory content."""
    ip_list = VpnList()
    ip_list.load_from_content(VPN_LIST_CONTENT)
    return ip_list


@pytest.fixture
def tor_list() -> TorExitList:
    """Tor exit list loaded from in-memory content."""
    ip_list = TorExitList()
    ip_list.load_from_content(TOR_LIST_CONTENT)
    return ip_list


@pytest.fixture
def datacenter_list() -> DatacenterList:
    """Datacenter ranges loaded from in-memory content."""
    ip_list = DatacenterList()
    ip_list.load_from_content(DATACENTER_LIST_CONTENT)
    return ip_list


@pytest.fixture
def detection_service(
    vpn_list: VpnList,
    tor_list: TorExitList,
    datacenter_list: DatacenterList,
) -> DetectionService:
    """Detection service wired to the in-memory lists."""
    return DetectionService(
        vpn_list=vpn_list,
        tor_list=tor_list,
        datacenter_list=datacenter_list,
        bot_threshold=0.5,
    )


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Directory holding list files as written by the update job."""
    (tmp_path / "vpn-ipv4.txt").write_text(VPN_LIST_CONTENT, encoding="utf-8")
    (tmp_path / "tor-exits.txt").write_text(TOR_LIST_CONTENT, encoding="utf-8")
    (tmp_path / "datacenters.csv").write_text(DATACENTER_LIST_CONTENT, encoding="utf-8")
    return tmp_path


@pytest.fixture
def human_signals() -> dict:
    """Signal payload from an ordinary desktop browser."""
    return {
        "bot": {
            "webdriver": False,
            "phantom": False,
            "selenium": False,
            "chromeRuntime": False,
            "inconsistentPermissions": False,
        },
        "navigator": {
            "plugins": ["PDF Viewer", "Chrome PDF Viewer"],
            "userAgent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/124.0 Safari/537.36",
            "webdriver": False,
            "language": "en-GB",
        },
        "timezone": {"timezone": "Europe/London", "offset": 0},
        "screen": {"width": 1920, "height": 1080},
    }


@pytest.fixture
def bot_signals() -> dict:
    """Signal payload from a headless automation run."""
    return {
        "bot": {
            "webdriver": True,
            "phantom": True,
            "selenium": True,
            "chromeRuntime": True,
            "inconsistentPermissions": True,
        },
        "navigator": {
            "plugins": [],
            "userAgent": "Mozilla/5.0 (X11; Linux x86_64) HeadlessChrome/124.0.0.0 Safari/537.36",
            "webdriver": True,
        },
        "timezone": {"timezone": "Asia/Tokyo"},
    }


@pytest.fixture
def empty_bag() -> SignalBag:
    return SignalBag()

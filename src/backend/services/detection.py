"""
Detection service for the analyze endpoint.

Resolves reputation flags for the client IP, runs the risk aggregator over
the signal bag, and builds the client-facing detection summary.
"""

from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Optional, Union

import structlog

from core.config import settings
from core.logging_config import mask_ip
from schemas.detection import DetectionSummary, IPDetection, RiskScoreInput, RiskScoreResult
from schemas.signals import SignalBag
from services.ip_lists import DatacenterList, TorExitList, VpnList, get_ip_lists
from services.risk_score import calculate_risk_score

logger = structlog.get_logger(__name__)


class DetectionService:
    """
    Combines IP reputation lookups with signal-based scoring.

    The lists are injected so tests (and alternative data sources) can
    supply their own instances.
    """

    def __init__(
        self,
        vpn_list: VpnList,
        tor_list: TorExitList,
        datacenter_list: DatacenterList,
        bot_threshold: float = 0.5,
    ):
        self.vpn_list = vpn_list
        self.tor_list = tor_list
        self.datacenter_list = datacenter_list
        self.bot_threshold = bot_threshold

    def detect_ip(self, ip: Optional[str]) -> IPDetection:
        """Check an IP against the VPN, Tor and datacenter lists."""
        if not ip:
            return IPDetection()

        provider = self.datacenter_list.provider_for(ip)
        return IPDetection(
            is_vpn=self.vpn_list.contains(ip),
            is_tor=self.tor_list.contains(ip),
            is_datacenter=provider is not None,
            datacenter_provider=provider,
        )

    def assess(
        self,
        signals: Union[SignalBag, Mapping[str, Any], None],
        ip: Optional[str],
        geo_timezone: Optional[str] = None,
    ) -> RiskScoreResult:
        """
        Perform a full risk assessment for one analyze call.

        Args:
            signals: Raw signal payload posted by the SDK
            ip: Client IP (may be None when no proxy header or socket IP)
            geo_timezone: Timezone from IP geolocation, if known
        """
        ip_detection = self.detect_ip(ip)

        result = calculate_risk_score(
            RiskScoreInput(
                signals=SignalBag.from_raw(signals),
                ip=ip,
                is_vpn=ip_detection.is_vpn,
                is_tor=ip_detection.is_tor,
                is_datacenter=ip_detection.is_datacenter,
                datacenter_provider=ip_detection.datacenter_provider,
                geo_timezone=geo_timezone,
            )
        )

        logger.info(
            "risk_assessed",
            ip=mask_ip(ip),
            score=result.score,
            level=result.level.value,
            vpn=result.signals.is_vpn,
            tor=result.signals.is_tor,
            datacenter=result.signals.is_datacenter,
            bot_score=result.signals.bot_score,
            timezone_mismatch=result.signals.timezone_mismatch,
        )
        return result

    def summarize(self, result: RiskScoreResult) -> DetectionSummary:
        """Build the detection block returned to API clients."""
        signals = result.signals
        return DetectionSummary(
            vpn=signals.is_vpn,
            tor=signals.is_tor,
            datacenter=signals.is_datacenter,
            datacenter_provider=signals.datacenter_provider,
            bot=signals.bot_score >= self.bot_threshold,
            bot_score=signals.bot_score,
            timezone_mismatch=signals.timezone_mismatch > 0,
        )

    def list_sizes(self) -> dict[str, int]:
        """Entry counts of the loaded lists (for monitoring)."""
        return {
            "vpn": self.vpn_list.size(),
            "tor": self.tor_list.size(),
            "datacenter": self.datacenter_list.size(),
        }


@lru_cache
def get_detection_service() -> DetectionService:
    """Get the process-wide detection service wired from settings."""
    lists = get_ip_lists()
    return DetectionService(
        vpn_list=lists.vpn,
        tor_list=lists.tor,
        datacenter_list=lists.datacenter,
        bot_threshold=settings.BOT_SCORE_THRESHOLD,
    )

"""
Risk score aggregation.

Combines reputation flags, bot score and timezone mismatch into one 0-100
risk score with a level: low, medium, high, critical.
"""

from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Union

from schemas.detection import DetectionSignals, RiskLevel, RiskScoreInput, RiskScoreResult
from services.bot_score import calculate_bot_score
from services.timezone_check import get_timezone_mismatch


class RiskConfig:
    """Risk scoring weights and level thresholds."""

    # Contribution to the overall score; clamped, so no need to sum to 100
    TOR_WEIGHT = 40  # Strong anonymization
    VPN_WEIGHT = 25
    BOT_WEIGHT = 20  # Scaled by the 0-1 bot score
    DATACENTER_WEIGHT = 10  # Cloud/hosting IP
    TIMEZONE_MISMATCH_WEIGHT = 5

    CRITICAL_THRESHOLD = 80
    HIGH_THRESHOLD = 60
    MEDIUM_THRESHOLD = 30


def get_risk_level(score: int) -> RiskLevel:
    """Classify a numeric score into a risk level."""
    if score >= RiskConfig.CRITICAL_THRESHOLD:
        return RiskLevel.CRITICAL
    elif score >= RiskConfig.HIGH_THRESHOLD:
        return RiskLevel.HIGH
    elif score >= RiskConfig.MEDIUM_THRESHOLD:
        return RiskLevel.MEDIUM
    else:
        return RiskLevel.LOW


def calculate_risk_score(risk_input: Union[RiskScoreInput, Mapping[str, Any]]) -> RiskScoreResult:
    """
    Calculate the overall risk score from all detection signals.

    Args:
        risk_input: Signal bag, client IP and the caller-resolved
            VPN/Tor/datacenter flags and geo timezone

    Returns:
        RiskScoreResult with score (0-100), level and the signal snapshot
    """
    if not isinstance(risk_input, RiskScoreInput):
        risk_input = RiskScoreInput.model_validate(risk_input)

    bot_result = calculate_bot_score(risk_input.signals)
    browser_timezone = risk_input.signals.browser_timezone
    timezone_mismatch = get_timezone_mismatch(browser_timezone, risk_input.geo_timezone)

    score = 0.0
    if risk_input.is_tor:
        score += RiskConfig.TOR_WEIGHT
    if risk_input.is_vpn:
        score += RiskConfig.VPN_WEIGHT
    if risk_input.is_datacenter:
        score += RiskConfig.DATACENTER_WEIGHT
    if timezone_mismatch > 0:
        score += RiskConfig.TIMEZONE_MISMATCH_WEIGHT

    # Continuous contribution, no threshold
    score += bot_result.score * RiskConfig.BOT_WEIGHT

    rounded = int(Decimal(repr(score)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    final_score = max(0, min(rounded, 100))

    return RiskScoreResult(
        score=final_score,
        level=get_risk_level(final_score),
        signals=DetectionSignals(
            is_vpn=risk_input.is_vpn,
            is_tor=risk_input.is_tor,
            is_datacenter=risk_input.is_datacenter,
            datacenter_provider=risk_input.datacenter_provider,
            bot_score=bot_result.score,
            bot_factors=bot_result.factors,
            timezone_mismatch=timezone_mismatch,
            geo_timezone=risk_input.geo_timezone,
            browser_timezone=browser_timezone,
        ),
    )

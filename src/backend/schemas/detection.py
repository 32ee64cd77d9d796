"""
Detection and risk scoring schemas.

Field names serialize in camelCase (``model_dump(by_alias=True)``) because
these structures are stored on visitor events and returned as-is in the
analyze response.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from schemas.signals import SignalBag


class RiskLevel(str, Enum):
    """Risk level classification."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BotFactors(_CamelModel):
    """0/1 indicator for each bot factor."""

    webdriver: int = 0
    phantom: int = 0
    selenium: int = 0
    chrome_runtime: int = 0
    inconsistent_permissions: int = 0
    missing_plugins: int = 0
    suspicious_user_agent: int = 0


class BotScoreResult(_CamelModel):
    """Bot probability: 0.0 (human) to 1.0 (bot), with factor breakdown."""

    score: float = Field(0.0, ge=0.0, le=1.0)
    factors: BotFactors = Field(default_factory=BotFactors)


class IPDetection(_CamelModel):
    """Reputation flags resolved for a client IP."""

    is_vpn: bool = False
    is_tor: bool = False
    is_datacenter: bool = False
    datacenter_provider: Optional[str] = None


class RiskScoreInput(_CamelModel):
    """
    Input to the risk aggregator.

    Reputation flags and the geo timezone are resolved by the caller; the
    aggregator derives bot score and browser timezone from the signal bag.
    """

    signals: SignalBag = Field(default_factory=SignalBag)
    ip: Optional[str] = None
    is_vpn: bool = False
    is_tor: bool = False
    is_datacenter: bool = False
    datacenter_provider: Optional[str] = None
    geo_timezone: Optional[str] = None

    @field_validator("signals", mode="before")
    @classmethod
    def decode_signals(cls, v: Any) -> SignalBag:
        return SignalBag.from_raw(v)


class DetectionSignals(_CamelModel):
    """Snapshot of every signal used to compute a risk score (audit/debugging)."""

    is_vpn: bool = False
    is_tor: bool = False
    is_datacenter: bool = False
    datacenter_provider: Optional[str] = None
    bot_score: float = 0.0
    bot_factors: BotFactors = Field(default_factory=BotFactors)
    timezone_mismatch: int = 0
    geo_timezone: Optional[str] = None
    browser_timezone: Optional[str] = None


class RiskScoreResult(_CamelModel):
    """Complete risk assessment for one analyze call."""

    score: int = Field(0, ge=0, le=100)
    level: RiskLevel = RiskLevel.LOW
    signals: DetectionSignals = Field(default_factory=DetectionSignals)


class DetectionSummary(_CamelModel):
    """Client-facing detection block of the analyze response."""

    vpn: bool = False
    tor: bool = False
    datacenter: bool = False
    datacenter_provider: Optional[str] = None
    bot: bool = False
    bot_score: float = 0.0
    timezone_mismatch: bool = False

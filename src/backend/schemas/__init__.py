"""Schemas module initialization."""

from schemas.detection import (
    BotFactors,
    BotScoreResult,
    DetectionSignals,
    DetectionSummary,
    IPDetection,
    RiskLevel,
    RiskScoreInput,
    RiskScoreResult,
)
from schemas.signals import BotFlags, NavigatorSignals, SignalBag, TimezoneSignals

__all__ = [
    "SignalBag",
    "BotFlags",
    "NavigatorSignals",
    "TimezoneSignals",
    "BotFactors",
    "BotScoreResult",
    "IPDetection",
    "RiskLevel",
    "RiskScoreInput",
    "DetectionSignals",
    "RiskScoreResult",
    "DetectionSummary",
]

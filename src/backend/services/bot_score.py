"""
Bot score calculation.

Turns the automation signals reported by the browser SDK into a bot
probability between 0 (human) and 1 (bot).
"""

import re
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Union

from schemas.detection import BotFactors, BotScoreResult
from schemas.signals import SignalBag

# Factor weights, summing to 1.0
BOT_WEIGHTS: dict[str, float] = {
    "webdriver": 0.35,  # Selenium/Puppeteer
    "phantom": 0.25,  # PhantomJS
    "selenium": 0.20,  # Selenium artifacts
    "chrome_runtime": 0.10,  # Environment spoofing
    "inconsistent_permissions": 0.05,
    "missing_plugins": 0.03,
    "suspicious_user_agent": 0.02,
}

# Headless browsers and HTTP client libraries
HEADLESS_UA_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"headlesschrome",
        r"phantomjs",
        r"selenium",
        r"webdriver",
        r"pythonrequests",
        r"python-requests",
        r"java/\d",
        r"curl/",
        r"wget/",
    )
)

_HUNDREDTHS = Decimal("0.01")


def is_suspicious_user_agent(user_agent: str) -> bool:
    """Check a user agent against the headless/HTTP client patterns."""
    return any(pattern.search(user_agent) for pattern in HEADLESS_UA_PATTERNS)


def calculate_bot_score(signals: Union[SignalBag, Mapping[str, Any], None]) -> BotScoreResult:
    """
    Calculate the bot probability score from browser signals.

    Args:
        signals: Raw signal payload from the SDK analyze() call, or an
            already decoded SignalBag

    Returns:
        BotScoreResult with score (0-1, two decimals) and the factor breakdown
    """
    bag = SignalBag.from_raw(signals)
    bot = bag.bot
    navigator = bag.navigator

    factors = BotFactors(
        webdriver=int(bot.webdriver is True or navigator.webdriver is True),
        phantom=int(bot.phantom is True),
        selenium=int(bot.selenium is True),
        chrome_runtime=int(bot.chrome_runtime is True),
        inconsistent_permissions=int(bot.inconsistent_permissions is True),
        # Only an explicitly empty plugin array counts; headless Chrome reports none
        missing_plugins=int(navigator.plugins is not None and len(navigator.plugins) == 0),
        suspicious_user_agent=int(
            navigator.user_agent is not None and is_suspicious_user_agent(navigator.user_agent)
        ),
    )

    weighted = sum(getattr(factors, name) * weight for name, weight in BOT_WEIGHTS.items())
    score = float(Decimal(repr(weighted)).quantize(_HUNDREDTHS, rounding=ROUND_HALF_UP))

    return BotScoreResult(score=score, factors=factors)

"""
Tests for risk score aggregation.
"""

import itertools

import pytest

from schemas.detection import RiskLevel, RiskScoreInput
from services.risk_score import RiskConfig, calculate_risk_score, get_risk_level


@pytest.mark.unit
class TestGetRiskLevel:
    @pytest.mark.parametrize(
        "score,level",
        [
            (0, RiskLevel.LOW),
            (29, RiskLevel.LOW),
            (30, RiskLevel.MEDIUM),
            (59, RiskLevel.MEDIUM),
            (60, RiskLevel.HIGH),
            (79, RiskLevel.HIGH),
            (80, RiskLevel.CRITICAL),
            (100, RiskLevel.CRITICAL),
        ],
    )
    def test_thresholds(self, score: int, level: RiskLevel) -> None:
        """Test that scores map to the right risk levels."""
        assert get_risk_level(score) == level


@pytest.mark.unit
class TestCalculateRiskScore:
    def test_no_signals(self) -> None:
        """Test that no signals score zero and low."""
        result = calculate_risk_score(RiskScoreInput(signals={}))

        assert result.score == 0
        assert result.level == RiskLevel.LOW
        assert result.signals.bot_score == 0
        assert result.signals.timezone_mismatch == 0

    def test_tor_only(self) -> None:
        """Test that Tor alone scores its weight."""
        result = calculate_risk_score(RiskScoreInput(signals={}, is_tor=True))

        assert result.score == 40
        assert result.level == RiskLevel.MEDIUM

    def test_tor_and_vpn(self) -> None:
        """Test that Tor and VPN weights add up."""
        result = calculate_risk_score(RiskScoreInput(signals={}, is_tor=True, is_vpn=True))

        assert result.score == 65
        assert result.level == RiskLevel.HIGH

    def test_everything_is_clamped_to_100(self, bot_signals: dict) -> None:
        """Test that the total is clamped to 100."""
        result = calculate_risk_score(
            RiskScoreInput(
                signals=bot_signals,
                ip="52.1.2.3",
                is_tor=True,
                is_vpn=True,
                is_datacenter=True,
                datacenter_provider="Amazon",
                geo_timezone="America/Los_Angeles",
            )
        )

        assert result.signals.bot_score == 1.0
        assert result.signals.timezone_mismatch == 1
        assert result.score == 100
        assert result.level == RiskLevel.CRITICAL

    def test_datacenter_only(self) -> None:
        """Test that a datacenter alone scores its weight."""
        result = calculate_risk_score(
            RiskScoreInput(signals={}, is_datacenter=True, datacenter_provider="Google")
        )

        assert result.score == 10
        assert result.level == RiskLevel.LOW
        assert result.signals.datacenter_provider == "Google"

    def test_bot_score_is_scaled(self) -> None:
        """Test that the bot score is scaled by its weight."""
        # webdriver only: 0.35 * 20 = 7
        result = calculate_risk_score(RiskScoreInput(signals={"bot": {"webdriver": True}}))

        assert result.signals.bot_score == 0.35
        assert result.score == 7

    def test_bot_contribution_is_rounded(self) -> None:
        """Test that a fractional bot contribution is rounded half up."""
        # phantom + inconsistentPermissions + missingPlugins: 0.33 * 20 = 6.6
        result = calculate_risk_score(
            RiskScoreInput(
                signals={"bot": {"phantom": True, "inconsistentPermissions": True}, "navigator": {"plugins": []}}
            )
        )
        assert result.signals.bot_score == 0.33
        assert result.score == 7

        # missingPlugins alone: 0.03 * 20 = 0.6
        result = calculate_risk_score(RiskScoreInput(signals={"navigator": {"plugins": []}}))
        assert result.score == 1

        # suspicious user agent alone: 0.02 * 20 = 0.4
        result = calculate_risk_score(RiskScoreInput(signals={"navigator": {"userAgent": "curl/8.0"}}))
        assert result.score == 0

    def test_timezone_mismatch_from_signal_bag(self) -> None:
        """Test that a browser and geo timezone mismatch adds its weight."""
        result = calculate_risk_score(
            RiskScoreInput(signals={"timezone": {"timezone": "Asia/Tokyo"}}, geo_timezone="America/Los_Angeles")
        )

        assert result.signals.browser_timezone == "Asia/Tokyo"
        assert result.signals.geo_timezone == "America/Los_Angeles"
        assert result.signals.timezone_mismatch == 1
        assert result.score == RiskConfig.TIMEZONE_MISMATCH_WEIGHT

    def test_matching_timezone_adds_nothing(self, human_signals: dict) -> None:
        """Test that matching timezones add nothing."""
        result = calculate_risk_score(RiskScoreInput(signals=human_signals, geo_timezone="Europe/London"))

        assert result.signals.timezone_mismatch == 0
        assert result.score == 0

    def test_accepts_plain_mapping(self) -> None:
        """Test that a plain camelCase mapping is accepted."""
        result = calculate_risk_score({"signals": {"bot": {"phantom": True}}, "isVpn": True})

        assert result.signals.is_vpn is True
        assert result.score == 30
        assert result.level == RiskLevel.MEDIUM

    def test_malformed_signals_do_not_raise(self) -> None:
        """Test that malformed signals do not raise."""
        result = calculate_risk_score(RiskScoreInput(signals=["not", "an", "object"], is_vpn=True))
        assert result.score == 25

    def test_score_always_in_range(self, bot_signals: dict) -> None:
        """Every flag combination stays an integer in [0, 100] with a matching level."""
        signal_variants = [{}, {"bot": {"webdriver": True}}, {"navigator": {"plugins": []}}, bot_signals]

        for tor, vpn, dc, signals, geo in itertools.product(
            (False, True), (False, True), (False, True), signal_variants, (None, "Europe/Paris")
        ):
            result = calculate_risk_score(
                RiskScoreInput(signals=signals, is_tor=tor, is_vpn=vpn, is_datacenter=dc, geo_timezone=geo)
            )
            assert isinstance(result.score, int)
            assert 0 <= result.score <= 100
            assert result.level == get_risk_level(result.score)

    def test_idempotent(self, bot_signals: dict) -> None:
        """Test that scoring the same input twice gives the same result."""
        risk_input = RiskScoreInput(signals=bot_signals, is_vpn=True, geo_timezone="Europe/Berlin")
        assert calculate_risk_score(risk_input) == calculate_risk_score(risk_input)

    def test_serializes_public_contract(self) -> None:
        """Test that the result dumps the public contract."""
        result = calculate_risk_score(RiskScoreInput(signals={}, is_tor=True))
        data = result.model_dump(mode="json", by_alias=True)

        assert data["level"] == "medium"
        assert set(data["signals"]) == {
            "isVpn",
            "isTor",
            "isDatacenter",
            "datacenterProvider",
            "botScore",
            "botFactors",
            "timezoneMismatch",
            "geoTimezone",
            "browserTimezone",
        }

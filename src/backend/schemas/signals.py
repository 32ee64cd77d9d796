"""
Browser signal bag schemas.

The SDK posts an untyped, attacker-controlled JSON object. These schemas
decode the parts the scorers read into a fully optional typed struct:
wrong-typed values become None and non-object sections become empty, so
decoding never fails on shape.
"""

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _section(value: Any) -> Any:
    """Non-object sections decode as empty."""
    return dict(value) if isinstance(value, Mapping) else {}


class _SignalSection(BaseModel):
    """Common config: camelCase wire names only, unknown keys ignored."""

    # No populate_by_name: snake_case spellings are unknown keys here.
    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="ignore",
        frozen=True,
    )


class BotFlags(_SignalSection):
    """Automation flags reported by the SDK's `bot` probe."""

    webdriver: Optional[bool] = None
    phantom: Optional[bool] = None
    selenium: Optional[bool] = None
    chrome_runtime: Optional[bool] = None
    inconsistent_permissions: Optional[bool] = None

    @field_validator("*", mode="before")
    @classmethod
    def only_real_booleans(cls, v: Any) -> Optional[bool]:
        # "true", 1 and friends do not count as set
        return v if isinstance(v, bool) else None


class NavigatorSignals(_SignalSection):
    """Navigator-derived signals."""

    plugins: Optional[list[Any]] = None
    user_agent: Optional[str] = None
    webdriver: Optional[bool] = None

    @field_validator("plugins", mode="before")
    @classmethod
    def plugins_must_be_array(cls, v: Any) -> Optional[list[Any]]:
        return list(v) if isinstance(v, (list, tuple)) else None

    @field_validator("user_agent", mode="before")
    @classmethod
    def user_agent_must_be_string(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None

    @field_validator("webdriver", mode="before")
    @classmethod
    def webdriver_must_be_bool(cls, v: Any) -> Optional[bool]:
        return v if isinstance(v, bool) else None


class TimezoneSignals(_SignalSection):
    """Timezone reported by the browser (Intl resolved IANA name)."""

    timezone: Optional[str] = None

    @field_validator("timezone", mode="before")
    @classmethod
    def timezone_must_be_string(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None


class SignalBag(_SignalSection):
    """Decoded view of the signal payload used by the bot and risk scorers."""

    bot: BotFlags = Field(default_factory=BotFlags)
    navigator: NavigatorSignals = Field(default_factory=NavigatorSignals)
    timezone: TimezoneSignals = Field(default_factory=TimezoneSignals)

    @field_validator("bot", "navigator", "timezone", mode="before")
    @classmethod
    def sections_must_be_objects(cls, v: Any) -> Any:
        if isinstance(v, BaseModel):
            return v
        return _section(v)

    @property
    def browser_timezone(self) -> Optional[str]:
        """The browser-reported IANA timezone, if any."""
        return self.timezone.timezone

    @classmethod
    def from_raw(cls, raw: Any) -> "SignalBag":
        """
        Decode an arbitrary payload into a SignalBag.

        Never raises: anything that is not an object decodes to an empty bag,
        and the field validators reduce every value to None or a valid one.
        """
        if isinstance(raw, SignalBag):
            return raw
        if not isinstance(raw, Mapping):
            return cls()
        return cls.model_validate(dict(raw))

"""
Configuration Module for Skylink

Two kinds of configuration are handled here:

1. Process settings (Settings), loaded from environment variables with pydantic-settings:
   logging verbosity, Sentry reporting, HTTP timeout and the initial fallback behavior.

2. The stored per-host "atproto" option (AtprotoConfig), which is owned by an external
   store and may change while the process runs. ConfigStore holds the current value,
   validates updates the same forgiving way the stored value has always been read
   (invalid options are dropped with a warning rather than rejected), and notifies
   subscribers on change.

The only recognized stored option is ``fallbackBehavior``, which decides what happens
when the bridge does not mirror an authority: ``openPds`` resolves the PDS URL instead,
``default`` leaves the original link alone.
"""

from enum import Enum
import logging
from typing import Any, Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class FallbackBehavior(str, Enum):
    """What to do with a permalink whose authority is not bridged."""

    open_pds = "openPds"
    default = "default"


class Settings(BaseSettings):
    """
    Process settings for Skylink.

    Values are read from environment variables with the same name as the field,
    case-insensitively.
    """

    debug: bool = False
    """
    Enable debug logging.
    Set with DEBUG=true environment variable.
    """

    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """

    http_timeout: Optional[float] = None
    """
    Total timeout in seconds for each outbound request. aiohttp's default when unset.
    Set with HTTP_TIMEOUT environment variable.
    """

    fallback_behavior: Optional[FallbackBehavior] = None
    """
    Initial value of the stored fallbackBehavior option.
    Set with FALLBACK_BEHAVIOR environment variable (openPds or default).
    """


class AtprotoConfig(BaseModel):
    """The stored "atproto" option, as read by the resolution engine."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    fallback_behavior: Optional[FallbackBehavior] = Field(
        default=None, alias="fallbackBehavior"
    )

    def effective_fallback_behavior(self) -> FallbackBehavior:
        return self.fallback_behavior or FallbackBehavior.default


def parse_atproto_config(
    value: Any, current: Optional[AtprotoConfig] = None
) -> AtprotoConfig:
    """Read a raw stored value into an AtprotoConfig.

    Anything that is not an object yields an empty config. A fallbackBehavior that is not
    a string, or is not a known behavior, is dropped. Both cases log a warning. An object
    without fallbackBehavior leaves ``current`` as it is.
    """
    if not isinstance(value, dict):
        logger.warning("atproto config must be an object, got %r", value)
        return AtprotoConfig()

    if "fallbackBehavior" not in value:
        return current if current is not None else AtprotoConfig()

    fallback_behavior = value["fallbackBehavior"]
    if not isinstance(fallback_behavior, str):
        logger.warning("atproto.fallbackBehavior must be a string")
        return AtprotoConfig()

    try:
        return AtprotoConfig(fallback_behavior=FallbackBehavior(fallback_behavior))
    except ValueError:
        logger.warning(
            "unknown value for atproto.fallbackBehavior: %s", fallback_behavior
        )
        return AtprotoConfig()


ConfigListener = Callable[[AtprotoConfig], None]


class ConfigStore:
    """
    In-process holder of the stored atproto option.

    The resolution engine only reads ``current``. Whatever owns the real storage calls
    ``update`` with the raw stored value whenever it changes.
    """

    def __init__(self, initial: Optional[AtprotoConfig] = None) -> None:
        self._current = initial if initial is not None else AtprotoConfig()
        self._listeners: List[ConfigListener] = []

    @staticmethod
    def from_settings(settings: Settings) -> "ConfigStore":
        return ConfigStore(AtprotoConfig(fallback_behavior=settings.fallback_behavior))

    @property
    def current(self) -> AtprotoConfig:
        return self._current

    def update(self, value: Any) -> AtprotoConfig:
        self._current = parse_atproto_config(value, self._current)
        for listener in list(self._listeners):
            listener(self._current)
        return self._current

    def subscribe(self, listener: ConfigListener) -> Callable[[], None]:
        """Register a change listener.

        Returns:
            A callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

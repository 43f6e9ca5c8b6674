from __future__ import annotations
from enum import StrEnum
from typing import Any, Callable, Optional
import logging

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

Warn = Callable[[str], None]


# Valid modes for sending messages
class DeliveryMode(StrEnum):
    RELIABLE    = "reliable"      # guaranteed to arrive, in the order sent
    UNSEQUENCED = "unsequenced"   # guaranteed to arrive, no ordering
    UNRELIABLE  = "unreliable"    # best effort


def _parse_mode(mode: Any) -> Optional[DeliveryMode]:
    try:
        return DeliveryMode(mode)
    except (ValueError, TypeError):
        return None


def _channel_ok(channel: Any, max_channels: int) -> bool:
    # bool is an int subclass; True is not a channel
    if isinstance(channel, bool) or not isinstance(channel, int):
        return False
    return 0 <= channel < max_channels


def correct_mode(mode: Any, warn: Warn = logger.warning) -> DeliveryMode:
    """Return `mode` as a DeliveryMode, or RELIABLE (with a warning) if it is not one."""
    parsed = _parse_mode(mode)
    if parsed is None:
        warn(f"Tried to use invalid send mode: '{mode}'. Defaulting to reliable.")
        return DeliveryMode.RELIABLE
    return parsed


def require_mode(mode: Any) -> DeliveryMode:
    """Return `mode` as a DeliveryMode or raise ConfigurationError."""
    parsed = _parse_mode(mode)
    if parsed is None:
        raise ConfigurationError(f"Tried to set default send mode to invalid mode: '{mode}'")
    return parsed


def correct_channel(channel: Any, max_channels: int, warn: Warn = logger.warning) -> int:
    """Return `channel` if it is in range, otherwise 0 (with a warning)."""
    if not _channel_ok(channel, max_channels):
        warn(f"Tried to use invalid channel: {channel} (max is {max_channels - 1}). Defaulting to 0.")
        return 0
    return channel


def require_channel(channel: Any, max_channels: int) -> int:
    """Return `channel` if it is in range or raise ConfigurationError."""
    if not _channel_ok(channel, max_channels):
        raise ConfigurationError(
            f"Tried to set default send channel to invalid channel: {channel} (max is {max_channels - 1})"
        )
    return channel


class DeliverySettings:
    """
    Send mode and channel for the next outgoing message.

    Per-call overrides (set_mode / set_channel) are corrected to a safe value
    and apply to the next send only; reset() restores the defaults and is
    called by the endpoint after every send, broadcast or unicast.
    Default setters are strict and leave the previous default on failure.
    """

    def __init__(self, max_channels: int = 1, warn: Warn = logger.warning):
        self.max_channels = max_channels
        self._warn = warn
        self.default_mode = DeliveryMode.RELIABLE
        self.default_channel = 0
        self.mode = self.default_mode
        self.channel = self.default_channel

    def set_mode(self, mode: Any) -> DeliveryMode:
        self.mode = correct_mode(mode, self._warn)
        return self.mode

    def set_channel(self, channel: Any) -> int:
        self.channel = correct_channel(channel, self.max_channels, self._warn)
        return self.channel

    def set_default_mode(self, mode: Any) -> None:
        self.default_mode = require_mode(mode)

    def set_default_channel(self, channel: Any) -> None:
        self.default_channel = require_channel(channel, self.max_channels)

    def reset(self) -> None:
        self.mode = self.default_mode
        self.channel = self.default_channel

    def __repr__(self) -> str:
        return (f"DeliverySettings(mode={self.mode.value!r}, channel={self.channel}, "
                f"default_mode={self.default_mode.value!r}, default_channel={self.default_channel})")

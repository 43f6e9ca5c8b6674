from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError
from .log import DEFAULT_HISTORY

DEFAULT_ADDRESS = "localhost"
DEFAULT_PORT = 22122
MAX_CHANNELS = 255   # ENet protocol limit


def _non_negative_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


@dataclass
class EndpointConfig:
    """
    Construction parameters shared by both roles. max_channels must match on
    both ends of a connection; max_peers only matters to a server.
    """
    address: str = DEFAULT_ADDRESS
    port: int = DEFAULT_PORT
    max_peers: int = 64
    max_channels: int = 1
    in_bandwidth: int = 0     # bytes/second, 0 = unlimited
    out_bandwidth: int = 0
    timeout: int = 0          # service timeout in ms, 0 = non-blocking
    log_history: Optional[int] = DEFAULT_HISTORY   # event lines kept, None = unbounded

    def __post_init__(self):
        if not isinstance(self.address, str) or not self.address:
            raise ConfigurationError(f"address must be a non-empty string, got {self.address!r}")
        if not _non_negative_int(self.port) or self.port > 65535:
            raise ConfigurationError(f"port must be in 0..65535, got {self.port!r}")
        if not _non_negative_int(self.max_peers) or self.max_peers < 1:
            raise ConfigurationError(f"max_peers must be >= 1, got {self.max_peers!r}")
        if not _non_negative_int(self.max_channels) or not 1 <= self.max_channels <= MAX_CHANNELS:
            raise ConfigurationError(f"max_channels must be in 1..{MAX_CHANNELS}, got {self.max_channels!r}")
        for name in ("in_bandwidth", "out_bandwidth", "timeout"):
            if not _non_negative_int(getattr(self, name)):
                raise ConfigurationError(f"{name} must be a non-negative integer, got {getattr(self, name)!r}")
        if self.log_history is not None and not _non_negative_int(self.log_history):
            raise ConfigurationError(f"log_history must be a non-negative integer or None, got {self.log_history!r}")

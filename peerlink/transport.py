from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Optional

from .settings import DeliveryMode

Connection = Any   # opaque per-peer handle; identity is stable for its lifetime


class EventType(StrEnum):
    CONNECT    = "connect"
    RECEIVE    = "receive"
    DISCONNECT = "disconnect"


@dataclass(frozen=True)
class TransportEvent:
    type: EventType
    connection: Connection
    data: Any = 0        # frame bytes for RECEIVE, user integer for CONNECT/DISCONNECT
    channel: int = 0


class Transport(ABC):
    """
    Reliable-UDP style host: connection setup, per-message delivery mode and
    channel, and a polling service call. Retransmission, ordering and
    congestion control all live below this interface.
    """

    @abstractmethod
    def service(self, timeout: int = 0) -> Optional[TransportEvent]:
        """Wait up to `timeout` ms for the next event; None if there is none."""
        raise NotImplementedError

    @abstractmethod
    def connect(self, address: str, port: int, channels: int, data: int = 0) -> Connection:
        """Start connecting to a remote host; completion arrives as a CONNECT event."""
        raise NotImplementedError

    @abstractmethod
    def send(self, connection: Connection, frame: bytes, channel: int, mode: DeliveryMode) -> None:
        """Queue one frame for a connection."""
        raise NotImplementedError

    @abstractmethod
    def disconnect(self, connection: Connection, code: int = 0) -> None:
        """Gracefully disconnect once queued frames are sent."""
        raise NotImplementedError

    @abstractmethod
    def connection_id(self, connection: Connection) -> int:
        raise NotImplementedError

    @abstractmethod
    def flush(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def bandwidth_limit(self, incoming: int, outgoing: int) -> None:
        """Bytes/second; 0 means unlimited."""
        raise NotImplementedError

    @property
    @abstractmethod
    def bytes_sent(self) -> int:
        raise NotImplementedError

    @property
    @abstractmethod
    def bytes_received(self) -> int:
        raise NotImplementedError

    def close(self) -> None:
        """Release the host. Default: nothing to release."""

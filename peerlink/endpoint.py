from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional, Union
import reprlib
import time

from .codecs import Codec, Codecs
from .config import EndpointConfig
from .errors import ConfigurationError, EnvelopeError
from .events import Callback, EventRegistry
from .log import EventLog
from .settings import DeliverySettings
from .transport import Connection, EventType, Transport, TransportEvent
from .wire import pack_message, unpack_message


class Endpoint(ABC):
    """
    Shared machinery of both roles: event registry, send settings, codec,
    packet counters, and the poll loop that turns transport events into
    dispatched application events.

    Everything runs on the thread that calls poll(); callbacks run inside it.
    """

    role = "endpoint"

    def __init__(self, transport: Transport, config: Optional[EndpointConfig] = None, *,
                 codec: Union[str, Codec] = "msgpack", log: Optional[EventLog] = None):
        self.config = config or EndpointConfig()
        self.transport = transport
        self.codec = Codecs.get(codec) if isinstance(codec, str) else codec
        self.logger = log or EventLog(self.role.upper(), self.config.log_history)
        self.events = EventRegistry()
        self.settings = DeliverySettings(self.config.max_channels, warn=self.logger.warning)
        self.timeout = self.config.timeout

        self.packets_sent = 0
        self.packets_received = 0
        self._last_service: Optional[float] = None

    # ---- callbacks ----
    def on(self, event: str, callback: Callback) -> Callback:
        """Add a callback to an event; it is called with (data, session)."""
        return self.events.on(event, callback)

    def off(self, event: str, callback: Callback) -> int:
        """Remove a callback from an event; returns how many entries were removed."""
        return self.events.off(event, callback)

    def set_schema(self, event: str, fields: Iterable[str]) -> None:
        """Name the positional values of an event's payload, e.g. ("x", "y") for [3, 4]."""
        self.events.set_schema(event, fields)

    # ---- send settings ----
    @property
    def max_channels(self) -> int:
        return self.config.max_channels

    @property
    def send_mode(self):
        return self.settings.mode

    @property
    def send_channel(self) -> int:
        return self.settings.channel

    def set_send_mode(self, mode) -> None:
        """Mode for the next outgoing message only; invalid modes become reliable."""
        self.settings.set_mode(mode)

    def set_default_send_mode(self, mode) -> None:
        """Mode used after every reset. Raises ConfigurationError for invalid modes."""
        try:
            self.settings.set_default_mode(mode)
        except ConfigurationError as ex:
            self.logger.error(str(ex))
            raise

    def set_send_channel(self, channel: int) -> None:
        """Channel for the next outgoing message only; out-of-range channels become 0."""
        self.settings.set_channel(channel)

    def set_default_send_channel(self, channel: int) -> None:
        try:
            self.settings.set_default_channel(channel)
        except ConfigurationError as ex:
            self.logger.error(str(ex))
            raise

    def reset_send_settings(self) -> None:
        self.settings.reset()

    # ---- poll loop ----
    def poll(self) -> int:
        """
        Wait up to `timeout` ms for the first event, then drain whatever else is
        pending without blocking. Returns the number of events handled.
        """
        handled = 0
        event = self._service(self.timeout)
        while event is not None:
            handled += 1
            self._handle(event)
            event = self._service(0)
        return handled

    update = poll

    def _service(self, timeout: int) -> Optional[TransportEvent]:
        event = self.transport.service(timeout)
        self._last_service = time.monotonic()
        return event

    def _handle(self, event: TransportEvent) -> None:
        if event.type == EventType.CONNECT:
            self._on_connect(event)
        elif event.type == EventType.RECEIVE:
            self._on_receive(event)
        elif event.type == EventType.DISCONNECT:
            self._on_disconnect(event)

    @abstractmethod
    def _on_connect(self, event: TransportEvent) -> None:
        raise NotImplementedError

    @abstractmethod
    def _on_disconnect(self, event: TransportEvent) -> None:
        raise NotImplementedError

    def _session_for(self, connection: Connection) -> Any:
        return None

    def _on_receive(self, event: TransportEvent) -> None:
        self.packets_received += 1
        try:
            env = unpack_message(event.data, self.codec)
        except EnvelopeError as ex:
            self.logger.warning(f"Dropped malformed message: {ex}")
            return
        if self.logger.wants("receive"):
            self.logger.log("receive", f"{env.name}: {reprlib.repr(env.payload)}")
        self._trigger(env.name, env.payload, self._session_for(event.connection))

    def _trigger(self, name: str, data: Any, session: Any = None) -> bool:
        dispatched = self.events.dispatch(name, data, session)
        if not dispatched:
            self.logger.warning(f"Tried to activate trigger: '{name}' but it does not exist.")
        return dispatched

    # ---- sending ----
    def _pack(self, name: str, data: Any) -> bytes:
        return pack_message(name, data, self.codec)

    def _send_frame(self, connection: Connection, name: str, data: Any) -> None:
        try:
            frame = self._pack(name, data)
            self.transport.send(connection, frame, self.settings.channel, self.settings.mode)
            self.packets_sent += 1
        finally:
            self.settings.reset()

    # ---- statistics ----
    @property
    def bytes_sent(self) -> int:
        """Total bytes sent since the host was created."""
        return self.transport.bytes_sent

    @property
    def bytes_received(self) -> int:
        return self.transport.bytes_received

    def set_bandwidth_limit(self, incoming: int, outgoing: int) -> None:
        """Bytes/second each way; 0 is unlimited."""
        self.transport.bandwidth_limit(incoming, outgoing)

    @property
    def last_service_time(self) -> Optional[float]:
        """Seconds since the transport was last serviced, None before the first poll."""
        if self._last_service is None:
            return None
        return time.monotonic() - self._last_service

    def log(self, event: str, data: Any) -> str:
        return self.logger.log(event, data)

    def close(self) -> None:
        self.transport.close()

from __future__ import annotations
from typing import Any, Optional

from .endpoint import Endpoint
from .errors import NotConnectedError
from .transport import Connection, TransportEvent


class Client(Endpoint):
    """Connects to one server; callbacks receive session=None."""

    role = "client"

    def __init__(self, transport, config=None, **kwargs):
        super().__init__(transport, config, **kwargs)
        self.connection: Optional[Connection] = None
        self.connect_id: Optional[int] = None

    @property
    def address(self) -> str:
        return self.config.address

    @property
    def port(self) -> int:
        return self.config.port

    def connect(self, data: int = 0) -> bool:
        """
        Start connecting to the configured server. The "connect" event fires on
        a later poll(). Transport failures raise TransportError.
        """
        # number of channels for the client and server must match
        self.connection = self.transport.connect(self.address, self.port, self.max_channels, data)
        self.connect_id = self.transport.connection_id(self.connection)
        return True

    def disconnect(self, code: int = 0) -> None:
        """Disconnect from the server, if connected; `code` reaches the server's "disconnect" event."""
        if self.connection is None:
            return
        self.transport.disconnect(self.connection, code)
        self.transport.flush()

    @property
    def is_connected(self) -> bool:
        return self.connection is not None

    def send(self, name: str, data: Any = None) -> None:
        """Send an event to the server."""
        if self.connection is None:
            self.settings.reset()
            raise NotConnectedError(f"Cannot send '{name}': not connected to {self.address}:{self.port}")
        self._send_frame(self.connection, name, data)

    # ---- transport events ----
    def _on_connect(self, event: TransportEvent) -> None:
        self.logger.log("connect", f"Connected to {self.address}:{self.port}")
        self._trigger("connect", event.data)

    def _on_disconnect(self, event: TransportEvent) -> None:
        if event.connection is self.connection:
            self.connection = None
        self.logger.log("disconnect", f"Disconnected from {self.address}:{self.port}")
        self._trigger("disconnect", event.data)

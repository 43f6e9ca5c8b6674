from __future__ import annotations
from typing import Any, Optional, Tuple, Union

from .endpoint import Endpoint
from .session import Session, SessionRegistry
from .transport import Connection, TransportEvent


class Server(Endpoint):
    """Accepts peers, keeps one Session per connection, and sends to one or all of them."""

    role = "server"

    def __init__(self, transport, config=None, **kwargs):
        super().__init__(transport, config, **kwargs)
        self.sessions = SessionRegistry()
        self.set_bandwidth_limit(self.config.in_bandwidth, self.config.out_bandwidth)

    # ---- lookups ----
    @property
    def connections(self) -> Tuple[Connection, ...]:
        return self.sessions.connections()

    def get_session(self, connection: Connection) -> Optional[Session]:
        return self.sessions.by_connection(connection)

    def get_session_by_id(self, local_id: int) -> Optional[Session]:
        return self.sessions.by_id(local_id)

    # ---- transport events ----
    def _session_for(self, connection: Connection) -> Optional[Session]:
        return self.sessions.by_connection(connection)

    def _on_connect(self, event: TransportEvent) -> None:
        local_id = self.transport.connection_id(event.connection)
        session = self.sessions.add(event.connection, local_id, server=self)
        self.logger.log("connect", f"{session.local_id} connected")
        self._trigger("connect", event.data, session)

    def _on_disconnect(self, event: TransportEvent) -> None:
        # the removed session is only valid for the duration of this dispatch
        session = self.sessions.remove(event.connection)
        who = session.local_id if session is not None else "unknown peer"
        self.logger.log("disconnect", f"{who} disconnected")
        self._trigger("disconnect", event.data, session)

    # ---- sending ----
    def send(self, session: Session, name: str, data: Any = None) -> None:
        """Send an event to one session."""
        self._send_frame(session.connection, name, data)

    def broadcast(self, name: str, data: Any = None,
                  exclude: Union[Session, Connection, None] = None) -> int:
        """
        Send an event to every connected peer except `exclude` (a Session or a
        raw connection). The frame is encoded once; settings reset once at the end.
        Returns the number of recipients.
        """
        excluded = exclude.connection if isinstance(exclude, Session) else exclude
        sent = 0
        try:
            frame = self._pack(name, data)
            for connection in self.sessions.connections():
                if excluded is not None and connection is excluded:
                    continue
                self.transport.send(connection, frame, self.settings.channel, self.settings.mode)
                self.packets_sent += 1
                sent += 1
        finally:
            self.settings.reset()
        return sent

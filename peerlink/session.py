from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Tuple

from .errors import NotConnectedError
from .transport import Connection

if TYPE_CHECKING:
    from .server import Server


@dataclass(eq=False)
class Session:
    """Server-side view of one connected remote peer."""
    connection: Connection
    local_id: int                                   # transport connect id
    server: Optional["Server"] = field(default=None, repr=False)

    def _owner(self) -> "Server":
        if self.server is None:
            raise NotConnectedError(f"Session {self.local_id} is not attached to a server")
        return self.server

    def send(self, name: str, data: Any = None) -> None:
        """Send an event to this peer using the server's current send settings."""
        self._owner().send(self, name, data)

    def disconnect(self, code: int = 0) -> None:
        """Ask the transport to close this peer; the DISCONNECT event follows on a later poll."""
        self._owner().transport.disconnect(self.connection, code)


class SessionRegistry:
    """
    Sessions in connect order, the matching raw connection list, and indexes by
    connection identity and by local id. Every add/remove updates all four.
    """

    def __init__(self):
        self._sessions: List[Session] = []
        self._connections: List[Connection] = []
        self._by_connection: Dict[int, Session] = {}
        self._by_id: Dict[int, Session] = {}

    def add(self, connection: Connection, local_id: int, server: Optional["Server"] = None) -> Session:
        # a repeated connect for the same handle replaces the old session
        self.remove(connection)
        session = Session(connection=connection, local_id=local_id, server=server)
        self._sessions.append(session)
        self._connections.append(connection)
        self._by_connection[id(connection)] = session
        self._by_id[local_id] = session
        return session

    def remove(self, connection: Connection) -> Optional[Session]:
        """Drop the session for `connection`; unknown connections are ignored."""
        session = self._by_connection.pop(id(connection), None)
        if session is None:
            return None
        self._sessions = [s for s in self._sessions if s is not session]
        self._connections = [c for c in self._connections if c is not connection]
        if self._by_id.get(session.local_id) is session:
            del self._by_id[session.local_id]
        return session

    def by_connection(self, connection: Connection) -> Optional[Session]:
        return self._by_connection.get(id(connection))

    def by_id(self, local_id: int) -> Optional[Session]:
        return self._by_id.get(local_id)

    def connections(self) -> Tuple[Connection, ...]:
        """Snapshot of raw connections, safe to iterate while callbacks mutate the registry."""
        return tuple(self._connections)

    def sessions(self) -> Tuple[Session, ...]:
        return tuple(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[Session]:
        return iter(self.sessions())

    def __contains__(self, session: Session) -> bool:
        return any(s is session for s in self._sessions)

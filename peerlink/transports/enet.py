from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional

try:
    import enet
except Exception as e:
    raise RuntimeError("pyenet bindings are required (pip install peerlink[enet]). Error: %r" % (e,))

from ..errors import TransportError
from ..settings import DeliveryMode
from ..transport import EventType, Transport, TransportEvent


_FLAGS = {
    DeliveryMode.RELIABLE:    enet.PACKET_FLAG_RELIABLE,
    DeliveryMode.UNSEQUENCED: enet.PACKET_FLAG_UNSEQUENCED,
    DeliveryMode.UNRELIABLE:  0,
}


@dataclass(eq=False)
class ENetConnection:
    peer: "enet.Peer"
    connect_id: int


def _address(address: Optional[str], port: int) -> "enet.Address":
    # "*" (or None) binds every interface
    host = None if address in (None, "*") else address.encode("utf-8")
    return enet.Address(host, port)


class ENetTransport(Transport):
    """Transport over ENet.

    Mapping:
    - reliable    -> PACKET_FLAG_RELIABLE (ordered per channel, retransmitted)
    - unsequenced -> PACKET_FLAG_UNSEQUENCED
    - unreliable  -> no flags (sequenced, may drop)

    pyenet hands out a fresh Peer wrapper per event, so peers are wrapped in
    ENetConnection objects keyed by their slot id to give callers a stable handle.
    """

    def __init__(self, address: Optional[str] = None, port: int = 0, max_peers: int = 1,
                 max_channels: int = 1, in_bandwidth: int = 0, out_bandwidth: int = 0):
        bind = _address(address, port) if address is not None else None
        try:
            self.host = enet.Host(bind, max_peers, max_channels, in_bandwidth, out_bandwidth)
        except (MemoryError, OSError) as ex:
            raise TransportError(
                f"Failed to create the host. Is there another server running on :{port}?"
            ) from ex
        self._connections: Dict[int, ENetConnection] = {}

    def _wrap(self, peer) -> ENetConnection:
        key = peer.incomingPeerID
        conn = self._connections.get(key)
        if conn is None:
            conn = ENetConnection(peer, peer.connectID)
            self._connections[key] = conn
        return conn

    def service(self, timeout: int = 0) -> Optional[TransportEvent]:
        try:
            event = self.host.service(timeout)
        except OSError as ex:
            raise TransportError(f"Host service failed: {ex}") from ex

        if event.type == enet.EVENT_TYPE_CONNECT:
            return TransportEvent(EventType.CONNECT, self._wrap(event.peer), event.data)
        if event.type == enet.EVENT_TYPE_RECEIVE:
            return TransportEvent(EventType.RECEIVE, self._wrap(event.peer), event.packet.data, event.channelID)
        if event.type == enet.EVENT_TYPE_DISCONNECT:
            conn = self._connections.pop(event.peer.incomingPeerID, None)
            if conn is None:
                conn = ENetConnection(event.peer, 0)
            return TransportEvent(EventType.DISCONNECT, conn, event.data)
        return None

    def connect(self, address: str, port: int, channels: int, data: int = 0) -> ENetConnection:
        try:
            peer = self.host.connect(_address(address, port), channels, data)
        except (MemoryError, OSError) as ex:
            raise TransportError(f"Failed to connect to {address}:{port}: {ex}") from ex
        # the slot may hold a stale wrapper from an earlier connection
        self._connections.pop(peer.incomingPeerID, None)
        return self._wrap(peer)

    def send(self, connection: ENetConnection, frame: bytes, channel: int, mode: DeliveryMode) -> None:
        # a peer that is already disconnecting rejects the packet; its DISCONNECT event follows
        connection.peer.send(channel, enet.Packet(frame, _FLAGS[DeliveryMode(mode)]))

    def disconnect(self, connection: ENetConnection, code: int = 0) -> None:
        connection.peer.disconnect_later(code)

    def connection_id(self, connection: ENetConnection) -> int:
        return connection.connect_id

    def flush(self) -> None:
        self.host.flush()

    def bandwidth_limit(self, incoming: int, outgoing: int) -> None:
        self.host.bandwidth_limit(incoming, outgoing)

    @property
    def bytes_sent(self) -> int:
        return self.host.totalSentData

    @property
    def bytes_received(self) -> int:
        return self.host.totalReceivedData

    def close(self) -> None:
        for conn in list(self._connections.values()):
            conn.peer.disconnect_now(0)
        self._connections.clear()
        self.host.flush()

from __future__ import annotations
import itertools
from dataclasses import dataclass, field
from queue import Empty, Queue
from typing import Dict, List, Optional, Tuple

from ..errors import TransportError
from ..settings import DeliveryMode
from ..transport import EventType, Transport, TransportEvent


class LoopbackNetwork:
    """In-process address space: (address, port) -> bound LoopbackTransport."""

    def __init__(self):
        self._hosts: Dict[Tuple[str, int], "LoopbackTransport"] = {}
        self._ids = itertools.count(1)

    def bind(self, address: str, port: int, host: "LoopbackTransport") -> None:
        key = (address, port)
        if key in self._hosts:
            raise TransportError(f"Failed to create the host. Is there another server running on :{port}?")
        self._hosts[key] = host

    def unbind(self, host: "LoopbackTransport") -> None:
        for key, bound in list(self._hosts.items()):
            if bound is host:
                del self._hosts[key]

    def lookup(self, address: str, port: int) -> Optional["LoopbackTransport"]:
        host = self._hosts.get((address, port))
        if host is None:
            # "*" binds every address
            host = self._hosts.get(("*", port))
        return host

    def next_id(self) -> int:
        return next(self._ids)


DEFAULT_NETWORK = LoopbackNetwork()


@dataclass(eq=False)
class LoopbackConnection:
    host: "LoopbackTransport" = field(repr=False)
    connect_id: int
    channels: int
    peer: Optional["LoopbackConnection"] = field(default=None, repr=False)
    open: bool = True


class LoopbackTransport(Transport):
    """
    Lossless, in-order transport between hosts of one LoopbackNetwork.

    Every delivery mode behaves like "reliable". Bandwidth limits are recorded,
    not enforced. Frames sent on a closed connection are dropped; the
    DISCONNECT event already queued reports the closure.
    """

    def __init__(self, network: Optional[LoopbackNetwork] = None, address: Optional[str] = None,
                 port: Optional[int] = None, max_peers: int = 64, max_channels: int = 1,
                 in_bandwidth: int = 0, out_bandwidth: int = 0):
        self.network = network if network is not None else DEFAULT_NETWORK
        self.address = address
        self.port = port
        self.max_peers = max_peers
        self.max_channels = max_channels
        self.incoming_bandwidth = in_bandwidth
        self.outgoing_bandwidth = out_bandwidth

        self._inbox: "Queue[TransportEvent]" = Queue()
        self._peers: List[LoopbackConnection] = []
        self._bytes_sent = 0
        self._bytes_received = 0

        if address is not None:
            self.network.bind(address, port, self)

    @property
    def peers(self) -> Tuple[LoopbackConnection, ...]:
        return tuple(self._peers)

    def service(self, timeout: int = 0) -> Optional[TransportEvent]:
        try:
            if timeout > 0:
                return self._inbox.get(timeout=timeout / 1000.0)
            return self._inbox.get_nowait()
        except Empty:
            return None

    def connect(self, address: str, port: int, channels: int, data: int = 0) -> LoopbackConnection:
        remote = self.network.lookup(address, port)
        if remote is None:
            raise TransportError(f"No host listening on {address}:{port}")
        if len(self._peers) >= self.max_peers:
            raise TransportError("No available peers for initiating a connection")

        channels = max(1, min(channels, remote.max_channels))
        local = LoopbackConnection(self, self.network.next_id(), channels)

        if len(remote._peers) >= remote.max_peers:
            # refused: only our side ever hears about it
            local.open = False
            self._push(TransportEvent(EventType.DISCONNECT, local, 0))
            return local

        far = LoopbackConnection(remote, local.connect_id, channels, peer=local)
        local.peer = far
        self._peers.append(local)
        remote._peers.append(far)
        remote._push(TransportEvent(EventType.CONNECT, far, data))
        self._push(TransportEvent(EventType.CONNECT, local, 0))
        return local

    def send(self, connection: LoopbackConnection, frame: bytes, channel: int, mode: DeliveryMode) -> None:
        if not 0 <= channel < connection.channels:
            raise TransportError(f"Channel {channel} out of range for connection with {connection.channels} channel(s)")
        if not connection.open:
            return
        size = len(frame)
        far = connection.peer
        self._bytes_sent += size
        far.host._bytes_received += size
        far.host._push(TransportEvent(EventType.RECEIVE, far, bytes(frame), channel))

    def disconnect(self, connection: LoopbackConnection, code: int = 0) -> None:
        if not connection.open:
            return
        far = connection.peer
        self._drop(connection)
        self._push(TransportEvent(EventType.DISCONNECT, connection, 0))
        far.host._drop(far)
        far.host._push(TransportEvent(EventType.DISCONNECT, far, code))

    def connection_id(self, connection: LoopbackConnection) -> int:
        return connection.connect_id

    def flush(self) -> None:
        # frames are queued on the remote host at send time
        pass

    def bandwidth_limit(self, incoming: int, outgoing: int) -> None:
        self.incoming_bandwidth = incoming
        self.outgoing_bandwidth = outgoing

    @property
    def bytes_sent(self) -> int:
        return self._bytes_sent

    @property
    def bytes_received(self) -> int:
        return self._bytes_received

    def close(self) -> None:
        for connection in list(self._peers):
            self.disconnect(connection)
        self.network.unbind(self)

    def _push(self, event: TransportEvent) -> None:
        self._inbox.put(event)

    def _drop(self, connection: LoopbackConnection) -> None:
        connection.open = False
        self._peers = [c for c in self._peers if c is not connection]

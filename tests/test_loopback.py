import pytest

from peerlink import DeliveryMode, EventType, TransportError
from peerlink.transports.loopback import LoopbackNetwork, LoopbackTransport


@pytest.fixture
def hosts():
    network = LoopbackNetwork()
    server = LoopbackTransport(network=network, address="localhost", port=1, max_channels=2)
    client = LoopbackTransport(network=network, max_channels=2)
    return server, client


def test_connect_queues_events_on_both_sides(hosts):
    server, client = hosts
    conn = client.connect("localhost", 1, 2, data=9)

    local = client.service()
    remote = server.service()
    assert local.type == EventType.CONNECT and local.connection is conn
    assert remote.type == EventType.CONNECT and remote.data == 9
    assert server.connection_id(remote.connection) == client.connection_id(conn)
    assert client.service() is None


def test_frames_arrive_in_order_with_channel(hosts):
    server, client = hosts
    conn = client.connect("localhost", 1, 2)
    server.service()
    client.send(conn, b"one", 1, DeliveryMode.UNRELIABLE)
    client.send(conn, b"two", 0, DeliveryMode.RELIABLE)

    first, second = server.service(), server.service()
    assert (first.type, first.data, first.channel) == (EventType.RECEIVE, b"one", 1)
    assert (second.data, second.channel) == (b"two", 0)
    assert client.bytes_sent == server.bytes_received == 6


def test_channel_out_of_range(hosts):
    server, client = hosts
    conn = client.connect("localhost", 1, 2)
    with pytest.raises(TransportError):
        client.send(conn, b"x", 2, DeliveryMode.RELIABLE)


def test_send_on_closed_connection_is_dropped(hosts):
    server, client = hosts
    conn = client.connect("localhost", 1, 2)
    server.service()
    client.disconnect(conn)
    client.send(conn, b"late", 0, DeliveryMode.RELIABLE)

    event = server.service()
    assert event.type == EventType.DISCONNECT
    assert server.service() is None
    assert client.bytes_sent == 0


def test_close_disconnects_peers_and_unbinds(hosts):
    server, client = hosts
    client.connect("localhost", 1, 2)
    server.service()
    server.close()

    assert server.peers == ()
    events = [client.service(), client.service()]
    assert [e.type for e in events] == [EventType.CONNECT, EventType.DISCONNECT]
    with pytest.raises(TransportError):
        client.connect("localhost", 1, 2)

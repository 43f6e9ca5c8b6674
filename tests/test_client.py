import pytest

from peerlink import NotConnectedError, TransportError, new_client
from peerlink.transports.loopback import LoopbackNetwork


def test_connect_sets_connection(server, make_client):
    client = make_client(connect=False)
    assert not client.is_connected
    assert client.connect() is True
    assert client.is_connected
    assert client.connect_id == client.transport.connection_id(client.connection)


def test_connect_event_has_no_session(server, make_client, pump):
    seen = []
    client = make_client(connect=False)
    client.on("connect", lambda data, session: seen.append((data, session)))
    client.connect()
    pump(server, client)
    assert seen == [(0, None)]


def test_server_receives_connect_data(server, make_client, pump):
    seen = []
    server.on("connect", lambda data, session: seen.append(data))
    client = make_client(connect=False)
    client.connect(data=42)
    server.poll()
    assert seen == [42]


def test_send_before_connect_raises_and_resets(make_client):
    client = make_client(connect=False)
    client.set_send_channel(1)
    with pytest.raises(NotConnectedError):
        client.send("ping", 1)
    assert client.send_channel == 0
    assert client.packets_sent == 0


def test_connect_without_server_fails():
    client = new_client("localhost", 1, transport="loopback", network=LoopbackNetwork())
    with pytest.raises(TransportError):
        client.connect()


def test_send_counts_packets(server, make_client, pump):
    client = make_client()
    pump(server, client)
    client.send("a", 1)
    client.send("b", 2)
    assert client.packets_sent == 2


def test_receive_from_server(server, make_client, pump):
    got = []
    client = make_client()
    client.on("state", lambda data, session: got.append(data))
    client.set_schema("state", ["hp", "mana"])
    pump(server, client)

    server.broadcast("state", [10, 5])
    client.poll()

    assert got == [{"hp": 10, "mana": 5}]
    assert client.packets_received == 1


def test_disconnect_notifies_both_sides(server, make_client, pump):
    server_codes, client_codes = [], []
    server.on("disconnect", lambda code, session: server_codes.append(code))
    client = make_client()
    client.on("disconnect", lambda code, session: client_codes.append(code))
    pump(server, client)

    client.disconnect(5)
    pump(server, client)

    assert server_codes == [5]
    assert client_codes == [0]
    assert client.connection is None
    with pytest.raises(NotConnectedError):
        client.send("late", None)


def test_disconnect_when_not_connected_is_noop(make_client):
    client = make_client(connect=False)
    client.disconnect()
    assert client.poll() == 0


def test_channel_count_follows_server(network, pump):
    from peerlink import new_server

    server = new_server("localhost", 22122, max_channels=1, transport="loopback", network=network)
    client = new_client("localhost", 22122, max_channels=4, transport="loopback", network=network)
    client.connect()
    assert client.connection.channels == 1
    server.close()


def test_update_is_poll(make_client):
    client = make_client(connect=False)
    assert client.update() == 0

import pytest

from peerlink import new_client, new_server
from peerlink.transports.loopback import LoopbackNetwork


@pytest.fixture
def network():
    return LoopbackNetwork()


@pytest.fixture
def server(network):
    srv = new_server("localhost", 22122, max_channels=4, transport="loopback", network=network)
    yield srv
    srv.close()


@pytest.fixture
def make_client(network):
    """Build clients on the same loopback network, connected or not."""

    def _make(connect=True, **kwargs):
        kwargs.setdefault("max_channels", 4)
        client = new_client("localhost", 22122, transport="loopback", network=network, **kwargs)
        if connect:
            client.connect()
        return client

    return _make


@pytest.fixture
def pump():
    """Poll every endpoint a few times so queued events settle."""

    def _pump(*endpoints, rounds=2):
        for _ in range(rounds):
            for endpoint in endpoints:
                endpoint.poll()

    return _pump

from __future__ import annotations
from typing import Any, Optional, Union

from .client import Client
from .codecs import Codec
from .config import DEFAULT_ADDRESS, DEFAULT_PORT, EndpointConfig
from .errors import ConfigurationError
from .log import DEFAULT_HISTORY
from .server import Server
from .transport import Transport


def _resolve_transport(transport: Union[str, Transport], config: EndpointConfig, *, bind: bool,
                       **transport_kwargs) -> Transport:
    if not isinstance(transport, str):
        # trust the caller to have sized the transport to match config
        return transport

    label = transport.lower()
    address = config.address if bind else None
    port = config.port if bind else None
    max_peers = config.max_peers if bind else 1

    if label == "enet":
        from .transports.enet import ENetTransport
        return ENetTransport(address, port or 0, max_peers, config.max_channels,
                             config.in_bandwidth, config.out_bandwidth, **transport_kwargs)
    if label == "loopback":
        from .transports.loopback import LoopbackTransport
        return LoopbackTransport(address=address, port=port, max_peers=max_peers,
                                 max_channels=config.max_channels, in_bandwidth=config.in_bandwidth,
                                 out_bandwidth=config.out_bandwidth, **transport_kwargs)
    raise ConfigurationError(f"Unknown transport label: {transport}")


def new_server(address: str = DEFAULT_ADDRESS, port: int = DEFAULT_PORT, max_peers: int = 64,
               max_channels: int = 1, in_bandwidth: int = 0, out_bandwidth: int = 0, *,
               transport: Union[str, Transport] = "enet", codec: Union[str, Codec] = "msgpack",
               timeout: int = 0, log_history: Optional[int] = DEFAULT_HISTORY, **transport_kwargs: Any) -> Server:
    """
    One-liner server:
      new_server()                                  # localhost:22122
      new_server("*", 22122, 10, 2)                 # any interface, 10 peers, 2 channels
      new_server("*", 22122, 10, 2, 1000, 1000)     # limit to 1 kB/s each way
      new_server(transport="loopback", network=net) # in-process, for tests

    - transport: "enet" | "loopback" | Transport instance
    - codec: "msgpack" | "json" | Codec instance
    - log_history: event lines kept in server.logger.messages (None = unbounded)
    - **transport_kwargs: passed to the transport constructor
    """
    config = EndpointConfig(address=address, port=port, max_peers=max_peers, max_channels=max_channels,
                            in_bandwidth=in_bandwidth, out_bandwidth=out_bandwidth, timeout=timeout,
                            log_history=log_history)
    t = _resolve_transport(transport, config, bind=True, **transport_kwargs)
    return Server(t, config, codec=codec)


def new_client(address: str = DEFAULT_ADDRESS, port: int = DEFAULT_PORT, max_channels: int = 1, *,
               transport: Union[str, Transport] = "enet", codec: Union[str, Codec] = "msgpack",
               timeout: int = 0, log_history: Optional[int] = DEFAULT_HISTORY, **transport_kwargs: Any) -> Client:
    """
    One-liner client; call connect() on the result.
      new_client()                            # localhost:22122
      new_client("123.45.67.89", 1234, 2)     # the server must also allocate two channels
    """
    config = EndpointConfig(address=address, port=port, max_channels=max_channels, timeout=timeout,
                            log_history=log_history)
    t = _resolve_transport(transport, config, bind=False, **transport_kwargs)
    return Client(t, config, codec=codec)

"""
Public API:
- Server, Client: endpoints that poll a transport and dispatch named events
- new_server, new_client: one-liner constructors
- EventRegistry, bind_fields: event name -> callbacks, positional payload naming
- DeliveryMode, DeliverySettings: per-send mode/channel with reset-after-send
- Session, SessionRegistry: server-side view of connected peers
- Envelope, pack_message, unpack_message: [name, payload] framing over a codec
- Codecs, MsgPackCodec, JSONCodec: payload serialization
- Transport, TransportEvent, EventType: contract transports must implement
- EndpointConfig, EventLog: configuration and event line recording
"""

# Endpoints
from .server import Server
from .client import Client
from .endpoint import Endpoint
from .factory import new_server, new_client

# Events & sessions
from .events import EventRegistry, Handler, bind_fields
from .session import Session, SessionRegistry

# Send settings
from .settings import DeliveryMode, DeliverySettings

# Wire
from .message import Envelope
from .wire import pack_message, unpack_message
from .codecs import Codecs, MsgPackCodec, JSONCodec

# Transport contract
from .transport import Transport, TransportEvent, EventType

from .config import EndpointConfig
from .log import EventLog
from .errors import (
    PeerlinkError,
    ConfigurationError,
    TransportError,
    NotConnectedError,
    EnvelopeError,
    DispatchError,
)

__all__ = [
    "Server",
    "Client",
    "Endpoint",
    "new_server",
    "new_client",
    "EventRegistry",
    "Handler",
    "bind_fields",
    "Session",
    "SessionRegistry",
    "DeliveryMode",
    "DeliverySettings",
    "Envelope",
    "pack_message",
    "unpack_message",
    "Codecs",
    "MsgPackCodec",
    "JSONCodec",
    "Transport",
    "TransportEvent",
    "EventType",
    "EndpointConfig",
    "EventLog",
    "PeerlinkError",
    "ConfigurationError",
    "TransportError",
    "NotConnectedError",
    "EnvelopeError",
    "DispatchError",
]

__version__ = "0.1.0"

from __future__ import annotations
from typing import Any

from .codecs import Codec
from .errors import EnvelopeError
from .message import Envelope


def pack_message(name: str, payload: Any, codec: Codec) -> bytes:
    """Build the envelope for (name, payload) and encode it with `codec`."""
    env = Envelope(name=name, payload=payload)
    try:
        return codec.dumps(env.to_wire())
    except (TypeError, ValueError, OverflowError) as ex:
        raise EnvelopeError(f"Cannot encode payload for '{name}' with {codec.name}: {ex}") from ex


def unpack_message(frame: bytes, codec: Codec) -> Envelope:
    """Decode a received frame back into an envelope."""
    try:
        obj = codec.loads(frame)
    except Exception as ex:
        # codecs raise their own exception types on malformed input
        raise EnvelopeError(f"Cannot decode {len(frame)}-byte frame with {codec.name}: {ex}") from ex
    return Envelope.from_wire(obj)

from __future__ import annotations
from typing import Any, Dict, Protocol as TypingProtocol

import json
import msgpack

from .errors import ConfigurationError


class Codec(TypingProtocol):
    name: str
    def dumps(self, obj: Any) -> bytes: ...
    def loads(self, data: bytes) -> Any: ...


class MsgPackCodec:
    """Binary codec; handles nested lists/maps, bytes, and non-string map keys."""
    name = "msgpack"

    def dumps(self, obj: Any) -> bytes:
        return msgpack.packb(obj, use_bin_type=True)

    def loads(self, data: bytes) -> Any:
        return msgpack.unpackb(data, raw=False, strict_map_key=False)


class JSONCodec:
    name = "json"

    def dumps(self, obj: Any) -> bytes:
        return json.dumps(obj, separators=(",", ":")).encode("utf-8")

    def loads(self, data: bytes) -> Any:
        return json.loads(data.decode("utf-8"))


class Codecs:
    _registry: Dict[str, Codec] = {
        "msgpack": MsgPackCodec(),
        "json": JSONCodec(),
    }

    @classmethod
    def get(cls, name: str) -> Codec:
        if name not in cls._registry:
            raise ConfigurationError(f"Unknown codec: {name}")
        return cls._registry[name]

    @classmethod
    def names(cls):
        return sorted(cls._registry)

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List

from .errors import EnvelopeError


@dataclass(frozen=True)
class Envelope:
    """
    The (event name, payload) pair exchanged between endpoints.
    On the wire it is the 2-element list [name, payload].
    """
    name: str       # event to trigger on the receiving side, never empty
    payload: Any    # anything the codec can serialize

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise EnvelopeError(f"Event name must be a non-empty string, got {self.name!r}")

    def to_wire(self) -> List[Any]:
        return [self.name, self.payload]

    @staticmethod
    def from_wire(obj: Any) -> "Envelope":
        if not isinstance(obj, (list, tuple)) or len(obj) != 2:
            raise EnvelopeError(f"Expected a [name, payload] pair, got {obj!r}")
        return Envelope(name=obj[0], payload=obj[1])

from __future__ import annotations
from typing import Any, List, Tuple


class PeerlinkError(Exception):
    """Base class for all peerlink errors."""


class ConfigurationError(PeerlinkError, ValueError):
    """Invalid construction parameters or default send settings. Fatal."""


class TransportError(PeerlinkError):
    """The transport could not create a host, connect, or send."""


class NotConnectedError(TransportError):
    """A client tried to send without a live server connection."""


class EnvelopeError(PeerlinkError, ValueError):
    """A message envelope could not be built or decoded."""


class DispatchError(PeerlinkError):
    """
    One or more callbacks raised while an event was dispatched.
    Every callback registered for the event has already run when this is raised.
    """

    def __init__(self, event: str, errors: List[Tuple[Any, BaseException]]):
        self.event = event
        self.errors = errors
        names = ", ".join(type(exc).__name__ for _, exc in errors)
        super().__init__(f"{len(errors)} callback(s) failed for event '{event}': {names}")

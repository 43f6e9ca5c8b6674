from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol as TypingProtocol, Sequence, Tuple, Union

from .errors import DispatchError


class Handler(TypingProtocol):
    """Object-style callback: anything with handle(data, session)."""
    def handle(self, data: Any, session: Any) -> None: ...


Callback = Union[Callable[[Any, Any], None], Handler]


def bind_fields(data: Any, fields: Sequence[str]) -> Any:
    """
    Link positional values to field names based on their order.

    bind_fields([3, 4], ("x", "y")) -> {"x": 3, "y": 4}

    Only lists and tuples are rebound; strings, bytes, mappings and scalars are
    returned as-is. Surplus positions are dropped, missing ones stay absent.
    """
    if isinstance(data, (list, tuple)):
        return dict(zip(fields, data))
    return data


def _invoke(callback: Callback, data: Any, session: Any) -> None:
    if callable(callback):
        callback(data, session)
    else:
        callback.handle(data, session)


class EventRegistry:
    """Event name -> ordered callbacks, plus an optional field schema per event."""

    def __init__(self):
        self._callbacks: Dict[str, List[Callback]] = {}
        self._schemas: Dict[str, Tuple[str, ...]] = {}

    def on(self, event: str, callback: Callback) -> Callback:
        """Append a callback for `event`; returns the callback."""
        self._callbacks.setdefault(event, []).append(callback)
        return callback

    def off(self, event: str, callback: Callback) -> int:
        """
        Remove every entry for `event` equal to `callback`.
        Returns how many were removed (0 if the event name is unknown).
        """
        callbacks = self._callbacks.get(event)
        if not callbacks:
            return 0
        kept = [cb for cb in callbacks if cb != callback]
        removed = len(callbacks) - len(kept)
        if kept:
            self._callbacks[event] = kept
        else:
            del self._callbacks[event]
        return removed

    def set_schema(self, event: str, fields: Iterable[str]) -> None:
        """Replace the field schema used to name positional payloads of `event`."""
        self._schemas[event] = tuple(fields)

    def schema(self, event: str) -> Optional[Tuple[str, ...]]:
        return self._schemas.get(event)

    def callbacks(self, event: str) -> Tuple[Callback, ...]:
        return tuple(self._callbacks.get(event, ()))

    def __contains__(self, event: str) -> bool:
        return event in self._callbacks

    def dispatch(self, event: str, data: Any, session: Any = None) -> bool:
        """
        Run every callback for `event` in registration order with (data, session).
        Returns False if nothing is registered for the event.

        A failing callback does not stop the ones after it; once all ran,
        failures are raised together as DispatchError.
        """
        callbacks = self._callbacks.get(event)
        if not callbacks:
            return False

        fields = self._schemas.get(event)
        if fields is not None:
            data = bind_fields(data, fields)

        errors: List[Tuple[Callback, BaseException]] = []
        # callbacks may (un)register while we iterate
        for callback in list(callbacks):
            try:
                _invoke(callback, data, session)
            except Exception as ex:
                errors.append((callback, ex))

        if errors:
            raise DispatchError(event, errors) from errors[0][1]
        return True

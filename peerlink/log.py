from __future__ import annotations
from collections import deque
from datetime import datetime
from typing import Any, Deque, Optional
import logging

DEFAULT_HISTORY = 1000


class EventLog:
    """
    Records human-readable event lines for one endpoint.

    The last `history` lines are kept in full in `messages` (0 keeps none,
    None keeps everything); what reaches the `peerlink.<source>` logger
    depends on the print_* switches.
    """

    def __init__(self, source: str, history: Optional[int] = DEFAULT_HISTORY):
        self.source = source
        self.messages: Deque[str] = deque(maxlen=history)
        self.logger = logging.getLogger(f"peerlink.{source.lower()}")

        # emit "[event] data" instead of the full line
        self.shorten_lines = True
        # emit every event, not only errors and warnings
        self.print_event_data = False
        self.print_errors = True
        self.print_warnings = True

    def wants(self, event: str) -> bool:
        """True if a line for `event` would be kept or emitted."""
        if self.messages.maxlen != 0:
            return True
        if event == "error":
            return self.print_errors
        if event == "warning":
            return self.print_warnings
        return self.print_event_data

    def log(self, event: str, data: Any) -> str:
        time = datetime.now().strftime("%X")
        short_line = f"[{event}] {data}"
        full_line = f"[{self.source}][{time}][{event}] {data}"
        line = short_line if self.shorten_lines else full_line

        if event == "error":
            if self.print_errors:
                self.logger.error(line)
        elif event == "warning":
            if self.print_warnings:
                self.logger.warning(line)
        elif self.print_event_data:
            self.logger.info(line)

        self.messages.append(full_line)
        return full_line

    def warning(self, data: Any) -> str:
        return self.log("warning", data)

    def error(self, data: Any) -> str:
        return self.log("error", data)

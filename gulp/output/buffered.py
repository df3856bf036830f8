"""
BufferedOutput — Capturing sink for tests and embedding

Accumulates everything written so a caller can read it back with
get_output(). Always uses the PLAIN style, so captured text never
contains escape sequences.
"""

import threading
from typing import List

from .base import CommandOutput
from .style import OutputStyle, PLAIN


class BufferedOutput(CommandOutput):
    """
    Sink that records text instead of displaying it.

    Thread-safe: jobs running on worker threads may write while the
    caller reads.
    """

    def __init__(self):
        self._parts: List[str] = []
        self._lock = threading.Lock()

    @property
    def style(self) -> OutputStyle:
        return PLAIN

    def println(self, text: str = "") -> None:
        with self._lock:
            self._parts.append(text)
            self._parts.append("\n")

    def print(self, text: str) -> None:
        with self._lock:
            self._parts.append(text)

    def get_output(self) -> str:
        with self._lock:
            return "".join(self._parts)

    def clear(self) -> None:
        with self._lock:
            self._parts.clear()

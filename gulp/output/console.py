"""
ConsoleOutput — Live terminal sink

Writes straight to stdout (or a given stream) and never captures:
get_output() is always empty so a long interactive session does not
grow memory. Colors follow the configured preference.
"""

import sys
from typing import Optional, TextIO

from .base import CommandOutput
from .style import OutputStyle, get_style


class ConsoleOutput(CommandOutput):
    """Sink for an attached terminal."""

    def __init__(self, stream: Optional[TextIO] = None, style: Optional[OutputStyle] = None):
        """
        Args:
            stream: Destination stream (default: sys.stdout at write time)
            style: Token set (default: auto-detected for the stream)
        """
        self._stream = stream
        self._style = style or get_style('auto', stream)

    @property
    def style(self) -> OutputStyle:
        return self._style

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def println(self, text: str = "") -> None:
        self._write(text + "\n")

    def print(self, text: str) -> None:
        self._write(text)

    def get_output(self) -> str:
        return ""

    def clear(self) -> None:
        pass

    def _write(self, text: str) -> None:
        """Write with graceful encoding fallback."""
        stream = self.stream
        try:
            stream.write(text)
        except UnicodeEncodeError:
            # Last resort: replace unencodable chars with ?
            encoding = getattr(stream, 'encoding', 'utf-8') or 'utf-8'
            stream.write(text.encode(encoding, errors='replace').decode(encoding))
        stream.flush()

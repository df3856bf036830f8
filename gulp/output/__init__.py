"""
Output — Swappable sinks for shell text

- ConsoleOutput: live terminal, colored, never captures
- BufferedOutput: captures text, plain, for tests and embedding
"""

from .style import OutputStyle, ANSI, PLAIN, get_style, supports_color
from .base import CommandOutput
from .console import ConsoleOutput
from .buffered import BufferedOutput

__all__ = [
    'OutputStyle', 'ANSI', 'PLAIN', 'get_style', 'supports_color',
    'CommandOutput', 'ConsoleOutput', 'BufferedOutput',
]

"""
OutputStyle — Color tokens for shell output

Two token sets:
- ANSI: escape sequences for a live terminal
- PLAIN: every token is the empty string

colored(text, token) is token + text + reset, so under PLAIN it is the
identity. Commands always go through the style and never test which
one they were given.

Usage:
    ctx.println(ctx.style.success("Saved"))
    ctx.println(f"{ctx.style.bold}Rules{ctx.style.reset}")
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional, TextIO


@dataclass(frozen=True)
class OutputStyle:
    """Complete set of color tokens plus the derived helpers."""
    reset: str
    bold: str

    # Foreground colors
    black: str
    red: str
    green: str
    yellow: str
    blue: str
    magenta: str
    cyan: str
    white: str

    def colored(self, text: str, color: str) -> str:
        """Wrap text with a color token and the reset token."""
        return f"{color}{text}{self.reset}"

    def success(self, text: str) -> str:
        return self.colored(text, self.green)

    def error(self, text: str) -> str:
        return self.colored(text, self.red)

    def warning(self, text: str) -> str:
        return self.colored(text, self.yellow)

    def info(self, text: str) -> str:
        return self.colored(text, self.cyan)


ANSI = OutputStyle(
    reset='\x1b[0m',
    bold='\x1b[1m',
    black='\x1b[30m',
    red='\x1b[31m',
    green='\x1b[32m',
    yellow='\x1b[33m',
    blue='\x1b[34m',
    magenta='\x1b[35m',
    cyan='\x1b[36m',
    white='\x1b[37m',
)

PLAIN = OutputStyle(
    reset='',
    bold='',
    black='',
    red='',
    green='',
    yellow='',
    blue='',
    magenta='',
    cyan='',
    white='',
)


def supports_color(stream: Optional[TextIO] = None) -> bool:
    """
    Check if a stream likely renders ANSI colors.

    Conservative: defaults to plain if uncertain.
    """
    # Explicit environment overrides (https://no-color.org)
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR', '').lower() in ('1', 'true', 'yes'):
        return True

    if os.environ.get('TERM', '').lower() == 'dumb':
        return False

    if stream is None:
        stream = sys.stdout
    isatty = getattr(stream, 'isatty', None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # Closed stream
        return False


def get_style(preference: Optional[str] = None, stream: Optional[TextIO] = None) -> OutputStyle:
    """
    Get the style for a preference.

    Args:
        preference: "always", "never", or "auto" (None = auto)
        stream: Stream used for auto-detection (default: stdout)

    Returns:
        ANSI or PLAIN
    """
    if preference == 'always':
        return ANSI
    if preference == 'never':
        return PLAIN
    return ANSI if supports_color(stream) else PLAIN

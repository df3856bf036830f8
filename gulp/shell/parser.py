"""
CommandParser — Raw shell input to ParsedCommand
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class ParsedCommand:
    """A command name and its positional arguments, in order."""
    name: str
    args: Tuple[str, ...] = ()

    def arg(self, index: int, default: Optional[str] = None) -> Optional[str]:
        """Positional argument at index, or default if absent."""
        if 0 <= index < len(self.args):
            return self.args[index]
        return default


class CommandParser:
    """Splits a line on whitespace: first token is the name, the rest are args."""

    @staticmethod
    def parse(line: Optional[str]) -> Optional[ParsedCommand]:
        """
        Parse one line of input.

        Returns:
            ParsedCommand, or None for empty/whitespace-only input
        """
        if not line:
            return None
        tokens = line.split()
        if not tokens:
            return None
        return ParsedCommand(name=tokens[0], args=tuple(tokens[1:]))

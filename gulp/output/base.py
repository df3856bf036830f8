"""
CommandOutput — Abstract destination for shell text

Commands never print directly. They write through the context's sink,
so the same command runs attached to a terminal (ConsoleOutput) or
captured for tests and embedding (BufferedOutput).
"""

from abc import ABC, abstractmethod

from .style import OutputStyle


class CommandOutput(ABC):
    """
    Where shell text goes.

    Subclasses provide the style and implement the four operations.
    """

    @property
    @abstractmethod
    def style(self) -> OutputStyle:
        """Token set used to color text for this destination."""

    @abstractmethod
    def println(self, text: str = "") -> None:
        """Write text followed by a line terminator."""

    @abstractmethod
    def print(self, text: str) -> None:
        """Write text without a terminator."""

    @abstractmethod
    def get_output(self) -> str:
        """Everything captured so far ("" for sinks that never capture)."""

    @abstractmethod
    def clear(self) -> None:
        """Reset captured text (no-op for sinks that never capture)."""

"""
Command — Shared foundation for shell commands

A command is a stateless capability keyed by name. It reads and
changes session state only through the CommandContext it is given.
Long-running work goes through ctx.start_job() so it can be cancelled.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..shell.context import CommandContext
    from ..shell.parser import ParsedCommand


class Command(ABC):
    """Base class for shell commands."""

    name: str = ""
    description: str = ""
    usage: str = ""

    @abstractmethod
    def invoke(self, parsed: 'ParsedCommand', ctx: 'CommandContext') -> None:
        """
        Run the command.

        Args:
            parsed: Name and arguments as typed
            ctx: Session state and output sink
        """

    # -------------------------------------------------------------------------
    # Output helpers
    # -------------------------------------------------------------------------

    def print_usage(self, ctx: 'CommandContext') -> None:
        ctx.println(ctx.style.warning(f"usage: {self.usage or self.name}"))

    def print_error(self, ctx: 'CommandContext', message: str) -> None:
        ctx.println(ctx.style.error(f"{self.name}: {message}"))

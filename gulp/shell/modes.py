"""
ModeHandler — Interprets parsed commands for one shell mode

Every mode carries the common commands (help, status, log, exit, echo,
mode, sleep, exclude) plus its own. Unknown names print
"<name>: command not defined" and leave the mode unchanged.
"""

from typing import TYPE_CHECKING, Dict, List, Optional

from ..commands import Command, CodecsCommand, DecodeCommand, EncodeCommand, common_commands

if TYPE_CHECKING:
    from .context import CommandContext
    from .parser import ParsedCommand


class ModeHandler:
    """Command registry bound to a named mode."""

    name: str = ""          # Prompt and `mode` argument
    display_name: str = ""  # Shown by `status`

    def __init__(self, commands: Optional[List[Command]] = None):
        self._registry: Dict[str, Command] = {}
        for command in (commands if commands is not None else self.default_commands()):
            self.register(command)

    def default_commands(self) -> List[Command]:
        return common_commands()

    def register(self, command: Command) -> None:
        self._registry[command.name] = command

    @property
    def registry(self) -> Dict[str, Command]:
        return dict(self._registry)

    def handle_command(self, parsed: 'ParsedCommand', ctx: 'CommandContext') -> None:
        """Run the named command, or report that it does not exist."""
        command = self._registry.get(parsed.name)
        if command is None:
            ctx.println(ctx.style.error(f"{parsed.name}: command not defined"))
            return
        command.invoke(parsed, ctx)

    def help_text(self) -> str:
        width = max((len(name) for name in self._registry), default=0)
        lines = [f"{self.display_name} commands:"]
        for name in sorted(self._registry):
            lines.append(f"  {name.ljust(width)}  {self._registry[name].description}")
        return "\n".join(lines)

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


class EncodeModeHandler(ModeHandler):
    name = "encode"
    display_name = "Encode Mode"

    def default_commands(self) -> List[Command]:
        return common_commands() + [EncodeCommand(), CodecsCommand()]


class DecodeModeHandler(ModeHandler):
    name = "decode"
    display_name = "Decode Mode"

    def default_commands(self) -> List[Command]:
        return common_commands() + [DecodeCommand(), CodecsCommand()]


ENCODE_MODE = EncodeModeHandler()
DECODE_MODE = DecodeModeHandler()

MODES: Dict[str, ModeHandler] = {
    ENCODE_MODE.name: ENCODE_MODE,
    DECODE_MODE.name: DECODE_MODE,
}


def get_mode(name: str) -> Optional[ModeHandler]:
    """Mode handler by name (case-insensitive), or None."""
    return MODES.get(name.strip().lower())

"""
Commands — Shell command implementations

Each mode's registry is built from common_commands() plus the
mode-specific commands. Order here is the order modes register them;
help sorts by name.
"""

from typing import List

from .base import Command
from .codec_cmd import CodecsCommand, DecodeCommand, EncodeCommand
from .common import (
    EchoCommand, ExitCommand, HelpCommand, LogCommand,
    ModeCommand, SleepCommand, StatusCommand,
)
from .exclude_cmd import ExcludeCommand

COMMON_COMMANDS = [
    HelpCommand,
    StatusCommand,
    LogCommand,
    ExitCommand,
    EchoCommand,
    ModeCommand,
    SleepCommand,
    ExcludeCommand,
]


def common_commands() -> List[Command]:
    """Fresh instances of the commands every mode carries."""
    return [cls() for cls in COMMON_COMMANDS]


__all__ = [
    'Command', 'COMMON_COMMANDS', 'common_commands',
    'HelpCommand', 'StatusCommand', 'LogCommand', 'ExitCommand',
    'EchoCommand', 'ModeCommand', 'SleepCommand', 'ExcludeCommand',
    'EncodeCommand', 'DecodeCommand', 'CodecsCommand',
]

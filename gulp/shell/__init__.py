"""
Shell — Mode-dispatching command shell

Usage:
    from gulp.shell import CommandContext, Shell
    from gulp.output import BufferedOutput

    ctx = CommandContext(output=BufferedOutput())
    Shell(ctx).execute_line("echo hello")
    ctx.output.get_output()   # "hello\\n"
"""

from .parser import CommandParser, ParsedCommand
from .modes import (
    DECODE_MODE, ENCODE_MODE, MODES,
    DecodeModeHandler, EncodeModeHandler, ModeHandler, get_mode,
)
from .context import CancelToken, CommandContext, Job, Services
from .repl import Shell

__all__ = [
    'CommandParser', 'ParsedCommand',
    'ModeHandler', 'EncodeModeHandler', 'DecodeModeHandler',
    'ENCODE_MODE', 'DECODE_MODE', 'MODES', 'get_mode',
    'CancelToken', 'CommandContext', 'Job', 'Services',
    'Shell',
]

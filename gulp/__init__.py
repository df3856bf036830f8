"""
gulp — Headless proxy command shell

Phased startup that brings the proxy's collaborators online, and a
mode-dispatching command shell whose output goes through a swappable
sink (terminal or capture buffer).

Usage:
    gulp                          # interactive shell
    gulp -c "encode base64 hi"    # one command
    gulp --settings settings.json

Embedding:
    from gulp import CommandContext, Shell, BufferedOutput

    ctx = CommandContext(output=BufferedOutput())
    Shell(ctx).execute_line("status")
    ctx.output.get_output()
"""

__version__ = "0.1.0"

# Errors
from .errors import GulpError, PhaseError, InitializationAborted, JobCancelled, StoreError

# Output layer
from .output import (
    OutputStyle, ANSI, PLAIN, get_style, supports_color,
    CommandOutput, ConsoleOutput, BufferedOutput,
)

# Rules
from .exclusion import ExclusionRule, ExclusionRuleType, ExclusionRuleManager

# Config
from .config import Config, ConfigManager, get_config

# Startup
from .initializer import AppInitializer, Phase, PhaseState

# Shell
from .shell import (
    CommandParser, ParsedCommand, ModeHandler, EncodeModeHandler, DecodeModeHandler,
    CommandContext, CancelToken, Services, Shell,
)

__all__ = [
    # Errors
    'GulpError', 'PhaseError', 'InitializationAborted', 'JobCancelled', 'StoreError',
    # Output
    'OutputStyle', 'ANSI', 'PLAIN', 'get_style', 'supports_color',
    'CommandOutput', 'ConsoleOutput', 'BufferedOutput',
    # Rules
    'ExclusionRule', 'ExclusionRuleType', 'ExclusionRuleManager',
    # Config
    'Config', 'ConfigManager', 'get_config',
    # Startup
    'AppInitializer', 'Phase', 'PhaseState',
    # Shell
    'CommandParser', 'ParsedCommand', 'ModeHandler', 'EncodeModeHandler', 'DecodeModeHandler',
    'CommandContext', 'CancelToken', 'Services', 'Shell',
]

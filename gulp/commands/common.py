"""
Common commands — Present in every mode

help, status, log, exit, echo, mode, sleep
"""

import logging
from typing import TYPE_CHECKING

from .base import Command

if TYPE_CHECKING:
    from ..shell.context import CancelToken, CommandContext
    from ..shell.parser import ParsedCommand

logger = logging.getLogger(__name__)

DEFAULT_LOG_LINES = 20


class HelpCommand(Command):
    name = "help"
    description = "List the commands of the current mode"

    def invoke(self, parsed: 'ParsedCommand', ctx: 'CommandContext') -> None:
        ctx.println(ctx.current_handler.help_text())


class StatusCommand(Command):
    name = "status"
    description = "Show the current mode and job"

    def invoke(self, parsed: 'ParsedCommand', ctx: 'CommandContext') -> None:
        ctx.println(f"Mode: {ctx.style.info(ctx.current_handler.display_name)}")
        job = ctx.execution_job
        if job is not None and not job.done():
            ctx.println(f"Job: {job.name} ({'cancelling' if job.cancelled else 'running'})")


class LogCommand(Command):
    name = "log"
    description = "Show recent log lines"
    usage = "log [lines]"

    def invoke(self, parsed: 'ParsedCommand', ctx: 'CommandContext') -> None:
        try:
            limit = int(parsed.arg(0, str(DEFAULT_LOG_LINES)))
        except ValueError:
            self.print_usage(ctx)
            return

        logs = ctx.services.logs
        if logs is None:
            self.print_error(ctx, "logging is not initialized")
            return

        lines = logs.lines(limit)
        if not lines:
            ctx.println("No log lines")
            return
        for line in lines:
            ctx.println(line)


class ExitCommand(Command):
    name = "exit"
    description = "Leave the shell"

    def invoke(self, parsed: 'ParsedCommand', ctx: 'CommandContext') -> None:
        ctx.cancel_job()
        ctx.request_exit()


class EchoCommand(Command):
    name = "echo"
    description = "Print the arguments"
    usage = "echo [text...]"

    def invoke(self, parsed: 'ParsedCommand', ctx: 'CommandContext') -> None:
        ctx.println(" ".join(parsed.args))


class ModeCommand(Command):
    name = "mode"
    description = "Switch mode (encode, decode)"
    usage = "mode <encode|decode>"

    def invoke(self, parsed: 'ParsedCommand', ctx: 'CommandContext') -> None:
        from ..shell.modes import MODES, get_mode

        if len(parsed.args) != 1:
            self.print_usage(ctx)
            return

        handler = get_mode(parsed.args[0])
        if handler is None:
            self.print_error(ctx, f"unknown mode '{parsed.args[0]}'. Valid: {', '.join(MODES)}")
            return

        ctx.current_handler = handler
        logger.debug("Switched to %s", handler.display_name)
        ctx.println(ctx.style.success(f"Switched to {handler.display_name}"))


class SleepCommand(Command):
    name = "sleep"
    description = "Wait in the background (Ctrl-C cancels)"
    usage = "sleep <seconds>"

    def invoke(self, parsed: 'ParsedCommand', ctx: 'CommandContext') -> None:
        try:
            seconds = float(parsed.arg(0, ""))
        except ValueError:
            self.print_usage(ctx)
            return
        if seconds < 0:
            self.print_error(ctx, "seconds must be >= 0")
            return

        def run(token: 'CancelToken') -> None:
            token.wait(seconds)
            ctx.println(f"Slept {seconds:g}s")

        ctx.start_job(self.name, run)

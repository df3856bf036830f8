"""
Shell — Read, dispatch, wait loop over a CommandContext

Each line is parsed and handed to the current mode handler. If the
command started a job, the shell waits for it; Ctrl-C while waiting
cancels the job, Ctrl-C at the prompt is ignored. EOF or `exit` ends
the loop.
"""

import logging
from typing import Callable, Iterable

from .context import CommandContext
from .parser import CommandParser

logger = logging.getLogger(__name__)


class Shell:
    """Command loop for one session."""

    def __init__(self, ctx: CommandContext, input_fn: Callable[[str], str] = input):
        self.ctx = ctx
        self._input = input_fn

    @property
    def prompt(self) -> str:
        return f"{self.ctx.current_handler.name}> "

    def execute_line(self, line: str) -> bool:
        """
        Run one line and wait for any job it started.

        Returns:
            False once exit has been requested, True otherwise
        """
        parsed = CommandParser.parse(line)
        if parsed is not None:
            before = self.ctx.execution_job
            try:
                self.ctx.current_handler.handle_command(parsed, self.ctx)
            except Exception as e:
                logger.exception("Command %s failed", parsed.name)
                self.ctx.println(self.ctx.style.error(f"{parsed.name}: {e}"))
            job = self.ctx.execution_job
            if job is not None and job is not before:
                self._await_job(job)
        return not self.ctx.exit_requested

    def _await_job(self, job) -> None:
        """Block until job ends; Ctrl-C cancels it and keeps waiting."""
        while True:
            try:
                job.wait()
                return
            except KeyboardInterrupt:
                self.ctx.cancel_job()

    def run(self) -> int:
        """Interactive loop. Returns the exit status."""
        try:
            while True:
                try:
                    line = self._input(self.prompt)
                except EOFError:
                    self.ctx.println()
                    break
                except KeyboardInterrupt:
                    self.ctx.println()
                    continue

                if not self.execute_line(line):
                    break
        finally:
            self.ctx.close()
        return 0

    def run_batch(self, lines: Iterable[str]) -> int:
        """Run lines non-interactively. Blank lines and # comments are skipped."""
        try:
            for line in lines:
                stripped = line.strip()
                if not stripped or stripped.startswith("#"):
                    continue
                if not self.execute_line(stripped):
                    break
        finally:
            self.ctx.close()
        return 0

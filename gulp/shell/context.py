"""
CommandContext — Per-session shell state

Holds:
- current_handler: the active ModeHandler (commands may replace it)
- execution_job: the most recently started job, if any
- output: the sink every command writes to (fixed for the session)
- services: collaborators commands consult

Jobs run on a small thread pool and receive a CancelToken.
Cancellation is cooperative: cancel_job() only sets the token, and the
job notices at its next CancelToken.wait() or raise_if_cancelled().

Starting a job while another is still running replaces the handle
without cancelling the old job. The old job keeps running; a warning
is logged.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from ..components import EncoderRegistry, VulCheckerRegistry
from ..errors import JobCancelled
from ..exclusion import ExclusionRuleManager
from ..logs import RecentLogHandler
from ..output import CommandOutput, ConsoleOutput, OutputStyle
from .modes import ENCODE_MODE, ModeHandler

logger = logging.getLogger(__name__)

JOB_WORKERS = 4


class CancelToken:
    """Cancellation request shared between the shell and one job."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> None:
        """
        Sleep up to seconds, waking early on cancellation.

        Raises:
            JobCancelled: If cancellation was requested before or during the wait
        """
        if self._event.wait(seconds):
            raise JobCancelled()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise JobCancelled()


class Job:
    """Handle to a running job."""

    def __init__(self, name: str, future: Future, token: CancelToken):
        self.name = name
        self.token = token
        self._future = future

    def cancel(self) -> None:
        """Request cancellation. Returns immediately."""
        self.token.cancel()

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    def done(self) -> bool:
        return self._future.done()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the job finishes or timeout passes. True if finished."""
        wait_futures([self._future], timeout=timeout)
        return self._future.done()

    def __repr__(self):
        state = "done" if self.done() else ("cancelling" if self.cancelled else "running")
        return f"Job({self.name!r}, {state})"


@dataclass
class Services:
    """Collaborators available to shell commands."""
    exclusions: ExclusionRuleManager = field(default_factory=ExclusionRuleManager)
    encoders: Optional[EncoderRegistry] = field(default_factory=EncoderRegistry)
    vulcheckers: Optional[VulCheckerRegistry] = None
    logs: Optional[RecentLogHandler] = None


class CommandContext:
    """State of one shell session."""

    def __init__(
        self,
        output: Optional[CommandOutput] = None,
        handler: Optional[ModeHandler] = None,
        services: Optional[Services] = None
    ):
        self._output = output if output is not None else ConsoleOutput()
        self.current_handler: ModeHandler = handler or ENCODE_MODE
        self.services = services or Services()
        self.execution_job: Optional[Job] = None
        self.exit_requested = False

        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    @property
    def output(self) -> CommandOutput:
        return self._output

    @property
    def style(self) -> OutputStyle:
        return self._output.style

    def println(self, text: str = "") -> None:
        self._output.println(text)

    def print(self, text: str) -> None:
        self._output.print(text)

    # -------------------------------------------------------------------------
    # Jobs
    # -------------------------------------------------------------------------

    def start_job(self, name: str, fn: Callable[[CancelToken], Any]) -> Job:
        """
        Run fn(token) in the background and hold it as execution_job.

        JobCancelled is reported as a warning line, other exceptions
        as an error line; neither escapes the job.
        """
        previous = self.execution_job
        if previous is not None and not previous.done():
            logger.warning("Job %s replaced while still running; it is not cancelled", previous.name)

        token = CancelToken()
        future = self._get_executor().submit(self._run_job, name, fn, token)
        job = Job(name, future, token)
        self.execution_job = job
        return job

    def _run_job(self, name: str, fn: Callable[[CancelToken], Any], token: CancelToken) -> Any:
        try:
            return fn(token)
        except JobCancelled:
            logger.info("Job %s cancelled", name)
            self.println(self.style.warning(f"{name}: cancelled"))
        except Exception as e:
            logger.exception("Job %s failed", name)
            self.println(self.style.error(f"{name}: {e}"))
        return None

    def cancel_job(self) -> None:
        """Request cancellation of execution_job. No-op when there is none."""
        job = self.execution_job
        if job is not None and not job.done():
            logger.debug("Cancelling job %s", job.name)
            job.cancel()

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=JOB_WORKERS,
                    thread_name_prefix="gulp-job-"
                )
            return self._executor

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def request_exit(self) -> None:
        self.exit_requested = True

    def close(self) -> None:
        """Cancel the current job and release the job pool."""
        self.cancel_job()
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=False)
                self._executor = None

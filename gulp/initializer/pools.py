"""
ComponentPool — Thread pool that runs component tasks and joins them

Design principles:
- Threads, since component tasks are import and SQLite I/O
- Every task is wrapped so the pool never loses its exception object
- run_all() returns once every task completed, or raises the first
  failure it observes with its original type
- Siblings of a failed task are NOT cancelled; they finish in the
  background and their results are dropped
"""

import logging
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .config import InitializerConfig
from .task import ComponentTask, TaskResult, TaskStatus

logger = logging.getLogger(__name__)


@dataclass
class PoolStats:
    """Statistics for pool observability."""
    active_tasks: int = 0
    completed_tasks: int = 0
    failed_tasks: int = 0
    total_duration_ms: float = 0.0

    def to_dict(self) -> dict:
        return {
            "active_tasks": self.active_tasks,
            "completed_tasks": self.completed_tasks,
            "failed_tasks": self.failed_tasks,
            "total_duration_ms": round(self.total_duration_ms, 2)
        }


class ComponentPool:
    """
    ThreadPool for component initialization.

    One pool per init_components() call.
    """

    def __init__(self, config: Optional[InitializerConfig] = None):
        self._config = config or InitializerConfig.from_env()
        self._config.validate()
        self._executor = ThreadPoolExecutor(
            max_workers=self._config.workers,
            thread_name_prefix=self._config.thread_name_prefix
        )
        self._stats = PoolStats()
        self._lock = threading.Lock()
        self._shutdown = False

    def submit(self, task: ComponentTask) -> Future:
        """
        Submit a task for execution.

        The future always resolves to a TaskResult; it never raises.
        """
        if self._shutdown:
            raise RuntimeError("Pool is shut down")

        with self._lock:
            self._stats.active_tasks += 1

        return self._executor.submit(self._execute_task, task)

    def _execute_task(self, task: ComponentTask) -> TaskResult:
        """Run one task, capturing its outcome."""
        started_at = datetime.now(timezone.utc)
        logger.debug("Starting component task %s [%s]", task.name, task.kind.value)

        try:
            result = task.fn()
            status, exception = TaskStatus.COMPLETED, None
        except Exception as e:
            result, status, exception = None, TaskStatus.FAILED, e

        completed_at = datetime.now(timezone.utc)
        duration_ms = (completed_at - started_at).total_seconds() * 1000

        with self._lock:
            self._stats.active_tasks -= 1
            if status == TaskStatus.COMPLETED:
                self._stats.completed_tasks += 1
            else:
                self._stats.failed_tasks += 1
            self._stats.total_duration_ms += duration_ms

        if exception is not None:
            logger.error("Component task %s failed: %s", task.name, exception)
        else:
            logger.debug("Component task %s completed in %.1fms", task.name, duration_ms)

        return TaskResult(
            task_id=task.id,
            name=task.name,
            status=status,
            result=result,
            exception=exception,
            started_at=started_at.isoformat(),
            completed_at=completed_at.isoformat(),
            duration_ms=duration_ms
        )

    def run_all(self, tasks: List[ComponentTask]) -> Dict[str, TaskResult]:
        """
        Run tasks concurrently and wait for them.

        Args:
            tasks: Tasks to run (no ordering between them)

        Returns:
            Dict mapping task name -> result, once all completed

        Raises:
            Exception: The first task failure observed, unwrapped
            KeyboardInterrupt: If the wait is interrupted
        """
        pending = {self.submit(task) for task in tasks}
        results: Dict[str, TaskResult] = {}

        while pending:
            done, pending = wait(pending, return_when=FIRST_COMPLETED)
            for future in done:
                outcome: TaskResult = future.result()
                if outcome.failed:
                    raise outcome.exception
                results[outcome.name] = outcome

        return results

    def stats(self) -> PoolStats:
        """Get pool statistics."""
        with self._lock:
            return PoolStats(
                active_tasks=self._stats.active_tasks,
                completed_tasks=self._stats.completed_tasks,
                failed_tasks=self._stats.failed_tasks,
                total_duration_ms=self._stats.total_duration_ms
            )

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown the pool. Running tasks are never interrupted."""
        self._shutdown = True
        self._executor.shutdown(wait=wait)

"""
ComponentTask — Unit of component initialization

Defines the abstractions the component pool runs:
- ComponentTask: named callable tagged with what it depends on
- TaskKind: independent vs store-dependent
- TaskResult: outcome of one task, carrying the original exception

Design principles:
- Tasks are immutable after creation
- A failed result keeps the exception object itself, so the join can
  re-raise it with its own type instead of a wrapper
- Store-dependent tasks must read only their own partition
"""

import itertools
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

import xxhash


class TaskKind(Enum):
    """What a component task needs before it can run."""
    INDEPENDENT = "independent"          # Classpath/filesystem scanning
    STORE_DEPENDENT = "store-dependent"  # Reads one partition of the open store


class TaskStatus(Enum):
    """Task lifecycle states."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


_counter = itertools.count()


def _generate_task_id(name: str) -> str:
    """Generate a task ID using xxhash (name + time + sequence)."""
    seed = f"{name}:{datetime.now(timezone.utc).isoformat()}:{next(_counter)}"
    return xxhash.xxh64(seed.encode()).hexdigest()[:12]


@dataclass(frozen=True, eq=False)
class ComponentTask:
    """
    One component initializer.

    fn takes no arguments; whatever it returns ends up in TaskResult.result.
    """
    name: str
    kind: TaskKind
    fn: Callable[[], Any]
    id: str = ""
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def __post_init__(self):
        if not self.id:
            object.__setattr__(self, "id", _generate_task_id(self.name))

    @property
    def needs_store(self) -> bool:
        return self.kind == TaskKind.STORE_DEPENDENT

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, ComponentTask):
            return self.id == other.id
        return False


@dataclass
class TaskResult:
    """Outcome of one component task."""
    task_id: str
    name: str
    status: TaskStatus
    result: Any = None
    exception: Optional[BaseException] = None

    # Timing
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    duration_ms: Optional[float] = None

    @property
    def success(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def failed(self) -> bool:
        return self.status == TaskStatus.FAILED

    @property
    def error(self) -> Optional[str]:
        """Failure message for logging."""
        if self.exception is None:
            return None
        return f"{type(self.exception).__name__}: {self.exception}"


# Task factory functions

def independent_task(fn: Callable[[], Any], name: str = "") -> ComponentTask:
    """
    Create a task that does not touch the store.

    Example:
        task = independent_task(encoders.scan, name="encoders")
    """
    return ComponentTask(name=name or getattr(fn, "__qualname__", "task"),
                         kind=TaskKind.INDEPENDENT, fn=fn)


def store_task(fn: Callable[[], Any], name: str = "") -> ComponentTask:
    """
    Create a task that reads one partition of the open store.

    Example:
        task = store_task(client_keys.load, name="client-keys")
    """
    return ComponentTask(name=name or getattr(fn, "__qualname__", "task"),
                         kind=TaskKind.STORE_DEPENDENT, fn=fn)

"""
Phases — One-shot state machine for the three startup steps

Each phase moves PENDING -> RUNNING -> READY (or FAILED) exactly once.
There is no way back to PENDING, so a phase's entry action runs at
most once per initializer.

Entry requirements:
- CORE: nothing
- GULP: headless mode, CORE ready
- COMPONENTS: CORE ready, and GULP ready when headless
"""

from enum import Enum
from typing import Dict, Optional

from ..errors import PhaseError


class Phase(Enum):
    CORE = "init_core"
    GULP = "init_gulp"
    COMPONENTS = "init_components"


class PhaseState(Enum):
    PENDING = "pending"
    RUNNING = "running"
    READY = "ready"
    FAILED = "failed"


# Allowed transitions
TRANSITIONS = {
    PhaseState.PENDING: (PhaseState.RUNNING,),
    PhaseState.RUNNING: (PhaseState.READY, PhaseState.FAILED),
    PhaseState.READY: (),
    PhaseState.FAILED: (),
}


def check_transition(current: PhaseState, target: PhaseState) -> Optional[str]:
    """Error message if current -> target is not allowed, else None."""
    if target not in TRANSITIONS[current]:
        return f"cannot move from {current.value} to {target.value}"
    return None


def check_entry(phase: Phase, states: Dict[Phase, PhaseState], headless: bool) -> Optional[str]:
    """
    Why phase may not start now, or None if it may.

    Args:
        phase: Phase about to start
        states: Current state of every phase
        headless: Whether the process runs the headless shell
    """
    name = f"{phase.value}()"
    state = states[phase]
    if state != PhaseState.PENDING:
        return f"{name} already called (state: {state.value})"

    if phase == Phase.CORE:
        return None

    if states[Phase.CORE] != PhaseState.READY:
        return f"{name} requires init_core() to complete first"

    if phase == Phase.GULP and not headless:
        return f"{name} is only valid in headless mode"

    if phase == Phase.COMPONENTS and headless and states[Phase.GULP] != PhaseState.READY:
        return f"{name} requires init_gulp() to complete first in headless mode"

    return None


class PhaseTracker:
    """Holds the state of each phase and enforces the rules above."""

    def __init__(self, headless: bool = False):
        self.headless = headless
        self._states: Dict[Phase, PhaseState] = {p: PhaseState.PENDING for p in Phase}

    def state(self, phase: Phase) -> PhaseState:
        return self._states[phase]

    def is_ready(self, phase: Phase) -> bool:
        return self._states[phase] == PhaseState.READY

    def check(self, phase: Phase) -> None:
        """
        Raise if phase may not start now. Does not change any state.

        Raises:
            PhaseError: If the phase already ran or its requirements are unmet
        """
        error = check_entry(phase, self._states, self.headless)
        if error:
            raise PhaseError(error)

    def begin(self, phase: Phase) -> None:
        """Enter a phase. Raises PhaseError like check()."""
        self.check(phase)
        self._move(phase, PhaseState.RUNNING)

    def complete(self, phase: Phase) -> None:
        self._move(phase, PhaseState.READY)

    def fail(self, phase: Phase) -> None:
        self._move(phase, PhaseState.FAILED)

    def _move(self, phase: Phase, target: PhaseState) -> None:
        error = check_transition(self._states[phase], target)
        if error:
            raise PhaseError(f"{phase.value}(): {error}")
        self._states[phase] = target

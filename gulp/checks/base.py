"""
SecurityCheck — Response header check run by the VulCheckerRegistry

Each check inspects the response headers of one request and returns a
CheckResult. Headers are passed as a dict with lowercase names.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class CheckStatus(Enum):
    OK = "OK"
    FAIL = "FAIL"
    WARN = "WARN"


@dataclass(frozen=True)
class CheckResult:
    """
    Outcome of one security check.

    display_value defaults to the status name, raw_value to "".
    """
    status: CheckStatus
    display_value: str = ""
    raw_value: str = ""

    def __post_init__(self):
        if not isinstance(self.status, CheckStatus):
            raise ValueError("status must be a CheckStatus")
        if not self.display_value:
            object.__setattr__(self, "display_value", self.status.value)
        if self.raw_value is None:
            object.__setattr__(self, "raw_value", "")

    @property
    def is_ok(self) -> bool:
        return self.status == CheckStatus.OK

    @property
    def is_fail(self) -> bool:
        return self.status == CheckStatus.FAIL

    @property
    def is_warn(self) -> bool:
        return self.status == CheckStatus.WARN

    @classmethod
    def ok(cls, display_value: Optional[str] = None, raw_value: Optional[str] = None) -> 'CheckResult':
        return cls(CheckStatus.OK, display_value or "", raw_value or "")

    @classmethod
    def fail(cls, display_value: Optional[str] = None, raw_value: Optional[str] = None) -> 'CheckResult':
        return cls(CheckStatus.FAIL, display_value or "", raw_value or "")

    @classmethod
    def warn(cls, display_value: Optional[str] = None, raw_value: Optional[str] = None) -> 'CheckResult':
        return cls(CheckStatus.WARN, display_value or "", raw_value or "")


class SecurityCheck(ABC):
    """One header rule."""

    name: str = ""
    header: str = ""  # Lowercase header inspected by this check

    @abstractmethod
    def check(self, headers: Dict[str, str]) -> CheckResult:
        pass

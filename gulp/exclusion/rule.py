"""
ExclusionRule — Method + URL predicate that suppresses processing

Three rule types:
- HOST: URL host equals the pattern (case-insensitive)
- PATH: URL path equals the pattern, or starts with it when the
  pattern ends in '*'
- ENDPOINT: "<METHOD> <url>" equals the pattern exactly

Rules are immutable. Identity is the id, not the content.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from urllib.parse import urlsplit


class ExclusionRuleType(Enum):
    """What part of the request a rule looks at."""
    HOST = "host"
    PATH = "path"
    ENDPOINT = "endpoint"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_name(cls, name: str) -> 'ExclusionRuleType':
        """
        Parse a rule type from user input.

        Raises:
            ValueError: If name is not host, path or endpoint
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValueError(f"Unknown rule type '{name}'. Valid: {valid}") from None


@dataclass(frozen=True, eq=False)
class ExclusionRule:
    """A single exclusion rule."""
    type: ExclusionRuleType
    pattern: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def matches(self, method: str, url: str) -> bool:
        """True if the (method, url) pair is covered by this rule."""
        if self.type == ExclusionRuleType.HOST:
            return self._matches_host(url)
        if self.type == ExclusionRuleType.PATH:
            return self._matches_path(url)
        if self.type == ExclusionRuleType.ENDPOINT:
            return f"{method} {url}" == self.pattern
        raise ValueError(f"Unknown ExclusionRuleType: {self.type}")

    def _matches_host(self, url: str) -> bool:
        host = _extract_host(url)
        return host is not None and host.lower() == self.pattern.lower()

    def _matches_path(self, url: str) -> bool:
        path = _extract_path(url)
        if path is None:
            return False
        if self.pattern.endswith("*"):
            return path.startswith(self.pattern[:-1])
        return path == self.pattern

    def __eq__(self, other):
        if isinstance(other, ExclusionRule):
            return self.id == other.id
        return NotImplemented

    def __hash__(self):
        return hash(self.id)

    def __str__(self):
        return f"{self.type.display_name}: {self.pattern}"


def _extract_host(url: str) -> Optional[str]:
    try:
        return urlsplit(url).hostname
    except ValueError:
        return None


def _extract_path(url: str) -> Optional[str]:
    try:
        path = urlsplit(url).path
    except ValueError:
        return None
    return path or "/"

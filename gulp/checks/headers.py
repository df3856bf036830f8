"""
Response header checks.
"""

from typing import Dict

from .base import CheckResult, SecurityCheck


class ContentTypeOptionsCheck(SecurityCheck):
    """X-Content-Type-Options must be nosniff."""

    name = "content-type-options"
    header = "x-content-type-options"

    def check(self, headers: Dict[str, str]) -> CheckResult:
        value = headers.get(self.header)
        if value is None:
            return CheckResult.fail("Missing", "")
        if value.strip().lower() == "nosniff":
            return CheckResult.ok("nosniff", value)
        return CheckResult.fail(value, value)


class CacheControlCheck(SecurityCheck):
    """Responses should not be stored by shared caches."""

    name = "cache-control"
    header = "cache-control"

    def check(self, headers: Dict[str, str]) -> CheckResult:
        value = headers.get(self.header)
        if value is None:
            return CheckResult.warn("Missing", "")
        directives = {d.strip().lower() for d in value.split(",")}
        if "no-store" in directives or "private" in directives:
            return CheckResult.ok(value, value)
        return CheckResult.warn(value, value)

"""
VulCheckerRegistry — Security header checks run against responses

Checks come from gulp.checks. Requests covered by an exclusion rule
are not checked at all.
"""

import logging
from typing import Dict, Mapping, Optional

from ..checks.base import CheckResult, SecurityCheck
from ..exclusion import ExclusionRuleManager
from .plugins import PluginRegistry

logger = logging.getLogger(__name__)


class VulCheckerRegistry(PluginRegistry[SecurityCheck]):
    """Security checks discovered in gulp.checks."""

    package = "gulp.checks"
    base = SecurityCheck

    def scan(self):
        first = not self.scanned
        plugins = super().scan()
        if first:
            logger.info("Loaded %d security check(s)", len(plugins))
        return plugins

    def evaluate(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        exclusions: Optional[ExclusionRuleManager] = None
    ) -> Dict[str, CheckResult]:
        """
        Run every check against one response.

        Args:
            method: Request method
            url: Request URL
            headers: Response headers (any case)
            exclusions: Rules that suppress checking (optional)

        Returns:
            Dict mapping check name -> result; empty if excluded
        """
        if exclusions is not None and exclusions.should_exclude(method, url):
            logger.debug("Skipping checks for excluded %s %s", method, url)
            return {}

        normalized = {name.lower(): value for name, value in headers.items()}
        return {check.name: check.check(normalized) for check in self.all()}

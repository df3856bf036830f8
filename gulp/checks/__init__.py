"""
Checks — Discovered by VulCheckerRegistry.scan(); add a module here to add checks.
"""

from .base import CheckResult, CheckStatus, SecurityCheck

__all__ = ['CheckResult', 'CheckStatus', 'SecurityCheck']

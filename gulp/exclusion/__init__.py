"""
Exclusion — Rules that suppress processing of matching traffic
"""

from .rule import ExclusionRule, ExclusionRuleType
from .manager import ExclusionRuleManager, RulesListener

__all__ = ['ExclusionRule', 'ExclusionRuleType', 'ExclusionRuleManager', 'RulesListener']

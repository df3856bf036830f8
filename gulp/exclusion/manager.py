"""
ExclusionRuleManager — Ordered, thread-safe rule store with change listeners

Many concurrent readers (should_exclude on every request), occasional
writers. Readers take a snapshot under the lock and match outside it.

Every mutation notifies each listener synchronously, on the mutating
caller's thread, with a copy of the rule list as it stood right after
the mutation. Notification happens before the mutating call returns.
Listeners run under the manager's reentrant lock: they may read the
manager, but a listener that blocks stalls every writer.

One instance is constructed at process start and passed to whoever
needs it.
"""

import threading
from typing import Callable, List, Optional

from .rule import ExclusionRule, ExclusionRuleType

RulesListener = Callable[[List[ExclusionRule]], None]


class ExclusionRuleManager:
    """Add/remove/update/get/clear/query surface over exclusion rules."""

    def __init__(self):
        self._rules: List[ExclusionRule] = []
        self._listeners: List[RulesListener] = []
        self._lock = threading.RLock()

    # =========================================================================
    # Mutations (each notifies listeners)
    # =========================================================================

    def add_rule(self, rule: ExclusionRule) -> ExclusionRule:
        """Append a rule. Returns the rule for convenience."""
        with self._lock:
            self._rules.append(rule)
            self._notify_listeners()
        return rule

    def remove_rule(self, rule_id: str) -> None:
        """
        Remove every rule with this id.

        Listeners are notified even when nothing matched.
        """
        with self._lock:
            self._rules = [r for r in self._rules if r.id != rule_id]
            self._notify_listeners()

    def update_rule(self, rule_id: str, new_type: ExclusionRuleType, new_pattern: str) -> bool:
        """
        Replace a rule in place, keeping its id and position.

        Returns:
            True if the rule existed. A missing id is a silent no-op
            (no error, no notification).
        """
        with self._lock:
            for index, rule in enumerate(self._rules):
                if rule.id == rule_id:
                    self._rules[index] = ExclusionRule(new_type, new_pattern, id=rule_id)
                    self._notify_listeners()
                    return True
        return False

    def clear_rules(self) -> None:
        with self._lock:
            self._rules = []
            self._notify_listeners()

    # =========================================================================
    # Queries
    # =========================================================================

    def get_rule(self, rule_id: str) -> Optional[ExclusionRule]:
        for rule in self.get_rules():
            if rule.id == rule_id:
                return rule
        return None

    def get_rules(self) -> List[ExclusionRule]:
        """Snapshot copy of the current rules, in insertion order."""
        with self._lock:
            return list(self._rules)

    def should_exclude(self, method: str, url: str) -> bool:
        """True iff any current rule matches. Stops at the first match."""
        return any(rule.matches(method, url) for rule in self.get_rules())

    def __len__(self) -> int:
        with self._lock:
            return len(self._rules)

    # =========================================================================
    # Listeners
    # =========================================================================

    def add_change_listener(self, listener: RulesListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_change_listener(self, listener: RulesListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _notify_listeners(self) -> None:
        """Deliver a fresh snapshot to every listener. Caller holds the lock."""
        for listener in list(self._listeners):
            listener(list(self._rules))

"""
SettingsIO — Apply a JSON settings document

Applied once by init_components() after every component is online,
which is what makes previously configured listeners active.

Document shape (every key optional):

    {
        "listenPorts": [{"port": 8080, "protocol": "http", "enabled": true,
                         "server": {"host": "example.com", "port": 80}}],
        "exclusionRules": [{"type": "host", "pattern": "cdn.example.com"}]
    }

Unknown top-level keys are ignored with a debug log line.
"""

import logging
from typing import Any, Dict, Optional

import orjson

from ..exclusion import ExclusionRule, ExclusionRuleManager, ExclusionRuleType
from .listen_ports import ListenPortManager

logger = logging.getLogger(__name__)

KNOWN_KEYS = ("listenPorts", "exclusionRules")


class SettingsIO:
    """Applies settings documents to the live components."""

    def __init__(
        self,
        listen_ports: Optional[ListenPortManager] = None,
        exclusions: Optional[ExclusionRuleManager] = None
    ):
        self._listen_ports = listen_ports
        self._exclusions = exclusions

    def set_options(self, json_text) -> Dict[str, int]:
        """
        Parse and apply a settings document.

        Args:
            json_text: JSON document (str or bytes)

        Returns:
            Count of applied entries per key

        Raises:
            ValueError: If the text is not a JSON object or an entry is malformed
        """
        try:
            options = orjson.loads(json_text)
        except orjson.JSONDecodeError as e:
            raise ValueError(f"Settings are not valid JSON: {e}") from e

        if not isinstance(options, dict):
            raise ValueError("Settings document must be a JSON object")

        for key in options:
            if key not in KNOWN_KEYS:
                logger.debug("Ignoring unknown settings key '%s'", key)

        applied = {
            "listenPorts": self._apply_listen_ports(options.get("listenPorts", [])),
            "exclusionRules": self._apply_exclusion_rules(options.get("exclusionRules", [])),
        }
        logger.info(
            "Applied settings: %d listen port(s), %d exclusion rule(s)",
            applied["listenPorts"], applied["exclusionRules"]
        )
        return applied

    def _apply_listen_ports(self, entries: Any) -> int:
        entries = _require_list("listenPorts", entries)
        if entries and self._listen_ports is None:
            raise ValueError("listenPorts given but no listen port manager is available")

        for entry in entries:
            self._listen_ports.apply(entry)
        return len(entries)

    def _apply_exclusion_rules(self, entries: Any) -> int:
        entries = _require_list("exclusionRules", entries)
        if entries and self._exclusions is None:
            raise ValueError("exclusionRules given but no exclusion manager is available")

        # Validate everything first so a bad entry adds nothing
        rules = []
        for entry in entries:
            if not isinstance(entry, dict) or "pattern" not in entry:
                raise ValueError(f"Invalid exclusion rule entry: {entry!r}")
            rule_type = ExclusionRuleType.from_name(str(entry.get("type", "")))
            kwargs = {"type": rule_type, "pattern": str(entry["pattern"])}
            if entry.get("id"):
                kwargs["id"] = str(entry["id"])
            rules.append(ExclusionRule(**kwargs))

        for rule in rules:
            self._exclusions.add_rule(rule)
        return len(rules)


def _require_list(key: str, value: Any) -> list:
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list")
    return value

"""Registry of built-in native rules.

Rules are loaded from a fixed registry, never through dynamic imports.
"""

from __future__ import annotations

from netaudit.models import Rule
from netaudit.rules.builtin import (
    arista,
    aruba,
    cisco,
    common,
    cumulus,
    fortinet,
    huawei,
    juniper,
    mikrotik,
    nokia,
    paloalto,
    vyos,
)

_RULE_MODULES = (
    common,
    cisco,
    juniper,
    huawei,
    nokia,
    aruba,
    cumulus,
    arista,
    vyos,
    paloalto,
    fortinet,
    mikrotik,
)


def default_rules() -> list[Rule]:
    """Every built-in rule: vendor-agnostic rules first, then per vendor."""
    rules: list[Rule] = []
    for module in _RULE_MODULES:
        rules.extend(module.RULES)
    return rules


def get_rule(rule_id: str) -> Rule | None:
    return next((rule for rule in default_rules() if rule.id == rule_id), None)

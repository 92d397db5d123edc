"""Built-in rules for MikroTik RouterOS."""

from __future__ import annotations

from netaudit.context import Context
from netaudit.models import ConfigNode, Level, Rule, RuleMetadata, RuleResult
from netaudit.rules.helpers.common import equals_ignore_case
from netaudit.rules.helpers.mikrotik import (
    get_add_commands,
    get_firewall_action,
    get_firewall_chain,
    is_disabled_resource,
)


def _is_input_drop(command: ConfigNode) -> bool:
    chain = get_firewall_chain(command)
    action = get_firewall_action(command)
    if chain is None or action is None or is_disabled_resource(command):
        return False
    return equals_ignore_case(chain, "input") and equals_ignore_case(action, "drop")


def _check_input_chain_drop(node: ConfigNode, context: Context) -> RuleResult:
    rule = INPUT_CHAIN_DROP
    if not any(_is_input_drop(command) for command in get_add_commands(node)):
        return rule.fail_result(
            node, "Firewall input chain has no default drop rule. This may leave the router exposed."
        )
    return rule.pass_result(node, "Firewall input chain has drop rule.")


INPUT_CHAIN_DROP = Rule(
    id="MIK-FW-001",
    selector="/ip firewall filter",
    vendor="mikrotik-routeros",
    category="Firewall",
    check=_check_input_chain_drop,
    metadata=RuleMetadata(
        level=Level.ERROR,
        obu="Security",
        owner="SecOps",
        description="The input chain must end in a drop rule.",
        remediation="Add drop rule for input chain: add chain=input action=drop",
    ),
)


RULES: list[Rule] = [INPUT_CHAIN_DROP]

"""Built-in rules for NVIDIA Cumulus Linux."""

from __future__ import annotations

from netaudit.context import Context
from netaudit.models import ConfigNode, Level, Rule, RuleMetadata, RuleResult
from netaudit.rules.helpers.cumulus import get_interface_name, has_description, is_switch_port


def _check_switch_port_alias(node: ConfigNode, context: Context) -> RuleResult:
    rule = SWITCH_PORT_DESCRIPTION
    name = get_interface_name(node)
    if not is_switch_port(name):
        return rule.not_applicable(node, "Not a switch port interface.")
    if not has_description(node):
        return rule.fail_result(node, f'Switch port "{name}" missing description (alias).')
    return rule.pass_result(node, f'Switch port "{name}" has description.')


SWITCH_PORT_DESCRIPTION = Rule(
    id="CUMULUS-IF-001",
    selector="iface",
    vendor="cumulus-linux",
    category="Documentation",
    check=_check_switch_port_alias,
    metadata=RuleMetadata(
        level=Level.WARNING,
        obu="Network Engineering",
        owner="NetOps",
        description="Switch ports must carry an alias.",
        remediation='Add "alias <description>" under the interface stanza.',
    ),
)


RULES: list[Rule] = [SWITCH_PORT_DESCRIPTION]

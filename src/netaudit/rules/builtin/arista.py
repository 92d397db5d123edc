"""Built-in rules for Arista EOS."""

from __future__ import annotations

from netaudit.context import Context
from netaudit.models import ConfigNode, Level, Rule, RuleMetadata, RuleResult
from netaudit.rules.helpers.arista import get_interface_description, is_ethernet_interface, is_shutdown


def _check_interface_description(node: ConfigNode, context: Context) -> RuleResult:
    rule = INTERFACE_DESCRIPTION_REQUIRED
    if not is_ethernet_interface(node):
        return rule.not_applicable(node, "Not an Ethernet interface.")
    if is_shutdown(node):
        return rule.not_applicable(node, "Interface is shutdown, description not required.")
    description = get_interface_description(node)
    if description is None:
        return rule.fail_result(node, "Active interface is missing description.")
    return rule.pass_result(node, f"Interface has description: {description}")


INTERFACE_DESCRIPTION_REQUIRED = Rule(
    id="ARI-INT-001",
    selector="interface",
    vendor="arista-eos",
    category="Documentation",
    check=_check_interface_description,
    metadata=RuleMetadata(
        level=Level.INFO,
        obu="Network Engineering",
        owner="NetOps",
        description="Active Ethernet interfaces should carry a description.",
        remediation="Add description to interface: description <text>",
    ),
)


RULES: list[Rule] = [INTERFACE_DESCRIPTION_REQUIRED]

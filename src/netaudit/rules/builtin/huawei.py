"""Built-in rules for Huawei VRP."""

from __future__ import annotations

from netaudit.context import Context
from netaudit.models import ConfigNode, Level, Rule, RuleMetadata, RuleResult
from netaudit.rules.helpers.huawei import has_description, is_enabled, is_physical_port


def _check_interface_description(node: ConfigNode, context: Context) -> RuleResult:
    rule = INTERFACE_DESCRIPTION_REQUIRED
    name = " ".join(node.params[1:])
    if not is_physical_port(name):
        return rule.not_applicable(node, "Non-physical interface, description optional.")
    if not is_enabled(node):
        return rule.not_applicable(node, "Interface is shutdown, description optional.")
    if not has_description(node):
        return rule.fail_result(node, f"Interface {name} is enabled but has no description.")
    return rule.pass_result(node, "Interface has a description.")


INTERFACE_DESCRIPTION_REQUIRED = Rule(
    id="HUAWEI-IF-001",
    selector="interface",
    vendor="huawei-vrp",
    category="Documentation",
    check=_check_interface_description,
    metadata=RuleMetadata(
        level=Level.WARNING,
        obu="Network Engineering",
        owner="NetOps",
        description="Enabled physical interfaces must carry a description.",
        remediation='Add a description to the interface using "description <text>" command.',
    ),
)


RULES: list[Rule] = [INTERFACE_DESCRIPTION_REQUIRED]

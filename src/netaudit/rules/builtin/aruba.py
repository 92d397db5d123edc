"""Built-in rules for Aruba AOS-CX."""

from __future__ import annotations

from netaudit.context import Context
from netaudit.models import ConfigNode, Level, Rule, RuleMetadata, RuleResult
from netaudit.rules.helpers.aruba import get_interface_name, has_description, is_lag, is_physical_port
from netaudit.rules.helpers.common import is_shutdown


def _check_interface_description(node: ConfigNode, context: Context) -> RuleResult:
    rule = INTERFACE_DESCRIPTION_REQUIRED
    name = get_interface_name(node)
    if name is None:
        return rule.not_applicable(node, "Not an interface.")
    if not is_physical_port(name) and not is_lag(name):
        return rule.not_applicable(node, "Not a physical interface.")
    if is_shutdown(node):
        return rule.not_applicable(node, "Interface is shutdown.")
    if not has_description(node):
        return rule.fail_result(node, f"Interface {name} missing description.")
    return rule.pass_result(node, "Interface has description.")


INTERFACE_DESCRIPTION_REQUIRED = Rule(
    id="ARUBA-IF-001",
    selector="interface",
    vendor="aruba-aoscx",
    category="Documentation",
    check=_check_interface_description,
    metadata=RuleMetadata(
        level=Level.WARNING,
        obu="Network Engineering",
        owner="NetOps",
        description="Physical interfaces and LAGs must carry a description.",
        remediation="Add a description to physical interfaces for documentation.",
    ),
)


RULES: list[Rule] = [INTERFACE_DESCRIPTION_REQUIRED]

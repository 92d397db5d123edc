"""Built-in rules for Nokia SR OS (MD-CLI)."""

from __future__ import annotations

from netaudit.context import Context
from netaudit.models import ConfigNode, Level, Rule, RuleMetadata, RuleResult
from netaudit.rules.helpers.nokia import get_system_name


def _check_system_name(node: ConfigNode, context: Context) -> RuleResult:
    rule = SYSTEM_NAME_REQUIRED
    name = get_system_name(node)
    if not name:
        return rule.fail_result(node, "System name is not configured.")
    return rule.pass_result(node, f"System name is configured: {name}")


SYSTEM_NAME_REQUIRED = Rule(
    id="NOKIA-SYS-001",
    selector="system",
    vendor="nokia-sros",
    category="Documentation",
    check=_check_system_name,
    metadata=RuleMetadata(
        level=Level.WARNING,
        obu="Network Engineering",
        owner="NetOps",
        description="The system name must be configured.",
        remediation='Configure system name using: system > name "<hostname>"',
    ),
)


RULES: list[Rule] = [SYSTEM_NAME_REQUIRED]

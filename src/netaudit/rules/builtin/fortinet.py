"""Built-in rules for Fortinet FortiGate."""

from __future__ import annotations

from netaudit.context import Context
from netaudit.models import ConfigNode, Level, Rule, RuleMetadata, RuleResult
from netaudit.rules.helpers.fortinet import get_edit_entries, get_edit_entry_name, has_telnet_access


def _check_no_telnet_access(node: ConfigNode, context: Context) -> RuleResult:
    rule = NO_TELNET_ACCESS
    issues = [
        f'Interface "{get_edit_entry_name(entry)}" allows Telnet access. Telnet is insecure and should be disabled.'
        for entry in get_edit_entries(node)
        if has_telnet_access(entry)
    ]
    if issues:
        return rule.fail_result(node, "\n".join(issues))
    return rule.pass_result(node, "No interfaces have Telnet access enabled.")


NO_TELNET_ACCESS = Rule(
    id="FGT-IF-001",
    selector="config system interface",
    vendor="fortinet-fortigate",
    category="Management Plane",
    check=_check_no_telnet_access,
    metadata=RuleMetadata(
        level=Level.ERROR,
        obu="Security",
        owner="SecOps",
        description="Telnet must not be allowed on any interface.",
        remediation='Remove "telnet" from allowaccess on all interfaces. Use SSH instead.',
    ),
)


RULES: list[Rule] = [NO_TELNET_ACCESS]

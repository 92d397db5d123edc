"""Built-in rules for Palo Alto PAN-OS."""

from __future__ import annotations

from netaudit.context import Context
from netaudit.models import ConfigNode, Level, Rule, RuleMetadata, RuleResult
from netaudit.rules.helpers.paloalto import get_security_rules, has_log_end, is_rule_disabled


def _check_security_rule_logging(node: ConfigNode, context: Context) -> RuleResult:
    rule = SECURITY_RULE_LOGGING
    security_rules = get_security_rules(node)
    if not security_rules:
        return rule.pass_result(node, "No security rules configured.")

    issues = [
        f'Rule "{security_rule.id}" does not have log-end enabled.'
        for security_rule in security_rules
        if not is_rule_disabled(security_rule) and not has_log_end(security_rule)
    ]
    if issues:
        return rule.fail_result(node, "\n".join(issues))
    return rule.pass_result(node, "All security rules have logging enabled.")


SECURITY_RULE_LOGGING = Rule(
    id="PAN-SEC-001",
    selector="rulebase",
    vendor="paloalto-panos",
    category="Logging",
    check=_check_security_rule_logging,
    metadata=RuleMetadata(
        level=Level.WARNING,
        obu="Security",
        owner="SecOps",
        description="Enabled security rules must log at session end.",
        remediation="Enable log-end (and optionally log-start) on all security rules.",
    ),
)


RULES: list[Rule] = [SECURITY_RULE_LOGGING]

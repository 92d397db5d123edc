"""Built-in rules for VyOS/EdgeOS."""

from __future__ import annotations

from netaudit.context import Context
from netaudit.models import ConfigNode, Level, Rule, RuleMetadata, RuleResult
from netaudit.rules.helpers.vyos import find_stanzas_by_prefix, get_firewall_default_action


def _check_firewall_default_action(node: ConfigNode, context: Context) -> RuleResult:
    rule = FIREWALL_DEFAULT_ACTION
    if not node.is_section:
        return rule.not_applicable(node, "Not a firewall stanza.")

    rulesets = [ruleset for ruleset in find_stanzas_by_prefix(node, "name ") if ruleset.is_section]
    if not rulesets:
        return rule.pass_result(node, "No firewall rulesets configured.")

    issues = [
        f'Firewall ruleset "{" ".join(ruleset.params[1:])}" has no default-action configured.'
        for ruleset in rulesets
        if get_firewall_default_action(ruleset) is None
    ]
    if issues:
        return rule.fail_result(node, "\n".join(issues))
    return rule.pass_result(node, "All firewall rulesets have default actions configured.")


FIREWALL_DEFAULT_ACTION = Rule(
    id="VYOS-FW-001",
    selector="firewall",
    vendor="vyos",
    category="Firewall",
    check=_check_firewall_default_action,
    metadata=RuleMetadata(
        level=Level.WARNING,
        obu="Security",
        owner="SecOps",
        description="Every firewall ruleset must declare a default action.",
        remediation='Set "default-action drop" or "default-action reject" for each firewall ruleset.',
    ),
)


RULES: list[Rule] = [FIREWALL_DEFAULT_ACTION]

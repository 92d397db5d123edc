"""Built-in rules for Juniper JunOS."""

from __future__ import annotations

from netaudit.context import Context
from netaudit.models import ConfigNode, Level, Rule, RuleMetadata, RuleResult
from netaudit.rules.helpers.common import has_child_command
from netaudit.rules.helpers.juniper import find_stanza


def _check_root_authentication(node: ConfigNode, context: Context) -> RuleResult:
    rule = ROOT_AUTH_REQUIRED
    if not node.is_section:
        return rule.not_applicable(node, "Not a system stanza.")

    root_auth = find_stanza(node, "root-authentication")
    if root_auth is None:
        return rule.fail_result(node, "System missing root-authentication configuration.")

    has_password = has_child_command(root_auth, "encrypted-password")
    has_ssh_key = has_child_command(root_auth, "ssh-rsa") or has_child_command(root_auth, "ssh-ecdsa")
    if not has_password and not has_ssh_key:
        return rule.fail_result(node, "Root authentication has no password or SSH key configured.")
    return rule.pass_result(node, "Root authentication is properly configured.")


ROOT_AUTH_REQUIRED = Rule(
    id="JUN-SYS-001",
    selector="system",
    vendor="juniper-junos",
    category="Authentication",
    check=_check_root_authentication,
    metadata=RuleMetadata(
        level=Level.ERROR,
        obu="Security",
        owner="SecOps",
        description="Root authentication must be configured.",
        remediation='Configure "root-authentication" under system stanza with encrypted-password or ssh-rsa.',
    ),
)


RULES: list[Rule] = [ROOT_AUTH_REQUIRED]

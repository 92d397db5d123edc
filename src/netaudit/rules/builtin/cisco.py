"""Built-in rules for Cisco IOS/IOS-XE."""

from __future__ import annotations

from netaudit.context import Context
from netaudit.models import ConfigNode, Level, Rule, RuleMetadata, RuleResult
from netaudit.rules.helpers.cisco import has_vty_access_class, is_physical_port, is_shutdown, is_trunk_port
from netaudit.rules.helpers.common import (
    get_child_command,
    includes_ignore_case,
    num_to_ip,
    parse_ip,
    starts_with_ignore_case,
)

_ALL_ONES = 0xFFFFFFFF


# --- Routing ---


def _check_ospf_networks(node: ConfigNode, context: Context) -> RuleResult:
    """Every OSPF `network` statement must cover a configured interface address.

    A 0.0.0.0 wildcard must name an interface address exactly; a wider
    wildcard must cover at least one interface address once the wildcard
    bits are masked off both sides.
    """
    rule = OSPF_NETWORK_MATCHES_INTERFACE
    statements = [child for child in node.children if starts_with_ignore_case(child.id, "network")]
    if not statements:
        return rule.not_applicable(node, "No network statements found in OSPF configuration.")

    interface_ips = set(context.interface_addresses())
    issues: list[str] = []

    for statement in statements:
        line = statement.loc.start_line
        if len(statement.params) < 3:
            issues.append(f'Line {line}: Incomplete network statement "{statement.id}".')
            continue

        network_text, wildcard_text = statement.params[1], statement.params[2]
        network = parse_ip(network_text)
        wildcard = parse_ip(wildcard_text)
        if network is None:
            issues.append(f'Line {line}: Invalid IP address "{network_text}".')
            continue
        if wildcard is None:
            issues.append(f'Line {line}: Invalid wildcard mask "{wildcard_text}".')
            continue
        if not interface_ips:
            continue

        if wildcard == 0:
            if network not in interface_ips:
                issues.append(
                    f'Line {line}: Network IP "{network_text}" does not match any configured interface IP address.'
                )
            continue

        care_bits = ~wildcard & _ALL_ONES
        base = network & care_bits
        if not any((address & care_bits) == base for address in interface_ips):
            issues.append(
                f'Line {line}: Network "{network_text} {wildcard_text}" '
                f"({num_to_ip(base)}) does not match any configured interface subnet."
            )

    if issues:
        return rule.fail_result(node, "OSPF network statement issues:\n" + "\n".join(issues))
    return rule.pass_result(node, "OSPF network statements match configured interfaces.")


OSPF_NETWORK_MATCHES_INTERFACE = Rule(
    id="NET-OSPF-001",
    selector="router ospf",
    vendor="cisco-ios",
    category="Routing",
    check=_check_ospf_networks,
    metadata=RuleMetadata(
        level=Level.WARNING,
        obu="Network Engineering",
        owner="NetOps",
        description="OSPF network statements must match configured interface addresses.",
        remediation=(
            'Use specific interface IP addresses with 0.0.0.0 wildcard mask (e.g., "network 10.0.0.1 0.0.0.0 area 0").'
        ),
    ),
)


# --- Layer 2 ---


def _check_trunk_allowed_vlans(node: ConfigNode, context: Context) -> RuleResult:
    rule = TRUNK_ALLOWED_VLANS
    if not is_physical_port(node.id) or is_shutdown(node):
        return rule.not_applicable(node, "Not applicable.")
    if not is_trunk_port(node):
        return rule.not_applicable(node, "Not a trunk port.")

    name = " ".join(node.params[1:])
    allowed = get_child_command(node, "switchport trunk allowed vlan")
    if allowed is None:
        return rule.fail_result(
            node, f'Trunk port "{name}" allows all VLANs (default). Restrict with explicit VLAN list.'
        )
    if includes_ignore_case(allowed.id, "allowed vlan all"):
        return rule.fail_result(
            node, f'Trunk port "{name}" explicitly allows all VLANs. Restrict to required VLANs only.'
        )
    return rule.pass_result(node, "Trunk has explicit allowed VLAN list.")


TRUNK_ALLOWED_VLANS = Rule(
    id="NET-TRUNK-001",
    selector="interface",
    vendor="cisco-ios",
    category="Network-Segmentation",
    check=_check_trunk_allowed_vlans,
    metadata=RuleMetadata(
        level=Level.WARNING,
        obu="Network Engineering",
        owner="NetOps",
        description="Trunk ports must restrict the allowed VLAN list.",
        remediation='Configure "switchport trunk allowed vlan <list>" to restrict VLANs on trunk.',
    ),
)


# --- Management plane ---


def _check_enable_password(node: ConfigNode, context: Context) -> RuleResult:
    rule = NO_ENABLE_PASSWORD
    if starts_with_ignore_case(node.id, "enable password"):
        if len(node.params) > 2 and node.params[2] == "7":
            return rule.fail_result(
                node, 'Enable password uses weak type 7 encryption. Use "enable secret" with strong algorithm.'
            )
        return rule.fail_result(node, 'Enable password is configured. Use "enable secret" instead.')
    if starts_with_ignore_case(node.id, "enable secret") or starts_with_ignore_case(node.id, "enable algorithm-type"):
        return rule.pass_result(node, "Enable secret is used.")
    return rule.not_applicable(node, "Not an enable credential.")


NO_ENABLE_PASSWORD = Rule(
    id="NET-SEC-001",
    selector="enable",
    vendor="cisco-ios",
    category="Authentication",
    check=_check_enable_password,
    metadata=RuleMetadata(
        level=Level.ERROR,
        obu="Security",
        owner="SecOps",
        description="The privileged-mode credential must not use `enable password`.",
        remediation='Use "enable algorithm-type scrypt secret <password>" for strong encryption.',
    ),
)


def _check_vty_access_class(node: ConfigNode, context: Context) -> RuleResult:
    rule = VTY_ACCESS_CLASS
    if not has_vty_access_class(node):
        return rule.fail_result(node, f'"{node.id}" has no access-class restricting management sources.')
    return rule.pass_result(node, "VTY lines are restricted by an access-class.")


VTY_ACCESS_CLASS = Rule(
    id="NET-MGMT-001",
    selector="line vty",
    vendor="cisco-ios",
    category="Session-Management",
    check=_check_vty_access_class,
    metadata=RuleMetadata(
        level=Level.ERROR,
        obu="Security",
        owner="SecOps",
        description="VTY lines must be restricted with an access-class.",
        remediation='Configure "access-class <acl> in" under every "line vty" range.',
    ),
)


RULES: list[Rule] = [
    OSPF_NETWORK_MATCHES_INTERFACE,
    TRUNK_ALLOWED_VLANS,
    NO_ENABLE_PASSWORD,
    VTY_ACCESS_CLASS,
]

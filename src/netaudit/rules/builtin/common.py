"""Vendor-agnostic built-in rules."""

from __future__ import annotations

from netaudit.context import Context
from netaudit.models import ConfigNode, Level, Rule, RuleMetadata, RuleResult
from netaudit.rules.helpers.common import (
    includes_ignore_case,
    is_broadcast_address,
    is_interface_definition,
    is_multicast_address,
    is_shutdown,
    parse_ip,
    starts_with_ignore_case,
)

# `ip address dhcp`, `ip address negotiated`, ...
_DYNAMIC_KEYWORDS = ("dhcp", "negotiated", "ppp-negotiated", "pool", "auto")
_HOST_MASK = 0xFFFFFFFF


def _check_unicast_address(node: ConfigNode, context: Context) -> RuleResult:
    """Reject multicast, broadcast, network-id and subnet-broadcast assignments."""
    rule = NO_MULTICAST_BROADCAST_IP
    if len(node.params) < 3:
        return rule.not_applicable(node, "Incomplete ip address command.")

    ip_text = node.params[2]
    mask_text = node.params[3] if len(node.params) > 3 else None

    if ip_text.lower().startswith(_DYNAMIC_KEYWORDS):
        return rule.not_applicable(node, f"Dynamic IP assignment ({ip_text}) - validation skipped.")

    address = parse_ip(ip_text.split("/")[0])
    if address is None:
        return rule.fail_result(node, f"Invalid IP address format: {ip_text}")
    if is_multicast_address(address):
        return rule.fail_result(node, f"Invalid assignment: {ip_text} is a Multicast address.")
    if is_broadcast_address(address):
        return rule.fail_result(node, f"Invalid assignment: {ip_text} is the Global Broadcast address.")

    mask = parse_ip(mask_text) if mask_text else None
    if mask is not None:
        if mask == _HOST_MASK:
            return rule.pass_result(node, f"IP address {ip_text} with /32 mask is valid (host route/loopback).")
        network = address & mask
        broadcast = network | (~mask & _HOST_MASK)
        if address == network:
            return rule.fail_result(node, f"Invalid assignment: {ip_text} is the Network ID for subnet {mask_text}.")
        if address == broadcast:
            return rule.fail_result(
                node, f"Invalid assignment: {ip_text} is the Broadcast address for subnet {mask_text}."
            )

    return rule.pass_result(node, f"IP address {ip_text} is valid.")


NO_MULTICAST_BROADCAST_IP = Rule(
    id="NET-IP-001",
    selector="ip address",
    check=_check_unicast_address,
    category="IP-Addressing",
    metadata=RuleMetadata(
        level=Level.ERROR,
        obu="Network Engineering",
        owner="NetOps",
        description="Interface addresses must be unicast host addresses.",
        remediation=(
            "Configure a valid unicast IP address. Do not use Multicast, Broadcast, or Network ID addresses."
        ),
    ),
)


def _check_interface_description(node: ConfigNode, context: Context) -> RuleResult:
    rule = INTERFACE_DESCRIPTION_REQUIRED
    if not is_interface_definition(node):
        return rule.not_applicable(node, "Not an interface definition.")
    if is_shutdown(node):
        return rule.not_applicable(node, "Shutdown interface - description not required.")
    if any(includes_ignore_case(node.id, name) for name in ("null", "loopback", "lo0")):
        return rule.not_applicable(node, "Loopback/Null interface - description optional.")

    if not any(starts_with_ignore_case(child.id, "description") for child in node.children):
        name = " ".join(node.params[1:])
        return rule.fail_result(node, f'Interface "{name}" is missing a description.')
    return rule.pass_result(node, "Interface has a description.")


INTERFACE_DESCRIPTION_REQUIRED = Rule(
    id="NET-DOC-001",
    selector="interface",
    check=_check_interface_description,
    category="Documentation",
    metadata=RuleMetadata(
        level=Level.WARNING,
        obu="Network Engineering",
        owner="NetOps",
        description="Active interfaces must carry a description.",
        remediation='Add a description to the interface using the "description" command.',
    ),
)


RULES: list[Rule] = [NO_MULTICAST_BROADCAST_IP, INTERFACE_DESCRIPTION_REQUIRED]

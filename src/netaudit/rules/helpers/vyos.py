"""VyOS/EdgeOS helper functions.

Interface helpers take the interface stanza (`ethernet eth0 { ... }`).
Name predicates take the interface name, with or without its type
keyword (`ethernet eth0` or `eth0`).
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from netaudit.models import ConfigNode
from netaudit.rules.helpers.common import (
    equals_ignore_case,
    get_child_command,
    has_child_command,
    includes_ignore_case,
    parse_integer,
    parse_ip,
    prefix_to_mask,
    starts_with_ignore_case,
)

_PHYSICAL = re.compile(r"^(ethernet\s+)?eth\d+$", re.IGNORECASE)
_LOOPBACK = re.compile(r"^lo$", re.IGNORECASE)
_BOND = re.compile(r"^bond\d+$", re.IGNORECASE)
_BRIDGE = re.compile(r"^br\d+$", re.IGNORECASE)
_WIREGUARD = re.compile(r"^wg\d+$", re.IGNORECASE)
_TUNNEL = re.compile(r"^(tun|vti|vxlan)\d+$", re.IGNORECASE)
_ACTIONS = ("drop", "accept", "reject")


def _last_word(name: str) -> str:
    return name.split()[-1] if name.split() else name


def is_disabled(node: ConfigNode) -> bool:
    return any(equals_ignore_case(child.id.strip(), "disable") for child in node.children)


def is_physical_port(interface_name: str) -> bool:
    return _PHYSICAL.match(interface_name.strip()) is not None


def _named(interface_name: str, keyword: str, pattern: re.Pattern[str]) -> bool:
    """Type keyword anywhere in the name, or a short form such as `bond0`."""
    return includes_ignore_case(interface_name, keyword) or pattern.match(_last_word(interface_name)) is not None


def is_loopback(interface_name: str) -> bool:
    return _named(interface_name, "loopback", _LOOPBACK)


def is_bonding_interface(interface_name: str) -> bool:
    return _named(interface_name, "bonding", _BOND)


def is_bridge_interface(interface_name: str) -> bool:
    return _named(interface_name, "bridge", _BRIDGE)


def is_wireguard_interface(interface_name: str) -> bool:
    return _named(interface_name, "wireguard", _WIREGUARD)


def is_tunnel_interface(interface_name: str) -> bool:
    if any(includes_ignore_case(interface_name, keyword) for keyword in ("tunnel", "vti", "vxlan")):
        return True
    return _TUNNEL.match(_last_word(interface_name)) is not None


def parse_address(address: str) -> tuple[int, int, int] | None:
    """Parse `10.0.0.1/24` into (ip, prefix, mask); None if malformed or dhcp."""
    ip_part, sep, prefix_part = address.strip("\"'").partition("/")
    if not sep:
        return None
    ip = parse_ip(ip_part)
    prefix = parse_integer(prefix_part)
    if ip is None or prefix is None or not 0 <= prefix <= 32:
        return None
    return (ip, prefix, prefix_to_mask(prefix))


def find_stanza(node: ConfigNode, name: str) -> ConfigNode | None:
    for child in node.children:
        if equals_ignore_case(child.id, name):
            return child
    return None


def find_stanzas_by_prefix(node: ConfigNode, prefix: str) -> list[ConfigNode]:
    return [child for child in node.children if starts_with_ignore_case(child.id, prefix)]


def get_ethernet_interfaces(interfaces: ConfigNode) -> list[ConfigNode]:
    return find_stanzas_by_prefix(interfaces, "ethernet eth")


def get_vif_interfaces(interface: ConfigNode) -> list[ConfigNode]:
    return find_stanzas_by_prefix(interface, "vif")


def _action(node: ConfigNode, keyword: str) -> str | None:
    child = get_child_command(node, keyword)
    if child is None:
        return None
    for action in _ACTIONS:
        if includes_ignore_case(child.id, action):
            return action
    return None


def get_firewall_default_action(ruleset: ConfigNode) -> str | None:
    return _action(ruleset, "default-action")


def get_firewall_rules(ruleset: ConfigNode) -> list[ConfigNode]:
    return find_stanzas_by_prefix(ruleset, "rule")


def get_firewall_rule_action(rule: ConfigNode) -> str | None:
    return _action(rule, "action")


def has_nat_translation(rule: ConfigNode) -> bool:
    return has_child_command(rule, "translation")


def has_ssh_service(service: ConfigNode) -> bool:
    return has_child_command(service, "ssh")


def has_dhcp_server(service: ConfigNode) -> bool:
    return has_child_command(service, "dhcp-server")


def has_ntp_config(system: ConfigNode) -> bool:
    return has_child_command(system, "ntp")


def has_syslog_config(system: ConfigNode) -> bool:
    return has_child_command(system, "syslog")


HELPERS: dict[str, Callable[..., Any]] = {
    "isDisabled": is_disabled,
    "isPhysicalPort": is_physical_port,
    "isLoopback": is_loopback,
    "isBondingInterface": is_bonding_interface,
    "isBridgeInterface": is_bridge_interface,
    "isWireGuardInterface": is_wireguard_interface,
    "isTunnelInterface": is_tunnel_interface,
    "parseAddress": parse_address,
    "findStanza": find_stanza,
    "findStanzasByPrefix": find_stanzas_by_prefix,
    "getEthernetInterfaces": get_ethernet_interfaces,
    "getVifInterfaces": get_vif_interfaces,
    "getFirewallDefaultAction": get_firewall_default_action,
    "getFirewallRules": get_firewall_rules,
    "getFirewallRuleAction": get_firewall_rule_action,
    "hasNatTranslation": has_nat_translation,
    "hasSshService": has_ssh_service,
    "hasDhcpServer": has_dhcp_server,
    "hasNtpConfig": has_ntp_config,
    "hasSyslogConfig": has_syslog_config,
}

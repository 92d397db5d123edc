"""Cisco IOS/IOS-XE/NX-OS helper functions.

Interface helpers take the `interface ...` section node; global helpers
take the top-level statement they inspect.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from netaudit.models import ConfigNode
from netaudit.rules.helpers.common import (
    equals_ignore_case,
    get_child_command,
    has_child_command,
    includes_ignore_case,
    parse_integer,
    starts_with_ignore_case,
)

_VIRTUAL_INTERFACE_KEYWORDS = ("loopback", "null", "vlan", "tunnel", "port-channel", "bvi", "nve")
_TRUNK_DESCRIPTION_KEYWORDS = ("uplink", "downlink", "isl", "trunk", "po-member")
_EXTERNAL_DESCRIPTION_KEYWORDS = ("wan:", "external", "internet", "isp", "dmz", "perimeter")
_DEFAULT_SNMP_COMMUNITIES = frozenset(
    {"public", "private", "community", "snmp", "admin", "cisco", "secret", "test", "default"}
)
_DANGEROUS_SERVICES = (
    "ip http server",
    "service tcp-small-servers",
    "service udp-small-servers",
    "service finger",
    "ip bootp server",
    "service pad",
)


def _description(node: ConfigNode) -> str | None:
    child = get_child_command(node, "description")
    return child.raw_text if child is not None else None


def is_shutdown(node: ConfigNode) -> bool:
    return any(equals_ignore_case(child.id.strip(), "shutdown") for child in node.children)


def is_physical_port(interface_name: str) -> bool:
    """False for Loopback, Vlan, Tunnel, Port-channel and other virtual interfaces."""
    return not any(includes_ignore_case(interface_name, keyword) for keyword in _VIRTUAL_INTERFACE_KEYWORDS)


def is_trunk_port(node: ConfigNode) -> bool:
    return has_child_command(node, "switchport mode trunk")


def is_access_port(node: ConfigNode) -> bool:
    return has_child_command(node, "switchport mode access")


def is_likely_trunk(node: ConfigNode) -> bool:
    """Trunk by description keywords, falling back to `switchport mode trunk`."""
    description = _description(node)
    if description is not None:
        return any(includes_ignore_case(description, keyword) for keyword in _TRUNK_DESCRIPTION_KEYWORDS)
    return is_trunk_port(node)


def is_external_facing(node: ConfigNode) -> bool:
    description = _description(node)
    if description is None:
        return False
    return any(includes_ignore_case(description, keyword) for keyword in _EXTERNAL_DESCRIPTION_KEYWORDS)


def is_loopback_interface(node: ConfigNode) -> bool:
    return starts_with_ignore_case(node.id, "interface loopback")


def is_tunnel_interface(node: ConfigNode) -> bool:
    return starts_with_ignore_case(node.id, "interface tunnel")


def is_vlan_interface(node: ConfigNode) -> bool:
    return starts_with_ignore_case(node.id, "interface vlan")


def is_aaa_new_model(node: ConfigNode) -> bool:
    return equals_ignore_case(node.id.strip(), "aaa new-model")


def has_weak_username_password(node: ConfigNode) -> bool:
    """`username x password ...` without a sha256/scrypt algorithm-type."""
    text = node.raw_text
    if not includes_ignore_case(text, " password "):
        return False
    return not (
        includes_ignore_case(text, "algorithm-type sha256")
        or includes_ignore_case(text, "algorithm-type scrypt")
    )


def get_ssh_version(node: ConfigNode) -> int | None:
    if not includes_ignore_case(node.raw_text, "ip ssh version"):
        return None
    for param in node.params:
        if param in ("1", "2"):
            return parse_integer(param)
    return None


def is_default_snmp_community(community: str) -> bool:
    return community.lower() in _DEFAULT_SNMP_COMMUNITIES


def get_vty_line_range(node: ConfigNode) -> tuple[int, int] | None:
    """(first, last) line numbers of `line vty 0 15`, or (n, n) for `line vty n`."""
    if len(node.params) < 3:
        return None
    start = parse_integer(node.params[2])
    if start is None:
        return None
    end = parse_integer(node.params[3]) if len(node.params) >= 4 else start
    return (start, end if end is not None else start)


def has_vty_access_class(node: ConfigNode) -> bool:
    return has_child_command(node, "access-class")


def has_ospf_authentication(node: ConfigNode) -> bool:
    return has_child_command(node, "ip ospf authentication") or has_child_command(node, "ip ospf message-digest-key")


def has_no_proxy_arp(node: ConfigNode) -> bool:
    return has_child_command(node, "no ip proxy-arp")


def has_no_ip_redirects(node: ConfigNode) -> bool:
    return has_child_command(node, "no ip redirects")


def is_dangerous_service(node: ConfigNode) -> bool:
    return any(equals_ignore_case(node.id, service) for service in _DANGEROUS_SERVICES)


HELPERS: dict[str, Callable[..., Any]] = {
    "isShutdown": is_shutdown,
    "isPhysicalPort": is_physical_port,
    "isTrunkPort": is_trunk_port,
    "isAccessPort": is_access_port,
    "isLikelyTrunk": is_likely_trunk,
    "isExternalFacing": is_external_facing,
    "isLoopbackInterface": is_loopback_interface,
    "isTunnelInterface": is_tunnel_interface,
    "isVlanInterface": is_vlan_interface,
    "isAaaNewModel": is_aaa_new_model,
    "hasWeakUsernamePassword": has_weak_username_password,
    "getSshVersion": get_ssh_version,
    "isDefaultSnmpCommunity": is_default_snmp_community,
    "getVtyLineRange": get_vty_line_range,
    "hasVtyAccessClass": has_vty_access_class,
    "hasOspfAuthentication": has_ospf_authentication,
    "hasNoProxyArp": has_no_proxy_arp,
    "hasNoIpRedirects": has_no_ip_redirects,
    "isDangerousService": is_dangerous_service,
}

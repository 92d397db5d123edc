"""Vendor-agnostic helper functions for rule checks.

Helpers are pure: they read a ConfigNode (or plain strings/integers) and
return a value. IPv4 addresses are handled as 32-bit unsigned integers so
that masks and wildcards can be applied with plain bit operations.

HELPERS maps the camelCase names used by JSON rules to the functions.
"""

from __future__ import annotations

import ipaddress
from collections.abc import Callable
from typing import Any

from netaudit.models import ConfigNode, NodeType

_PRIVATE_NETWORKS = [
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
]
_MULTICAST_NETWORK = ipaddress.ip_network("224.0.0.0/4")
_BROADCAST = 0xFFFFFFFF

# Interface names that are references, not definitions (LLDP/CDP "interface all")
_GENERIC_INTERFACE_NAMES = frozenset({"all", "default"})
# Routing-protocol options that mark an interface reference inside a protocol block
_REFERENCE_OPTIONS = (
    "passive",
    "interface-type",
    "metric",
    "hello-interval",
    "dead-interval",
    "priority",
    "authentication",
    "bfd-liveness",
)


# --- Strings ---


def equals_ignore_case(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def includes_ignore_case(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


def starts_with_ignore_case(text: str, prefix: str) -> bool:
    return text.lower().startswith(prefix.lower())


def parse_integer(value: str) -> int | None:
    try:
        return int(str(value).strip(), 10)
    except ValueError:
        return None


# --- IPv4 ---


def parse_ip(address: str) -> int | None:
    """Parse a dotted-quad IPv4 address into an integer, or None if invalid."""
    try:
        return int(ipaddress.IPv4Address(str(address).strip()))
    except ValueError:
        return None


def num_to_ip(number: int) -> str:
    return str(ipaddress.IPv4Address(number & _BROADCAST))


def prefix_to_mask(prefix: int) -> int:
    """CIDR prefix length to netmask integer. Out-of-range prefixes give 0."""
    if prefix < 0 or prefix > 32:
        return 0
    return (_BROADCAST << (32 - prefix)) & _BROADCAST


def mask_to_prefix(mask: int) -> int:
    """Count of leading one bits in a netmask."""
    count = 0
    while count < 32 and mask & (0x80000000 >> count):
        count += 1
    return count


def is_valid_ip_address(value: str) -> bool:
    return parse_ip(value) is not None


def is_multicast_address(address: int) -> bool:
    return ipaddress.IPv4Address(address) in _MULTICAST_NETWORK


def is_broadcast_address(address: int) -> bool:
    return address == _BROADCAST


def is_private_address(address: int) -> bool:
    """RFC 1918 ranges only."""
    ip = ipaddress.IPv4Address(address)
    return any(ip in network for network in _PRIVATE_NETWORKS)


def is_ip_in_network(address: int, network: int, mask: int) -> bool:
    return (address & mask) == (network & mask)


def is_ip_in_cidr(address: str, cidr: str) -> bool:
    """True if a dotted-quad address lies inside an `a.b.c.d/len` block."""
    try:
        return ipaddress.IPv4Address(address.strip()) in ipaddress.IPv4Network(cidr.strip(), strict=False)
    except ValueError:
        return False


# --- Numbers ---


def parse_port(value: str) -> int | None:
    port = parse_integer(value)
    if port is None or port < 1 or port > 65535:
        return None
    return port


def parse_port_range(value: str) -> list[int]:
    """Expand `1-24,80,443` into individual port numbers; bad parts are skipped."""
    ports: list[int] = []
    for part in value.split(","):
        part = part.strip()
        if "-" in part:
            start, _, end = part.partition("-")
            first, last = parse_integer(start), parse_integer(end)
            if first is not None and last is not None:
                ports.extend(range(first, last + 1))
        else:
            number = parse_integer(part)
            if number is not None:
                ports.append(number)
    return ports


def parse_vlan_id(value: str) -> int | None:
    vlan = parse_integer(value)
    if vlan is None or vlan < 1 or vlan > 4094:
        return None
    return vlan


def is_default_vlan(value: str | int) -> bool:
    vlan = parse_integer(value) if isinstance(value, str) else value
    return vlan == 1


def is_reserved_vlan(vlan: int) -> bool:
    """Cisco reserved/extended-system range 1002-1005."""
    return 1002 <= vlan <= 1005


# --- Nodes ---


def has_child_command(node: ConfigNode, prefix: str) -> bool:
    """True if some direct child's id starts with prefix, ignoring case."""
    return get_child_command(node, prefix) is not None


def get_child_command(node: ConfigNode, prefix: str) -> ConfigNode | None:
    if not prefix:
        return None
    for child in node.children:
        if starts_with_ignore_case(child.id, prefix):
            return child
    return None


def get_child_commands(node: ConfigNode, prefix: str) -> list[ConfigNode]:
    if not prefix:
        return []
    return [child for child in node.children if starts_with_ignore_case(child.id, prefix)]


def get_param_value(node: ConfigNode, keyword: str) -> str | None:
    """Value following keyword in node.params, e.g. `mtu` in `mtu 9000`."""
    lowered = [param.lower() for param in node.params]
    try:
        index = lowered.index(keyword.lower())
    except ValueError:
        return None
    if index + 1 < len(node.params):
        return node.params[index + 1]
    return None


def is_shutdown(node: ConfigNode) -> bool:
    """Cisco-style `shutdown` or JunOS-style `disable` child."""
    return any(child.id.strip().lower() in ("shutdown", "disable") for child in node.children)


def is_interface_definition(node: ConfigNode) -> bool:
    """True for a real interface definition, not a reference to one.

    Interface references show up inside protocol blocks (`interface all`,
    or an OSPF `interface ge-0/0/0 { passive; }`) and must not be treated
    as interfaces in their own right.
    """
    if node.type is not NodeType.SECTION:
        return False
    node_id = node.id.lower()
    if not node_id.startswith("interface ") or node_id.startswith("interface-"):
        return False
    if node_id[len("interface "):].strip() in _GENERIC_INTERFACE_NAMES:
        return False
    if len(node.children) == 1:
        child_id = node.children[0].id.lower()
        if child_id.startswith(_REFERENCE_OPTIONS):
            return False
    return True


def is_feature_enabled(value: str | None) -> bool:
    return value is not None and value.lower() in ("enable", "enabled", "true", "yes", "on")


def is_feature_disabled(value: str | None) -> bool:
    return value is None or value.lower() in ("disable", "disabled", "false", "no", "off")


HELPERS: dict[str, Callable[..., Any]] = {
    "equalsIgnoreCase": equals_ignore_case,
    "includesIgnoreCase": includes_ignore_case,
    "startsWithIgnoreCase": starts_with_ignore_case,
    "parseInteger": parse_integer,
    "parseIp": parse_ip,
    "numToIp": num_to_ip,
    "prefixToMask": prefix_to_mask,
    "maskToPrefix": mask_to_prefix,
    "isValidIpAddress": is_valid_ip_address,
    "isMulticastAddress": is_multicast_address,
    "isBroadcastAddress": is_broadcast_address,
    "isPrivateAddress": is_private_address,
    "isIpInNetwork": is_ip_in_network,
    "isIpInCidr": is_ip_in_cidr,
    "parsePort": parse_port,
    "parsePortRange": parse_port_range,
    "parseVlanId": parse_vlan_id,
    "isDefaultVlan": is_default_vlan,
    "isReservedVlan": is_reserved_vlan,
    "hasChildCommand": has_child_command,
    "getChildCommand": get_child_command,
    "getChildCommands": get_child_commands,
    "getParamValue": get_param_value,
    "isShutdown": is_shutdown,
    "isInterfaceDefinition": is_interface_definition,
    "isFeatureEnabled": is_feature_enabled,
    "isFeatureDisabled": is_feature_disabled,
}

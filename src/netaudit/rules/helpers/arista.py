"""Arista EOS helper functions.

Interface helpers take the `interface ...` section node. EOS interface
names are matched on the full node id (`interface Ethernet1`).
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
    starts_with_ignore_case,
)

_ETHERNET = re.compile(r"^interface\s+Ethernet\d+", re.IGNORECASE)
_PORT_CHANNEL = re.compile(r"^interface\s+Port-Channel\d+", re.IGNORECASE)
_LOOPBACK = re.compile(r"^interface\s+Loopback\d+", re.IGNORECASE)
_SVI = re.compile(r"^interface\s+Vlan\d+", re.IGNORECASE)
_MANAGEMENT = re.compile(r"^interface\s+Management\d+", re.IGNORECASE)
_VXLAN = re.compile(r"^interface\s+Vxlan\d*", re.IGNORECASE)
_IP_ADDRESS = re.compile(r"^ip\s+address\s+\d+\.\d+\.\d+\.\d+", re.IGNORECASE)
_MLAG_ID = re.compile(r"^mlag\s+(\d+)", re.IGNORECASE)


def is_shutdown(node: ConfigNode) -> bool:
    """`shutdown` present and not overridden by `no shutdown`."""
    ids = [child.id.strip() for child in node.children]
    has_shutdown = any(equals_ignore_case(child_id, "shutdown") for child_id in ids)
    has_no_shutdown = any(equals_ignore_case(child_id, "no shutdown") for child_id in ids)
    return has_shutdown and not has_no_shutdown


def is_ethernet_interface(node: ConfigNode) -> bool:
    return _ETHERNET.match(node.id) is not None


def is_port_channel(node: ConfigNode) -> bool:
    return _PORT_CHANNEL.match(node.id) is not None


def is_loopback(node: ConfigNode) -> bool:
    return _LOOPBACK.match(node.id) is not None


def is_svi(node: ConfigNode) -> bool:
    return _SVI.match(node.id) is not None


def is_management_interface(node: ConfigNode) -> bool:
    return _MANAGEMENT.match(node.id) is not None


def is_vxlan_interface(node: ConfigNode) -> bool:
    return _VXLAN.match(node.id) is not None


def is_trunk_port(node: ConfigNode) -> bool:
    return has_child_command(node, "switchport mode trunk")


def is_access_port(node: ConfigNode) -> bool:
    return has_child_command(node, "switchport mode access")


def has_ip_address(node: ConfigNode) -> bool:
    return any(_IP_ADDRESS.match(child.id) for child in node.children)


def has_virtual_router_address(node: ConfigNode) -> bool:
    return has_child_command(node, "ip virtual-router address")


def get_interface_description(node: ConfigNode) -> str | None:
    child = get_child_command(node, "description")
    if child is None:
        return None
    _, _, text = child.id.partition(" ")
    return text.strip() or None


def get_interface_vrf(node: ConfigNode) -> str | None:
    child = get_child_command(node, "vrf")
    if child is None or len(child.params) < 2:
        return None
    return child.params[1]


def get_mlag_id(node: ConfigNode) -> str | None:
    for child in node.children:
        match = _MLAG_ID.match(child.id)
        if match:
            return match.group(1)
    return None


def is_mlag_peer_link(node: ConfigNode, mlag: ConfigNode | None = None) -> bool:
    """True if the interface is the peer link named in `mlag configuration`."""
    if mlag is None:
        return False
    peer_link = get_child_command(mlag, "peer-link")
    if peer_link is None or len(peer_link.params) < 2:
        return False
    return node.id.lower().endswith(peer_link.params[1].lower())


def has_vxlan_source_interface(node: ConfigNode) -> bool:
    return has_child_command(node, "vxlan source-interface")


def is_mlag_configuration(node: ConfigNode) -> bool:
    return starts_with_ignore_case(node.id, "mlag configuration")


HELPERS: dict[str, Callable[..., Any]] = {
    "isShutdown": is_shutdown,
    "isEthernetInterface": is_ethernet_interface,
    "isPortChannel": is_port_channel,
    "isLoopback": is_loopback,
    "isSvi": is_svi,
    "isManagementInterface": is_management_interface,
    "isVxlanInterface": is_vxlan_interface,
    "isTrunkPort": is_trunk_port,
    "isAccessPort": is_access_port,
    "hasIpAddress": has_ip_address,
    "hasVirtualRouterAddress": has_virtual_router_address,
    "getInterfaceDescription": get_interface_description,
    "getInterfaceVrf": get_interface_vrf,
    "getMlagId": get_mlag_id,
    "isMlagPeerLink": is_mlag_peer_link,
    "hasVxlanSourceInterface": has_vxlan_source_interface,
    "isMlagConfiguration": is_mlag_configuration,
}

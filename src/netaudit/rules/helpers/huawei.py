"""Huawei VRP helper functions.

VRP interfaces are shut down by default; `undo shutdown` enables them.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from netaudit.models import ConfigNode
from netaudit.rules.helpers.common import get_child_command, has_child_command

_VIRTUAL_INTERFACE_KEYWORDS = ("vlanif", "loopback", "null", "tunnel", "eth-trunk", "nve", "vbdif")
_DEFAULT_VLAN = re.compile(r"port\s+default\s+vlan\s+(\d+)", re.IGNORECASE)
_TRUNK_ALLOWED = re.compile(r"port\s+trunk\s+allow-pass\s+vlan\s+(.+)", re.IGNORECASE)


def _child_ids(node: ConfigNode) -> list[str]:
    return [child.id.strip().lower() for child in node.children]


def is_enabled(node: ConfigNode) -> bool:
    return "undo shutdown" in _child_ids(node)


def is_shutdown(node: ConfigNode) -> bool:
    """Explicit `shutdown`, or no `undo shutdown` at all."""
    return "shutdown" in _child_ids(node) or not is_enabled(node)


def is_physical_port(interface_name: str) -> bool:
    name = interface_name.lower()
    return not any(keyword in name for keyword in _VIRTUAL_INTERFACE_KEYWORDS)


def is_vlan_interface(interface_name: str) -> bool:
    return "vlanif" in interface_name.lower()


def is_loopback_interface(interface_name: str) -> bool:
    return "loopback" in interface_name.lower()


def is_eth_trunk(interface_name: str) -> bool:
    return "eth-trunk" in interface_name.lower()


def _has_link_type(node: ConfigNode, link_type: str) -> bool:
    return any(f"port link-type {link_type}" in child_id for child_id in _child_ids(node))


def is_trunk_port(node: ConfigNode) -> bool:
    return _has_link_type(node, "trunk")


def is_access_port(node: ConfigNode) -> bool:
    return _has_link_type(node, "access")


def is_hybrid_port(node: ConfigNode) -> bool:
    return _has_link_type(node, "hybrid")


def get_default_vlan(node: ConfigNode) -> str | None:
    for child in node.children:
        match = _DEFAULT_VLAN.match(child.id)
        if match:
            return match.group(1)
    return None


def get_trunk_allowed_vlans(node: ConfigNode) -> str | None:
    for child in node.children:
        match = _TRUNK_ALLOWED.match(child.id)
        if match:
            return match.group(1).strip()
    return None


def has_description(node: ConfigNode) -> bool:
    return has_child_command(node, "description")


def get_description(node: ConfigNode) -> str | None:
    child = get_child_command(node, "description")
    if child is None:
        return None
    _, _, text = child.id.partition(" ")
    return text.strip() or None


def has_stp_edged_port(node: ConfigNode) -> bool:
    return any("stp edged-port enable" in child_id for child_id in _child_ids(node))


def has_bpdu_protection(node: ConfigNode) -> bool:
    return any("bpdu-protection" in child_id for child_id in _child_ids(node))


HELPERS: dict[str, Callable[..., Any]] = {
    "isEnabled": is_enabled,
    "isShutdown": is_shutdown,
    "isPhysicalPort": is_physical_port,
    "isVlanInterface": is_vlan_interface,
    "isLoopbackInterface": is_loopback_interface,
    "isEthTrunk": is_eth_trunk,
    "isTrunkPort": is_trunk_port,
    "isAccessPort": is_access_port,
    "isHybridPort": is_hybrid_port,
    "getDefaultVlan": get_default_vlan,
    "getTrunkAllowedVlans": get_trunk_allowed_vlans,
    "hasDescription": has_description,
    "getDescription": get_description,
    "hasStpEdgedPort": has_stp_edged_port,
    "hasBpduProtection": has_bpdu_protection,
}

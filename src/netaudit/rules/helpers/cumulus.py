"""NVIDIA Cumulus Linux helper functions.

Covers ifupdown2 `iface`/`auto` stanzas as well as NCLU (`net add`) and
NVUE (`nv set`) command lines.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from netaudit.models import ConfigNode
from netaudit.rules.helpers.common import get_child_command, starts_with_ignore_case

_SWITCH_PORT = re.compile(r"swp\d+")
_BOND = re.compile(r"bond\d+")
_MTU = re.compile(r"^mtu\s+(\d+)$", re.IGNORECASE)


def _has_child_starting(node: ConfigNode, prefix: str) -> bool:
    return any(starts_with_ignore_case(child.id, prefix) for child in node.children)


def is_nclu_command(node: ConfigNode) -> bool:
    return starts_with_ignore_case(node.id, "net ")


def is_nvue_command(node: ConfigNode) -> bool:
    return starts_with_ignore_case(node.id, "nv ")


def is_iface_stanza(node: ConfigNode) -> bool:
    return starts_with_ignore_case(node.id, "iface ")


def is_auto_stanza(node: ConfigNode) -> bool:
    return starts_with_ignore_case(node.id, "auto ")


def get_interface_name(node: ConfigNode) -> str:
    return node.params[1] if len(node.params) > 1 else node.id


def is_switch_port(interface_name: str) -> bool:
    return _SWITCH_PORT.search(interface_name.lower()) is not None


def is_bond_interface(interface_name: str) -> bool:
    return _BOND.search(interface_name.lower()) is not None


def is_management_interface(interface_name: str) -> bool:
    return interface_name.lower() in ("eth0", "mgmt")


def is_loopback(interface_name: str) -> bool:
    name = interface_name.lower()
    return name == "lo" or name.startswith("loopback")


def is_peerlink(interface_name: str) -> bool:
    return "peerlink" in interface_name.lower()


def is_vlan_aware_bridge(node: ConfigNode) -> bool:
    return any(
        "bridge-vlan-aware" in child.id.lower() and "yes" in child.id.lower()
        for child in node.children
    )


def has_address(node: ConfigNode) -> bool:
    return _has_child_starting(node, "address ")


def has_description(node: ConfigNode) -> bool:
    """ifupdown2 uses `alias` for interface descriptions."""
    return _has_child_starting(node, "alias ")


def has_bridge_ports(node: ConfigNode) -> bool:
    return _has_child_starting(node, "bridge-ports ")


def has_bridge_vids(node: ConfigNode) -> bool:
    return _has_child_starting(node, "bridge-vids ")


def has_bpdu_guard(node: ConfigNode) -> bool:
    return any(
        child.id.lower().startswith("mstpctl-bpduguard") and "yes" in child.id.lower()
        for child in node.children
    )


def get_mtu(node: ConfigNode) -> int | None:
    child = get_child_command(node, "mtu")
    if child is None:
        return None
    match = _MTU.match(child.id)
    return int(match.group(1)) if match else None


HELPERS: dict[str, Callable[..., Any]] = {
    "isNcluCommand": is_nclu_command,
    "isNvueCommand": is_nvue_command,
    "isIfaceStanza": is_iface_stanza,
    "isAutoStanza": is_auto_stanza,
    "getInterfaceName": get_interface_name,
    "isSwitchPort": is_switch_port,
    "isBondInterface": is_bond_interface,
    "isManagementInterface": is_management_interface,
    "isLoopback": is_loopback,
    "isPeerlink": is_peerlink,
    "isVlanAwareBridge": is_vlan_aware_bridge,
    "hasAddress": has_address,
    "hasDescription": has_description,
    "hasBridgePorts": has_bridge_ports,
    "hasBridgeVids": has_bridge_vids,
    "hasBpduGuard": has_bpdu_guard,
    "getMtu": get_mtu,
}

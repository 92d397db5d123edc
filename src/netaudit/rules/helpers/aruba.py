"""Aruba AOS-CX helper functions."""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from netaudit.models import ConfigNode
from netaudit.rules.helpers.common import get_child_command, has_child_command

_PHYSICAL_PORT = re.compile(r"^\d+/\d+/\d+$")
_LAG = re.compile(r"^lag\s*\d+$", re.IGNORECASE)
_VLAN_INTERFACE = re.compile(r"^vlan\s*\d+$", re.IGNORECASE)
_VLAN_ACCESS = re.compile(r"vlan\s+access\s+(\d+)", re.IGNORECASE)
_TRUNK_NATIVE = re.compile(r"vlan\s+trunk\s+native\s+(\d+)", re.IGNORECASE)
_TRUNK_ALLOWED = re.compile(r"vlan\s+trunk\s+allowed\s+([\d,]+)", re.IGNORECASE)


def get_interface_name(node: ConfigNode) -> str | None:
    """`interface 1/1/1` -> `1/1/1`."""
    keyword, _, name = node.id.partition(" ")
    if keyword.lower() != "interface":
        return None
    return name.strip() or None


def is_physical_port(interface_name: str) -> bool:
    return _PHYSICAL_PORT.match(interface_name.strip()) is not None


def is_lag(interface_name: str) -> bool:
    return _LAG.match(interface_name.strip()) is not None


def is_vlan_interface(interface_name: str) -> bool:
    return _VLAN_INTERFACE.match(interface_name.strip()) is not None


def is_trunk(node: ConfigNode) -> bool:
    return has_child_command(node, "vlan trunk")


def is_access(node: ConfigNode) -> bool:
    return has_child_command(node, "vlan access")


def _vlan_from(node: ConfigNode, prefix: str, pattern: re.Pattern[str]) -> int | None:
    child = get_child_command(node, prefix)
    if child is None:
        return None
    match = pattern.match(child.id)
    return int(match.group(1)) if match else None


def get_vlan_access(node: ConfigNode) -> int | None:
    return _vlan_from(node, "vlan access", _VLAN_ACCESS)


def get_trunk_native(node: ConfigNode) -> int | None:
    return _vlan_from(node, "vlan trunk native", _TRUNK_NATIVE)


def get_trunk_allowed(node: ConfigNode) -> list[int]:
    child = get_child_command(node, "vlan trunk allowed")
    if child is None:
        return []
    match = _TRUNK_ALLOWED.match(child.id)
    if not match:
        return []
    return [int(part) for part in match.group(1).split(",") if part.strip().isdigit()]


def has_bpdu_guard(node: ConfigNode) -> bool:
    return has_child_command(node, "spanning-tree bpdu-guard")


def is_edge_port(node: ConfigNode) -> bool:
    return has_child_command(node, "spanning-tree port-type admin-edge")


def has_description(node: ConfigNode) -> bool:
    return has_child_command(node, "description")


def get_description(node: ConfigNode) -> str | None:
    child = get_child_command(node, "description")
    if child is None or len(child.params) < 2:
        return None
    return " ".join(child.params[1:])


HELPERS: dict[str, Callable[..., Any]] = {
    "getInterfaceName": get_interface_name,
    "isAosCxPhysicalPort": is_physical_port,
    "isAosCxLag": is_lag,
    "isAosCxVlanInterface": is_vlan_interface,
    "isAosCxTrunk": is_trunk,
    "isAosCxAccess": is_access,
    "getAosCxVlanAccess": get_vlan_access,
    "getAosCxTrunkNative": get_trunk_native,
    "getAosCxTrunkAllowed": get_trunk_allowed,
    "hasAosCxBpduGuard": has_bpdu_guard,
    "isAosCxEdgePort": is_edge_port,
    "hasDescription": has_description,
    "getDescription": get_description,
}

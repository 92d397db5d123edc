"""Nokia SR OS (MD-CLI) helper functions."""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from netaudit.models import ConfigNode
from netaudit.rules.helpers.common import get_child_command, has_child_command, starts_with_ignore_case

_PHYSICAL_PORT = re.compile(r"^\d+/\d+/\d+")


def _child_ids(node: ConfigNode) -> list[str]:
    return [child.id.strip().lower() for child in node.children]


def is_admin_state_enabled(node: ConfigNode) -> bool:
    return any(child_id in ("admin-state enable", "admin-state up") for child_id in _child_ids(node))


def is_admin_state_disabled(node: ConfigNode) -> bool:
    return "admin-state disable" in _child_ids(node)


def is_shutdown(node: ConfigNode) -> bool:
    return "shutdown" in _child_ids(node)


def is_enabled(node: ConfigNode) -> bool:
    return is_admin_state_enabled(node) and not is_shutdown(node)


def is_physical_port(port_name: str) -> bool:
    """slot/mda/port naming, e.g. 1/1/1."""
    return _PHYSICAL_PORT.match(port_name.strip().strip('"')) is not None


def is_lag_port(port_name: str) -> bool:
    return "lag" in port_name.lower()


def is_system_interface(interface_name: str) -> bool:
    name = interface_name.lower()
    return "system" in name or "loopback" in name


def has_description(node: ConfigNode) -> bool:
    return has_child_command(node, "description")


def get_description(node: ConfigNode) -> str | None:
    child = get_child_command(node, "description")
    if child is None or len(child.params) < 2:
        return None
    return child.params[1]


def get_system_name(system: ConfigNode) -> str | None:
    """Value of `name "router-1"` under `system`, quotes removed."""
    for child in system.children:
        if child.params and child.params[0].lower() == "name" and len(child.params) >= 2:
            return child.params[1]
    return None


def has_ntp_server(node: ConfigNode) -> bool:
    return any(starts_with_ignore_case(child.id, "server") for child in node.children) or has_child_command(node, "ntp")


HELPERS: dict[str, Callable[..., Any]] = {
    "isAdminStateEnabled": is_admin_state_enabled,
    "isAdminStateDisabled": is_admin_state_disabled,
    "isShutdown": is_shutdown,
    "isEnabled": is_enabled,
    "isPhysicalPort": is_physical_port,
    "isLagPort": is_lag_port,
    "isSystemInterface": is_system_interface,
    "hasDescription": has_description,
    "getDescription": get_description,
    "getSystemName": get_system_name,
    "hasNtpServer": has_ntp_server,
}

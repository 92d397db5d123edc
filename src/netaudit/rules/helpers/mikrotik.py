"""MikroTik RouterOS helper functions.

RouterOS exports are `/path` sections holding `add` and `set` commands
with `key=value` properties. Property helpers accept either a command
node or its text.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from netaudit.models import ConfigNode
from netaudit.rules.helpers.common import equals_ignore_case, parse_integer, starts_with_ignore_case

_PHYSICAL = re.compile(r"^(ether|sfp|sfp-sfpplus|combo|qsfp)\d+$", re.IGNORECASE)
_BRIDGE = re.compile(r"^(bridge|br\d+)", re.IGNORECASE)
_BOND = re.compile(r"^(bonding|bond\d+)", re.IGNORECASE)


def _text(node_or_command: ConfigNode | str) -> str:
    return node_or_command if isinstance(node_or_command, str) else node_or_command.id


def parse_property(node_or_command: ConfigNode | str, name: str) -> str | None:
    """Value of `name=value`, `name="value"` or `name='value'`."""
    pattern = re.compile(rf"(?<![\w-]){re.escape(name)}=(?:\"([^\"]*)\"|'([^']*)'|(\S+))", re.IGNORECASE)
    match = pattern.search(_text(node_or_command))
    if match is None:
        return None
    return next(group for group in match.groups() if group is not None)


def has_property(node_or_command: ConfigNode | str, name: str) -> bool:
    return parse_property(node_or_command, name) is not None


def _property_is(node_or_command: ConfigNode | str, name: str, expected: str) -> bool:
    value = parse_property(node_or_command, name)
    return value is not None and value.lower() == expected


def is_disabled_resource(node_or_command: ConfigNode | str) -> bool:
    return _property_is(node_or_command, "disabled", "yes")


def is_enabled(node_or_command: ConfigNode | str) -> bool:
    return _property_is(node_or_command, "enabled", "yes")


def is_add_command(node_or_command: ConfigNode | str) -> bool:
    return starts_with_ignore_case(_text(node_or_command).strip(), "add ")


def is_set_command(node_or_command: ConfigNode | str) -> bool:
    return starts_with_ignore_case(_text(node_or_command).strip(), "set ")


def get_add_commands(node: ConfigNode) -> list[ConfigNode]:
    return [child for child in node.children if is_add_command(child)]


def get_set_commands(node: ConfigNode) -> list[ConfigNode]:
    return [child for child in node.children if is_set_command(child)]


def is_path_block(node: ConfigNode, path: str) -> bool:
    """True for the `/path` section, with or without the leading slash in path."""
    return equals_ignore_case(node.id.strip(), "/" + path.strip().lstrip("/"))


def is_physical_interface(interface_name: str) -> bool:
    return _PHYSICAL.match(interface_name) is not None


def is_loopback(interface_name: str) -> bool:
    return equals_ignore_case(interface_name, "lo") or starts_with_ignore_case(interface_name, "loopback")


def is_bridge_interface(interface_name: str) -> bool:
    return _BRIDGE.match(interface_name) is not None


def is_vlan_interface(interface_name: str) -> bool:
    return starts_with_ignore_case(interface_name, "vlan")


def is_bonding_interface(interface_name: str) -> bool:
    return _BOND.match(interface_name) is not None


def get_firewall_chain(node_or_command: ConfigNode | str) -> str | None:
    return parse_property(node_or_command, "chain")


def get_firewall_action(node_or_command: ConfigNode | str) -> str | None:
    return parse_property(node_or_command, "action")


def get_interface(node_or_command: ConfigNode | str) -> str | None:
    for name in ("interface", "in-interface", "out-interface"):
        value = parse_property(node_or_command, name)
        if value is not None:
            return value
    return None


def get_comment(node_or_command: ConfigNode | str) -> str | None:
    return parse_property(node_or_command, "comment")


def get_name(node_or_command: ConfigNode | str) -> str | None:
    return parse_property(node_or_command, "name")


def get_service_port(node_or_command: ConfigNode | str) -> int | None:
    port = parse_property(node_or_command, "port")
    return parse_integer(port) if port is not None else None


def is_service_disabled(node_or_command: ConfigNode | str) -> bool:
    return _property_is(node_or_command, "disabled", "yes")


def get_system_identity(node: ConfigNode) -> str | None:
    """`set name=...` inside `/system identity`."""
    for child in get_set_commands(node):
        name = get_name(child)
        if name:
            return name
    return None


HELPERS: dict[str, Callable[..., Any]] = {
    "parseProperty": parse_property,
    "hasProperty": has_property,
    "isDisabledResource": is_disabled_resource,
    "isEnabled": is_enabled,
    "isAddCommand": is_add_command,
    "isSetCommand": is_set_command,
    "getAddCommands": get_add_commands,
    "getSetCommands": get_set_commands,
    "isPathBlock": is_path_block,
    "isPhysicalInterface": is_physical_interface,
    "isLoopback": is_loopback,
    "isBridgeInterface": is_bridge_interface,
    "isVlanInterface": is_vlan_interface,
    "isBondingInterface": is_bonding_interface,
    "getFirewallChain": get_firewall_chain,
    "getFirewallAction": get_firewall_action,
    "getInterface": get_interface,
    "getComment": get_comment,
    "getName": get_name,
    "getServicePort": get_service_port,
    "isServiceDisabled": is_service_disabled,
    "getSystemIdentity": get_system_identity,
}

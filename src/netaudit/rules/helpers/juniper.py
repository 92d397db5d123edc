"""Juniper JunOS helper functions."""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from netaudit.models import ConfigNode
from netaudit.rules.helpers.common import (
    equals_ignore_case,
    has_child_command,
    includes_ignore_case,
    parse_integer,
    parse_ip,
    prefix_to_mask,
    starts_with_ignore_case,
)

_PHYSICAL_PREFIXES = ("ge-", "xe-", "et-", "ae", "em", "fxp")
_INSECURE_SERVICES = ("telnet", "finger", "ftp", "xnm-clear-text")


def is_disabled(node: ConfigNode) -> bool:
    return any(equals_ignore_case(child.id.strip(), "disable") for child in node.children)


def is_physical_port(interface_name: str) -> bool:
    return interface_name.lower().startswith(_PHYSICAL_PREFIXES)


def is_loopback(interface_name: str) -> bool:
    return starts_with_ignore_case(interface_name, "lo")


def is_irb_interface(interface_name: str) -> bool:
    return starts_with_ignore_case(interface_name, "irb")


def parse_address(address: str) -> tuple[int, int, int] | None:
    """Parse `10.0.0.1/24` into (ip, prefix, mask); None if malformed."""
    ip_part, sep, prefix_part = address.partition("/")
    if not sep:
        return None
    ip = parse_ip(ip_part)
    prefix = parse_integer(prefix_part)
    if ip is None or prefix is None or not 0 <= prefix <= 32:
        return None
    return (ip, prefix, prefix_to_mask(prefix))


def find_stanza(node: ConfigNode, name: str) -> ConfigNode | None:
    """Direct child whose id equals name, ignoring case."""
    for child in node.children:
        if equals_ignore_case(child.id, name):
            return child
    return None


def find_stanzas(node: ConfigNode, pattern: str) -> list[ConfigNode]:
    regex = re.compile(pattern, re.IGNORECASE)
    return [child for child in node.children if regex.search(child.id)]


def get_interface_units(node: ConfigNode) -> list[ConfigNode]:
    return [child for child in node.children if starts_with_ignore_case(child.id, "unit")]


def is_ssh_root_login_denied(services: ConfigNode) -> bool:
    ssh = find_stanza(services, "ssh")
    if ssh is None:
        return False
    return any(
        includes_ignore_case(child.id, "root-login") and includes_ignore_case(child.id, "deny")
        for child in ssh.children
    )


def has_telnet_service(services: ConfigNode) -> bool:
    return has_child_command(services, "telnet")


def get_insecure_services(services: ConfigNode) -> list[str]:
    return [name for name in _INSECURE_SERVICES if has_child_command(services, name)]


def has_root_authentication(system: ConfigNode) -> bool:
    """`system { root-authentication { encrypted-password ...; } }` is present."""
    auth = find_stanza(system, "root-authentication")
    if auth is None:
        return False
    return has_child_command(auth, "encrypted-password") or has_child_command(auth, "ssh-")


def has_login_banner(system: ConfigNode) -> bool:
    login = find_stanza(system, "login")
    return login is not None and has_child_command(login, "message")


HELPERS: dict[str, Callable[..., Any]] = {
    "isDisabled": is_disabled,
    "isPhysicalJunosPort": is_physical_port,
    "isLoopback": is_loopback,
    "isIrbInterface": is_irb_interface,
    "parseJunosAddress": parse_address,
    "findStanza": find_stanza,
    "findStanzas": find_stanzas,
    "getInterfaceUnits": get_interface_units,
    "isSshRootLoginDenied": is_ssh_root_login_denied,
    "hasTelnetService": has_telnet_service,
    "getInsecureServices": get_insecure_services,
    "hasRootAuthentication": has_root_authentication,
    "hasLoginBanner": has_login_banner,
}

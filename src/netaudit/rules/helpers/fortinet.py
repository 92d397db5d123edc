"""Fortinet FortiOS helper functions.

FortiOS stores settings as `set <name> <value...>` statements inside
`config` and `edit` sections. Values are read from node params, so
quotes are already stripped.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from netaudit.models import ConfigNode
from netaudit.rules.helpers.common import equals_ignore_case, starts_with_ignore_case

_PROFILE_SETTINGS = (
    "av-profile",
    "webfilter-profile",
    "ips-sensor",
    "application-list",
    "dnsfilter-profile",
    "emailfilter-profile",
    "dlp-sensor",
)


def _set_params(node: ConfigNode, name: str) -> tuple[str, ...] | None:
    for child in node.children:
        params = child.params
        if len(params) >= 3 and equals_ignore_case(params[0], "set") and equals_ignore_case(params[1], name):
            return params[2:]
    return None


def get_set_value(node: ConfigNode, name: str) -> str | None:
    """Value of `set <name> ...` as one string; None if not set."""
    params = _set_params(node, name)
    return " ".join(params) if params else None


def get_set_values(node: ConfigNode, name: str) -> list[str]:
    """Space-separated values of `set <name> ...`, e.g. `allowaccess ping ssh`."""
    return list(_set_params(node, name) or ())


def has_set_value(node: ConfigNode, name: str) -> bool:
    return _set_params(node, name) is not None


def find_edit_entry(section: ConfigNode, entry_name: str) -> ConfigNode | None:
    for child in get_edit_entries(section):
        if equals_ignore_case(get_edit_entry_name(child), entry_name.strip("\"'")):
            return child
    return None


def get_edit_entries(section: ConfigNode) -> list[ConfigNode]:
    return [child for child in section.children if starts_with_ignore_case(child.id, "edit ")]


def get_edit_entry_name(entry: ConfigNode) -> str:
    if len(entry.params) >= 2 and equals_ignore_case(entry.params[0], "edit"):
        return entry.params[1]
    return entry.id


def is_policy_accept(policy: ConfigNode) -> bool:
    action = get_set_value(policy, "action")
    return action is not None and action.lower() == "accept"


def is_policy_deny(policy: ConfigNode) -> bool:
    action = get_set_value(policy, "action")
    return action is not None and action.lower() in ("deny", "drop")


def is_policy_disabled(policy: ConfigNode) -> bool:
    status = get_set_value(policy, "status")
    return status is not None and status.lower() == "disable"


def has_traffic_logging(policy: ConfigNode) -> bool:
    """True unless `logtraffic` is missing or `disable`."""
    logtraffic = get_set_value(policy, "logtraffic")
    return logtraffic is not None and logtraffic.lower() != "disable"


def has_any_src_addr(policy: ConfigNode) -> bool:
    return any(value.lower() == "all" for value in get_set_values(policy, "srcaddr"))


def has_any_dst_addr(policy: ConfigNode) -> bool:
    return any(value.lower() == "all" for value in get_set_values(policy, "dstaddr"))


def has_any_service(policy: ConfigNode) -> bool:
    return any(value.upper() == "ALL" for value in get_set_values(policy, "service"))


def has_security_profile(policy: ConfigNode) -> bool:
    return any(has_set_value(policy, name) for name in _PROFILE_SETTINGS)


def get_interface_allow_access(interface: ConfigNode) -> list[str]:
    return get_set_values(interface, "allowaccess")


def _allows(interface: ConfigNode, *protocols: str) -> bool:
    return any(value.lower() in protocols for value in get_interface_allow_access(interface))


def has_http_management(interface: ConfigNode) -> bool:
    return _allows(interface, "http", "https")


def has_ssh_access(interface: ConfigNode) -> bool:
    return _allows(interface, "ssh")


def has_telnet_access(interface: ConfigNode) -> bool:
    return _allows(interface, "telnet")


def is_always_schedule(policy: ConfigNode) -> bool:
    schedule = get_set_value(policy, "schedule")
    return schedule is not None and schedule.lower() == "always"


def is_ha_enabled(system_ha: ConfigNode) -> bool:
    mode = get_set_value(system_ha, "mode")
    return mode is not None and mode.lower() != "standalone"


HELPERS: dict[str, Callable[..., Any]] = {
    "getSetValue": get_set_value,
    "getSetValues": get_set_values,
    "hasSetValue": has_set_value,
    "findEditEntry": find_edit_entry,
    "getEditEntries": get_edit_entries,
    "getEditEntryName": get_edit_entry_name,
    "isPolicyAccept": is_policy_accept,
    "isPolicyDeny": is_policy_deny,
    "isPolicyDisabled": is_policy_disabled,
    "hasTrafficLogging": has_traffic_logging,
    "hasAnySrcAddr": has_any_src_addr,
    "hasAnyDstAddr": has_any_dst_addr,
    "hasAnyService": has_any_service,
    "hasSecurityProfile": has_security_profile,
    "getInterfaceAllowAccess": get_interface_allow_access,
    "hasHttpManagement": has_http_management,
    "hasSshAccess": has_ssh_access,
    "hasTelnetAccess": has_telnet_access,
    "isAlwaysSchedule": is_always_schedule,
    "isHAEnabled": is_ha_enabled,
}

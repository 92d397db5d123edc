"""Palo Alto PAN-OS helper functions.

Security rule helpers take a rule stanza from `rulebase { security {
rules { ... } } }`. PAN-OS writes member lists either as child stanzas
(`source { any; }`) or inline (`source [ 10.0.0.0/8 any ];`); both
forms are read by the same helpers.
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
    includes_ignore_case,
)

_PROFILE_KEYWORDS = (
    "virus",
    "spyware",
    "vulnerability",
    "url-filtering",
    "file-blocking",
    "wildfire-analysis",
    "data-filtering",
)
_PHYSICAL = re.compile(r"^ethernet\d+/\d+$", re.IGNORECASE)
_LOOPBACK = re.compile(r"^loopback\.\d+$", re.IGNORECASE)
_TUNNEL = re.compile(r"^tunnel\.\d+$", re.IGNORECASE)
_AGGREGATE = re.compile(r"^ae\d+$", re.IGNORECASE)


def find_stanza(node: ConfigNode, name: str) -> ConfigNode | None:
    for child in node.children:
        if equals_ignore_case(child.id, name):
            return child
    return None


def get_members(rule: ConfigNode, keyword: str) -> list[str]:
    """Members of `keyword`, from a child stanza or an inline list."""
    stanza = find_stanza(rule, keyword)
    if stanza is not None and stanza.children:
        return [child.id.strip() for child in stanza.children]
    members: list[str] = []
    for child in rule.children:
        if len(child.params) > 1 and equals_ignore_case(child.params[0], keyword):
            members.extend(param for param in child.params[1:] if param not in ("[", "]"))
    return members


def _has_any(rule: ConfigNode, keyword: str, *wildcards: str) -> bool:
    return any(member.lower() in wildcards for member in get_members(rule, keyword))


def has_any_source(rule: ConfigNode) -> bool:
    return _has_any(rule, "source", "any", "0.0.0.0/0")


def has_any_destination(rule: ConfigNode) -> bool:
    return _has_any(rule, "destination", "any", "0.0.0.0/0")


def has_any_application(rule: ConfigNode) -> bool:
    return _has_any(rule, "application", "any")


def has_any_service(rule: ConfigNode) -> bool:
    return _has_any(rule, "service", "any")


def get_source_zones(rule: ConfigNode) -> list[str]:
    return get_members(rule, "from")


def get_destination_zones(rule: ConfigNode) -> list[str]:
    return get_members(rule, "to")


def is_allow_rule(rule: ConfigNode) -> bool:
    action = get_child_command(rule, "action")
    return action is not None and includes_ignore_case(action.id, "allow")


def is_deny_rule(rule: ConfigNode) -> bool:
    action = get_child_command(rule, "action")
    if action is None:
        return False
    return any(includes_ignore_case(action.id, keyword) for keyword in ("deny", "drop", "reset"))


def is_rule_disabled(rule: ConfigNode) -> bool:
    disabled = get_child_command(rule, "disabled")
    if disabled is None:
        return False
    return includes_ignore_case(disabled.id, "yes") or includes_ignore_case(disabled.id, "true")


def _flag(rule: ConfigNode, keyword: str) -> str | None:
    """Value of a `keyword yes|no` statement, lowercased."""
    child = get_child_command(rule, keyword)
    if child is None or len(child.params) < 2:
        return None
    return child.params[1].lower()


def has_log_end(rule: ConfigNode) -> bool:
    """PAN-OS logs at session end unless `log-end no` is set."""
    return _flag(rule, "log-end") != "no"


def has_log_start(rule: ConfigNode) -> bool:
    return _flag(rule, "log-start") == "yes"


def has_security_profile(rule: ConfigNode) -> bool:
    profile_setting = find_stanza(rule, "profile-setting")
    if profile_setting is not None and profile_setting.children:
        return True
    return any(has_child_command(rule, keyword) for keyword in _PROFILE_KEYWORDS)


def get_security_rules(rulebase: ConfigNode) -> list[ConfigNode]:
    security = find_stanza(rulebase, "security")
    rules = find_stanza(security, "rules") if security is not None else None
    return list(rules.children) if rules is not None else []


def is_physical_ethernet_port(interface_name: str) -> bool:
    return _PHYSICAL.match(interface_name) is not None


def is_loopback_interface(interface_name: str) -> bool:
    return _LOOPBACK.match(interface_name) is not None


def is_tunnel_interface(interface_name: str) -> bool:
    return _TUNNEL.match(interface_name) is not None


def is_aggregate_interface(interface_name: str) -> bool:
    return _AGGREGATE.match(interface_name) is not None


def has_zone_protection_profile(zone: ConfigNode) -> bool:
    return has_child_command(zone, "zone-protection-profile")


HELPERS: dict[str, Callable[..., Any]] = {
    "findStanza": find_stanza,
    "getMembers": get_members,
    "hasAnySource": has_any_source,
    "hasAnyDestination": has_any_destination,
    "hasAnyApplication": has_any_application,
    "hasAnyService": has_any_service,
    "getSourceZones": get_source_zones,
    "getDestinationZones": get_destination_zones,
    "isAllowRule": is_allow_rule,
    "isDenyRule": is_deny_rule,
    "isRuleDisabled": is_rule_disabled,
    "hasLogEnd": has_log_end,
    "hasLogStart": has_log_start,
    "hasSecurityProfile": has_security_profile,
    "getSecurityRules": get_security_rules,
    "isPhysicalEthernetPort": is_physical_ethernet_port,
    "isLoopbackInterface": is_loopback_interface,
    "isTunnelInterface": is_tunnel_interface,
    "isAggregateInterface": is_aggregate_interface,
    "hasZoneProtectionProfile": has_zone_protection_profile,
}

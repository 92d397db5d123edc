"""Shared test fixtures for the netaudit test suite.

Provides sample vendor configurations, a JSON trunk rule
document, and a helper for writing rule files to tmp_path.
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

CISCO_CONFIG = """\
hostname edge-1
!
enable secret 9 $9$abcdefgh
!
interface GigabitEthernet0/1
 description uplink to core
 ip address 10.0.0.1 255.255.255.0
 switchport mode trunk
 switchport trunk allowed vlan 10,20
!
interface GigabitEthernet0/2
 switchport mode trunk
!
interface Loopback0
 ip address 192.0.2.1 255.255.255.255
!
router ospf 1
 network 10.0.0.1 0.0.0.0 area 0
!
line vty 0 4
 access-class MGMT in
 transport input ssh
"""

JUNOS_CONFIG = """\
system {
    host-name edge-2;
    root-authentication {
        encrypted-password "$6$abc";
    }
}
interfaces {
    ge-0/0/0 {
        description "uplink to core";
        unit 0 {
            family inet {
                address 10.1.0.1/30;
            }
        }
    }
}
"""

TRUNK_RULE: dict[str, Any] = {
    "id": "CUSTOM-TRUNK-001",
    "selector": "interface",
    "vendor": "cisco-ios",
    "metadata": {
        "level": "error",
        "owner": "NetOps",
        "description": "Trunk ports must restrict allowed VLANs.",
        "remediation": "Add switchport trunk allowed vlan <list>.",
    },
    "check": {
        "type": "and",
        "conditions": [
            {"type": "helper", "helper": "cisco.isTrunkPort", "args": [{"$ref": "node"}]},
            {"type": "child_not_exists", "selector": "switchport trunk allowed vlan"},
        ],
    },
    "failureMessage": "{nodeId}: trunk allows every VLAN",
}


@pytest.fixture
def cisco_config() -> str:
    """A small Cisco IOS configuration touching every Cisco built-in rule."""
    return CISCO_CONFIG


@pytest.fixture
def junos_config() -> str:
    """A small JunOS configuration with root authentication configured."""
    return JUNOS_CONFIG


@pytest.fixture
def trunk_rule() -> dict[str, Any]:
    """A JSON rule flagging trunk ports without an allowed VLAN list."""
    return json.loads(json.dumps(TRUNK_RULE))


@pytest.fixture
def rule_document(trunk_rule: dict[str, Any]) -> dict[str, Any]:
    """A valid rule file document holding the trunk rule."""
    return {"version": "1.0", "meta": {"name": "custom pack"}, "rules": [trunk_rule]}


@pytest.fixture
def write_rule_file(tmp_path: Path) -> Callable[..., Path]:
    """Write a rule document to tmp_path as JSON or YAML."""

    def _write(document: Any, name: str = "rules.json") -> Path:
        file_path = tmp_path / name
        if name.endswith(".json"):
            file_path.write_text(json.dumps(document))
        else:
            file_path.write_text(yaml.safe_dump(document))
        return file_path

    return _write

"""Tests for the built-in native rule library.

Covers:
- OSPF network statements checked against interface addresses
- Unicast address assignment and interface documentation (vendor-agnostic)
- Cisco management-plane and trunk rules
- One representative rule per additional vendor
- The fixed built-in registry
"""

from __future__ import annotations

import pytest

from netaudit.engine import RuleEngine
from netaudit.models import Level, Outcome, RuleResult
from netaudit.parser.parser import parse
from netaudit.parser.vendors import get_schema
from netaudit.rules.builtin import (
    arista,
    aruba,
    cisco,
    common,
    cumulus,
    fortinet,
    huawei,
    juniper,
    mikrotik,
    nokia,
    paloalto,
    vyos,
)
from netaudit.rules.builtin.library import default_rules, get_rule


def _results(text: str, rule_id: str, vendor: str = "cisco-ios") -> list[RuleResult]:
    tree = parse(text, get_schema(vendor))
    results = RuleEngine().run(tree, default_rules(), vendor)
    return [result for result in results if result.rule_id == rule_id]


def _only(text: str, rule_id: str, vendor: str = "cisco-ios") -> RuleResult:
    results = _results(text, rule_id, vendor)
    assert len(results) == 1, results
    return results[0]


class TestOspfNetworkRule:
    """NET-OSPF-001: network statements must cover interface addresses."""

    INTERFACE = "interface GigabitEthernet0/1\n ip address 10.0.0.1 255.255.255.0\n!\n"

    def test_exact_interface_address_passes(self) -> None:
        text = self.INTERFACE + "router ospf 1\n network 10.0.0.1 0.0.0.0 area 0\n"
        result = _only(text, "NET-OSPF-001")
        assert result.outcome is Outcome.PASS
        assert result.node_id == "router ospf 1"

    def test_unknown_address_fails(self) -> None:
        text = self.INTERFACE + "router ospf 1\n network 10.0.0.2 0.0.0.0 area 0\n"
        result = _only(text, "NET-OSPF-001")
        assert result.outcome is Outcome.FAIL
        assert result.level is Level.WARNING
        assert "does not match any configured interface IP address" in result.message
        assert "Line 5" in result.message
        assert result.remediation is not None

    def test_subnet_wildcard_covering_interface_passes(self) -> None:
        text = self.INTERFACE + "router ospf 1\n network 10.0.0.0 0.0.0.255 area 0\n"
        assert _only(text, "NET-OSPF-001").outcome is Outcome.PASS

    def test_subnet_wildcard_missing_interfaces_fails(self) -> None:
        text = self.INTERFACE + "router ospf 1\n network 10.9.0.0 0.0.0.255 area 0\n"
        result = _only(text, "NET-OSPF-001")
        assert result.outcome is Outcome.FAIL
        assert "does not match any configured interface subnet" in result.message

    def test_invalid_wildcard_reported(self) -> None:
        text = self.INTERFACE + "router ospf 1\n network 10.0.0.1 banana area 0\n"
        result = _only(text, "NET-OSPF-001")
        assert 'Invalid wildcard mask "banana"' in result.message

    def test_no_network_statements(self) -> None:
        result = _only("router ospf 1\n router-id 1.1.1.1\n", "NET-OSPF-001")
        assert result.outcome is Outcome.NOT_APPLICABLE

    def test_vendor_specific(self) -> None:
        text = self.INTERFACE + "router ospf 1\n network 10.0.0.2 0.0.0.0 area 0\n"
        assert _results(text, "NET-OSPF-001", vendor="arista-eos") == []


class TestUnicastAddressRule:
    """NET-IP-001: assigned addresses must be unicast host addresses."""

    @pytest.mark.parametrize(
        ("address", "fragment"),
        [
            ("224.0.0.5 255.255.255.0", "Multicast"),
            ("255.255.255.255 255.255.255.0", "Global Broadcast"),
            ("10.0.0.0 255.255.255.0", "Network ID"),
            ("10.0.0.255 255.255.255.0", "Broadcast address for subnet"),
            ("10.0.0.300 255.255.255.0", "Invalid IP address format"),
        ],
    )
    def test_rejected_addresses(self, address: str, fragment: str) -> None:
        result = _only(f"interface Gi0/1\n ip address {address}\n", "NET-IP-001")
        assert result.outcome is Outcome.FAIL
        assert result.level is Level.ERROR
        assert fragment in result.message

    def test_host_route_mask_passes(self) -> None:
        result = _only("interface Loopback0\n ip address 192.0.2.1 255.255.255.255\n", "NET-IP-001")
        assert result.outcome is Outcome.PASS
        assert "/32" in result.message

    def test_regular_host_passes(self) -> None:
        assert _only("interface Gi0/1\n ip address 10.0.0.1 255.255.255.0\n", "NET-IP-001").passed

    def test_dynamic_assignment_not_applicable(self) -> None:
        result = _only("interface Gi0/1\n ip address dhcp\n", "NET-IP-001")
        assert result.outcome is Outcome.NOT_APPLICABLE

    def test_runs_for_every_vendor(self) -> None:
        text = "interface 1/1/1\n    ip address 224.0.0.1 255.255.255.0\n"
        assert _only(text, "NET-IP-001", vendor="aruba-aoscx").failed


class TestInterfaceDescriptionRule:
    """NET-DOC-001: active interfaces need a description."""

    def test_described_interface_passes(self) -> None:
        assert _only("interface Gi0/1\n description core\n", "NET-DOC-001").passed

    def test_missing_description_fails(self) -> None:
        result = _only("interface GigabitEthernet0/2\n switchport mode access\n", "NET-DOC-001")
        assert result.outcome is Outcome.FAIL
        assert result.level is Level.WARNING
        assert result.message == 'Interface "GigabitEthernet0/2" is missing a description.'

    def test_empty_interface_fails(self) -> None:
        result = _only("interface GigabitEthernet0/2\n!\nhostname r1\n", "NET-DOC-001")
        assert result.outcome is Outcome.FAIL
        assert result.message == 'Interface "GigabitEthernet0/2" is missing a description.'

    def test_shutdown_interface_not_applicable(self) -> None:
        result = _only("interface Gi0/3\n shutdown\n", "NET-DOC-001")
        assert result.outcome is Outcome.NOT_APPLICABLE

    def test_loopback_not_applicable(self) -> None:
        result = _only("interface Loopback0\n ip address 192.0.2.1 255.255.255.255\n", "NET-DOC-001")
        assert result.outcome is Outcome.NOT_APPLICABLE

    def test_interface_reference_not_applicable(self) -> None:
        result = _only("interface Gi0/1\n passive\n", "NET-DOC-001")
        assert result.outcome is Outcome.NOT_APPLICABLE


class TestCiscoRules:
    """NET-SEC-001, NET-MGMT-001 and NET-TRUNK-001."""

    def test_enable_password_type7(self) -> None:
        result = _only("enable password 7 0822455D0A16\n", "NET-SEC-001")
        assert result.failed
        assert "type 7" in result.message

    def test_enable_password_plain(self) -> None:
        result = _only("enable password cisco\n", "NET-SEC-001")
        assert result.failed
        assert result.level is Level.ERROR

    def test_enable_secret_passes(self) -> None:
        assert _only("enable secret 9 $9$abc\n", "NET-SEC-001").passed

    def test_vty_without_access_class(self) -> None:
        result = _only("line vty 0 4\n transport input ssh\n", "NET-MGMT-001")
        assert result.failed
        assert result.message == '"line vty 0 4" has no access-class restricting management sources.'

    def test_vty_with_access_class(self) -> None:
        assert _only("line vty 0 4\n access-class MGMT in\n", "NET-MGMT-001").passed

    def test_trunk_without_allowed_list(self) -> None:
        result = _only("interface Gi0/2\n switchport mode trunk\n", "NET-TRUNK-001")
        assert result.failed
        assert "allows all VLANs (default)" in result.message

    def test_trunk_allowing_all(self) -> None:
        text = "interface Gi0/2\n switchport mode trunk\n switchport trunk allowed vlan all\n"
        assert "explicitly allows all VLANs" in _only(text, "NET-TRUNK-001").message

    def test_trunk_with_list_passes(self) -> None:
        text = "interface Gi0/2\n switchport mode trunk\n switchport trunk allowed vlan 10,20\n"
        assert _only(text, "NET-TRUNK-001").passed

    @pytest.mark.parametrize(
        "text",
        [
            "interface Port-channel1\n switchport mode trunk\n",
            "interface Gi0/2\n switchport mode trunk\n shutdown\n",
            "interface Gi0/2\n switchport mode access\n",
        ],
    )
    def test_trunk_not_applicable(self, text: str) -> None:
        assert _only(text, "NET-TRUNK-001").outcome is Outcome.NOT_APPLICABLE

    def test_sample_config(self, cisco_config: str) -> None:
        tree = parse(cisco_config)
        results = RuleEngine().run(tree, default_rules(), "cisco-ios")
        failed = {(result.rule_id, result.node_id) for result in results if result.failed}
        assert failed == {
            ("NET-DOC-001", "interface GigabitEthernet0/2"),
            ("NET-TRUNK-001", "interface GigabitEthernet0/2"),
        }


class TestVendorRules:
    """Representative rules for brace and indentation dialects."""

    def test_junos_root_authentication_passes(self, junos_config: str) -> None:
        result = _only(junos_config, "JUN-SYS-001", vendor="juniper-junos")
        assert result.passed

    def test_junos_missing_root_authentication(self) -> None:
        result = _only("system {\n    host-name edge-2;\n}\n", "JUN-SYS-001", vendor="juniper-junos")
        assert result.failed
        assert result.message == "System missing root-authentication configuration."

    def test_junos_root_authentication_without_secret(self) -> None:
        text = "system {\n    root-authentication {\n        plain-text-password;\n    }\n}\n"
        result = _only(text, "JUN-SYS-001", vendor="juniper-junos")
        assert result.failed
        assert "no password or SSH key" in result.message

    def test_huawei_interface_description(self) -> None:
        text = (
            "interface GigabitEthernet0/0/1\n"
            " undo shutdown\n"
            "#\n"
            "interface GigabitEthernet0/0/2\n"
            " description to-core\n"
            " undo shutdown\n"
            "#\n"
            "interface Vlanif10\n"
            " undo shutdown\n"
            "#\n"
            "interface GigabitEthernet0/0/3\n"
            " shutdown\n"
        )
        outcomes = [(r.node_id, r.outcome) for r in _results(text, "HUAWEI-IF-001", vendor="huawei-vrp")]
        assert outcomes == [
            ("interface GigabitEthernet0/0/1", Outcome.FAIL),
            ("interface GigabitEthernet0/0/2", Outcome.PASS),
            ("interface Vlanif10", Outcome.NOT_APPLICABLE),
            ("interface GigabitEthernet0/0/3", Outcome.NOT_APPLICABLE),
        ]

    def test_nokia_system_name(self) -> None:
        text = 'configure {\n    system {\n        name "pe-1"\n    }\n}\n'
        result = _only(text, "NOKIA-SYS-001", vendor="nokia-sros")
        assert result.passed
        assert result.message == "System name is configured: pe-1"

    def test_nokia_missing_system_name(self) -> None:
        text = 'configure {\n    system {\n        location "lab"\n    }\n}\n'
        result = _only(text, "NOKIA-SYS-001", vendor="nokia-sros")
        assert result.failed
        assert result.message == "System name is not configured."

    def test_aruba_interface_description(self) -> None:
        text = (
            "interface 1/1/1\n"
            "    no shutdown\n"
            "    description uplink\n"
            "interface 1/1/2\n"
            "    no shutdown\n"
            "interface vlan10\n"
            "    ip address 10.0.0.1/24\n"
            "interface lag 1\n"
            "    no shutdown\n"
        )
        results = _results(text, "ARUBA-IF-001", vendor="aruba-aoscx")
        assert [r.outcome for r in results] == [
            Outcome.PASS,
            Outcome.FAIL,
            Outcome.NOT_APPLICABLE,
            Outcome.FAIL,
        ]
        assert results[1].message == "Interface 1/1/2 missing description."
        assert results[3].message == "Interface lag 1 missing description."

    def test_cumulus_switch_port_alias(self) -> None:
        text = (
            "auto swp1\n"
            "iface swp1\n"
            "    alias to-spine\n"
            "auto swp2\n"
            "iface swp2\n"
            "    mtu 9216\n"
            "iface eth0\n"
            "    address 192.168.0.10/24\n"
        )
        results = _results(text, "CUMULUS-IF-001", vendor="cumulus-linux")
        assert [r.outcome for r in results] == [Outcome.PASS, Outcome.FAIL, Outcome.NOT_APPLICABLE]
        assert results[1].message == 'Switch port "swp2" missing description (alias).'

    def test_arista_interface_description(self) -> None:
        text = (
            "interface Ethernet1\n"
            "   description leaf-1\n"
            "interface Ethernet2\n"
            "   no shutdown\n"
            "interface Ethernet3\n"
            "   shutdown\n"
            "interface Loopback0\n"
            "   ip address 10.255.0.1/32\n"
        )
        results = _results(text, "ARI-INT-001", vendor="arista-eos")
        assert [r.outcome for r in results] == [
            Outcome.PASS,
            Outcome.FAIL,
            Outcome.NOT_APPLICABLE,
            Outcome.NOT_APPLICABLE,
        ]
        assert results[0].message == "Interface has description: leaf-1"
        assert results[1].message == "Active interface is missing description."
        assert results[1].level is Level.INFO

    def test_fortigate_telnet_access(self) -> None:
        text = (
            "config system interface\n"
            '    edit "port1"\n'
            "        set ip 10.0.0.1 255.255.255.0\n"
            "        set allowaccess ping https ssh\n"
            "    next\n"
            '    edit "port2"\n'
            "        set allowaccess ping telnet\n"
            "    next\n"
            "end\n"
        )
        result = _only(text, "FGT-IF-001", vendor="fortinet-fortigate")
        assert result.failed
        assert result.level is Level.ERROR
        assert result.message == (
            'Interface "port2" allows Telnet access. Telnet is insecure and should be disabled.'
        )

    def test_fortigate_without_telnet_passes(self) -> None:
        text = (
            "config system interface\n"
            '    edit "port1"\n'
            "        set allowaccess ping https ssh\n"
            "    next\n"
            "end\n"
        )
        result = _only(text, "FGT-IF-001", vendor="fortinet-fortigate")
        assert result.passed
        assert result.message == "No interfaces have Telnet access enabled."

    def test_vyos_firewall_default_action(self) -> None:
        text = (
            "firewall {\n"
            "    name WAN_IN {\n"
            "        default-action drop\n"
            "        rule 10 {\n"
            "            action accept\n"
            "        }\n"
            "    }\n"
            "    name LAN_IN {\n"
            "        rule 10 {\n"
            "            action accept\n"
            "        }\n"
            "    }\n"
            "}\n"
        )
        result = _only(text, "VYOS-FW-001", vendor="vyos")
        assert result.failed
        assert result.message == 'Firewall ruleset "LAN_IN" has no default-action configured.'

    def test_paloalto_security_rule_logging(self) -> None:
        text = (
            "rulebase {\n"
            "    security {\n"
            "        rules {\n"
            "            allow-web {\n"
            "                from trust;\n"
            "                to untrust;\n"
            "                action allow;\n"
            "            }\n"
            "            allow-dns {\n"
            "                action allow;\n"
            "                log-end no;\n"
            "            }\n"
            "            old-rule {\n"
            "                action allow;\n"
            "                log-end no;\n"
            "                disabled yes;\n"
            "            }\n"
            "        }\n"
            "    }\n"
            "}\n"
        )
        result = _only(text, "PAN-SEC-001", vendor="paloalto-panos")
        assert result.failed
        assert result.message == 'Rule "allow-dns" does not have log-end enabled.'

    def test_paloalto_empty_rulebase_passes(self) -> None:
        result = _only("rulebase {\n}\n", "PAN-SEC-001", vendor="paloalto-panos")
        assert result.passed
        assert result.message == "No security rules configured."

    def test_mikrotik_input_chain_drop(self) -> None:
        text = (
            "/ip firewall filter\n"
            "add chain=input action=accept connection-state=established,related\n"
            "add chain=input action=drop in-interface-list=WAN\n"
        )
        result = _only(text, "MIK-FW-001", vendor="mikrotik-routeros")
        assert result.passed

    def test_mikrotik_disabled_drop_rule_fails(self) -> None:
        text = (
            "/ip firewall filter\n"
            "add chain=input action=accept connection-state=established,related\n"
            "add chain=input action=drop disabled=yes\n"
            "add chain=forward action=drop\n"
        )
        result = _only(text, "MIK-FW-001", vendor="mikrotik-routeros")
        assert result.failed
        assert result.level is Level.ERROR
        assert "no default drop rule" in result.message

    def test_vendor_rules_skip_other_vendors(self, junos_config: str) -> None:
        assert _results(junos_config, "JUN-SYS-001", vendor="nokia-sros") == []


class TestLibrary:
    """Fixed registry of built-in rules."""

    def test_ids_unique(self) -> None:
        ids = [rule.id for rule in default_rules()]
        assert len(ids) == len(set(ids))

    def test_agnostic_rules_first(self) -> None:
        rules = default_rules()
        assert [rule.id for rule in rules[:2]] == ["NET-IP-001", "NET-DOC-001"]
        assert all(rule.vendor is None for rule in rules[:2])
        assert all(rule.vendor is not None for rule in rules[2:])

    def test_every_module_registered(self) -> None:
        ids = {rule.id for rule in default_rules()}
        modules = (
            common, cisco, juniper, huawei, nokia, aruba,
            cumulus, arista, vyos, paloalto, fortinet, mikrotik,
        )
        for module in modules:
            assert {rule.id for rule in module.RULES} <= ids

    def test_get_rule(self) -> None:
        assert get_rule("NET-OSPF-001") is cisco.OSPF_NETWORK_MATCHES_INTERFACE
        assert get_rule("NOPE-001") is None

    def test_returns_fresh_list(self) -> None:
        default_rules().clear()
        assert default_rules()

"""Tests for the common and vendor helper libraries."""

from __future__ import annotations

import pytest

from netaudit.parser.parser import parse
from netaudit.parser.vendors import (
    ARISTA_EOS,
    ARUBA_AOSCX,
    CISCO_IOS,
    CUMULUS_LINUX,
    FORTINET_FORTIGATE,
    HUAWEI_VRP,
    JUNIPER_JUNOS,
    MIKROTIK_ROUTEROS,
    NOKIA_SROS,
    PALOALTO_PANOS,
    VYOS,
)
from netaudit.rules.helpers import (
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


class TestCommonIp:
    """IPv4 helpers operate on 32-bit integers."""

    def test_parse_ip(self) -> None:
        assert common.parse_ip("10.0.0.1") == 0x0A000001
        assert common.parse_ip(" 192.168.1.1 ") == 0xC0A80101

    @pytest.mark.parametrize("value", ["", "10.0.0", "256.0.0.1", "dhcp", "10.0.0.1/24"])
    def test_parse_ip_invalid(self, value: str) -> None:
        assert common.parse_ip(value) is None

    def test_num_to_ip(self) -> None:
        assert common.num_to_ip(0x0A000001) == "10.0.0.1"

    def test_masks(self) -> None:
        assert common.prefix_to_mask(24) == 0xFFFFFF00
        assert common.prefix_to_mask(0) == 0
        assert common.prefix_to_mask(33) == 0
        assert common.mask_to_prefix(0xFFFFFF00) == 24
        assert common.mask_to_prefix(0xFFFFFFFF) == 32

    def test_address_classes(self) -> None:
        assert common.is_multicast_address(common.parse_ip("224.0.0.5"))
        assert not common.is_multicast_address(common.parse_ip("10.0.0.1"))
        assert common.is_broadcast_address(0xFFFFFFFF)
        assert common.is_private_address(common.parse_ip("172.16.5.4"))
        assert not common.is_private_address(common.parse_ip("8.8.8.8"))

    def test_network_membership(self) -> None:
        mask = common.prefix_to_mask(24)
        assert common.is_ip_in_network(common.parse_ip("10.0.0.77"), common.parse_ip("10.0.0.0"), mask)
        assert common.is_ip_in_cidr("10.0.0.77", "10.0.0.0/24")
        assert not common.is_ip_in_cidr("10.0.1.1", "10.0.0.0/24")
        assert not common.is_ip_in_cidr("bogus", "10.0.0.0/24")


class TestCommonNumbers:
    """Ports and VLANs."""

    def test_ports(self) -> None:
        assert common.parse_port("22") == 22
        assert common.parse_port("0") is None
        assert common.parse_port("70000") is None
        assert common.parse_port_range("1-3,80,x") == [1, 2, 3, 80]

    def test_vlans(self) -> None:
        assert common.parse_vlan_id("4094") == 4094
        assert common.parse_vlan_id("4095") is None
        assert common.is_default_vlan("1")
        assert common.is_default_vlan(1)
        assert common.is_reserved_vlan(1003)
        assert not common.is_reserved_vlan(100)


class TestCommonNodes:
    """Node inspection helpers."""

    def test_child_commands(self) -> None:
        node = parse("interface Gi0/1\n description a\n ip address 10.0.0.1 255.255.255.0\n mtu 9000\n")[0]
        assert common.has_child_command(node, "DESCRIPTION")
        assert common.get_child_command(node, "ip address").params[2] == "10.0.0.1"
        assert len(common.get_child_commands(node, "")) == 0
        assert common.get_param_value(node.children[2], "mtu") == "9000"
        assert common.get_param_value(node.children[2], "speed") is None

    def test_is_shutdown_accepts_disable(self) -> None:
        assert common.is_shutdown(parse("interface Gi0/1\n shutdown\n")[0])
        assert common.is_shutdown(parse("ge-0/0/1 {\n    disable;\n}\n", JUNIPER_JUNOS)[0])

    def test_interface_definition_vs_reference(self) -> None:
        definition = parse("interface Gi0/1\n description x\n")[0]
        generic = parse("interface all\n description x\n")[0]
        reference = parse("interface ge-0/0/0 {\n    passive;\n}\n", JUNIPER_JUNOS)[0]
        leaf = parse("interface Gi0/1\n")[0]
        assert common.is_interface_definition(definition)
        assert not common.is_interface_definition(generic)
        assert not common.is_interface_definition(reference)
        assert not common.is_interface_definition(leaf)

    def test_feature_flags(self) -> None:
        assert common.is_feature_enabled("Enabled")
        assert not common.is_feature_enabled(None)
        assert common.is_feature_disabled(None)
        assert common.is_feature_disabled("off")


class TestCiscoHelpers:
    """Cisco IOS helpers."""

    def test_port_classification(self) -> None:
        assert cisco.is_physical_port("GigabitEthernet0/1")
        assert not cisco.is_physical_port("Loopback0")
        assert not cisco.is_physical_port("Port-channel1")

    def test_trunk_and_access(self) -> None:
        trunk = parse("interface Gi0/1\n switchport mode trunk\n")[0]
        access = parse("interface Gi0/2\n switchport mode access\n")[0]
        assert cisco.is_trunk_port(trunk)
        assert not cisco.is_trunk_port(access)
        assert cisco.is_access_port(access)

    def test_likely_trunk_by_description(self) -> None:
        node = parse("interface Gi0/1\n description Uplink to dist\n")[0]
        assert cisco.is_likely_trunk(node)

    def test_external_facing(self) -> None:
        assert cisco.is_external_facing(parse("interface Gi0/0\n description WAN: ISP-A\n")[0])
        assert not cisco.is_external_facing(parse("interface Gi0/0\n")[0])

    def test_weak_username_password(self) -> None:
        weak = parse("username admin privilege 15 password 0 cisco\n")[0]
        strong = parse("username admin algorithm-type scrypt secret x\n")[0]
        assert cisco.has_weak_username_password(weak)
        assert not cisco.has_weak_username_password(strong)

    def test_ssh_version(self) -> None:
        assert cisco.get_ssh_version(parse("ip ssh version 2\n")[0]) == 2
        assert cisco.get_ssh_version(parse("hostname r1\n")[0]) is None

    def test_vty_range(self) -> None:
        assert cisco.get_vty_line_range(parse("line vty 0 15\n")[0]) == (0, 15)
        assert cisco.get_vty_line_range(parse("line vty 5\n")[0]) == (5, 5)

    def test_dangerous_service(self) -> None:
        assert cisco.is_dangerous_service(parse("ip http server\n")[0])
        assert not cisco.is_dangerous_service(parse("ip http secure-server\n")[0])

    def test_default_snmp_community(self) -> None:
        assert cisco.is_default_snmp_community("PUBLIC")
        assert not cisco.is_default_snmp_community("x7-monitoring")


class TestVendorHelpers:
    """JunOS, Nokia, Huawei, Aruba and Cumulus helpers."""

    def test_juniper_root_authentication(self, junos_config: str) -> None:
        system = parse(junos_config, JUNIPER_JUNOS)[0]
        assert juniper.has_root_authentication(system)
        assert juniper.find_stanza(system, "ROOT-AUTHENTICATION") is not None
        assert juniper.find_stanza(system, "login") is None

    def test_juniper_address(self) -> None:
        assert juniper.parse_address("10.0.0.1/24") == (0x0A000001, 24, 0xFFFFFF00)
        assert juniper.parse_address("10.0.0.1") is None
        assert juniper.parse_address("10.0.0.1/40") is None

    def test_juniper_ports(self) -> None:
        assert juniper.is_physical_port("ge-0/0/0")
        assert juniper.is_physical_port("ae0")
        assert not juniper.is_physical_port("lo0")
        assert juniper.is_loopback("lo0")

    def test_nokia_system_name(self) -> None:
        tree = parse('system {\n    name "pe-1"\n}\n', NOKIA_SROS)
        assert nokia.get_system_name(tree[0]) == "pe-1"
        assert nokia.get_system_name(parse("system {\n}\n", NOKIA_SROS)[0]) is None

    def test_nokia_ports(self) -> None:
        assert nokia.is_physical_port("1/1/1")
        assert nokia.is_lag_port("lag-1")

    def test_huawei_interface(self) -> None:
        node = parse("interface GigabitEthernet0/0/1\n description uplink\n undo shutdown\n", HUAWEI_VRP)[0]
        assert huawei.is_enabled(node)
        assert huawei.has_description(node)
        assert huawei.is_physical_port("GigabitEthernet0/0/1")
        assert not huawei.is_physical_port("Vlanif10")

    def test_aruba_interface(self) -> None:
        node = parse("interface 1/1/1\n    no shutdown\n    vlan trunk allowed 10,20\n", ARUBA_AOSCX)[0]
        assert aruba.get_interface_name(node) == "1/1/1"
        assert aruba.is_physical_port("1/1/1")
        assert aruba.is_lag("lag1")
        assert not aruba.has_description(node)

    def test_cumulus_interface(self) -> None:
        node = parse("iface swp1\n    alias uplink\n    mtu 9216\n", CUMULUS_LINUX)[0]
        assert cumulus.get_interface_name(node) == "swp1"
        assert cumulus.is_switch_port("swp1")
        assert not cumulus.is_switch_port("eth0")
        assert cumulus.has_description(node)
        assert cumulus.get_mtu(node) == 9216


class TestAristaHelpers:
    """EOS interface and MLAG helpers."""

    PORT_CHANNEL = (
        "interface Port-Channel10\n"
        "   description mlag peer\n"
        "   switchport mode trunk\n"
        "   mlag 10\n"
    )

    def test_interface_types(self) -> None:
        node = parse("interface Ethernet1\n   shutdown\n", ARISTA_EOS)[0]
        assert arista.is_ethernet_interface(node)
        assert arista.is_shutdown(node)
        assert not arista.is_port_channel(node)
        assert arista.is_loopback(parse("interface Loopback0\n", ARISTA_EOS)[0])
        assert arista.is_svi(parse("interface Vlan10\n", ARISTA_EOS)[0])

    def test_no_shutdown_overrides_shutdown(self) -> None:
        node = parse("interface Ethernet2\n   shutdown\n   no shutdown\n", ARISTA_EOS)[0]
        assert not arista.is_shutdown(node)

    def test_port_channel(self) -> None:
        node = parse(self.PORT_CHANNEL, ARISTA_EOS)[0]
        assert arista.is_port_channel(node)
        assert arista.is_trunk_port(node)
        assert not arista.is_access_port(node)
        assert arista.get_interface_description(node) == "mlag peer"
        assert arista.get_mlag_id(node) == "10"

    def test_mlag_peer_link(self) -> None:
        tree = parse(self.PORT_CHANNEL + "mlag configuration\n   peer-link Port-Channel10\n", ARISTA_EOS)
        interface, mlag = tree
        assert arista.is_mlag_configuration(mlag)
        assert arista.is_mlag_peer_link(interface, mlag)
        assert not arista.is_mlag_peer_link(interface)

    def test_routed_interface(self) -> None:
        text = "interface Vlan10\n   vrf PROD\n   ip address 10.0.10.2/24\n   ip virtual-router address 10.0.10.1\n"
        node = parse(text, ARISTA_EOS)[0]
        assert arista.has_ip_address(node)
        assert arista.has_virtual_router_address(node)
        assert arista.get_interface_vrf(node) == "PROD"


class TestFortinetHelpers:
    """FortiOS `set` values and `edit` entries."""

    POLICY = (
        "config firewall policy\n"
        "    edit 1\n"
        '        set srcaddr "all"\n'
        '        set dstaddr "web-servers"\n'
        "        set action accept\n"
        '        set service "ALL"\n'
        '        set schedule "always"\n'
        "        set logtraffic all\n"
        '        set av-profile "default"\n'
        "    next\n"
        "    edit 2\n"
        "        set action deny\n"
        "        set status disable\n"
        "    next\n"
        "end\n"
    )

    def test_edit_entries(self) -> None:
        section = parse(self.POLICY, FORTINET_FORTIGATE)[0]
        entries = fortinet.get_edit_entries(section)
        assert [fortinet.get_edit_entry_name(entry) for entry in entries] == ["1", "2"]
        assert fortinet.find_edit_entry(section, '"2"') is entries[1]
        assert fortinet.find_edit_entry(section, "3") is None

    def test_policy_values(self) -> None:
        accept, deny = fortinet.get_edit_entries(parse(self.POLICY, FORTINET_FORTIGATE)[0])
        assert fortinet.get_set_value(accept, "dstaddr") == "web-servers"
        assert fortinet.is_policy_accept(accept)
        assert fortinet.has_any_src_addr(accept)
        assert not fortinet.has_any_dst_addr(accept)
        assert fortinet.has_any_service(accept)
        assert fortinet.is_always_schedule(accept)
        assert fortinet.has_traffic_logging(accept)
        assert fortinet.has_security_profile(accept)
        assert fortinet.is_policy_deny(deny)
        assert fortinet.is_policy_disabled(deny)
        assert not fortinet.has_traffic_logging(deny)
        assert fortinet.get_set_value(deny, "logtraffic") is None

    def test_interface_access(self) -> None:
        text = 'config system interface\n    edit "port1"\n        set allowaccess ping https ssh\n    next\nend\n'
        interface = fortinet.get_edit_entries(parse(text, FORTINET_FORTIGATE)[0])[0]
        assert fortinet.get_interface_allow_access(interface) == ["ping", "https", "ssh"]
        assert fortinet.has_http_management(interface)
        assert fortinet.has_ssh_access(interface)
        assert not fortinet.has_telnet_access(interface)

    def test_ha_mode(self) -> None:
        standalone = parse("config system ha\n    set mode standalone\nend\n", FORTINET_FORTIGATE)[0]
        active = parse("config system ha\n    set mode a-p\nend\n", FORTINET_FORTIGATE)[0]
        assert not fortinet.is_ha_enabled(standalone)
        assert fortinet.is_ha_enabled(active)


class TestVyosHelpers:
    """VyOS stanza, firewall and interface name helpers."""

    def test_interface_stanzas(self) -> None:
        text = (
            "interfaces {\n"
            "    ethernet eth0 {\n"
            "        address 10.0.0.1/24\n"
            "        vif 10 {\n"
            "            address 10.10.0.1/24\n"
            "        }\n"
            "    }\n"
            "    ethernet eth1 {\n"
            "        disable\n"
            "    }\n"
            "    loopback lo {\n"
            "    }\n"
            "}\n"
        )
        interfaces = parse(text, VYOS)[0]
        eth0, eth1 = vyos.get_ethernet_interfaces(interfaces)
        assert [vif.id for vif in vyos.get_vif_interfaces(eth0)] == ["vif 10"]
        assert vyos.is_disabled(eth1)
        assert not vyos.is_disabled(eth0)
        assert vyos.find_stanza(interfaces, "loopback lo") is not None

    def test_parse_address(self) -> None:
        assert vyos.parse_address("10.0.0.1/24") == (0x0A000001, 24, 0xFFFFFF00)
        assert vyos.parse_address("dhcp") is None
        assert vyos.parse_address("10.0.0.1/40") is None

    @pytest.mark.parametrize(
        ("predicate", "name"),
        [
            ("is_physical_port", "ethernet eth0"),
            ("is_physical_port", "eth3"),
            ("is_loopback", "lo"),
            ("is_bonding_interface", "bond0"),
            ("is_bridge_interface", "bridge br0"),
            ("is_wireguard_interface", "wg0"),
            ("is_tunnel_interface", "vti1"),
        ],
    )
    def test_interface_names(self, predicate: str, name: str) -> None:
        assert getattr(vyos, predicate)(name)

    def test_interface_names_negative(self) -> None:
        assert not vyos.is_physical_port("bond0")
        assert not vyos.is_loopback("eth0")
        assert not vyos.is_tunnel_interface("eth0")

    def test_firewall_ruleset(self) -> None:
        text = (
            "firewall {\n"
            "    name WAN_IN {\n"
            "        default-action drop\n"
            "        rule 10 {\n"
            "            action accept\n"
            "        }\n"
            "    }\n"
            "}\n"
        )
        ruleset = parse(text, VYOS)[0].children[0]
        assert vyos.get_firewall_default_action(ruleset) == "drop"
        (rule,) = vyos.get_firewall_rules(ruleset)
        assert vyos.get_firewall_rule_action(rule) == "accept"

    def test_services(self) -> None:
        service = parse("service {\n    ssh {\n        port 22\n    }\n}\n", VYOS)[0]
        system = parse("system {\n    ntp {\n        server 10.0.0.5\n    }\n}\n", VYOS)[0]
        assert vyos.has_ssh_service(service)
        assert not vyos.has_dhcp_server(service)
        assert vyos.has_ntp_config(system)
        assert not vyos.has_syslog_config(system)


class TestPaloAltoHelpers:
    """PAN-OS security rule and interface helpers."""

    RULEBASE = (
        "rulebase {\n"
        "    security {\n"
        "        rules {\n"
        "            allow-web {\n"
        "                from trust;\n"
        "                to untrust;\n"
        "                source [ 10.0.0.0/8 any ];\n"
        "                destination {\n"
        "                    any;\n"
        "                }\n"
        "                application any;\n"
        "                action allow;\n"
        "                log-start yes;\n"
        "            }\n"
        "            block-all {\n"
        "                action deny;\n"
        "                log-end no;\n"
        "                disabled yes;\n"
        "                profile-setting {\n"
        "                    group default;\n"
        "                }\n"
        "            }\n"
        "        }\n"
        "    }\n"
        "}\n"
    )

    def test_security_rules(self) -> None:
        rules = paloalto.get_security_rules(parse(self.RULEBASE, PALOALTO_PANOS)[0])
        assert [rule.id for rule in rules] == ["allow-web", "block-all"]

    def test_members_inline_and_stanza(self) -> None:
        allow, _ = paloalto.get_security_rules(parse(self.RULEBASE, PALOALTO_PANOS)[0])
        assert paloalto.get_members(allow, "source") == ["10.0.0.0/8", "any"]
        assert paloalto.get_members(allow, "destination") == ["any"]
        assert paloalto.get_source_zones(allow) == ["trust"]
        assert paloalto.get_destination_zones(allow) == ["untrust"]
        assert paloalto.has_any_source(allow)
        assert paloalto.has_any_destination(allow)
        assert paloalto.has_any_application(allow)
        assert not paloalto.has_any_service(allow)

    def test_rule_state(self) -> None:
        allow, block = paloalto.get_security_rules(parse(self.RULEBASE, PALOALTO_PANOS)[0])
        assert paloalto.is_allow_rule(allow)
        assert paloalto.has_log_end(allow)
        assert paloalto.has_log_start(allow)
        assert not paloalto.is_rule_disabled(allow)
        assert not paloalto.has_security_profile(allow)
        assert paloalto.is_deny_rule(block)
        assert not paloalto.has_log_end(block)
        assert not paloalto.has_log_start(block)
        assert paloalto.is_rule_disabled(block)
        assert paloalto.has_security_profile(block)

    def test_interface_names(self) -> None:
        assert paloalto.is_physical_ethernet_port("ethernet1/1")
        assert not paloalto.is_physical_ethernet_port("ethernet1/1.10")
        assert paloalto.is_loopback_interface("loopback.1")
        assert paloalto.is_tunnel_interface("tunnel.5")
        assert paloalto.is_aggregate_interface("ae1")

    def test_zone_protection(self) -> None:
        zone = parse("untrust {\n    zone-protection-profile strict;\n}\n", PALOALTO_PANOS)[0]
        assert paloalto.has_zone_protection_profile(zone)


class TestMikrotikHelpers:
    """RouterOS `/path` sections and key=value properties."""

    EXPORT = (
        "/ip firewall filter\n"
        'add chain=input action=drop comment="drop all"\n'
        "add chain=forward action=accept disabled=yes\n"
        "/system identity\n"
        "set name=core-rtr\n"
    )

    def test_path_sections(self) -> None:
        firewall, identity = parse(self.EXPORT, MIKROTIK_ROUTEROS)
        assert mikrotik.is_path_block(firewall, "ip firewall filter")
        assert mikrotik.is_path_block(identity, "/system identity")
        assert len(mikrotik.get_add_commands(firewall)) == 2
        assert mikrotik.get_set_commands(firewall) == []
        assert mikrotik.get_system_identity(identity) == "core-rtr"

    def test_firewall_properties(self) -> None:
        firewall = parse(self.EXPORT, MIKROTIK_ROUTEROS)[0]
        drop, accept = mikrotik.get_add_commands(firewall)
        assert mikrotik.get_firewall_chain(drop) == "input"
        assert mikrotik.get_firewall_action(drop) == "drop"
        assert mikrotik.get_comment(drop) == "drop all"
        assert not mikrotik.is_disabled_resource(drop)
        assert mikrotik.is_disabled_resource(accept)

    def test_property_names_match_whole_keys(self) -> None:
        command = "add in-interface=ether1 chain=input"
        assert mikrotik.parse_property(command, "interface") is None
        assert mikrotik.get_interface(command) == "ether1"
        assert mikrotik.is_add_command(command)
        assert not mikrotik.is_set_command(command)

    def test_service_port(self) -> None:
        assert mikrotik.get_service_port("set ssh port=2222") == 2222
        assert mikrotik.get_service_port("set telnet disabled=yes") is None
        assert mikrotik.is_service_disabled("set telnet disabled=yes")

    def test_interface_names(self) -> None:
        assert mikrotik.is_physical_interface("ether1")
        assert mikrotik.is_physical_interface("sfp-sfpplus1")
        assert not mikrotik.is_physical_interface("bridge1")
        assert mikrotik.is_bridge_interface("bridge1")
        assert mikrotik.is_vlan_interface("vlan100")
        assert mikrotik.is_bonding_interface("bond1")
        assert mikrotik.is_loopback("lo")

"""Built-in vendor schemas and the vendor-id lookup table.

Schemas are loaded from a fixed registry. Callers resolve a vendor id
once per scan with get_schema(). Vendor auto-detection lives outside the
core; an unknown id is a caller error.
"""

from __future__ import annotations

from netaudit.errors import UnknownVendorError
from netaudit.parser.schema import ScopeStyle, VendorSchema, patterns, scopes

# --- Indentation-scoped dialects ---

# Named IOS-family enders and the section each one closes
_CISCO_ENDER_SCOPES = scopes(
    (r"^exit-address-family$", r"^address-family\b"),
    (r"^exit-af-interface$", r"^af-interface\b"),
    (r"^exit-af-topology$", r"^topology\b"),
    (r"^exit-service-family$", r"^service-family\b"),
    (r"^exit-sf-topology$", r"^topology\b"),
    (r"^exit-vrf$", r"^vrf\b"),
)

CISCO_IOS = VendorSchema(
    id="cisco-ios",
    name="Cisco IOS/IOS-XE",
    scope_style=ScopeStyle.INDENT,
    comment_prefixes=("!",),
    case_sensitive=False,
    block_starters=patterns(
        r"^interface\s+\S+",
        r"^router\s+\S+",
        r"^vlan\s+\d+",
        r"^ip\s+access-list\s+\S+",
        r"^ipv6\s+access-list\s+\S+",
        r"^ip\s+dhcp\s+pool\s+\S+",
        r"^ip\s+sla\s+\d+",
        r"^ip\s+vrf\s+\S+",
        r"^vrf\s+definition\s+\S+",
        r"^route-map\s+\S+",
        r"^class-map\s+\S+",
        r"^policy-map\s+\S+",
        r"^class\s+\S+",
        r"^crypto\s+map\s+\S+",
        r"^crypto\s+isakmp\s+policy\s+\S+",
        r"^crypto\s+ipsec\s+(transform-set|profile)\s+\S+",
        r"^crypto\s+pki\s+trustpoint\s+\S+",
        r"^line\s+(vty|console|aux|\d+)\b",
        r"^object-group\s+\S+",
        r"^aaa\s+group\s+server\s+\S+",
        r"^key\s+chain\s+\S+",
        r"^track\s+\d+",
        r"^tacacs\s+server\s+\S+",
        r"^radius\s+server\s+\S+",
        r"^controller\s+\S+",
        r"^control-plane$",
        r"^redundancy$",
        r"^archive$",
        r"^address-family\s+\S+",
        r"^af-interface\s+\S+",
        r"^service-family\s+\S+",
        r"^topology\s+\S+",
    ),
    block_enders=patterns(
        r"^exit-address-family$",
        r"^exit-af-interface$",
        r"^exit-af-topology$",
        r"^exit-service-family$",
        r"^exit-sf-topology$",
        r"^exit-vrf$",
        r"^exit$",
    ),
    ender_scopes=_CISCO_ENDER_SCOPES,
    helper_namespace="cisco",
)

CISCO_NXOS = VendorSchema(
    id="cisco-nxos",
    name="Cisco NX-OS",
    scope_style=ScopeStyle.INDENT,
    comment_prefixes=("!",),
    case_sensitive=False,
    block_starters=patterns(
        r"^interface\s+\S+",
        r"^router\s+\S+",
        r"^vlan\s+\d+",
        r"^(ip|ipv6|mac)\s+access-list\s+\S+",
        r"^route-map\s+\S+",
        r"^class-map\s+\S+",
        r"^policy-map\s+\S+",
        r"^class\s+\S+",
        r"^line\s+(vty|console)\b",
        r"^aaa\s+group\s+server\s+\S+",
        r"^vrf\s+context\s+\S+",
        r"^vpc\s+domain\s+\d+",
        r"^role\s+name\s+\S+",
        r"^control-plane$",
        r"^spanning-tree\s+mst\s+configuration$",
        r"^address-family\s+\S+",
        r"^template\s+peer\s+\S+",
        r"^neighbor\s+\S+",
        r"^vrf\s+(?!member\b)\S+",
    ),
    block_enders=patterns(r"^exit$"),
    helper_namespace="cisco",
)

ARISTA_EOS = VendorSchema(
    id="arista-eos",
    name="Arista EOS",
    scope_style=ScopeStyle.INDENT,
    comment_prefixes=("!",),
    case_sensitive=False,
    block_starters=patterns(
        r"^interface\s+\S+",
        r"^router\s+\S+",
        r"^vlan\s+\d+",
        r"^(ip|ipv6|mac)\s+access-list\s+\S+",
        r"^(ip|ipv6)\s+prefix-list\s+\S+$",
        r"^route-map\s+\S+",
        r"^class-map\s+\S+",
        r"^policy-map\s+\S+",
        r"^control-plane$",
        r"^line\s+(vty|console|\d+)\b",
        r"^vrf\s+(instance|definition)\s+\S+",
        r"^mlag\s+configuration$",
        r"^management\s+\S+",
        r"^daemon\s+\S+",
        r"^event-handler\s+\S+",
        r"^monitor\s+session\s+\S+$",
        r"^address-family\s+\S+",
    ),
    block_enders=patterns(r"^exit-address-family$", r"^exit$"),
    ender_scopes=_CISCO_ENDER_SCOPES,
    helper_namespace="arista",
)

ARUBA_AOSCX = VendorSchema(
    id="aruba-aoscx",
    name="Aruba AOS-CX",
    scope_style=ScopeStyle.INDENT,
    comment_prefixes=("!",),
    case_sensitive=False,
    block_starters=patterns(
        r"^interface\s+\S+",
        r"^vlan\s+\d+",
        r"^vrf\s+\S+",
        r"^router\s+(ospf|ospfv3|bgp)\s+\S+",
        r"^access-list\s+(ip|ipv6|mac)\s+\S+",
        r"^route-map\s+\S+",
        r"^aaa\s+group\s+server\s+\S+",
        r"^class\s+\S+",
        r"^policy\s+\S+",
        r"^vsx$",
        r"^address-family\s+\S+",
    ),
    block_enders=patterns(r"^exit-address-family$", r"^exit$"),
    ender_scopes=_CISCO_ENDER_SCOPES,
    helper_namespace="aruba",
)

HUAWEI_VRP = VendorSchema(
    id="huawei-vrp",
    name="Huawei VRP",
    scope_style=ScopeStyle.INDENT,
    comment_prefixes=("!",),
    # A bare '#' separates stanzas; '#' followed by text is not a comment in VRP
    comment_patterns=patterns(r"^#$"),
    case_sensitive=False,
    block_starters=patterns(
        r"^interface\s+\S+",
        r"^(ospf|ospfv3|bgp|isis|rip)\s+\d+",
        r"^area\s+\S+",
        r"^mpls(\s+(ldp|l2vpn|te))?$",
        r"^vlan\s+\d+$",
        r"^aaa$",
        r"^acl\s+(name\s+\S+|(number\s+)?\d+)",
        r"^traffic\s+(classifier|behavior|policy)\s+\S+",
        r"^user-interface\s+\S+",
        r"^radius-server\s+template\s+\S+",
        r"^hwtacacs-server\s+template\s+\S+",
        r"^ip\s+vpn-instance\s+\S+",
        r"^ip\s+pool\s+\S+",
        r"^(ipsec|ike)\s+(proposal|policy|peer)\s+\S+",
        r"^ipv4-family\b",
        r"^ipv6-family\b",
    ),
    block_enders=patterns(r"^quit$", r"^return$"),
    helper_namespace="huawei",
)

CUMULUS_LINUX = VendorSchema(
    id="cumulus-linux",
    name="NVIDIA Cumulus Linux",
    scope_style=ScopeStyle.INDENT,
    comment_prefixes=("#", "!"),
    continuation_suffix="\\",
    case_sensitive=True,
    block_starters=patterns(
        r"^iface\s+\S+",
        r"^interface\s+\S+",
        r"^router\s+(bgp|ospf|ospf6|rip|ripng|isis|pim)\b",
        r"^route-map\s+\S+",
        r"^vrf\s+\S+",
        r"^line\s+vty$",
        r"^pbr-map\s+\S+",
        r"^nexthop-group\s+\S+",
        r"^address-family\s+\S+",
    ),
    block_enders=patterns(r"^exit-address-family$", r"^exit-vrf$", r"^exit$"),
    ender_scopes=_CISCO_ENDER_SCOPES,
    helper_namespace="cumulus",
)

# --- Brace-scoped dialects ---

JUNIPER_JUNOS = VendorSchema(
    id="juniper-junos",
    name="Juniper JunOS",
    scope_style=ScopeStyle.BRACE,
    comment_prefixes=("#",),
    comment_patterns=patterns(r"^/\*.*\*/$"),
    case_sensitive=True,
    statement_terminator=";",
    helper_namespace="juniper",
)

NOKIA_SROS = VendorSchema(
    id="nokia-sros",
    name="Nokia SR OS (MD-CLI)",
    scope_style=ScopeStyle.BRACE,
    comment_prefixes=("#",),
    comment_patterns=patterns(r'^echo\s+".*"$'),
    case_sensitive=True,
    helper_namespace="nokia",
)

VYOS = VendorSchema(
    id="vyos",
    name="VyOS/EdgeOS",
    scope_style=ScopeStyle.BRACE,
    comment_prefixes=("#",),
    comment_patterns=patterns(r"^/\*.*\*/$"),
    case_sensitive=True,
    helper_namespace="vyos",
)

PALOALTO_PANOS = VendorSchema(
    id="paloalto-panos",
    name="Palo Alto PAN-OS",
    scope_style=ScopeStyle.BRACE,
    comment_prefixes=("#", "//"),
    comment_patterns=patterns(r"^/\*.*\*/$"),
    case_sensitive=True,
    statement_terminator=";",
    helper_namespace="paloalto",
)

# --- Keyword-scoped (flat command-staging) dialects ---

FORTINET_FORTIGATE = VendorSchema(
    id="fortinet-fortigate",
    name="Fortinet FortiGate (FortiOS)",
    scope_style=ScopeStyle.KEYWORD,
    comment_prefixes=("#", "//"),
    case_sensitive=False,
    block_openers=patterns(r"^config\s+\S+", r"^edit\s+\S+"),
    block_enders=patterns(r"^end$", r"^next$"),
    helper_namespace="fortinet",
)

MIKROTIK_ROUTEROS = VendorSchema(
    id="mikrotik-routeros",
    name="MikroTik RouterOS",
    scope_style=ScopeStyle.KEYWORD,
    comment_prefixes=("#",),
    continuation_suffix="\\",
    case_sensitive=True,
    exclusive_openers=patterns(r"^/[a-z0-9]"),
    helper_namespace="mikrotik",
)


VENDOR_SCHEMAS: dict[str, VendorSchema] = {
    schema.id: schema
    for schema in (
        CISCO_IOS,
        CISCO_NXOS,
        ARISTA_EOS,
        ARUBA_AOSCX,
        HUAWEI_VRP,
        CUMULUS_LINUX,
        JUNIPER_JUNOS,
        NOKIA_SROS,
        VYOS,
        PALOALTO_PANOS,
        FORTINET_FORTIGATE,
        MIKROTIK_ROUTEROS,
    )
}

DEFAULT_VENDOR = CISCO_IOS


def get_schema(vendor_id: str) -> VendorSchema:
    """Resolve a vendor id to its schema.

    Raises:
        UnknownVendorError: If no schema is registered for the id.
    """
    schema = VENDOR_SCHEMAS.get(vendor_id.strip().lower())
    if schema is None:
        raise UnknownVendorError(vendor_id)
    return schema


def available_vendors() -> list[str]:
    """Sorted list of registered vendor ids."""
    return sorted(VENDOR_SCHEMAS)

"""Tests for the namespaced helper registry."""

from __future__ import annotations

import pytest

from netaudit.errors import RuleCompileError, UnknownHelperError
from netaudit.parser.vendors import VENDOR_SCHEMAS
from netaudit.rules.helpers import cisco, common, juniper
from netaudit.rules.registry import HelperRegistry, default_registry


class TestLookup:
    """Dotted and undotted helper resolution."""

    def test_dotted_vendor_name(self) -> None:
        assert default_registry().resolve("cisco.isTrunkPort") is cisco.is_trunk_port

    def test_dotted_common_name(self) -> None:
        assert default_registry().resolve("common.parseIp") is common.parse_ip

    def test_undotted_prefers_caller_namespace(self) -> None:
        """isShutdown exists in both tables; the vendor version wins."""
        registry = default_registry()
        assert registry.resolve("isShutdown", "cisco") is cisco.is_shutdown
        assert registry.resolve("isShutdown") is common.is_shutdown

    def test_undotted_falls_back_to_common(self) -> None:
        assert default_registry().resolve("parseIp", "juniper") is common.parse_ip

    def test_undotted_vendor_only_name_needs_namespace(self) -> None:
        registry = default_registry()
        assert registry.has("hasRootAuthentication", "juniper")
        assert not registry.has("hasRootAuthentication")

    def test_namespace_without_table_uses_common(self) -> None:
        """Dialects without a helper table (fortinet) still see common helpers."""
        assert default_registry().resolve("parseVlanId", "fortinet") is common.parse_vlan_id

    def test_unknown_helper_raises(self) -> None:
        with pytest.raises(UnknownHelperError, match="cisco.noSuchHelper") as exc_info:
            default_registry().resolve("cisco.noSuchHelper", rule_id="CUSTOM-001")
        assert exc_info.value.rule_id == "CUSTOM-001"
        assert isinstance(exc_info.value, RuleCompileError)

    def test_unknown_namespace_raises(self) -> None:
        with pytest.raises(UnknownHelperError):
            default_registry().resolve("nosuchvendor.isTrunkPort")

    @pytest.mark.parametrize("name", [".isTrunkPort", "cisco.", "."])
    def test_malformed_dotted_names(self, name: str) -> None:
        assert not default_registry().has(name)


class TestRegistryContents:
    """Registry construction and listing."""

    def test_default_registry_cached(self) -> None:
        assert default_registry() is default_registry()

    def test_namespaces(self) -> None:
        assert default_registry().namespaces == [
            "arista",
            "aruba",
            "cisco",
            "cumulus",
            "fortinet",
            "huawei",
            "juniper",
            "mikrotik",
            "nokia",
            "paloalto",
            "vyos",
        ]

    def test_every_vendor_namespace_registered(self) -> None:
        namespaces = set(default_registry().namespaces)
        for schema in VENDOR_SCHEMAS.values():
            assert schema.helper_namespace in namespaces, schema.id

    @pytest.mark.parametrize(
        "name",
        [
            "arista.isShutdown",
            "fortinet.hasTelnetAccess",
            "vyos.isDisabled",
            "paloalto.isAllowRule",
            "mikrotik.isDisabledResource",
        ],
    )
    def test_dialect_helpers_resolve(self, name: str) -> None:
        assert callable(default_registry().resolve(name))

    def test_names_lists_common_bare_and_vendor_dotted(self) -> None:
        names = default_registry().names()
        assert "parseIp" in names
        assert "cisco.isTrunkPort" in names
        assert "juniper.hasRootAuthentication" in names
        assert names == sorted(names)

    def test_custom_registry(self) -> None:
        registry = HelperRegistry({"always": lambda: True}, {"lab": {"isRoot": juniper.has_root_authentication}})
        assert registry.resolve("always")() is True
        assert registry.resolve("isRoot", "lab") is juniper.has_root_authentication
        assert registry.names() == ["always", "lab.isRoot"]

"""Helper registry for JSON rules.

Helpers are loaded from fixed module-level tables, never through dynamic imports.
Names are camelCase. A dotted name (`cisco.isTrunkPort`) selects a vendor
namespace explicitly; an undotted name is looked up in the caller's
namespace first, then in the common table.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from functools import lru_cache
from typing import Any

from netaudit.errors import UnknownHelperError
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

HelperFn = Callable[..., Any]

COMMON_NAMESPACE = "common"


class HelperRegistry:
    """Namespaced lookup table of helper functions.

    Args:
        common_helpers: Vendor-agnostic helpers available without a prefix.
        vendor_helpers: Helper tables keyed by namespace (`cisco`, `juniper`, ...).
    """

    def __init__(
        self,
        common_helpers: Mapping[str, HelperFn],
        vendor_helpers: Mapping[str, Mapping[str, HelperFn]],
    ) -> None:
        self._common = dict(common_helpers)
        self._vendors = {namespace: dict(table) for namespace, table in vendor_helpers.items()}

    @property
    def namespaces(self) -> list[str]:
        return sorted(self._vendors)

    def lookup(self, qualified_name: str, namespace: str | None = None) -> HelperFn | None:
        """Resolve a helper, returning None if it does not exist."""
        if "." in qualified_name:
            prefix, _, name = qualified_name.partition(".")
            if not prefix or not name:
                return None
            if prefix == COMMON_NAMESPACE:
                return self._common.get(name)
            return self._vendors.get(prefix, {}).get(name)

        if namespace and namespace in self._vendors:
            helper = self._vendors[namespace].get(qualified_name)
            if helper is not None:
                return helper
        return self._common.get(qualified_name)

    def resolve(
        self,
        qualified_name: str,
        namespace: str | None = None,
        rule_id: str | None = None,
    ) -> HelperFn:
        """Resolve a helper or fail.

        Raises:
            UnknownHelperError: If neither the vendor namespace nor the common
                table has the name.
        """
        helper = self.lookup(qualified_name, namespace)
        if helper is None:
            raise UnknownHelperError(qualified_name, rule_id=rule_id)
        return helper

    def has(self, qualified_name: str, namespace: str | None = None) -> bool:
        return self.lookup(qualified_name, namespace) is not None

    def names(self) -> list[str]:
        """Every helper name: common names bare, vendor names dotted."""
        result = list(self._common)
        for namespace, table in self._vendors.items():
            result.extend(f"{namespace}.{name}" for name in table)
        return sorted(result)


@lru_cache(maxsize=1)
def default_registry() -> HelperRegistry:
    """The built-in registry, built once per process."""
    return HelperRegistry(
        common.HELPERS,
        {
            "arista": arista.HELPERS,
            "aruba": aruba.HELPERS,
            "cisco": cisco.HELPERS,
            "cumulus": cumulus.HELPERS,
            "fortinet": fortinet.HELPERS,
            "huawei": huawei.HELPERS,
            "juniper": juniper.HELPERS,
            "mikrotik": mikrotik.HELPERS,
            "nokia": nokia.HELPERS,
            "paloalto": paloalto.HELPERS,
            "vyos": vyos.HELPERS,
        },
    )

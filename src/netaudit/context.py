"""Per-run read-only context handed to every rule check.

Single-node rules ignore it. Rules that reason across the whole file (an
OSPF network statement checked against every interface address) use the
tree accessors, which are computed once per run and cached.
"""

from __future__ import annotations

from functools import cached_property

from netaudit.models import ConfigNode, ConfigTree, walk
from netaudit.rules.helpers.common import parse_ip, starts_with_ignore_case


class Context:
    """Read-only view of the scan shared by every (rule, node) invocation.

    Args:
        tree: The full top-level tree of the configuration being scanned.
        vendor: The resolved vendor id of the scan, if known.
    """

    def __init__(self, tree: ConfigTree, vendor: str | None = None) -> None:
        self._tree = tuple(tree)
        self._vendor = vendor

    @property
    def vendor(self) -> str | None:
        return self._vendor

    def get_ast(self) -> ConfigTree:
        """Return the full top-level tree."""
        return self._tree

    def iter_nodes(self) -> tuple[ConfigNode, ...]:
        """Every node of the tree in document order."""
        return self._all_nodes

    def interface_addresses(self) -> tuple[int, ...]:
        """IPv4 addresses (as integers) of every interface `ip address` line."""
        return self._interface_addresses

    @cached_property
    def _all_nodes(self) -> tuple[ConfigNode, ...]:
        return tuple(walk(self._tree))

    @cached_property
    def _interface_addresses(self) -> tuple[int, ...]:
        addresses: list[int] = []
        for node in self._all_nodes:
            if not node.params or node.params[0].lower() != "interface":
                continue
            for child in node.children:
                if not starts_with_ignore_case(child.id, "ip address") or len(child.params) < 3:
                    continue
                address = parse_ip(child.params[2].split("/")[0])
                if address is not None:
                    addresses.append(address)
        return tuple(addresses)

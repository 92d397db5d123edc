"""Rule engine: runs rules against a parsed configuration tree.

Traversal is depth-first in document order and every node is visited
once. For each node the engine runs every rule whose selector matches and
whose vendor filter admits the scan's vendor, in rule-list order. Rules
never see each other's results, so a broken check cannot affect any other
(rule, node) pair: its exception is converted into a single error-level
failure and the run continues.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from netaudit.context import Context
from netaudit.models import ConfigNode, ConfigTree, Level, Outcome, Rule, RuleResult, walk

logger = structlog.get_logger()

RULE_ERROR_PREFIX = "Rule execution error"


def selector_tokens(selector: str | None) -> tuple[str, ...]:
    if selector is None:
        return ()
    return tuple(selector.lower().split())


def matches_selector(node: ConfigNode, selector: str | None) -> bool:
    """Token-prefix match of a selector against a node id.

    Case-insensitive and whitespace-normalized: "interface" matches
    "interface Gi0/1" but not "interfaces". A None selector matches
    every node.
    """
    wanted = selector_tokens(selector)
    if not wanted:
        return True
    tokens = node.id.lower().split()
    return tuple(tokens[: len(wanted)]) == wanted


class _RuleIndex:
    """Rules bucketed by the first token of their selector."""

    def __init__(self, rules: Sequence[Rule]) -> None:
        self._by_token: dict[str, list[tuple[int, Rule, tuple[str, ...]]]] = {}
        self._universal: list[tuple[int, Rule, tuple[str, ...]]] = []
        for position, rule in enumerate(rules):
            tokens = selector_tokens(rule.selector)
            entry = (position, rule, tokens)
            if tokens:
                self._by_token.setdefault(tokens[0], []).append(entry)
            else:
                self._universal.append(entry)

    def candidates(self, node: ConfigNode) -> list[Rule]:
        """Rules matching the node's selector, in original rule order."""
        node_tokens = tuple(node.id.lower().split())
        first = node_tokens[0] if node_tokens else ""
        matched = [
            (position, rule)
            for position, rule, tokens in self._by_token.get(first, ())
            if node_tokens[: len(tokens)] == tokens
        ]
        matched.extend((position, rule) for position, rule, _ in self._universal)
        matched.sort(key=lambda item: item[0])
        return [rule for _, rule in matched]


class RuleEngine:
    """Stateless executor for a list of rules.

    Native rules and compiled JSON rules are run the same way.
    """

    def run(
        self,
        tree: ConfigTree,
        rules: Iterable[Rule],
        vendor: str | None = None,
    ) -> list[RuleResult]:
        """Run every applicable rule against every matching node.

        Args:
            tree: Top-level nodes produced by the parser.
            rules: Rules to evaluate, in reporting order.
            vendor: Vendor id of the configuration. With no vendor only
                vendor-agnostic rules run.

        Returns:
            Results ordered by (node document order, rule order).
        """
        active = [rule for rule in rules if rule.applies_to_vendor(vendor)]
        if not active:
            return []

        index = _RuleIndex(active)
        context = Context(tree, vendor)
        results: list[RuleResult] = []
        for node in walk(tree):
            for rule in index.candidates(node):
                result = self._run_check(rule, node, context)
                if result is not None:
                    results.append(result)
        return results

    @staticmethod
    def _run_check(rule: Rule, node: ConfigNode, context: Context) -> RuleResult | None:
        try:
            return rule.check(node, context)
        except Exception as exc:
            logger.error(
                "rule_check_error",
                rule_id=rule.id,
                node_id=node.id,
                line=node.loc.start_line,
                error=str(exc),
            )
            return RuleResult(
                outcome=Outcome.FAIL,
                message=f"{RULE_ERROR_PREFIX}: {exc}",
                rule_id=rule.id,
                node_id=node.id,
                level=Level.ERROR,
                loc=node.loc,
            )

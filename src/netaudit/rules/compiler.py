"""Compiles declarative JSON rules into executable Rule objects.

A JsonCheck tree is turned into a single Predicate closure once, at load
time: regexes are compiled, helpers resolved and expressions parsed up
front, so evaluation does no lookups. The resulting Rule has the same
shape as a natively coded one and the engine cannot tell them apart.

A JSON check describes the violating condition: a true predicate is a
failure.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import Any

from netaudit.context import Context
from netaudit.errors import RuleCompileError
from netaudit.models import ConfigNode, Rule, RuleResult, normalize_vendor
from netaudit.parser.vendors import VENDOR_SCHEMAS
from netaudit.rules import dsl
from netaudit.rules.expressions import compile_expression
from netaudit.rules.registry import HelperRegistry, default_registry

Predicate = Callable[[ConfigNode, Context], bool]

DEFAULT_FAILURE_MESSAGE = "{ruleId}: Check failed"
DEFAULT_SUCCESS_MESSAGE = "{ruleId}: Check passed"


def format_message(template: str, node_id: str, rule_id: str) -> str:
    return template.replace("{nodeId}", node_id).replace("{ruleId}", rule_id)


def helper_namespace(vendor: str | Iterable[str] | None) -> str | None:
    """Helper namespace implied by a rule's vendor declaration.

    A rule bound to vendors that share one namespace (cisco-ios and
    cisco-nxos both map to `cisco`) gets that namespace; anything else
    resolves undotted names against the common table only.
    """
    vendors = normalize_vendor(vendor)
    if not vendors:
        return None
    namespaces = {
        VENDOR_SCHEMAS[vendor_id].helper_namespace
        for vendor_id in vendors
        if vendor_id in VENDOR_SCHEMAS
    }
    if len(namespaces) == 1:
        return namespaces.pop()
    return None


def _children_by_prefix(node: ConfigNode, prefix: str) -> list[ConfigNode]:
    prefix = prefix.lower()
    return [child for child in node.children if child.id.lower().startswith(prefix)]


def _ref_resolver(ref: str) -> Callable[[ConfigNode, Context], Any]:
    if ref == "node":
        return lambda node, context: node
    if ref == "context":
        return lambda node, context: context
    if ref == "node.id":
        return lambda node, context: node.id
    if ref == "node.type":
        return lambda node, context: node.type.value
    if ref == "node.params":
        return lambda node, context: node.params
    if ref == "node.children":
        return lambda node, context: node.children
    return lambda node, context: node.raw_text


class PredicateCompiler:
    """Turns JsonCheck trees into predicates.

    Args:
        registry: Helper registry used to resolve `helper` checks.
    """

    def __init__(self, registry: HelperRegistry | None = None) -> None:
        self._registry = registry or default_registry()
        self._dispatch: dict[type, Callable[..., Predicate]] = {
            dsl.MatchCheck: self._match,
            dsl.NotMatchCheck: self._not_match,
            dsl.ContainsCheck: self._contains,
            dsl.NotContainsCheck: self._not_contains,
            dsl.ChildExistsCheck: self._child_exists,
            dsl.ChildNotExistsCheck: self._child_not_exists,
            dsl.ChildMatchesCheck: self._child_matches,
            dsl.ChildContainsCheck: self._child_contains,
            dsl.HelperCheck: self._helper,
            dsl.ExprCheck: self._expr,
            dsl.AndCheck: self._and,
            dsl.OrCheck: self._or,
            dsl.NotCheck: self._not,
        }

    @property
    def registry(self) -> HelperRegistry:
        return self._registry

    def compile(
        self,
        check: Any,
        namespace: str | None = None,
        rule_id: str | None = None,
    ) -> Predicate:
        """Compile one check (and its sub-checks).

        Raises:
            UnknownHelperError: If a `helper` name does not resolve.
            ExpressionError: If an `expr` is outside the grammar.
            RuleCompileError: For any other uncompilable check.
        """
        handler = self._dispatch.get(type(check))
        if handler is None:
            raise RuleCompileError(f"unsupported check {type(check).__name__}", rule_id=rule_id)
        predicate = handler(check, namespace, rule_id)
        if check.negate:
            inner = predicate
            return lambda node, context: not inner(node, context)
        return predicate

    # --- Text checks ---

    @staticmethod
    def _regex(check: Any, rule_id: str | None) -> re.Pattern[str]:
        try:
            return re.compile(check.pattern, dsl.regex_flags(check.flags))
        except re.error as exc:
            raise RuleCompileError(f"invalid regex {check.pattern!r}: {exc}", rule_id=rule_id) from exc

    def _match(self, check: dsl.MatchCheck, namespace: str | None, rule_id: str | None) -> Predicate:
        pattern = self._regex(check, rule_id)
        if check.target == "raw_text":
            return lambda node, context: pattern.search(node.raw_text) is not None
        return lambda node, context: pattern.search(node.id) is not None

    def _not_match(self, check: dsl.NotMatchCheck, namespace: str | None, rule_id: str | None) -> Predicate:
        pattern = self._regex(check, rule_id)
        if check.target == "raw_text":
            return lambda node, context: pattern.search(node.raw_text) is None
        return lambda node, context: pattern.search(node.id) is None

    def _contains(self, check: dsl.ContainsCheck, namespace: str | None, rule_id: str | None) -> Predicate:
        text = check.text.lower()
        return lambda node, context: text in node.id.lower()

    def _not_contains(self, check: dsl.NotContainsCheck, namespace: str | None, rule_id: str | None) -> Predicate:
        text = check.text.lower()
        return lambda node, context: text not in node.id.lower()

    # --- Child checks ---

    def _child_exists(self, check: dsl.ChildExistsCheck, namespace: str | None, rule_id: str | None) -> Predicate:
        selector = check.selector
        return lambda node, context: bool(_children_by_prefix(node, selector))

    def _child_not_exists(
        self, check: dsl.ChildNotExistsCheck, namespace: str | None, rule_id: str | None
    ) -> Predicate:
        selector = check.selector
        return lambda node, context: not _children_by_prefix(node, selector)

    def _child_matches(self, check: dsl.ChildMatchesCheck, namespace: str | None, rule_id: str | None) -> Predicate:
        selector = check.selector
        pattern = self._regex(check, rule_id)
        return lambda node, context: any(
            pattern.search(child.id) for child in _children_by_prefix(node, selector)
        )

    def _child_contains(self, check: dsl.ChildContainsCheck, namespace: str | None, rule_id: str | None) -> Predicate:
        selector, text = check.selector, check.text.lower()
        return lambda node, context: any(
            text in child.id.lower() for child in _children_by_prefix(node, selector)
        )

    # --- Helpers and expressions ---

    def _helper(self, check: dsl.HelperCheck, namespace: str | None, rule_id: str | None) -> Predicate:
        helper = self._registry.resolve(check.helper, namespace, rule_id=rule_id)
        resolvers: list[Callable[[ConfigNode, Context], Any]] = []
        for arg in check.args:
            if isinstance(arg, dsl.NodeRef):
                resolvers.append(_ref_resolver(arg.ref))
            else:
                resolvers.append(lambda node, context, literal=arg: literal)

        def call_helper(node: ConfigNode, context: Context) -> bool:
            return bool(helper(*(resolve(node, context) for resolve in resolvers)))

        return call_helper

    def _expr(self, check: dsl.ExprCheck, namespace: str | None, rule_id: str | None) -> Predicate:
        evaluate = compile_expression(check.expr, rule_id=rule_id)
        return lambda node, context: evaluate(node)

    # --- Combinators ---

    def _and(self, check: dsl.AndCheck, namespace: str | None, rule_id: str | None) -> Predicate:
        predicates = [self.compile(condition, namespace, rule_id) for condition in check.conditions]
        return lambda node, context: all(predicate(node, context) for predicate in predicates)

    def _or(self, check: dsl.OrCheck, namespace: str | None, rule_id: str | None) -> Predicate:
        predicates = [self.compile(condition, namespace, rule_id) for condition in check.conditions]
        return lambda node, context: any(predicate(node, context) for predicate in predicates)

    def _not(self, check: dsl.NotCheck, namespace: str | None, rule_id: str | None) -> Predicate:
        inner = self.compile(check.condition, namespace, rule_id)
        return lambda node, context: not inner(node, context)


def compile_rule(json_rule: dsl.JsonRule, compiler: PredicateCompiler | None = None) -> Rule:
    """Compile a JsonRule into an executable Rule.

    Raises:
        RuleCompileError: If any part of the check cannot be compiled.
    """
    compiler = compiler or PredicateCompiler()
    predicate = compiler.compile(
        json_rule.check,
        namespace=helper_namespace(json_rule.vendor),
        rule_id=json_rule.id,
    )
    failure_template = (
        json_rule.failure_message or json_rule.metadata.description or DEFAULT_FAILURE_MESSAGE
    )
    success_template = json_rule.success_message or DEFAULT_SUCCESS_MESSAGE

    def check(node: ConfigNode, context: Context) -> RuleResult:
        if predicate(node, context):
            return rule.fail_result(node, format_message(failure_template, node.id, json_rule.id))
        return rule.pass_result(node, format_message(success_template, node.id, json_rule.id))

    rule = Rule(
        id=json_rule.id,
        check=check,
        metadata=json_rule.metadata,
        selector=json_rule.selector,
        vendor=json_rule.vendor,
        category=json_rule.category,
    )
    return rule


def compile_rules(
    json_rules: Iterable[dsl.JsonRule],
    compiler: PredicateCompiler | None = None,
) -> list[Rule]:
    compiler = compiler or PredicateCompiler()
    return [compile_rule(json_rule, compiler) for json_rule in json_rules]

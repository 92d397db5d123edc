"""Core data model shared by the parser, the rule engine and the rule DSL.

- ConfigNode / ConfigTree: the vendor-agnostic tree produced by the parser
- Rule: a natively coded compliance check (selector + vendor filter + check)
- RuleResult: one finding (pass, fail, or not-applicable) for one node
- RuleMetadata: severity, ownership and remediation text attached to a rule
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from netaudit.context import Context

# Free-text metadata fields are capped to keep third-party packs bounded.
MAX_METADATA_LENGTH = 10_000


class NodeType(str, enum.Enum):
    """Declared structural type of a configuration node."""

    SECTION = "section"  # opens a nested scope, even if it ends up empty
    LEAF = "leaf"


@dataclass(frozen=True)
class SourceLocation:
    """1-based inclusive line range in the original configuration text."""

    start_line: int
    end_line: int


@dataclass(frozen=True)
class ConfigNode:
    """One structural unit (section or leaf) of a parsed configuration."""

    id: str
    raw_text: str
    params: tuple[str, ...]
    type: NodeType
    loc: SourceLocation
    children: tuple[ConfigNode, ...] = ()
    indent: int = 0

    @property
    def is_section(self) -> bool:
        return self.type is NodeType.SECTION


ConfigTree = tuple[ConfigNode, ...]


def walk(nodes: Iterable[ConfigNode]) -> Iterator[ConfigNode]:
    """Yield every node depth-first in document order, each exactly once."""
    stack = list(reversed(tuple(nodes)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


class Level(str, enum.Enum):
    """Severity of a finding."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Outcome(str, enum.Enum):
    """Result of one check against one node.

    NOT_APPLICABLE covers checks that ran but had nothing to verify, so
    aggregate pass counts are not inflated by informational echoes.
    """

    PASS = "pass"
    FAIL = "fail"
    NOT_APPLICABLE = "not_applicable"


@dataclass(frozen=True)
class RuleResult:
    """One finding produced by running one rule against one matched node."""

    outcome: Outcome
    message: str
    rule_id: str
    node_id: str
    level: Level
    loc: SourceLocation | None = None
    remediation: str | None = None

    @property
    def passed(self) -> bool:
        return self.outcome is Outcome.PASS

    @property
    def failed(self) -> bool:
        return self.outcome is Outcome.FAIL


class SecurityMetadata(BaseModel):
    """Optional CWE/CVSS mapping for security-related rules."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    cwe: list[str] = Field(default_factory=list)
    cvss_score: float | None = Field(default=None, ge=0.0, le=10.0)
    cvss_vector: str | None = None
    tags: list[str] = Field(default_factory=list)


class RuleMetadata(BaseModel):
    """Reporting metadata attached to every rule."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    level: Level
    owner: str = Field(default="", max_length=MAX_METADATA_LENGTH)
    obu: str = Field(default="", max_length=MAX_METADATA_LENGTH)
    description: str = Field(default="", max_length=MAX_METADATA_LENGTH)
    remediation: str = Field(default="", max_length=MAX_METADATA_LENGTH)
    tags: list[str] = Field(default_factory=list)
    security: SecurityMetadata | None = None


CheckFn = Callable[[ConfigNode, "Context"], "RuleResult | None"]


def normalize_vendor(vendor: str | Iterable[str] | None) -> frozenset[str] | None:
    """Normalize a rule's vendor declaration. None means vendor-agnostic."""
    if vendor is None:
        return None
    vendors = frozenset([vendor]) if isinstance(vendor, str) else frozenset(vendor)
    if not vendors or "common" in vendors:
        return None
    return vendors


@dataclass(frozen=True)
class Rule:
    """A compliance check bound to a selector and an optional vendor set.

    Natively coded rules and compiled JSON rules share this shape, so the
    engine treats them identically.
    """

    id: str
    check: CheckFn
    metadata: RuleMetadata
    selector: str | None = None
    vendor: frozenset[str] | None = None
    category: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "vendor", normalize_vendor(self.vendor))

    def applies_to_vendor(self, vendor_id: str | None) -> bool:
        """True if the rule runs for a scan of the given vendor."""
        if self.vendor is None:
            return True
        return vendor_id is not None and vendor_id in self.vendor

    def _result(
        self,
        node: ConfigNode,
        outcome: Outcome,
        message: str,
        level: Level,
        remediation: str | None = None,
    ) -> RuleResult:
        return RuleResult(
            outcome=outcome,
            message=message,
            rule_id=self.id,
            node_id=node.id,
            level=level,
            loc=node.loc,
            remediation=remediation,
        )

    def pass_result(self, node: ConfigNode, message: str) -> RuleResult:
        return self._result(node, Outcome.PASS, message, Level.INFO)

    def fail_result(
        self,
        node: ConfigNode,
        message: str,
        level: Level | None = None,
    ) -> RuleResult:
        return self._result(
            node,
            Outcome.FAIL,
            message,
            level or self.metadata.level,
            remediation=self.metadata.remediation or None,
        )

    def not_applicable(self, node: ConfigNode, message: str) -> RuleResult:
        return self._result(node, Outcome.NOT_APPLICABLE, message, Level.INFO)


@dataclass
class ScanSummary:
    """Aggregate counts over a list of results."""

    passed: int = 0
    failed: int = 0
    not_applicable: int = 0
    failures_by_level: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_results(cls, results: Iterable[RuleResult]) -> ScanSummary:
        summary = cls()
        for result in results:
            if result.outcome is Outcome.PASS:
                summary.passed += 1
            elif result.outcome is Outcome.FAIL:
                summary.failed += 1
                key = result.level.value
                summary.failures_by_level[key] = summary.failures_by_level.get(key, 0) + 1
            else:
                summary.not_applicable += 1
        return summary

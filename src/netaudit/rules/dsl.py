"""Pydantic models for JSON/YAML rule files.

Defines the declarative rule format third parties write without Python:
- JsonCheck: discriminated union on `type` (match, contains, child_*,
  helper, expr, and/or/not), every variant accepting `negate`
- JsonRule: id, selector, vendor, metadata, check and message templates
- JsonRuleFile: version "1.0", optional meta, rules with unique ids

Validation here is structural only. Helper names and `expr` grammar are
checked by the compiler, which knows the helper registry.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from netaudit.models import RuleMetadata
from netaudit.parser.vendors import VENDOR_SCHEMAS

RULE_ID_PATTERN = r"^[A-Z][A-Z0-9_-]{2,49}$"
MAX_PATTERN_LENGTH = 500
MAX_EXPRESSION_LENGTH = 500
MAX_SELECTOR_LENGTH = 500

# Nested quantifiers such as (a+)+ or (?:a*)*
_REDOS_PATTERN = re.compile(r"\([^)]*[+*][^)]*\)[+*]|\(\?:[^)]*[+*][^)]*\)[+*]")
_REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}

NODE_REFS = frozenset(
    {"node", "context", "node.id", "node.type", "node.params", "node.children", "node.raw_text"}
)
_REF_ALIASES = {"node.rawText": "node.raw_text"}


def regex_flags(flags: str) -> int:
    """Translate a flag string such as "im" into re module flags."""
    value = 0
    for flag in flags:
        value |= _REGEX_FLAGS[flag]
    return value


def validate_pattern(pattern: str, flags: str = "") -> str:
    """Reject over-long, ReDoS-prone or uncompilable regular expressions."""
    if len(pattern) > MAX_PATTERN_LENGTH:
        raise ValueError(
            f"Regex pattern too long: {len(pattern)} chars exceeds limit of {MAX_PATTERN_LENGTH}"
        )
    if _REDOS_PATTERN.search(pattern):
        raise ValueError(f"Regex pattern contains nested quantifiers: {pattern[:50]!r}")
    try:
        re.compile(pattern, regex_flags(flags))
    except re.error as exc:
        raise ValueError(f"Invalid regex: {exc}") from exc
    return pattern


# --- Check variants ---


class _CheckBase(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    negate: bool = False


class _PatternCheck(_CheckBase):
    pattern: str
    flags: str = ""

    @field_validator("flags")
    @classmethod
    def flags_are_supported(cls, v: str) -> str:
        unknown = set(v) - set(_REGEX_FLAGS)
        if unknown:
            raise ValueError(f"Unsupported regex flags: {''.join(sorted(unknown))} (allowed: i, m, s)")
        return v

    @field_validator("pattern")
    @classmethod
    def pattern_is_safe(cls, v: str) -> str:
        return validate_pattern(v)


class MatchCheck(_PatternCheck):
    """Regex search against the node id (or raw text)."""

    type: Literal["match"]
    target: Literal["id", "raw_text"] = "id"


class NotMatchCheck(_PatternCheck):
    type: Literal["not_match"]
    target: Literal["id", "raw_text"] = "id"


class ContainsCheck(_CheckBase):
    """Case-insensitive substring of the node id."""

    type: Literal["contains"]
    text: str


class NotContainsCheck(_CheckBase):
    type: Literal["not_contains"]
    text: str


class ChildExistsCheck(_CheckBase):
    """Some direct child's id starts with `selector`, ignoring case."""

    type: Literal["child_exists"]
    selector: str = Field(min_length=1, max_length=MAX_SELECTOR_LENGTH)


class ChildNotExistsCheck(_CheckBase):
    type: Literal["child_not_exists"]
    selector: str = Field(min_length=1, max_length=MAX_SELECTOR_LENGTH)


class ChildMatchesCheck(_PatternCheck):
    """Some child selected by prefix has an id matching `pattern`."""

    type: Literal["child_matches"]
    selector: str = Field(min_length=1, max_length=MAX_SELECTOR_LENGTH)


class ChildContainsCheck(_CheckBase):
    type: Literal["child_contains"]
    selector: str = Field(min_length=1, max_length=MAX_SELECTOR_LENGTH)
    text: str


class NodeRef(BaseModel):
    """Placeholder resolved per evaluation, written as {"$ref": "node.id"}."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    ref: str = Field(alias="$ref")

    @field_validator("ref")
    @classmethod
    def ref_is_known(cls, v: str) -> str:
        v = _REF_ALIASES.get(v, v)
        if v not in NODE_REFS:
            raise ValueError(f"Unknown $ref '{v}' (allowed: {', '.join(sorted(NODE_REFS))})")
        return v


ArgValue = Union[NodeRef, bool, int, float, str, None]


class HelperCheck(_CheckBase):
    """Call a registered helper; its return value is coerced with bool()."""

    type: Literal["helper"]
    helper: str = Field(min_length=1)
    args: list[ArgValue] = Field(default_factory=list)


class ExprCheck(_CheckBase):
    """Restricted comparison: FIELD OP VALUE."""

    type: Literal["expr"]
    expr: str = Field(min_length=1, max_length=MAX_EXPRESSION_LENGTH)


class AndCheck(_CheckBase):
    type: Literal["and"]
    conditions: list[JsonCheck]


class OrCheck(_CheckBase):
    type: Literal["or"]
    conditions: list[JsonCheck]


class NotCheck(_CheckBase):
    type: Literal["not"]
    condition: JsonCheck


JsonCheck = Annotated[
    Union[
        MatchCheck,
        NotMatchCheck,
        ContainsCheck,
        NotContainsCheck,
        ChildExistsCheck,
        ChildNotExistsCheck,
        ChildMatchesCheck,
        ChildContainsCheck,
        HelperCheck,
        ExprCheck,
        AndCheck,
        OrCheck,
        NotCheck,
    ],
    Field(discriminator="type"),
]

AndCheck.model_rebuild()
OrCheck.model_rebuild()
NotCheck.model_rebuild()


# --- Rules and rule files ---


class JsonRule(BaseModel):
    """One declarative rule. A true check means the node violates the rule."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    id: str = Field(pattern=RULE_ID_PATTERN)
    selector: str | None = Field(default=None, max_length=MAX_SELECTOR_LENGTH)
    vendor: str | list[str] | None = None
    category: str | None = None
    metadata: RuleMetadata
    check: JsonCheck
    failure_message: str | None = Field(
        default=None,
        validation_alias=AliasChoices("failure_message", "failureMessage"),
    )
    success_message: str | None = Field(
        default=None,
        validation_alias=AliasChoices("success_message", "successMessage"),
    )

    @field_validator("selector")
    @classmethod
    def selector_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = " ".join(v.split())
        return v or None

    @field_validator("vendor")
    @classmethod
    def vendors_are_known(cls, v: str | list[str] | None) -> str | list[str] | None:
        """Each vendor must be a registered vendor id or "common"."""
        if v is None:
            return None
        vendors = [v] if isinstance(v, str) else v
        cleaned = [vendor.strip().lower() for vendor in vendors]
        for vendor in cleaned:
            if vendor != "common" and vendor not in VENDOR_SCHEMAS:
                raise ValueError(
                    f"Unknown vendor '{vendor}'. Valid vendors: common, {', '.join(sorted(VENDOR_SCHEMAS))}"
                )
        return cleaned[0] if isinstance(v, str) else cleaned


class RuleFileMeta(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str | None = None
    description: str | None = None
    author: str | None = None
    license: str | None = None


class JsonRuleFile(BaseModel):
    """Top-level document of a rule file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: Literal["1.0"]
    meta: RuleFileMeta | None = None
    rules: list[JsonRule]

    @field_validator("rules")
    @classmethod
    def rule_ids_unique(cls, v: list[JsonRule]) -> list[JsonRule]:
        seen: set[str] = set()
        for rule in v:
            if rule.id in seen:
                raise ValueError(f"Duplicate rule id '{rule.id}'")
            seen.add(rule.id)
        return v


def parse_rule_file(data: Any) -> JsonRuleFile:
    """Validate a decoded JSON/YAML document as a rule file.

    Raises:
        pydantic.ValidationError: If the document does not match the schema.
    """
    return JsonRuleFile.model_validate(data)

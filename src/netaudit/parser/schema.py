"""Declarative description of one configuration dialect.

A VendorSchema tells the parser how scopes are delimited (indentation,
braces, or opener/closer keywords), which lines are comments, how
continuation lines are marked and whether command text is case-sensitive.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass


class ScopeStyle(str, enum.Enum):
    """How a dialect expresses nesting."""

    INDENT = "indent"  # Cisco IOS, Huawei VRP, Aruba, Cumulus
    BRACE = "brace"  # JunOS, Nokia SR OS MD-CLI, VyOS, PAN-OS
    KEYWORD = "keyword"  # FortiOS config/edit/next/end, MikroTik /path headers


@dataclass(frozen=True)
class VendorSchema:
    """Immutable lexical and structural conventions of one dialect.

    block_openers and block_enders are regexes matched against the
    sanitized line. For INDENT dialects, enders (`exit`, `quit`) close the
    innermost scope; for KEYWORD dialects, openers push and enders pop.

    block_starters name the INDENT lines that always open a section, so
    an empty `interface` or `address-family` is still a section. A line
    that is followed by a deeper-indented line opens a section either way.

    ender_scopes pairs a named ender with the opener it belongs to:
    `exit-address-family` only closes an `address-family` section.
    """

    id: str
    name: str
    scope_style: ScopeStyle
    comment_prefixes: tuple[str, ...] = ()
    comment_patterns: tuple[re.Pattern[str], ...] = ()
    continuation_suffix: str | None = None
    case_sensitive: bool = True
    block_starters: tuple[re.Pattern[str], ...] = ()
    block_openers: tuple[re.Pattern[str], ...] = ()
    block_enders: tuple[re.Pattern[str], ...] = ()
    ender_scopes: tuple[tuple[re.Pattern[str], re.Pattern[str]], ...] = ()
    # Header lines that close any open sibling before opening (MikroTik paths)
    exclusive_openers: tuple[re.Pattern[str], ...] = ()
    statement_terminator: str | None = None
    helper_namespace: str | None = None

    def is_comment(self, line: str) -> bool:
        """True if a sanitized, non-empty line is a comment in this dialect."""
        if any(line.startswith(prefix) for prefix in self.comment_prefixes):
            return True
        return any(pattern.match(line) for pattern in self.comment_patterns)

    def is_block_starter(self, line: str) -> bool:
        return any(pattern.match(line) for pattern in self.block_starters)

    def is_block_ender(self, line: str) -> bool:
        return any(pattern.match(line) for pattern in self.block_enders)

    def is_block_opener(self, line: str) -> bool:
        return any(pattern.match(line) for pattern in self.block_openers)

    def is_exclusive_opener(self, line: str) -> bool:
        return any(pattern.match(line) for pattern in self.exclusive_openers)

    def ender_closes(self, ender: str, section_id: str) -> bool:
        """True if the ender may close the given open section.

        Enders without a declared scope (`exit`, `quit`) close any section.
        """
        for ender_pattern, opener_pattern in self.ender_scopes:
            if ender_pattern.match(ender):
                return opener_pattern.match(section_id) is not None
        return True


def patterns(*sources: str) -> tuple[re.Pattern[str], ...]:
    """Compile case-insensitive, anchored schema patterns."""
    return tuple(re.compile(source, re.IGNORECASE) for source in sources)


def scopes(*pairs: tuple[str, str]) -> tuple[tuple[re.Pattern[str], re.Pattern[str]], ...]:
    """Compile (ender, opener) pattern pairs."""
    return tuple(
        (re.compile(ender, re.IGNORECASE), re.compile(opener, re.IGNORECASE))
        for ender, opener in pairs
    )

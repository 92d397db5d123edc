"""Schema-aware configuration parser.

Turns raw vendor configuration text into a tuple of ConfigNode trees.
Three scope disciplines are supported, selected by the VendorSchema:

- INDENT: an explicit stack of open sections; a line at indent D closes
  every open section with indent >= D before attaching. Schema block
  starters open a section even when nothing is nested under them.
- BRACE: `{` opens a section named by the preceding tokens, `}` closes it.
- KEYWORD: opener keywords (`config`, `edit`, `/path`) push, enders
  (`end`, `next`) pop.

The parser is a best-effort structural reader. Malformed input (stray or
missing braces, odd indentation, runaway nesting) never raises. It is
closed to the nearest valid ancestor or demoted to a leaf. Lines longer
than MAX_LINE_LENGTH are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from netaudit.models import ConfigNode, ConfigTree, NodeType, SourceLocation
from netaudit.parser.sanitizer import (
    MAX_LINE_LENGTH,
    collapse_whitespace,
    leading_indent,
    sanitize_line,
    tokenize,
)
from netaudit.parser.schema import ScopeStyle, VendorSchema
from netaudit.parser.vendors import DEFAULT_VENDOR

logger = structlog.get_logger()

DEFAULT_MAX_NESTING_DEPTH = 50


@dataclass(frozen=True)
class _Line:
    """One logical line: continuation lines already joined."""

    text: str
    raw: str
    start_line: int
    end_line: int
    indent: int


@dataclass
class _Frame:
    """Scan-local builder for a node. Discarded once the tree is frozen."""

    id: str
    raw: str
    type: NodeType
    start_line: int
    end_line: int
    indent: int
    children: list[_Frame] = field(default_factory=list)

    def freeze(self) -> ConfigNode:
        children = tuple(child.freeze() for child in self.children)
        end_line = self.end_line
        if children:
            end_line = max(end_line, children[-1].loc.end_line)
        return ConfigNode(
            id=self.id,
            raw_text=self.raw,
            params=tokenize(self.id),
            type=self.type,
            loc=SourceLocation(start_line=self.start_line, end_line=end_line),
            children=children,
            indent=self.indent,
        )


class SchemaAwareParser:
    """Parses configuration text under one vendor schema.

    Args:
        schema: The dialect to parse. Defaults to Cisco IOS.
        max_nesting_depth: Openers beyond this depth are demoted to leaves.
    """

    def __init__(
        self,
        schema: VendorSchema | None = None,
        max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH,
    ) -> None:
        self._schema = schema or DEFAULT_VENDOR
        self._max_depth = max_nesting_depth

    @property
    def schema(self) -> VendorSchema:
        return self._schema

    def parse(self, text: str) -> ConfigTree:
        """Parse configuration text into top-level nodes.

        Args:
            text: Raw configuration text, already read into memory.

        Returns:
            A tuple of top-level ConfigNodes in source order.
        """
        lines = self._logical_lines(text)
        if self._schema.scope_style is ScopeStyle.BRACE:
            roots = self._parse_braces(lines)
        elif self._schema.scope_style is ScopeStyle.KEYWORD:
            roots = self._parse_keywords(lines)
        else:
            roots = self._parse_indentation(lines)
        return tuple(frame.freeze() for frame in roots)

    # --- Line handling ---

    def _logical_lines(self, text: str) -> list[_Line]:
        """Drop blanks, comments and overlong lines, join continuation lines.

        Line numbers always refer to the original text.
        """
        schema = self._schema
        suffix = schema.continuation_suffix
        result: list[_Line] = []
        pending: list[str] = []
        pending_raw: list[str] = []
        pending_start = 0
        pending_indent = 0

        for number, raw in enumerate(text.splitlines(), start=1):
            if len(raw) > MAX_LINE_LENGTH:
                self._recovered("line_too_long", number)
                continue
            sanitized = sanitize_line(raw)
            if not pending and (not sanitized or schema.is_comment(sanitized)):
                continue

            if not pending:
                pending_start = number
                pending_indent = leading_indent(raw)
            pending_raw.append(raw)

            if suffix and sanitized.endswith(suffix):
                pending.append(sanitized[: -len(suffix)])
                continue

            pending.append(sanitized)
            result.append(_Line(
                text=collapse_whitespace(" ".join(pending)),
                raw="\n".join(pending_raw),
                start_line=pending_start,
                end_line=number,
                indent=pending_indent,
            ))
            pending, pending_raw = [], []

        if pending:
            # Continuation marker on the last line
            result.append(_Line(
                text=collapse_whitespace(" ".join(pending)),
                raw="\n".join(pending_raw),
                start_line=pending_start,
                end_line=pending_start + len(pending_raw) - 1,
                indent=pending_indent,
            ))
        return [line for line in result if line.text]

    def _node_id(self, text: str) -> str:
        """Normalized command signature for a statement."""
        node_id = collapse_whitespace(text)
        terminator = self._schema.statement_terminator
        if terminator:
            node_id = node_id.rstrip(terminator).rstrip()
        if not self._schema.case_sensitive and node_id:
            keyword, _, rest = node_id.partition(" ")
            node_id = f"{keyword.lower()} {rest}" if rest else keyword.lower()
        return node_id

    def _new_frame(self, line: _Line, node_type: NodeType, text: str | None = None) -> _Frame:
        return _Frame(
            id=self._node_id(line.text if text is None else text),
            raw=line.raw,
            type=node_type,
            start_line=line.start_line,
            end_line=line.end_line,
            indent=line.indent,
        )

    def _recovered(self, reason: str, line: int) -> None:
        logger.debug("parser_recovered", vendor=self._schema.id, reason=reason, line=line)

    # --- INDENT ---

    def _parse_indentation(self, lines: list[_Line]) -> list[_Frame]:
        roots: list[_Frame] = []
        stack: list[_Frame] = []
        schema = self._schema

        for index, line in enumerate(lines):
            closed: _Frame | None = None
            while stack and stack[-1].indent >= line.indent:
                closed = stack.pop()

            if schema.is_block_ender(line.text):
                if closed is not None:
                    closed.end_line = max(closed.end_line, line.end_line)
                elif not stack:
                    self._recovered("block_ender_without_scope", line.start_line)
                elif schema.ender_closes(line.text, stack[-1].id):
                    stack.pop().end_line = line.end_line
                else:
                    # exit-address-family inside `router bgp` with no open address family
                    self._recovered("block_ender_outside_scope", line.start_line)
                continue

            following = lines[index + 1] if index + 1 < len(lines) else None
            opens_scope = schema.is_block_starter(line.text) or (
                following is not None and following.indent > line.indent
            )
            if opens_scope and len(stack) >= self._max_depth:
                self._recovered("max_nesting_depth", line.start_line)
                opens_scope = False

            frame = self._new_frame(line, NodeType.SECTION if opens_scope else NodeType.LEAF)
            (stack[-1].children if stack else roots).append(frame)
            if opens_scope:
                stack.append(frame)

        return roots

    # --- BRACE ---

    def _parse_braces(self, lines: list[_Line]) -> list[_Frame]:
        roots: list[_Frame] = []
        # None entries are transparent scopes: a bare `{` or an opener past the depth cap
        stack: list[_Frame | None] = []
        separator = self._schema.statement_terminator

        def parent_children() -> list[_Frame]:
            for entry in reversed(stack):
                if entry is not None:
                    return entry.children
            return roots

        def depth() -> int:
            return sum(1 for entry in stack if entry is not None)

        for line in lines:
            buffer: list[str] = []
            quote: str | None = None

            def flush() -> None:
                statement = "".join(buffer).strip()
                buffer.clear()
                if statement:
                    parent_children().append(self._new_frame(line, NodeType.LEAF, statement))

            for char in line.text:
                if quote is not None:
                    buffer.append(char)
                    if char == quote:
                        quote = None
                elif char in ('"', "'"):
                    quote = char
                    buffer.append(char)
                elif char == "{":
                    header = "".join(buffer).strip()
                    buffer.clear()
                    if not header:
                        self._recovered("anonymous_brace", line.start_line)
                        stack.append(None)
                    elif depth() >= self._max_depth:
                        self._recovered("max_nesting_depth", line.start_line)
                        parent_children().append(self._new_frame(line, NodeType.LEAF, header))
                        stack.append(None)
                    else:
                        frame = self._new_frame(line, NodeType.SECTION, header)
                        parent_children().append(frame)
                        stack.append(frame)
                elif char == "}":
                    flush()
                    if not stack:
                        self._recovered("unbalanced_close_brace", line.start_line)
                        continue
                    closed = stack.pop()
                    if closed is not None:
                        closed.end_line = max(closed.end_line, line.end_line)
                elif separator is not None and char == separator:
                    flush()
                else:
                    buffer.append(char)
            flush()

        if stack:
            self._recovered("unclosed_brace", lines[-1].end_line)
        return roots

    # --- KEYWORD ---

    def _parse_keywords(self, lines: list[_Line]) -> list[_Frame]:
        roots: list[_Frame] = []
        stack: list[_Frame | None] = []
        schema = self._schema

        def parent_children() -> list[_Frame]:
            for entry in reversed(stack):
                if entry is not None:
                    return entry.children
            return roots

        for line in lines:
            if schema.is_exclusive_opener(line.text):
                stack.clear()
                frame = self._new_frame(line, NodeType.SECTION)
                roots.append(frame)
                stack.append(frame)
            elif schema.is_block_opener(line.text):
                if sum(1 for entry in stack if entry is not None) >= self._max_depth:
                    self._recovered("max_nesting_depth", line.start_line)
                    parent_children().append(self._new_frame(line, NodeType.LEAF))
                    stack.append(None)
                    continue
                frame = self._new_frame(line, NodeType.SECTION)
                parent_children().append(frame)
                stack.append(frame)
            elif schema.is_block_ender(line.text):
                if not stack:
                    self._recovered("block_ender_without_scope", line.start_line)
                    continue
                closed = stack.pop()
                if closed is not None:
                    closed.end_line = max(closed.end_line, line.end_line)
            else:
                parent_children().append(self._new_frame(line, NodeType.LEAF))

        return roots


def parse(
    text: str,
    schema: VendorSchema | None = None,
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH,
) -> ConfigTree:
    """Parse configuration text under a vendor schema.

    Args:
        text: Raw configuration text.
        schema: Dialect to parse with. Defaults to Cisco IOS.
        max_nesting_depth: Depth cap before openers are demoted to leaves.

    Returns:
        Top-level ConfigNodes in source order.
    """
    return SchemaAwareParser(schema, max_nesting_depth=max_nesting_depth).parse(text)

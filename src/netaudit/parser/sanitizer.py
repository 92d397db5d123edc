"""Line sanitization and quote-aware tokenization.

Configuration exports arrive with stray control characters and non-ASCII
spaces. Every line goes through sanitize_line() before classification so
that ids and selector matching are stable.
"""

from __future__ import annotations

import re

# Longer physical lines are skipped by the parser; longer ids are cut here
MAX_LINE_LENGTH = 2048

# ASCII control characters except tab
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
# No-break, en/em, narrow and ideographic spaces
_UNICODE_SPACES = re.compile(r"[\u00a0\u2000-\u200a\u202f\u205f\u3000]")
_WHITESPACE_RUN = re.compile(r"\s+")


def sanitize_line(line: str) -> str:
    """Strip control characters, normalize Unicode spaces, trim both ends."""
    text = _CONTROL_CHARS.sub("", line)
    text = _UNICODE_SPACES.sub(" ", text)
    return text.strip()


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RUN.sub(" ", text).strip()


def leading_indent(line: str) -> int:
    """Width of the leading whitespace, tabs counted as one column."""
    text = _UNICODE_SPACES.sub(" ", line)
    return len(text) - len(text.lstrip())


def tokenize(line: str) -> tuple[str, ...]:
    """Split a line into parameters, keeping quoted strings together.

    Quotes are removed from the token: `description "core uplink"` yields
    ("description", "core uplink"). Text past MAX_LINE_LENGTH is dropped
    before splitting so the leading tokens survive.
    """
    line = line[:MAX_LINE_LENGTH]

    params: list[str] = []
    current: list[str] = []
    quote: str | None = None
    in_token = False

    for char in line:
        if quote is None and char in ("'", '"'):
            quote = char
            in_token = True
        elif quote is not None and char == quote:
            quote = None
        elif quote is None and char.isspace():
            if in_token:
                params.append("".join(current))
                current = []
                in_token = False
        else:
            current.append(char)
            in_token = True

    if in_token:
        params.append("".join(current))

    return tuple(params)

"""Rule file loading: JSON or YAML, validated and compiled.

SECURITY: Uses yaml.safe_load() exclusively. Never use yaml.load().
Uses aiofiles for non-blocking file I/O.

A rule file is all-or-nothing: one invalid rule rejects the whole file,
but never the other files of a batch.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import aiofiles
import structlog
import yaml
from pydantic import ValidationError

from netaudit.errors import RuleCompileError, RuleFileError
from netaudit.models import Rule
from netaudit.rules.compiler import PredicateCompiler, compile_rules
from netaudit.rules.dsl import parse_rule_file

logger = structlog.get_logger()

JSON_SUFFIXES = frozenset({".json"})
YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = "/".join(str(part) for part in first.get("loc", ()))
    suffix = f" (+{len(errors) - 1} more)" if len(errors) > 1 else ""
    return f"{location}: {first.get('msg', 'invalid')}{suffix}"


def _rule_id_at(data: Any, exc: ValidationError) -> str | None:
    """Best-effort id of the rule a validation error points into."""
    for error in exc.errors():
        loc = error.get("loc", ())
        if len(loc) >= 2 and loc[0] == "rules" and isinstance(loc[1], int):
            try:
                rule_id = data["rules"][loc[1]]["id"]
            except (KeyError, IndexError, TypeError):
                return None
            return rule_id if isinstance(rule_id, str) else None
    return None


def decode_rule_text(text: str, source: str) -> Any:
    """Decode rule file text by extension.

    Raises:
        RuleFileError: On unsupported extensions or malformed content.
    """
    suffix = Path(source).suffix.lower()
    try:
        if suffix in JSON_SUFFIXES:
            data = json.loads(text)
        elif suffix in YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            raise RuleFileError(source, f"unsupported rule file extension '{suffix or '(none)'}'")
    except json.JSONDecodeError as exc:
        raise RuleFileError(source, f"invalid JSON: {exc}") from exc
    except yaml.YAMLError as exc:
        raise RuleFileError(source, f"invalid YAML: {exc}") from exc

    if data is None:
        raise RuleFileError(source, "rule file is empty")
    return data


def compile_rule_file(
    data: Any,
    source: str,
    compiler: PredicateCompiler | None = None,
) -> list[Rule]:
    """Validate a decoded rule document and compile every rule in it.

    Raises:
        RuleFileError: If validation or compilation of any rule fails.
    """
    try:
        rule_file = parse_rule_file(data)
    except ValidationError as exc:
        raise RuleFileError(source, _first_error(exc), rule_id=_rule_id_at(data, exc)) from exc

    try:
        return compile_rules(rule_file.rules, compiler)
    except RuleCompileError as exc:
        raise RuleFileError(source, exc.reason, rule_id=exc.rule_id) from exc


async def load_rule_file(file_path: str | Path, compiler: PredicateCompiler | None = None) -> list[Rule]:
    """Load, validate and compile one rule file.

    Args:
        file_path: Path to a .json, .yaml or .yml rule file.
        compiler: Predicate compiler to use. Defaults to the built-in registry.

    Returns:
        The compiled rules, in file order.

    Raises:
        RuleFileError: If the file cannot be read, decoded, validated or compiled.
    """
    source = str(file_path)
    try:
        async with aiofiles.open(source, mode="r", encoding="utf-8") as f:
            text = await f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise RuleFileError(source, f"cannot read rule file: {exc}") from exc

    rules = compile_rule_file(decode_rule_text(text, source), source, compiler)

    await logger.ainfo("rule_file_loaded", file_path=source, rule_count=len(rules))
    return rules


async def load_rule_files(
    paths: Iterable[str | Path],
    compiler: PredicateCompiler | None = None,
    existing_ids: Iterable[str] = (),
) -> tuple[list[Rule], list[RuleFileError]]:
    """Load several rule files, collecting per-file errors.

    A file whose rule ids collide with an already loaded rule (from an
    earlier file or from existing_ids) is rejected as a whole.

    Returns:
        (rules, errors): the rules of every accepted file in path order,
        and one RuleFileError per rejected file.
    """
    compiler = compiler or PredicateCompiler()
    seen = set(existing_ids)
    rules: list[Rule] = []
    errors: list[RuleFileError] = []

    for path in paths:
        try:
            loaded = await load_rule_file(path, compiler)
            duplicate = next((rule.id for rule in loaded if rule.id in seen), None)
            if duplicate is not None:
                raise RuleFileError(str(path), "rule id already defined", rule_id=duplicate)
        except RuleFileError as exc:
            await logger.awarning(
                "rule_file_rejected",
                file_path=exc.source,
                rule_id=exc.rule_id,
                error=exc.reason,
            )
            errors.append(exc)
            continue

        seen.update(rule.id for rule in loaded)
        rules.extend(loaded)

    return rules, errors

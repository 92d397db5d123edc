"""Scan orchestration: text or files in, reports out.

A single scan (parse + rule run) is synchronous. Multi-file scans read
each file with aiofiles and run its scan in a worker thread, bounded by a
semaphore. A file that cannot be read or scanned becomes an error report
for that file and never aborts the rest of the batch.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import aiofiles
import structlog

from netaudit.engine import RuleEngine
from netaudit.errors import ConfigSizeLimitError, NetAuditError
from netaudit.models import Level, Outcome, Rule, RuleResult, ScanSummary
from netaudit.parser.parser import DEFAULT_MAX_NESTING_DEPTH, parse
from netaudit.parser.vendors import DEFAULT_VENDOR, get_schema

logger = structlog.get_logger()

DEFAULT_MAX_CONFIG_BYTES = 10 * 1024 * 1024
DEFAULT_MAX_PARALLEL = 8


@dataclass
class ScanReport:
    """Results of scanning one configuration."""

    path: str | None
    vendor: str | None
    results: list[RuleResult] = field(default_factory=list)
    error: str | None = None

    @property
    def summary(self) -> ScanSummary:
        return ScanSummary.from_results(self.results)

    @property
    def failures(self) -> list[RuleResult]:
        return [result for result in self.results if result.outcome is Outcome.FAIL]

    @property
    def has_errors(self) -> bool:
        """True if the scan failed outright or any error-level check failed."""
        if self.error is not None:
            return True
        return any(result.level is Level.ERROR for result in self.failures)


def check_size(text: str, max_config_bytes: int) -> None:
    """Raise ConfigSizeLimitError if the text is larger than the limit."""
    size = len(text.encode("utf-8"))
    if size > max_config_bytes:
        raise ConfigSizeLimitError(
            f"Configuration is {size} bytes, limit is {max_config_bytes} bytes"
        )


def scan_text(
    text: str,
    vendor: str | None,
    rules: Iterable[Rule],
    *,
    path: str | None = None,
    max_config_bytes: int = DEFAULT_MAX_CONFIG_BYTES,
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH,
) -> ScanReport:
    """Parse configuration text and run rules against it.

    Without a vendor the text is parsed with the default (Cisco IOS)
    schema and only vendor-agnostic rules run.

    Raises:
        UnknownVendorError: If the vendor id has no schema.
        ConfigSizeLimitError: If the text exceeds max_config_bytes.
    """
    schema = get_schema(vendor) if vendor is not None else DEFAULT_VENDOR
    check_size(text, max_config_bytes)
    tree = parse(text, schema, max_nesting_depth=max_nesting_depth)
    vendor_id = schema.id if vendor is not None else None
    results = RuleEngine().run(tree, rules, vendor_id)
    return ScanReport(path=path, vendor=vendor_id, results=results)


async def read_config(path: str | Path, max_config_bytes: int = DEFAULT_MAX_CONFIG_BYTES) -> str:
    """Read a configuration file, rejecting it if it is over the size limit.

    Raises:
        OSError: If the file cannot be read.
        ConfigSizeLimitError: If the file exceeds max_config_bytes.
    """
    file_path = Path(path)
    size = file_path.stat().st_size
    if size > max_config_bytes:
        raise ConfigSizeLimitError(
            f"Configuration is {size} bytes, limit is {max_config_bytes} bytes"
        )
    async with aiofiles.open(file_path, encoding="utf-8", errors="replace") as f:
        return await f.read()


async def scan_files(
    paths: Sequence[str | Path],
    vendor: str | None,
    rules: Sequence[Rule],
    *,
    max_parallel: int = DEFAULT_MAX_PARALLEL,
    max_config_bytes: int = DEFAULT_MAX_CONFIG_BYTES,
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH,
) -> list[ScanReport]:
    """Scan several configuration files concurrently.

    Returns:
        One report per path, in input order.

    Raises:
        UnknownVendorError: If the vendor id has no schema. Raised before
            any file is read.
    """
    if vendor is not None:
        vendor = get_schema(vendor).id

    sem = asyncio.Semaphore(max_parallel)

    async def scan_one(path: str | Path) -> ScanReport:
        async with sem:
            text = await read_config(path, max_config_bytes)
            return await asyncio.to_thread(
                scan_text,
                text,
                vendor,
                rules,
                path=str(path),
                max_config_bytes=max_config_bytes,
                max_nesting_depth=max_nesting_depth,
            )

    outcomes = await asyncio.gather(
        *(scan_one(path) for path in paths),
        return_exceptions=True,
    )

    reports: list[ScanReport] = []
    for path, outcome in zip(paths, outcomes):
        if isinstance(outcome, (OSError, NetAuditError, UnicodeError)):
            await logger.awarning("config_scan_failed", path=str(path), error=str(outcome))
            reports.append(ScanReport(path=str(path), vendor=vendor, error=str(outcome)))
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            await logger.ainfo(
                "config_scanned",
                path=str(path),
                vendor=vendor,
                results=len(outcome.results),
                failed=outcome.summary.failed,
            )
            reports.append(outcome)
    return reports

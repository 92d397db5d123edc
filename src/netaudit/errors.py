"""Exception hierarchy for netaudit.

Parse-time anomalies are never raised; the parser recovers. Everything
here is either raised before a scan starts (unknown vendor, oversize input)
or scoped to a single rule file (compile errors).
"""

from __future__ import annotations


class NetAuditError(Exception):
    """Base class for all netaudit errors."""


class UnknownVendorError(NetAuditError, LookupError):
    """Raised when a vendor id has no registered schema."""

    def __init__(self, vendor_id: str) -> None:
        super().__init__(f"Unknown vendor '{vendor_id}'")
        self.vendor_id = vendor_id


class ConfigSizeLimitError(NetAuditError):
    """Raised when configuration text exceeds the configured size limit."""


class RuleCompileError(NetAuditError):
    """Raised when a JSON rule cannot be compiled into an executable rule."""

    def __init__(self, message: str, rule_id: str | None = None) -> None:
        prefix = f"Rule '{rule_id}': " if rule_id else ""
        super().__init__(f"{prefix}{message}")
        self.rule_id = rule_id
        self.reason = message


class UnknownHelperError(RuleCompileError):
    """Raised at compile time when a helper name cannot be resolved."""

    def __init__(self, helper_name: str, rule_id: str | None = None) -> None:
        super().__init__(f"unknown helper '{helper_name}'", rule_id=rule_id)
        self.helper_name = helper_name


class ExpressionError(RuleCompileError):
    """Raised when an `expr` condition is outside the restricted grammar."""


class RuleFileError(NetAuditError):
    """A rule file was rejected. Carries the file path and offending rule id."""

    def __init__(self, source: str, message: str, rule_id: str | None = None) -> None:
        location = f"{source} [{rule_id}]" if rule_id else source
        super().__init__(f"{location}: {message}")
        self.source = source
        self.rule_id = rule_id
        self.reason = message

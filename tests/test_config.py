"""Tests for config.py — environment loading and validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from netaudit.config import Settings, get_settings


class TestDefaults:
    """Defaults apply when nothing is set."""

    def test_defaults(self) -> None:
        s = Settings(_env_file=None)
        assert s.default_vendor == "cisco-ios"
        assert s.max_config_bytes == 10 * 1024 * 1024
        assert s.max_nesting_depth == 50
        assert s.rule_paths == []
        assert s.include_builtin_rules is True
        assert s.max_parallel_scans == 8
        assert s.log_level == "INFO"
        assert s.log_format == "console"


class TestEnvironment:
    """NETAUDIT_-prefixed environment variables."""

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NETAUDIT_DEFAULT_VENDOR", "Juniper-JunOS")
        monkeypatch.setenv("NETAUDIT_MAX_PARALLEL_SCANS", "2")
        monkeypatch.setenv("NETAUDIT_RULE_PATHS", '["site.yaml", "extra.json"]')
        monkeypatch.setenv("NETAUDIT_LOG_LEVEL", "debug")
        s = get_settings()
        assert s.default_vendor == "juniper-junos"
        assert s.max_parallel_scans == 2
        assert s.rule_paths == ["site.yaml", "extra.json"]
        assert s.log_level == "DEBUG"

    def test_unprefixed_vars_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEFAULT_VENDOR", "juniper-junos")
        assert Settings(_env_file=None).default_vendor == "cisco-ios"


class TestValidation:
    """Invalid values fail loudly."""

    def test_unknown_vendor_rejected(self) -> None:
        with pytest.raises(ValidationError, match="NETAUDIT_DEFAULT_VENDOR must be one of"):
            Settings(_env_file=None, default_vendor="cisco-catos")

    @pytest.mark.parametrize("field", ["max_config_bytes", "max_nesting_depth", "max_parallel_scans"])
    def test_non_positive_limits_rejected(self, field: str) -> None:
        with pytest.raises(ValidationError, match="limits must be positive"):
            Settings(_env_file=None, **{field: 0})

    def test_bad_log_level_rejected(self) -> None:
        with pytest.raises(ValidationError, match="NETAUDIT_LOG_LEVEL"):
            Settings(_env_file=None, log_level="verbose")

    def test_bad_log_format_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NETAUDIT_LOG_FORMAT", "xml")
        with pytest.raises(ValidationError, match="NETAUDIT_LOG_FORMAT must be one of"):
            get_settings()

    def test_log_format_normalized(self) -> None:
        assert Settings(_env_file=None, log_format=" JSON ").log_format == "json"

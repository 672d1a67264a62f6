"""Tests for configuration, logging setup and format version checks."""

from __future__ import annotations

import logging
import sys

import pytest

from applet_api_desc.config import GeneratorConfig
from applet_api_desc.exceptions import FormatVersionError
from applet_api_desc.utils.format_version import check_format_version, parse_format_version
from applet_api_desc.utils.logging_utils import level_from_name


class TestGeneratorConfig:

    def test_defaults(self, monkeypatch):
        for name in ("LOG_LEVEL", "PRINT_LEVEL", "CACHE_ENABLED", "OUTPUT_DIR"):
            monkeypatch.delenv(f"APPLET_API_DESC_{name}", raising=False)
        config = GeneratorConfig.from_env()
        assert config == GeneratorConfig()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("APPLET_API_DESC_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("APPLET_API_DESC_CACHE_ENABLED", "0")
        monkeypatch.setenv("APPLET_API_DESC_OUTPUT_DIR", "out")
        config = GeneratorConfig.from_env()
        assert config.log_level == "DEBUG"
        assert config.cache_enabled is False
        assert config.output_dir == "out"

    def test_set_logging_splits_streams(self):
        GeneratorConfig(log_level="debug", print_level="error").set_logging()
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        stdout_handler, stderr_handler = root.handlers
        assert stdout_handler.stream is sys.stdout
        assert stderr_handler.stream is sys.stderr
        assert stderr_handler.level == logging.ERROR

    def test_level_from_name(self):
        assert level_from_name("warning") == logging.WARNING
        assert level_from_name("nonsense") == logging.INFO
        assert level_from_name(5) == 5


class TestFormatVersion:

    def test_parse(self):
        version = parse_format_version("v0.1.2")
        assert (version.major, version.minor, version.patch) == (0, 1, 2)
        with pytest.raises(FormatVersionError):
            parse_format_version("0.1")
        with pytest.raises(FormatVersionError):
            parse_format_version(0.1)

    def test_check(self):
        assert check_format_version("0.1.0").compatible
        assert check_format_version(None).missing
        newer = check_format_version("0.9.0")
        assert newer.compatible and newer.minor_newer
        assert not check_format_version("1.0.0").compatible
        assert not check_format_version("garbage").compatible

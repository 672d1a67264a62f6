"""Shared pytest fixtures for all tests."""

from __future__ import annotations

import logging
import textwrap
from pathlib import Path

import pytest

from applet_api_desc.models import Module
from applet_api_desc.parsers import load_builtin_api
from applet_api_desc.parsers.yaml_parser import yaml_parser


@pytest.fixture(autouse=True)
def _restore_logging():
    """CLI runs reconfigure the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    yaml_parser.clear_cache()


@pytest.fixture
def api_root() -> Module:
    return load_builtin_api()


@pytest.fixture
def serial(api_root: Module) -> Module:
    return api_root.find("usb/serial")


@pytest.fixture
def write_yaml(tmp_path: Path):
    """Write dedented YAML text to ``tmp_path/<name>`` and return the path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
        return path

    return _write

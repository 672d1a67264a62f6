from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Dict, Optional


SourceMap = Dict[str, Dict[str, int]]


@dataclass(frozen=True)
class SourceLocation:
    file_path: Optional[Path] = None
    yaml_path: Optional[str] = None
    line: Optional[int] = None  # 1-based
    column: Optional[int] = None  # 1-based


def lookup_source(
    source_map: Optional[SourceMap],
    yaml_path: Optional[str],
    file_path: Optional[Path] = None,
) -> SourceLocation:
    """Resolve a JSON-pointer-like YAML path to its line/column.

    Falls back to the closest recorded parent path so that issues on
    synthesized keys still point somewhere useful.
    """
    if not source_map or yaml_path is None:
        return SourceLocation(file_path=file_path, yaml_path=yaml_path)

    probe = yaml_path
    while True:
        entry = source_map.get(probe)
        if entry:
            return SourceLocation(
                file_path=file_path,
                yaml_path=yaml_path,
                line=entry.get("line"),
                column=entry.get("column"),
            )
        if not probe:
            break
        probe = probe.rsplit("/", 1)[0]

    return SourceLocation(file_path=file_path, yaml_path=yaml_path)


def _format_file_path(path: Path) -> str:
    root = os.environ.get("APPLET_API_DESC_SOURCE_ROOT")
    base = Path(root) if root else Path.cwd()
    try:
        return str(path.resolve().relative_to(base.resolve()))
    except ValueError:
        return str(path)


def format_source(loc: Optional[SourceLocation]) -> str:
    if not loc:
        return ""

    parts = []
    if loc.file_path is not None:
        file_path = _format_file_path(loc.file_path)
        if loc.line is not None and loc.column is not None:
            parts.append(f"source= {file_path}:{loc.line}:{loc.column} ")
        elif loc.line is not None:
            parts.append(f"source= {file_path}:{loc.line} ")
        else:
            parts.append(f"source= {file_path} ")

    if loc.yaml_path:
        parts.append(f"yaml_path={loc.yaml_path}")

    if not parts:
        return ""

    return " (" + " ".join(parts) + ")"

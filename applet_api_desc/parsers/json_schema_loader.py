# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""JSON Schema loader for structural checks of YAML schema sources."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema

from ..exceptions import FormatVersionError, SchemaSourceError
from ..utils.format_version import parse_format_version


SCHEMA_ENTITY = "module"

# Schema cache to avoid reloading files
_SCHEMA_CACHE: Dict[str, dict] = {}


@dataclass(frozen=True)
class StructureIssue:
    message: str
    yaml_path: Optional[str] = None


def _schema_dir() -> Path:
    return Path(__file__).parent.parent / "schema"


def get_schema_path(version: str) -> Path:
    return _schema_dir() / version / f"{SCHEMA_ENTITY}.json"


def resolve_schema_version(version: str) -> str:
    """Resolve to an available schema version.

    The exact version is used when present; otherwise the largest available
    version with the same major version. Returns ``version`` unchanged when
    nothing matches so that loading fails with a clear error.
    """
    try:
        wanted = parse_format_version(version)
    except FormatVersionError:
        return version

    if get_schema_path(version).exists():
        return version

    available = []
    for version_dir in _schema_dir().iterdir():
        if not version_dir.is_dir():
            continue
        try:
            dir_version = parse_format_version(version_dir.name)
        except FormatVersionError:
            continue
        if dir_version.major == wanted.major and (version_dir / f"{SCHEMA_ENTITY}.json").exists():
            available.append(dir_version)

    if not available:
        return version

    best = max(available, key=lambda v: (v.minor, v.patch))
    return str(best)


def load_schema(version: str) -> dict:
    """Load the JSON Schema for a source format version.

    Raises:
        SchemaSourceError: If no schema exists for the version or it is invalid JSON.
    """
    resolved = resolve_schema_version(version)
    if resolved in _SCHEMA_CACHE:
        return _SCHEMA_CACHE[resolved]

    schema_path = get_schema_path(resolved)
    if not schema_path.exists():
        raise SchemaSourceError(
            f"Schema file not found for format version {version} (resolved to {resolved}): {schema_path}"
        )

    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)
    except json.JSONDecodeError as e:
        raise SchemaSourceError(f"Invalid JSON in schema file {schema_path}: {e.msg}") from e

    _SCHEMA_CACHE[resolved] = schema
    return schema


def _pointer(path) -> str:
    return "".join(f"/{p}" for p in path)


def validate_structure(data: Any, schema: dict) -> List[StructureIssue]:
    """Validate source data against a JSON Schema, returning every issue in path order."""
    if not isinstance(data, dict):
        return [StructureIssue(message="Root must be a mapping/object", yaml_path="")]

    validator = jsonschema.Draft7Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: (list(map(str, e.absolute_path)), e.message))
    return [StructureIssue(message=e.message, yaml_path=_pointer(e.absolute_path)) for e in errors]


def clear_cache() -> None:
    """Clear the schema cache. Useful for testing."""
    _SCHEMA_CACHE.clear()

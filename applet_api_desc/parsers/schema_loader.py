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

"""Build and validate a schema tree from YAML sources.

One module is declared per file. A module's ``items`` may declare
functions, enumerations and inline child modules, or ``include`` another
file (relative to the including file) as a child module. All construction
errors across the tree are collected and reported together with the
validator's issues; nothing is returned from an invalid source.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..exceptions import FormatVersionError, MalformedField, SchemaSourceError, SchemaValidationError
from ..file_io.source_location import SourceLocation, SourceMap, format_source, lookup_source
from ..models.field_types import Pointer, parse_type
from ..models.issues import SchemaIssue
from ..models.items import Enumeration, Field, Function, Item, Module, Variant
from ..utils.format_version import FORMAT_FIELD, check_format_version, get_supported_format_version
from ..validation.validator import collect_issues
from .json_schema_loader import load_schema, validate_structure
from .yaml_parser import YamlParser, yaml_parser

logger = logging.getLogger(__name__)

BUILTIN_API = Path(__file__).parent.parent / "api" / "api.yaml"


class _Source:
    """Parsed content of one source file plus its location data."""

    def __init__(self, data: Dict[str, Any], source_map: SourceMap, file_path: Optional[Path]):
        self.data = data
        self.source_map = source_map
        self.file_path = file_path

    def locate(self, yaml_path: str) -> SourceLocation:
        return lookup_source(self.source_map, yaml_path, self.file_path)


class SchemaLoader:
    """Loads a module tree from YAML sources."""

    def __init__(self, parser: Optional[YamlParser] = None, check_structure: bool = True):
        self.parser = parser or yaml_parser
        self.check_structure = check_structure
        self.issues: List[SchemaIssue] = []
        # Item path -> where the item is declared.
        self.sources: Dict[str, SourceLocation] = {}
        self._stack: List[Path] = []

    # ---- entry points -------------------------------------------------

    def load(self, file_path: Union[str, Path]) -> Module:
        """Load and validate the module tree rooted at ``file_path``.

        Raises:
            SchemaSourceError: If a file cannot be read or is structurally invalid.
            SchemaValidationError: If the assembled tree has any schema issue.
        """
        self._reset()
        root = self._load_file(Path(file_path), parent_path="")
        return self._finish(root)

    def load_string(self, content: str, base_dir: Union[str, Path, None] = None) -> Module:
        """Load and validate a module from YAML text. Includes resolve against ``base_dir``."""
        self._reset()
        data, source_map = self.parser.load_config_from_string_with_source(content)
        base = Path(base_dir) if base_dir is not None else Path.cwd()
        root = self._build_root(_Source(data, source_map, None), base, parent_path="")
        return self._finish(root)

    # ---- internals ----------------------------------------------------

    def _reset(self) -> None:
        self.issues = []
        self.sources = {}
        self._stack = []

    def _finish(self, root: Module) -> Module:
        issues = self.issues + collect_issues(root, self.sources)
        if issues:
            for issue in issues:
                logger.error(str(issue))
            raise SchemaValidationError(issues)
        logger.info(f"Loaded schema '{root.name}' with {sum(1 for _ in root.functions())} function(s)")
        return root

    def _load_file(self, file_path: Path, parent_path: str) -> Module:
        path = file_path.resolve()
        if path in self._stack:
            chain = " -> ".join(str(p) for p in self._stack + [path])
            raise SchemaSourceError(f"Include cycle detected: {chain}", SourceLocation(file_path=path))

        self._stack.append(path)
        try:
            data, source_map = self.parser.load_config_with_source(path)
            return self._build_root(_Source(data, source_map, path), path.parent, parent_path)
        finally:
            self._stack.pop()

    def _check_source(self, source: _Source) -> None:
        data = source.data
        if not isinstance(data, dict):
            raise SchemaSourceError("Schema source root must be a mapping", source.locate(""))

        raw_version = data.get(FORMAT_FIELD)
        result = check_format_version(raw_version)
        if not result.compatible:
            raise FormatVersionError(result.message, source.locate(f"/{FORMAT_FIELD}"))
        if result.missing or result.minor_newer:
            logger.warning(f"{result.message}{format_source(source.locate(f'/{FORMAT_FIELD}'))}")

        if not self.check_structure:
            return

        version = str(result.file_version or get_supported_format_version())
        problems = validate_structure(data, load_schema(version))
        if problems:
            details = "\n".join(
                f"  - {p.message}{format_source(source.locate(p.yaml_path or ''))}" for p in problems
            )
            raise SchemaSourceError(f"Invalid schema source structure:\n{details}", source.locate(""))

    def _build_root(self, source: _Source, base_dir: Path, parent_path: str) -> Module:
        self._check_source(source)
        data = source.data
        return self._build_module(
            data.get("name"), data.get("docs"), data.get("items") or [], source, "", base_dir, parent_path
        )

    def _build_module(
        self,
        name: Any,
        docs: Any,
        entries: List[Any],
        source: _Source,
        yaml_path: str,
        base_dir: Path,
        parent_path: str,
    ) -> Module:
        module_path = f"{parent_path}/{name}" if parent_path else str(name)
        self.sources[module_path] = source.locate(yaml_path)

        items: List[Item] = []
        for idx, entry in enumerate(entries):
            entry_path = f"{yaml_path}/items/{idx}"
            item = self._build_item(entry, source, entry_path, base_dir, module_path)
            if item is not None:
                items.append(item)

        return Module(name=name, docs=_docs(docs), items=items)

    def _build_item(
        self, entry: Dict[str, Any], source: _Source, yaml_path: str, base_dir: Path, module_path: str
    ) -> Optional[Item]:
        if "include" in entry:
            return self._load_file(base_dir / entry["include"], parent_path=module_path)

        if "module" in entry:
            return self._build_module(
                entry["module"], entry.get("docs"), entry.get("items") or [],
                source, yaml_path, base_dir, module_path,
            )

        name = entry.get("function", entry.get("enum"))
        item_path = f"{module_path}/{name}"
        location = source.locate(yaml_path)
        self.sources[item_path] = location

        try:
            if "function" in entry:
                return Function(
                    name=entry["function"],
                    link=entry.get("link", ""),
                    docs=_docs(entry.get("docs")),
                    params=self._build_fields(entry.get("params") or []),
                    results=self._build_fields(entry.get("results") or []),
                )
            return Enumeration(
                name=entry["enum"],
                docs=_docs(entry.get("docs")),
                variants=[
                    Variant(name=v["name"], value=v["value"], docs=_docs(v.get("docs")))
                    for v in entry.get("variants") or []
                ],
            )
        except MalformedField as exc:
            exc.path = item_path
            self.issues.append(SchemaIssue.from_error(exc, location))
            return None

    @staticmethod
    def _build_fields(entries: List[Dict[str, Any]]) -> Tuple[Field, ...]:
        fields = []
        for entry in entries:
            field_type = parse_type(entry["type"], entry.get("length"))
            if "length" in entry and not isinstance(field_type, Pointer):
                raise MalformedField(f"Field '{entry['name']}' declares 'length' but is not a pointer")
            fields.append(
                Field(
                    name=entry["name"],
                    type=field_type,
                    docs=_docs(entry.get("docs")),
                    enum=entry.get("enum"),
                )
            )
        return tuple(fields)


def _docs(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def load_schema_file(file_path: Union[str, Path], parser: Optional[YamlParser] = None) -> Module:
    """Load and validate the schema rooted at ``file_path``."""
    return SchemaLoader(parser).load(file_path)


def load_schema_string(content: str, base_dir: Union[str, Path, None] = None) -> Module:
    """Load and validate a schema from YAML text."""
    return SchemaLoader().load_string(content, base_dir)


def load_builtin_api() -> Module:
    """Load the API description bundled with this package."""
    return SchemaLoader().load(BUILTIN_API)

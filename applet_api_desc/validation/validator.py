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

"""Schema validator.

Walks the assembled module tree once and collects every issue before
failing, so a single run reports the whole set. Validation is pure: the
same tree always yields the same issues in the same order.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, List, Optional, Set

from ..exceptions import (
    DuplicateEventId,
    DuplicateName,
    MalformedField,
    MissingDocumentation,
    SchemaValidationError,
)
from ..linkage.registry import LinkageRegistry
from ..models.issues import SchemaIssue
from ..models.items import Enumeration, Field, Function, Item, Module, check_fields
from ..file_io.source_location import SourceLocation

logger = logging.getLogger(__name__)


def event_enumerations(module: Module) -> Set[str]:
    """Names of the module's enumerations referenced by an integer field."""
    referenced: Set[str] = set()
    for item in module.items:
        if isinstance(item, Function):
            for f in item.params + item.results:
                if f.enum is not None:
                    referenced.add(f.enum)
    return referenced


def _has_docs(docs: Optional[str]) -> bool:
    return isinstance(docs, str) and bool(docs.strip())


class SchemaValidator:
    """Collects issues across a module tree."""

    def __init__(self, sources: Optional[Dict[str, SourceLocation]] = None):
        # Optional item path -> source location, filled in by the YAML loader.
        self.sources = sources or {}
        self.issues: List[SchemaIssue] = []

    def _add(self, error_type, message: str, path: str) -> None:
        issue = SchemaIssue.of(error_type, message, path)
        source = self.sources.get(path)
        if source is not None:
            issue = SchemaIssue(kind=issue.kind, message=issue.message, path=path, source=source)
        self.issues.append(issue)

    def run(self, root: Module) -> List[SchemaIssue]:
        self.issues = []

        registry = LinkageRegistry.from_module(root)
        for issue in registry.issues:
            source = self.sources.get(issue.path)
            self.issues.append(
                SchemaIssue(kind=issue.kind, message=issue.message, path=issue.path, source=source)
            )

        self._check_module(root, root.name)
        return self.issues

    def _check_docs(self, item: Item, path: str) -> None:
        if not _has_docs(item.docs):
            self._add(MissingDocumentation, f"{item.kind} '{item.name}' has no documentation", path)

    def _check_module(self, module: Module, path: str) -> None:
        self._check_docs(module, path)

        counts = Counter(item.name for item in module.items)
        for name, count in counts.items():
            if count > 1:
                self._add(DuplicateName, f"Module '{module.name}' declares '{name}' {count} times", path)

        events = event_enumerations(module)
        for item in module.items:
            child_path = f"{path}/{item.name}"
            if isinstance(item, Module):
                self._check_module(item, child_path)
            elif isinstance(item, Function):
                self._check_function(module, item, child_path)
            elif isinstance(item, Enumeration):
                self._check_enumeration(item, child_path, item.name in events)

    def _check_function(self, module: Module, function: Function, path: str) -> None:
        self._check_docs(function, path)

        for label, fields in (("params", function.params), ("results", function.results)):
            try:
                check_fields(f"function '{function.name}' {label}", fields)
            except MalformedField as exc:
                self._add(MalformedField, exc.message, path)
            for f in fields:
                self._check_enum_reference(module, f, f"{path}/{label}/{f.name}")

    def _check_enum_reference(self, module: Module, f: Field, path: str) -> None:
        if f.enum is None:
            return
        if module.local_enum(f.enum) is None:
            self._add(
                MalformedField,
                f"Field '{f.name}' references unknown enumeration '{f.enum}' in module '{module.name}'",
                path,
            )

    def _check_enumeration(self, enum: Enumeration, path: str, is_event: bool) -> None:
        self._check_docs(enum, path)

        names = Counter(v.name for v in enum.variants)
        for name, count in names.items():
            if count > 1:
                self._add(DuplicateName, f"Enumeration '{enum.name}' declares variant '{name}' {count} times", path)

        if not is_event:
            return

        seen: Dict[int, str] = {}
        for variant in enum.variants:
            if variant.value in seen:
                self._add(
                    DuplicateEventId,
                    f"Event variants '{seen[variant.value]}' and '{variant.name}' of '{enum.name}' "
                    f"share discriminant {variant.value}",
                    path,
                )
            else:
                seen[variant.value] = variant.name


def collect_issues(root: Module, sources: Optional[Dict[str, SourceLocation]] = None) -> List[SchemaIssue]:
    """Return every issue in the tree without raising."""
    return SchemaValidator(sources).run(root)


def validate(root: Module, sources: Optional[Dict[str, SourceLocation]] = None) -> Module:
    """Validate a schema tree, returning it unchanged when it is sound.

    Raises:
        SchemaValidationError: If any issue is found. No partial result is returned.
    """
    issues = collect_issues(root, sources)
    if issues:
        for issue in issues:
            logger.error(str(issue))
        raise SchemaValidationError(issues)

    logger.debug(f"Schema '{root.name}' passed validation")
    return root

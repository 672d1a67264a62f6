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

"""Naming convention linter for schema source files."""

import re
from pathlib import Path
from typing import Any, Dict, List

from ..exceptions import SchemaSourceError
from ..file_io.source_location import SourceMap, lookup_source
from ..parsers.yaml_parser import yaml_parser
from .report import LintResult


class NamingLinter:
    """Linter for naming conventions and field/variant documentation."""

    def lint(self, file_path: Path, result: LintResult):
        try:
            config, source_map = yaml_parser.load_config_with_source(file_path)
        except SchemaSourceError:
            return
        if not isinstance(config, dict):
            return

        name = config.get('name')
        if isinstance(name, str) and not self._is_snake_case(name):
            result.add_error_at(
                f"Module name '{name}' should be in snake_case format (e.g., 'serial', 'usb')",
                lookup_source(source_map, '/name'),
            )

        self._lint_items(config.get('items'), '', source_map, result)

    def _lint_items(self, items: Any, yaml_path: str, source_map: SourceMap, result: LintResult):
        if not isinstance(items, list):
            return

        for idx, item in enumerate(items):
            if not isinstance(item, dict):
                continue
            item_path = f"{yaml_path}/items/{idx}"
            loc = lookup_source(source_map, item_path)

            if 'module' in item:
                if not self._is_snake_case(item['module']):
                    result.add_error_at(f"Module name '{item['module']}' should be in snake_case format", loc)
                self._lint_items(item.get('items'), item_path, source_map, result)
            elif 'function' in item:
                if not self._is_snake_case(item['function']):
                    result.add_error_at(
                        f"Function name '{item['function']}' should be in snake_case format "
                        f"(e.g., 'read', 'unregister')",
                        loc,
                    )
                self._lint_fields(item.get('params'), f"{item_path}/params", source_map, result)
                self._lint_fields(item.get('results'), f"{item_path}/results", source_map, result)
            elif 'enum' in item:
                if not self._is_pascal_case(item['enum']):
                    result.add_error_at(
                        f"Enum name '{item['enum']}' should be in PascalCase format (e.g., 'Event')", loc
                    )
                self._lint_variants(item.get('variants'), f"{item_path}/variants", source_map, result)

    def _lint_fields(self, fields: Any, yaml_path: str, source_map: SourceMap, result: LintResult):
        if not isinstance(fields, list):
            return
        for idx, f in enumerate(fields):
            if not isinstance(f, dict) or 'name' not in f:
                continue
            loc = lookup_source(source_map, f"{yaml_path}/{idx}")
            if not self._is_snake_case(f['name']):
                result.add_error_at(f"Field name '{f['name']}' should be in snake_case format", loc)
            if not f.get('docs') and 'enum' not in f and f.get('type') != 'callback':
                result.add_warning_at(f"Field '{f['name']}' has no documentation", loc)

    def _lint_variants(self, variants: Any, yaml_path: str, source_map: SourceMap, result: LintResult):
        if not isinstance(variants, list):
            return
        values: Dict[Any, List[str]] = {}
        for idx, v in enumerate(variants):
            if not isinstance(v, dict) or 'name' not in v:
                continue
            loc = lookup_source(source_map, f"{yaml_path}/{idx}")
            if not self._is_pascal_case(v['name']):
                result.add_error_at(f"Variant name '{v['name']}' should be in PascalCase format", loc)
            if not v.get('docs'):
                result.add_warning_at(f"Variant '{v['name']}' has no documentation", loc)
            values.setdefault(v.get('value'), []).append(v['name'])

        for value, names in values.items():
            if len(names) > 1:
                result.add_warning(f"Variants {', '.join(names)} share discriminant {value}")

    @staticmethod
    def _is_pascal_case(name: Any) -> bool:
        """PascalCase: uppercase first letter, then alphanumerics (e.g. Event, ReadyState)."""
        return isinstance(name, str) and bool(re.match(r'^[A-Z][a-zA-Z0-9]*$', name))

    @staticmethod
    def _is_snake_case(name: Any) -> bool:
        """snake_case: lowercase letters, digits and underscores, starting with a letter."""
        return isinstance(name, str) and bool(re.match(r'^[a-z][a-z0-9_]*$', name))

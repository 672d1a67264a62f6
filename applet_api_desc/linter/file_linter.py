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

"""File naming linter for schema source files."""

import re
from pathlib import Path

from ..exceptions import SchemaSourceError
from ..parsers.yaml_parser import yaml_parser
from .report import LintResult


class FileLinter:
    """Linter for file naming conventions."""

    EXTENSIONS = ('.yaml', '.yml')

    def lint(self, file_path: Path, result: LintResult):
        """A source file is named after the module it declares: ``<module>.yaml``."""
        if file_path.suffix not in self.EXTENSIONS:
            result.add_error(
                f"File does not have a schema source extension. Expected one of: {', '.join(self.EXTENSIONS)}"
            )
            return

        stem = file_path.stem
        if not re.match(r'^[a-z][a-z0-9_]*$', stem):
            result.add_error(f"File name '{stem}' should be in snake_case format (e.g., 'serial', 'usb')")

        try:
            config, _ = yaml_parser.load_config_with_source(file_path)
        except SchemaSourceError:
            # Parse failures are reported by the structure linter.
            return

        name = config.get('name') if isinstance(config, dict) else None
        if isinstance(name, str) and name != stem:
            result.add_error(f"File name '{stem}' does not match module name '{name}'")

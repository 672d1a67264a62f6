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

"""Structure and schema linter for schema source files.

Loads the file (and its includes) the same way generation does and reports
every problem found in this file with its YAML location.
"""

from pathlib import Path

from ..exceptions import SchemaSourceError, SchemaValidationError
from ..file_io.source_location import lookup_source
from ..parsers.schema_loader import SchemaLoader
from ..parsers.yaml_parser import yaml_parser
from ..utils.format_version import FORMAT_FIELD, check_format_version
from .report import LintResult


class StructureLinter:
    """Linter for structure, format version and schema rules."""

    def lint(self, file_path: Path, result: LintResult):
        try:
            config, source_map = yaml_parser.load_config_with_source(file_path)
        except SchemaSourceError as e:
            result.add_error_at(f"Failed to load YAML file: {e}", e.source)
            return

        raw_version = config.get(FORMAT_FIELD) if isinstance(config, dict) else None
        ver_result = check_format_version(raw_version)
        ver_loc = lookup_source(source_map, f"/{FORMAT_FIELD}")
        if not ver_result.compatible:
            result.add_error_at(ver_result.message, ver_loc)
            return
        if ver_result.missing or ver_result.minor_newer:
            result.add_warning_at(ver_result.message, ver_loc)

        this_file = file_path.resolve()
        try:
            SchemaLoader().load(file_path)
        except SchemaValidationError as e:
            for issue in e.issues:
                loc = issue.source
                if loc is not None and loc.file_path is not None and loc.file_path.resolve() != this_file:
                    # Reported when that file is linted.
                    continue
                result.add_error_at(f"{issue.kind}: {issue.message}", loc)
        except SchemaSourceError as e:
            result.add_error_at(str(e), e.source)

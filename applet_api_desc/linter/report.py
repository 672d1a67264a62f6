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

"""Error reporting for the linter."""

from pathlib import Path
from typing import List, Dict, Any, Optional

from ..file_io.source_location import SourceLocation


class LintResult:
    """Container for linting results for a single file."""

    def __init__(self, file_path: Path):
        self.file_path = file_path
        self.errors: List[Dict[str, Any]] = []
        self.warnings: List[Dict[str, Any]] = []

    @staticmethod
    def _entry(
        message: str,
        line: Optional[int],
        column: Optional[int],
        yaml_path: Optional[str],
    ) -> Dict[str, Any]:
        entry: Dict[str, Any] = {'message': message}
        if line is not None:
            entry['line'] = line
        if column is not None:
            entry['column'] = column
        if yaml_path is not None:
            entry['yaml_path'] = yaml_path
        return entry

    def add_error(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        yaml_path: Optional[str] = None,
    ):
        self.errors.append(self._entry(message, line, column, yaml_path))

    def add_warning(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        yaml_path: Optional[str] = None,
    ):
        self.warnings.append(self._entry(message, line, column, yaml_path))

    def add_error_at(self, message: str, loc: Optional[SourceLocation]):
        if loc is None:
            self.add_error(message)
        else:
            self.add_error(message, line=loc.line, column=loc.column, yaml_path=loc.yaml_path)

    def add_warning_at(self, message: str, loc: Optional[SourceLocation]):
        if loc is None:
            self.add_warning(message)
        else:
            self.add_warning(message, line=loc.line, column=loc.column, yaml_path=loc.yaml_path)

    @property
    def ok(self) -> bool:
        return not self.errors

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

"""Linter package for schema source files."""

import logging
from pathlib import Path
from typing import List

from .report import LintResult
from .structure_linter import StructureLinter
from .naming_linter import NamingLinter
from .file_linter import FileLinter

__all__ = ['lint_files', 'LintResult']

logger = logging.getLogger(__name__)


def lint_files(file_paths: List[Path]) -> List[LintResult]:
    """Lint a list of schema source files, one LintResult per file."""
    results = []

    structure_linter = StructureLinter()
    naming_linter = NamingLinter()
    file_linter = FileLinter()

    for file_path in file_paths:
        result = LintResult(file_path)
        logger.debug(f"Linting {file_path}")

        file_linter.lint(file_path, result)
        structure_linter.lint(file_path, result)
        naming_linter.lint(file_path, result)

        results.append(result)

    return results

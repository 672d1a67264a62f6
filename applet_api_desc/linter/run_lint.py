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

"""Discovery and output formatting for the lint command."""

import json
import logging
from pathlib import Path
from typing import List

from .report import LintResult

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = ('.yaml', '.yml')


def find_schema_files(paths: List[str]) -> List[Path]:
    """Find schema source files in the given files and directories."""
    files = []

    for path_str in paths:
        path = Path(path_str)

        if not path.exists():
            logger.warning(f"Path does not exist: {path}")
            continue

        if path.is_file():
            files.append(path)
        elif path.is_dir():
            for ext in SOURCE_EXTENSIONS:
                files.extend(path.rglob(f'*{ext}'))
        else:
            logger.warning(f"Path is neither file nor directory: {path}")

    return sorted(set(files))


def format_results(results: List[LintResult], output_format: str = 'human') -> str:
    """Render lint results as 'human', 'json' or 'github-actions' text."""
    lines: List[str] = []

    if output_format == 'json':
        output = {
            'files': len(results),
            'errors': sum(len(r.errors) for r in results),
            'warnings': sum(len(r.warnings) for r in results),
            'results': [
                {
                    'file': str(r.file_path),
                    'errors': r.errors,
                    'warnings': r.warnings,
                }
                for r in results
            ],
        }
        return json.dumps(output, indent=2)

    if output_format == 'github-actions':
        for result in results:
            for error in result.errors:
                lines.append(f"::error file={result.file_path},line={error.get('line', 1)}::{error['message']}")
            for warning in result.warnings:
                lines.append(f"::warning file={result.file_path},line={warning.get('line', 1)}::{warning['message']}")
        return "\n".join(lines)

    for result in results:
        if result.errors or result.warnings:
            lines.append(f"\n{result.file_path}:")
            for error in result.errors:
                line_info = f":{error['line']}" if 'line' in error else ""
                lines.append(f"  ERROR{line_info}: {error['message']}")
            for warning in result.warnings:
                line_info = f":{warning['line']}" if 'line' in warning else ""
                lines.append(f"  WARNING{line_info}: {warning['message']}")
    if not any(r.errors for r in results):
        lines.append("Lint succeeded with no errors.")
    return "\n".join(lines)

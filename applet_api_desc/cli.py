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

"""Command line entry point: ``python -m applet_api_desc``."""

import argparse
import logging
import os
from typing import List, Optional

from .config import generator_config
from .exceptions import ApiDescError
from .generators.docs import write_module_docs
from .generators.ir_json import save_ir
from .linkage.compat import check_compatibility
from .linter import lint_files
from .linter.run_lint import find_schema_files, format_results
from .parsers.schema_loader import load_schema_file

logger = logging.getLogger(__name__)


def _cmd_check(args: argparse.Namespace) -> int:
    root = load_schema_file(args.source)
    for path, function in root.functions():
        print(f"{function.link}\t{path}")
    return 0


def _cmd_lint(args: argparse.Namespace) -> int:
    files = find_schema_files(args.paths or ['.'])
    if not files:
        logger.error("No schema source files found.")
        return 1

    results = lint_files(files)
    print(format_results(results, args.format))
    return 1 if any(r.errors for r in results) else 0


def _cmd_docs(args: argparse.Namespace) -> int:
    root = load_schema_file(args.source)
    output_dir = args.output or os.path.join(generator_config.output_dir, "docs")
    write_module_docs(root, output_dir, title=args.title)
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    root = load_schema_file(args.source)
    output_path = args.output or os.path.join(generator_config.output_dir, f"{root.name}.ir.json")
    save_ir(output_path, root)
    return 0


def _cmd_compat(args: argparse.Namespace) -> int:
    old = load_schema_file(args.old)
    new = load_schema_file(args.new)
    changes = check_compatibility(old, new)
    for change in changes:
        marker = "BREAKING" if change.breaking else "compatible"
        print(f"{marker}: {change.message}")
    if any(change.breaking for change in changes):
        return 1
    if not changes:
        print("No ABI changes.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='applet_api_desc',
        description='Validate applet API schemas and generate artifacts from them',
    )
    parser.add_argument('--log-level', default=None, help='Override APPLET_API_DESC_LOG_LEVEL')
    sub = parser.add_subparsers(dest='command', required=True)

    check = sub.add_parser('check', help='Validate a schema and list its symbols')
    check.add_argument('source', help='Root schema YAML file')
    check.set_defaults(func=_cmd_check)

    lint = sub.add_parser('lint', help='Lint schema source files')
    lint.add_argument('paths', nargs='*', help='Files or directories to lint (default: current directory)')
    lint.add_argument(
        '--format',
        choices=['human', 'json', 'github-actions'],
        default='human',
        help='Output format (default: human)',
    )
    lint.set_defaults(func=_cmd_lint)

    docs = sub.add_parser('docs', help='Generate Markdown reference documentation')
    docs.add_argument('source', help='Root schema YAML file')
    docs.add_argument('-o', '--output', help='Output directory')
    docs.add_argument('--title', default=None, help='Document title')
    docs.set_defaults(func=_cmd_docs)

    export = sub.add_parser('export', help='Export the validated schema as JSON for other generators')
    export.add_argument('source', help='Root schema YAML file')
    export.add_argument('-o', '--output', help='Output JSON file')
    export.set_defaults(func=_cmd_export)

    compat = sub.add_parser('compat', help='Report ABI changes between two schema revisions')
    compat.add_argument('old', help='Root schema YAML file of the previous revision')
    compat.add_argument('new', help='Root schema YAML file of the new revision')
    compat.set_defaults(func=_cmd_compat)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.log_level:
        generator_config.log_level = args.log_level
    generator_config.set_logging()

    try:
        return args.func(args)
    except ApiDescError as exc:
        # Fatal: nothing has been written for an invalid schema.
        logger.error(str(exc))
        return 1

"""Tests for the schema source linter."""

from __future__ import annotations

import json

from applet_api_desc.linter import lint_files
from applet_api_desc.linter.run_lint import find_schema_files, format_results
from applet_api_desc.parsers.schema_loader import BUILTIN_API


def _messages(entries):
    return [e["message"] for e in entries]


class TestLinter:

    def test_builtin_sources_are_clean(self):
        files = find_schema_files([str(BUILTIN_API.parent)])
        assert sorted(f.name for f in files) == ["api.yaml", "serial.yaml", "usb.yaml"]

        results = lint_files(files)
        for result in results:
            assert result.errors == [], result.file_path
            assert result.warnings == [], result.file_path
        assert format_results(results) == "Lint succeeded with no errors."

    def test_naming_conventions(self, write_yaml):
        path = write_yaml(
            "gpio.yaml",
            """
            applet_api_format: 0.1.0
            name: gpio
            docs: GPIO.
            items:
              - enum: pin_state
                docs: Pin states.
                variants:
                  - name: low
                    value: 0
                    docs: Low.
                  - name: High
                    value: 1
              - function: ReadPin
                link: gpr
                docs: Reads a pin.
                params:
                  - name: Pin
                    type: usize
                    docs: Pin index.
                  - name: mode
                    type: u8
            """,
        )
        (result,) = lint_files([path])
        errors = _messages(result.errors)
        assert "Enum name 'pin_state' should be in PascalCase format (e.g., 'Event')" in errors
        assert "Variant name 'low' should be in PascalCase format" in errors
        assert any(m.startswith("Function name 'ReadPin'") for m in errors)
        assert "Field name 'Pin' should be in snake_case format" in errors

        warnings = _messages(result.warnings)
        assert "Variant 'High' has no documentation" in warnings
        assert "Field 'mode' has no documentation" in warnings

        enum_error = next(e for e in result.errors if e["message"].startswith("Enum name"))
        assert enum_error["line"] == 5

    def test_file_name_must_match_module(self, write_yaml):
        path = write_yaml(
            "serial.yaml",
            """
            applet_api_format: 0.1.0
            name: uart
            docs: UART.
            """,
        )
        (result,) = lint_files([path])
        assert _messages(result.errors) == ["File name 'serial' does not match module name 'uart'"]

    def test_wrong_extension(self, write_yaml):
        path = write_yaml("serial.txt", "name: serial\ndocs: Serial.\n")
        (result,) = lint_files([path])
        assert not result.ok
        assert result.errors[0]["message"].startswith("File does not have a schema source extension")

    def test_schema_issues_are_reported_with_lines(self, write_yaml):
        path = write_yaml(
            "sys.yaml",
            """
            applet_api_format: 0.1.0
            name: sys
            docs: System.
            items:
              - function: flush
                link: syf
                docs: Flushes.
              - function: sync
                link: syf
            """,
        )
        (result,) = lint_files([path])
        errors = {e["message"].split(":")[0]: e for e in result.errors}
        assert errors["DuplicateSymbol"]["line"] == 8
        assert errors["MissingDocumentation"]["line"] == 8

    def test_incompatible_version(self, write_yaml):
        path = write_yaml("sys.yaml", "applet_api_format: 9.0.0\nname: sys\ndocs: System.\n")
        (result,) = lint_files([path])
        assert len(result.errors) == 1
        assert result.errors[0]["line"] == 1
        assert "Incompatible format version" in result.errors[0]["message"]

    def test_missing_version_is_a_warning(self, write_yaml):
        path = write_yaml("sys.yaml", "name: sys\ndocs: System.\n")
        (result,) = lint_files([path])
        assert result.ok
        assert any("applet_api_format" in m for m in _messages(result.warnings))

    def test_json_output(self, write_yaml):
        path = write_yaml("sys.yaml", "applet_api_format: 0.1.0\nname: sys\ndocs: System.\n")
        output = json.loads(format_results(lint_files([path]), "json"))
        assert output["files"] == 1
        assert output["errors"] == 0

    def test_github_actions_output(self, write_yaml):
        path = write_yaml("Bad.yaml", "applet_api_format: 0.1.0\nname: Bad\ndocs: Bad.\n")
        text = format_results(lint_files([path]), "github-actions")
        assert f"::error file={path},line=1::File name 'Bad' should be in snake_case format" in text

    def test_undecodable_file_is_reported(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_bytes(b"name: \xff\xfe\n")
        (result,) = lint_files([path])
        assert not result.ok
        assert any("Failed to read schema file" in m for m in _messages(result.errors))

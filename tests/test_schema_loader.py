"""Tests for loading schema trees from YAML sources."""

from __future__ import annotations

import logging
import textwrap

import pytest

from applet_api_desc.exceptions import FormatVersionError, SchemaSourceError, SchemaValidationError
from applet_api_desc.models import Callback, Integer, Module, Pointer
from applet_api_desc.parsers import load_schema_file, load_schema_string


FLUSH = """
    applet_api_format: 0.1.0
    name: {name}
    docs: A module.
    items:
      - function: flush
        link: {link}
        docs: Flushes.
        results:
          - name: res
            type: isize
            docs: Zero on success.
"""


class TestBuiltinApi:

    def test_serial_example(self, api_root, serial):
        assert api_root.name == "api"
        assert [path for path, item in api_root.walk() if isinstance(item, Module)] == [
            "api",
            "api/usb",
            "api/usb/serial",
        ]
        assert [(fn.name, fn.link) for _, fn in serial.functions()] == [
            ("read", "usr"),
            ("write", "usw"),
            ("register", "use"),
            ("unregister", "usd"),
            ("flush", "usf"),
        ]

    def test_field_types(self, serial):
        read = serial.find("read")
        assert read.params[0].type == Pointer(mutable=True, length="len")
        assert read.params[1].type == Integer(signed=False)
        assert read.results[0].type == Integer(signed=True)
        assert serial.find("write").params[0].type == Pointer(mutable=False, length="len")

        register = serial.find("register")
        assert register.params[0].enum == "Event"
        assert isinstance(register.params[1].type, Callback)
        assert serial.find("flush").params == ()

    def test_event_enum(self, serial):
        event = serial.find("Event")
        assert [(v.name, v.value) for v in event.variants] == [("Read", 0), ("Write", 1)]

    def test_multi_paragraph_docs_are_kept(self, serial):
        docs = serial.find("read").results[0].docs
        assert docs == (
            "Number of bytes read (or negative value for errors).\n\n"
            "This function does not block and may return zero."
        )


class TestLoader:

    def test_load_string(self):
        module = load_schema_string(textwrap.dedent(FLUSH.format(name="sys", link="syf")))
        assert isinstance(module, Module)
        assert module.find("flush").link == "syf"

    def test_inline_child_module(self, write_yaml):
        path = write_yaml(
            "root.yaml",
            """
            applet_api_format: 0.1.0
            name: root
            docs: Root.
            items:
              - module: led
                docs: LEDs.
                items:
                  - function: count
                    link: ldc
                    docs: Returns the number of LEDs.
                    results:
                      - name: cnt
                        type: usize
                        docs: Number of LEDs.
            """,
        )
        root = load_schema_file(path)
        assert root.find("led/count").link == "ldc"

    def test_include_resolves_relative_to_including_file(self, write_yaml):
        write_yaml("sub/child.yaml", FLUSH.format(name="child", link="chf"))
        path = write_yaml(
            "root.yaml",
            """
            applet_api_format: 0.1.0
            name: root
            docs: Root.
            items:
              - include: sub/child.yaml
            """,
        )
        root = load_schema_file(path)
        assert root.find("child/flush").link == "chf"

    def test_include_cycle(self, write_yaml, tmp_path):
        write_yaml(
            "a.yaml",
            """
            applet_api_format: 0.1.0
            name: a
            docs: A.
            items:
              - include: b.yaml
            """,
        )
        write_yaml(
            "b.yaml",
            """
            applet_api_format: 0.1.0
            name: b
            docs: B.
            items:
              - include: a.yaml
            """,
        )
        with pytest.raises(SchemaSourceError, match="Include cycle"):
            load_schema_file(tmp_path / "a.yaml")

    def test_missing_file(self, tmp_path):
        with pytest.raises(SchemaSourceError, match="not found"):
            load_schema_file(tmp_path / "nope.yaml")

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_bytes(b"name: \xff\xfe\n")
        with pytest.raises(SchemaSourceError, match="Failed to read schema file") as excinfo:
            load_schema_file(path)
        assert excinfo.value.source.file_path == path.resolve()

    def test_yaml_syntax_error_has_line(self, write_yaml):
        path = write_yaml("bad.yaml", "name: bad\nitems: [\n")
        with pytest.raises(SchemaSourceError) as excinfo:
            load_schema_file(path)
        assert excinfo.value.source is not None
        assert excinfo.value.source.line is not None


class TestSourceChecks:

    def test_incompatible_format_version(self, write_yaml):
        path = write_yaml("sys.yaml", FLUSH.format(name="sys", link="syf").replace("0.1.0", "1.0.0"))
        with pytest.raises(FormatVersionError) as excinfo:
            load_schema_file(path)
        assert excinfo.value.source.line == 1

    def test_missing_format_version_warns(self, write_yaml, caplog):
        content = FLUSH.format(name="sys", link="syf").replace("applet_api_format: 0.1.0\n", "")
        path = write_yaml("sys.yaml", content)
        with caplog.at_level(logging.WARNING):
            load_schema_file(path)
        assert "applet_api_format" in caplog.text

    def test_unknown_key_is_a_structure_error(self, write_yaml):
        path = write_yaml(
            "sys.yaml",
            """
            applet_api_format: 0.1.0
            name: sys
            docs: A module.
            items:
              - function: flush
                link: syf
                docs: Flushes.
                returns: []
            """,
        )
        with pytest.raises(SchemaSourceError, match="Invalid schema source structure"):
            load_schema_file(path)


class TestBatchErrors:

    def test_construction_and_validation_errors_are_reported_together(self, write_yaml):
        path = write_yaml(
            "sys.yaml",
            """
            applet_api_format: 0.1.0
            name: sys
            docs: A module.
            items:
              - function: read
                link: syr
                docs: Reads.
                params:
                  - name: ptr
                    type: "*mut u8"
                    length: size
                    docs: Buffer.
              - function: peek
                link: syr
                docs: Peeks.
              - function: wide
                link: syw
                params:
                  - name: x
                    type: u12
                    docs: Too wide.
            """,
        )
        with pytest.raises(SchemaValidationError) as excinfo:
            load_schema_file(path)

        issues = excinfo.value.issues
        kinds = excinfo.value.kinds
        assert kinds.count("MalformedField") == 2
        assert "DuplicateSymbol" not in kinds

        malformed = [i for i in issues if i.kind == "MalformedField"]
        assert malformed[0].path == "sys/read"
        assert malformed[0].source.line == 5
        assert malformed[1].path == "sys/wide"
        assert malformed[1].source.line == 16

    def test_validation_issue_carries_location(self, write_yaml):
        path = write_yaml(
            "sys.yaml",
            """
            applet_api_format: 0.1.0
            name: sys
            docs: A module.
            items:
              - function: flush
                link: syf
                docs: Flushes.
              - function: sync
                link: syf
                docs: Syncs.
            """,
        )
        with pytest.raises(SchemaValidationError) as excinfo:
            load_schema_file(path)
        (issue,) = excinfo.value.issues
        assert issue.kind == "DuplicateSymbol"
        assert issue.source.line == 8
        assert issue.source.file_path == path.resolve()


"""Tests for batch schema validation."""

from __future__ import annotations

import pytest

from applet_api_desc.exceptions import SchemaValidationError
from applet_api_desc.models import Enumeration, Field, Function, Module, Variant
from applet_api_desc.validation import collect_issues, event_enumerations, validate
from tests.harness import USIZE, make_event_module, make_read


def kinds(root: Module):
    return [issue.kind for issue in collect_issues(root)]


class TestValidSchemas:

    def test_builtin_api_is_valid(self, api_root):
        assert collect_issues(api_root) == []
        assert validate(api_root) is api_root

    def test_symbols_pairwise_distinct(self, api_root):
        links = [fn.link for _, fn in api_root.functions()]
        assert len(links) == len(set(links))

    def test_event_enumerations(self, serial):
        assert event_enumerations(serial) == {"Event"}


class TestIssues:

    def test_duplicate_symbol(self):
        root = Module("api", "Root.", [make_read("usr"), make_read("usr", name="read_again")])
        with pytest.raises(SchemaValidationError) as excinfo:
            validate(root)
        assert excinfo.value.kinds == ["DuplicateSymbol"]
        assert "usr" in str(excinfo.value)

    def test_duplicate_symbol_across_modules(self):
        a = Module("a", "A.", [make_read("usr")])
        b = Module("b", "B.", [make_read("usr")])
        assert kinds(Module("api", "Root.", [a, b])) == ["DuplicateSymbol"]

    def test_duplicate_event_id(self):
        module = make_event_module(variants=[Variant("Read", 0, "R."), Variant("Write", 0, "W.")])
        assert kinds(module) == ["DuplicateEventId"]

    def test_duplicate_discriminant_outside_events_is_allowed(self):
        enum = Enumeration("Mode", "Modes.", [Variant("A", 0), Variant("B", 0)])
        assert kinds(Module("m", "M.", [enum])) == []

    def test_missing_documentation(self):
        root = Module("api", "", [Function(name="flush", link="usf", docs="  ")])
        assert kinds(root) == ["MissingDocumentation", "MissingDocumentation"]

    def test_unknown_enum_reference(self):
        function = Function(name="unregister", link="usd", docs="U.", params=[Field("event", USIZE, enum="Event")])
        assert kinds(Module("m", "M.", [function])) == ["MalformedField"]

    def test_duplicate_names(self):
        root = Module("m", "M.", [make_read("usr"), make_read("usx")])
        assert kinds(root) == ["DuplicateName"]

    def test_duplicate_variant_names(self):
        enum = Enumeration("Mode", "Modes.", [Variant("A", 0), Variant("A", 1)])
        assert kinds(Module("m", "M.", [enum])) == ["DuplicateName"]

    @pytest.mark.parametrize("link", ["", "USR", "1ab", "toolongsymbol", "u-r"])
    def test_invalid_symbol(self, link):
        assert kinds(Module("m", "M.", [make_read(link)])) == ["InvalidSymbol"]

    def test_all_issues_reported_in_one_pass(self):
        module = make_event_module(variants=[Variant("Read", 0), Variant("Write", 0)], register_link="usr")
        root = Module("api", "", [module])
        found = kinds(root)
        assert "DuplicateSymbol" in found
        assert "DuplicateEventId" in found
        assert "MissingDocumentation" in found

    def test_validation_is_deterministic(self):
        module = make_event_module(variants=[Variant("Read", 0), Variant("Write", 0)], register_link="usr")
        root = Module("api", "", [module])
        assert collect_issues(root) == collect_issues(root)

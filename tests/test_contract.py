"""Tests for the marshaling contract and event registration."""

from __future__ import annotations

import pytest

from applet_api_desc.contract import (
    EventState,
    EventTable,
    GuestMemory,
    check_arguments,
    interpret_result,
    is_success,
)
from applet_api_desc.contract.events import FunctionHandler, Handler
from applet_api_desc.exceptions import ContractViolation, OutOfBounds, UnknownEvent
from applet_api_desc.models import Module
from tests.harness import make_event_module


class RecordingHandler(Handler):
    def __init__(self):
        self.contexts = []

    def invoke(self, context):
        self.contexts.append(context)


class TestResultConvention:

    def test_zero_is_success(self):
        assert is_success(0)
        result = interpret_result(0)
        assert result.ok
        assert result.error is None

    @pytest.mark.parametrize("value", [-1, -2, -(1 << 31)])
    def test_any_negative_is_failure(self, value):
        result = interpret_result(value)
        assert not result.ok
        assert result.error == value

    def test_positive_is_success(self):
        assert interpret_result(17).ok

    def test_non_integer_result(self):
        with pytest.raises(ContractViolation):
            interpret_result("0")


class TestGuestMemory:

    def test_borrow_is_range_checked(self):
        memory = GuestMemory(16)
        with pytest.raises(OutOfBounds):
            with memory.borrow(10, 8):
                pass
        with pytest.raises(OutOfBounds):
            memory.check_range(-1, 1)

    def test_non_integer_address(self):
        memory = GuestMemory(16)
        with pytest.raises(ContractViolation):
            memory.check_range(0.5, 1)
        with pytest.raises(ContractViolation):
            memory.read(0, 2.0)

    def test_zero_length_buffer_is_legal(self):
        memory = GuestMemory(16)
        assert memory.read(16, 0) == b""

    def test_view_does_not_outlive_the_call(self):
        memory = GuestMemory(b"hello world")
        with memory.borrow(0, 5) as view:
            assert bytes(view) == b"hello"
            kept = view
        with pytest.raises(ValueError):
            bytes(kept)

    def test_immutable_borrow_is_read_only(self):
        memory = GuestMemory(8)
        with memory.borrow(0, 4) as view:
            assert view.readonly

    def test_write(self):
        memory = GuestMemory(8)
        memory.write(2, b"ab")
        assert memory.read(0, 4) == b"\x00\x00ab"


class TestCheckArguments:

    def test_read_call(self, serial):
        read = serial.find("read")
        memory = GuestMemory(64)
        check_arguments(read, (0, 64), serial, memory)
        check_arguments(read, (32, 0), serial, memory)

    def test_buffer_outside_memory(self, serial):
        with pytest.raises(OutOfBounds):
            check_arguments(serial.find("write"), (60, 8), serial, GuestMemory(64))

    def test_arity(self, serial):
        with pytest.raises(ContractViolation):
            check_arguments(serial.find("flush"), (1,))

    def test_integer_range(self, serial):
        with pytest.raises(ContractViolation):
            check_arguments(serial.find("read"), (0, -1))

    def test_event_must_be_declared(self, serial):
        unregister = serial.find("unregister")
        check_arguments(unregister, (1,), serial)
        with pytest.raises(ContractViolation):
            check_arguments(unregister, (2,), serial)

    def test_callback_pair(self, serial):
        register = serial.find("register")
        check_arguments(register, (0, (RecordingHandler(), 0x1000)), serial)
        with pytest.raises(ContractViolation):
            check_arguments(register, (0, lambda ctx: None), serial)


class TestEventTable:

    @pytest.fixture
    def table(self, serial) -> EventTable:
        return EventTable.for_module(serial)

    def test_legal_events_are_the_discriminants(self, table):
        assert table.events == [0, 1]
        assert table.event_id("Read") == 0
        assert table.event_id("Write") == 1
        for bad in (2, -1, "Read", True, 1.0):
            with pytest.raises(UnknownEvent):
                table.register(bad, RecordingHandler(), None)
            with pytest.raises(UnknownEvent):
                table.unregister(bad)

    def test_register_then_unregister(self, table):
        read = table.event_id("Read")
        assert table.state(read) is EventState.UNREGISTERED
        table.register(read, RecordingHandler(), 0x20)
        assert table.state(read) is EventState.REGISTERED
        table.unregister(read)
        assert table.state(read) is EventState.UNREGISTERED
        # Idempotent.
        table.unregister(read)
        assert table.state(read) is EventState.UNREGISTERED

    def test_reregister_overwrites(self, table):
        first, second = RecordingHandler(), RecordingHandler()
        table.register(0, first, "a")
        table.register(0, second, "b")
        assert table.notify(0)
        assert first.contexts == []
        assert second.contexts == ["b"]

    def test_context_is_passed_back_verbatim(self, table):
        handler = RecordingHandler()
        context = object()
        table.register(1, handler, context)
        table.notify(1)
        table.notify(1)
        assert handler.contexts == [context, context]
        assert handler.contexts[0] is context

    def test_notify_without_registration(self, table):
        assert not table.notify(0)

    def test_events_are_independent(self, table):
        table.register(0, RecordingHandler(), None)
        assert table.state(1) is EventState.UNREGISTERED

    def test_handler_must_be_a_capability(self, table):
        with pytest.raises(ContractViolation):
            table.register(0, lambda ctx: None, None)

    def test_function_handler(self, table):
        seen = []
        table.register(0, FunctionHandler(seen.append), 7)
        table.notify(0)
        assert seen == [7]

    def test_module_without_events(self):
        with pytest.raises(ContractViolation):
            EventTable.for_module(Module("m", "M.", []))

    def test_tables_do_not_share_state(self):
        module = make_event_module()
        a, b = EventTable.for_module(module), EventTable.for_module(module)
        a.register(0, RecordingHandler(), None)
        assert b.state(0) is EventState.UNREGISTERED

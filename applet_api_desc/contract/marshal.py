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

"""Marshaling contract at the applet/host call boundary.

Buffers are ``(ptr, len)`` pairs into guest memory. The guest keeps
ownership and guarantees validity only for the duration of one synchronous
call, so the host borrows a view for that call and must not keep it.
Guest addresses are untrusted and are range-checked before any access.

Signed results follow one convention: zero or positive is success (zero
may mean "nothing available right now"), negative is an error whose
meaning is given by the function's documentation.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence

from ..exceptions import ContractViolation, OutOfBounds
from ..models.field_types import Callback, Integer, Pointer, WORD_BITS
from ..models.items import Function, Module
from .events import Handler

logger = logging.getLogger(__name__)


def is_success(value: int) -> bool:
    return value >= 0


@dataclass(frozen=True)
class CallResult:
    value: int

    @property
    def ok(self) -> bool:
        return is_success(self.value)

    @property
    def error(self) -> Optional[int]:
        return None if self.ok else self.value


def interpret_result(value: int) -> CallResult:
    """Interpret a signed result. Zero is a successful outcome, not a failure."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ContractViolation(f"Result must be an integer, got: {value!r}")
    return CallResult(value)


class GuestMemory:
    """Host-side view of a guest's linear memory."""

    def __init__(self, data: Any):
        # An int allocates zeroed memory of that size.
        self._data = bytearray(data)

    @property
    def size(self) -> int:
        return len(self._data)

    def check_range(self, ptr: int, length: int) -> None:
        for value in (ptr, length):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ContractViolation(f"Guest address and length must be integers, got: {value!r}")
        if ptr < 0 or length < 0 or ptr + length > len(self._data):
            raise OutOfBounds(
                f"Buffer [{ptr:#x}, {ptr:#x}+{length}) is outside guest memory of {len(self._data)} bytes"
            )

    @contextmanager
    def borrow(self, ptr: int, length: int, mutable: bool = False) -> Iterator[memoryview]:
        """Borrow a guest buffer for the duration of one call.

        The view is released on exit; using it afterwards raises ``ValueError``.
        """
        self.check_range(ptr, length)
        view = memoryview(self._data)[ptr:ptr + length]
        if not mutable:
            view = view.toreadonly()
        try:
            yield view
        finally:
            view.release()

    def read(self, ptr: int, length: int) -> bytes:
        with self.borrow(ptr, length) as view:
            return bytes(view)

    def write(self, ptr: int, data: bytes) -> None:
        with self.borrow(ptr, len(data), mutable=True) as view:
            view[:] = data


_ADDRESS = Integer(signed=False, bits=None)


def check_arguments(
    function: Function,
    args: Sequence[Any],
    module: Optional[Module] = None,
    memory: Optional[GuestMemory] = None,
) -> None:
    """Check guest-supplied positional arguments against a function's params.

    Callback params take a ``(handler, context)`` pair. When ``module`` is
    given, enum-typed params must hold a declared discriminant. When
    ``memory`` is given, pointer params are range-checked against their
    companion length.

    Raises:
        ContractViolation: On the first argument that breaks the contract.
    """
    if len(args) != len(function.params):
        raise ContractViolation(
            f"'{function.name}' takes {len(function.params)} argument(s), got {len(args)}"
        )

    values = {p.name: a for p, a in zip(function.params, args)}

    for param, arg in zip(function.params, args):
        where = f"'{function.name}' argument '{param.name}'"
        if isinstance(param.type, Integer):
            if isinstance(arg, bool) or not isinstance(arg, int):
                raise ContractViolation(f"{where} must be an integer, got {arg!r}")
            if not param.type.contains(arg):
                raise ContractViolation(f"{where} value {arg} does not fit {param.render_type()}")
            if param.enum is not None and module is not None:
                enum = module.local_enum(param.enum)
                if enum is not None and arg not in enum.discriminants:
                    raise ContractViolation(
                        f"{where} value {arg} is not a discriminant of '{enum.name}' {list(enum.discriminants)}"
                    )
        elif isinstance(param.type, Pointer):
            if isinstance(arg, bool) or not isinstance(arg, int) or not _ADDRESS.contains(arg):
                raise ContractViolation(f"{where} must be a {WORD_BITS}-bit guest address, got {arg!r}")
        elif isinstance(param.type, Callback):
            if not isinstance(arg, tuple) or len(arg) != 2 or not isinstance(arg[0], Handler):
                raise ContractViolation(f"{where} must be a (handler, context) pair")

    if memory is not None:
        for param in function.params:
            if isinstance(param.type, Pointer):
                memory.check_range(values[param.name], values[param.type.length])

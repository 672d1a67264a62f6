from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from ..exceptions import MalformedField


# Explicit integer widths. Word-sized integers (usize/isize) use bits=None.
SUPPORTED_WIDTHS: Tuple[int, ...] = (8, 16, 32, 64)

# Width of usize/isize on the guest target (wasm32).
WORD_BITS = 32

_INTEGER_RE = re.compile(r"^([ui])(8|16|32|64|size)$")
_POINTER_RE = re.compile(r"^\*\s*(mut|const)\s+u8$")
CALLBACK_TYPES = {"callback", "fn"}


@dataclass(frozen=True)
class Integer:
    signed: bool
    bits: Optional[int] = None

    def __post_init__(self) -> None:
        if isinstance(self.bits, bool) or (self.bits is not None and self.bits not in SUPPORTED_WIDTHS):
            raise MalformedField(
                f"Unsupported integer width {self.bits!r}; expected one of {list(SUPPORTED_WIDTHS)} or word-sized"
            )

    @property
    def word_sized(self) -> bool:
        return self.bits is None

    @property
    def effective_bits(self) -> int:
        return WORD_BITS if self.bits is None else self.bits

    @property
    def min_value(self) -> int:
        return -(1 << (self.effective_bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        if self.signed:
            return (1 << (self.effective_bits - 1)) - 1
        return (1 << self.effective_bits) - 1

    def contains(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value

    def render(self) -> str:
        prefix = "i" if self.signed else "u"
        return f"{prefix}{'size' if self.bits is None else self.bits}"


@dataclass(frozen=True)
class Pointer:
    """Raw pointer to a guest byte buffer.

    ``length`` names the companion unsigned integer field, in the same field
    list, that holds the buffer length in bytes.
    """

    mutable: bool
    length: str

    def __post_init__(self) -> None:
        if not isinstance(self.length, str) or not self.length.strip():
            raise MalformedField("Pointer field must name its companion length field")

    def render(self) -> str:
        return f"*{'mut' if self.mutable else 'const'} u8"


@dataclass(frozen=True)
class Callback:
    """Function pointer plus opaque guest context.

    Occupies two ABI slots: the handler function and its context data.
    """

    def abi_slots(self, name: str) -> Tuple[str, str]:
        return (f"{name}_func", f"{name}_data")

    def render(self) -> str:
        return "fn(context)"


FieldType = Union[Integer, Pointer, Callback]


def parse_type(type_name: Any, length: Optional[str] = None) -> FieldType:
    """Parse a type shorthand from the declarative source.

    Accepted forms: ``u8``..``u64``, ``i8``..``i64``, ``usize``, ``isize``,
    ``*mut u8``, ``*const u8`` and ``callback``. Pointers take their companion
    length field name from ``length``.

    Raises:
        MalformedField: If the shorthand is not recognized.
    """
    if not isinstance(type_name, str):
        raise MalformedField(f"Field type must be a string, got: {type_name!r}")

    text = type_name.strip()

    m = _INTEGER_RE.match(text)
    if m:
        width = m.group(2)
        return Integer(signed=m.group(1) == "i", bits=None if width == "size" else int(width))

    m = _POINTER_RE.match(text)
    if m:
        if length is None:
            raise MalformedField(f"Pointer type '{text}' requires a companion 'length' field")
        return Pointer(mutable=m.group(1) == "mut", length=length)

    if text.lower() in CALLBACK_TYPES:
        return Callback()

    raise MalformedField(f"Unsupported field type '{text}'")

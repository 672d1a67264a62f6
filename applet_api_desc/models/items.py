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

"""Schema item tree: modules, functions and enumerations.

Items are immutable once constructed. Structural field checks run in the
constructors; cross-item rules (symbol uniqueness, documentation, event ids)
are checked as one batch by :mod:`applet_api_desc.validation`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Sequence, Tuple, Union

from ..exceptions import MalformedField
from .field_types import Callback, FieldType, Integer, Pointer


@dataclass(frozen=True)
class Field:
    name: str
    type: FieldType
    docs: str = ""
    # Name of a sibling enumeration whose discriminants are the legal values.
    enum: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise MalformedField(f"Field name must be a non-empty string, got: {self.name!r}")
        if not isinstance(self.type, (Integer, Pointer, Callback)):
            raise MalformedField(f"Field '{self.name}' has unsupported type {self.type!r}")
        if self.enum is not None and not isinstance(self.type, Integer):
            raise MalformedField(f"Field '{self.name}' references enumeration '{self.enum}' but is not an integer")

    def render_type(self) -> str:
        return self.type.render()


def check_fields(owner: str, fields: Sequence[Field]) -> None:
    by_name: Dict[str, Field] = {}
    for f in fields:
        if not isinstance(f, Field):
            raise MalformedField(f"{owner}: expected Field, got {type(f).__name__}")
        if f.name in by_name:
            raise MalformedField(f"{owner}: duplicate field name '{f.name}'")
        by_name[f.name] = f

    for f in fields:
        if not isinstance(f.type, Pointer):
            continue
        companion = by_name.get(f.type.length)
        if companion is None:
            raise MalformedField(
                f"{owner}: pointer field '{f.name}' has no companion length field '{f.type.length}'"
            )
        if not isinstance(companion.type, Integer) or companion.type.signed:
            raise MalformedField(
                f"{owner}: length field '{companion.name}' of pointer '{f.name}' must be an unsigned integer"
            )


@dataclass(frozen=True)
class Function:
    kind = "function"

    name: str
    link: str
    docs: str = ""
    params: Tuple[Field, ...] = ()
    results: Tuple[Field, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", tuple(self.params))
        object.__setattr__(self, "results", tuple(self.results))
        check_fields(f"function '{self.name}' params", self.params)
        check_fields(f"function '{self.name}' results", self.results)

    @property
    def registers_callback(self) -> bool:
        return any(isinstance(p.type, Callback) for p in self.params)

    def signature(self) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
        """Positional type layout of params and results (names excluded)."""
        return (
            tuple(p.render_type() for p in self.params),
            tuple(r.render_type() for r in self.results),
        )


@dataclass(frozen=True)
class Variant:
    name: str
    value: int
    docs: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise MalformedField(f"Variant '{self.name}' discriminant must be an integer, got: {self.value!r}")


@dataclass(frozen=True)
class Enumeration:
    kind = "enum"

    name: str
    docs: str = ""
    variants: Tuple[Variant, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "variants", tuple(self.variants))

    @property
    def discriminants(self) -> Tuple[int, ...]:
        return tuple(v.value for v in self.variants)

    def variant(self, name: str) -> Variant:
        for v in self.variants:
            if v.name == name:
                return v
        raise KeyError(f"Enumeration '{self.name}' has no variant '{name}'")


@dataclass(frozen=True)
class Module:
    kind = "module"

    name: str
    docs: str = ""
    items: Tuple["Item", ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        for item in self.items:
            if not isinstance(item, (Module, Function, Enumeration)):
                raise TypeError(f"Module '{self.name}' cannot own {type(item).__name__}")

    def walk(self, prefix: str = "") -> Iterator[Tuple[str, "Item"]]:
        """Yield ``(path, item)`` depth-first in declaration order, self included."""
        path = f"{prefix}/{self.name}" if prefix else self.name
        yield path, self
        for item in self.items:
            if isinstance(item, Module):
                yield from item.walk(path)
            else:
                yield f"{path}/{item.name}", item

    def functions(self) -> Iterator[Tuple[str, Function]]:
        for path, item in self.walk():
            if isinstance(item, Function):
                yield path, item

    def enumerations(self) -> Iterator[Tuple[str, Enumeration]]:
        for path, item in self.walk():
            if isinstance(item, Enumeration):
                yield path, item

    def find(self, path: str) -> "Item":
        """Look up an item by its slash-separated path relative to this module."""
        current: Item = self
        for part in [p for p in path.split("/") if p]:
            if not isinstance(current, Module):
                raise KeyError(path)
            for child in current.items:
                if child.name == part:
                    current = child
                    break
            else:
                raise KeyError(path)
        return current

    def local_enum(self, name: str) -> Optional[Enumeration]:
        for item in self.items:
            if isinstance(item, Enumeration) and item.name == name:
                return item
        return None


Item = Union[Module, Function, Enumeration]

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

"""Registry of linkage symbols.

The symbol is the name a function is actually exported under across the
applet/host boundary. It is distinct from the descriptive name used in
generated bindings and docs: renaming a symbol breaks the ABI, renaming the
descriptive name does not.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterator, List, Optional, Tuple

from ..exceptions import DuplicateSymbol, InvalidSymbol
from ..models.items import Function, Module
from ..models.issues import SchemaIssue

logger = logging.getLogger(__name__)

SYMBOL_MAX_LENGTH = 8
_SYMBOL_RE = re.compile(r"^[a-z][a-z0-9]*$")


def is_valid_symbol(symbol: str) -> bool:
    return (
        isinstance(symbol, str)
        and 0 < len(symbol) <= SYMBOL_MAX_LENGTH
        and bool(_SYMBOL_RE.match(symbol))
    )


class LinkageRegistry:
    """Maps each linkage symbol to the path of the function that owns it."""

    def __init__(self):
        self._symbols: Dict[str, Tuple[str, Function]] = {}
        self.issues: List[SchemaIssue] = []

    @classmethod
    def from_module(cls, root: Module) -> "LinkageRegistry":
        registry = cls()
        for path, function in root.functions():
            registry.add(path, function)
        return registry

    def add(self, path: str, function: Function) -> None:
        """Record a function's symbol, collecting an issue on conflict."""
        symbol = function.link
        if not is_valid_symbol(symbol):
            self.issues.append(
                SchemaIssue.of(
                    InvalidSymbol,
                    f"Symbol {symbol!r} of function '{function.name}' must be 1-{SYMBOL_MAX_LENGTH} "
                    "lowercase alphanumeric characters starting with a letter",
                    path,
                )
            )
            return

        existing = self._symbols.get(symbol)
        if existing is not None:
            self.issues.append(
                SchemaIssue.of(
                    DuplicateSymbol,
                    f"Symbol '{symbol}' of '{path}' is already used by '{existing[0]}'",
                    path,
                )
            )
            return

        logger.debug(f"Registered symbol '{symbol}' for {path}")
        self._symbols[symbol] = (path, function)

    def lookup(self, symbol: str) -> Optional[Function]:
        entry = self._symbols.get(symbol)
        return entry[1] if entry else None

    def path_of(self, symbol: str) -> Optional[str]:
        entry = self._symbols.get(symbol)
        return entry[0] if entry else None

    def symbols(self) -> List[str]:
        return list(self._symbols)

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._symbols

    def __iter__(self) -> Iterator[Tuple[str, str, Function]]:
        for symbol, (path, function) in self._symbols.items():
            yield symbol, path, function

    def __len__(self) -> int:
        return len(self._symbols)

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

"""ABI compatibility between two revisions of a schema.

Functions are matched by linkage symbol, enumerations by path. An
enumeration missing from its path is matched to a new sibling with the
same discriminant set and reported as a rename. Only the
symbol, the positional type layout and the discriminant values are part
of the ABI; descriptive names and documentation are not.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..models.items import Enumeration, Function, Module

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AbiChange:
    kind: str
    subject: str
    message: str
    breaking: bool


def _functions_by_symbol(root: Module) -> Dict[str, tuple]:
    return {function.link: (path, function) for path, function in root.functions()}


def _enums_by_path(root: Module) -> Dict[str, Enumeration]:
    return {path: enum for path, enum in root.enumerations()}


def _compare_functions(old: Module, new: Module) -> List[AbiChange]:
    changes: List[AbiChange] = []
    old_fns = _functions_by_symbol(old)
    new_fns = _functions_by_symbol(new)

    for symbol, (old_path, old_fn) in old_fns.items():
        if symbol not in new_fns:
            changes.append(AbiChange("symbol_removed", symbol, f"Symbol '{symbol}' ({old_path}) was removed", True))
            continue

        new_path, new_fn = new_fns[symbol]
        if old_fn.signature() != new_fn.signature():
            changes.append(
                AbiChange(
                    "signature_changed",
                    symbol,
                    f"Symbol '{symbol}' changed layout from {_render(old_fn)} to {_render(new_fn)}",
                    True,
                )
            )
        if old_fn.name != new_fn.name or old_path != new_path:
            changes.append(
                AbiChange("renamed", symbol, f"Symbol '{symbol}' moved from {old_path} to {new_path}", False)
            )

    for symbol, (new_path, _) in new_fns.items():
        if symbol not in old_fns:
            changes.append(AbiChange("symbol_added", symbol, f"Symbol '{symbol}' ({new_path}) was added", False))

    return changes


def _render(function: Function) -> str:
    params, results = function.signature()
    return f"({', '.join(params)}) -> ({', '.join(results)})"


def _parent(path: str) -> str:
    return path.rsplit("/", 1)[0]


def _find_renamed(old_path: str, old_enum: Enumeration, candidates: Dict[str, Enumeration]) -> Optional[str]:
    discriminants = sorted(old_enum.discriminants)
    for path, enum in candidates.items():
        if _parent(path) == _parent(old_path) and sorted(enum.discriminants) == discriminants:
            return path
    return None


def _compare_enums(old: Module, new: Module) -> List[AbiChange]:
    changes: List[AbiChange] = []
    old_enums = _enums_by_path(old)
    new_enums = _enums_by_path(new)
    # New enumerations with no counterpart at the same path.
    unmatched = {path: enum for path, enum in new_enums.items() if path not in old_enums}

    for path, old_enum in old_enums.items():
        new_enum = new_enums.get(path)
        if new_enum is None:
            renamed = _find_renamed(path, old_enum, unmatched)
            if renamed is None:
                changes.append(AbiChange("enum_removed", path, f"Enumeration {path} was removed", True))
            else:
                del unmatched[renamed]
                changes.append(
                    AbiChange("enum_renamed", path, f"Enumeration {path} was renamed to {renamed}", False)
                )
            continue

        new_values = {v.name: v.value for v in new_enum.variants}
        for variant in old_enum.variants:
            if variant.name not in new_values:
                changes.append(
                    AbiChange("variant_removed", path, f"Variant {path}::{variant.name} was removed", True)
                )
            elif new_values[variant.name] != variant.value:
                changes.append(
                    AbiChange(
                        "discriminant_changed",
                        path,
                        f"Variant {path}::{variant.name} changed from {variant.value} "
                        f"to {new_values[variant.name]}",
                        True,
                    )
                )

        old_names = {v.name for v in old_enum.variants}
        for variant in new_enum.variants:
            if variant.name not in old_names:
                changes.append(
                    AbiChange("variant_added", path, f"Variant {path}::{variant.name} was added", False)
                )

    return changes


def check_compatibility(old: Module, new: Module) -> List[AbiChange]:
    """List the ABI differences from ``old`` to ``new``."""
    changes = _compare_functions(old, new) + _compare_enums(old, new)
    for change in changes:
        if change.breaking:
            logger.warning(change.message)
        else:
            logger.info(change.message)
    return changes


def is_compatible(old: Module, new: Module) -> bool:
    return not any(change.breaking for change in check_compatibility(old, new))

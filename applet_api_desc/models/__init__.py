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

"""Schema model: field types and the item tree."""

from .field_types import (
    Callback,
    FieldType,
    Integer,
    Pointer,
    SUPPORTED_WIDTHS,
    parse_type,
)
from .items import Enumeration, Field, Function, Item, Module, Variant

__all__ = [
    "Callback",
    "Enumeration",
    "Field",
    "FieldType",
    "Function",
    "Integer",
    "Item",
    "Module",
    "Pointer",
    "SUPPORTED_WIDTHS",
    "Variant",
    "parse_type",
]

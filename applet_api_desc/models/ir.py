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

from __future__ import annotations

from typing import List, Optional, TypedDict, Literal


# Version for the on-disk intermediate representation handed to generators.
IR_VERSION = "1.0"


class FieldTypeData(TypedDict, total=False):
    kind: Literal["integer", "pointer", "callback"]
    signed: bool
    bits: Optional[int]
    mutable: bool
    length: str
    abi_slots: List[str]


class FieldData(TypedDict, total=False):
    name: str
    docs: str
    type: FieldTypeData
    shape: str
    enum: Optional[str]


class VariantData(TypedDict):
    name: str
    value: int
    docs: str


class ItemData(TypedDict, total=False):
    kind: Literal["module", "function", "enum"]
    name: str
    path: str
    docs: str
    # function
    link: str
    params: List[FieldData]
    results: List[FieldData]
    # enum
    variants: List[VariantData]
    # module
    items: List["ItemData"]


class IrMetadata(TypedDict, total=False):
    name: str
    format_version: str
    generated_at: str
    symbols: List[str]


class IrPayload(TypedDict):
    schema_version: str
    metadata: IrMetadata
    data: ItemData

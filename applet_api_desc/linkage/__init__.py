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

"""Linkage symbols: registry and ABI compatibility checks."""

from .registry import LinkageRegistry, SYMBOL_MAX_LENGTH, is_valid_symbol
from .compat import AbiChange, check_compatibility, is_compatible

__all__ = ["AbiChange", "LinkageRegistry", "SYMBOL_MAX_LENGTH", "check_compatibility", "is_compatible", "is_valid_symbol"]

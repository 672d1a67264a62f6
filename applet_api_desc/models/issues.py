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

from dataclasses import dataclass
from typing import Optional, Type

from ..exceptions import SchemaError
from ..file_io.source_location import SourceLocation, format_source


@dataclass(frozen=True)
class SchemaIssue:
    kind: str
    message: str
    path: Optional[str] = None
    source: Optional[SourceLocation] = None

    @classmethod
    def from_error(cls, error: SchemaError, source: Optional[SourceLocation] = None) -> "SchemaIssue":
        return cls(kind=error.kind, message=error.message, path=error.path, source=source)

    @classmethod
    def of(cls, error_type: Type[SchemaError], message: str, path: Optional[str] = None) -> "SchemaIssue":
        return cls(kind=error_type.kind, message=message, path=path)

    def __str__(self) -> str:
        where = f" [{self.path}]" if self.path else ""
        return f"{self.kind}: {self.message}{where}{format_source(self.source)}"

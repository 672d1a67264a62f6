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

"""Custom exceptions for the applet API description tooling."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .file_io.source_location import SourceLocation
    from .models.issues import SchemaIssue


class ApiDescError(Exception):
    """Base exception for applet API description errors."""
    pass


class SchemaError(ApiDescError):
    """Base exception for errors in the schema tree itself.

    Each subclass names one issue kind reported by the validator.
    """

    kind = "SchemaError"

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path


class MalformedField(SchemaError):
    """Unsupported field width, pointer without its length, or a bad field reference."""

    kind = "MalformedField"


class DuplicateSymbol(SchemaError):
    """Two functions share a linkage symbol."""

    kind = "DuplicateSymbol"


class DuplicateEventId(SchemaError):
    """Two variants of an event enumeration share a discriminant."""

    kind = "DuplicateEventId"


class MissingDocumentation(SchemaError):
    """A public item has no documentation."""

    kind = "MissingDocumentation"


class DuplicateName(SchemaError):
    """Two sibling items or two variants of one enumeration share a name."""

    kind = "DuplicateName"


class InvalidSymbol(SchemaError):
    """A linkage symbol does not match the symbol format."""

    kind = "InvalidSymbol"


class SchemaValidationError(ApiDescError):
    """Raised when a schema fails validation.

    Carries every issue found in the batch so callers can report them all at once.
    """

    def __init__(self, issues: List["SchemaIssue"]):
        self.issues = list(issues)
        details = "\n".join(f"  - {issue}" for issue in self.issues)
        super().__init__(f"Schema validation failed with {len(self.issues)} issue(s):\n{details}")

    @property
    def kinds(self) -> List[str]:
        return [issue.kind for issue in self.issues]


class SchemaSourceError(ApiDescError):
    """Exception raised for unreadable or structurally invalid schema sources."""

    def __init__(self, message: str, source: Optional["SourceLocation"] = None):
        super().__init__(message)
        self.source = source


class FormatVersionError(SchemaSourceError):
    """Exception raised when a schema file's format version is incompatible."""
    pass


class ContractViolation(ApiDescError):
    """A call does not honor the marshaling or registration contract."""
    pass


class OutOfBounds(ContractViolation):
    """A guest buffer does not fit in guest memory."""
    pass


class UnknownEvent(ContractViolation):
    """An event identifier is not a declared discriminant."""
    pass

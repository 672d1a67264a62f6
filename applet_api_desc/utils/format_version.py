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

"""Format version of schema source files.

Each YAML schema source declares ``applet_api_format`` (e.g. ``0.1.0``).

Compatibility rule:
  * **Major** must match exactly; a mismatch stops loading.
  * **Minor** of the file newer than the tool produces a warning.
  * **Patch** is ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .. import APPLET_API_FORMAT_VERSION
from ..exceptions import FormatVersionError


FORMAT_FIELD = "applet_api_format"

_VERSION_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)$")


@dataclass(frozen=True)
class SemanticVersion:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_format_version(raw: str) -> SemanticVersion:
    """Parse a version string like ``0.1.0`` (with or without 'v' prefix).

    Raises:
        FormatVersionError: If the string cannot be parsed.
    """
    if not isinstance(raw, str):
        raise FormatVersionError(
            f"Format version must be a string, got {type(raw).__name__}: {raw!r}"
        )

    m = _VERSION_RE.match(raw.strip())
    if m is None:
        raise FormatVersionError(
            f"Invalid format version string: '{raw}'. Expected 'MAJOR.MINOR.PATCH' (e.g. '0.1.0')."
        )
    return SemanticVersion(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def get_supported_format_version() -> SemanticVersion:
    return parse_format_version(APPLET_API_FORMAT_VERSION)


@dataclass(frozen=True)
class VersionCheckResult:
    compatible: bool
    message: str
    file_version: Optional[SemanticVersion] = None
    supported_version: Optional[SemanticVersion] = None
    minor_newer: bool = False
    missing: bool = False


def check_format_version(raw_version: Optional[str]) -> VersionCheckResult:
    """Check whether *raw_version* can be loaded by this tool.

    A missing version is compatible but reported (``missing=True``) so the
    caller can warn. A newer minor version is compatible with
    ``minor_newer=True``. A major mismatch or unparsable string is not.
    """
    supported = get_supported_format_version()

    if raw_version is None:
        return VersionCheckResult(
            compatible=True,
            missing=True,
            message=f"Missing '{FORMAT_FIELD}' field. Consider adding '{FORMAT_FIELD}: {supported}'.",
            supported_version=supported,
        )

    try:
        file_ver = parse_format_version(raw_version)
    except FormatVersionError as exc:
        return VersionCheckResult(compatible=False, message=str(exc), supported_version=supported)

    if file_ver.major != supported.major:
        return VersionCheckResult(
            compatible=False,
            message=(
                f"Incompatible format version: file declares {file_ver} "
                f"but this tool supports major version {supported.major} (supported: {supported})."
            ),
            file_version=file_ver,
            supported_version=supported,
        )

    if file_ver.minor > supported.minor:
        return VersionCheckResult(
            compatible=True,
            minor_newer=True,
            message=(
                f"Format version {file_ver} is newer than the supported {supported}. "
                "Some declarations may not be understood."
            ),
            file_version=file_ver,
            supported_version=supported,
        )

    return VersionCheckResult(
        compatible=True,
        message=f"Format version {file_ver} is compatible (supported: {supported}).",
        file_version=file_ver,
        supported_version=supported,
    )

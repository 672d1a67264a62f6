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

"""YAML schema source parser with caching and source locations."""

import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Tuple, Union

from ..config import generator_config
from ..exceptions import SchemaSourceError
from ..file_io.source_location import SourceLocation, SourceMap

logger = logging.getLogger(__name__)


class YamlParser:
    """YAML parser that also records where each value came from."""

    def __init__(self, cache_enabled: Optional[bool] = None):
        """Initialize YAML parser.

        Args:
            cache_enabled: Whether to cache parsed files. If None, uses global config.
        """
        self.cache_enabled = cache_enabled if cache_enabled is not None else generator_config.cache_enabled
        self._cache: Dict[Path, Tuple[Any, SourceMap]] = {}

    @staticmethod
    def _json_pointer_escape(token: str) -> str:
        # JSON Pointer escaping: "~" -> "~0", "/" -> "~1"
        return token.replace("~", "~0").replace("/", "~1")

    @classmethod
    def build_source_map(cls, content: str) -> SourceMap:
        """Map JSON-pointer-like YAML paths to 1-based line/column.

        Uses PyYAML's node tree (yaml.compose) so locations are tracked
        without changing the data returned by safe_load.
        """
        source_map: SourceMap = {}

        try:
            root = yaml.compose(content, Loader=yaml.SafeLoader)
        except yaml.YAMLError:
            # Parse errors are reported by safe_load.
            return source_map

        if root is None:
            return source_map

        def _walk(node, path: str) -> None:
            mark = node.start_mark
            # PyYAML uses 0-based line/column
            source_map[path] = {"line": mark.line + 1, "column": mark.column + 1}

            if isinstance(node, yaml.nodes.MappingNode):
                for key_node, value_node in node.value:
                    key = getattr(key_node, "value", None)
                    if key is None:
                        continue
                    _walk(value_node, f"{path}/{cls._json_pointer_escape(str(key))}")
            elif isinstance(node, yaml.nodes.SequenceNode):
                for idx, item_node in enumerate(node.value):
                    _walk(item_node, f"{path}/{idx}")

        _walk(root, "")
        return source_map

    def _parse(self, content: str, origin: str) -> Tuple[Any, SourceMap]:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            line = None
            column = None
            mark = getattr(exc, "problem_mark", None)
            if mark is not None:
                line, column = mark.line + 1, mark.column + 1
            raise SchemaSourceError(
                f"Failed to parse YAML {origin}: {exc}",
                SourceLocation(file_path=Path(origin) if origin != "<string>" else None, line=line, column=column),
            ) from exc

        if data is None:
            data = {}
        return data, self.build_source_map(content)

    def load_config_with_source(self, file_path: Union[str, Path]) -> Tuple[Any, SourceMap]:
        """Load a YAML schema file and return (data, source_map).

        Raises:
            SchemaSourceError: If the file cannot be read or parsed.
        """
        path = Path(file_path)

        if not path.exists():
            raise SchemaSourceError(f"Schema file not found: {path}", SourceLocation(file_path=path))

        if not path.is_file():
            raise SchemaSourceError(f"Path is not a file: {path}", SourceLocation(file_path=path))

        if self.cache_enabled and path in self._cache:
            logger.debug(f"Loading schema source from cache: {path}")
            return self._cache[path]

        logger.debug(f"Loading schema source: {path}")
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SchemaSourceError(f"Failed to read schema file {path}: {exc}", SourceLocation(file_path=path)) from exc

        result = self._parse(content, str(path))
        if self.cache_enabled:
            self._cache[path] = result
        return result

    def load_config_from_string_with_source(self, content: str) -> Tuple[Any, SourceMap]:
        """Load YAML from string content and return (data, source_map)."""
        return self._parse(content, "<string>")

    def clear_cache(self):
        """Clear the parsed file cache."""
        self._cache.clear()
        logger.debug("Schema source cache cleared")


# Global parser instance
yaml_parser = YamlParser()

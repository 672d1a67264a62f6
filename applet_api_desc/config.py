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

"""Configuration for schema loading and artifact generation."""

import os
import logging
from dataclasses import dataclass

from .utils.logging_utils import DEFAULT_FORMAT, configure_split_stream_logging, level_from_name


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class GeneratorConfig:
    """Configuration for a generation run."""
    log_level: str = "INFO"
    print_level: str = "WARNING"
    cache_enabled: bool = True
    output_dir: str = "build"

    @classmethod
    def from_env(cls) -> 'GeneratorConfig':
        """Create configuration from environment variables."""
        return cls(
            log_level=os.getenv('APPLET_API_DESC_LOG_LEVEL', 'INFO'),
            print_level=os.getenv('APPLET_API_DESC_PRINT_LEVEL', 'WARNING'),
            cache_enabled=_env_flag('APPLET_API_DESC_CACHE_ENABLED', 'true'),
            output_dir=os.getenv('APPLET_API_DESC_OUTPUT_DIR', 'build'),
        )

    def set_logging(self) -> logging.Logger:
        """Setup logging based on configuration."""
        level = level_from_name(self.log_level, logging.INFO)
        stderr_level = level_from_name(self.print_level, logging.WARNING)

        formatter = logging.Formatter(DEFAULT_FORMAT)
        configure_split_stream_logging(level=level, stderr_level=stderr_level, formatter=formatter)

        return logging.getLogger('applet_api_desc')


# Global configuration instance
generator_config = GeneratorConfig.from_env()

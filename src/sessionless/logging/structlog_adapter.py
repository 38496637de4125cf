# Copyright 2026 Firefly Software Solutions Inc.
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
"""StructlogAdapter — configures structlog and stdlib levels from ``Config``."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from sessionless.core.config import Config
from sessionless.kernel.exceptions import ConfigurationException

LOG_FORMATS = ("console", "json")


def build_processors(log_format: str) -> list[structlog.types.Processor]:
    """Processor pipeline ending in the renderer for *log_format*."""
    processors: list[structlog.types.Processor] = [
        # Request ids bound by RequestContextFilter
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if log_format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


class StructlogAdapter:
    """Logging setup for applications using the sessionless filters.

    Reads ``sessionless.logging.level`` (``root`` plus per-logger levels such
    as ``sessionless.i18n: DEBUG``) and ``sessionless.logging.format``
    (``console`` or ``json``).
    """

    def __init__(self) -> None:
        self._root_level = "INFO"
        self._format = "console"
        self._module_levels: dict[str, str] = {}

    @property
    def module_levels(self) -> dict[str, str]:
        return dict(self._module_levels)

    def configure(self, config: Config) -> None:
        """Install the structlog pipeline and apply every configured level.

        Raises:
            ConfigurationException: ``format`` is not a known format.
        """
        log_format = str(config.get("sessionless.logging.format", "console")).lower()
        if log_format not in LOG_FORMATS:
            raise ConfigurationException(
                f"Unknown log format '{log_format}'",
                code="LOGGING_FORMAT",
                context={"formats": list(LOG_FORMATS)},
            )
        levels = dict(config.get_section("sessionless.logging.level"))
        self._root_level = str(levels.pop("root", "INFO")).upper()
        self._module_levels = {name: str(level).upper() for name, level in _flatten(levels).items()}
        self._format = log_format

        structlog.configure(
            processors=build_processors(log_format),
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", stream=sys.stdout, level=_level(self._root_level), force=True)
        for name, level in self._module_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        """Set the level of stdlib logger *name*; unknown levels mean INFO."""
        logging.getLogger(name).setLevel(_level(level))


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _flatten(section: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested YAML levels (``sessionless: {i18n: DEBUG}``) to dotted names."""
    flat: dict[str, Any] = {}
    for key, value in section.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            flat.update(_flatten(value, name))
        else:
            flat[name] = value
    return flat

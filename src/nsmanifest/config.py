"""
Builder Configuration and Defaults.

Policy flags for ``ManifestBuilder`` can be set in code or read from the
``[tool.nsmanifest]`` table of a TOML file (usually ``pyproject.toml``).
"""

import logging
import tomllib
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "pyproject.toml"
CONFIG_SECTION = ("tool", "nsmanifest")

# Namespace implicitly provided by a runtime-base unit
DEFAULT_ROOT_NAMESPACE = "root"


class SortStrategy(StrEnum):
    """Topological sort strategies supported by the TopologicalSorter."""
    DEPTH_FIRST = "depth_first"
    KAHN = "kahn"


class BuilderConfig(BaseModel):
    """
    Policy flags for manifest resolution.

    Attributes:
        keep_all_units: Skip pruning; every added unit ends up in the manifest.
        keep_moochers: Treat units that provide nothing as entry points.
        keep_original_order: Return units in insertion order instead of sorting.
        ignore_missing_dependencies: Drop edges to unprovided namespaces
            instead of failing.
        sort_strategy: Topological sort strategy.
        root_namespace: Namespace implicitly provided by the runtime base.
    """

    keep_all_units: bool = False
    keep_moochers: bool = False
    keep_original_order: bool = False
    ignore_missing_dependencies: bool = False
    sort_strategy: SortStrategy = SortStrategy.DEPTH_FIRST
    root_namespace: str = DEFAULT_ROOT_NAMESPACE

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def load(cls, path: Path) -> "BuilderConfig":
        """
        Load configuration from a TOML file.

        A missing file or a file without the ``[tool.nsmanifest]`` table
        yields the defaults.

        Raises:
            ValueError: If the file is not valid TOML or the table holds
                unknown keys or bad values.
        """
        if not path.exists():
            logger.debug(f"No config file at {path}, using defaults")
            return cls()

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Failed to parse {path}: {e}") from e

        section = data
        for key in CONFIG_SECTION:
            section = section.get(key, {})
            if not isinstance(section, dict):
                raise ValueError(f"Failed to parse {path}: [{'.'.join(CONFIG_SECTION)}] is not a table")

        return cls.model_validate(section)

    @classmethod
    def discover(cls, start_dir: Path) -> "BuilderConfig":
        """Load the config file from ``start_dir`` or its nearest parent that has one."""
        start_dir = start_dir.resolve()
        for directory in (start_dir, *start_dir.parents):
            candidate = directory / CONFIG_FILE_NAME
            if candidate.exists():
                return cls.load(candidate)
        return cls()

"""Options for a single analysis run.

Options can be given as keyword arguments or as a mapping using the camelCase
names of the JavaScript-facing API (``packageLockFilePath``, ``saveToFile``,
...). Lockfile and output paths fall back to environment variables and then
to files in the working directory.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .graph.subgraph import SubgraphCounting

DEFAULT_LOCKFILE_PATH = Path("package-lock.json")
DEFAULT_OUTPUT_PATH = Path("bom.json")
LOCKFILE_PATH_ENV_VAR = "NPM_BOM_LOCKFILE"
OUTPUT_PATH_ENV_VAR = "NPM_BOM_OUTPUT"


class ConfigError(RuntimeError):
    """Raised when analysis options are invalid."""


@dataclass(slots=True, frozen=True)
class AnalyzeOptions:
    """Configuration for :func:`npm_bom.core.analyze`."""

    package_lock_file_path: str | Path | None = None
    output_file_path: str | Path | None = None
    save_to_file: bool = False
    ignore_dev: bool = True
    include_graph: bool = True
    subgraph_counting: str = SubgraphCounting.SUM.value

    def __post_init__(self) -> None:
        for flag in ("save_to_file", "ignore_dev", "include_graph"):
            if not isinstance(getattr(self, flag), bool):
                raise ConfigError(f"Option '{flag}' must be a boolean")
        try:
            SubgraphCounting(self.subgraph_counting)
        except ValueError as exc:
            known = ", ".join(mode.value for mode in SubgraphCounting)
            raise ConfigError(
                f"Unknown subgraph counting '{self.subgraph_counting}'. Known modes: {known}"
            ) from exc

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AnalyzeOptions:
        """Create options from camelCase or snake_case keys."""
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            field_name = _OPTION_ALIASES.get(key)
            if field_name is None:
                raise ConfigError(f"Unknown option '{key}'")
            kwargs[field_name] = value
        return cls(**kwargs)

    def resolve_lockfile_path(self) -> str | Path:
        """Explicit path, then $NPM_BOM_LOCKFILE, then ./package-lock.json."""
        return _resolve_path(self.package_lock_file_path, LOCKFILE_PATH_ENV_VAR, DEFAULT_LOCKFILE_PATH)

    def resolve_output_path(self) -> Path:
        """Explicit path, then $NPM_BOM_OUTPUT, then ./bom.json."""
        return Path(_resolve_path(self.output_file_path, OUTPUT_PATH_ENV_VAR, DEFAULT_OUTPUT_PATH))


_OPTION_ALIASES: dict[str, str] = {
    "packageLockFilePath": "package_lock_file_path",
    "outputFilePath": "output_file_path",
    "saveToFile": "save_to_file",
    "ignoreDev": "ignore_dev",
    "includeGraph": "include_graph",
    "subgraphCounting": "subgraph_counting",
}
_OPTION_ALIASES.update({name: name for name in _OPTION_ALIASES.values()})


def _resolve_path(explicit: str | Path | None, env_var: str, default: Path) -> str | Path:
    if explicit:
        return explicit
    env_path = os.environ.get(env_var)
    if env_path:
        return env_path
    return default

"""BOM record assembly and JSON output."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .graph.models import DependencyGraph
from .graph.versions import VersionIndex


@dataclass(slots=True)
class Bom:
    """Summary of one analyzed lockfile."""

    name: str
    version: str
    top_level_dependencies: int
    total_dependencies: int
    dependencies_with_multiple_versions: list[str] = field(default_factory=list)
    dependency_graph: DependencyGraph | None = None
    versions: VersionIndex | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the schema-compatible record (camelCase keys)."""
        data: dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "topLevelDependencies": self.top_level_dependencies,
            "totalDependencies": self.total_dependencies,
            "dependenciesWithMultipleVersions": list(self.dependencies_with_multiple_versions),
        }
        if self.dependency_graph is not None:
            data["dependencyGraph"] = self.dependency_graph.to_dict()
        return data

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def write_bom(bom: Bom, path: str | Path, indent: int | None = None) -> Path:
    """Write ``bom`` as JSON to ``path`` and return the path written.

    Write failures propagate to the caller.
    """
    out = Path(path)
    out.write_text(bom.to_json(indent=indent), encoding="utf-8")
    return out

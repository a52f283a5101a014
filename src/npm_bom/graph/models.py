"""Data models for the package dependency graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class Node:
    """A package at one version.

    ``children`` and ``parents`` hold graph keys, unique and in insertion
    order. ``subgraph_size`` stays None until the subgraph analysis runs.
    """

    key: str
    name: str
    versions: list[str | None]
    dev: bool = False
    children: list[str] = field(default_factory=list)
    parents: list[str] = field(default_factory=list)
    subgraph_size: int | None = None

    @property
    def child_count(self) -> int:
        return len(self.children)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "versions": list(self.versions),
            "dev": self.dev,
            "children": list(self.children),
            "parents": list(self.parents),
            "childCount": self.child_count,
        }
        if self.subgraph_size is not None:
            data["subgraphSize"] = self.subgraph_size
        return data


@dataclass(slots=True)
class DependencyGraph:
    """All nodes of one analysis, keyed by graph key."""

    root_key: str
    nodes: dict[str, Node] = field(default_factory=dict)

    def __contains__(self, key: object) -> bool:
        return key in self.nodes

    def __getitem__(self, key: str) -> Node:
        return self.nodes[key]

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, key: str) -> Node | None:
        return self.nodes.get(key)

    @property
    def root(self) -> Node | None:
        return self.nodes.get(self.root_key)

    @property
    def edge_count(self) -> int:
        return sum(node.child_count for node in self.nodes.values())

    def link(self, parent_key: str, child_key: str) -> bool:
        """Add a parent -> child edge to both endpoints; False if already present."""
        parent = self.nodes[parent_key]
        child = self.nodes[child_key]
        if child_key in parent.children:
            return False
        parent.children.append(child_key)
        child.parents.append(parent_key)
        return True

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {key: node.to_dict() for key, node in self.nodes.items()}

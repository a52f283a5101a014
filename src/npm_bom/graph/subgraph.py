"""Subgraph size annotation.

Each node reachable from the root is annotated with ``subgraph_size``, the
node itself plus everything below it. The traversal is depth-first over an
explicit stack so deep or cyclic graphs cannot exhaust the call stack.

Two counting modes share the same traversal:

``sum``
    A node's size is 1 plus the sizes of its children. A child that already
    carries a size reuses it. When diamonds exist the same descendant is
    counted once per path that reaches it, so the value can exceed the
    number of distinct nodes below.

``distinct``
    A node's size is the number of distinct nodes in its downward closure.
    A child sized by an earlier call contributes its full closure, collected
    by a read-only walk, so its size is still not recomputed.

In both modes a child that has been entered but not finished is part of a
cycle: it is logged and counted as a single node.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from .models import DependencyGraph

_logger = logging.getLogger(__name__)


class SubgraphCounting(str, Enum):
    SUM = "sum"
    DISTINCT = "distinct"


class MissingNodeError(RuntimeError):
    """Raised when a referenced key has no node in the graph."""

    def __init__(self, key: str) -> None:
        super().__init__(
            f"Unable to calculate subgraph size for {key} because that key is not "
            "in the dependency graph"
        )
        self.key = key


def _closure_of(graph: DependencyGraph, key: str) -> frozenset[str]:
    """Keys reachable from ``key``, including itself."""
    seen = {key}
    pending = [key]
    while pending:
        node = graph.get(pending.pop())
        if node is None:
            continue
        for child_key in node.children:
            if child_key not in seen:
                seen.add(child_key)
                pending.append(child_key)
    return frozenset(seen)


@dataclass(slots=True)
class _Frame:
    key: str
    total: int = 1
    closure: set[str] = field(default_factory=set)
    next_child: int = 0


def annotate_subgraph_size(
    graph: DependencyGraph,
    root_key: str | None = None,
    *,
    counting: SubgraphCounting | str = SubgraphCounting.SUM,
    logger: logging.Logger | None = None,
) -> int:
    """Annotate every node reachable from ``root_key`` and return the root's size.

    Nodes that already carry a size are reused, never recomputed.

    Raises:
        MissingNodeError: ``root_key`` or a child key has no node.
    """
    log = logger or _logger
    distinct = SubgraphCounting(counting) is SubgraphCounting.DISTINCT
    root_key = graph.root_key if root_key is None else root_key

    root = graph.get(root_key)
    if root is None:
        raise MissingNodeError(root_key)
    if root.subgraph_size is not None:
        return root.subgraph_size

    # Closures of finished nodes, only kept in distinct mode.
    closures: dict[str, frozenset[str]] = {}
    visited: set[str] = {root_key}
    stack = [_Frame(root_key, closure={root_key})]

    while stack:
        frame = stack[-1]
        node = graph[frame.key]

        if frame.next_child < len(node.children):
            child_key = node.children[frame.next_child]
            frame.next_child += 1

            child = graph.get(child_key)
            if child is None:
                raise MissingNodeError(child_key)

            if child.subgraph_size is not None:
                frame.total += child.subgraph_size
                if distinct:
                    if child_key not in closures:
                        closures[child_key] = _closure_of(graph, child_key)
                    frame.closure |= closures[child_key]
            elif child_key in visited:
                log.warning(
                    "Dependency cycle at %s (reached from %s); counting it as 1.",
                    child_key,
                    frame.key,
                )
                frame.total += 1
                frame.closure.add(child_key)
            else:
                log.debug("Calculating subgraph size for %s...", child_key)
                visited.add(child_key)
                stack.append(_Frame(child_key, closure={child_key}))
            continue

        stack.pop()
        if distinct:
            closures[frame.key] = frozenset(frame.closure)
            node.subgraph_size = len(frame.closure)
        else:
            node.subgraph_size = frame.total
        log.debug("%s has subgraph size %d.", frame.key, node.subgraph_size)

        if stack:
            parent = stack[-1]
            parent.total += node.subgraph_size
            if distinct:
                parent.closure |= frame.closure

    return root.subgraph_size

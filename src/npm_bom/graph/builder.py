"""Two-pass dependency graph construction.

The node pass creates one node per graph key and records versions per name.
The edge pass resolves each declared dependency to a child key and links the
two nodes. Children that resolve to no node are skipped: that is what an
optional dependency that was never installed looks like.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from ..parsers.package_lock import DependencySpec
from .keys import make_graph_key, strip_version
from .models import DependencyGraph, Node
from .preprocess import PreprocessedPackage
from .versions import VersionIndex

_logger = logging.getLogger(__name__)


def child_key_for(name: str, spec: DependencySpec) -> str:
    """Graph key a declaration ``name: spec`` points at."""
    return make_graph_key(name, strip_version(spec.version))


def _add_nodes(
    packages: Mapping[str, PreprocessedPackage],
    graph: DependencyGraph,
    versions: VersionIndex,
    ignore_dev: bool,
    log: logging.Logger,
) -> None:
    for key, package in packages.items():
        log.debug("Analyzing package %s...", key)
        if ignore_dev and package.dev:
            log.debug("Ignoring %s because it is a development dependency.", key)
            continue
        if key in graph:
            continue

        graph.nodes[key] = Node(
            key=key,
            name=package.name,
            versions=[package.version],
            dev=package.dev,
        )
        if package.version is not None:
            versions.record(package.name, package.version)
        log.debug("Added %s to the dependency graph.", key)


def _add_edges(
    packages: Mapping[str, PreprocessedPackage],
    graph: DependencyGraph,
    ignore_dev: bool,
    log: logging.Logger,
) -> None:
    for key, package in packages.items():
        if key not in graph:
            continue

        declarations = package.record.declarations(include_dev=not ignore_dev)
        if not declarations:
            log.debug("Found 0 dependencies for %s.", key)
            continue

        for child_name, spec in declarations.items():
            child_key = child_key_for(child_name, spec)
            if child_key not in graph:
                excluded = packages.get(child_key)
                if ignore_dev and excluded is not None and excluded.dev:
                    log.debug(
                        "Not adding %s as a child of %s because it is a development dependency.",
                        child_key,
                        key,
                    )
                else:
                    log.warning(
                        'Unknown package "%s" declared by %s. This probably indicates an '
                        "optional dependency that is not installed.",
                        child_key,
                        key,
                    )
                continue

            if graph.link(key, child_key):
                log.debug("Added %s as a child of %s.", child_key, key)

        log.debug("%s has %d dependencies.", key, graph[key].child_count)


def build_graph(
    packages: Mapping[str, PreprocessedPackage],
    root_key: str,
    *,
    ignore_dev: bool = True,
    logger: logging.Logger | None = None,
) -> tuple[DependencyGraph, VersionIndex]:
    """Build the dependency graph and per-name version index.

    With ``ignore_dev`` set, dev entries get no node and ``devDependencies``
    declarations are not followed, so no dev node or edge reaches the graph.
    """
    log = logger or _logger
    graph = DependencyGraph(root_key=root_key)
    versions = VersionIndex()

    log.debug("Building dependency graph...")
    _add_nodes(packages, graph, versions, ignore_dev, log)

    log.debug("Analyzing package relationships...")
    _add_edges(packages, graph, ignore_dev, log)

    return graph, versions

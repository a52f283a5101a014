"""Core analysis entrypoint.

This module MUST NOT depend on the CLI so it can be used both from the
command line and as a library.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import asdict
from typing import Any

from .config import AnalyzeOptions
from .graph.builder import build_graph
from .graph.keys import make_graph_key
from .graph.preprocess import preprocess_packages
from .graph.subgraph import annotate_subgraph_size
from .graph.versions import find_multiple_versions
from .parsers.package_lock import Lockfile, load_lockfile
from .report import Bom, write_bom

_logger = logging.getLogger(__name__)


def analyze_lockfile(
    lockfile: Lockfile,
    options: AnalyzeOptions | None = None,
    logger: logging.Logger | None = None,
) -> Bom:
    """Build and analyze the dependency graph of an already parsed lockfile.

    ``total_dependencies`` follows ``options.subgraph_counting``. The default
    ``"sum"`` counts a shared descendant once per path, so the diamond
    ``app -> {left, right} -> shared`` gives 5. Pass
    ``subgraph_counting="distinct"`` to count each package once (4 there).
    """
    options = options or AnalyzeOptions()
    log = logger or _logger

    root_key = make_graph_key(lockfile.name, lockfile.version)

    log.info("Preprocessing package list...")
    packages = preprocess_packages(lockfile.packages, root_key, lockfile.name, logger=log)

    log.info("Building dependency graph...")
    graph, versions = build_graph(packages, root_key, ignore_dev=options.ignore_dev, logger=log)

    log.info("Calculating subgraph sizes...")
    total = annotate_subgraph_size(
        graph, root_key, counting=options.subgraph_counting, logger=log
    )

    return Bom(
        name=lockfile.name,
        version=lockfile.version,
        top_level_dependencies=graph[root_key].child_count,
        total_dependencies=total,
        dependencies_with_multiple_versions=find_multiple_versions(versions),
        dependency_graph=graph if options.include_graph else None,
        versions=versions,
    )


def analyze(
    options: AnalyzeOptions | Mapping[str, Any] | None = None,
    *,
    logger: logging.Logger | None = None,
    **overrides: Any,
) -> Bom:
    """Analyze a package-lock.json and return its BOM.

    Params:
        options: AnalyzeOptions, or a mapping with camelCase/snake_case keys
            (``packageLockFilePath``, ``outputFilePath``, ``saveToFile``,
            ``ignoreDev``, ...)
        logger: destination for trace and warning messages; defaults to this
            module's logger
        overrides: individual options as keyword arguments, applied on top

    Read, parse and write failures are not caught here.
    """
    if options is None:
        options = AnalyzeOptions.from_dict(overrides)
    elif isinstance(options, Mapping):
        options = AnalyzeOptions.from_dict({**options, **overrides})
    elif overrides:
        options = AnalyzeOptions.from_dict({**asdict(options), **overrides})
    log = logger or _logger

    source = options.resolve_lockfile_path()
    log.info("Reading package lock file %s...", source)
    lockfile = load_lockfile(source)

    bom = analyze_lockfile(lockfile, options, logger=log)

    if options.save_to_file:
        written = write_bom(bom, options.resolve_output_path())
        log.info("Wrote BOM to %s", written)

    return bom

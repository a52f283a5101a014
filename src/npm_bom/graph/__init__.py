"""Dependency graph construction and analysis."""

from __future__ import annotations

from .builder import build_graph
from .keys import extract_package_name, make_graph_key, strip_version
from .models import DependencyGraph, Node
from .preprocess import PreprocessedPackage, preprocess_packages
from .subgraph import MissingNodeError, SubgraphCounting, annotate_subgraph_size
from .versions import VersionIndex, find_multiple_versions

__all__ = [
    "DependencyGraph",
    "MissingNodeError",
    "Node",
    "PreprocessedPackage",
    "SubgraphCounting",
    "VersionIndex",
    "annotate_subgraph_size",
    "build_graph",
    "extract_package_name",
    "find_multiple_versions",
    "make_graph_key",
    "preprocess_packages",
    "strip_version",
]

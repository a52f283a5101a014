"""npm-bom core package.

Builds a dependency graph from an npm package-lock.json and summarizes it as
a small bill of materials.
"""

from .config import AnalyzeOptions, ConfigError
from .core import analyze, analyze_lockfile
from .report import Bom

__all__ = [
    "AnalyzeOptions",
    "Bom",
    "ConfigError",
    "analyze",
    "analyze_lockfile",
]

"""Command-line entrypoint.

Usage:
  npm-bom [LOCKFILE] [OUTPUT] [--include-dev] [--no-save] [--no-graph]
          [--counting {sum,distinct}] [--summary] [--verbose]

Reads LOCKFILE (default: $NPM_BOM_LOCKFILE or ./package-lock.json) and writes
the BOM to OUTPUT (default: $NPM_BOM_OUTPUT or ./bom.json).

Development dependencies are left out unless --include-dev is given, and only
warnings are logged unless --verbose is given.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

import requests

from .config import AnalyzeOptions, ConfigError
from .core import analyze
from .graph.subgraph import MissingNodeError, SubgraphCounting
from .parsers.package_lock import LockfileError
from .summary import render_summary

LOG_FORMAT = "%(levelname)s: %(message)s"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="npm-bom",
        description="Summarize an npm package-lock.json as a bill of materials.",
    )
    parser.add_argument("lockfile", nargs="?", default=None, help="Path or URL of package-lock.json")
    parser.add_argument("output", nargs="?", default=None, help="Where to write the BOM JSON")
    parser.add_argument(
        "--include-dev",
        action="store_true",
        help="Keep development dependencies in the graph",
    )
    parser.add_argument("--no-save", action="store_true", help="Print the BOM instead of writing it")
    parser.add_argument(
        "--no-graph",
        action="store_true",
        help="Leave the full dependency graph out of the BOM",
    )
    parser.add_argument(
        "--counting",
        choices=[mode.value for mode in SubgraphCounting],
        default=SubgraphCounting.SUM.value,
        help="How subgraph sizes are counted (default: sum)",
    )
    parser.add_argument("--summary", action="store_true", help="Print a Markdown summary")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress messages")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    try:
        options = AnalyzeOptions(
            package_lock_file_path=args.lockfile,
            output_file_path=args.output,
            save_to_file=not args.no_save,
            ignore_dev=not args.include_dev,
            include_graph=not args.no_graph,
            subgraph_counting=args.counting,
        )
        bom = analyze(options)
    except FileNotFoundError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as exc:
        print(f"ERROR: Failed to read JSON: {exc}", file=sys.stderr)
        return 1
    except requests.RequestException as exc:
        print(f"ERROR: Failed to fetch lockfile: {exc}", file=sys.stderr)
        return 1
    except (ConfigError, LockfileError, MissingNodeError, OSError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.summary:
        print(render_summary(bom), end="")
    elif args.no_save:
        print(bom.to_json(indent=2))
    else:
        print(
            f"{bom.name}@{bom.version}: {bom.top_level_dependencies} top-level, "
            f"{bom.total_dependencies} total dependencies"
        )

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

"""Stable graph identities derived from lockfile path keys.

Keys look like ``<name>-<version>``. Everything that needs an identity for a
package goes through this module so the scheme can change in one place.
"""

from __future__ import annotations

import re

NODE_MODULES = "node_modules/"

_NON_VERSION_CHARS = re.compile(r"[^0-9.]")


def extract_package_name(lock_key: str) -> str:
    """Return the bare package name for a lockfile path key.

    ``node_modules/a/node_modules/@scope/b`` becomes ``@scope/b``.
    """
    return lock_key.split(NODE_MODULES)[-1]


def make_graph_key(lock_key: str, version: str | None = None) -> str:
    name = extract_package_name(lock_key)
    if version:
        return f"{name}-{version}"
    return name


def strip_version(expr: str) -> str:
    """Reduce a declared version expression to digits and dots."""
    return _NON_VERSION_CHARS.sub("", expr)

"""Re-key the lockfile packages map from install paths to graph keys."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace

from ..parsers.package_lock import ROOT_LOCK_KEY, LockfileError, PackageRecord
from .keys import extract_package_name, make_graph_key

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PreprocessedPackage:
    """A lockfile entry under its graph key, with its bare name attached."""

    key: str
    name: str
    record: PackageRecord

    @property
    def version(self) -> str | None:
        return self.record.version

    @property
    def dev(self) -> bool:
        return self.record.dev


def preprocess_packages(
    packages: Mapping[str, PackageRecord],
    root_key: str,
    root_name: str | None,
    logger: logging.Logger | None = None,
) -> dict[str, PreprocessedPackage]:
    """Return the packages keyed by graph key.

    The root entry (empty path) is stored under ``root_key``. Entries from
    different install paths that share a graph key are merged: the first
    record is kept and stays dev only if every contributing entry is dev.

    Raises:
        LockfileError: the root entry or its name is missing.
    """
    log = logger or _logger

    if not root_name or not root_key:
        raise LockfileError("Lockfile is missing the root package name")
    if ROOT_LOCK_KEY not in packages:
        raise LockfileError(f"Lockfile has no root package entry for '{root_name}'")

    processed: dict[str, PreprocessedPackage] = {}
    for lock_key, record in packages.items():
        if lock_key == ROOT_LOCK_KEY:
            key, name = root_key, root_name
        else:
            key = make_graph_key(lock_key, record.version)
            name = extract_package_name(lock_key)

        existing = processed.get(key)
        if existing is None:
            processed[key] = PreprocessedPackage(key=key, name=name, record=record)
            continue

        log.debug("Merging %s into existing entry %s...", lock_key, key)
        if existing.dev and not record.dev:
            existing.record = replace(existing.record, dev=False)

    return processed

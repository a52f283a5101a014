"""Parse npm package-lock.json into a typed lockfile model.

Supports npm v2+ ("packages" map keyed by install path) directly and flattens
npm v1 ("dependencies" tree) into the same path-keyed shape.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeAlias

import requests
from jsonschema import Draft202012Validator
from requests import Response
from tenacity import retry, stop_after_attempt, wait_fixed

from ..graph.keys import NODE_MODULES

_logger = logging.getLogger(__name__)

ROOT_LOCK_KEY = ""

_DECLARATION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": {
        "anyOf": [
            {"type": "string"},
            {"type": "object", "required": ["version"], "properties": {"version": {"type": "string"}}},
        ]
    },
}

LOCKFILE_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["name", "version"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "version": {"type": "string", "minLength": 1},
        "lockfileVersion": {"type": "integer"},
        "packages": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {
                    "version": {"type": "string"},
                    "name": {"type": "string"},
                    "dev": {"type": "boolean"},
                    "optional": {"type": "boolean"},
                    "dependencies": _DECLARATION_SCHEMA,
                    "peerDependencies": _DECLARATION_SCHEMA,
                    "devDependencies": _DECLARATION_SCHEMA,
                },
            },
        },
        "dependencies": {"type": "object"},
    },
    "anyOf": [{"required": ["packages"]}, {"required": ["dependencies"]}],
}


class LockfileError(ValueError):
    """Raised when a decoded lockfile does not have the expected structure."""


@dataclass(slots=True, frozen=True)
class VersionOnly:
    """Declaration given as a plain version string, e.g. ``"^1.2.0"``."""

    version: str


@dataclass(slots=True, frozen=True)
class VersionedRecord:
    """Declaration given as an object carrying a ``version`` field."""

    version: str
    extra: Mapping[str, Any] = field(default_factory=dict)


DependencySpec: TypeAlias = VersionOnly | VersionedRecord


def parse_declaration(value: Any) -> DependencySpec:
    if isinstance(value, str):
        return VersionOnly(value)
    if isinstance(value, Mapping) and isinstance(value.get("version"), str):
        extra = {k: v for k, v in value.items() if k != "version"}
        return VersionedRecord(version=value["version"], extra=extra)
    raise LockfileError(f"Unsupported dependency declaration: {value!r}")


def _parse_declarations(raw: Any) -> dict[str, DependencySpec]:
    if not raw:
        return {}
    return {str(name): parse_declaration(value) for name, value in raw.items()}


@dataclass(slots=True)
class PackageRecord:
    """One entry of the lockfile ``packages`` map."""

    version: str | None = None
    dev: bool = False
    dependencies: dict[str, DependencySpec] = field(default_factory=dict)
    peer_dependencies: dict[str, DependencySpec] = field(default_factory=dict)
    dev_dependencies: dict[str, DependencySpec] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PackageRecord:
        version = data.get("version")
        return cls(
            version=str(version) if version is not None else None,
            dev=bool(data.get("dev", False)),
            dependencies=_parse_declarations(data.get("dependencies")),
            peer_dependencies=_parse_declarations(data.get("peerDependencies")),
            dev_dependencies=_parse_declarations(data.get("devDependencies")),
        )

    def declarations(self, include_dev: bool = False) -> dict[str, DependencySpec]:
        """Merge declaration sections; later sections win on name clashes."""
        merged = {**self.dependencies, **self.peer_dependencies}
        if include_dev:
            merged.update(self.dev_dependencies)
        return merged


@dataclass(slots=True)
class Lockfile:
    """Decoded lockfile: project identity plus path-keyed packages."""

    name: str
    version: str
    packages: dict[str, PackageRecord]
    lockfile_version: int | None = None

    @property
    def root(self) -> PackageRecord | None:
        return self.packages.get(ROOT_LOCK_KEY)


def _format_errors(errors: Iterable) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)


def validate_lockfile(data: Any) -> None:
    """Raise LockfileError listing every structural problem in ``data``."""
    validator = Draft202012Validator(LOCKFILE_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        raise LockfileError("Invalid lockfile structure:\n" + _format_errors(errors))


def _flatten_v1(
    deps: Mapping[str, Any],
    prefix: str,
    packages: dict[str, dict[str, Any]],
) -> None:
    for name, meta in deps.items():
        if not isinstance(meta, Mapping):
            continue
        path = f"{prefix}{NODE_MODULES}{name}"
        entry: dict[str, Any] = {
            "version": meta.get("version"),
            "dev": bool(meta.get("dev", False)),
            "dependencies": dict(meta.get("requires") or {}),
        }
        packages[path] = entry
        nested = meta.get("dependencies")
        if isinstance(nested, Mapping):
            _flatten_v1(nested, f"{path}/", packages)


def v1_to_packages(data: Mapping[str, Any]) -> dict[str, dict[str, Any]]:
    """Convert an npm v1 ``dependencies`` tree into a v2-style packages map.

    The top-level map also holds transitive packages hoisted to the root
    ``node_modules``, so the synthesized root only declares top-level entries
    that no entry ``requires``. Dev packages go to ``devDependencies`` so dev
    filtering behaves as with v2 files.
    """
    top = data.get("dependencies") or {}
    packages: dict[str, dict[str, Any]] = {}
    _flatten_v1(top, "", packages)

    required = {name for entry in packages.values() for name in entry["dependencies"]}

    root_deps: dict[str, str] = {}
    root_dev_deps: dict[str, str] = {}
    for name, meta in top.items():
        if not isinstance(meta, Mapping) or not meta.get("version"):
            continue
        if name in required:
            continue
        target = root_dev_deps if meta.get("dev") else root_deps
        target[name] = str(meta["version"])

    root = {
        "name": data.get("name"),
        "version": data.get("version"),
        "dependencies": root_deps,
        "devDependencies": root_dev_deps,
    }
    return {ROOT_LOCK_KEY: root, **packages}


def parse_lockfile(data: Any) -> Lockfile:
    """Build a Lockfile from already decoded JSON content."""
    validate_lockfile(data)

    raw_packages = data.get("packages")
    if raw_packages is None:
        _logger.debug("No 'packages' map found, flattening v1 dependency tree...")
        raw_packages = v1_to_packages(data)

    packages = {key: PackageRecord.from_dict(meta) for key, meta in raw_packages.items()}
    return Lockfile(
        name=data["name"],
        version=data["version"],
        packages=packages,
        lockfile_version=data.get("lockfileVersion"),
    )


@retry(reraise=True, stop=stop_after_attempt(3), wait=wait_fixed(2))
def _http_get(url: str) -> Response:
    return requests.get(url, timeout=30)


def _read_source(source: str | Path) -> str:
    text_source = str(source)
    if text_source.startswith("http://") or text_source.startswith("https://"):
        response = _http_get(text_source)
        response.raise_for_status()
        return response.text
    return Path(source).read_text(encoding="utf-8")


def load_lockfile(source: str | Path) -> Lockfile:
    """Read and parse a lockfile from a filesystem path or http(s) URL.

    Raises:
        FileNotFoundError / OSError: the path cannot be read.
        requests.RequestException: the URL cannot be fetched.
        json.JSONDecodeError: the content is not JSON.
        LockfileError: the JSON is not a lockfile.
    """
    return parse_lockfile(json.loads(_read_source(source)))

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def diamond_lock() -> dict[str, Any]:
    return json.loads((FIXTURES / "diamond-lock.json").read_text(encoding="utf-8"))


@pytest.fixture
def make_lock():
    """Build a v2 lockfile dict; ``root_deps`` become the root's dependencies."""

    def _make(
        packages: dict[str, dict[str, Any]],
        root_deps: dict[str, Any] | None = None,
        root_dev_deps: dict[str, Any] | None = None,
        name: str = "app",
        version: str = "1.0.0",
    ) -> dict[str, Any]:
        root: dict[str, Any] = {"name": name, "version": version}
        if root_deps:
            root["dependencies"] = root_deps
        if root_dev_deps:
            root["devDependencies"] = root_dev_deps
        return {
            "name": name,
            "version": version,
            "lockfileVersion": 3,
            "packages": {"": root, **packages},
        }

    return _make


@pytest.fixture
def write_lock(tmp_path: Path):
    def _write(data: dict[str, Any], filename: str = "package-lock.json") -> Path:
        path = tmp_path / filename
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def test_logger() -> logging.Logger:
    logger = logging.getLogger("npm_bom.tests")
    logger.setLevel(logging.DEBUG)
    return logger

from __future__ import annotations

from npm_bom.graph.versions import VersionIndex
from npm_bom.report import Bom
from npm_bom.summary import render_summary, sort_versions


def test_sort_versions_uses_release_order():
    assert sort_versions(["10.0.0", "2.0.0", "not-a-version", "2.0.0-beta.1"]) == [
        "2.0.0-beta.1",
        "2.0.0",
        "10.0.0",
        "not-a-version",
    ]


def test_render_summary_lists_multiple_versions():
    versions = VersionIndex()
    versions.record("a", "2.0.0")
    versions.record("a", "1.0.0")
    versions.record("b", "1.0.0")
    bom = Bom(
        name="app",
        version="1.0.0",
        top_level_dependencies=2,
        total_dependencies=5,
        dependencies_with_multiple_versions=["a"],
        versions=versions,
    )

    text = render_summary(bom)

    assert text.startswith("# app@1.0.0 Bill of Materials\n")
    assert "| Top-level dependencies | 2 |" in text
    assert "| Total dependencies | 5 |" in text
    assert "| a | 1.0.0, 2.0.0 |" in text
    assert "| b |" not in text


def test_render_summary_without_multiple_versions():
    bom = Bom(name="app", version="1.0.0", top_level_dependencies=0, total_dependencies=1)
    assert "No package is present at more than one version." in render_summary(bom)

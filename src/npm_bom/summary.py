"""Human-readable Markdown summary of a BOM."""

from __future__ import annotations

from packaging.version import InvalidVersion, Version

from .report import Bom


def _version_sort_key(version: str) -> tuple[int, Version | str]:
    try:
        return (0, Version(version))
    except InvalidVersion:
        return (1, version)


def sort_versions(versions: list[str]) -> list[str]:
    """Sort versions by release order; unparseable versions go last, lexicographically."""
    return sorted(versions, key=_version_sort_key)


def render_summary(bom: Bom) -> str:
    """Return a Markdown string with totals and the packages present at several versions."""
    lines = []
    lines.append(f"# {bom.name}@{bom.version} Bill of Materials")
    lines.append("")
    lines.append("| Metric | Count |")
    lines.append("| --- | --- |")
    lines.append(f"| Top-level dependencies | {bom.top_level_dependencies} |")
    lines.append(f"| Total dependencies | {bom.total_dependencies} |")
    lines.append(
        f"| Packages with multiple versions | {len(bom.dependencies_with_multiple_versions)} |"
    )
    lines.append("")

    if not bom.dependencies_with_multiple_versions:
        lines.append("No package is present at more than one version.")
        return "\n".join(lines) + "\n"

    lines.append("| Package | Versions |")
    lines.append("| --- | --- |")
    for name in bom.dependencies_with_multiple_versions:
        versions = bom.versions.versions_of(name) if bom.versions is not None else []
        joined = ", ".join(sort_versions(versions)) or "n/a"
        lines.append(f"| {name} | {joined} |")

    return "\n".join(lines) + "\n"

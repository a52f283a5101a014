"""Per-name version tracking and multi-version detection."""

from __future__ import annotations

from collections.abc import Iterator


class VersionIndex:
    """Insertion-ordered mapping of package name -> versions seen."""

    def __init__(self) -> None:
        self._versions: dict[str, list[str]] = {}

    def record(self, name: str, version: str) -> None:
        seen = self._versions.setdefault(name, [])
        if version not in seen:
            seen.append(version)

    def versions_of(self, name: str) -> list[str]:
        return list(self._versions.get(name, []))

    def items(self) -> Iterator[tuple[str, list[str]]]:
        for name, versions in self._versions.items():
            yield name, list(versions)

    def __contains__(self, name: object) -> bool:
        return name in self._versions

    def __len__(self) -> int:
        return len(self._versions)


def find_multiple_versions(index: VersionIndex) -> list[str]:
    """Return names recorded with more than one version, in first-seen order."""
    return [name for name, versions in index.items() if len(versions) > 1]

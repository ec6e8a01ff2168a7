"""Ordered dependency collection keyed by artifact id."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from fullsource.installer.models import Dependency


class DependencySet:
    """Insertion-ordered dependencies; the first one seen per artifact id wins."""

    def __init__(self, dependencies: Iterable[Dependency] = ()) -> None:
        self._by_artifact: dict[str, Dependency] = {}
        for dep in dependencies:
            self.add(dep)

    def add(self, dependency: Dependency) -> bool:
        """Add *dependency* unless its artifact id is already present."""
        if dependency.artifact_id in self._by_artifact:
            return False
        self._by_artifact[dependency.artifact_id] = dependency
        return True

    def replace(self, dependency: Dependency) -> None:
        """Swap the entry for *dependency*'s artifact id, keeping its position."""
        if dependency.artifact_id not in self._by_artifact:
            raise KeyError(dependency.artifact_id)
        self._by_artifact[dependency.artifact_id] = dependency

    def __contains__(self, artifact_id: object) -> bool:
        return artifact_id in self._by_artifact

    def __iter__(self) -> Iterator[Dependency]:
        return iter(self._by_artifact.values())

    def __len__(self) -> int:
        return len(self._by_artifact)

    def to_tuple(self) -> tuple[Dependency, ...]:
        return tuple(self._by_artifact.values())

    def sorted_by_group(self) -> tuple[Dependency, ...]:
        """Stable sort by group id (plain code-point order, locale independent)."""
        return tuple(sorted(self._by_artifact.values(), key=lambda d: d.group_id))

"""Data models for the source installer."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path


@dataclass(frozen=True)
class Dependency:
    """A single ``<dependency>`` declaration.

    ``version`` may be a literal or a property reference such as
    ``${spring.version}``. Identity for deduplication is ``artifact_id``.
    """

    group_id: str
    artifact_id: str
    version: str | None = None
    scope: str | None = None
    optional: bool = False
    type: str | None = None
    classifier: str | None = None
    system_path: str | None = None
    exclusions: tuple[tuple[str, str], ...] = ()

    def as_main_path(self) -> Dependency:
        """Return a copy that is optional and has no scope."""
        return replace(self, optional=True, scope=None)


@dataclass(frozen=True)
class ManifestModel:
    """Dependencies and properties read from one ``pom.xml``."""

    dependencies: tuple[Dependency, ...] = ()
    properties: dict[str, str] = field(default_factory=dict)
    group_id: str | None = None
    packaging: str = "jar"
    has_parent: bool = False


@dataclass(frozen=True)
class ModuleReference:
    """One upstream module and what to do with it.

    ``location`` is relative to ``<trunk><tag>``; the module's manifest lives
    at ``<location>/pom.xml`` and its sources under ``<location>/src``.
    """

    name: str
    location: str
    exports_source: bool = False
    merges_dependencies: bool = False
    removes_deployment_plugin: bool = False
    cleanup_paths: tuple[str, ...] = ()

    @property
    def manifest_location(self) -> str:
        return f"{self.location}/pom.xml" if self.location else "pom.xml"

    @property
    def source_location(self) -> str:
        return f"{self.location}/src" if self.location else "src"


@dataclass(frozen=True)
class MergedResult:
    """Final output of a dependency merge.

    ``dependencies`` is deduplicated and sorted by group id; ``new_properties``
    holds property names (sorted) missing from the consumer manifest;
    ``property_values`` holds the values declared by the merged modules.
    """

    dependencies: tuple[Dependency, ...]
    new_properties: tuple[str, ...]
    property_values: dict[str, str] = field(default_factory=dict)

    def resolve_property(self, name: str) -> str | None:
        return self.property_values.get(name)


@dataclass(frozen=True)
class RewritePlan:
    """Text to put into the dependency region and the property region."""

    dependency_block_replacement: str
    property_block_insertion: str


@dataclass(frozen=True)
class CleanupWarning:
    """A duplicate file that could not be removed after export."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"failed to delete {self.path}, please delete manually ({self.reason})"


@dataclass
class ExportReport:
    """What an export run did."""

    exported: list[str] = field(default_factory=list)
    removed: list[Path] = field(default_factory=list)
    warnings: list[CleanupWarning] = field(default_factory=list)


@dataclass
class InstallResult:
    """Result of a full install run."""

    merged: MergedResult
    manifest_path: Path
    export: ExportReport
    tag: str
    renamed_packages: bool = False

    @property
    def warnings(self) -> list[CleanupWarning]:
        return self.export.warnings


@dataclass(frozen=True)
class FrameworkIdentity:
    """How the upstream framework names its own artifacts."""

    group_id: str = "org.appfuse"
    name_token: str = "appfuse"

    @property
    def version_property(self) -> str:
        return f"{self.name_token}.version"

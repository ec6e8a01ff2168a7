"""SourceInstaller: turn a consumer project into a full-source project."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import structlog

from fullsource.core.config import InstallOptions, resolve_tag
from fullsource.errors import ParseError
from fullsource.installer.exporter import SourceExportOrchestrator
from fullsource.installer.merger import DependencyMerger
from fullsource.installer.models import InstallResult, ManifestModel, ModuleReference
from fullsource.installer.pom import (
    decode_manifest,
    enable_full_source_flag,
    parse_manifest,
    remove_deployment_plugin,
)
from fullsource.installer.remote import ManifestFetcher, ManifestSource, SourceExporter
from fullsource.installer.rewriter import rewrite, write_atomic
from fullsource.installer.selector import select_modules

log = structlog.get_logger("fullsource.installer")

MANIFEST_NAME = "pom.xml"

DAO_FRAMEWORK_PROPERTY = "dao.framework"
WEB_FRAMEWORK_PROPERTY = "web.framework"

PackageRenamer = Callable[[Path, str], None]
SourceFactory = Callable[[str], ManifestSource]


def _default_source(base_url: str) -> ManifestSource:
    return ManifestFetcher(base_url)


class SourceInstaller:
    """Runs the whole pipeline for one project directory.

    Nothing is written to the manifest until every module has been exported
    and merged; any :class:`~fullsource.errors.FullSourceError` before that
    leaves ``pom.xml`` as it was.
    """

    def __init__(
        self,
        options: InstallOptions,
        exporter: SourceExporter,
        source_factory: SourceFactory = _default_source,
        renamer: PackageRenamer | None = None,
    ) -> None:
        self.options = options
        self._exporter = exporter
        self._source_factory = source_factory
        self._renamer = renamer

    @staticmethod
    def _read_manifest(manifest_path: Path) -> tuple[str, str]:
        """Return the manifest text, line endings untouched, and its encoding."""
        try:
            data = manifest_path.read_bytes()
        except OSError as exc:
            raise ParseError(f"unable to read {manifest_path}: {exc}") from exc
        return decode_manifest(data)

    def read_project(self, project_dir: Path) -> tuple[str, ManifestModel]:
        text, _ = self._read_manifest(Path(project_dir) / MANIFEST_NAME)
        return text, parse_manifest(text)

    def plan(self, consumer: ManifestModel) -> tuple[str, tuple[ModuleReference, ...]]:
        """Resolve the tag and select modules. Performs no I/O."""
        version = consumer.properties.get(self.options.framework.version_property)
        tag = resolve_tag(self.options.tag, version, self.options.framework)
        modules = select_modules(
            consumer.packaging,
            self.options.dao_framework or consumer.properties.get(DAO_FRAMEWORK_PROPERTY),
            self.options.web_framework or consumer.properties.get(WEB_FRAMEWORK_PROPERTY),
            consumer.has_parent,
        )
        return tag, modules

    def run(self, project_dir: Path) -> InstallResult:
        project_dir = Path(project_dir)
        manifest_path = project_dir / MANIFEST_NAME
        original_text, encoding = self._read_manifest(manifest_path)
        consumer = parse_manifest(original_text)
        tag, modules = self.plan(consumer)
        base_url = self.options.base_url(tag)
        log.info("installer.plan", tag=tag, modules=[m.name for m in modules])

        destination = project_dir / self.options.destination
        export = SourceExportOrchestrator(self._exporter, base_url, destination).export_all(modules)
        log.info("installer.sources_exported", modules=export.exported)

        source = self._source_factory(base_url)
        try:
            merged = DependencyMerger(source, self.options.framework).merge(
                consumer.dependencies, modules, consumer.properties
            )
        finally:
            close = getattr(source, "close", None)
            if callable(close):
                close()

        text = remove_deployment_plugin(original_text, self.options.framework.group_id)
        text = rewrite(text, merged, strip_carriage_returns=self.options.strip_carriage_returns)
        text = enable_full_source_flag(text)

        write_atomic(manifest_path, text, encoding=encoding)
        log.info(
            "installer.manifest_updated",
            dependencies=len(merged.dependencies),
            new_properties=len(merged.new_properties),
        )

        renamed = False
        if self.options.rename_packages:
            if self._renamer is None:
                log.info("installer.rename_skipped", reason="no package renamer configured")
            elif consumer.group_id:
                log.info("installer.renaming_packages", group_id=consumer.group_id)
                self._renamer(project_dir, consumer.group_id)
                renamed = True

        return InstallResult(
            merged=merged,
            manifest_path=manifest_path,
            export=export,
            tag=tag,
            renamed_packages=renamed,
        )

"""Source export orchestration and duplicate-resource cleanup."""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from pathlib import Path

import structlog

from fullsource.installer.models import CleanupWarning, ExportReport, ModuleReference
from fullsource.installer.remote import SourceExporter

log = structlog.get_logger("fullsource.exporter")


class SourceExportOrchestrator:
    """Exports module source trees in plan order into one destination directory.

    An export failure propagates and stops the run. A duplicate file that
    cannot be deleted is logged and reported as a :class:`CleanupWarning`.
    """

    def __init__(self, exporter: SourceExporter, base_url: str, destination: Path) -> None:
        self._exporter = exporter
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.destination = Path(destination)

    def export_all(self, modules: Sequence[ModuleReference]) -> ExportReport:
        report = ExportReport()
        for module in modules:
            if not module.exports_source:
                continue
            remote = self.base_url + module.source_location
            log.info("exporter.installing_source", module=module.name, url=remote)
            self._exporter.export(remote, self.destination)
            report.exported.append(module.name)

            for relative in module.cleanup_paths:
                self._remove_duplicate(self.destination / relative, report)
        return report

    @staticmethod
    def _remove_duplicate(path: Path, report: ExportReport) -> None:
        if not path.exists():
            return
        log.info("exporter.removing_duplicate", path=str(path))
        try:
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as exc:
            warning = CleanupWarning(path=path, reason=str(exc))
            log.error("exporter.cleanup_failed", path=str(path), error=str(exc))
            report.warnings.append(warning)
            return
        report.removed.append(path)

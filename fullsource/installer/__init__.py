"""Source installer: vendor framework module sources and reconcile pom.xml."""

from fullsource.installer.exporter import SourceExportOrchestrator
from fullsource.installer.installer import SourceInstaller
from fullsource.installer.merger import DependencyMerger
from fullsource.installer.models import (
    Dependency,
    ManifestModel,
    MergedResult,
    ModuleReference,
    RewritePlan,
)
from fullsource.installer.properties import extract_property
from fullsource.installer.rewriter import rewrite
from fullsource.installer.selector import select_modules

__all__ = [
    "Dependency",
    "DependencyMerger",
    "ManifestModel",
    "MergedResult",
    "ModuleReference",
    "RewritePlan",
    "SourceExportOrchestrator",
    "SourceInstaller",
    "extract_property",
    "rewrite",
    "select_modules",
]

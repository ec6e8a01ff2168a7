"""fullsource: vendor a framework's module sources into a consumer project."""

__version__ = "0.1.0"

from fullsource.errors import (
    ConfigurationError,
    FetchError,
    FullSourceError,
    ParseError,
    WriteError,
)
from fullsource.installer import (
    DependencyMerger,
    SourceExportOrchestrator,
    SourceInstaller,
    rewrite,
    select_modules,
)

__all__ = [
    "ConfigurationError",
    "DependencyMerger",
    "FetchError",
    "FullSourceError",
    "ParseError",
    "SourceExportOrchestrator",
    "SourceInstaller",
    "WriteError",
    "rewrite",
    "select_modules",
]

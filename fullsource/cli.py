"""CLI entry point: fullsource.

Subcommands:
    fullsource plan [PROJECT_DIR]       # Show which modules would be exported and merged
    fullsource install [PROJECT_DIR]    # Export sources and rewrite pom.xml
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from fullsource.core.config import InstallOptions
from fullsource.core.logging import setup_logging
from fullsource.errors import FullSourceError
from fullsource.installer.installer import SourceInstaller
from fullsource.installer.remote import SubversionExporter


def _options(**overrides: object) -> InstallOptions:
    return InstallOptions.from_env(**overrides)


def _fail(exc: FullSourceError) -> None:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """Vendor framework module sources into a project and reconcile its pom.xml."""
    setup_logging("DEBUG" if verbose else None)


_project_dir = click.argument(
    "project_dir",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
_dao = click.option("--dao-framework", default=None, help="Persistence framework (default: pom's dao.framework, then hibernate)")
_web = click.option("--web-framework", default=None, help="Web framework (default: pom's web.framework)")
_tag = click.option("--tag", default=None, help="Tag or branch under the trunk, e.g. tags/APPFUSE_2_0/")


@main.command("plan")
@_project_dir
@_dao
@_web
@_tag
def plan(project_dir: Path, dao_framework: str | None, web_framework: str | None, tag: str | None) -> None:
    """Print the module plan without touching the network."""
    options = _options(dao_framework=dao_framework, web_framework=web_framework, tag=tag)
    installer = SourceInstaller(options, exporter=SubversionExporter())
    try:
        _, consumer = installer.read_project(project_dir)
        resolved_tag, modules = installer.plan(consumer)
    except FullSourceError as exc:
        _fail(exc)
        return

    click.echo(f"Source: {options.base_url(resolved_tag)}")
    click.echo(f"Packaging: {consumer.packaging}  parent: {'yes' if consumer.has_parent else 'no'}")
    for module in modules:
        actions = []
        if module.exports_source:
            actions.append("export")
        if module.merges_dependencies:
            actions.append("merge")
        click.echo(f"  {module.name:<16} {module.location or '.':<20} {', '.join(actions)}")


@main.command("install")
@_project_dir
@_dao
@_web
@_tag
@click.option("--trunk", default=None, help="Remote base location of the framework sources")
@click.option("--destination", default=None, help="Export destination, relative to the project (default: src)")
@click.option("--rename-packages/--no-rename-packages", default=None, help="Run the package rename step afterwards")
@click.option(
    "--strip-cr/--keep-cr",
    "strip_carriage_returns",
    default=None,
    help="Strip carriage returns from the rewritten pom.xml (default: on except Windows)",
)
def install(
    project_dir: Path,
    dao_framework: str | None,
    web_framework: str | None,
    tag: str | None,
    trunk: str | None,
    destination: str | None,
    rename_packages: bool | None,
    strip_carriage_returns: bool | None,
) -> None:
    """Export framework sources into PROJECT_DIR and rewrite its pom.xml."""
    options = _options(
        dao_framework=dao_framework,
        web_framework=web_framework,
        tag=tag,
        trunk=trunk,
        destination=destination,
        rename_packages=rename_packages,
        strip_carriage_returns=strip_carriage_returns,
    )
    installer = SourceInstaller(options, exporter=SubversionExporter())
    try:
        result = installer.run(project_dir)
    except FullSourceError as exc:
        _fail(exc)
        return

    click.echo(f"Exported: {', '.join(result.export.exported) or 'nothing'} ({result.tag})")
    click.echo(f"Dependencies: {len(result.merged.dependencies)}")
    click.echo(f"New properties: {', '.join(result.merged.new_properties) or 'none'}")
    click.echo(f"Updated {result.manifest_path}")
    for warning in result.warnings:
        click.echo(f"Warning: {warning}", err=True)


if __name__ == "__main__":
    main()

"""Module selection: which upstream modules to export and merge."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from fullsource.errors import ConfigurationError
from fullsource.installer.models import ModuleReference

log = structlog.get_logger("fullsource.selector")

DEFAULT_DAO_FRAMEWORK = "hibernate"

LIBRARY_PACKAGING = "jar"
WEB_PACKAGING = "war"


@dataclass(frozen=True)
class ModuleSpec:
    """Static description of an upstream module.

    ``{name}`` in *location* is filled with the configured framework name.
    """

    location: str
    removes_deployment_plugin: bool = False


# Duplicate resources left behind when a persistence module and the data
# common module both ship the same configuration file (relative to the
# destination directory).
_DUPLICATE_RESOURCES: dict[str, tuple[str, ...]] = {
    "hibernate": ("test/resources/hibernate.cfg.xml",),
    "jpa-hibernate": ("test/resources/META-INF",),
}

MODULE_TABLE: dict[str, ModuleSpec] = {
    "root": ModuleSpec(location=""),
    "data-common": ModuleSpec(location="data/common"),
    "persistence": ModuleSpec(location="data/{name}"),
    "service": ModuleSpec(location="service"),
    "web-common": ModuleSpec(location="web/common"),
    "web": ModuleSpec(location="web/{name}", removes_deployment_plugin=True),
}


def _reference(
    kind: str,
    *,
    name: str | None = None,
    exports: bool,
    merges: bool,
) -> ModuleReference:
    spec = MODULE_TABLE[kind]
    location = spec.location.format(name=name) if name else spec.location
    cleanup: tuple[str, ...] = ()
    if kind == "persistence" and exports and name:
        cleanup = _DUPLICATE_RESOURCES.get(name.lower(), ())
    return ModuleReference(
        name=name or kind,
        location=location,
        exports_source=exports,
        merges_dependencies=merges,
        removes_deployment_plugin=spec.removes_deployment_plugin,
        cleanup_paths=cleanup,
    )


def select_modules(
    packaging: str,
    persistence_framework: str | None,
    web_framework: str | None,
    has_parent: bool,
) -> tuple[ModuleReference, ...]:
    """Return the ordered module plan for a project.

    The order is significant: manifests are merged first-seen-wins in this
    order, and sources are exported in this order.

    Raises :class:`ConfigurationError` when *packaging* is unsupported, or
    when a web archive does not name its web framework.
    """
    kind = (packaging or "").lower()
    if kind not in (LIBRARY_PACKAGING, WEB_PACKAGING):
        raise ConfigurationError(
            f"unsupported packaging {packaging!r}: expected 'jar' or 'war'"
        )

    if kind == WEB_PACKAGING and not web_framework:
        raise ConfigurationError(
            "No web.framework property specified, please modify pom.xml to add it. "
            "For example: <web.framework>struts</web.framework>."
        )

    if not persistence_framework:
        log.warning(
            "selector.dao_framework_default",
            default=DEFAULT_DAO_FRAMEWORK,
            detail="No dao.framework property specified",
        )
        persistence_framework = DEFAULT_DAO_FRAMEWORK

    export_data = kind == LIBRARY_PACKAGING or (kind == WEB_PACKAGING and not has_parent)
    export_web = kind == WEB_PACKAGING

    plan = [_reference("root", exports=False, merges=True)]
    if export_data:
        plan.append(_reference("data-common", exports=True, merges=False))
    plan += [
        _reference("persistence", name=persistence_framework, exports=export_data, merges=True),
        _reference("service", exports=export_data, merges=True),
        _reference("web-common", exports=export_web, merges=True),
    ]
    if web_framework:
        plan.append(_reference("web", name=web_framework, exports=export_web, merges=True))
    else:
        log.info("selector.web_framework_skipped", packaging=kind)
    return tuple(plan)

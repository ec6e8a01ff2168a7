"""Manifest rewriter: replace the dependency block, extend the property block.

Everything outside those two regions is copied through untouched; the
manifest is never re-serialized.
"""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path
from xml.sax.saxutils import escape

import structlog

from fullsource.errors import ParseError, WriteError
from fullsource.installer.models import Dependency, MergedResult, RewritePlan
from fullsource.installer.regions import Region, TextSpan, index_lines, locate_region

log = structlog.get_logger("fullsource.rewriter")

DEPENDENCIES_COMMENT = "<!-- Dependencies calculated by AppFuse when running full-source plugin -->"
PROPERTIES_COMMENT = "<!-- Properties calculated by AppFuse when running full-source plugin -->"

DEFAULT_INDENT = "    "

PropertyResolver = Callable[[str], "str | None"]


def detect_indent(text: str) -> str:
    """Indentation of the project's direct children, judged from ``<modelVersion>``."""
    for line in index_lines(text):
        if line.content.startswith("<modelVersion>"):
            return line.indent or DEFAULT_INDENT
    return DEFAULT_INDENT


def _newline(region: Region) -> str:
    return "\r\n" if region.open_line.text.endswith("\r\n") else "\n"


def _element(indent: str, tag: str, value: str) -> str:
    return f"{indent}<{tag}>{escape(value)}</{tag}>"


def render_dependency(dep: Dependency, indent: str) -> list[str]:
    """Render one dependency at two levels below the project element."""
    i2, i3, i4, i5 = (indent * n for n in (2, 3, 4, 5))
    lines = [f"{i2}<dependency>", _element(i3, "groupId", dep.group_id)]
    lines.append(_element(i3, "artifactId", dep.artifact_id))
    if dep.version:
        lines.append(_element(i3, "version", dep.version))
    if dep.type:
        lines.append(_element(i3, "type", dep.type))
    if dep.classifier:
        lines.append(_element(i3, "classifier", dep.classifier))
    if dep.scope:
        lines.append(_element(i3, "scope", dep.scope))
    if dep.system_path:
        lines.append(_element(i3, "systemPath", dep.system_path))
    if dep.exclusions:
        lines.append(f"{i3}<exclusions>")
        for group_id, artifact_id in dep.exclusions:
            lines.append(f"{i4}<exclusion>")
            lines.append(_element(i5, "groupId", group_id))
            lines.append(_element(i5, "artifactId", artifact_id))
            lines.append(f"{i4}</exclusion>")
        lines.append(f"{i3}</exclusions>")
    if dep.optional:
        lines.append(f"{i3}<optional>true</optional>")
    lines.append(f"{i2}</dependency>")
    return lines


def render_property_value(value: str) -> str:
    """Escape a property value; anything carrying an ampersand goes into CDATA."""
    if "&" in value:
        return f"<![CDATA[{value}]]>"
    return escape(value)


def plan_rewrite(
    text: str,
    merged: MergedResult,
    resolve_property_value: PropertyResolver | None = None,
) -> RewritePlan:
    """Render the two replacement blocks for *text*.

    Raises :class:`ParseError` when a region is missing or a new property
    has no known value.
    """
    resolve = resolve_property_value or merged.resolve_property
    indent = detect_indent(text)
    deps_region = locate_region(text, "dependencies", indent)
    props_region = locate_region(text, "properties", indent)
    nl = _newline(deps_region)

    dep_lines = [f"{indent}{DEPENDENCIES_COMMENT}", f"{indent}<dependencies>"]
    for dep in merged.dependencies:
        dep_lines.extend(render_dependency(dep, indent))
    dependency_block = nl.join(dep_lines) + nl + indent

    property_block = ""
    if merged.new_properties:
        nl = _newline(props_region)
        entries = [f"{indent * 2}{PROPERTIES_COMMENT}"]
        for name in merged.new_properties:
            value = resolve(name)
            if value is None:
                raise ParseError(f"no value known for property {name!r}")
            entries.append(f"{indent * 2}<{name}>{render_property_value(value)}</{name}>")
        property_block = nl + nl.join(entries) + nl

    return RewritePlan(
        dependency_block_replacement=dependency_block,
        property_block_insertion=property_block,
    )


def _dependency_span(text: str, region: Region, replacement: str) -> TextSpan:
    start = region.open_line.start
    # a previous run left its comment right above; replace it too
    if region.open_line.number > 0:
        previous = index_lines(text)[region.open_line.number - 1]
        if previous.content == DEPENDENCIES_COMMENT:
            start = previous.start
    return TextSpan(start=start, end=region.close_offset, replacement=replacement)


def _property_span(region: Region, insertion: str) -> TextSpan:
    if region.close_line == region.open_line:
        # "<properties></properties>" on one line
        if insertion:
            insertion = insertion + region.indent
        return TextSpan(region.close_offset, region.close_offset, insertion)
    at = region.close_line.start
    return TextSpan(at, at, insertion)


def apply_plan(text: str, plan: RewritePlan, *, strip_carriage_returns: bool = False) -> str:
    """Apply *plan* to *text*, changing only the two located regions."""
    indent = detect_indent(text)
    deps_region = locate_region(text, "dependencies", indent)
    props_region = locate_region(text, "properties", indent)

    spans = [
        _dependency_span(text, deps_region, plan.dependency_block_replacement),
        _property_span(props_region, plan.property_block_insertion),
    ]
    # apply back to front so earlier offsets stay valid
    for span in sorted(spans, key=lambda s: s.start, reverse=True):
        text = span.apply(text)

    if strip_carriage_returns:
        text = text.replace("\r", "")
    return text


def rewrite(
    original_text: str,
    merged: MergedResult,
    resolve_property_value: PropertyResolver | None = None,
    *,
    strip_carriage_returns: bool = False,
) -> str:
    """Return *original_text* with the merged dependencies and new properties."""
    plan = plan_rewrite(original_text, merged, resolve_property_value)
    return apply_plan(original_text, plan, strip_carriage_returns=strip_carriage_returns)


def write_atomic(path: Path, text: str, encoding: str = "utf-8") -> None:
    """Write *text* to *path* via a sibling temp file and ``os.replace``."""
    path = Path(path)
    tmp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding=encoding,
            newline="",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as fh:
            tmp_name = fh.name
            fh.write(text)
        if path.exists():
            os.chmod(tmp_name, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp_name, path)
    except (OSError, UnicodeEncodeError) as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise WriteError(f"unable to write {path}: {exc}") from exc
    log.info("rewriter.manifest_written", path=str(path))

"""Maven pom.xml loading and the few regex edits applied to manifest text."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET

from fullsource.errors import ParseError
from fullsource.installer.models import Dependency, ManifestModel

_NS = "{http://maven.apache.org/POM/4.0.0}"

_FULL_SOURCE_FLAG_RE = re.compile(r"<amp\.fullSource>\s*false\s*</amp\.fullSource>")
_XML_ENCODING_RE = re.compile(rb"""^\s*<\?xml[^>]*?\bencoding\s*=\s*['"]([A-Za-z][A-Za-z0-9._-]*)['"]""")
_UTF8_BOM = b"\xef\xbb\xbf"


def _text(element: ET.Element | None) -> str | None:
    if element is None:
        return None
    return element.text.strip() if element.text else None


def _local(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag


def _namespace(root: ET.Element) -> str:
    return _NS if root.tag.startswith(_NS) else ""


def _parse_dependency(dep_el: ET.Element, ns: str) -> Dependency | None:
    artifact_id = _text(dep_el.find(f"{ns}artifactId"))
    if not artifact_id:
        return None

    exclusions: list[tuple[str, str]] = []
    excl_root = dep_el.find(f"{ns}exclusions")
    if excl_root is not None:
        for excl in excl_root.findall(f"{ns}exclusion"):
            exclusions.append(
                (_text(excl.find(f"{ns}groupId")) or "", _text(excl.find(f"{ns}artifactId")) or "")
            )

    return Dependency(
        group_id=_text(dep_el.find(f"{ns}groupId")) or "",
        artifact_id=artifact_id,
        version=_text(dep_el.find(f"{ns}version")),
        scope=_text(dep_el.find(f"{ns}scope")),
        optional=(_text(dep_el.find(f"{ns}optional")) or "").lower() == "true",
        type=_text(dep_el.find(f"{ns}type")),
        classifier=_text(dep_el.find(f"{ns}classifier")),
        system_path=_text(dep_el.find(f"{ns}systemPath")),
        exclusions=tuple(exclusions),
    )


def decode_manifest(data: bytes) -> tuple[str, str]:
    """Decode raw pom.xml bytes using the encoding its XML declaration names.

    Returns the text and the encoding to write it back with. Without a
    declaration the file is UTF-8. Raises :class:`ParseError` when the bytes
    do not decode.
    """
    if data.startswith(_UTF8_BOM):
        encoding = "utf-8-sig"
    else:
        match = _XML_ENCODING_RE.match(data)
        encoding = match.group(1).decode("ascii").lower() if match else "utf-8"
    try:
        return data.decode(encoding), encoding
    except LookupError as exc:
        raise ParseError(f"unknown manifest encoding {encoding!r}") from exc
    except UnicodeDecodeError as exc:
        raise ParseError(f"manifest is not valid {encoding}: {exc}") from exc


def parse_manifest(content: str) -> ManifestModel:
    """Parse pom.xml text into a :class:`ManifestModel`.

    Only the project-level ``<dependencies>`` are read; dependencyManagement,
    plugin and profile dependencies are ignored.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise ParseError(f"malformed manifest: {exc}") from exc

    if _local(root.tag) != "project":
        raise ParseError(f"expected <project> root element, found <{_local(root.tag)}>")

    ns = _namespace(root)

    deps: list[Dependency] = []
    deps_el = root.find(f"{ns}dependencies")
    if deps_el is not None:
        for dep_el in deps_el.findall(f"{ns}dependency"):
            dep = _parse_dependency(dep_el, ns)
            if dep is not None:
                deps.append(dep)

    props: dict[str, str] = {}
    props_el = root.find(f"{ns}properties")
    if props_el is not None:
        for child in props_el:
            if not isinstance(child.tag, str):
                continue  # comments
            props[_local(child.tag)] = child.text.strip() if child.text else ""

    parent = root.find(f"{ns}parent")
    group_id = _text(root.find(f"{ns}groupId"))
    if group_id is None and parent is not None:
        group_id = _text(parent.find(f"{ns}groupId"))

    return ManifestModel(
        dependencies=tuple(deps),
        properties=props,
        group_id=group_id,
        packaging=_text(root.find(f"{ns}packaging")) or "jar",
        has_parent=parent is not None,
    )


def remove_deployment_plugin(content: str, group_id: str) -> str:
    """Strip the warpath plugin and warpath-typed dependencies from pom text."""
    group = re.escape(group_id)
    in_plugin = r"(?:(?!</plugin>).)*?"
    in_dep = r"(?:(?!</dependency>).)*?"
    patterns = (
        rf"\s*<plugin>\s*<groupId>{group}</groupId>{in_plugin}"
        rf"<artifactId>maven-warpath-plugin</artifactId>{in_plugin}</plugin>",
        rf"\s*<dependency>\s*<groupId>\$\{{pom\.groupId\}}</groupId>{in_dep}"
        rf"<type>warpath</type>{in_dep}</dependency>",
        rf"\s*<dependency>\s*<groupId>{group}</groupId>{in_dep}"
        rf"<type>warpath</type>{in_dep}</dependency>",
    )
    for pattern in patterns:
        content = re.sub(pattern, "", content, flags=re.DOTALL)
    return content


def enable_full_source_flag(content: str) -> str:
    """Flip ``<amp.fullSource>false</amp.fullSource>`` to true."""
    return _FULL_SOURCE_FLAG_RE.sub("<amp.fullSource>true</amp.fullSource>", content)

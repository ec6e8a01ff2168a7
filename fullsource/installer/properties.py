"""Version property extraction for ``${name}`` style version expressions."""

from __future__ import annotations

from collections.abc import Iterable

from fullsource.installer.models import Dependency

_PREFIX = "${"
_SUFFIX = "}"

# Expressions Maven resolves itself; a project never declares these.
_BUILTIN_PREFIXES = ("project.", "pom.", "parent.", "env.", "settings.")
_BUILTIN_NAMES = frozenset({"basedir"})


def extract_property(expression: str) -> str:
    """Return the property name referenced by *expression*.

    ``"${spring.version}"`` -> ``"spring.version"``. Literal versions and
    half-marked expressions such as ``"${oops"`` are returned unchanged.
    """
    if (
        len(expression) >= len(_PREFIX) + len(_SUFFIX)
        and expression.startswith(_PREFIX)
        and expression.endswith(_SUFFIX)
    ):
        return expression[len(_PREFIX) : -len(_SUFFIX)]
    return expression


def is_property_reference(expression: str | None) -> bool:
    """True when *expression* names a property, e.g. ``${spring.version}``."""
    if not expression:
        return False
    name = extract_property(expression)
    return bool(name) and name != expression


def referenced_properties(dependencies: Iterable[Dependency]) -> list[str]:
    """Property names referenced by the versions of *dependencies*, in order, once each."""
    names: dict[str, None] = {}
    for dep in dependencies:
        if dep.version and is_property_reference(dep.version):
            names.setdefault(extract_property(dep.version), None)
    return list(names)


def is_builtin_property(name: str) -> bool:
    """True for names Maven supplies itself, e.g. ``pom.version`` or ``basedir``."""
    return name in _BUILTIN_NAMES or name.startswith(_BUILTIN_PREFIXES)

"""Tests for version property extraction."""

from __future__ import annotations

import pytest

from fullsource.installer.models import Dependency
from fullsource.installer.properties import (
    extract_property,
    is_builtin_property,
    is_property_reference,
    referenced_properties,
)


class TestExtractProperty:
    def test_strips_markers(self):
        assert extract_property("${spring.version}") == "spring.version"

    def test_literal_unchanged(self):
        assert extract_property("2.0.6") == "2.0.6"

    def test_idempotent_on_literal(self):
        once = extract_property("3.8.1")
        assert extract_property(once) == once

    @pytest.mark.parametrize("expr", ["${spring.version", "spring.version}", "$spring.version}"])
    def test_half_marked_is_literal(self, expr):
        assert extract_property(expr) == expr

    def test_empty_reference(self):
        assert extract_property("${}") == ""

    def test_nested_markers_only_outer_stripped(self):
        assert extract_property("${a${b}}") == "a${b}"


class TestIsPropertyReference:
    def test_reference(self):
        assert is_property_reference("${junit.version}")

    @pytest.mark.parametrize("expr", [None, "", "1.0", "${oops", "${}"])
    def test_not_reference(self, expr):
        assert not is_property_reference(expr)


class TestReferencedProperties:
    def test_order_and_uniqueness(self):
        deps = [
            Dependency("a", "a", "${x.version}"),
            Dependency("b", "b", "1.0"),
            Dependency("c", "c", "${y.version}"),
            Dependency("d", "d", "${x.version}"),
            Dependency("e", "e", None),
        ]
        assert referenced_properties(deps) == ["x.version", "y.version"]


class TestIsBuiltinProperty:
    @pytest.mark.parametrize(
        "name",
        [
            "pom.version",
            "project.version",
            "pom.groupId",
            "parent.version",
            "env.HOME",
            "settings.localRepository",
            "basedir",
        ],
    )
    def test_builtin(self, name):
        assert is_builtin_property(name)

    @pytest.mark.parametrize("name", ["spring.version", "basedir.lib", "pomVersion", "jdbc.url"])
    def test_declared(self, name):
        assert not is_builtin_property(name)

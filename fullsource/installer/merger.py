"""Dependency merger: fold module manifests into the consumer's dependency list.

The merge is written as an accumulator: :func:`start` builds the initial
state from the consumer, :func:`merge_module` folds in one module manifest
and returns a new state, and :func:`finalize` produces the
:class:`MergedResult`. :class:`DependencyMerger` drives the fold over the
selected modules, fetching each manifest in order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

import structlog

from fullsource.installer.dependency_set import DependencySet
from fullsource.installer.models import (
    Dependency,
    FrameworkIdentity,
    ManifestModel,
    MergedResult,
    ModuleReference,
)
from fullsource.installer.pom import parse_manifest, remove_deployment_plugin
from fullsource.installer.properties import is_builtin_property, referenced_properties
from fullsource.installer.remote import ManifestSource

log = structlog.get_logger("fullsource.merger")

# Base test classes live in src/main/java in the framework's layout, so these
# must resolve at compile and run time rather than only under test scope.
TEST_UTILITY_ARTIFACTS = frozenset({"spring-mock", "jmock", "junit", "shale-test"})


@dataclass(frozen=True)
class MergeState:
    """Running merge result, threaded through :func:`merge_module`."""

    dependencies: tuple[Dependency, ...] = ()
    property_values: Mapping[str, str] = field(default_factory=dict)
    merged_modules: tuple[str, ...] = ()


def start(
    consumer_dependencies: Iterable[Dependency],
    framework: FrameworkIdentity = FrameworkIdentity(),
) -> MergeState:
    """Initial state: the consumer's dependencies minus the framework's own artifacts."""
    kept = DependencySet(d for d in consumer_dependencies if d.group_id != framework.group_id)
    return MergeState(dependencies=kept.to_tuple())


def merge_module(
    state: MergeState,
    name: str,
    model: ManifestModel,
    framework: FrameworkIdentity = FrameworkIdentity(),
) -> MergeState:
    """Append *model*'s dependencies that are new by artifact id and not framework-internal."""
    deps = DependencySet(state.dependencies)
    added = 0
    for dep in model.dependencies:
        if framework.name_token in dep.artifact_id:
            continue
        if deps.add(dep):
            added += 1

    properties = dict(model.properties)
    properties.update(state.property_values)  # earlier modules win

    log.info("merger.module_merged", module=name, declared=len(model.dependencies), added=added)
    return MergeState(
        dependencies=deps.to_tuple(),
        property_values=MappingProxyType(properties),
        merged_modules=state.merged_modules + (name,),
    )


def finalize(
    state: MergeState,
    consumer_properties: Mapping[str, str] | None = None,
    test_utilities: frozenset[str] = TEST_UTILITY_ARTIFACTS,
) -> MergedResult:
    """Mark test utilities as main-path, collect missing version properties, sort."""
    existing = consumer_properties or {}
    deps = DependencySet(state.dependencies)
    for dep in state.dependencies:
        if dep.artifact_id in test_utilities:
            deps.replace(dep.as_main_path())

    new_properties = {
        name
        for name in referenced_properties(state.dependencies)
        if name not in existing and not is_builtin_property(name)
    }

    return MergedResult(
        dependencies=deps.sorted_by_group(),
        new_properties=tuple(sorted(new_properties)),
        property_values=dict(state.property_values),
    )


class DependencyMerger:
    """Fetches each selected module manifest and folds it into the result."""

    def __init__(
        self,
        source: ManifestSource,
        framework: FrameworkIdentity = FrameworkIdentity(),
        test_utilities: frozenset[str] = TEST_UTILITY_ARTIFACTS,
    ) -> None:
        self._source = source
        self._framework = framework
        self._test_utilities = test_utilities

    def load_module(self, module: ModuleReference) -> ManifestModel:
        """Fetch and parse one module manifest. Fetch and parse errors propagate."""
        text = self._source.fetch_manifest(module.manifest_location)
        if module.removes_deployment_plugin:
            text = remove_deployment_plugin(text, self._framework.group_id)
        return parse_manifest(text)

    def merge(
        self,
        consumer_dependencies: Iterable[Dependency],
        modules: Sequence[ModuleReference],
        consumer_properties: Mapping[str, str] | None = None,
    ) -> MergedResult:
        state = start(consumer_dependencies, self._framework)
        for module in modules:
            if not module.merges_dependencies:
                continue
            log.info("merger.adding_dependencies", module=module.name)
            state = merge_module(state, module.name, self.load_module(module), self._framework)
        return finalize(state, consumer_properties, self._test_utilities)

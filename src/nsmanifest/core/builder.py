"""
Manifest Builder.

Stateful orchestrator that turns accumulated source units into an ordered
manifest: the transitive closure of the program entry points, sorted so that
every unit follows its dependencies.

Units live in one of two sets:
    - main: entry points, always kept together with their closure.
    - limbo: candidates that are dropped unless something requires them.

A unit moves from limbo to main but never occupies both. The computed
manifest is cached until a unit, entry point or policy flag changes.
"""

import logging
from typing import Iterable, List, Optional, Set

from ..config import BuilderConfig
from .errors import InvalidRuntimeBaseError, InvariantViolationError, MissingEntryPointError
from .graph import DependencyGraph
from .registry import NamespaceRegistry
from .resolver import DependencyResolver
from .result import Ok
from .sorter import TopologicalSorter
from .types import SortStrategy, SourceUnit

logger = logging.getLogger(__name__)


class ManifestBuilder:
    """
    Builds a dependency-ordered manifest of source units.

    Registration errors (duplicate providers, a runtime base whose root
    namespace differs from the configured one) are raised immediately and
    leave no trace of the rejected unit.
    Graph errors (missing dependency, missing entry point, cycle) are raised
    by ``to_manifest()``, which leaves the builder untouched on failure so the
    call can be retried after fixing the inputs.

    Example:
        ```python
        builder = ManifestBuilder()
        builder.add_units([base, lib]).add_main_unit(app)
        for unit in builder.to_manifest():
            print(unit.id)
        ```
    """

    def __init__(self, config: Optional[BuilderConfig] = None):
        config = config or BuilderConfig()
        self._all_units: List[SourceUnit] = []
        self._main_units: Set[SourceUnit] = set()
        self._limbo_units: Set[SourceUnit] = set()
        self._pending_namespaces: Set[str] = set()
        self._registry = NamespaceRegistry()
        self._resolver = DependencyResolver(self._registry)

        self._keep_all_units = config.keep_all_units
        self._keep_moochers = config.keep_moochers
        self._keep_original_order = config.keep_original_order
        self._ignore_missing_dependencies = config.ignore_missing_dependencies
        self._root_namespace = config.root_namespace
        self._sorter = TopologicalSorter(config.sort_strategy)

        self._manifest: Optional[List[SourceUnit]] = None
        self._stale = True

    @classmethod
    def from_config(cls, config: BuilderConfig) -> "ManifestBuilder":
        return cls(config)

    # ------------------------------------------------------------------
    # Policy flags
    # ------------------------------------------------------------------

    def set_keep_all_units(self, keep_all_units: bool) -> "ManifestBuilder":
        """Disable pruning: every added unit goes into the manifest."""
        if self._keep_all_units != keep_all_units:
            self._keep_all_units = keep_all_units
            self._stale = True
        return self

    def set_keep_moochers(self, keep_moochers: bool) -> "ManifestBuilder":
        """Keep units that provide nothing, and their dependencies."""
        if self._keep_moochers != keep_moochers:
            self._keep_moochers = keep_moochers
            self._stale = True
        return self

    def set_keep_original_order(self, keep_original_order: bool) -> "ManifestBuilder":
        """Return units in insertion order instead of topologically sorted."""
        if self._keep_original_order != keep_original_order:
            self._keep_original_order = keep_original_order
            self._stale = True
        return self

    def set_ignore_missing_dependencies(self, ignore: bool) -> "ManifestBuilder":
        """Drop edges to unprovided namespaces instead of failing."""
        if self._ignore_missing_dependencies != ignore:
            self._ignore_missing_dependencies = ignore
            self._stale = True
        return self

    @property
    def keep_all_units(self) -> bool:
        return self._keep_all_units

    @property
    def keep_moochers(self) -> bool:
        return self._keep_moochers

    @property
    def keep_original_order(self) -> bool:
        return self._keep_original_order

    @property
    def ignore_missing_dependencies(self) -> bool:
        return self._ignore_missing_dependencies

    @property
    def sort_strategy(self) -> SortStrategy:
        return self._sorter.strategy

    @property
    def root_namespace(self) -> str:
        return self._root_namespace

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def add_main_unit(self, unit: SourceUnit) -> "ManifestBuilder":
        """Add an entry point, promoting it if it was a candidate."""
        if unit in self._main_units:
            return self
        if unit in self._limbo_units:
            self._limbo_units.remove(unit)
            logger.debug(f"Promoted {unit.id} to entry point")
        else:
            self._register_new_unit(unit)
        self._main_units.add(unit)
        self._stale = True
        return self

    def add_main_units(self, units: Iterable[SourceUnit]) -> "ManifestBuilder":
        for unit in units:
            self.add_main_unit(unit)
        return self

    def add_namespace_entry_point(self, namespace: str) -> "ManifestBuilder":
        """
        Require the provider of ``namespace`` to be an entry point.

        The provider is looked up when the manifest is built, so it may be
        added later.
        """
        if namespace not in self._pending_namespaces:
            self._pending_namespaces.add(namespace)
            self._stale = True
        return self

    def add_namespace_entry_points(self, namespaces: Iterable[str]) -> "ManifestBuilder":
        for namespace in namespaces:
            self.add_namespace_entry_point(namespace)
        return self

    def add_unit(self, unit: SourceUnit) -> "ManifestBuilder":
        """
        Add a candidate unit, kept only if something requires it.

        A runtime-base unit is made an entry point right away since it must
        never be pruned.
        """
        if unit in self._main_units or unit in self._limbo_units:
            return self
        self._register_new_unit(unit)
        if unit.is_runtime_base:
            self._main_units.add(unit)
        else:
            self._limbo_units.add(unit)
        self._stale = True
        return self

    def add_units(self, units: Iterable[SourceUnit]) -> "ManifestBuilder":
        for unit in units:
            self.add_unit(unit)
        return self

    def _register_new_unit(self, unit: SourceUnit) -> None:
        # Raises before anything is recorded, so a rejected unit leaves no trace
        if unit.is_runtime_base and unit.root_namespace != self._root_namespace:
            raise InvalidRuntimeBaseError(
                unit.id, unit.sorted_provides(), [], expected_root=self._root_namespace
            )
        self._registry.register(unit).unwrap()
        self._all_units.append(unit)

    # ------------------------------------------------------------------
    # Manifest
    # ------------------------------------------------------------------

    def to_manifest(self) -> List[SourceUnit]:
        """
        Build (or return the cached) ordered manifest.

        Raises:
            MissingEntryPointError: A namespace entry point is never provided.
            MissingDependencyError: A required namespace is never provided.
            CircularDependencyError: The kept units form a dependency cycle.
        """
        if not self._stale:
            if self._manifest is None:
                raise InvariantViolationError("Manifest is not stale but no manifest is cached")
            logger.debug("Returning cached manifest")
            return list(self._manifest)

        # Work on copies so a failure leaves the builder unchanged
        main_units = set(self._main_units)
        limbo_units = set(self._limbo_units)

        if self._keep_moochers:
            moochers = {unit for unit in limbo_units if unit.is_moocher}
            limbo_units -= moochers
            main_units |= moochers

        for namespace in sorted(self._pending_namespaces):
            provider = self._registry.resolve(namespace)
            if provider is None:
                raise MissingEntryPointError(namespace)
            if provider in limbo_units:
                limbo_units.remove(provider)
                main_units.add(provider)
            elif provider not in main_units:
                raise InvariantViolationError(
                    f"Unit '{provider.id}' provides '{namespace}' but is neither "
                    f"an entry point nor a candidate"
                )

        fail_on_missing = not self._ignore_missing_dependencies
        if self._keep_all_units:
            result = Ok(list(self._all_units))
        else:
            result = self._resolver.closure_of(main_units, fail_on_missing)
        if not self._keep_original_order:
            result = result.and_then(
                lambda working_set: DependencyGraph.build(working_set, self._registry, fail_on_missing)
            ).and_then(self._sorter.sort)
        manifest = result.unwrap()

        self._check_invariants(main_units, limbo_units)
        self._main_units = main_units
        self._limbo_units = limbo_units
        self._pending_namespaces.clear()

        self._manifest = manifest
        self._stale = False
        logger.debug(
            f"Built manifest with {len(manifest)} of {len(self._all_units)} units "
            f"({len(self._all_units) - len(manifest)} pruned)"
        )
        return list(manifest)

    def _check_invariants(self, main_units: Set[SourceUnit], limbo_units: Set[SourceUnit]) -> None:
        overlap = main_units & limbo_units
        if overlap:
            raise InvariantViolationError(
                f"Units tracked as both entry point and candidate: {sorted(u.id for u in overlap)}"
            )
        if len(main_units) + len(limbo_units) != len(self._all_units):
            raise InvariantViolationError("Tracked units do not match the units added")

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def all_units_in_original_order(self) -> List[SourceUnit]:
        """Every unit added, in insertion order, regardless of pruning."""
        return list(self._all_units)

    @property
    def registry(self) -> NamespaceRegistry:
        return self._registry

    @property
    def main_units(self) -> List[SourceUnit]:
        return [unit for unit in self._all_units if unit in self._main_units]

    @property
    def limbo_units(self) -> List[SourceUnit]:
        return [unit for unit in self._all_units if unit in self._limbo_units]

    @property
    def pending_namespace_entry_points(self) -> List[str]:
        return sorted(self._pending_namespaces)

    @property
    def is_stale(self) -> bool:
        return self._stale

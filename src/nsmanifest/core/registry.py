"""
Namespace Registry.

A pure ``namespace -> unit`` lookup table. It has no graph or ordering
semantics; the unit-to-unit dependency view lives in ``graph.py``.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Set

from .errors import DuplicateProviderError
from .result import Err, Ok, Result
from .types import SourceUnit

logger = logging.getLogger(__name__)


class NamespaceRegistry:
    """
    Maps every provided namespace to the single unit providing it.

    The registry only grows. Registration is all-or-nothing: a unit with a
    conflicting namespace leaves no trace, so nothing can later resolve to a
    rejected unit. It also remembers the order in which units were first
    registered, which is the canonical order used by the resolver.
    """

    def __init__(self):
        self._provide_to_unit: Dict[str, SourceUnit] = {}
        self._units: List[SourceUnit] = []
        self._known: Set[SourceUnit] = set()

    @classmethod
    def from_units(cls, units: Iterable[SourceUnit]) -> Result["NamespaceRegistry", DuplicateProviderError]:
        """Build a registry from a collection, stopping at the first conflict."""
        registry = cls()
        for unit in units:
            result = registry.register(unit)
            if result.is_err():
                return result
        return Ok(registry)

    def register(self, unit: SourceUnit) -> Result[SourceUnit, DuplicateProviderError]:
        """
        Register every namespace provided by ``unit``.

        All namespaces are checked before any is inserted. Re-registering the
        same unit is a no-op.

        Returns:
            Ok(unit), or Err(DuplicateProviderError) naming the namespace and
            both providers.
        """
        for namespace in unit.sorted_provides():
            existing = self._provide_to_unit.get(namespace)
            if existing is not None and existing != unit:
                return Err(DuplicateProviderError(namespace, existing, unit))
        for namespace in unit.provides:
            self._provide_to_unit[namespace] = unit
        if unit not in self._known:
            self._known.add(unit)
            self._units.append(unit)
        logger.debug(f"Registered {unit.id} providing {unit.sorted_provides()}")
        return Ok(unit)

    def register_all(self, units: Iterable[SourceUnit]) -> List[DuplicateProviderError]:
        """Register a batch and collect every conflict instead of stopping."""
        conflicts = []
        for unit in units:
            result = self.register(unit)
            if result.is_err():
                conflicts.append(result.error)
        return conflicts

    def resolve(self, namespace: str) -> Optional[SourceUnit]:
        """Return the unit providing ``namespace``, or None."""
        return self._provide_to_unit.get(namespace)

    def __contains__(self, namespace: str) -> bool:
        return namespace in self._provide_to_unit

    def __len__(self) -> int:
        return len(self._provide_to_unit)

    def __iter__(self) -> Iterator[str]:
        return iter(self._provide_to_unit)

    @property
    def namespaces(self) -> List[str]:
        return sorted(self._provide_to_unit)

    @property
    def units(self) -> List[SourceUnit]:
        """Registered units in first-registration order."""
        return list(self._units)


"""
Dependency Resolver.

Computes the transitive closure of required units starting from the program
entry points. The closure is returned in the registry's registration order,
not in traversal order, so the sort stage always sees the same sequence.
"""

import logging
from collections import deque
from typing import Dict, Iterable, List, Set

from .errors import MissingDependencyError
from .registry import NamespaceRegistry
from .result import Err, Ok, Result
from .types import SourceUnit

logger = logging.getLogger(__name__)


class DependencyResolver:
    """
    Breadth-first closure over ``requires -> provider`` edges.

    Example:
        ```python
        resolver = DependencyResolver(registry)
        closure = resolver.closure_of([main]).unwrap()
        ```
    """

    def __init__(self, registry: NamespaceRegistry):
        self.registry = registry

    def closure_of(
        self,
        entry_units: Iterable[SourceUnit],
        fail_on_missing: bool = True,
    ) -> Result[List[SourceUnit], MissingDependencyError]:
        """
        Collect every unit reachable from ``entry_units``.

        Args:
            entry_units: Units that are always included.
            fail_on_missing: If True, an unprovided namespace yields
                Err(MissingDependencyError). If False, the edge is dropped.

        Returns:
            Ok(list of units in registration order) or Err. Entry units the
            registry has never seen are appended in traversal order.
        """
        ordered_units = self.registry.units
        index: Dict[SourceUnit, int] = {unit: i for i, unit in enumerate(ordered_units)}
        seeds = sorted(set(entry_units), key=lambda u: index.get(u, len(index)))

        visited: Set[SourceUnit] = set()
        traversal: List[SourceUnit] = []
        queue = deque(seeds)

        while queue:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)
            traversal.append(current)

            for namespace in current.sorted_requires():
                dep = self.registry.resolve(namespace)
                if dep is None:
                    if fail_on_missing:
                        return Err(MissingDependencyError(namespace, current))
                    logger.warning(
                        f"Ignoring missing namespace '{namespace}' required by {current.id}"
                    )
                    continue
                # covers self-requirement too: current is already visited
                if dep in visited:
                    continue
                queue.append(dep)

        closure = [unit for unit in ordered_units if unit in visited]
        if len(closure) < len(visited):
            known = set(closure)
            closure.extend(unit for unit in traversal if unit not in known)
        return Ok(closure)

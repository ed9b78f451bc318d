"""
Unit dependency graph backed by rustworkx.

This is the derived ``unit -> direct dependency units`` view, computed on
demand from each unit's ``requires`` and the NamespaceRegistry. Edges point
from a unit to the unit it depends on and carry the namespace that created
them.

Node indices are assigned in insertion order and nodes are never removed, so
a unit's node index doubles as its original-order stability key.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

import rustworkx as rx

from .errors import MissingDependencyError
from .registry import NamespaceRegistry
from .result import Err, Ok, Result
from .types import SourceUnit

logger = logging.getLogger(__name__)


class DependencyGraph:
    """
    Direct-dependency multimap restricted to a working set of units.

    Self-requirements never become edges, and a unit requiring several
    namespaces of the same provider gets a single edge.
    """

    def __init__(self):
        self._graph = rx.PyDiGraph(multigraph=False)
        self._unit_to_idx: Dict[SourceUnit, int] = {}

    @classmethod
    def build(
        cls,
        units: Iterable[SourceUnit],
        registry: NamespaceRegistry,
        fail_on_missing: bool = True,
    ) -> Result["DependencyGraph", MissingDependencyError]:
        """
        Build the graph for ``units`` (in original order).

        Providers outside ``units`` are ignored. An unprovided namespace
        yields Err(MissingDependencyError) unless ``fail_on_missing`` is False.
        """
        graph = cls()
        units = list(units)
        for unit in units:
            graph.add_unit(unit)

        for unit in units:
            for namespace in unit.sorted_requires():
                dep = registry.resolve(namespace)
                if dep is None:
                    if fail_on_missing:
                        return Err(MissingDependencyError(namespace, unit))
                    logger.warning(
                        f"Ignoring missing namespace '{namespace}' required by {unit.id}"
                    )
                    continue
                if dep == unit or dep not in graph:
                    continue
                graph.add_dependency(unit, dep, namespace)
        return Ok(graph)

    def add_unit(self, unit: SourceUnit) -> int:
        """Add a unit node, returning its index."""
        if unit in self._unit_to_idx:
            return self._unit_to_idx[unit]
        idx = self._graph.add_node(unit)
        self._unit_to_idx[unit] = idx
        return idx

    def add_dependency(self, unit: SourceUnit, dependency: SourceUnit, namespace: str) -> None:
        """Record that ``unit`` requires ``namespace`` provided by ``dependency``."""
        if unit == dependency:
            return
        u_idx = self._unit_to_idx[unit]
        v_idx = self._unit_to_idx[dependency]
        # Keep the first namespace seen for an edge
        if not self._graph.has_edge(u_idx, v_idx):
            self._graph.add_edge(u_idx, v_idx, namespace)

    def index_of(self, unit: SourceUnit) -> int:
        return self._unit_to_idx[unit]

    def unit_at(self, idx: int) -> SourceUnit:
        return self._graph[idx]

    @property
    def units(self) -> List[SourceUnit]:
        """All units in original order."""
        return [self._graph[idx] for idx in sorted(self._graph.node_indices())]

    def dependency_indices(self, idx: int) -> List[int]:
        """Direct dependency indices of node ``idx``, ascending."""
        return sorted(self._graph.successor_indices(idx))

    def dependent_indices(self, idx: int) -> List[int]:
        """Indices of nodes that directly depend on ``idx``, ascending."""
        return sorted(self._graph.predecessor_indices(idx))

    def dependencies_of(self, unit: SourceUnit) -> List[SourceUnit]:
        return [self._graph[i] for i in self.dependency_indices(self._unit_to_idx[unit])]

    def dependents_of(self, unit: SourceUnit) -> List[SourceUnit]:
        return [self._graph[i] for i in self.dependent_indices(self._unit_to_idx[unit])]

    def transitive_dependencies(self, unit: SourceUnit) -> Set[SourceUnit]:
        """Every unit ``unit`` depends on, directly or not."""
        idx = self._unit_to_idx[unit]
        return {self._graph[i] for i in rx.descendants(self._graph, idx)}

    def edge_namespace(self, unit: SourceUnit, dependency: SourceUnit) -> Optional[str]:
        """The namespace through which ``unit`` requires ``dependency``."""
        u_idx = self._unit_to_idx[unit]
        v_idx = self._unit_to_idx[dependency]
        if not self._graph.has_edge(u_idx, v_idx):
            return None
        return self._graph.get_edge_data(u_idx, v_idx)

    def is_acyclic(self) -> bool:
        return rx.is_directed_acyclic_graph(self._graph)

    def __contains__(self, unit: SourceUnit) -> bool:
        return unit in self._unit_to_idx

    def __len__(self) -> int:
        return self._graph.num_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.num_edges()

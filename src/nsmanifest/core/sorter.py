"""
Stable topological sort of a unit dependency graph.

Two strategies are available; both place every unit after all of its
dependencies and break ties by original input index:

- ``SortStrategy.DEPTH_FIRST`` (canonical): visit units in original order and
  emit each one after its dependencies (post-order). The walk is iterative.
- ``SortStrategy.KAHN``: repeatedly emit the lowest-index unit whose
  dependencies have all been emitted.

On acyclic graphs with several valid stable orders the two strategies may
disagree; the depth-first result is the one ``ManifestBuilder`` uses unless
configured otherwise.
"""

import heapq
import logging
from typing import Dict, List

from .errors import CircularDependencyError, InvariantViolationError
from .graph import DependencyGraph
from .result import Err, Ok, Result
from .types import SortStrategy, SourceUnit

logger = logging.getLogger(__name__)

_UNVISITED = 0
_IN_PROGRESS = 1
_DONE = 2


class TopologicalSorter:
    """Orders a closed set of units so that dependencies come first."""

    def __init__(self, strategy: SortStrategy = SortStrategy.DEPTH_FIRST):
        self.strategy = SortStrategy(strategy)

    def sort(self, graph: DependencyGraph) -> Result[List[SourceUnit], CircularDependencyError]:
        if self.strategy == SortStrategy.KAHN:
            return self._sort_kahn(graph)
        return self._sort_depth_first(graph)

    def _sort_kahn(self, graph: DependencyGraph) -> Result[List[SourceUnit], CircularDependencyError]:
        n = len(graph)
        pending: Dict[int, int] = {}
        ready: List[int] = []
        for idx in range(n):
            pending[idx] = len(graph.dependency_indices(idx))
            if pending[idx] == 0:
                ready.append(idx)
        heapq.heapify(ready)

        order: List[int] = []
        while ready:
            idx = heapq.heappop(ready)
            order.append(idx)
            for waiting in graph.dependent_indices(idx):
                pending[waiting] -= 1
                if pending[waiting] == 0:
                    heapq.heappush(ready, waiting)

        # The graph has a cycle iff some units were never released
        if len(order) < n:
            emitted = set(order)
            remainder = [idx for idx in range(n) if idx not in emitted]
            cycle = find_cycle(graph, remainder)
            return Err(cycle_error(graph, cycle))

        return Ok([graph.unit_at(idx) for idx in order])

    def _sort_depth_first(self, graph: DependencyGraph) -> Result[List[SourceUnit], CircularDependencyError]:
        n = len(graph)
        state = [_UNVISITED] * n
        order: List[int] = []

        for root in range(n):
            if state[root] != _UNVISITED:
                continue
            state[root] = _IN_PROGRESS
            # Each frame: (node, its dependencies, position of next one to visit)
            stack = [(root, graph.dependency_indices(root), 0)]
            while stack:
                idx, deps, pos = stack[-1]
                if pos == len(deps):
                    stack.pop()
                    state[idx] = _DONE
                    order.append(idx)
                    continue
                stack[-1] = (idx, deps, pos + 1)
                dep = deps[pos]
                if state[dep] == _UNVISITED:
                    state[dep] = _IN_PROGRESS
                    stack.append((dep, graph.dependency_indices(dep), 0))
                elif state[dep] == _IN_PROGRESS:
                    trail = [frame[0] for frame in stack]
                    cycle = trail[trail.index(dep):]
                    return Err(cycle_error(graph, cycle))

        return Ok([graph.unit_at(idx) for idx in order])


def find_cycle(graph: DependencyGraph, remainder: List[int]) -> List[int]:
    """
    Find a cycle inside the unsorted remainder of a Kahn sort.

    Every unit left in the remainder has a dependency that is also in the
    remainder, so walking ``requires -> provider`` edges inside it must
    eventually revisit a unit. Returns node indices in dependency direction:
    each one depends on the next and the last depends on the first.
    """
    inside = set(remainder)
    position: Dict[int, int] = {}
    trail: List[int] = []
    current = remainder[0]
    while current not in position:
        position[current] = len(trail)
        trail.append(current)
        candidates = [dep for dep in graph.dependency_indices(current) if dep in inside]
        if not candidates:
            raise InvariantViolationError(f"no dependency of {graph.unit_at(current).id} left unsorted")
        current = candidates[0]
    return trail[position[current]:]


def cycle_error(graph: DependencyGraph, cycle: List[int]) -> CircularDependencyError:
    """
    Render a cycle as the namespaces through which each unit is required.

    For units ``[X, Y]`` where X requires ``y`` and Y requires ``x`` the path
    is ``x -> y -> x``.
    """
    units = [graph.unit_at(idx) for idx in cycle]
    edges = []
    for i, unit in enumerate(units):
        nxt = units[(i + 1) % len(units)]
        edges.append(graph.edge_namespace(unit, nxt) or nxt.representative_namespace())
    namespaces = [edges[-1]] + edges[:-1]
    namespaces.append(namespaces[0])
    logger.debug(f"Cycle found through {[u.id for u in units]}")
    return CircularDependencyError(namespaces, units)

"""Unit tests for the unit DependencyGraph."""

from nsmanifest.core.errors import MissingDependencyError
from nsmanifest.core.graph import DependencyGraph
from nsmanifest.core.registry import NamespaceRegistry
from nsmanifest.core.types import SourceUnit


def _unit(uid, provides=(), requires=()):
    return SourceUnit(id=uid, provides=provides, requires=requires)


def _build(units, working_set=None, fail_on_missing=True):
    registry = NamespaceRegistry.from_units(units).unwrap()
    return DependencyGraph.build(working_set or units, registry, fail_on_missing)


class TestBuild:
    def test_direct_dependencies(self):
        a = _unit("a.js", provides=["a"])
        b = _unit("b.js", provides=["b"], requires=["a"])
        c = _unit("c.js", provides=["c"], requires=["a", "b"])

        graph = _build([a, b, c]).unwrap()

        assert len(graph) == 3
        assert graph.units == [a, b, c]
        assert graph.dependencies_of(c) == [a, b]
        assert graph.dependents_of(a) == [b, c]
        assert graph.index_of(b) == 1

    def test_self_edges_excluded(self):
        a = _unit("a.js", provides=["a"], requires=["a"])
        graph = _build([a]).unwrap()
        assert graph.dependencies_of(a) == []
        assert graph.edge_count == 0

    def test_one_edge_per_provider(self):
        lib = _unit("lib.js", provides=["lib.x", "lib.y"])
        app = _unit("app.js", requires=["lib.x", "lib.y"])

        graph = _build([lib, app]).unwrap()

        assert graph.edge_count == 1
        assert graph.edge_namespace(app, lib) == "lib.x"
        assert graph.edge_namespace(lib, app) is None

    def test_providers_outside_working_set_ignored(self):
        a = _unit("a.js", provides=["a"])
        b = _unit("b.js", provides=["b"], requires=["a"])

        graph = _build([a, b], working_set=[b]).unwrap()

        assert a not in graph
        assert graph.dependencies_of(b) == []

    def test_missing_dependency(self):
        a = _unit("a.js", provides=["a"], requires=["nope"])

        result = _build([a])

        assert result.is_err()
        assert isinstance(result.error, MissingDependencyError)
        assert result.error.namespace == "nope"

    def test_missing_dependency_tolerated(self):
        a = _unit("a.js", provides=["a"], requires=["nope"])
        graph = _build([a], fail_on_missing=False).unwrap()
        assert graph.dependencies_of(a) == []


class TestQueries:
    def test_transitive_dependencies(self):
        a = _unit("a.js", provides=["a"])
        b = _unit("b.js", provides=["b"], requires=["a"])
        c = _unit("c.js", provides=["c"], requires=["b"])
        d = _unit("d.js", provides=["d"])

        graph = _build([a, b, c, d]).unwrap()

        assert graph.transitive_dependencies(c) == {a, b}
        assert graph.transitive_dependencies(a) == set()

    def test_is_acyclic(self):
        x = _unit("x.js", provides=["x"], requires=["y"])
        y = _unit("y.js", provides=["y"], requires=["x"])
        z = _unit("z.js", provides=["z"])

        assert not _build([x, y]).unwrap().is_acyclic()
        assert _build([z]).unwrap().is_acyclic()

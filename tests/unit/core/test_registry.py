"""Unit tests for NamespaceRegistry."""

from nsmanifest.core.errors import DuplicateProviderError
from nsmanifest.core.registry import NamespaceRegistry
from nsmanifest.core.types import SourceUnit


def _unit(uid, provides=(), requires=()):
    return SourceUnit(id=uid, provides=provides, requires=requires)


class TestRegister:
    def test_register_and_resolve(self):
        registry = NamespaceRegistry()
        unit = _unit("a.js", provides=["a", "a.util"])

        result = registry.register(unit)

        assert result.is_ok()
        assert result.unwrap() is unit
        assert registry.resolve("a") is unit
        assert registry.resolve("a.util") is unit
        assert registry.resolve("b") is None
        assert "a" in registry
        assert len(registry) == 2
        assert registry.namespaces == ["a", "a.util"]

    def test_moocher_registers_nothing(self):
        registry = NamespaceRegistry()
        assert registry.register(_unit("m.js", requires=["a"])).is_ok()
        assert len(registry) == 0

    def test_reregistering_same_unit_is_noop(self):
        registry = NamespaceRegistry()
        unit = _unit("a.js", provides=["a"])
        registry.register(unit)
        assert registry.register(unit).is_ok()

    def test_duplicate_provider(self):
        registry = NamespaceRegistry()
        first = _unit("one.js", provides=["dup"])
        second = _unit("two.js", provides=["dup"])
        registry.register(first)

        result = registry.register(second)

        assert result.is_err()
        error = result.error
        assert isinstance(error, DuplicateProviderError)
        assert error.namespace == "dup"
        assert error.units == [first, second]
        assert "one.js" in str(error) and "two.js" in str(error)
        # First provider wins
        assert registry.resolve("dup") is first

    def test_failed_register_leaves_no_trace(self):
        registry = NamespaceRegistry()
        first = _unit("one.js", provides=["dup"])
        registry.register(first)
        second = _unit("two.js", provides=["a", "dup"])

        assert registry.register(second).is_err()
        assert registry.resolve("a") is None
        assert "a" not in registry
        assert registry.units == [first]

    def test_units_in_registration_order(self):
        registry = NamespaceRegistry()
        b = _unit("b.js", provides=["b"])
        moocher = _unit("m.js", requires=["b"])
        a = _unit("a.js", provides=["a"])
        for unit in (b, moocher, a, b):
            registry.register(unit)

        assert registry.units == [b, moocher, a]


class TestBulk:
    def test_from_units(self):
        a = _unit("a.js", provides=["a"])
        b = _unit("b.js", provides=["b"])
        registry = NamespaceRegistry.from_units([a, b]).unwrap()
        assert registry.resolve("b") is b

    def test_from_units_stops_at_conflict(self):
        result = NamespaceRegistry.from_units([
            _unit("a.js", provides=["x"]),
            _unit("b.js", provides=["x"]),
        ])
        assert result.is_err()
        assert result.error.namespace == "x"

    def test_register_all_collects_every_conflict(self):
        registry = NamespaceRegistry()
        conflicts = registry.register_all([
            _unit("a.js", provides=["x"]),
            _unit("b.js", provides=["x"]),
            _unit("c.js", provides=["y"]),
            _unit("d.js", provides=["y"]),
            _unit("e.js", provides=["z"]),
        ])
        assert [c.namespace for c in conflicts] == ["x", "y"]
        assert registry.resolve("z").id == "e.js"

"""Unit tests for SourceUnit."""

import pytest
from pydantic import ValidationError

from nsmanifest.core.errors import InvalidRuntimeBaseError
from nsmanifest.core.types import DEFAULT_ROOT_NAMESPACE, SourceUnit


class TestSourceUnit:
    def test_declarations_are_frozensets(self):
        unit = SourceUnit(id="a.js", provides=["a", "a.b"], requires=["root"])
        assert unit.provides == frozenset({"a", "a.b"})
        assert unit.requires == frozenset({"root"})
        assert unit.sorted_provides() == ["a", "a.b"]

    def test_moocher(self):
        assert SourceUnit(id="m.js", requires=["a"]).is_moocher
        assert not SourceUnit(id="a.js", provides=["a"]).is_moocher

    def test_representative_namespace(self):
        assert SourceUnit(id="a.js", provides=["z", "b"]).representative_namespace() == "b"
        assert SourceUnit(id="m.js").representative_namespace() == "m.js"

    def test_is_immutable(self):
        unit = SourceUnit(id="a.js", provides=["a"])
        with pytest.raises(ValidationError):
            unit.id = "b.js"

    def test_str_is_id(self):
        assert str(SourceUnit(id="/src/a.js")) == "/src/a.js"


class TestIdentity:
    def test_equal_units_hash_equal(self):
        a = SourceUnit(id="a.js", content="x", provides=["a"])
        b = SourceUnit(id="a.js", content="x", provides=["a"])
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_same_content_different_id_is_distinct(self):
        a = SourceUnit(id="one.js", content="same")
        b = SourceUnit(id="two.js", content="same")
        assert a != b

    def test_same_id_different_content_is_distinct(self):
        a = SourceUnit(id="a.js", content="v1")
        b = SourceUnit(id="a.js", content="v2")
        assert a != b

    def test_not_equal_to_other_types(self):
        assert SourceUnit(id="a.js") != "a.js"


class TestRuntimeBase:
    def test_implicitly_provides_root(self):
        base = SourceUnit(id="base.js", is_runtime_base=True)
        assert base.provides == frozenset({DEFAULT_ROOT_NAMESPACE})
        assert base.requires == frozenset()
        assert not base.is_moocher

    def test_custom_root_namespace(self):
        base = SourceUnit(id="base.js", is_runtime_base=True, root_namespace="goog")
        assert base.provides == frozenset({"goog"})

    def test_explicit_provides_rejected(self):
        with pytest.raises(InvalidRuntimeBaseError) as exc_info:
            SourceUnit(id="base.js", is_runtime_base=True, provides=["x"])
        assert exc_info.value.unit_id == "base.js"
        assert exc_info.value.provides == ["x"]

    def test_explicit_requires_rejected(self):
        with pytest.raises(InvalidRuntimeBaseError) as exc_info:
            SourceUnit(id="base.js", is_runtime_base=True, requires=["y"])
        assert exc_info.value.requires == ["y"]

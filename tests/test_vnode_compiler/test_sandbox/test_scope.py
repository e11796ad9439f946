"""Tests for render scopes."""

from types import SimpleNamespace

import pytest

from vnode_compiler.sandbox import RESERVED_KEY, Scope, as_scope


class TestScope:
    """Test scope lookups and inheritance."""

    def test_own_values_and_kwargs(self) -> None:
        """Test values given positionally and as keywords."""
        scope = Scope({"a": 1}, b=2)

        assert scope.lookup("a") == 1
        assert scope["b"] == 2
        assert sorted(scope) == ["a", "b"]

    def test_child_inherits_and_shadows(self) -> None:
        """Test parent chains."""
        base = Scope({"title": "Inbox", "count": 0})
        child = base.child(count=3)

        assert child.lookup("title") == "Inbox"
        assert child.lookup("count") == 3
        assert base.lookup("count") == 0

    def test_missing_name(self) -> None:
        """Test lookups of undefined names."""
        scope = Scope()

        with pytest.raises(KeyError):
            scope.lookup("missing")
        assert scope.get("missing", "fallback") == "fallback"
        assert "missing" not in scope

    def test_object_parent_uses_attributes(self) -> None:
        """Test objects as the last layer."""
        class User:
            name = "Ada"

            def greet(self) -> str:
                return f"Hello {self.name}"

        scope = Scope(parent=User())

        assert scope.lookup("name") == "Ada"
        assert scope.lookup("greet")() == "Hello Ada"

    def test_mapping_parent(self) -> None:
        """Test plain mappings as the last layer."""
        scope = Scope({"a": 1}, parent={"b": 2})
        assert scope.layers() == ({"a": 1}, {"b": 2})

    def test_layers_nearest_first(self) -> None:
        """Test layer ordering across several scopes."""
        root = Scope({"x": 1}, parent=SimpleNamespace(y=2))
        leaf = root.child({"z": 3})

        layers = leaf.layers()
        assert layers[0] == {"z": 3}
        assert layers[1] == {"x": 1}
        assert layers[2].y == 2

    def test_reserved_key_is_never_resolved(self) -> None:
        """Test that the resolver parameter name cannot be shadowed by data."""
        scope = Scope({RESERVED_KEY: "data"})
        assert scope.get(RESERVED_KEY) is None

    def test_scope_ids_are_unique(self) -> None:
        """Test stable identifiers for cache keys."""
        assert Scope().scope_id != Scope().scope_id

    def test_close_runs_finalizers_once(self) -> None:
        """Test releasing registered finalizers."""
        calls = []
        scope = Scope()
        scope.on_close(lambda: calls.append("closed"))  # type: ignore[arg-type]

        scope.close()
        scope.close()

        assert calls == ["closed"]

    def test_context_manager_closes(self) -> None:
        """Test the with-statement form."""
        calls = []
        with Scope() as scope:
            scope.on_close(lambda: calls.append("closed"))  # type: ignore[arg-type]
        assert calls == ["closed"]


class TestAsScope:
    """Test scope coercion."""

    def test_scope_passes_through(self) -> None:
        """Test that scopes are returned unchanged."""
        scope = Scope()
        assert as_scope(scope) is scope

    def test_data_is_wrapped(self) -> None:
        """Test wrapping plain data."""
        scope = as_scope({"a": 1})
        assert scope.lookup("a") == 1

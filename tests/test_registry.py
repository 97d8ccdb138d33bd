"""Tests for the constraint registry."""

from threading import Thread

import pytest

from ruleknobs.constraints import BUILTIN_CONSTRAINTS, required
from ruleknobs.exceptions import (
    ConfigurationError,
    ConstraintRegistrationError,
    InvalidArgumentError,
    NotFoundError,
    UnknownConstraintError,
)
from ruleknobs.registry import ConstraintRegistry


def even(value):
    return value is None or value % 2 == 0


class TestConstraintRegistry:
    """Test ConstraintRegistry functionality."""

    def test_with_builtins(self):
        """Test that built-ins are present and protected."""
        registry = ConstraintRegistry.with_builtins()

        assert len(registry) == len(BUILTIN_CONSTRAINTS)
        assert registry.names() == list(BUILTIN_CONSTRAINTS)
        assert registry.lookup("required") is required
        assert registry.is_builtin("email")
        assert "oneOf" in registry

    def test_empty_registry(self):
        registry = ConstraintRegistry("empty")
        assert registry.name == "empty"
        assert len(registry) == 0
        assert not registry.has("required")

    def test_lookup_unknown_raises(self):
        """Test lookup of an unregistered name."""
        registry = ConstraintRegistry.with_builtins()

        with pytest.raises(UnknownConstraintError) as exc_info:
            registry.lookup("isbn")

        error = exc_info.value
        assert error.name == "isbn"
        assert "Unknown constraint: isbn" in str(error)
        assert "required" in error.context["available"]

    def test_unknown_constraint_is_config_and_not_found_error(self):
        registry = ConstraintRegistry.with_builtins()

        with pytest.raises(ConfigurationError):
            registry.lookup("nope")
        with pytest.raises(NotFoundError):
            registry.lookup("nope")

    def test_register_custom(self):
        """Test registering an additional constraint."""
        registry = ConstraintRegistry.with_builtins()
        registry.register("even", even)

        assert registry.has("even")
        assert not registry.is_builtin("even")
        assert registry.lookup("even")(4) is True
        assert registry.lookup("even")(3) is False
        assert registry.names()[-1] == "even"

    def test_register_over_builtin_rejected(self):
        """Test that built-in names cannot be silently replaced."""
        registry = ConstraintRegistry.with_builtins()

        with pytest.raises(ConstraintRegistrationError) as exc_info:
            registry.register("required", even)

        assert exc_info.value.context["builtin"] is True
        assert registry.lookup("required") is required

    def test_register_over_builtin_with_override(self):
        registry = ConstraintRegistry.with_builtins()
        registry.register("required", even, override=True)

        assert registry.lookup("required") is even
        assert registry.is_builtin("required")

    def test_register_duplicate_custom_rejected(self):
        registry = ConstraintRegistry.with_builtins()
        registry.register("even", even)

        with pytest.raises(ConstraintRegistrationError) as exc_info:
            registry.register("even", lambda value: True)

        assert "already registered" in str(exc_info.value)
        assert exc_info.value.context["builtin"] is False

    @pytest.mark.parametrize("name", ["", None, 3])
    def test_register_invalid_name(self, name):
        registry = ConstraintRegistry()
        with pytest.raises(InvalidArgumentError):
            registry.register(name, even)

    def test_register_non_callable(self):
        registry = ConstraintRegistry()
        with pytest.raises(InvalidArgumentError) as exc_info:
            registry.register("bad", "not callable")

        assert exc_info.value.context["type"] == "str"

    def test_registries_are_independent(self):
        first = ConstraintRegistry.with_builtins()
        second = ConstraintRegistry.with_builtins()
        first.register("even", even)

        assert "even" in first
        assert "even" not in second

    def test_iteration(self):
        registry = ConstraintRegistry.with_builtins()
        assert list(registry) == registry.names()

    def test_thread_safety(self):
        """Test concurrent registrations."""
        registry = ConstraintRegistry()

        def register_items(start):
            for i in range(start, start + 50):
                registry.register(f"c{i}", even)

        threads = [Thread(target=register_items, args=(i * 50,)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(registry) == 200

"""Validator entry point.

``Validator`` owns a constraint registry and is the construction surface for
rules and rule sets:

    ```python
    from ruleknobs import Validator

    validator = Validator()

    # A rule for a single value
    age = validator.rule("You must be an adult").required().min(18)

    # A rule set for whole objects
    signup = validator({
        "email": validator("Invalid email").required().email(),
        "age": age,
    })
    await signup.validate({"email": "jane@example.com", "age": 30})
    ```

Calling the validator with a string creates a rule; calling it with a
mapping creates a rule set. Any other argument raises
``InvalidArgumentError``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .constraints import Constraint
from .exceptions import InvalidArgumentError
from .registry import ConstraintRegistry
from .rule_set import RuleSet
from .rules import Rule


class Validator:
    """Factory for rules and rule sets bound to one constraint registry.

    Args:
        registry: Constraint registry; a registry with the built-in
            constraints is created when omitted
    """

    def __init__(self, registry: ConstraintRegistry | None = None):
        self._registry = registry if registry is not None else ConstraintRegistry.with_builtins()

    @property
    def registry(self) -> ConstraintRegistry:
        return self._registry

    def register(self, name: str, predicate: Constraint, override: bool = False) -> None:
        """Register an additional constraint, see ``ConstraintRegistry.register``."""
        self._registry.register(name, predicate, override=override)

    def rule(self, message: str) -> Rule:
        """Create an empty rule reporting ``message`` on failure."""
        return Rule(message, self._registry)

    def rule_set(self, fields: Mapping[str, Any]) -> RuleSet:
        """Create a rule set over a mapping of path expressions to rules."""
        return RuleSet(fields)

    def create(self, arg: str | Mapping[str, Any]) -> Rule | RuleSet:
        """Create a rule from a message or a rule set from a field mapping.

        Raises:
            InvalidArgumentError: If arg is neither a string nor a mapping
        """
        if isinstance(arg, str):
            return self.rule(arg)
        if isinstance(arg, Mapping):
            return self.rule_set(arg)
        raise InvalidArgumentError(
            "Validator expects a message string or a mapping of field rules",
            context={"type": type(arg).__name__},
        )

    def __call__(self, arg: str | Mapping[str, Any]) -> Rule | RuleSet:
        return self.create(arg)

    def __repr__(self) -> str:
        return f"Validator(registry={self._registry!r})"


__all__ = ["Validator"]

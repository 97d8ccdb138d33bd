"""Constraint registry.

The registry maps constraint names to predicates. It is an explicit object:
build one at application start (usually with ``with_builtins()``) and pass
it to the ``Validator``; rules resolve their constraint names against it
while they are being built.

Example:
    ```python
    from ruleknobs.registry import ConstraintRegistry

    registry = ConstraintRegistry.with_builtins()
    registry.register("even", lambda value: value is None or value % 2 == 0)
    registry.lookup("even")(4)
    # True
    ```
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterator, List, Mapping

from .constraints import BUILTIN_CONSTRAINTS, Constraint
from .exceptions import (
    ConstraintRegistrationError,
    InvalidArgumentError,
    UnknownConstraintError,
)

logger = logging.getLogger(__name__)


class ConstraintRegistry:
    """Thread-safe mapping from constraint name to predicate.

    Args:
        name: Registry name (for logging/debugging)
        builtins: Constraints that are protected from accidental overwrite
    """

    def __init__(
        self,
        name: str = "constraints",
        builtins: Mapping[str, Constraint] | None = None,
    ):
        self._name = name
        self._lock = threading.RLock()
        self._builtin_names = frozenset(builtins or ())
        self._items: Dict[str, Constraint] = dict(builtins or {})

    @classmethod
    def with_builtins(cls, name: str = "constraints") -> ConstraintRegistry:
        """Create a registry holding every built-in constraint."""
        return cls(name, builtins=BUILTIN_CONSTRAINTS)

    @property
    def name(self) -> str:
        return self._name

    def register(self, name: str, predicate: Constraint, override: bool = False) -> None:
        """Register a constraint predicate under ``name``.

        Args:
            name: Constraint name used by ``Rule.apply`` and reported in errors
            predicate: Callable ``(value, *options) -> bool``; should treat
                ``None`` as satisfied unless it checks presence
            override: Allow replacing an existing (built-in or custom) name

        Raises:
            InvalidArgumentError: If name is empty or predicate is not callable
            ConstraintRegistrationError: If name is taken and override is False
        """
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError(
                "Constraint name must be a non-empty string",
                context={"name": name, "registry": self._name},
            )
        if not callable(predicate):
            raise InvalidArgumentError(
                f"Constraint '{name}' must be callable",
                context={"name": name, "type": type(predicate).__name__},
            )

        with self._lock:
            if name in self._items and not override:
                kind = "built-in" if name in self._builtin_names else "custom"
                raise ConstraintRegistrationError(
                    f"Constraint '{name}' is already registered ({kind}) in {self._name}",
                    context={"name": name, "registry": self._name, "builtin": kind == "built-in"},
                )
            if name in self._items:
                logger.debug(f"Overriding constraint '{name}' in {self._name}")
            self._items[name] = predicate

        logger.debug(f"Registered constraint '{name}' in {self._name}")

    def lookup(self, name: str) -> Constraint:
        """Get the predicate registered under ``name``.

        Raises:
            UnknownConstraintError: If name is not registered
        """
        with self._lock:
            try:
                return self._items[name]
            except KeyError:
                raise UnknownConstraintError(name, available=sorted(self._items)) from None

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._items

    def is_builtin(self, name: str) -> bool:
        """True when ``name`` was part of the registry's initial built-ins."""
        return name in self._builtin_names

    def names(self) -> List[str]:
        """List registered names in registration order."""
        with self._lock:
            return list(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __repr__(self) -> str:
        return f"ConstraintRegistry(name={self._name!r}, constraints={len(self)})"


__all__ = ["ConstraintRegistry"]

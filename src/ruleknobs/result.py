"""Validation result types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RuleFailure:
    """First failing step of a rule: the constraint name and the options it
    was evaluated with (callable options already resolved)."""

    check: str
    options: tuple[Any, ...] = ()


@dataclass(frozen=True)
class FieldError:
    """Description of a failed constraint.

    For single-rule validation ``field`` is ``None``; inside a rule set it is
    the path expression the value was read from.
    """

    check: str
    value: Any
    message: str
    options: tuple[Any, ...] = ()
    field: str | None = None

    @classmethod
    def from_failure(
        cls,
        failure: RuleFailure,
        value: Any,
        message: str,
        field: str | None = None,
    ) -> FieldError:
        return cls(
            check=failure.check,
            value=value,
            message=message,
            options=failure.options,
            field=field,
        )

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict payload.

        Single-rule errors render as ``{message, check, options, value}``;
        rule-set errors also carry ``field``.
        """
        if self.field is None:
            return {
                "message": self.message,
                "check": self.check,
                "options": list(self.options),
                "value": self.value,
            }
        return {
            "check": self.check,
            "field": self.field,
            "value": self.value,
            "message": self.message,
            "options": list(self.options),
        }


def error_tree_to_dict(tree: Any) -> Any:
    """Convert an error tree into plain dicts and lists.

    FieldError leaves become dicts; containers are copied recursively.
    """
    if isinstance(tree, FieldError):
        return tree.to_dict()
    if isinstance(tree, dict):
        return {key: error_tree_to_dict(value) for key, value in tree.items()}
    if isinstance(tree, list):
        return [error_tree_to_dict(item) for item in tree]
    return tree


def iter_field_errors(tree: Any) -> list[FieldError]:
    """Collect every FieldError in an error tree, depth first."""
    found: list[FieldError] = []
    if isinstance(tree, FieldError):
        found.append(tree)
    elif isinstance(tree, dict):
        for value in tree.values():
            found.extend(iter_field_errors(value))
    elif isinstance(tree, list):
        for item in tree:
            found.extend(iter_field_errors(item))
    return found


__all__ = ["RuleFailure", "FieldError", "error_tree_to_dict", "iter_field_errors"]

"""Rule sets: validate whole objects field by field.

A ``RuleSet`` maps path expressions to one or more rules. Validation reads
each path from the object, runs that field's rules in order and records the
first failure in an error tree shaped like the declared paths:

    ```python
    validator = Validator()
    rules = validator.rule_set({
        "email": validator.rule("bad email").email(),
        "address.city": validator.rule("city required").required(),
    })

    rules.check({"email": "nope", "address": {}})
    # {'email': FieldError(check='email', ...),
    #  'address': {'city': FieldError(check='required', ...)}}
    ```

Every field is evaluated; only the rules within a field short-circuit.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Dict, List

from .exceptions import InvalidArgumentError, RuleSetViolation, UnresolvablePathError
from .paths import FieldPath
from .result import FieldError, iter_field_errors
from .rules import Rule

logger = logging.getLogger(__name__)


def _normalize_rules(path: str, rules: Any) -> tuple[Rule, ...]:
    if isinstance(rules, Rule):
        return (rules,)
    if isinstance(rules, Sequence) and not isinstance(rules, (str, bytes)):
        normalized = tuple(rules)
        if normalized and all(isinstance(rule, Rule) for rule in normalized):
            return normalized
    raise InvalidArgumentError(
        f"Field '{path}' must map to a Rule or a non-empty sequence of Rules",
        context={"field": path, "type": type(rules).__name__},
    )


def _parse_path(path: str) -> FieldPath:
    try:
        return FieldPath.parse(path)
    except UnresolvablePathError as e:
        logger.debug(f"Using flat key for path '{path}': {e.reason}")
        return FieldPath.flat(path)


class RuleSet:
    """Mapping of field paths to rules.

    Rule sets are built once (normally via ``Validator.rule_set()``) and
    reused; they hold no per-validation state.

    Args:
        fields: Mapping of path expression to a Rule or a sequence of Rules

    Raises:
        InvalidArgumentError: If fields is not a mapping, a path is not a
            string, or a value is not a Rule/sequence of Rules
    """

    def __init__(self, fields: Mapping[str, Any]):
        if not isinstance(fields, Mapping):
            raise InvalidArgumentError(
                "Rule set fields must be a mapping",
                context={"type": type(fields).__name__},
            )

        self._fields: Dict[str, tuple[Rule, ...]] = {}
        self._paths: Dict[str, FieldPath] = {}
        for path, rules in fields.items():
            if not isinstance(path, str):
                raise InvalidArgumentError(
                    "Rule set paths must be strings",
                    context={"field": repr(path), "type": type(path).__name__},
                )
            self._fields[path] = _normalize_rules(path, rules)
            self._paths[path] = _parse_path(path)

    @property
    def paths(self) -> List[str]:
        """Declared path expressions, in evaluation order."""
        return list(self._fields)

    def rules_for(self, path: str) -> tuple[Rule, ...]:
        return self._fields[path]

    def check(self, obj: Any) -> Dict[str, Any] | None:
        """Validate ``obj`` synchronously.

        Returns:
            The error tree, or None when every field passes. The input
            object is never modified.
        """
        errors, failed = self._evaluate(obj)
        return errors if failed else None

    async def validate(self, obj: Any) -> None:
        """Validate ``obj``, completing asynchronously.

        Raises:
            RuleSetViolation: If any field fails; ``errors`` holds the tree
        """
        await asyncio.sleep(0)
        errors, failed = self._evaluate(obj)
        if failed:
            raise RuleSetViolation(errors, fields=failed)

    def _evaluate(self, obj: Any) -> tuple[Dict[str, Any], List[str]]:
        errors: Dict[str, Any] = {}
        failed: List[str] = []

        for path, rules in self._fields.items():
            field_path = self._paths[path]
            value = field_path.read(obj)

            for rule in rules:
                failure = rule.check(value)
                if failure is None:
                    continue

                failed.append(path)
                error = FieldError.from_failure(failure, value, rule.message, field=path)
                _store(errors, field_path, error)
                break

        return errors, failed

    def __repr__(self) -> str:
        return f"RuleSet({', '.join(self._fields)})"


def _store(errors: Dict[str, Any], field_path: FieldPath, error: FieldError) -> None:
    """Write ``error`` at its path, or under the raw expression when the
    path cannot be built.

    Errors of nested fields already occupying the position are moved to
    their flat keys, so the tree does not depend on declaration order.
    """
    existing = field_path.read(errors)
    if existing is not None:
        for nested in iter_field_errors(existing):
            logger.debug(f"Moving error for '{nested.field}' under flat key")
            errors[nested.field] = nested
    try:
        field_path.write(errors, error)
    except UnresolvablePathError as e:
        logger.debug(f"Storing error for '{field_path.expression}' under flat key: {e.reason}")
        errors[field_path.expression] = error


__all__ = ["RuleSet"]

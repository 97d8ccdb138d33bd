"""Rule chains with a fluent builder API.

A ``Rule`` is an ordered list of constraint invocations that share one
failure message. Steps are evaluated in declaration order and the first
failing step wins; later steps are never evaluated.

Example:
    ```python
    validator = Validator()
    age = validator.rule("bad age").required().min(18)

    age.check(15)
    # RuleFailure(check='min', options=(18,))

    await age.validate(21)  # returns None
    await age.validate(15)  # raises ConstraintViolation
    ```

Options may be callables. At evaluation time a callable option is invoked
with the value being checked and its return value is used instead, which
allows bounds that depend on other data:

    ```python
    form = {"start": 3}
    end = validator.rule("end before start").min(lambda _: form["start"])
    ```
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import re
from dataclasses import dataclass
from re import Pattern as RegexPattern
from typing import Any

from . import constraints
from .constraints import Constraint
from .exceptions import ConstraintViolation, InvalidArgumentError
from .registry import ConstraintRegistry
from .result import FieldError, RuleFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleStep:
    """One constraint invocation inside a rule."""

    name: str
    predicate: Constraint
    options: tuple[Any, ...] = ()

    def resolve_options(self, value: Any) -> tuple[Any, ...]:
        """Substitute callable options with their result for ``value``."""
        return tuple(option(value) if callable(option) else option for option in self.options)

    def evaluate(self, value: Any) -> RuleFailure | None:
        options = self.resolve_options(value)
        if self.predicate(value, *options):
            return None
        return RuleFailure(check=self.name, options=options)


class Rule:
    """Ordered chain of constraint steps with a single failure message.

    Rules are normally obtained from ``Validator.rule()``. Each builder
    method appends a step and returns the same rule, so calls chain.

    Args:
        message: Message reported for any failing step
        registry: Registry the constraint names are resolved against
    """

    def __init__(self, message: str, registry: ConstraintRegistry):
        if not isinstance(message, str):
            raise InvalidArgumentError(
                "Rule message must be a string",
                context={"type": type(message).__name__},
            )
        self._message = message
        self._registry = registry
        self._steps: list[RuleStep] = []

    @property
    def message(self) -> str:
        return self._message

    @property
    def steps(self) -> tuple[RuleStep, ...]:
        return tuple(self._steps)

    @property
    def registry(self) -> ConstraintRegistry:
        return self._registry

    def apply(self, name: str, *options: Any) -> Rule:
        """Append a step for the constraint registered under ``name``.

        The name is resolved immediately and the options are bound against
        the predicate's signature, so a misspelled constraint or a wrong
        number of options fails while the rule is being built rather than
        when data is checked.

        Raises:
            UnknownConstraintError: If name is not registered
            InvalidArgumentError: If the options do not fit the constraint,
                or a ``match`` pattern does not compile
        """
        predicate = self._registry.lookup(name)
        _check_arity(name, predicate, options)
        if predicate is constraints.match:
            _check_pattern(options[0])
        self._steps.append(RuleStep(name=name, predicate=predicate, options=options))
        return self

    # Built-in constraints

    def required(self) -> Rule:
        return self.apply("required")

    def min(self, minimum: Any) -> Rule:
        return self.apply("min", minimum)

    def max(self, maximum: Any) -> Rule:
        return self.apply("max", maximum)

    def positive(self) -> Rule:
        return self.apply("positive")

    def negative(self) -> Rule:
        return self.apply("negative")

    def min_length(self, minimum: Any) -> Rule:
        return self.apply("minLength", minimum)

    def max_length(self, maximum: Any) -> Rule:
        return self.apply("maxLength", maximum)

    def length(self, fixed_length: Any) -> Rule:
        return self.apply("length", fixed_length)

    def match(self, regex: str | RegexPattern[str]) -> Rule:
        return self.apply("match", regex)

    def email(self) -> Rule:
        return self.apply("email")

    def numeric(self) -> Rule:
        return self.apply("numeric")

    def alphanum(self) -> Rule:
        return self.apply("alphanum")

    def numeric_space(self) -> Rule:
        return self.apply("numericSpace")

    def alphanum_space(self) -> Rule:
        return self.apply("alphanumSpace")

    def one_of(self, *candidates: Any) -> Rule:
        return self.apply("oneOf", *candidates)

    def check(self, value: Any) -> RuleFailure | None:
        """Evaluate the steps against ``value``.

        Returns:
            RuleFailure for the first failing step, or None if all pass
        """
        for step in self._steps:
            failure = step.evaluate(value)
            if failure is not None:
                logger.debug(f"Rule '{self._message}' failed on '{failure.check}'")
                return failure
        return None

    async def validate(self, value: Any) -> None:
        """Validate ``value``, completing asynchronously.

        Raises:
            ConstraintViolation: If a step fails; ``payload`` holds
                ``{message, check, options, value}``
        """
        # Never complete within the caller's own frame
        await asyncio.sleep(0)
        failure = self.check(value)
        if failure is not None:
            raise ConstraintViolation(FieldError.from_failure(failure, value, self._message))

    def __repr__(self) -> str:
        chain = ".".join(step.name for step in self._steps)
        return f"Rule({self._message!r}, {chain or '<empty>'})"


def _check_arity(name: str, predicate: Constraint, options: tuple[Any, ...]) -> None:
    try:
        signature = inspect.signature(predicate)
    except (TypeError, ValueError):
        # Some builtins expose no signature
        return
    try:
        signature.bind(None, *options)
    except TypeError as e:
        raise InvalidArgumentError(
            f"Invalid options for constraint '{name}': {e}",
            context={"name": name, "options": list(options)},
        ) from None


def _check_pattern(regex: Any) -> None:
    if not isinstance(regex, str):
        return
    try:
        re.compile(regex)
    except re.error as e:
        raise InvalidArgumentError(
            f"Invalid regular expression {regex!r}: {e}",
            context={"name": "match", "options": [regex]},
        ) from None


__all__ = ["Rule", "RuleStep"]

"""Exception hierarchy for ruleknobs.

All errors raised by the library extend ``RuleknobsError``, which carries an
optional context dictionary with structured error information.

Two families matter to callers:

- Validation outcomes (``ConstraintViolation``, ``RuleSetViolation``) are
  raised by ``validate()`` coroutines when data fails its rules. They are
  the normal failure path of validation and carry the error payload.
- Configuration faults (``UnknownConstraintError``, ``InvalidArgumentError``,
  ``ConstraintRegistrationError``) are raised while rules are being built,
  before any data flows through them.

Example:
    ```python
    from ruleknobs import Validator, ConstraintViolation

    rule = Validator().rule("bad age").required().min(18)
    try:
        await rule.validate(15)
    except ConstraintViolation as e:
        e.payload
        # {'message': 'bad age', 'check': 'min', 'options': [18], 'value': 15}
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from .result import FieldError


class RuleknobsError(Exception):
    """Base exception for ruleknobs.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context
        details: Alternative to context (takes precedence when both are given)
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class ValidationError(RuleknobsError):
    """Raised when data fails validation.

    Subclasses carry the structured error payload produced by a rule or a
    rule set.
    """

    pass


class ConstraintViolation(ValidationError):
    """Raised by ``Rule.validate`` when a value violates one of its steps.

    Attributes:
        error: The FieldError describing the failed step
    """

    def __init__(self, error: FieldError):
        super().__init__(
            error.message,
            context={"check": error.check, "value": error.value},
        )
        self.error = error

    @property
    def check(self) -> str:
        """Name of the failed constraint."""
        return self.error.check

    @property
    def payload(self) -> Dict[str, Any]:
        """Plain-dict form: ``{message, check, options, value}``."""
        return self.error.to_dict()


class RuleSetViolation(ValidationError):
    """Raised by ``RuleSet.validate`` when one or more fields fail.

    Attributes:
        errors: Error tree shaped like the rule set's field paths, with
            a FieldError at each failing position
    """

    def __init__(self, errors: Dict[str, Any], fields: list[str] | None = None):
        fields = fields or []
        super().__init__(
            f"Validation failed for {len(fields)} field(s): {', '.join(fields)}",
            context={"fields": fields},
        )
        self.errors = errors
        self.fields = fields

    @property
    def payload(self) -> Dict[str, Any]:
        """Error tree with plain-dict leaves."""
        from .result import error_tree_to_dict

        return error_tree_to_dict(self.errors)


class ConfigurationError(RuleknobsError):
    """Raised when rules, rule sets or the registry are misconfigured."""

    pass


class NotFoundError(RuleknobsError):
    """Raised when a requested item is not found."""

    pass


class UnknownConstraintError(ConfigurationError, NotFoundError):
    """Raised when a rule references a constraint name absent from the registry.

    Example:
        ```python
        raise UnknownConstraintError(
            "isbn",
            available=["required", "min", "max"],
        )
        ```
    """

    def __init__(self, name: str, available: list[str] | None = None):
        super().__init__(
            f"Unknown constraint: {name}",
            context={"name": name, "available": available or []},
        )
        self.name = name


class InvalidArgumentError(ConfigurationError):
    """Raised when a constructor receives an argument of the wrong shape."""

    pass


class ConstraintRegistrationError(ConfigurationError):
    """Raised when a constraint registration would overwrite an existing name."""

    pass


class UnresolvablePathError(RuleknobsError):
    """Raised when a path expression cannot be parsed or written structurally.

    Rule sets recover from this error by storing the field error under the
    raw expression string, so it never aborts validation.
    """

    def __init__(self, expression: str, reason: str):
        super().__init__(
            f"Unresolvable path '{expression}': {reason}",
            context={"expression": expression, "reason": reason},
        )
        self.expression = expression
        self.reason = reason


__all__ = [
    "RuleknobsError",
    "ValidationError",
    "ConstraintViolation",
    "RuleSetViolation",
    "ConfigurationError",
    "NotFoundError",
    "UnknownConstraintError",
    "InvalidArgumentError",
    "ConstraintRegistrationError",
    "UnresolvablePathError",
]

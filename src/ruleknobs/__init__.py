"""Declarative value and object validation.

ruleknobs validates single values with chained rules and whole objects with
rule sets keyed by field paths:

- **Constraints**: pure predicates (``required``, ``min``, ``email``, ...)
  held in an explicit ``ConstraintRegistry``
- **Rules**: ordered constraint chains sharing one failure message,
  first failure wins
- **Rule sets**: field path to rules mappings that report the first
  failure of every failing field in an error tree shaped like the object
- **Factories**: build rule sets from dict or YAML configuration

Example:
    ```python
    from ruleknobs import RuleSetViolation, Validator

    validator = Validator()
    signup = validator({
        "email": validator("Invalid email").required().email(),
        "profile.age": validator("Too young").required().min(18),
    })

    try:
        await signup.validate({"email": "nope", "profile": {"age": 12}})
    except RuleSetViolation as e:
        e.payload["profile"]["age"]["check"]
        # 'min'
    ```
"""

from .constraints import BUILTIN_CONSTRAINTS, Constraint
from .exceptions import (
    ConfigurationError,
    ConstraintRegistrationError,
    ConstraintViolation,
    InvalidArgumentError,
    NotFoundError,
    RuleknobsError,
    RuleSetViolation,
    UnknownConstraintError,
    UnresolvablePathError,
    ValidationError,
)
from .factory import RuleFactory, RuleSetFactory, load_rule_set, rule_factory, rule_set_factory
from .paths import FieldPath, read_path, write_path
from .registry import ConstraintRegistry
from .result import FieldError, RuleFailure, error_tree_to_dict, iter_field_errors
from .rule_set import RuleSet
from .rules import Rule, RuleStep
from .validator import Validator

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Entry point
    "Validator",
    # Building blocks
    "Rule",
    "RuleStep",
    "RuleSet",
    "ConstraintRegistry",
    "Constraint",
    "BUILTIN_CONSTRAINTS",
    "FieldPath",
    "read_path",
    "write_path",
    # Results
    "FieldError",
    "RuleFailure",
    "error_tree_to_dict",
    "iter_field_errors",
    # Configuration
    "RuleFactory",
    "RuleSetFactory",
    "rule_factory",
    "rule_set_factory",
    "load_rule_set",
    # Exceptions
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

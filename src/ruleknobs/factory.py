"""Factories for building rules and rule sets from configuration."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml  # type: ignore[import-untyped]

from .exceptions import ConfigurationError, InvalidArgumentError, NotFoundError
from .registry import ConstraintRegistry
from .rule_set import RuleSet
from .rules import Rule

logger = logging.getLogger(__name__)


class RuleFactory:
    """Factory for creating a Rule from configuration.

    Configuration Options:
        message (str): Failure message reported for any failing constraint
        constraints (list): Constraint definitions, in evaluation order

    Constraint Definition Options:
        A bare constraint name (``"required"``), or a mapping with
        type (str): Registered constraint name
        options (list): Positional options passed to the constraint

    Example Configuration:
        message: Age must be at least 18
        constraints:
          - required
          - type: min
            options: [18]
    """

    def __init__(self, registry: ConstraintRegistry | None = None):
        _check_registry(registry)
        self.registry = registry if registry is not None else ConstraintRegistry.with_builtins()

    def create(self, **config: Any) -> Rule:
        """Create a Rule instance from configuration.

        Raises:
            ConfigurationError: If the message is missing, constraints is not
                a list or a constraint definition is malformed
            UnknownConstraintError: If a constraint name is not registered
            InvalidArgumentError: If a constraint gets the wrong options
        """
        message = config.get("message")
        if not isinstance(message, str):
            raise ConfigurationError(
                "Rule configuration requires a 'message' string",
                context={"config": config},
            )

        for key in config:
            if key not in ("message", "constraints"):
                logger.warning(f"Ignoring unknown rule option: {key}")

        constraints = config.get("constraints")
        if constraints is None:
            constraints = []
        if not isinstance(constraints, list):
            raise ConfigurationError(
                "Rule 'constraints' must be a list of constraint definitions",
                context={"message": message, "type": type(constraints).__name__},
            )

        rule = Rule(message, self.registry)
        for constraint_config in constraints:
            name, options = self._parse_constraint(constraint_config)
            rule.apply(name, *options)
        return rule

    def _parse_constraint(self, constraint_config: Any) -> tuple:
        if isinstance(constraint_config, str):
            return constraint_config, []

        if not isinstance(constraint_config, dict) or "type" not in constraint_config:
            raise ConfigurationError(
                "Constraint definition must be a name or a mapping with 'type'",
                context={"constraint": constraint_config},
            )

        # A blank ``options:`` key loads as None
        options = constraint_config.get("options")
        if options is None:
            options = []
        elif not isinstance(options, list):
            options = [options]
        return constraint_config["type"], options


class RuleSetFactory:
    """Factory for creating a RuleSet from configuration.

    Configuration Options:
        name (str): Optional rule set name, used for logging
        fields (dict): Path expression to one rule definition or a list of
            rule definitions (see RuleFactory)

    Example Configuration:
        name: signup
        fields:
          email:
            message: Invalid email
            constraints: [required, email]
          address.zip:
            - message: Zip code required
              constraints: [required]
            - message: Zip code must be 5 digits
              constraints:
                - numeric
                - type: length
                  options: [5]
    """

    def __init__(self, registry: ConstraintRegistry | None = None):
        self.rule_factory = RuleFactory(registry)

    @property
    def registry(self) -> ConstraintRegistry:
        return self.rule_factory.registry

    def create(self, **config: Any) -> RuleSet:
        """Create a RuleSet instance from configuration."""
        name = config.get("name", "unnamed_rule_set")
        fields = config.get("fields")
        if not isinstance(fields, dict):
            raise ConfigurationError(
                f"Rule set '{name}' requires a 'fields' mapping",
                context={"name": name},
            )

        logger.info(f"Creating rule set: {name}")

        rules: Dict[str, List[Rule]] = {}
        for path, rule_configs in fields.items():
            if isinstance(rule_configs, dict):
                rule_configs = [rule_configs]
            if not isinstance(rule_configs, list) or not rule_configs:
                raise ConfigurationError(
                    f"Field '{path}' in rule set '{name}' needs at least one rule",
                    context={"name": name, "field": path},
                )
            rules[str(path)] = [self._create_rule(name, path, rc) for rc in rule_configs]

        return RuleSet(rules)

    def _create_rule(self, name: str, path: str, rule_config: Any) -> Rule:
        if not isinstance(rule_config, dict):
            raise ConfigurationError(
                f"Rule for field '{path}' in rule set '{name}' must be a mapping",
                context={"name": name, "field": path},
            )
        return self.rule_factory.create(**rule_config)


def load_rule_set(
    path: Union[str, Path],
    registry: ConstraintRegistry | None = None,
) -> RuleSet:
    """Build a RuleSet from a YAML file.

    Args:
        path: YAML file holding a rule set configuration
        registry: Registry to resolve constraint names against

    Raises:
        NotFoundError: If the file does not exist
        ConfigurationError: If the document is not a mapping
    """
    path = Path(path)
    if not path.exists():
        raise NotFoundError(
            f"Rule set file not found: {path}",
            context={"path": str(path)},
        )

    with open(path) as f:
        config = yaml.safe_load(f)

    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Rule set file must contain a mapping: {path}",
            context={"path": str(path), "type": type(config).__name__},
        )

    config.setdefault("name", path.stem)
    return RuleSetFactory(registry).create(**config)


def _check_registry(registry: Any) -> None:
    if registry is not None and not isinstance(registry, ConstraintRegistry):
        raise InvalidArgumentError(
            "registry must be a ConstraintRegistry",
            context={"type": type(registry).__name__},
        )


# Singleton instances over the built-in constraints
rule_factory = RuleFactory()
rule_set_factory = RuleSetFactory()

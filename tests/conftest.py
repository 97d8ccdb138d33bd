"""Pytest configuration for ruleknobs tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from ruleknobs import ConstraintRegistry, Validator  # noqa: E402


@pytest.fixture
def registry():
    """Fresh registry with the built-in constraints."""
    return ConstraintRegistry.with_builtins()


@pytest.fixture
def validator(registry):
    """Validator bound to a fresh registry."""
    return Validator(registry)


@pytest.fixture
def rules_yaml(tmp_path):
    """Write a signup rule set configuration and return its path."""
    path = tmp_path / "signup.yaml"
    path.write_text(
        """
name: signup
fields:
  email:
    message: Invalid email
    constraints: [required, email]
  age:
    - message: Age is required
      constraints: [required]
    - message: You must be an adult
      constraints:
        - type: min
          options: [18]
  address.zip:
    message: Zip code must be 5 digits
    constraints:
      - numeric
      - type: length
        options: 5
"""
    )
    return path

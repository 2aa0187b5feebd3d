"""
Method Classifier.

Splits a trait's items into pass-through items and abstract methods.

An abstract method already gated on the test build (`#[cfg(test)]`) is a
test-only requirement: it has no production counterpart to keep, so it is
passed through rather than duplicated.
"""

import re
from typing import NamedTuple, Tuple

from trait_stubs.core.model import InterfaceDefinition, InterfaceItem, Method


class Classification(NamedTuple):
  """
  Two disjoint, order-preserving subsequences of `(position, item)` pairs.

  Attributes:
      passthrough: Methods with a body, test-only methods, and every non-method item.
      abstract: Methods without a body.
  """

  passthrough: Tuple[Tuple[int, InterfaceItem], ...]
  abstract: Tuple[Tuple[int, Method], ...]


def selector_attributes(cfg_predicate: str = "test") -> Tuple[str, str]:
  """The test and not-test selector attributes, whitespace stripped."""
  return (f"#[cfg({cfg_predicate})]", f"#[cfg(not({cfg_predicate}))]")


def carries_selector(method: Method, selector: str) -> bool:
  """True if one of the method's attributes is `selector`, ignoring whitespace."""
  return any(re.sub(r"\s+", "", a) == selector for a in method.attributes)


def classify(definition: InterfaceDefinition, cfg_predicate: str = "test") -> Classification:
  test_selector, _ = selector_attributes(cfg_predicate)
  passthrough = []
  abstract = []
  for pos, item in enumerate(definition.items):
    if isinstance(item, Method) and item.is_abstract and not carries_selector(item, test_selector):
      abstract.append((pos, item))
    else:
      passthrough.append((pos, item))
  return Classification(tuple(passthrough), tuple(abstract))

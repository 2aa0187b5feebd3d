"""
Transform Engine.

The pure pipeline from one `InterfaceDefinition` to one
`RewrittenInterfaceDefinition`:

1. Validate that the definition has not been rewritten already.
2. Classify items (`classifier`).
3. Synthesize a variant pair per abstract method (`synthesizer`).
4. Reassemble (`emitter`).

Nothing is cached between calls; definitions may be transformed in any order.
"""

from trait_stubs.core.classifier import carries_selector, classify, selector_attributes
from trait_stubs.core.emitter import emit
from trait_stubs.core.model import InterfaceDefinition, RewrittenInterfaceDefinition
from trait_stubs.core.registry import DEFAULT_REGISTRY, KnownShapeRegistry
from trait_stubs.core.synthesizer import synthesize_variants
from trait_stubs.errors import MalformedDefinition


def validate_definition(definition: InterfaceDefinition, cfg_predicate: str = "test") -> None:
  """
  Rejects definitions that already contain generated variants.

  Only the not-test selector on a method without a body marks generated
  output. Same-name methods under other cfg gates and `#[cfg(test)]`
  requirements are user code.

  Raises:
      MalformedDefinition: If an abstract method carries the not-test selector.
  """
  _, not_test_selector = selector_attributes(cfg_predicate)
  for method in definition.methods:
    if method.is_abstract and carries_selector(method, not_test_selector):
      raise MalformedDefinition(
        f"abstract method already carries `{not_test_selector}`; the trait looks like it was already rewritten",
        item=method.name,
        line=method.line,
      )


def transform_interface(
  definition: InterfaceDefinition,
  registry: KnownShapeRegistry = DEFAULT_REGISTRY,
  macro: str = "todo",
  cfg_predicate: str = "test",
) -> RewrittenInterfaceDefinition:
  """
  Rewrites a trait so that every abstract method has a test-only placeholder.

  Args:
      definition: The parsed trait.
      registry: Placeholder strategy table.
      macro: Placeholder macro name.
      cfg_predicate: The build-mode predicate. Detects re-application and test-only methods.

  Returns:
      RewrittenInterfaceDefinition: The rewritten trait.

  Raises:
      MalformedDefinition: If the definition was already rewritten.
  """
  validate_definition(definition, cfg_predicate)
  classification = classify(definition, cfg_predicate)
  pairs = [synthesize_variants(method, registry, macro) for _, method in classification.abstract]
  return emit(definition, classification, pairs)

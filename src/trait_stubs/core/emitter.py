"""
Emitter.

Reassembles a trait from its classified items and the synthesized pairs. No
decisions are made here.
"""

from typing import Dict, Sequence

from trait_stubs.core.classifier import Classification
from trait_stubs.core.model import InterfaceDefinition, InterfaceItem, RewrittenInterfaceDefinition
from trait_stubs.core.synthesizer import VariantPair


def emit(
  definition: InterfaceDefinition,
  classification: Classification,
  pairs: Sequence[VariantPair],
) -> RewrittenInterfaceDefinition:
  """
  Builds the rewritten definition.

  Args:
      definition: The original definition, source of all trait-level metadata.
      classification: Output of `classify(definition)`.
      pairs: One pair per abstract method, in the order of `classification.abstract`.

  Returns:
      RewrittenInterfaceDefinition: Items in source order, each pair occupying
      its method's position, production variant first.
  """
  if len(pairs) != len(classification.abstract):
    raise ValueError(f"Expected {len(classification.abstract)} variant pairs, got {len(pairs)}")

  slots: Dict[int, Sequence[InterfaceItem]] = {pos: (item,) for pos, item in classification.passthrough}
  for (pos, _), pair in zip(classification.abstract, pairs):
    slots[pos] = (pair.production, pair.test)

  items = []
  for pos in sorted(slots):
    items.extend(slots[pos])

  return RewrittenInterfaceDefinition(
    name=definition.name,
    header=definition.header,
    items=tuple(items),
    footer=definition.footer,
    visibility=definition.visibility,
    attributes=definition.attributes,
  )

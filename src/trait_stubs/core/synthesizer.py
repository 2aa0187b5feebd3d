"""
Variant Synthesizer.

Turns one abstract method into its production / test pair.

The production variant is the method exactly as declared. The test variant
carries a placeholder body resolved through the Known-Shape Registry. A test
variant taking `self` by value also gets a `Self: Sized` predicate: a default
body that consumes `self` is only allowed in a dyn-compatible trait when the
method is excluded from the vtable.
"""

from dataclasses import replace
from typing import NamedTuple

from trait_stubs.core.model import SELF_SIZED, Method, MethodSignature
from trait_stubs.core.registry import KnownShapeRegistry
from trait_stubs.enums import BuildMode, SelfKind


class VariantPair(NamedTuple):
  production: Method
  test: Method


def sized_signature(signature: MethodSignature) -> MethodSignature:
  """Applies the receiver rules to the signature of a test variant."""
  if signature.self_kind is SelfKind.BY_VALUE and not signature.requires_sized:
    return signature.with_predicate(SELF_SIZED)
  return signature


def synthesize_variants(method: Method, registry: KnownShapeRegistry, macro: str = "todo") -> VariantPair:
  """
  Builds the `NOT_TEST` and `TEST` variants of an abstract method.

  Args:
      method: A method without a body.
      registry: Strategy table used to build the placeholder.
      macro: Placeholder macro name.

  Returns:
      VariantPair: Production variant first.
  """
  production = replace(method, build_mode=BuildMode.NOT_TEST)

  placeholder = registry.resolve(method.signature.return_type, method.name, macro)
  test = replace(
    method,
    signature=sized_signature(method.signature),
    body=f"{{ {placeholder.to_text()} }}",
    placeholder=placeholder,
    build_mode=BuildMode.TEST,
  )
  return VariantPair(production, test)

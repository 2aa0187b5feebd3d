"""
Tests for the Emitter.
"""

import pytest
from trait_stubs.core.classifier import classify
from trait_stubs.core.emitter import emit
from trait_stubs.core.registry import DEFAULT_REGISTRY
from trait_stubs.core.synthesizer import synthesize_variants
from trait_stubs.enums import BuildMode
from trait_stubs.frontend.parser import parse_trait

TRAIT = """/// Docs
pub trait T: Send {
    fn a(&self);
    fn b(&self) -> u8 { 1 }
    type X;
    fn c(self);
}"""


def test_pairs_take_their_method_position():
  definition = parse_trait(TRAIT)
  classification = classify(definition)
  pairs = [synthesize_variants(m, DEFAULT_REGISTRY) for _, m in classification.abstract]
  rewritten = emit(definition, classification, pairs)

  names = [getattr(i, "name", None) for i in rewritten.items]
  assert names == ["a", "a", "b", None, "c", "c"]
  modes = [getattr(i, "build_mode", None) for i in rewritten.items]
  assert modes == [BuildMode.NOT_TEST, BuildMode.TEST, None, None, BuildMode.NOT_TEST, BuildMode.TEST]


def test_metadata_copied():
  definition = parse_trait(TRAIT)
  classification = classify(definition)
  pairs = [synthesize_variants(m, DEFAULT_REGISTRY) for _, m in classification.abstract]
  rewritten = emit(definition, classification, pairs)

  assert rewritten.name == definition.name
  assert rewritten.header == definition.header
  assert rewritten.footer == definition.footer
  assert rewritten.visibility == "pub"
  assert rewritten.items[2] is definition.items[1]


def test_pair_count_mismatch_rejected():
  definition = parse_trait(TRAIT)
  with pytest.raises(ValueError):
    emit(definition, classify(definition), [])

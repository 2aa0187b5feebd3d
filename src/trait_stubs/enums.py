"""
Enumerations for trait-stubs.

This module defines the tagged variants the transform is driven by: how a
method receives `self`, and which build mode a generated method belongs to.
"""

from enum import Enum


class SelfKind(str, Enum):
  """
  How a trait method receives the implementing type.

  Drives the sizedness rule: only `BY_VALUE` receivers require `Self: Sized`
  on the generated test variant.
  """

  NONE = "none"  # associated function, no receiver
  BY_REFERENCE = "by_reference"  # &self, &mut self, self: Box<Self>, ...
  BY_VALUE = "by_value"  # self, mut self, self: Self


class BuildMode(str, Enum):
  """
  Build-mode selector attached to generated variants.

  Exactly one of the two values is active in any compilation; the selection is
  made by the compiler, never by the transform.
  """

  NOT_TEST = "not_test"
  TEST = "test"

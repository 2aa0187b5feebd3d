"""
Return Type Shapes.

A shape is a structural description of a return type, just detailed enough to
choose a placeholder strategy. It is not a type system: generic bindings,
lifetimes and bounds beyond the trait path are not tracked.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class PathShape:
  """
  A (possibly generic) path type, e.g. ``std::option::Option<u8>``.

  Attributes:
      segments: Path segment identifiers, outermost first.
      type_args: Shapes of the type arguments of the last segment.
          Lifetimes, const arguments and associated type bindings are dropped.
      text: The type as written.
  """

  segments: Tuple[str, ...]
  type_args: Tuple["TypeShape", ...] = ()
  text: str = ""

  @property
  def ident(self) -> str:
    return self.segments[-1] if self.segments else ""

  def first_type_arg(self) -> Optional["TypeShape"]:
    return self.type_args[0] if self.type_args else None


@dataclass(frozen=True)
class ImplTraitShape:
  """
  An ``impl Bound + Bound`` type.

  Attributes:
      bounds: Trait bounds as path segment tuples. Lifetime bounds are dropped.
      text: The type as written.
  """

  bounds: Tuple[Tuple[str, ...], ...]
  text: str = ""

  def has_bound(self, *idents: str) -> bool:
    """True if the last segment of any bound is one of `idents`."""
    return any(b and b[-1] in idents for b in self.bounds)


@dataclass(frozen=True)
class TupleShape:
  elements: Tuple["TypeShape", ...]
  text: str = ""

  @property
  def is_unit(self) -> bool:
    return not self.elements


@dataclass(frozen=True)
class OpaqueShape:
  """Anything without a dedicated shape: references, slices, `dyn`, fn pointers."""

  text: str = ""


TypeShape = Union[PathShape, ImplTraitShape, TupleShape, OpaqueShape]

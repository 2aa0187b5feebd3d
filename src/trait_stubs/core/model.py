"""
Signature Model.

In-memory representation of a trait definition and its methods. Every entity
is an immutable dataclass created and discarded within one transform call.

Semantic fields (names, receiver kind, return shape, body presence) drive the
transform. Layout fields keep the exact source text so that anything the
transform does not touch can be reproduced byte for byte.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Union

from trait_stubs.core.placeholders import PlaceholderExpression
from trait_stubs.core.shapes import TypeShape
from trait_stubs.enums import BuildMode, SelfKind


@dataclass(frozen=True)
class Parameter:
  """A non-receiver parameter (`pattern: type`)."""

  pattern: str
  type_text: str


@dataclass(frozen=True)
class WherePredicate:
  """
  A single where-clause predicate, e.g. ``Self: Sized + Clone``.

  Attributes:
      bounded: The constrained type as written (whitespace stripped).
      bounds: The bounds as written, split on top-level `+`.
  """

  bounded: str
  bounds: Tuple[str, ...]

  @property
  def is_self_sized(self) -> bool:
    return self.bounded == "Self" and any(b.split("::")[-1] == "Sized" for b in self.bounds)

  def to_text(self) -> str:
    return f"{self.bounded}: {' + '.join(self.bounds)}"


SELF_SIZED = WherePredicate(bounded="Self", bounds=("Sized",))


@dataclass(frozen=True)
class MethodSignature:
  """
  The signature of a trait method.

  Attributes:
      name: Method identifier.
      self_kind: Receiver classification.
      parameters: Non-receiver parameters in order.
      return_type: Shape of the declared return type, None for `()`-by-omission.
      where_predicates: Predicates of the declared where clause.
      head: Source text from the first qualifier up to the where clause.
      where_clause: Source text of the where clause, empty if absent.
      extra_predicates: Predicates added by the transform.
  """

  name: str
  self_kind: SelfKind
  parameters: Tuple[Parameter, ...] = ()
  return_type: Optional[TypeShape] = None
  where_predicates: Tuple[WherePredicate, ...] = ()
  head: str = ""
  where_clause: str = ""
  extra_predicates: Tuple[WherePredicate, ...] = ()

  @property
  def requires_sized(self) -> bool:
    return any(p.is_self_sized for p in self.where_predicates + self.extra_predicates)

  def with_predicate(self, predicate: WherePredicate) -> "MethodSignature":
    return replace(self, extra_predicates=self.extra_predicates + (predicate,))

  def to_text(self) -> str:
    """Renders the signature without its terminator or body."""
    if not self.extra_predicates:
      return f"{self.head} {self.where_clause}" if self.where_clause else self.head

    added = ", ".join(p.to_text() for p in self.extra_predicates)
    clause = self.where_clause.rstrip().rstrip(",").rstrip()
    if clause and clause != "where":
      return f"{self.head} {clause}, {added}"
    return f"{self.head} where {added}"


@dataclass(frozen=True)
class ItemLayout:
  """
  Verbatim text of a trait item, split for re-emission.

  Attributes:
      lead: Whitespace preceding the item's documentation/attributes.
      decorations: Doc comments, comments and outer attributes, including the
          indentation that precedes the item keyword.
      indent: Indentation of the item keyword line.
      source: The full item text, `lead` included.
  """

  lead: str = ""
  decorations: str = ""
  indent: str = ""
  source: str = ""


@dataclass(frozen=True)
class Method:
  signature: MethodSignature
  body: Optional[str] = None
  attributes: Tuple[str, ...] = ()
  build_mode: Optional[BuildMode] = None
  placeholder: Optional[PlaceholderExpression] = None
  layout: ItemLayout = field(default_factory=ItemLayout)
  line: int = 0

  @property
  def name(self) -> str:
    return self.signature.name

  @property
  def is_abstract(self) -> bool:
    return self.body is None


@dataclass(frozen=True)
class OpaqueItem:
  """Any non-method trait item (associated type, const, macro call, inner attribute)."""

  layout: ItemLayout
  line: int = 0


InterfaceItem = Union[Method, OpaqueItem]


@dataclass(frozen=True)
class InterfaceDefinition:
  """
  A parsed trait definition.

  Attributes:
      name: Trait identifier.
      visibility: Visibility qualifier as written (`pub`, `pub(crate)`, ``).
      attributes: Outer attributes of the trait as written.
      header: Verbatim text from the start of the definition to the opening `{`.
      items: Ordered trait items.
      footer: Verbatim text from the end of the last item to the end.
  """

  name: str
  header: str
  items: Tuple[InterfaceItem, ...]
  footer: str
  visibility: str = ""
  attributes: Tuple[str, ...] = ()

  @property
  def methods(self) -> Tuple[Method, ...]:
    return tuple(i for i in self.items if isinstance(i, Method))


@dataclass(frozen=True)
class RewrittenInterfaceDefinition:
  """
  Same shape as `InterfaceDefinition`, with each abstract method replaced by a
  `NOT_TEST` / `TEST` pair.
  """

  name: str
  header: str
  items: Tuple[InterfaceItem, ...]
  footer: str
  visibility: str = ""
  attributes: Tuple[str, ...] = ()

  @property
  def methods(self) -> Tuple[Method, ...]:
    return tuple(i for i in self.items if isinstance(i, Method))

  def variants(self, name: str) -> Tuple[Method, ...]:
    """All emitted methods named `name`, in output order."""
    return tuple(m for m in self.methods if m.name == name)

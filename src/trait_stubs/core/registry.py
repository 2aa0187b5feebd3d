"""
Known-Shape Registry.

An ordered table of (matcher, synthesizer) pairs used to build a placeholder
that satisfies type inference for common return types. A bare ``todo!()`` is
fine for most returns, but not for e.g. ``impl Iterator<..>`` where the
compiler needs a concrete type, nor for ``Option<impl Iterator<..>>`` where the
problem is nested.

There is no general solution, so the table is best effort. The last entry is a
fallback that matches everything and produces the bare placeholder; `resolve`
is therefore total. New shapes are supported by adding strategies in front of
the fallback via `KnownShapeRegistry.extended`.

Usage
-----

.. code-block:: python

    from trait_stubs.core.registry import DEFAULT_REGISTRY

    expr = DEFAULT_REGISTRY.resolve(shape, label="iter")
    expr.to_text()
    # 'todo!("iter") as std::iter::Empty<_>'
"""

from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional, Tuple

from trait_stubs.core.placeholders import (
  CallExpr,
  CastExpr,
  PlaceholderExpression,
  TodoExpr,
  TupleExpr,
)
from trait_stubs.core.shapes import ImplTraitShape, PathShape, TupleShape, TypeShape

ITERATOR_TRAITS = ("Iterator", "DoubleEndedIterator", "ExactSizeIterator", "FusedIterator")
EMPTY_ITERATOR = "std::iter::Empty<_>"


@dataclass(frozen=True)
class PlaceholderContext:
  """
  Per-resolution context handed to synthesizers.

  Attributes:
      label: Text embedded in the placeholder macro (the method name).
      macro: Placeholder macro name (`todo` or `unimplemented`).
      registry: The registry performing the resolution, for nested shapes.
  """

  label: str
  macro: str
  registry: "KnownShapeRegistry"

  def todo(self) -> PlaceholderExpression:
    return TodoExpr(self.label, self.macro)

  def resolve(self, shape: Optional[TypeShape]) -> PlaceholderExpression:
    return self.registry.resolve(shape, self.label, self.macro)


class PlaceholderStrategy(NamedTuple):
  name: str
  matcher: Callable[[Optional[TypeShape]], bool]
  synthesize: Callable[[Optional[TypeShape], PlaceholderContext], PlaceholderExpression]
  description: str = ""


# --- Matchers & Synthesizers ---


def _is_lazy_sequence(shape: Optional[TypeShape]) -> bool:
  return isinstance(shape, ImplTraitShape) and shape.has_bound(*ITERATOR_TRAITS)


def _empty_sequence(shape: Optional[TypeShape], ctx: PlaceholderContext) -> PlaceholderExpression:
  return CastExpr(ctx.todo(), EMPTY_ITERATOR)


def _is_wrapper(ident: str) -> Callable[[Optional[TypeShape]], bool]:
  def matcher(shape: Optional[TypeShape]) -> bool:
    return isinstance(shape, PathShape) and shape.ident == ident and bool(shape.type_args)

  return matcher


def _wrap_in(callee: str) -> Callable[[Optional[TypeShape], PlaceholderContext], PlaceholderExpression]:
  def synthesize(shape: Optional[TypeShape], ctx: PlaceholderContext) -> PlaceholderExpression:
    return CallExpr(callee, ctx.resolve(shape.first_type_arg()))

  return synthesize


def _is_tuple(shape: Optional[TypeShape]) -> bool:
  return isinstance(shape, TupleShape) and not shape.is_unit


def _tuple_of(shape: Optional[TypeShape], ctx: PlaceholderContext) -> PlaceholderExpression:
  return TupleExpr(tuple(ctx.resolve(e) for e in shape.elements))


def _always(shape: Optional[TypeShape]) -> bool:
  return True


def _bare(shape: Optional[TypeShape], ctx: PlaceholderContext) -> PlaceholderExpression:
  return ctx.todo()


FALLBACK = PlaceholderStrategy("fallback", _always, _bare, "anything else: bare placeholder")

DEFAULT_STRATEGIES: Tuple[PlaceholderStrategy, ...] = (
  PlaceholderStrategy(
    "lazy_sequence", _is_lazy_sequence, _empty_sequence, "impl Iterator<..>: cast to std::iter::Empty<_>"
  ),
  PlaceholderStrategy("boxed", _is_wrapper("Box"), _wrap_in("Box::new"), "Box<T>: Box::new(<T>)"),
  PlaceholderStrategy("optional", _is_wrapper("Option"), _wrap_in("Some"), "Option<T>: Some(<T>)"),
  PlaceholderStrategy("fallible", _is_wrapper("Result"), _wrap_in("Ok"), "Result<T, E>: Ok(<T>)"),
  PlaceholderStrategy("tuple", _is_tuple, _tuple_of, "(A, B, ..): one placeholder per element"),
)


class KnownShapeRegistry:
  """
  Ordered placeholder strategy table. First match wins.

  The fallback strategy is always kept last, whatever the constructor is given.
  """

  def __init__(self, strategies: Tuple[PlaceholderStrategy, ...] = DEFAULT_STRATEGIES) -> None:
    self._strategies: Tuple[PlaceholderStrategy, ...] = tuple(strategies) + (FALLBACK,)

  @property
  def strategies(self) -> Tuple[PlaceholderStrategy, ...]:
    return self._strategies

  def names(self) -> Tuple[str, ...]:
    return tuple(s.name for s in self._strategies)

  def extended(self, *strategies: PlaceholderStrategy) -> "KnownShapeRegistry":
    """
    Returns a new registry with `strategies` inserted ahead of the fallback.

    The receiver is left unchanged.
    """
    return KnownShapeRegistry(self._strategies[:-1] + tuple(strategies))

  def resolve(self, return_type: Optional[TypeShape], label: str, macro: str = "todo") -> PlaceholderExpression:
    """
    Builds the placeholder for a method returning `return_type`.

    Args:
        return_type: Shape of the return type, None when the method returns `()`
            by omission.
        label: Text embedded in the placeholder macro, the method name.
        macro: Placeholder macro to call.

    Returns:
        PlaceholderExpression: Result of the first matching strategy.
    """
    ctx = PlaceholderContext(label=label, macro=macro, registry=self)
    for strategy in self._strategies:
      if strategy.matcher(return_type):
        return strategy.synthesize(return_type, ctx)
    # Unreachable while FALLBACK terminates the table.
    return ctx.todo()


DEFAULT_REGISTRY = KnownShapeRegistry()

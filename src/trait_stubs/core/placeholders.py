"""
Placeholder Expressions.

Small expression trees synthesized as test-variant bodies. Each node renders
itself with `to_text()`.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple


class PlaceholderExpression(ABC):
  """Abstract base class for synthesized placeholder expressions."""

  @abstractmethod
  def to_text(self) -> str:
    pass


@dataclass(frozen=True)
class TodoExpr(PlaceholderExpression):
  """The bare placeholder: ``todo!("label")``."""

  label: str
  macro: str = "todo"

  def to_text(self) -> str:
    return f"{self.macro}!({json.dumps(self.label)})"


@dataclass(frozen=True)
class CastExpr(PlaceholderExpression):
  """``<inner> as <target>``, pinning an otherwise uninferable type."""

  inner: PlaceholderExpression
  target: str

  def to_text(self) -> str:
    return f"{self.inner.to_text()} as {self.target}"


@dataclass(frozen=True)
class CallExpr(PlaceholderExpression):
  """``<callee>(<argument>)``, e.g. ``Some(..)`` or ``Box::new(..)``."""

  callee: str
  argument: PlaceholderExpression

  def to_text(self) -> str:
    return f"{self.callee}({self.argument.to_text()})"


@dataclass(frozen=True)
class TupleExpr(PlaceholderExpression):
  elements: Tuple[PlaceholderExpression, ...]

  def to_text(self) -> str:
    inner = ", ".join(e.to_text() for e in self.elements)
    # A one-element tuple needs its trailing comma.
    if len(self.elements) == 1:
      inner += ","
    return f"({inner})"

"""
Exception hierarchy for trait-stubs.

Only structural problems are errors. A return type the placeholder registry
does not recognise is never an error: it resolves to the bare fallback.
"""

from typing import Optional


class TraitStubsError(Exception):
  """Base class for all trait-stubs failures."""


class ConfigurationError(TraitStubsError):
  """Raised when `[tool.trait_stubs]` settings cannot be validated."""


class MalformedDefinition(TraitStubsError):
  """
  The input cannot be represented by the signature model.

  Raised for unsupported or broken signatures and for definitions that were
  already rewritten. Fatal for the enclosing trait only.

  Attributes:
      reason (str): Human readable description of the problem.
      item (Optional[str]): Name of the offending method, when known.
      line (Optional[int]): 1-based line of the offending token.
      column (Optional[int]): 0-based column of the offending token.
  """

  def __init__(
    self,
    reason: str,
    item: Optional[str] = None,
    line: Optional[int] = None,
    column: Optional[int] = None,
  ) -> None:
    self.reason = reason
    self.item = item
    self.line = line
    self.column = column
    super().__init__(self._format())

  def _format(self) -> str:
    parts = []
    if self.line is not None:
      loc = f"line {self.line}"
      if self.column is not None:
        loc += f":{self.column}"
      parts.append(loc)
    if self.item:
      parts.append(f"in `{self.item}`")
    prefix = " ".join(parts)
    return f"{prefix}: {self.reason}" if prefix else self.reason

  def shifted(self, lines: int) -> "MalformedDefinition":
    """
    Returns a copy whose line number is moved down by `lines`.

    Used when a definition was parsed out of a larger file.
    """
    line = self.line + lines if self.line is not None else None
    return MalformedDefinition(self.reason, item=self.item, line=line, column=self.column)

"""
Marked Trait Scanner.

Finds the items of a Rust source file that carry the marker attribute
(`#[test_stubs]`, or any path ending in it such as `#[test_stubs::test_stubs]`),
at top level or nested inside modules and function bodies.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from trait_stubs.errors import MalformedDefinition
from trait_stubs.frontend.tokens import CLOSERS, OPENERS, Token, TokenKind, significant_tokens

_ITEM_PREFIXES = ("pub", "unsafe", "auto")


@dataclass(frozen=True)
class MarkedTrait:
  """
  A marked item found in a file.

  Attributes:
      start: Offset where the item's text starts. Includes the indentation of
          its first line when only whitespace precedes it.
      end: Offset just past the item's closing brace.
      marker: `(start, end)` offsets of the marker attribute.
      line: 1-based line of `start`.
      name: Trait name, when the item is a trait.
      error: Set when the marker is attached to something the transform
          cannot handle; the item is then left untouched.
  """

  start: int
  end: int
  marker: Tuple[int, int]
  line: int
  name: Optional[str] = None
  error: Optional[MalformedDefinition] = None


def find_marked_traits(text: str, marker: str = "test_stubs") -> List[MarkedTrait]:
  """
  Locates all marked items of `text` in source order.

  Raises:
      MalformedDefinition: If the file cannot be tokenized or has unbalanced
          delimiters around a marked item.
  """
  tokens = significant_tokens(text)
  found: List[MarkedTrait] = []
  i = 0
  while i < len(tokens):
    if not (tokens[i].is_symbol("#") and tokens[i + 1].is_symbol("[")):
      i += 1
      continue

    run_start = i
    marker_span = None
    while tokens[i].is_symbol("#") and tokens[i + 1].is_symbol("["):
      close = _matching(tokens, i + 1)
      if _is_marker(tokens[i + 2 : close], marker):
        marker_span = (tokens[i].start, tokens[close].end)
      i = close + 1

    if marker_span is None:
      continue

    first = tokens[run_start]
    start = _line_start_if_blank(text, first.start)
    item = _parse_item_extent(tokens, i, marker)
    if isinstance(item, MalformedDefinition):
      found.append(MarkedTrait(start, tokens[i].end, marker_span, first.line, error=item))
      i += 1
      continue

    name, close_idx = item
    found.append(MarkedTrait(start, tokens[close_idx].end, marker_span, first.line, name=name))
    i = close_idx + 1
  return found


def strip_marker(text: str, found: MarkedTrait) -> Tuple[str, int]:
  """
  Removes the marker attribute from the item's text.

  Returns:
      Tuple[str, int]: The item text without the marker, and the number of
      lines removed before the trait keyword.
  """
  item_text = text[found.start : found.end]
  m_start = found.marker[0] - found.start
  m_end = found.marker[1] - found.start

  line_start = item_text.rfind("\n", 0, m_start) + 1
  line_end = item_text.find("\n", m_end)
  before = item_text[line_start:m_start]
  after = item_text[m_end:line_end] if line_end >= 0 else item_text[m_end:]
  if not before.strip() and not after.strip() and line_end >= 0:
    # The marker has a line of its own: drop the whole line.
    return item_text[:line_start] + item_text[line_end + 1 :], 1
  return item_text[:m_start] + item_text[m_end:].lstrip(" \t"), 0


def _matching(tokens: Sequence[Token], open_idx: int) -> int:
  stack = []
  for idx in range(open_idx, len(tokens)):
    tok = tokens[idx]
    if tok.kind == TokenKind.EOF:
      break
    if tok.kind != TokenKind.SYMBOL:
      continue
    if tok.text in OPENERS:
      stack.append(tok.text)
    elif tok.text in CLOSERS:
      if not stack or stack[-1] != CLOSERS[tok.text]:
        raise MalformedDefinition(f"mismatched `{tok.text}`", line=tok.line, column=tok.col)
      stack.pop()
      if not stack:
        return idx
  opener = tokens[open_idx]
  raise MalformedDefinition(f"unclosed `{opener.text}`", line=opener.line, column=opener.col)


def _is_marker(attr_tokens: Sequence[Token], marker: str) -> bool:
  """True for `marker`, `path::to::marker` and `marker()`."""
  toks = list(attr_tokens)
  if len(toks) >= 2 and toks[-2].is_symbol("(") and toks[-1].is_symbol(")"):
    toks = toks[:-2]
  if not toks or not toks[-1].is_ident(marker):
    return False
  return all(t.kind in (TokenKind.IDENTIFIER, TokenKind.PATH_SEP) for t in toks)


def _line_start_if_blank(text: str, offset: int) -> int:
  line_start = text.rfind("\n", 0, offset) + 1
  return line_start if not text[line_start:offset].strip() else offset


def _parse_item_extent(tokens: Sequence[Token], idx: int, marker: str):
  """
  Finds the trait following the attribute run at `idx`.

  Returns:
      `(name, closing_brace_index)`, or a MalformedDefinition when the marked
      item is not a trait.
  """
  while tokens[idx].is_ident(*_ITEM_PREFIXES):
    idx += 1
    if tokens[idx].is_symbol("("):
      idx = _matching(tokens, idx) + 1

  tok = tokens[idx]
  if not tok.is_ident("trait"):
    what = tok.text or "end of input"
    return MalformedDefinition(
      f"`#[{marker}]` can only be applied to traits, found {what!r}",
      line=tok.line,
      column=tok.col,
    )

  name_tok = tokens[idx + 1]
  name = name_tok.text if name_tok.kind == TokenKind.IDENTIFIER else None
  while idx < len(tokens) and not tokens[idx].is_symbol("{"):
    if tokens[idx].kind == TokenKind.EOF or tokens[idx].is_symbol(";"):
      return MalformedDefinition(f"trait `{name}` has no body", item=name, line=tok.line, column=tok.col)
    if tokens[idx].kind == TokenKind.SYMBOL and tokens[idx].text in "([":
      idx = _matching(tokens, idx) + 1
      continue
    idx += 1
  return name, _matching(tokens, idx)

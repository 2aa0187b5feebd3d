"""
Return Type Parser.

Builds a `TypeShape` from the tokens of a return type. Only the forms the
placeholder registry can act on get a dedicated shape; everything else is
`OpaqueShape`.
"""

from typing import List, Sequence, Tuple

from trait_stubs.core.shapes import ImplTraitShape, OpaqueShape, PathShape, TupleShape, TypeShape
from trait_stubs.frontend.tokens import Token, TokenKind, split_top_level

_NON_PATH_KEYWORDS = ("dyn", "fn", "unsafe", "extern", "impl", "for")


def parse_type(tokens: Sequence[Token], source: str) -> TypeShape:
  """
  Parses a type.

  Args:
      tokens: Significant tokens of the type, non-empty.
      source: Text the token offsets refer to.

  Returns:
      TypeShape: The structural shape.
  """
  text = source[tokens[0].start : tokens[-1].end]
  first = tokens[0]

  if first.is_symbol("(") and _closes_at_end(tokens):
    inner = tokens[1:-1]
    if not inner:
      return TupleShape((), text)
    parts, trailing = split_top_level(inner, ",")
    if len(parts) == 1 and not trailing:
      # Parenthesised type, not a tuple.
      return parse_type(parts[0], source)
    return TupleShape(tuple(parse_type(p, source) for p in parts), text)

  if first.is_ident("impl"):
    bounds, _ = split_top_level(tokens[1:], "+")
    paths = tuple(p for p in (_bound_path(b) for b in bounds) if p)
    return ImplTraitShape(paths, text)

  if first.kind == TokenKind.PATH_SEP or (first.kind == TokenKind.IDENTIFIER and first.text not in _NON_PATH_KEYWORDS):
    shape = _parse_path(tokens, source, text)
    if shape is not None:
      return shape

  return OpaqueShape(text)


def _closes_at_end(tokens: Sequence[Token]) -> bool:
  """True if the opening bracket at tokens[0] is closed by tokens[-1]."""
  depth = 0
  for idx, tok in enumerate(tokens):
    if tok.kind != TokenKind.SYMBOL:
      continue
    if tok.text in "([{":
      depth += 1
    elif tok.text in ")]}":
      depth -= 1
      if depth == 0:
        return idx == len(tokens) - 1
  return False


def _bound_path(tokens: List[Token]) -> Tuple[str, ...]:
  """Path segments of a trait bound, ignoring `?`, `for<..>`, parentheses and lifetimes."""
  toks = list(tokens)
  while toks and (toks[0].is_symbol("(") or toks[0].is_symbol("?")):
    toks = toks[1:]
  if toks and toks[0].is_ident("for"):
    toks = _skip_angle(toks[1:])
  segments = []
  for tok in toks:
    if tok.kind == TokenKind.IDENTIFIER:
      segments.append(tok.text)
    elif tok.kind == TokenKind.PATH_SEP:
      continue
    else:
      break
  return tuple(segments)


def _skip_angle(tokens: List[Token]) -> List[Token]:
  if not tokens or not tokens[0].is_symbol("<"):
    return tokens
  depth = 0
  for idx, tok in enumerate(tokens):
    if tok.is_symbol("<"):
      depth += 1
    elif tok.is_symbol(">"):
      depth -= 1
      if depth == 0:
        return tokens[idx + 1 :]
  return []


def _parse_path(tokens: Sequence[Token], source: str, text: str):
  segments: List[str] = []
  type_args: Tuple[TypeShape, ...] = ()
  idx = 0
  if tokens[0].kind == TokenKind.PATH_SEP:
    idx = 1

  while idx < len(tokens):
    tok = tokens[idx]
    if tok.kind != TokenKind.IDENTIFIER:
      return None
    segments.append(tok.text)
    type_args = ()
    idx += 1

    if idx + 1 < len(tokens) and tokens[idx].kind == TokenKind.PATH_SEP and tokens[idx + 1].is_symbol("<"):
      idx += 1
    if idx < len(tokens) and tokens[idx].is_symbol("<"):
      close = _matching_angle(tokens, idx)
      if close < 0:
        return None
      type_args = _type_args(tokens[idx + 1 : close], source)
      idx = close + 1

    if idx == len(tokens):
      return PathShape(tuple(segments), type_args, text)
    if tokens[idx].kind != TokenKind.PATH_SEP:
      # `Fn(u8) -> u8` sugar, array lengths and the like.
      return None
    idx += 1
  return None


def _matching_angle(tokens: Sequence[Token], open_idx: int) -> int:
  depth = 0
  for idx in range(open_idx, len(tokens)):
    tok = tokens[idx]
    if tok.is_symbol("<"):
      depth += 1
    elif tok.is_symbol(">"):
      depth -= 1
      if depth == 0:
        return idx
  return -1


def _type_args(tokens: Sequence[Token], source: str) -> Tuple[TypeShape, ...]:
  args = []
  parts, _ = split_top_level(tokens, ",")
  for part in parts:
    head = part[0]
    if head.kind == TokenKind.LIFETIME:
      continue
    # Associated type bindings / constraints: `Item = u8`, `Item: Copy`.
    if head.kind == TokenKind.IDENTIFIER and len(part) > 1 and (part[1].is_symbol("=") or part[1].is_symbol(":")):
      continue
    # Const arguments.
    if head.kind in (TokenKind.NUMBER, TokenKind.CHAR, TokenKind.STRING) or head.is_symbol("{") or head.is_symbol("-"):
      continue
    args.append(parse_type(part, source))
  return tuple(args)

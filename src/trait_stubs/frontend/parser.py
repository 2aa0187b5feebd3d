"""
Rust Trait Parser.

Recursive-descent parser turning the text of one `trait` item into an
`InterfaceDefinition`. Bodies, associated items and attributes are not
interpreted, only delimited, and their text is kept verbatim.

Anything the signature model cannot represent raises `MalformedDefinition`
with the method name and position.
"""

import re
from typing import List, Optional, Tuple

from trait_stubs.core.model import (
  InterfaceDefinition,
  InterfaceItem,
  ItemLayout,
  Method,
  MethodSignature,
  OpaqueItem,
  Parameter,
  WherePredicate,
)
from trait_stubs.enums import SelfKind
from trait_stubs.errors import MalformedDefinition
from trait_stubs.frontend.tokens import (
  CLOSERS,
  OPENERS,
  Token,
  TokenKind,
  find_top_level,
  significant_tokens,
  split_top_level,
)
from trait_stubs.frontend.types import parse_type

FN_QUALIFIERS = ("async", "unsafe", "const", "extern", "default")
TRAIT_QUALIFIERS = ("unsafe", "auto")


class TraitParser:
  """
  Parses a single trait definition.

  Args:
      text: Source of the definition, optionally preceded by attributes,
          comments and whitespace.
      line_offset: Added to reported line numbers, for text cut from a file.
  """

  def __init__(self, text: str, line_offset: int = 0):
    self.text = text
    self.tokens = significant_tokens(text, line_offset)
    self.pos = 0

  # --- Token cursor ---

  def peek(self, offset: int = 0) -> Token:
    idx = self.pos + offset
    if idx >= len(self.tokens):
      return self.tokens[-1]
    return self.tokens[idx]

  def consume(self) -> Token:
    token = self.peek()
    if token.kind != TokenKind.EOF:
      self.pos += 1
    return token

  def error(self, reason: str, item: Optional[str] = None, tok: Optional[Token] = None) -> MalformedDefinition:
    tok = tok or self.peek()
    return MalformedDefinition(reason, item=item, line=tok.line, column=tok.col)

  def expect_symbol(self, sym: str, item: Optional[str] = None) -> Token:
    if not self.peek().is_symbol(sym):
      cur = self.peek()
      raise self.error(f"expected `{sym}`, got {cur.text or 'end of input'!r}", item)
    return self.consume()

  def consume_group(self, item: Optional[str] = None) -> List[Token]:
    """
    Consumes a bracketed group starting at the cursor.

    Returns:
        List[Token]: The group's tokens, delimiters included.
    """
    open_tok = self.peek()
    if open_tok.text not in OPENERS or open_tok.kind != TokenKind.SYMBOL:
      raise self.error(f"expected a bracketed group, got {open_tok.text!r}", item)
    stack = []
    group = []
    while True:
      tok = self.consume()
      if tok.kind == TokenKind.EOF:
        raise self.error(f"unclosed `{open_tok.text}`", item, open_tok)
      group.append(tok)
      if tok.kind != TokenKind.SYMBOL:
        continue
      if tok.text in OPENERS:
        stack.append(tok.text)
      elif tok.text in CLOSERS:
        if not stack or stack[-1] != CLOSERS[tok.text]:
          raise self.error(f"mismatched `{tok.text}`", item, tok)
        stack.pop()
        if not stack:
          return group

  def collect_until(self, stop, item: Optional[str] = None) -> List[Token]:
    """
    Consumes tokens until `stop(token)` holds outside any brackets.

    The stop token itself is not consumed.
    """
    out = []
    angle = 0
    while True:
      tok = self.peek()
      if tok.kind == TokenKind.EOF:
        raise self.error("unexpected end of input", item)
      if angle == 0 and stop(tok):
        return out
      if tok.kind == TokenKind.SYMBOL and tok.text in OPENERS:
        out.extend(self.consume_group(item))
        continue
      if tok.kind == TokenKind.SYMBOL and tok.text in CLOSERS:
        raise self.error(f"unexpected `{tok.text}`", item, tok)
      if tok.is_symbol("<"):
        angle += 1
      elif tok.is_symbol(">") and angle > 0:
        angle -= 1
      out.append(self.consume())

  def span(self, first: Token, last: Token) -> str:
    return self.text[first.start : last.end]

  # --- Definition ---

  def parse(self) -> InterfaceDefinition:
    attributes = []
    while self.peek().is_symbol("#"):
      attributes.append(self._parse_attribute())

    visibility = ""
    if self.peek().is_ident("pub"):
      first = self.consume()
      last = first
      if self.peek().is_symbol("("):
        last = self.consume_group()[-1]
      visibility = self.span(first, last)

    while self.peek().is_ident(*TRAIT_QUALIFIERS):
      self.consume()

    if not self.peek().is_ident("trait"):
      raise self.error(f"expected `trait`, got {self.peek().text or 'end of input'!r}")
    self.consume()

    if self.peek().kind != TokenKind.IDENTIFIER:
      raise self.error("expected trait name")
    name = self.consume().text

    # Generics, supertraits and where clause are copied verbatim.
    self.collect_until(lambda t: t.is_symbol("{"), name)
    open_brace = self.consume()
    header = self.text[: open_brace.end]

    items: List[InterfaceItem] = []
    prev_end = open_brace.end
    while not self.peek().is_symbol("}"):
      if self.peek().kind == TokenKind.EOF:
        raise self.error(f"unclosed body of trait `{name}`", tok=open_brace)
      item, prev_end = self._parse_item(prev_end)
      items.append(item)

    close = self.consume()
    if self.peek().kind != TokenKind.EOF:
      raise self.error(f"unexpected {self.peek().text!r} after trait `{name}`")

    return InterfaceDefinition(
      name=name,
      header=header,
      items=tuple(items),
      footer=self.text[prev_end : close.end],
      visibility=visibility,
      attributes=tuple(attributes),
    )

  def _parse_attribute(self) -> str:
    hash_tok = self.consume()
    if self.peek().is_symbol("!"):
      self.consume()
    group = self.consume_group()
    if group[0].text != "[":
      raise self.error("expected `[` after `#`", tok=group[0])
    return self.span(hash_tok, group[-1])

  # --- Items ---

  def _layout(self, prev_end: int, keyword: Token, end: int) -> ItemLayout:
    prefix = self.text[prev_end : keyword.start]
    lead = re.match(r"\s*", prefix).group()
    newline = prefix.find("\n")
    if "\n" not in lead and newline >= 0 and _is_plain_line_comment(prefix[len(lead) : newline]):
      # A trailing comment of the previous line belongs to the separation, not to this item.
      lead = prefix[: newline + 1] + re.match(r"\s*", prefix[newline + 1 :]).group()
    line_start = self.text.rfind("\n", 0, keyword.start) + 1
    indent = re.match(r"[ \t]*", self.text[line_start:]).group()
    return ItemLayout(
      lead=lead,
      decorations=prefix[len(lead) :],
      indent=indent,
      source=self.text[prev_end:end],
    )

  def _parse_item(self, prev_end: int) -> Tuple[InterfaceItem, int]:
    first = self.peek()
    attributes = []
    while self.peek().is_symbol("#"):
      if self.peek(1).is_symbol("!"):
        # Inner attribute of the trait body.
        self._parse_attribute()
        end = self.tokens[self.pos - 1].end
        return OpaqueItem(self._layout(prev_end, first, end), line=first.line), end
      attributes.append(self._parse_attribute())

    keyword = self.peek()
    offset = 0
    while self.peek(offset).is_ident(*FN_QUALIFIERS) or self.peek(offset).kind == TokenKind.STRING:
      offset += 1
    if self.peek(offset).is_ident("fn"):
      return self._parse_method(prev_end, keyword, tuple(attributes))
    return self._parse_opaque(prev_end, keyword)

  def _parse_opaque(self, prev_end: int, keyword: Token) -> Tuple[InterfaceItem, int]:
    """Associated types and consts, macro invocations: delimited, not interpreted."""
    while True:
      tok = self.peek()
      if tok.kind == TokenKind.EOF or tok.is_symbol("}"):
        raise self.error(f"unterminated item starting with {keyword.text!r}", tok=keyword)
      if tok.is_symbol(";"):
        end = self.consume().end
        break
      if tok.kind == TokenKind.SYMBOL and tok.text in OPENERS:
        group = self.consume_group()
        if group[0].text == "{" and not self.peek().is_symbol(";"):
          # `macro_name! { .. }` ends at its closing brace.
          end = group[-1].end
          break
        continue
      self.consume()
    return OpaqueItem(self._layout(prev_end, keyword, end), line=keyword.line), end

  def _parse_method(self, prev_end: int, keyword: Token, attributes: Tuple[str, ...]) -> Tuple[Method, int]:
    while not self.peek().is_ident("fn"):
      self.consume()
    fn_tok = self.consume()

    if self.peek().kind != TokenKind.IDENTIFIER:
      raise self.error("expected method name after `fn`", tok=fn_tok)
    name = self.consume().text

    if self.peek().is_symbol("<"):
      self._consume_generics(name)

    if not self.peek().is_symbol("("):
      raise self.error("expected parameter list", name)
    param_group = self.consume_group(name)
    self_kind, parameters = self._parse_parameters(param_group[1:-1], name)
    head_end = param_group[-1]

    return_type = None
    if self.peek().kind == TokenKind.ARROW:
      arrow = self.consume()
      ret_tokens = self.collect_until(_ends_return_type, name)
      if not ret_tokens:
        raise self.error("missing return type after `->`", name, arrow)
      return_type = parse_type(ret_tokens, self.text)
      head_end = ret_tokens[-1]

    where_clause = ""
    predicates: Tuple[WherePredicate, ...] = ()
    if self.peek().is_ident("where"):
      where_tok = self.consume()
      pred_tokens = self.collect_until(lambda t: t.is_symbol(";") or t.is_symbol("{"), name)
      predicates = self._parse_predicates(pred_tokens, name)
      last = pred_tokens[-1] if pred_tokens else where_tok
      where_clause = self.span(where_tok, last)

    body = None
    if self.peek().is_symbol(";"):
      end = self.consume().end
    elif self.peek().is_symbol("{"):
      group = self.consume_group(name)
      body = self.span(group[0], group[-1])
      end = group[-1].end
    else:
      raise self.error(f"expected `;` or a method body, got {self.peek().text or 'end of input'!r}", name)

    signature = MethodSignature(
      name=name,
      self_kind=self_kind,
      parameters=parameters,
      return_type=return_type,
      where_predicates=predicates,
      head=self.span(keyword, head_end),
      where_clause=where_clause,
    )
    method = Method(
      signature=signature,
      body=body,
      attributes=attributes,
      layout=self._layout(prev_end, keyword, end),
      line=keyword.line,
    )
    return method, end

  def _consume_generics(self, name: str) -> None:
    open_tok = self.peek()
    depth = 0
    while True:
      tok = self.peek()
      if tok.kind == TokenKind.EOF or tok.is_symbol("{") or tok.is_symbol(";"):
        raise self.error("unclosed generic parameter list", name, open_tok)
      if tok.kind == TokenKind.SYMBOL and tok.text in "([":
        self.consume_group(name)
        continue
      self.consume()
      if tok.is_symbol("<"):
        depth += 1
      elif tok.is_symbol(">"):
        depth -= 1
        if depth == 0:
          return

  # --- Signatures ---

  def _parse_parameters(self, tokens: List[Token], name: str) -> Tuple[SelfKind, Tuple[Parameter, ...]]:
    parts, _ = split_top_level(tokens, ",")
    self_kind = SelfKind.NONE
    params = []
    for idx, part in enumerate(parts):
      receiver = _receiver_kind(part)
      if receiver is not None:
        if idx != 0:
          raise self.error("`self` must be the first parameter", name, part[0])
        self_kind = receiver
        continue

      if any(t.kind == TokenKind.ELLIPSIS for t in part):
        raise self.error("variadic parameters are not supported", name, part[0])
      colon = find_top_level(part, ":")
      if colon <= 0 or colon == len(part) - 1:
        raise self.error(
          f"anonymous parameter {self.span(part[0], part[-1])!r} is not supported; give it a name",
          name,
          part[0],
        )
      params.append(
        Parameter(
          pattern=self.span(part[0], part[colon - 1]),
          type_text=self.span(part[colon + 1], part[-1]),
        )
      )
    return self_kind, tuple(params)

  def _parse_predicates(self, tokens: List[Token], name: str) -> Tuple[WherePredicate, ...]:
    parts, _ = split_top_level(tokens, ",")
    predicates = []
    for part in parts:
      colon = find_top_level(part, ":")
      if colon <= 0:
        raise self.error(f"invalid where predicate {self.span(part[0], part[-1])!r}", name, part[0])
      bounded = re.sub(r"\s+", "", self.span(part[0], part[colon - 1]))
      bounds, _ = split_top_level(part[colon + 1 :], "+")
      predicates.append(WherePredicate(bounded, tuple(self.span(b[0], b[-1]) for b in bounds)))
    return tuple(predicates)


def _is_plain_line_comment(text: str) -> bool:
  """`// ...`, but not the `///` and `//!` doc comments."""
  return text.startswith("//") and not text.startswith(("///", "//!"))


def _ends_return_type(tok: Token) -> bool:
  return tok.is_symbol(";") or tok.is_symbol("{") or tok.is_ident("where")



def _receiver_kind(part: List[Token]) -> Optional[SelfKind]:
  """
  Classifies a parameter as a receiver.

  Returns:
      Optional[SelfKind]: None if `part` is an ordinary parameter.
  """
  toks = list(part)
  if toks and toks[0].is_symbol("&"):
    rest = toks[1:]
    if rest and rest[0].kind == TokenKind.LIFETIME:
      rest = rest[1:]
    if rest and rest[0].is_ident("mut"):
      rest = rest[1:]
    if len(rest) == 1 and rest[0].is_ident("self"):
      return SelfKind.BY_REFERENCE
    return None

  if toks and toks[0].is_ident("mut"):
    toks = toks[1:]
  if not toks or not toks[0].is_ident("self"):
    return None
  if len(toks) == 1:
    return SelfKind.BY_VALUE

  # Typed receiver: `self: Type`.
  if len(toks) < 3 or not toks[1].is_symbol(":"):
    return None
  ty = toks[2:]
  if len(ty) == 1 and ty[0].is_ident("Self"):
    return SelfKind.BY_VALUE
  # `&Self`, `Box<Self>`, `Rc<Self>`, `Arc<Self>`, `Pin<&mut Self>`: dispatchable.
  return SelfKind.BY_REFERENCE


def parse_trait(text: str, line_offset: int = 0) -> InterfaceDefinition:
  """Convenience wrapper around `TraitParser(text, line_offset).parse()`."""
  return TraitParser(text, line_offset).parse()

"""
Rust Token Definitions and Tokenizer.

Splits Rust source into tokens that carry their exact offsets, so that any
span of the input can be reproduced verbatim. Comments and whitespace are kept
as trivia tokens.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Generator, List, Sequence, Tuple

from trait_stubs.errors import MalformedDefinition


class TokenKind(str, Enum):
  """Enumeration of Lexer Token Types."""

  COMMENT = "COMMENT"
  RAW_STRING = "RAW_STRING"
  STRING = "STRING"
  CHAR = "CHAR"
  LIFETIME = "LIFETIME"
  IDENTIFIER = "IDENTIFIER"
  NUMBER = "NUMBER"
  PATH_SEP = "PATH_SEP"
  ARROW = "ARROW"
  FAT_ARROW = "FAT_ARROW"
  ELLIPSIS = "ELLIPSIS"
  SYMBOL = "SYMBOL"
  NEWLINE = "NEWLINE"
  WHITESPACE = "WHITESPACE"
  MISMATCH = "MISMATCH"
  EOF = "EOF"


TRIVIA = (TokenKind.COMMENT, TokenKind.NEWLINE, TokenKind.WHITESPACE)

OPENERS = {"(": ")", "[": "]", "{": "}"}
CLOSERS = {v: k for k, v in OPENERS.items()}


@dataclass(frozen=True)
class Token:
  kind: TokenKind
  text: str
  line: int
  col: int
  start: int
  end: int

  def is_symbol(self, sym: str) -> bool:
    return self.kind == TokenKind.SYMBOL and self.text == sym

  def is_ident(self, *names: str) -> bool:
    return self.kind == TokenKind.IDENTIFIER and (not names or self.text in names)


class Tokenizer:
  PATTERN_DEFS = [
    (TokenKind.COMMENT, r"//[^\n]*|/\*[\s\S]*?\*/"),
    (TokenKind.RAW_STRING, r'b?r(?P<hashes>#*)"[\s\S]*?"(?P=hashes)'),
    (TokenKind.STRING, r'b?"(?:[^"\\]|\\[\s\S])*"'),
    (TokenKind.CHAR, r"b?'(?:[^'\\\n]|\\[^\n][^'\n]*)'"),
    (TokenKind.LIFETIME, r"'[^\W\d]\w*"),
    (TokenKind.IDENTIFIER, r"r#[^\W\d]\w*|[^\W\d]\w*"),
    (TokenKind.NUMBER, r"\d\w*(?:\.\d\w*)?"),
    (TokenKind.PATH_SEP, r"::"),
    (TokenKind.ARROW, r"->"),
    (TokenKind.FAT_ARROW, r"=>"),
    (TokenKind.ELLIPSIS, r"\.\.\.|\.\.=|\.\."),
    (TokenKind.SYMBOL, r"[#!\[\](){}<>,;:=+\-*/%&|^.?@$~]"),
    (TokenKind.NEWLINE, r"\r?\n"),
    (TokenKind.WHITESPACE, r"[ \t\f\r]+"),
    (TokenKind.MISMATCH, r"."),
  ]

  _REGEX = re.compile("|".join(f"(?P<{kind.value}>{pattern})" for kind, pattern in PATTERN_DEFS))

  def __init__(self, text: str, line_offset: int = 0):
    self.text = text
    self.line_offset = line_offset

  def tokenize(self) -> Generator[Token, None, None]:
    line_num = 1 + self.line_offset
    line_start = 0
    for mo in self._REGEX.finditer(self.text):
      # `lastgroup` would report the inner `hashes` group for raw strings.
      kind = next(k for k, _ in self.PATTERN_DEFS if mo.group(k.value) is not None)
      value = mo.group()
      col = mo.start() - line_start

      if kind == TokenKind.MISMATCH:
        raise MalformedDefinition(f"unexpected character {value!r}", line=line_num, column=col)

      yield Token(kind, value, line_num, col, mo.start(), mo.end())

      # Multi-line comments and strings advance the line counter too.
      newlines = value.count("\n")
      if newlines:
        line_num += newlines
        line_start = mo.start() + value.rfind("\n") + 1
    yield Token(TokenKind.EOF, "", line_num, 0, len(self.text), len(self.text))


def significant_tokens(text: str, line_offset: int = 0) -> List[Token]:
  """Tokenizes `text` and drops trivia. The trailing EOF token is kept."""
  return [t for t in Tokenizer(text, line_offset).tokenize() if t.kind not in TRIVIA]


def split_top_level(tokens: Sequence[Token], sep: str) -> Tuple[List[List[Token]], bool]:
  """
  Splits `tokens` on separator symbols that are not nested in any brackets.

  Angle brackets count as nesting, so `HashMap<K, V>` is never split.

  Returns:
      Tuple[List[List[Token]], bool]: The non-empty parts, and whether the
      sequence ended with a separator.
  """
  parts: List[List[Token]] = []
  current: List[Token] = []
  depth = 0
  angle = 0
  trailing = False
  for tok in tokens:
    if tok.kind == TokenKind.SYMBOL:
      if tok.text in OPENERS:
        depth += 1
      elif tok.text in CLOSERS:
        depth -= 1
      elif tok.text == "<" and depth == 0:
        angle += 1
      elif tok.text == ">" and depth == 0 and angle > 0:
        angle -= 1
      elif tok.text == sep and depth == 0 and angle == 0:
        if current:
          parts.append(current)
        current = []
        trailing = True
        continue
    current.append(tok)
    trailing = False
  if current:
    parts.append(current)
  return parts, trailing


def find_top_level(tokens: Sequence[Token], sym: str) -> int:
  """Index of the first un-nested `sym` symbol in `tokens`, or -1."""
  for idx, part in enumerate(_depths(tokens)):
    tok, depth, angle = part
    if depth == 0 and angle == 0 and tok.is_symbol(sym):
      return idx
  return -1


def _depths(tokens: Sequence[Token]) -> Generator[Tuple[Token, int, int], None, None]:
  depth = 0
  angle = 0
  for tok in tokens:
    if tok.kind == TokenKind.SYMBOL:
      if tok.text in CLOSERS:
        depth -= 1
      elif tok.text == ">" and depth == 0 and angle > 0:
        angle -= 1
    yield tok, depth, angle
    if tok.kind == TokenKind.SYMBOL:
      if tok.text in OPENERS:
        depth += 1
      elif tok.text == "<" and depth == 0:
        angle += 1

"""
Tests for the Rust Tokenizer.

Verifies:
1. Token kinds for identifiers, lifetimes, chars, strings and punctuation.
2. Offsets reproduce the input exactly.
3. Line tracking across multi-line trivia.
4. Top-level splitting helpers.
"""

import pytest
from trait_stubs.errors import MalformedDefinition
from trait_stubs.frontend.tokens import (
  TokenKind,
  Tokenizer,
  find_top_level,
  significant_tokens,
  split_top_level,
)


def kinds(text):
  return [(t.kind, t.text) for t in significant_tokens(text)][:-1]


def test_tokenizer_roundtrip_is_byte_identical():
  text = 'trait T {\n    /// doc\n    fn f(&self, s: &str) -> u8 { b"x"; r#"q"# ; 0 }\n}\n'
  tokens = list(Tokenizer(text).tokenize())
  assert "".join(t.text for t in tokens) == text
  for t in tokens:
    assert text[t.start : t.end] == t.text


def test_lifetime_vs_char():
  assert kinds("&'a self") == [
    (TokenKind.SYMBOL, "&"),
    (TokenKind.LIFETIME, "'a"),
    (TokenKind.IDENTIFIER, "self"),
  ]
  assert kinds("'a'") == [(TokenKind.CHAR, "'a'")]
  assert kinds(r"'\n'") == [(TokenKind.CHAR, r"'\n'")]
  assert kinds("Foo<'_>")[2] == (TokenKind.LIFETIME, "'_")


def test_multi_char_punctuation():
  assert kinds("a::b -> c => ..") == [
    (TokenKind.IDENTIFIER, "a"),
    (TokenKind.PATH_SEP, "::"),
    (TokenKind.IDENTIFIER, "b"),
    (TokenKind.ARROW, "->"),
    (TokenKind.IDENTIFIER, "c"),
    (TokenKind.FAT_ARROW, "=>"),
    (TokenKind.ELLIPSIS, ".."),
  ]


def test_nested_generics_close_individually():
  closing = [t for t in significant_tokens("Option<Vec<u8>>") if t.text == ">"]
  assert len(closing) == 2


def test_raw_strings_and_raw_identifiers():
  assert kinds('r##"a "# b"##') == [(TokenKind.RAW_STRING, 'r##"a "# b"##')]
  assert kinds("r#type") == [(TokenKind.IDENTIFIER, "r#type")]


def test_line_numbers_after_block_comment():
  toks = significant_tokens("/* one\ntwo */\nfn")
  fn_tok = toks[0]
  assert fn_tok.text == "fn"
  assert fn_tok.line == 3
  assert fn_tok.col == 0


def test_line_offset_applies():
  toks = significant_tokens("\nfn", line_offset=10)
  assert toks[0].line == 12


def test_unexpected_character_is_malformed():
  with pytest.raises(MalformedDefinition) as exc:
    list(Tokenizer("fn f\\").tokenize())
  assert exc.value.line == 1
  assert exc.value.column == 4


def test_split_top_level_respects_nesting():
  toks = significant_tokens("a: HashMap<K, V>, b: (u8, u8),")[:-1]
  parts, trailing = split_top_level(toks, ",")
  assert len(parts) == 2
  assert trailing is True
  assert find_top_level(parts[0], ":") == 1

"""
Tests for the Rust Trait Parser.

Verifies:
1. Structural parsing of traits: name, visibility, attributes, items.
2. Receiver classification.
3. Verbatim layout capture (header, items, footer reproduce the input).
4. MalformedDefinition for signatures the model cannot represent.
"""

import pytest
from trait_stubs.core.model import Method, OpaqueItem
from trait_stubs.core.shapes import ImplTraitShape, PathShape
from trait_stubs.enums import SelfKind
from trait_stubs.errors import MalformedDefinition
from trait_stubs.frontend.parser import TraitParser, parse_trait


def reassemble(definition):
  return definition.header + "".join(i.layout.source for i in definition.items) + definition.footer


def test_parse_simple_trait(simple_trait):
  definition = parse_trait(simple_trait)
  assert definition.name == "SimpleT"
  assert [m.name for m in definition.methods] == ["f", "g"]

  f, g = definition.methods
  assert f.body is not None
  assert f.body.startswith("{") and f.body.endswith("}")
  assert g.body is None
  assert g.is_abstract
  assert g.signature.self_kind is SelfKind.BY_REFERENCE
  assert g.signature.head == "fn g(&self)"


def test_layout_reassembles_input(simple_trait, iter_trait):
  for text in (simple_trait, iter_trait):
    assert reassemble(parse_trait(text)) == text


def test_header_keeps_attributes_docs_and_visibility():
  text = """/// Docs.
#[allow(dead_code)]
pub(crate) unsafe trait Store<K: Eq>: Send where K: Clone {
    fn get(&self, k: K) -> Option<u8>;
}"""
  definition = parse_trait(text)
  assert definition.name == "Store"
  assert definition.visibility == "pub(crate)"
  assert definition.attributes == ("#[allow(dead_code)]",)
  assert definition.header.endswith("where K: Clone {")
  assert reassemble(definition) == text


def test_method_layout_fields():
  text = "trait T {\n\n    /// Doc\n    #[must_use]\n    fn g(&self) -> u8;\n}"
  g = parse_trait(text).methods[0]
  assert g.layout.lead == "\n\n    "
  assert g.layout.decorations == "/// Doc\n    #[must_use]\n    "
  assert g.layout.indent == "    "
  assert g.attributes == ("#[must_use]",)
  assert g.line == 5


@pytest.mark.parametrize(
  "receiver,kind",
  [
    ("self", SelfKind.BY_VALUE),
    ("mut self", SelfKind.BY_VALUE),
    ("self: Self", SelfKind.BY_VALUE),
    ("&self", SelfKind.BY_REFERENCE),
    ("&mut self", SelfKind.BY_REFERENCE),
    ("&'a mut self", SelfKind.BY_REFERENCE),
    ("self: &Self", SelfKind.BY_REFERENCE),
    ("self: Box<Self>", SelfKind.BY_REFERENCE),
    ("self: Pin<&mut Self>", SelfKind.BY_REFERENCE),
    ("x: u8", SelfKind.NONE),
  ],
)
def test_receiver_kinds(receiver, kind):
  method = parse_trait(f"trait T {{ fn m({receiver}); }}").methods[0]
  assert method.signature.self_kind is kind


def test_parameters_and_return_shape():
  text = "trait T { fn m<'a, F: Fn(u8) -> u8>(&'a self, f: F, (a, b): (u8, u8)) -> impl Iterator<Item = u8> + 'a; }"
  sig = parse_trait(text).methods[0].signature
  assert [p.pattern for p in sig.parameters] == ["f", "(a, b)"]
  assert [p.type_text for p in sig.parameters] == ["F", "(u8, u8)"]
  assert isinstance(sig.return_type, ImplTraitShape)
  assert sig.head.endswith("+ 'a")


def test_where_clause_predicates():
  text = "trait T { fn m(self) -> Vec<u8> where Self: Sized + Clone, T: Into<Vec<u8>>,; }"
  sig = parse_trait(text).methods[0].signature
  assert isinstance(sig.return_type, PathShape)
  assert [p.bounded for p in sig.where_predicates] == ["Self", "T"]
  assert sig.where_predicates[0].bounds == ("Sized", "Clone")
  assert sig.requires_sized
  assert sig.where_clause == "where Self: Sized + Clone, T: Into<Vec<u8>>,"


def test_associated_items_are_opaque():
  text = """trait T {
    #![allow(unused)]
    type Item: Clone;
    const N: usize = { 3 };
    some_macro! { fn hidden(); }
    fn m(&self) -> Self::Item;
}"""
  definition = parse_trait(text)
  kinds = [type(i) for i in definition.items]
  assert kinds == [OpaqueItem, OpaqueItem, OpaqueItem, OpaqueItem, Method]
  assert reassemble(definition) == text


def test_qualified_methods():
  text = 'trait T { async fn a(&self) -> u8; unsafe extern "C" fn b(); const X: u8; }'
  definition = parse_trait(text)
  assert [m.name for m in definition.methods] == ["a", "b"]
  assert definition.methods[1].signature.head == 'unsafe extern "C" fn b()'


def test_line_offset():
  definition = TraitParser("trait T {\n  fn g();\n}", line_offset=40).parse()
  assert definition.methods[0].line == 42


@pytest.mark.parametrize(
  "text,fragment",
  [
    ("trait T { fn m(u8); }", "anonymous parameter"),
    ("trait T { fn m(x: u8, self); }", "`self` must be the first parameter"),
    ("trait T { fn m(x: u8, ...); }", "variadic"),
    ("trait T { fn m() -> ; }", "missing return type"),
    ("trait T { fn (); }", "expected method name"),
    ("trait T { fn m; }", "expected parameter list"),
    ("trait T { fn m(&self) }", "expected `;` or a method body"),
    ("trait T { fn m(&self); ", "unclosed"),
    ("struct S { x: u8 }", "expected `trait`"),
    ("trait T { fn m(x: (u8]); }", "mismatched"),
  ],
)
def test_malformed_definitions(text, fragment):
  with pytest.raises(MalformedDefinition) as exc:
    parse_trait(text)
  assert fragment in str(exc.value)


def test_malformed_reports_method_and_position():
  text = "trait T {\n    fn ok(&self);\n    fn bad(u8);\n}"
  with pytest.raises(MalformedDefinition) as exc:
    parse_trait(text)
  assert exc.value.item == "bad"
  assert exc.value.line == 3
  assert "in `bad`" in str(exc.value)


def test_trailing_comment_of_previous_line_is_separation():
  text = "trait T {\n    fn a(&self); // about a\n    /// Doc b\n    fn b(&self);\n}"
  b = parse_trait(text).methods[1]
  assert b.layout.lead == " // about a\n    "
  assert b.layout.decorations == "/// Doc b\n    "


def test_trailing_doc_comment_stays_with_next_item():
  text = "trait T {\n    fn a(&self); /// Doc b\n    fn b(&self);\n}"
  b = parse_trait(text).methods[1]
  assert b.layout.lead == " "
  assert b.layout.decorations == "/// Doc b\n    "

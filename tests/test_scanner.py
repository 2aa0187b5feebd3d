"""
Tests for the Marked Trait Scanner.
"""

import pytest
from trait_stubs.errors import MalformedDefinition
from trait_stubs.scanner import find_marked_traits, strip_marker

SOURCE = """use test_stubs::test_stubs;

/// Documented.
#[test_stubs]
pub trait A {
    fn a(&self);
}

#[derive(Debug)]
struct S;

mod inner {
    #[allow(dead_code)]
    #[test_stubs::test_stubs]
    trait B {
        fn b(&self) -> u8;
    }
}
"""


def test_finds_top_level_and_nested_traits():
  found = find_marked_traits(SOURCE)
  assert [f.name for f in found] == ["A", "B"]
  assert all(f.error is None for f in found)

  a, b = found
  assert SOURCE[a.start : a.end].startswith("#[test_stubs]\npub trait A {")
  assert SOURCE[a.end - 1] == "}"
  assert a.line == 4
  # Starts at the indentation of the first attribute line.
  assert SOURCE[b.start : b.end].startswith("    #[allow(dead_code)]")
  assert b.line == 13


def test_strip_marker_on_own_line():
  a, b = find_marked_traits(SOURCE)
  text, removed = strip_marker(SOURCE, a)
  assert removed == 1
  assert text.startswith("pub trait A {")

  text, removed = strip_marker(SOURCE, b)
  assert removed == 1
  assert text.startswith("    #[allow(dead_code)]\n    trait B {")


def test_strip_inline_marker():
  src = "#[test_stubs] trait T { fn g(&self); }"
  (found,) = find_marked_traits(src)
  text, removed = strip_marker(src, found)
  assert removed == 0
  assert text == "trait T { fn g(&self); }"


def test_custom_marker_and_unrelated_attributes():
  src = "#[test_stubs]\ntrait A {}\n#[stubbed]\ntrait B {}\n#[not_stubbed]\ntrait C {}\n"
  assert [f.name for f in find_marked_traits(src, marker="stubbed")] == ["B"]


def test_marker_on_non_trait_reports_error():
  src = "#[test_stubs]\nstruct S { x: u8 }\n#[test_stubs]\ntrait T { fn g(&self); }\n"
  bad, good = find_marked_traits(src)
  assert isinstance(bad.error, MalformedDefinition)
  assert "can only be applied to traits" in str(bad.error)
  assert bad.error.line == 2
  assert good.name == "T"
  assert good.error is None


def test_marker_text_inside_strings_and_comments_is_ignored():
  src = '// #[test_stubs]\nconst X: &str = "#[test_stubs] trait Q {}";\n'
  assert find_marked_traits(src) == []


def test_unbalanced_file_raises():
  with pytest.raises(MalformedDefinition):
    find_marked_traits("#[test_stubs]\ntrait T {\n    fn g(&self);\n")

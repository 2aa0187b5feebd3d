"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Console capture so log output can be asserted on.
- Shared Rust sources used across test modules.
"""

import io
import sys
from pathlib import Path

import pytest
from rich.console import Console

# Add src to path so we can import 'trait_stubs' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from trait_stubs.utils.console import THEME, reset_console, set_console  # noqa: E402

SIMPLE_TRAIT = """trait SimpleT {
    fn f(&self) -> u8 {
        1
    }

    fn g(&self);
}"""

ITER_TRAIT = """trait IterT {
    fn iter(&self) -> impl Iterator<Item = u8>;
    fn opt_iter(&self) -> Option<impl Iterator<Item = u8>>;
}"""

SELF_TRAIT = """trait SelfT {
    fn x(self) -> u8;
    fn y(&mut self) -> u8;
    fn new() -> u8;
}"""


@pytest.fixture
def captured_console():
  """
  Redirects console and log output into a buffer.

  Yields:
      Console: The recording console; use `.file.getvalue()` to read.
  """
  buffer = Console(file=io.StringIO(), width=400, color_system=None, theme=THEME)
  set_console(buffer)
  yield buffer
  reset_console()


@pytest.fixture
def write_rs(tmp_path):
  """Writes a Rust file below `tmp_path` and returns its path."""

  def _write(name: str, content: str) -> Path:
    path = tmp_path / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path

  return _write


@pytest.fixture
def simple_trait() -> str:
  return SIMPLE_TRAIT


@pytest.fixture
def iter_trait() -> str:
  return ITER_TRAIT


@pytest.fixture
def self_trait() -> str:
  return SELF_TRAIT

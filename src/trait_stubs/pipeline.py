"""
File Pipeline.

Glue between source files and the pure transform: find marked traits, parse
each, transform it, render it and splice it back in place of the original.

A definition that fails is left exactly as written and its error recorded;
the other definitions of the file are still rewritten.
"""

from pathlib import Path
from typing import Iterator, List, Optional

from pydantic import BaseModel, Field
from rich.markup import escape

from trait_stubs.backend.render import render_interface
from trait_stubs.config import RuntimeConfig
from trait_stubs.core.engine import transform_interface
from trait_stubs.core.registry import DEFAULT_REGISTRY, KnownShapeRegistry
from trait_stubs.errors import MalformedDefinition
from trait_stubs.frontend.parser import TraitParser
from trait_stubs.scanner import MarkedTrait, find_marked_traits, strip_marker
from trait_stubs.utils.console import log_error, log_info


class StubResult(BaseModel):
  """
  Container for the result of rewriting one source text.
  """

  code: str = Field(default="", description="The rewritten source code.")
  errors: List[str] = Field(default_factory=list, description="One message per definition left untouched.")
  rewritten: List[str] = Field(default_factory=list, description="Names of the traits that were rewritten.")

  @property
  def success(self) -> bool:
    return not self.errors

  @property
  def has_errors(self) -> bool:
    return len(self.errors) > 0


def stub_source(
  text: str,
  config: Optional[RuntimeConfig] = None,
  registry: KnownShapeRegistry = DEFAULT_REGISTRY,
  origin: str = "<string>",
) -> StubResult:
  """
  Rewrites every marked trait of a Rust source text.

  Args:
      text: The file contents.
      config: Runtime configuration, defaults when None.
      registry: Placeholder strategy table.
      origin: Name used in error messages.

  Returns:
      StubResult: The new code, with failing definitions left unchanged.
  """
  cfg = config or RuntimeConfig()
  result = StubResult(code=text)

  try:
    marked = find_marked_traits(text, cfg.marker)
  except MalformedDefinition as e:
    result.errors.append(f"{origin}: {e}")
    log_error(escape(f"{origin}: {e}"))
    return result

  out = []
  cursor = 0
  for found in marked:
    out.append(text[cursor : found.start])
    original = text[found.start : found.end]
    try:
      out.append(_stub_one(text, found, cfg, registry))
      result.rewritten.append(found.name)
      log_info(f"Rewrote trait [code]{found.name}[/code] in [path]{escape(origin)}[/path]")
    except MalformedDefinition as e:
      label = f"trait `{found.name}`" if found.name else "marked item"
      message = f"{origin}: {label}: {e}"
      result.errors.append(message)
      log_error(escape(message))
      out.append(original)
    cursor = found.end
  out.append(text[cursor:])

  result.code = "".join(out)
  return result


def _stub_one(text: str, found: MarkedTrait, config: RuntimeConfig, registry: KnownShapeRegistry) -> str:
  if found.error is not None:
    raise found.error
  trait_text, removed_lines = strip_marker(text, found)
  definition = TraitParser(trait_text, line_offset=found.line - 1 + removed_lines).parse()
  rewritten = transform_interface(
    definition,
    registry=registry,
    macro=config.placeholder_macro,
    cfg_predicate=config.cfg_predicate,
  )
  return render_interface(rewritten, config)


def stub_file(
  path: Path,
  config: Optional[RuntimeConfig] = None,
  registry: KnownShapeRegistry = DEFAULT_REGISTRY,
) -> StubResult:
  """Reads `path` and rewrites its marked traits. Nothing is written."""
  return stub_source(path.read_text(encoding="utf-8"), config, registry, origin=str(path))


def iter_rust_files(path: Path) -> Iterator[Path]:
  """Yields `path` itself, or every `.rs` file below it, sorted, skipping `target/`."""
  if path.is_file():
    yield path
    return
  for candidate in sorted(path.rglob("*.rs")):
    if "target" in candidate.relative_to(path).parts:
      continue
    yield candidate

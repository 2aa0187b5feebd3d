"""
CLI Command Handlers.
"""

import shutil
from pathlib import Path
from typing import Optional

from rich.markup import escape
from rich.table import Table

from trait_stubs.config import RuntimeConfig
from trait_stubs.core.registry import DEFAULT_REGISTRY, KnownShapeRegistry
from trait_stubs.pipeline import iter_rust_files, stub_file
from trait_stubs.utils.console import console, log_error, log_success, log_warning


def handle_rewrite(
  path: Path,
  out: Optional[Path],
  config: RuntimeConfig,
  in_place: bool = False,
  check: bool = False,
  registry: KnownShapeRegistry = DEFAULT_REGISTRY,
) -> int:
  """
  Rewrites the marked traits of a file or directory tree.

  Files containing a definition that could not be rewritten are never
  written. With `out`, every other file is written to the destination, so a
  directory input yields a complete mirror of the tree.

  Args:
      path: Input file or directory.
      out: Output file or directory. When None and not `in_place`, rewritten
          code is printed.
      config: Runtime configuration.
      in_place: Overwrite the inputs.
      check: Only report files that would change.
      registry: Placeholder strategy table.

  Returns:
      int: 0 on success, 1 on errors (or, with `check`, pending changes).
  """
  if not path.exists():
    log_error(f"Path not found: {escape(str(path))}")
    return 1

  failed = False
  changed = []
  for src in iter_rust_files(path):
    result = stub_file(src, config, registry)
    if result.has_errors:
      failed = True
      continue
    if check:
      if result.rewritten:
        changed.append(src)
      continue

    if out is not None:
      dest = _mirror_path(path, out, src)
    elif in_place and result.rewritten:
      dest = src
    elif result.rewritten:
      console.print(result.code, markup=False, highlight=False, soft_wrap=True, end="")
      continue
    else:
      continue

    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(result.code, encoding="utf-8")
    if result.rewritten:
      log_success(f"Wrote [path]{escape(str(dest))}[/path]")

  if out is not None and path.is_dir() and not check:
    _copy_support_files(path, out)

  if check and changed:
    for src in changed:
      log_warning(f"Would rewrite [path]{escape(str(src))}[/path]")
    return 1
  return 1 if failed else 0


def _mirror_path(root: Path, out: Path, src: Path) -> Path:
  return out / src.relative_to(root) if root.is_dir() else out


def _copy_support_files(root: Path, out: Path) -> None:
  """Copies the non-Rust files of `root` (manifests, assets) into the mirror."""
  for src in sorted(root.rglob("*")):
    rel = src.relative_to(root)
    if not src.is_file() or src.suffix == ".rs" or "target" in rel.parts:
      continue
    dest = out / rel
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dest)


def handle_shapes(registry: KnownShapeRegistry = DEFAULT_REGISTRY) -> int:
  """Prints the placeholder strategy table in resolution order."""
  table = Table(title="Placeholder strategies (first match wins)")
  table.add_column("#", justify="right")
  table.add_column("Strategy", style="code")
  table.add_column("Matches")
  for idx, strategy in enumerate(registry.strategies, start=1):
    table.add_row(str(idx), strategy.name, strategy.description)
  console.print(table)
  return 0

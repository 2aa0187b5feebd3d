"""
Main Entry Point for trait-stubs CLI.

This module handles argument parsing and dispatches to the command handlers
defined in `trait_stubs.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich.markup import escape

from trait_stubs import __version__
from trait_stubs.cli import commands
from trait_stubs.config import RuntimeConfig
from trait_stubs.errors import ConfigurationError
from trait_stubs.utils.console import log_error


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="trait-stubs: test-only placeholder bodies for Rust traits")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: REWRITE ---
  cmd_rw = subparsers.add_parser("rewrite", help="Rewrite marked traits in a Rust file or directory")
  cmd_rw.add_argument("path", type=Path, help="Input .rs file or directory")
  destination = cmd_rw.add_mutually_exclusive_group()
  destination.add_argument("--out", type=Path, default=None, help="Output destination (file or dir). Default: stdout")
  destination.add_argument("--in-place", action="store_true", help="Overwrite the input files")
  cmd_rw.add_argument("--check", action="store_true", help="Exit 1 if any file would change; write nothing")
  cmd_rw.add_argument("--marker", default=None, help="Marker attribute name (default: from toml, else test_stubs)")
  cmd_rw.add_argument("--cfg", dest="cfg_predicate", default=None, help="cfg predicate of the test build")
  cmd_rw.add_argument("--macro", dest="placeholder_macro", default=None, help="Placeholder macro: todo|unimplemented")
  cmd_rw.add_argument(
    "--no-allow-lints",
    dest="allow_lints",
    action="store_false",
    default=None,
    help="Do not add #[allow(..)] attributes to test variants",
  )

  # --- Command: SHAPES ---
  subparsers.add_parser("shapes", help="Show the placeholder strategy table")

  args = parser.parse_args(argv)

  if args.command == "shapes":
    return commands.handle_shapes()

  if args.command == "rewrite":
    try:
      config = RuntimeConfig.load(
        marker=args.marker,
        cfg_predicate=args.cfg_predicate,
        placeholder_macro=args.placeholder_macro,
        allow_lints=args.allow_lints,
        search_path=args.path if args.path.is_dir() else args.path.parent,
      )
    except ConfigurationError as e:
      log_error(escape(str(e)))
      return 1
    return commands.handle_rewrite(args.path, args.out, config, in_place=args.in_place, check=args.check)

  return 1


if __name__ == "__main__":
  sys.exit(main())

"""
Main Entry Point for fetcher-wrap CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `fetcher_wrap.cli.commands`.
"""

import argparse
from pathlib import Path
from typing import List, Optional

from fetcher_wrap import __version__
from fetcher_wrap.cli import commands
from fetcher_wrap.utils.console import configure_logging


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="fetcher-wrap: wrap Next.js data-fetching functions")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: WRAP ---
  cmd_wrap = subparsers.add_parser("wrap", help="Rewrite a page module or a directory of pages")
  cmd_wrap.add_argument("path", type=Path, help="Input page module or directory")
  cmd_wrap.add_argument("--out", type=Path, default=None, help="Output destination (file or dir)")
  cmd_wrap.add_argument(
    "--project-dir",
    type=Path,
    default=None,
    help="Project root for relative paths in diagnostics (default: from toml or cwd)",
  )

  # --- Command: SCAN ---
  cmd_scan = subparsers.add_parser("scan", help="Report which data fetchers each page defines")
  cmd_scan.add_argument("path", type=Path, help="Input page module or directory")
  cmd_scan.add_argument("--project-dir", type=Path, default=None, help="Project root for relative paths")

  args = parser.parse_args(argv)
  configure_logging(verbose=args.verbose)

  if args.command == "wrap":
    return commands.handle_wrap(args.path, args.out, args.project_dir)

  if args.command == "scan":
    return commands.handle_scan(args.path, args.project_dir)

  parser.print_help()
  return 1


if __name__ == "__main__":
  raise SystemExit(main())

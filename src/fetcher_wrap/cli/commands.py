"""
CLI Command Handlers.

Implements the ``wrap`` and ``scan`` commands on top of `WrapEngine`.
"""

import sys
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from rich.markup import escape
from rich.table import Table

from fetcher_wrap.config import LoaderConfig
from fetcher_wrap.core.engine import WrapEngine, WrapResult
from fetcher_wrap.core.errors import TemplateError
from fetcher_wrap.utils.console import get_console, log_error, log_info, log_success, log_warning

PAGE_SUFFIXES = (".js", ".jsx", ".ts", ".tsx")
SKIP_DIRS = {"node_modules", ".next", ".git", "dist", "build"}


def iter_page_files(root: Path) -> Iterator[Path]:
  """
  Yields page modules under a directory, sorted, skipping build and vendor folders.

  Args:
      root (Path): Directory to scan.

  Returns:
      Iterator[Path]: Module paths.
  """
  for path in sorted(root.rglob("*")):
    if not path.is_file() or path.suffix not in PAGE_SUFFIXES:
      continue
    if any(part in SKIP_DIRS for part in path.relative_to(root).parts):
      continue
    yield path


def _collect_inputs(input_path: Path) -> Tuple[Path, List[Path]]:
  if input_path.is_file():
    return input_path.parent, [input_path]
  return input_path, list(iter_page_files(input_path))


def handle_wrap(input_path: Path, output_path: Optional[Path], project_dir: Optional[Path]) -> int:
  """
  Handles the 'wrap' command execution.

  Args:
      input_path: Page module or directory of page modules.
      output_path: Destination file (single input) or directory. Single files
          are printed to stdout when omitted.
      project_dir: Project root used for relative paths in diagnostics.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  if not input_path.exists():
    log_error(f"Input not found: {escape(str(input_path))}")
    return 1

  if input_path.is_dir() and not output_path:
    log_error("Directory processing requires --out destination directory.")
    return 1

  config = LoaderConfig.load(project_dir=project_dir, search_path=input_path)
  engine = WrapEngine(config=config)
  base_dir, files = _collect_inputs(input_path)

  if not files:
    log_warning(f"No page modules found in {escape(str(input_path))}")
    return 0

  results: Dict[str, WrapResult] = {}
  for src_file in files:
    try:
      result = engine.run(src_file.read_text(encoding="utf-8"), config.relative_path(src_file))
    except TemplateError as e:
      log_error(f"Wrapper template is broken: {escape(str(e))}")
      return 1
    results[str(src_file.relative_to(base_dir))] = result

    if input_path.is_file():
      if output_path:
        _write(output_path, result.code)
      else:
        sys.stdout.write(result.code)
    else:
      _write(output_path / src_file.relative_to(base_dir), result.code)

  _print_summary(results)
  return 0


def handle_scan(input_path: Path, project_dir: Optional[Path]) -> int:
  """
  Handles the 'scan' command: reports what `wrap` would do, writing nothing.

  Args:
      input_path: Page module or directory.
      project_dir: Project root used for relative paths.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  if not input_path.exists():
    log_error(f"Input not found: {escape(str(input_path))}")
    return 1

  config = LoaderConfig.load(project_dir=project_dir, search_path=input_path)
  engine = WrapEngine(config=config)
  base_dir, files = _collect_inputs(input_path)

  table = Table(title="Data Fetchers")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Renamed", style="green")

  for src_file in files:
    try:
      result = engine.run(src_file.read_text(encoding="utf-8"), config.relative_path(src_file))
    except TemplateError as e:
      log_error(f"Wrapper template is broken: {escape(str(e))}")
      return 1
    status = "wrapped" if result.modified else result.skipped_reason.value
    renamed = ", ".join(f"{name} -> {alias}" for name, alias in result.aliases.items())
    table.add_row(escape(str(src_file.relative_to(base_dir))), status, renamed)

  get_console().print(table)
  return 0


def _write(path: Path, code: str) -> None:
  path.parent.mkdir(parents=True, exist_ok=True)
  path.write_text(code, encoding="utf-8")
  log_info(f"Wrote [path]{escape(str(path))}[/path]")


def _print_summary(results: Dict[str, WrapResult]) -> None:
  """
  Renders a summary of the batch to the console.

  Args:
      results: Mapping of relative file names to results.
  """
  wrapped = sum(1 for r in results.values() if r.modified)
  failed = {name: r for name, r in results.items() if r.errors}

  if not failed:
    log_success(f"Done: {wrapped}/{len(results)} modules wrapped.")
    return

  table = Table(title="Wrap Report")
  table.add_column("File", style="cyan")
  table.add_column("Issues", style="red")
  for name, res in failed.items():
    table.add_row(escape(name), escape("; ".join(res.errors)))

  get_console().print(table)
  get_console().print(f"\n[bold]Summary:[/bold] {wrapped} wrapped, {len(failed)} left unchanged due to errors.")

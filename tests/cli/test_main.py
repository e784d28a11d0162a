"""
Tests for the CLI entry point and command handlers.

Verifies:
1. Argument parsing dispatches to the right handler.
2. ``wrap`` writes single files and mirrors directories.
3. ``scan`` reports without writing.
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from rich.console import Console

from fetcher_wrap.cli.__main__ import main
from fetcher_wrap.cli.commands import iter_page_files
from fetcher_wrap.core.engine import WrapEngine
from fetcher_wrap.utils import console as console_module

PAGE = "export async function getStaticProps() { return { props: {} }; }\n"
PLAIN = "export default function About() { return null; }\n"


@pytest.fixture
def recording_console():
  """Swaps the shared console for a recording one."""
  original = console_module.get_console()
  rec = Console(record=True, width=200)
  console_module.set_console(rec)
  yield rec
  console_module.set_console(original)


def test_wrap_dispatch():
  with patch("fetcher_wrap.cli.commands.handle_wrap", return_value=0) as mock_wrap:
    assert main(["wrap", "pages/index.js", "--out", "out.js"]) == 0

  mock_wrap.assert_called_once_with(Path("pages/index.js"), Path("out.js"), None)


def test_scan_dispatch():
  with patch("fetcher_wrap.cli.commands.handle_scan", return_value=0) as mock_scan:
    assert main(["scan", "pages", "--project-dir", "."]) == 0

  mock_scan.assert_called_once_with(Path("pages"), Path("."))


def test_command_required():
  with pytest.raises(SystemExit):
    main([])


def test_wrap_single_file(tmp_path):
  src = tmp_path / "index.js"
  src.write_text(PAGE, encoding="utf-8")
  out = tmp_path / "out" / "index.js"

  assert main(["wrap", str(src), "--out", str(out), "--project-dir", str(tmp_path)]) == 0

  text = out.read_text(encoding="utf-8")
  assert text.startswith("export async function _getStaticProps()")
  assert "withSentryGetStaticProps(_getStaticProps)" in text


def test_wrap_single_file_to_stdout(tmp_path, capsys):
  """
  Scenario: Wrapping a single file without --out.
  Expectation: stdout holds exactly the rewritten module; diagnostics go to stderr.
  """
  src = tmp_path / "index.js"
  src.write_text(PAGE, encoding="utf-8")

  assert main(["wrap", str(src), "--project-dir", str(tmp_path)]) == 0

  captured = capsys.readouterr()
  assert captured.out == WrapEngine().run(PAGE, "index.js").code
  assert "Done: 1/1 modules wrapped." in captured.err


def test_wrap_directory(tmp_path):
  """
  Scenario: A pages directory with a data-fetching page, a plain page and node_modules.
  Expectation: The output tree mirrors the pages; vendored files are skipped.
  """
  pages = tmp_path / "pages"
  (pages / "blog").mkdir(parents=True)
  (pages / "node_modules").mkdir()
  (pages / "blog" / "[slug].js").write_text(PAGE, encoding="utf-8")
  (pages / "about.js").write_text(PLAIN, encoding="utf-8")
  (pages / "node_modules" / "dep.js").write_text(PAGE, encoding="utf-8")
  out = tmp_path / "out"

  assert main(["wrap", str(pages), "--out", str(out), "--project-dir", str(tmp_path)]) == 0

  assert "_getStaticProps" in (out / "blog" / "[slug].js").read_text(encoding="utf-8")
  assert (out / "about.js").read_text(encoding="utf-8") == PLAIN
  assert not (out / "node_modules").exists()


def test_wrap_directory_requires_out(tmp_path):
  assert main(["wrap", str(tmp_path)]) == 1


def test_wrap_missing_input(tmp_path):
  assert main(["wrap", str(tmp_path / "nope.js")]) == 1


def test_wrap_leaves_broken_page_unchanged(tmp_path, recording_console):
  src = tmp_path / "broken.js"
  broken = "export const getStaticProps = (;\n"
  src.write_text(broken, encoding="utf-8")
  out = tmp_path / "out.js"

  assert main(["wrap", str(src), "--out", str(out), "--project-dir", str(tmp_path)]) == 0

  assert out.read_text(encoding="utf-8") == broken
  assert "left unchanged" in recording_console.export_text()


def test_scan_reports_without_writing(tmp_path, recording_console):
  pages = tmp_path / "pages"
  pages.mkdir()
  (pages / "index.js").write_text(PAGE, encoding="utf-8")
  (pages / "about.js").write_text(PLAIN, encoding="utf-8")

  assert main(["scan", str(pages), "--project-dir", str(tmp_path)]) == 0

  report = recording_console.export_text()
  assert "getStaticProps -> _getStaticProps" in report
  assert "no_data_fetchers" in report
  assert (pages / "index.js").read_text(encoding="utf-8") == PAGE


def test_iter_page_files_sorted(tmp_path):
  for name in ("b.tsx", "a.js", "c.mjs", "notes.md"):
    (tmp_path / name).write_text("", encoding="utf-8")

  assert [p.name for p in iter_page_files(tmp_path)] == ["a.js", "b.tsx"]

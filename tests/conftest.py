"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- A ``parse`` fixture for building trees from snippets.
- Logger isolation so handlers installed by CLI tests do not leak.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add src to path so we can import 'fetcher_wrap' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from fetcher_wrap.core.parser import parse_source  # noqa: E402
from fetcher_wrap.enums import Dialect  # noqa: E402


@pytest.fixture
def parse():
  """Fixture returning a snippet parser (JavaScript unless told otherwise)."""

  def _parse(code: str, dialect: Dialect = Dialect.JAVASCRIPT):
    return parse_source(code, dialect, path="snippet.js")

  return _parse


@pytest.fixture(autouse=True)
def isolate_package_logger():
  """
  Restores the package logger after each test, since `configure_logging`
  (called by the CLI) attaches handlers and changes its level.
  """
  logger = logging.getLogger("fetcher_wrap")
  handlers = list(logger.handlers)
  level = logger.level
  yield
  logger.handlers[:] = handlers
  logger.setLevel(level)

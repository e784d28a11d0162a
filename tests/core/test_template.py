"""
Tests for the template registry and placeholder filling.
"""

import pytest

from fetcher_wrap.core.errors import TemplateError
from fetcher_wrap.core.template import (
  TEMPLATE_FILENAME,
  TRACKED_FUNCTIONS,
  fill_placeholders,
  load_template,
  resolve_template_path,
)


def test_bundled_template_has_every_placeholder():
  path = resolve_template_path()
  assert path.name == TEMPLATE_FILENAME

  text = load_template(path)
  for func in TRACKED_FUNCTIONS:
    assert text.count(func.placeholder) == 1
    assert f"const {func.name} =" in text


def test_load_template_is_cached(tmp_path):
  tpl = tmp_path / "tpl.js"
  tpl.write_text("export {};\n", encoding="utf-8")

  first = load_template(tpl)
  tpl.write_text("changed", encoding="utf-8")
  assert load_template(tpl) is first


def test_load_template_missing_file(tmp_path):
  with pytest.raises(TemplateError, match="Cannot read wrapper template"):
    load_template(tmp_path / "missing.js")


def test_override_path_resolved(tmp_path):
  assert resolve_template_path(tmp_path / "x.js") == (tmp_path / "x.js").resolve()


def test_fill_placeholders():
  code = "const getStaticProps = wrap(__ORIG_GSPROPS__);\n"
  assert fill_placeholders(code, {"getStaticProps": "_getStaticProps"}) == "const getStaticProps = wrap(_getStaticProps);\n"


def test_fill_placeholders_leftover_rejected():
  """
  Scenario: A placeholder survives for a function that has no alias.
  Expectation: TemplateError, since its wrapper should have been deleted.
  """
  with pytest.raises(TemplateError, match="__ORIG_GSSP__"):
    fill_placeholders("wrap(__ORIG_GSSP__);", {})


def test_fill_placeholders_missing_rejected():
  with pytest.raises(TemplateError, match="no placeholder"):
    fill_placeholders("export {};", {"getStaticPaths": "_getStaticPaths"})

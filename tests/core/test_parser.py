"""
Tests for the Parser Adapter.

Verifies:
1. Untouched trees render back byte-for-byte (whitespace, comments, JSX).
2. The grammar is picked per dialect.
3. Syntax errors surface as ParseError carrying a location.
4. Shorthand properties and un-aliased specifiers become two-sided nodes.
"""

import pytest

from fetcher_wrap.core.errors import ParseError
from fetcher_wrap.core.parser import get_parser, parse_source
from fetcher_wrap.enums import Dialect

JS_PAGE = """\
import React from 'react';
// page component
export default function Page({ title }) {
  return <h1 className="title">{title}</h1>;
}

export async function getStaticProps() {
  return { props: { title: 'Hello' } }; /* inline */
}
"""

TS_PAGE = """\
import type { GetStaticProps } from 'next';

type Props = { title: string };

export const getStaticProps: GetStaticProps<Props> = async () => ({ props: { title: 'Hi' } });
"""


def test_js_round_trip_is_lossless():
  """
  Scenario: Parsing a JSX page and rendering it without mutations.
  Expectation: Identical text, including comments and blank lines.
  """
  tree = parse_source(JS_PAGE)
  assert tree.to_source() == JS_PAGE


def test_ts_round_trip_is_lossless():
  """
  Scenario: A TypeScript page parsed with the TypeScript dialect.
  Expectation: Parses and renders verbatim.
  """
  tree = parse_source(TS_PAGE, Dialect.TYPESCRIPT)
  assert tree.to_source() == TS_PAGE


def test_ts_syntax_rejected_by_js_grammar():
  """
  Scenario: Type annotations fed to the JavaScript dialect.
  Expectation: ParseError, proving the dialects use different grammars.
  """
  with pytest.raises(ParseError):
    parse_source(TS_PAGE, Dialect.JAVASCRIPT)


def test_parser_is_cached_per_dialect():
  assert get_parser(Dialect.JAVASCRIPT) is get_parser(Dialect.JAVASCRIPT)
  assert get_parser(Dialect.JAVASCRIPT) is not get_parser(Dialect.TYPESCRIPT)


def test_parse_error_carries_location():
  """
  Scenario: Unbalanced parenthesis.
  Expectation: ParseError whose message starts with the module path and a 1-based position.
  """
  with pytest.raises(ParseError) as exc:
    parse_source("const ok = 1;\nexport const getStaticProps = (;\n", path="pages/broken.js")

  err = exc.value
  assert err.path == "pages/broken.js"
  assert err.line >= 1
  assert err.column >= 1
  assert str(err).startswith(f"pages/broken.js:{err.line}:{err.column}: ")


def test_shorthand_property_becomes_pair():
  """
  Scenario: ``{ gsp }`` object literal.
  Expectation: A synthetic shorthand pair with a key and a value both named gsp.
  """
  tree = parse_source("const o = { gsp };\n")
  pair = next(n for n in tree.walk() if n.kind == "pair")

  assert pair.synthetic and pair.shorthand
  key = tree.child(pair.index, "key")
  value = tree.child(pair.index, "value")
  assert (key.kind, key.name) == ("property_identifier", "gsp")
  assert (value.kind, value.name) == ("identifier", "gsp")
  assert key.start == value.start and key.end == value.end


def test_shorthand_pattern_becomes_pair_pattern():
  tree = parse_source("const { gsp } = ns;\n")
  kinds = [n.kind for n in tree.walk()]
  assert "pair_pattern" in kinds
  assert "shorthand_property_identifier_pattern" not in kinds


def test_plain_specifier_gets_alias_twin():
  """
  Scenario: ``export { a }``.
  Expectation: The specifier holds a ``name`` and an ``alias`` child, both ``a``.
  """
  tree = parse_source("const a = 1;\nexport { a };\n")
  specifier = next(n for n in tree.walk() if n.kind == "export_specifier")

  assert specifier.synthetic
  assert tree.child(specifier.index, "name").name == "a"
  assert tree.child(specifier.index, "alias").name == "a"


def test_aliased_specifier_left_as_is():
  tree = parse_source("import { a as b } from 'x';\n")
  specifier = next(n for n in tree.walk() if n.kind == "import_specifier")

  assert not specifier.synthetic
  assert tree.child(specifier.index, "name").name == "a"
  assert tree.child(specifier.index, "alias").name == "b"

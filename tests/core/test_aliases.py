"""
Tests for the alias allocator.
"""

import pytest

from fetcher_wrap.core.aliases import find_alias


def test_default_prefix(parse):
  tree = parse("export async function getStaticProps() {}\n")
  assert find_alias(tree, "getStaticProps") == "_getStaticProps"


def test_skips_taken_names(parse):
  """
  Scenario: The module already uses ``_getStaticProps`` and ``__getStaticProps``.
  Expectation: The allocator keeps prefixing until the name is free.
  """
  code = "const _getStaticProps = 1;\nconst o = { __getStaticProps: 2 };\nexport function getStaticProps() {}\n"
  tree = parse(code)
  assert find_alias(tree, "getStaticProps") == "___getStaticProps"


def test_custom_prefix(parse):
  tree = parse("const getStaticPaths = 1;\n")
  assert find_alias(tree, "getStaticPaths", prefix="$") == "$getStaticPaths"


def test_does_not_mutate(parse):
  code = "const getStaticProps = 1;\n"
  tree = parse(code)
  first = find_alias(tree, "getStaticProps")

  assert find_alias(tree, "getStaticProps") == first
  assert tree.to_source() == code


def test_empty_prefix_rejected(parse):
  tree = parse("const a = 1;\n")
  with pytest.raises(ValueError):
    find_alias(tree, "a", prefix="")

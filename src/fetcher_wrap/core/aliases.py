"""
Alias Allocator.

Generates a replacement name that does not collide with any identifier in a tree.
"""

from fetcher_wrap.core.query import find_identifiers
from fetcher_wrap.core.tree import SourceTree

DEFAULT_PREFIX = "_"


def find_alias(tree: SourceTree, name: str, prefix: str = DEFAULT_PREFIX) -> str:
  """
  Prepends `prefix` to `name` until the result is not used in `tree`.

  ``getStaticProps`` becomes ``_getStaticProps``, or ``__getStaticProps`` if the
  former is taken, and so on. Each attempt is strictly longer than the last and
  the tree holds finitely many identifiers, so the loop terminates.

  Args:
      tree (SourceTree): The tree the alias must be unique in.
      name (str): The original name.
      prefix (str): Characters prepended on each attempt.

  Returns:
      str: An unused identifier name.
  """
  if not prefix:
    raise ValueError("Alias prefix must be non-empty")

  candidate = prefix + name
  while find_identifiers(tree, candidate):
    candidate = prefix + candidate
  return candidate

"""
Comment Stripper.

Used on the wrapper template only: its comments document the template itself
and mean nothing once spliced into a page module.
"""

from fetcher_wrap.core.tree import COMMENT_KINDS, SourceTree


def strip_comments(tree: SourceTree) -> None:
  """
  Removes every comment from the tree in place.

  Args:
      tree (SourceTree): The tree to clean.
  """
  for node in list(tree.walk()):
    if node.kind in COMMENT_KINDS:
      tree.remove(node.index)

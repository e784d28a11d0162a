"""
Parser Adapter.

Turns source text into a mutable :class:`~fetcher_wrap.core.tree.SourceTree` using
tree-sitter. One grammar is used per dialect, since plain JavaScript and
TypeScript are not supersets of one another for every input (e.g. ``<T>(x)``
is a cast in one and a JSX element in the other):

- ``Dialect.JAVASCRIPT``: ``tree-sitter-javascript`` (JSX included).
- ``Dialect.TYPESCRIPT``: the TSX grammar from ``tree-sitter-typescript``.

While copying the concrete tree into the arena, the builder normalizes the
two-sided shorthand constructs described in :mod:`fetcher_wrap.core.tree`.
"""

import functools
import logging
from typing import Iterator, Optional, Tuple

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node as TSNode, Parser

from fetcher_wrap.core.errors import ParseError
from fetcher_wrap.core.tree import IDENTIFIER_KINDS, SPECIFIER_KINDS, Node, SourceTree
from fetcher_wrap.enums import Dialect

logger = logging.getLogger(__name__)

# Shorthand property tokens and the pair kind they expand to
_SHORTHAND_PROPERTIES = {
  "shorthand_property_identifier": "pair",
  "shorthand_property_identifier_pattern": "pair_pattern",
}


@functools.lru_cache(maxsize=None)
def get_parser(dialect: Dialect) -> Parser:
  """
  Returns the (cached) tree-sitter parser for a dialect.

  Args:
      dialect (Dialect): The syntax dialect.

  Returns:
      Parser: A parser bound to the dialect's grammar.
  """
  if dialect is Dialect.TYPESCRIPT:
    language = Language(tree_sitter_typescript.language_tsx())
  else:
    language = Language(tree_sitter_javascript.language())
  return Parser(language)


def parse_source(code: str, dialect: Dialect = Dialect.JAVASCRIPT, path: Optional[str] = None) -> SourceTree:
  """
  Parses source text into a SourceTree.

  Args:
      code (str): The module source.
      dialect (Dialect): Grammar selector.
      path (Optional[str]): Module path, carried into errors and the tree.

  Returns:
      SourceTree: The mutable tree.

  Raises:
      ParseError: If the grammar reports any syntax error.
  """
  source = code.encode("utf-8")
  ts_tree = get_parser(dialect).parse(source)
  root = ts_tree.root_node

  if root.has_error:
    raise _syntax_error(root, source, path)

  tree = _TreeBuilder(source, path).build(root)
  logger.debug("Parsed %s as %s (%d nodes)", path or "<source>", dialect.value, len(tree))
  return tree


def _iter_children(ts_node: TSNode) -> Iterator[Tuple[Optional[str], TSNode]]:
  cursor = ts_node.walk()
  if not cursor.goto_first_child():
    return
  while True:
    yield cursor.field_name, cursor.node
    if not cursor.goto_next_sibling():
      break


def _syntax_error(root: TSNode, source: bytes, path: Optional[str]) -> ParseError:
  """Builds a ParseError describing the first ERROR or MISSING node."""
  stack = [root]
  while stack:
    ts_node = stack.pop()
    if ts_node.is_missing:
      detail = f"missing {ts_node.type!r}"
    elif ts_node.is_error:
      snippet = source[ts_node.start_byte : ts_node.end_byte][:40].decode("utf-8", errors="replace")
      detail = f"unexpected {snippet!r}"
    else:
      stack.extend(reversed(ts_node.children))
      continue
    row, col = ts_node.start_point
    return ParseError(detail, path=path, line=row + 1, column=col + 1)

  return ParseError("syntax error", path=path)


class _TreeBuilder:
  """Copies a tree-sitter tree into a SourceTree arena."""

  def __init__(self, source: bytes, path: Optional[str]):
    self.tree = SourceTree(source, path)

  def build(self, ts_root: TSNode) -> SourceTree:
    # The root spans the whole buffer so leading/trailing trivia renders verbatim
    root = self.tree.add_node(ts_root.type, 0, len(self.tree.source))
    self.tree.root = root.index

    stack = [(ts_root, root.index)]
    while stack:
      ts_node, index = stack.pop()
      for field_name, ts_child in _iter_children(ts_node):
        child = self._add(ts_child, index, field_name)
        if ts_child.child_count and not child.synthetic:
          stack.append((ts_child, child.index))
      self._pair_specifier(index)

    return self.tree

  def _text(self, start: int, end: int) -> str:
    return self.tree.source[start:end].decode("utf-8")

  def _add(self, ts_node: TSNode, parent: int, field_name: Optional[str]) -> Node:
    kind = ts_node.type
    start, end = ts_node.start_byte, ts_node.end_byte

    if kind in _SHORTHAND_PROPERTIES:
      return self._add_shorthand_property(_SHORTHAND_PROPERTIES[kind], start, end, parent, field_name)

    name = self._text(start, end) if ts_node.is_named and kind in IDENTIFIER_KINDS else None
    return self.tree.add_node(kind, start, end, parent, field_name, named=ts_node.is_named, name=name)

  def _add_shorthand_property(
    self, pair_kind: str, start: int, end: int, parent: int, field_name: Optional[str]
  ) -> Node:
    """
    Expands ``{ x }`` into a synthetic pair whose key and value are both ``x``.
    """
    name = self._text(start, end)
    pair = self.tree.add_node(pair_kind, start, end, parent, field_name)
    pair.synthetic = True
    pair.shorthand = True
    self.tree.add_node("property_identifier", start, end, pair.index, "key", name=name)
    self.tree.add_node("identifier", start, end, pair.index, "value", name=name)
    return pair

  def _pair_specifier(self, index: int) -> None:
    """
    Gives an un-aliased specifier (``import { x }`` / ``export { x }``) an
    explicit ``alias`` twin so both halves can be renamed independently.
    """
    node = self.tree[index]
    if node.kind not in SPECIFIER_KINDS or self.tree.child(index, "alias") is not None:
      return

    name = self.tree.child(index, "name")
    if name is None or not name.is_identifier:
      return

    self.tree.add_node(name.kind, name.start, name.end, index, "alias", name=name.name)
    node.synthetic = True
    node.shorthand = True

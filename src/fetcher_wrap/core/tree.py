"""
Mutable Source Tree.

This module defines the `SourceTree`, an arena of syntax nodes produced by the
parser adapter (see :mod:`fetcher_wrap.core.parser`).

Nodes are addressed by their integer index into the arena. Indices are never
reused or shifted, so a `NodePath` handle stays valid across every mutation the
rewriter performs (renaming identifiers, expanding shorthand properties and
removing statements or list elements).

Rendering is lossless: a node that was not touched is reproduced from the
original source bytes, including whitespace and comments. Only renamed
identifiers, synthetic two-sided nodes and removed nodes differ from the input.

Two-sided constructs
--------------------

Some source tokens play two roles at once:

.. code-block:: javascript

    const obj = { gSSP };          // key + value
    const { gSSP } = ns;           // pattern key + pattern value
    import { gSSP } from 'x';      // imported name + local binding
    export { gSSP };               // local binding + exported name

The builder models each as a *synthetic* node with two identifier children that
span the same token. Synthetic nodes render from the current names of their
children, which is what allows one half to be renamed independently.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

COMMENT_KINDS = frozenset({"comment", "html_comment"})

IDENTIFIER_KINDS = frozenset(
  {
    "identifier",
    "property_identifier",
    "type_identifier",
    "statement_identifier",
  }
)

PAIR_KINDS = frozenset({"pair", "pair_pattern"})
SPECIFIER_KINDS = frozenset({"import_specifier", "export_specifier"})

_BLANKS = frozenset(b" \t")
_LINE_BLANKS = frozenset(b" \t\r")
_CR = 0x0D
_LF = 0x0A


@dataclass
class Node:
  """
  A single syntax node stored in a `SourceTree` arena.

  Attributes:
      index (int): Stable position of the node in the arena.
      kind (str): The grammar node type (e.g. ``identifier``, ``pair``).
      start (int): Byte offset where the node begins in the original source.
      end (int): Byte offset where the node ends in the original source.
      parent (Optional[int]): Index of the parent node (None for the root).
      field_name (Optional[str]): Grammar field under which the node hangs from its parent.
      named (bool): False for anonymous tokens such as ``,`` or ``{``.
      children (List[int]): Child indices in document order.
      name (Optional[str]): Current textual name, for identifier-kind nodes only.
      synthetic (bool): True if the node renders from its children's names.
      shorthand (bool): True while a synthetic node prints as a single name.
      removed (bool): True once the node has been deleted from the tree.
      erase_start (int): Start of the source range dropped with a removed node.
      erase_end (int): End of that range (may cover the whole line and one comma).
  """

  index: int
  kind: str
  start: int
  end: int
  parent: Optional[int] = None
  field_name: Optional[str] = None
  named: bool = True
  children: List[int] = field(default_factory=list)
  name: Optional[str] = None
  synthetic: bool = False
  shorthand: bool = False
  removed: bool = False
  erase_start: int = 0
  erase_end: int = 0

  @property
  def is_identifier(self) -> bool:
    """True for nodes carrying a renameable name."""
    return self.name is not None and self.kind in IDENTIFIER_KINDS


@dataclass(frozen=True)
class NodePath:
  """
  Handle on a node plus its chain of ancestors.

  Paths hold only the arena index, so they are never invalidated by renames or
  removals.
  """

  tree: "SourceTree" = field(repr=False)
  index: int

  @property
  def node(self) -> Node:
    return self.tree[self.index]

  @property
  def parent(self) -> Optional["NodePath"]:
    parent = self.node.parent
    return None if parent is None else NodePath(self.tree, parent)

  @property
  def parent_node(self) -> Optional[Node]:
    parent = self.node.parent
    return None if parent is None else self.tree[parent]

  def ancestors(self) -> Iterator["NodePath"]:
    """Yields the parent, grandparent, ... up to the root."""
    current = self.parent
    while current is not None:
      yield current
      current = current.parent

  def sibling(self, field_name: str) -> Optional[Node]:
    """
    Returns the live child of this node's parent stored under ``field_name``.

    Args:
        field_name (str): Grammar field to look up (e.g. ``name``, ``alias``).

    Returns:
        Optional[Node]: The sibling node, or None.
    """
    parent = self.node.parent
    if parent is None:
      return None
    return self.tree.child(parent, field_name)


class SourceTree:
  """
  Arena-backed syntax tree for one module.

  The tree is created by :func:`fetcher_wrap.core.parser.parse_source`, mutated in
  place by the renamer and the comment stripper, and rendered with `to_source`.
  """

  def __init__(self, source: bytes, path: Optional[str] = None):
    """
    Initializes an empty tree over the given source bytes.

    Args:
        source (bytes): UTF-8 encoded source text.
        path (Optional[str]): Module path, used for diagnostics only (stored as `filename`).
    """
    self.source = source
    self.filename = path
    self.nodes: List[Node] = []
    self.root = 0

  def __getitem__(self, index: int) -> Node:
    return self.nodes[index]

  def __len__(self) -> int:
    return len(self.nodes)

  def add_node(
    self,
    kind: str,
    start: int,
    end: int,
    parent: Optional[int] = None,
    field_name: Optional[str] = None,
    named: bool = True,
    name: Optional[str] = None,
  ) -> Node:
    """
    Appends a node to the arena and links it under its parent.

    Returns:
        Node: The newly created node.
    """
    node = Node(
      index=len(self.nodes),
      kind=kind,
      start=start,
      end=end,
      parent=parent,
      field_name=field_name,
      named=named,
      name=name,
    )
    self.nodes.append(node)
    if parent is not None:
      self.nodes[parent].children.append(node.index)
    return node

  def path(self, index: int) -> NodePath:
    return NodePath(self, index)

  def child(self, index: int, field_name: str) -> Optional[Node]:
    """
    Finds the first live child of a node stored under a grammar field.

    Args:
        index (int): Parent node index.
        field_name (str): Field to look for.

    Returns:
        Optional[Node]: The child node, or None.
    """
    for child_index in self.nodes[index].children:
      child = self.nodes[child_index]
      if child.field_name == field_name and not child.removed:
        return child
    return None

  def walk(self) -> Iterator[Node]:
    """
    Iterates live nodes in document order (pre-order).

    Subtrees of removed nodes are skipped.
    """
    stack = [self.root]
    while stack:
      node = self.nodes[stack.pop()]
      if node.removed:
        continue
      yield node
      stack.extend(reversed(node.children))

  def text(self, index: int) -> str:
    """Returns the original source text covered by a node."""
    node = self.nodes[index]
    return self.source[node.start : node.end].decode("utf-8")

  def rename(self, index: int, name: str) -> None:
    """
    Sets the name of an identifier-kind node.

    Raises:
        ValueError: If the node does not carry a name.
    """
    node = self.nodes[index]
    if not node.is_identifier:
      raise ValueError(f"Node {index} ({node.kind}) is not an identifier")
    node.name = name

  def remove(self, index: int) -> None:
    """
    Deletes a node from the tree.

    A node standing alone on its line(s) takes those lines with it. A node
    inside a comma separated list also takes one adjacent comma (the following
    one when present, otherwise the preceding one). If the node and that comma
    are alone on their line, the line goes too.

    Args:
        index (int): The node to delete.
    """
    node = self.nodes[index]
    if node.removed:
      return

    comma = None if node.kind in COMMENT_KINDS else self._adjacent_comma(node)
    node.removed = True
    node.erase_start, node.erase_end = self._erase_span(node)
    if comma is None:
      return

    comma.removed = True
    lo, hi = self._bounds(node)
    span = self._whole_lines(min(node.start, comma.start), max(node.end, comma.end), lo, hi)
    if span is not None:
      node.erase_start, node.erase_end = span
      comma.erase_start, comma.erase_end = span
    else:
      comma.erase_start = comma.start
      comma.erase_end = self._skip_blanks(comma.end, hi)

  def to_source(self) -> str:
    """
    Renders the tree back to source text.

    Returns:
        str: The module text with every mutation applied.
    """
    out: List[bytes] = []
    stack: List[Union[int, bytes]] = [self.root]

    while stack:
      item = stack.pop()
      if isinstance(item, bytes):
        out.append(item)
        continue

      node = self.nodes[item]
      if node.removed:
        continue
      if node.is_identifier:
        out.append(node.name.encode("utf-8"))
        continue
      if node.synthetic:
        out.append(self._render_synthetic(node))
        continue

      pieces: List[Union[int, bytes]] = []
      cursor = node.start
      for child_index in node.children:
        child = self.nodes[child_index]
        lo, hi = (child.erase_start, child.erase_end) if child.removed else (child.start, child.end)
        if lo > cursor:
          pieces.append(self.source[cursor:lo])
        pieces.append(child_index)
        cursor = max(cursor, hi)
      pieces.append(self.source[cursor : node.end])
      stack.extend(reversed(pieces))

    return b"".join(out).decode("utf-8")

  def _render_synthetic(self, node: Node) -> bytes:
    if node.kind in PAIR_KINDS:
      first = self.child(node.index, "key")
      second = self.child(node.index, "value")
      body = second.name if node.shorthand else f"{first.name}: {second.name}"
    else:
      first = self.child(node.index, "name")
      second = self.child(node.index, "alias")
      body = first.name if first.name == second.name else f"{first.name} as {second.name}"

    prefix = self.source[node.start : first.start]
    suffix = self.source[first.end : node.end]
    return prefix + body.encode("utf-8") + suffix

  def _bounds(self, node: Node) -> Tuple[int, int]:
    if node.parent is None:
      return 0, len(self.source)
    parent = self.nodes[node.parent]
    return parent.start, parent.end

  def _skip_blanks(self, pos: int, limit: int) -> int:
    while pos < limit and self.source[pos] in _BLANKS:
      pos += 1
    return pos

  def _whole_lines(self, start: int, end: int, lo: int, hi: int) -> Optional[Tuple[int, int]]:
    """
    Widens ``[start, end)`` to the full line(s) it occupies, or returns None if
    the range shares a line with other text.

    When the line above is blank, one blank line below is taken too, so that
    removing a block between two blank lines leaves a single blank line.
    """
    while start > lo and self.source[start - 1] in _BLANKS:
      start -= 1
    end = self._skip_blanks(end, hi)

    starts_line = start == 0 or self.source[start - 1] == _LF
    ends_line = end >= len(self.source) or self.source[end] in (_CR, _LF)
    if not (starts_line and ends_line):
      return None

    end = self._skip_newline(end, hi)
    if self._follows_blank_line(start, lo):
      blank_end = self._skip_newline(self._skip_blanks(end, hi), hi)
      if blank_end > end and self.source[blank_end - 1] == _LF:
        end = blank_end
    return start, end

  def _skip_newline(self, pos: int, hi: int) -> int:
    if pos < hi and self.source[pos] == _CR:
      pos += 1
    if pos < hi and self.source[pos] == _LF:
      pos += 1
    return pos

  def _follows_blank_line(self, start: int, lo: int) -> bool:
    if start == 0:
      return True
    pos = start - 2
    while pos >= lo and self.source[pos] in _LINE_BLANKS:
      pos -= 1
    if pos < lo:
      return lo == 0
    return self.source[pos] == _LF

  def _erase_span(self, node: Node) -> Tuple[int, int]:
    lo, hi = self._bounds(node)
    return self._whole_lines(node.start, node.end, lo, hi) or (node.start, node.end)

  def _adjacent_comma(self, node: Node) -> Optional[Node]:
    if node.parent is None:
      return None

    live = [
      self.nodes[i]
      for i in self.nodes[node.parent].children
      if (i == node.index or not self.nodes[i].removed) and self.nodes[i].kind not in COMMENT_KINDS
    ]
    pos = live.index(node)
    for neighbour in live[pos + 1 : pos + 2] + live[max(pos - 1, 0) : pos]:
      if not neighbour.named and neighbour.kind == ",":
        return neighbour
    return None

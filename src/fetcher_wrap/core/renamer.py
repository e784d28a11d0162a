"""
Scope-Aware Renamer.

Renames every occurrence of a module-level name to an alias, except where the
occurrence is a label naming something outside the module (an imported export,
an object key, a member property).

Each occurrence is first classified into an :class:`~fetcher_wrap.enums.OccurrenceRole`
from its parent node and the grammar field it sits in, then dispatched through
a table holding one action per role:

=================  ==========================================================
Role               Action
=================  ==========================================================
IMPORT_LOCAL       rename
IMPORT_EXTERNAL    keep
PATTERN_KEY        keep
PATTERN_VALUE      rename, expand shorthand
LITERAL_KEY        keep
LITERAL_VALUE      rename, expand shorthand
MEMBER_OBJECT      rename
MEMBER_PROPERTY    keep
EXPORT_LOCAL       rename (keep inside a re-export)
EXPORT_EXTERNAL    rename, and queue the specifier's local name for the same alias
                   (keep inside a re-export)
UNCLASSIFIED       rename
=================  ==========================================================

The export case is two-sided. Given ``export { impl as getStaticProps }``, the
exported name must change (the wrapper will take it over) and the local binding
``impl`` must end up with the same alias, so that the specifier collapses to
``export { _getStaticProps }`` and the wrapper can reach the original. Instead of
recursing, the local name is pushed onto the pass's worklist.

A re-export (``export { getStaticProps } from './data'``) binds nothing locally,
so it is left alone; if it is the only occurrence, nothing is renamed and
`rename_identifiers` reports no alias.

Limitation: names are treated as module-level bindings. A nested function that
shadows a tracked name is renamed along with the module-level binding.
"""

import logging
from collections import deque
from typing import Callable, Deque, Dict, Optional, Set

from fetcher_wrap.core.aliases import DEFAULT_PREFIX, find_alias
from fetcher_wrap.core.query import find_identifiers
from fetcher_wrap.core.tree import NodePath, SourceTree
from fetcher_wrap.enums import OccurrenceRole

logger = logging.getLogger(__name__)

# parent kind -> (field of the label half, label role, other role)
_TWO_SIDED_PARENTS = {
  "import_specifier": ("name", OccurrenceRole.IMPORT_EXTERNAL, OccurrenceRole.IMPORT_LOCAL),
  "pair_pattern": ("key", OccurrenceRole.PATTERN_KEY, OccurrenceRole.PATTERN_VALUE),
  "pair": ("key", OccurrenceRole.LITERAL_KEY, OccurrenceRole.LITERAL_VALUE),
  "member_expression": ("property", OccurrenceRole.MEMBER_PROPERTY, OccurrenceRole.MEMBER_OBJECT),
  "export_specifier": ("alias", OccurrenceRole.EXPORT_EXTERNAL, OccurrenceRole.EXPORT_LOCAL),
}


def classify(path: NodePath) -> OccurrenceRole:
  """
  Determines the syntactic role of an identifier occurrence.

  Args:
      path (NodePath): Path to an identifier-kind node.

  Returns:
      OccurrenceRole: The role derived from the immediate parent.
  """
  parent = path.parent_node
  if parent is None or parent.kind not in _TWO_SIDED_PARENTS:
    return OccurrenceRole.UNCLASSIFIED

  label_field, label_role, other_role = _TWO_SIDED_PARENTS[parent.kind]
  return label_role if path.node.field_name == label_field else other_role


def _in_reexport(path: NodePath) -> bool:
  """True if the occurrence sits in ``export { ... } from '...'``."""
  for ancestor in path.ancestors():
    if ancestor.node.kind == "export_statement":
      return path.tree.child(ancestor.index, "source") is not None
  return False


class _RenamePass:
  """
  One rename run: a worklist of names that all map to the same alias.
  """

  def __init__(self, tree: SourceTree, alias: str):
    self.tree = tree
    self.alias = alias
    self.renamed = 0
    self.preserved = 0
    self._queue: Deque[str] = deque()
    self._seen: Set[str] = set()

  def run(self, name: str) -> None:
    self._enqueue(name)
    while self._queue:
      current = self._queue.popleft()
      for path in find_identifiers(self.tree, current):
        _ACTIONS[classify(path)](self, path)

  def _enqueue(self, name: str) -> None:
    if name in self._seen or name == self.alias:
      return
    self._seen.add(name)
    self._queue.append(name)

  def _keep(self, path: NodePath) -> None:
    self.preserved += 1

  def _rename_export_local(self, path: NodePath) -> None:
    if _in_reexport(path):
      self._keep(path)
    else:
      self._rename(path)

  def _rename(self, path: NodePath) -> None:
    self.tree.rename(path.index, self.alias)
    self.renamed += 1

  def _rename_property_value(self, path: NodePath) -> None:
    # key and value no longer match, so the property must print both
    path.parent_node.shorthand = False
    self._rename(path)

  def _rename_exported(self, path: NodePath) -> None:
    if _in_reexport(path):
      self._keep(path)
      return
    local = path.sibling("name")
    if local is not None and local.is_identifier and local.name != path.node.name:
      self._enqueue(local.name)
    self._rename(path)


_ACTIONS: Dict[OccurrenceRole, Callable[[_RenamePass, NodePath], None]] = {
  OccurrenceRole.IMPORT_LOCAL: _RenamePass._rename,
  OccurrenceRole.IMPORT_EXTERNAL: _RenamePass._keep,
  OccurrenceRole.PATTERN_KEY: _RenamePass._keep,
  OccurrenceRole.PATTERN_VALUE: _RenamePass._rename_property_value,
  OccurrenceRole.LITERAL_KEY: _RenamePass._keep,
  OccurrenceRole.LITERAL_VALUE: _RenamePass._rename_property_value,
  OccurrenceRole.MEMBER_OBJECT: _RenamePass._rename,
  OccurrenceRole.MEMBER_PROPERTY: _RenamePass._keep,
  OccurrenceRole.EXPORT_LOCAL: _RenamePass._rename_export_local,
  OccurrenceRole.EXPORT_EXTERNAL: _RenamePass._rename_exported,
  OccurrenceRole.UNCLASSIFIED: _RenamePass._rename,
}

_unhandled = set(OccurrenceRole) - set(_ACTIONS)
if _unhandled:
  raise RuntimeError(f"Renamer has no action for roles: {sorted(r.value for r in _unhandled)}")


def rename_identifiers(
  tree: SourceTree,
  original_name: str,
  alias: Optional[str] = None,
  prefix: str = DEFAULT_PREFIX,
) -> Optional[str]:
  """
  Renames all occurrences of `original_name` that are references or bindings.

  Args:
      tree (SourceTree): The tree to mutate in place.
      original_name (str): The name being replaced.
      alias (Optional[str]): The replacement; allocated with `find_alias` if omitted.
      prefix (str): Prefix used by the allocator.

  Returns:
      Optional[str]: The alias used, or None if no occurrence was renamed (the
      name is absent, or only appears as labels such as `lib.name` or object keys).
  """
  if not find_identifiers(tree, original_name):
    return None

  alias = alias or find_alias(tree, original_name, prefix)
  rename_pass = _RenamePass(tree, alias)
  rename_pass.run(original_name)

  logger.debug(
    "Renamed %s -> %s in %s (%d renamed, %d preserved)",
    original_name,
    alias,
    tree.filename or "<source>",
    rename_pass.renamed,
    rename_pass.preserved,
  )
  return alias if rename_pass.renamed else None

"""
Node Query Layer.

Pure structural searches over a SourceTree. Each function returns node paths in
document order and never mutates the tree.
"""

from typing import List

from fetcher_wrap.core.tree import NodePath, SourceTree

DECLARATION_KINDS = frozenset({"lexical_declaration", "variable_declaration"})


def find_identifiers(tree: SourceTree, name: str) -> List[NodePath]:
  """
  Finds every identifier-kind node whose name equals `name`, regardless of the
  role it plays (binding, reference, property key, import label...).

  Args:
      tree (SourceTree): The tree to search.
      name (str): The identifier name.

  Returns:
      List[NodePath]: Matching occurrences.
  """
  return [tree.path(node.index) for node in tree.walk() if node.is_identifier and node.name == name]


def find_single_binding_declarations(tree: SourceTree, name: str) -> List[NodePath]:
  """
  Finds ``const``/``let``/``var`` declarations that bind exactly one plain
  identifier named `name`.

  ``const a = 1, b = 2`` and destructuring declarations never match.

  Args:
      tree (SourceTree): The tree to search.
      name (str): The bound name.

  Returns:
      List[NodePath]: Matching declaration statements.
  """
  matches = []
  for node in tree.walk():
    if node.kind not in DECLARATION_KINDS:
      continue

    declarators = [tree[i] for i in node.children if tree[i].kind == "variable_declarator" and not tree[i].removed]
    if len(declarators) != 1:
      continue

    bound = tree.child(declarators[0].index, "name")
    if bound is not None and bound.is_identifier and bound.name == name:
      matches.append(tree.path(node.index))
  return matches


def find_exported_as(tree: SourceTree, name: str) -> List[NodePath]:
  """
  Finds export specifiers whose exported (externally visible) name is `name`,
  whatever their local name.

  Args:
      tree (SourceTree): The tree to search.
      name (str): The exported name.

  Returns:
      List[NodePath]: Matching ``export_specifier`` nodes.
  """
  matches = []
  for node in tree.walk():
    if node.kind != "export_specifier":
      continue
    exported = tree.child(node.index, "alias") or tree.child(node.index, "name")
    if exported is not None and exported.is_identifier and exported.name == name:
      matches.append(tree.path(node.index))
  return matches

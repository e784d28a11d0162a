"""
Orchestration Engine for Data-Fetcher Wrapping.

This module provides the `WrapEngine`, the driver that turns a page module into
a page module whose data-fetching functions are wrapped.

The pipeline for one module:

1.  **Pre-filter**: if none of the tracked names occurs anywhere in the text
    (even as a substring), return it unchanged without parsing.
2.  **Dialect gate**: CommonJS modules are returned unchanged.
3.  **Parse**: the page (grammar picked from its extension) and the template
    (always JavaScript). A page that fails to parse is returned unchanged and
    a single warning is logged; the surrounding build carries on.
4.  **Normalize template**: strip the template's comments.
5.  **Per-name pass**: for each tracked function, either rename it in the page
    and record its alias, or, when no occurrence gets renamed (absent, or only
    used as a label such as `lib.getStaticProps`), delete its wrapper
    (declaration and export specifier) from the template.
6.  **Render** both trees.
7.  **Splice**: fill the template's placeholders with the recorded aliases.
8.  **Concatenate**: page, separator, template.

Only step 3 recovers from errors. A malformed template raises `TemplateError`.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field
from rich.markup import escape

from fetcher_wrap.config import LoaderConfig
from fetcher_wrap.core.comments import strip_comments
from fetcher_wrap.core.errors import ParseError, TemplateError
from fetcher_wrap.core.module_format import is_esm
from fetcher_wrap.core.parser import parse_source
from fetcher_wrap.core.query import find_exported_as, find_single_binding_declarations
from fetcher_wrap.core.renamer import rename_identifiers
from fetcher_wrap.core.template import (
  TRACKED_FUNCTIONS,
  fill_placeholders,
  load_template,
  resolve_template_path,
)
from fetcher_wrap.core.tree import SourceTree
from fetcher_wrap.enums import Dialect, SkipReason
from fetcher_wrap.utils.console import log_warning

logger = logging.getLogger(__name__)


class WrapResult(BaseModel):
  """
  Structured result of rewriting a single module.
  """

  code: str = Field(default="", description="The module text to hand back to the build.")
  aliases: Dict[str, str] = Field(
    default_factory=dict, description="Tracked function name -> alias given to the user's original."
  )
  skipped_reason: Optional[SkipReason] = Field(None, description="Why the module was passed through, if it was.")
  errors: List[str] = Field(default_factory=list, description="Diagnostics recorded while rewriting.")

  @property
  def modified(self) -> bool:
    """
    Returns True if the module was rewritten.

    Returns:
        bool: True if no skip reason was recorded.
    """
    return self.skipped_reason is None


def mentions_tracked_function(code: str) -> bool:
  """
  Cheap substring test used as the pre-filter.

  May report false positives (a name inside a comment or a longer identifier);
  the tree-based pass sorts those out.

  Args:
      code (str): Raw module text.

  Returns:
      bool: True if any tracked name occurs in the text.
  """
  return any(func.name in code for func in TRACKED_FUNCTIONS)


def delete_wrapper(template_tree: SourceTree, name: str) -> None:
  """
  Removes a tracked function's export specifier(s) and declaration(s) from the
  template tree.

  A declaration written as ``export const name = ...`` takes its export
  statement with it.

  Args:
      template_tree (SourceTree): The template tree to mutate.
      name (str): The tracked function name.
  """
  for path in find_exported_as(template_tree, name):
    template_tree.remove(path.index)

  for path in find_single_binding_declarations(template_tree, name):
    parent = path.parent_node
    if parent is not None and parent.kind == "export_statement":
      template_tree.remove(parent.index)
    else:
      template_tree.remove(path.index)


class WrapEngine:
  """
  The main rewrite unit.

  An engine holds configuration only; every call to `run` builds its own
  trees and alias map, so one engine can serve any number of modules.
  """

  def __init__(self, config: Optional[LoaderConfig] = None, template_code: Optional[str] = None):
    """
    Initializes the Engine.

    Args:
        config (Optional[LoaderConfig]): Runtime configuration. Defaults are used if None.
        template_code (Optional[str]): Template text, bypassing the template file.
    """
    self.config = config or LoaderConfig()
    self._template_code = template_code

  @property
  def template_path(self) -> Path:
    return resolve_template_path(self.config.template_path)

  @property
  def template_code(self) -> str:
    """The wrapper template text (read once per process per path)."""
    if self._template_code is not None:
      return self._template_code
    return load_template(self.template_path)

  def parse_template(self) -> SourceTree:
    """
    Parses a private copy of the template.

    Raises:
        TemplateError: If the template text is not valid JavaScript.
    """
    try:
      return parse_source(self.template_code, Dialect.JAVASCRIPT, path=str(self.template_path))
    except ParseError as e:
      raise TemplateError(f"Wrapper template does not parse: {e}") from e

  def wrap_functions(self, user_tree: SourceTree, template_tree: SourceTree) -> Dict[str, str]:
    """
    Runs the per-name pass over both trees.

    Args:
        user_tree (SourceTree): The page module; tracked names are renamed in place.
        template_tree (SourceTree): The template; unused wrappers are deleted in place.

    Returns:
        Dict[str, str]: Tracked function name -> alias, for the functions found.
    """
    aliases: Dict[str, str] = {}
    for func in TRACKED_FUNCTIONS:
      # None when the name only occurs as labels (`lib.getStaticProps`, object keys)
      alias = rename_identifiers(user_tree, func.name, prefix=self.config.alias_prefix)
      if alias:
        aliases[func.name] = alias
      else:
        delete_wrapper(template_tree, func.name)
    return aliases

  def rewrite(self, user_code: str, filepath: Union[str, Path]) -> Tuple[str, Dict[str, str]]:
    """
    Parses, renames, splices and concatenates. No gating, no error recovery.

    Args:
        user_code (str): The page module text.
        filepath (Union[str, Path]): Module path (picks the dialect, labels errors).

    Returns:
        Tuple[str, Dict[str, str]]: The final module text and the alias map.

    Raises:
        ParseError: If the page does not parse.
        TemplateError: If the template breaks its contract.
    """
    user_tree = parse_source(user_code, Dialect.from_path(filepath), path=str(filepath))
    template_tree = self.parse_template()
    strip_comments(template_tree)

    aliases = self.wrap_functions(user_tree, template_tree)

    modified_user_code = user_tree.to_source()
    injected_code = fill_placeholders(template_tree.to_source(), aliases)

    return f"{modified_user_code}{self.config.separator}{injected_code}", aliases

  def run(self, user_code: str, filepath: Union[str, Path]) -> WrapResult:
    """
    Executes the full pipeline with pass-through fallbacks.

    Args:
        user_code (str): The page module text.
        filepath (Union[str, Path]): Module path, relative to the project for nicer diagnostics.

    Returns:
        WrapResult: The module text (rewritten or untouched) plus what happened.
    """
    if not mentions_tracked_function(user_code):
      return WrapResult(code=user_code, skipped_reason=SkipReason.NO_DATA_FETCHERS)

    if not is_esm(user_code):
      logger.debug("Skipping %s: not an ES module", filepath)
      return WrapResult(code=user_code, skipped_reason=SkipReason.NOT_ESM)

    try:
      code, aliases = self.rewrite(user_code, filepath)
    except ParseError as err:
      message = f"Couldn't wrap data fetchers in {filepath} because there was a parsing error: {err}"
      log_warning(escape(message))
      return WrapResult(code=user_code, skipped_reason=SkipReason.PARSE_ERROR, errors=[message])

    logger.debug("Wrapped %s in %s", ", ".join(f"{k} -> {v}" for k, v in aliases.items()) or "nothing", filepath)
    return WrapResult(code=code, aliases=aliases)


def wrap_data_fetchers(user_code: str, filepath: Union[str, Path], config: Optional[LoaderConfig] = None) -> str:
  """
  Convenience wrapper returning only the rewritten text.

  Args:
      user_code (str): The page module text.
      filepath (Union[str, Path]): The module path.
      config (Optional[LoaderConfig]): Runtime configuration.

  Returns:
      str: The rewritten module, or `user_code` unchanged.
  """
  return WrapEngine(config=config).run(user_code, filepath).code

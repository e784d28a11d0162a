"""
Runtime Configuration Store.

Settings for the data-fetcher loader, resolved from explicit arguments and the
``[tool.fetcher_wrap]`` table of the nearest ``pyproject.toml``.
"""

import re
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

_JS_IDENTIFIER_PREFIX = re.compile(r"^[_$a-zA-Z][_$a-zA-Z0-9]*$")


class LoaderConfig(BaseModel):
  """
  Configuration container for the wrap engine and loader.
  """

  project_dir: Path = Field(default_factory=Path.cwd, description="Root that module paths are reported relative to.")
  template_path: Optional[Path] = Field(None, description="Override for the bundled wrapper template.")
  alias_prefix: str = Field("_", description="Characters prepended to a function name to build its alias.")
  separator: str = Field("\n", description="Text placed between the user module and the wrapper template.")

  @field_validator("alias_prefix")
  @classmethod
  def validate_alias_prefix(cls, v: str) -> str:
    """
    Ensures prefixed names remain valid JavaScript identifiers.

    Args:
        v (str): The configured prefix.

    Returns:
        str: The prefix, unchanged.

    Raises:
        ValueError: If the prefix is empty or not identifier-shaped.
    """
    if not _JS_IDENTIFIER_PREFIX.match(v):
      raise ValueError(f"Invalid alias prefix: '{v}'. Expected identifier characters such as '_' or '$'.")
    return v

  def relative_path(self, path: Path) -> str:
    """
    Formats a module path relative to the project directory for diagnostics.

    Args:
        path (Path): The module path.

    Returns:
        str: The relative path, or the path unchanged if it lies outside the project.
    """
    try:
      return str(Path(path).resolve().relative_to(self.project_dir.resolve()))
    except ValueError:
      return str(path)

  @classmethod
  def load(
    cls,
    project_dir: Optional[Path] = None,
    template_path: Optional[Path] = None,
    alias_prefix: Optional[str] = None,
    search_path: Optional[Path] = None,
  ) -> "LoaderConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        project_dir (Optional[Path]): Override for the project root.
        template_path (Optional[Path]): Override for the template file.
        alias_prefix (Optional[str]): Override for the alias prefix.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        LoaderConfig: The fully resolved configuration object.
    """
    start_dir = search_path or project_dir or Path.cwd()
    toml_config, toml_dir = _load_toml_settings(start_dir)

    final_project = project_dir or toml_dir or Path.cwd()

    final_template = template_path
    if final_template is None and "template_path" in toml_config:
      final_template = Path(toml_config["template_path"])
      if toml_dir and not final_template.is_absolute():
        final_template = (toml_dir / final_template).resolve()

    values: Dict[str, Any] = {
      "project_dir": final_project,
      "template_path": final_template,
      "alias_prefix": alias_prefix or toml_config.get("alias_prefix", "_"),
    }
    if "separator" in toml_config:
      values["separator"] = toml_config["separator"]

    return cls(**values)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches the start directory and its parents for 'pyproject.toml' and
  extracts the ``[tool.fetcher_wrap]`` table.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = Path(start_path).resolve()
  if current.is_file():
    current = current.parent

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      with open(toml_path, "rb") as f:
        data = tomllib.load(f)
      return data.get("tool", {}).get("fetcher_wrap", {}), parent

  return {}, None

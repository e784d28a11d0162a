"""
Wrapper Template Registry.

Holds the tracked data-fetching functions, locates and caches the bundled
template text, and fills the template's placeholders once the page's functions
have been renamed.

Template contract
-----------------

For every tracked function the template contains:

- one single-binding declaration named after the function, whose initializer
  references the function's placeholder exactly once;
- one export specifier exporting that declaration under the same name.

Deleting both for one function must leave a valid module for the others.
"""

import functools
from dataclasses import dataclass
from importlib.resources import files
from pathlib import Path
from typing import Dict, Optional, Tuple

from fetcher_wrap.core.errors import TemplateError

TEMPLATE_FILENAME = "data_fetchers_template.js"


@dataclass(frozen=True)
class TrackedFunction:
  """
  A module-level binding the loader wraps.

  Attributes:
      name (str): The exported function name Next.js looks for.
      placeholder (str): Token standing in for the renamed original in the template.
  """

  name: str
  placeholder: str


TRACKED_FUNCTIONS: Tuple[TrackedFunction, ...] = (
  TrackedFunction("getServerSideProps", "__ORIG_GSSP__"),
  TrackedFunction("getStaticProps", "__ORIG_GSPROPS__"),
  TrackedFunction("getStaticPaths", "__ORIG_GSPATHS__"),
)


def resolve_template_path(override: Optional[Path] = None) -> Path:
  """
  Locates the wrapper template.

  Prefers an explicit override, then the copy next to this package (source
  checkouts and editable installs), then package resources.

  Args:
      override (Optional[Path]): A user-supplied template file.

  Returns:
      Path: The absolute path of the template.
  """
  if override is not None:
    return Path(override).resolve()

  local_path = Path(__file__).parent.parent / "templates" / TEMPLATE_FILENAME
  if local_path.exists():
    return local_path

  return Path(str(files("fetcher_wrap.templates") / TEMPLATE_FILENAME))


@functools.lru_cache(maxsize=None)
def load_template(path: Path) -> str:
  """
  Reads template text, once per path per process.

  Only the text is cached; every rewrite parses its own tree from it.

  Args:
      path (Path): Template location.

  Returns:
      str: The template source.

  Raises:
      TemplateError: If the file cannot be read.
  """
  try:
    return path.read_text(encoding="utf-8")
  except OSError as e:
    raise TemplateError(f"Cannot read wrapper template {path}: {e}") from e


def fill_placeholders(template_code: str, aliases: Dict[str, str]) -> str:
  """
  Substitutes each recorded alias for its function's placeholder.

  Functions without an alias must already have had their wrapper deleted, so
  their placeholder must no longer occur.

  Args:
      template_code (str): Rendered template text.
      aliases (Dict[str, str]): Function name -> alias of the renamed original.

  Returns:
      str: The template with every remaining placeholder filled.

  Raises:
      TemplateError: If a placeholder is missing for a recorded alias, or one
          survives for a function that was not found.
  """
  for func in TRACKED_FUNCTIONS:
    alias = aliases.get(func.name)
    present = func.placeholder in template_code

    if alias is None:
      if present:
        raise TemplateError(f"Placeholder {func.placeholder} left behind after removing the {func.name} wrapper")
      continue

    if not present:
      raise TemplateError(f"Template has no placeholder {func.placeholder} for {func.name}")
    template_code = template_code.replace(func.placeholder, alias)

  return template_code

"""
Enumerations for fetcher_wrap.

This module defines the closed sets of values shared across the codebase:
source dialects, occurrence roles used by the renamer, and the reasons a
module can be passed through unchanged.
"""

import re
from enum import Enum
from pathlib import Path
from typing import Union

_TYPESCRIPT_PATH = re.compile(r"\.tsx?$")


class Dialect(str, Enum):
  """
  Syntax dialect used to select a grammar.

  JSX is accepted by both grammars; TypeScript files are parsed with the TSX
  grammar so that annotated page components parse as well.
  """

  JAVASCRIPT = "javascript"
  TYPESCRIPT = "typescript"

  @classmethod
  def from_path(cls, path: Union[str, Path]) -> "Dialect":
    """
    Picks the dialect from a module path's extension.

    Args:
        path: The module path (e.g. ``pages/index.tsx``).

    Returns:
        Dialect: TYPESCRIPT for ``.ts``/``.tsx`` files, JAVASCRIPT otherwise.
    """
    return cls.TYPESCRIPT if _TYPESCRIPT_PATH.search(str(path)) else cls.JAVASCRIPT


class OccurrenceRole(str, Enum):
  """
  Syntactic role of one occurrence of a name, derived from its parent node.

  Each role maps to exactly one action in the renamer's dispatch table.
  """

  IMPORT_LOCAL = "import_local"  # import { x as <here> }
  IMPORT_EXTERNAL = "import_external"  # import { <here> as y }
  PATTERN_KEY = "pattern_key"  # const { <here>: y } = z
  PATTERN_VALUE = "pattern_value"  # const { x: <here> } = z
  LITERAL_KEY = "literal_key"  # { <here>: y }
  LITERAL_VALUE = "literal_value"  # { x: <here> }
  MEMBER_OBJECT = "member_object"  # <here>.y
  MEMBER_PROPERTY = "member_property"  # x.<here>
  EXPORT_LOCAL = "export_local"  # export { <here> as y }
  EXPORT_EXTERNAL = "export_external"  # export { x as <here> }
  UNCLASSIFIED = "unclassified"


class SkipReason(str, Enum):
  """
  Reasons the driver returns a module unchanged.
  """

  NO_DATA_FETCHERS = "no_data_fetchers"
  NOT_ESM = "not_esm"
  PARSE_ERROR = "parse_error"

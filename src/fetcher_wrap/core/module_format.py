"""
Module Format Detection.

The rewrite appends an ``export { ... }`` block, which is only legal in an ES
module. CommonJS pages are passed through untouched.

The patterns follow the ones used by the ``is-module`` / ``js-module-formats``
packages: an ``import`` or ``export`` keyword at the start of a statement,
after comments have been removed.
"""

import re

_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_LINE_COMMENT = re.compile(r"(^|[^:\\])//[^\n]*")

_IMPORT_EXPORT = re.compile(
  r"(?:^\s*|[}{();,\n]\s*)"
  r"(import\s+['\"]"
  r"|(?:import|module)\s+[^\"'()\n;]+\s+from\s+['\"]"
  r"|export\s+(?:\*|\{|default|function|var|const|let|[_$a-zA-Z\u00C0-\uFFFF][_$a-zA-Z0-9\u00C0-\uFFFF]*))"
)


def strip_js_comments(code: str) -> str:
  """
  Removes block and line comments from JavaScript text.

  This is a heuristic (comment markers inside string literals are not
  recognised) and is only meant for format sniffing.

  Args:
      code (str): JavaScript source.

  Returns:
      str: The source without comments.
  """
  code = _BLOCK_COMMENT.sub("", code)
  return _LINE_COMMENT.sub(r"\1", code)


def is_esm(code: str) -> bool:
  """
  Checks whether source text is written as an ES module.

  Args:
      code (str): The module source.

  Returns:
      bool: True if an import/export statement is present.
  """
  return _IMPORT_EXPORT.search(strip_js_comments(code)) is not None

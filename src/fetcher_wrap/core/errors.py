"""
Error Types.

Two kinds of failure exist in the rewrite pipeline:

1.  **ParseError**: the user's module does not conform to the selected dialect's
    grammar. This is a property of arbitrary input and is recovered from by
    returning the module unchanged.
2.  **TemplateError**: the bundled wrapper template (or the engine itself) broke
    an internal invariant. There is no correct fallback text, so it propagates.
"""

from typing import Optional


class FetcherWrapError(Exception):
  """Base class for all errors raised by fetcher_wrap."""


class ParseError(FetcherWrapError):
  """
  Raised when source text cannot be parsed by the selected grammar.

  Attributes:
      path (Optional[str]): The module being parsed, if known.
      line (int): 1-based line of the first syntax error.
      column (int): 1-based column of the first syntax error.
      detail (str): Description of the offending construct.
  """

  def __init__(self, detail: str, path: Optional[str] = None, line: int = 0, column: int = 0):
    self.path = path
    self.line = line
    self.column = column
    self.detail = detail
    location = f"{path or '<source>'}:{line}:{column}"
    super().__init__(f"{location}: {detail}")


class TemplateError(FetcherWrapError):
  """
  Raised when the wrapper template does not satisfy its structural contract
  (missing placeholder, leftover placeholder, unparseable template text).
  """

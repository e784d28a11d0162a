"""
Central Logging and Console Utilities.

This module routes the package's diagnostics through the Python standard
`logging` library, formatted by `rich`.

- ``log_info`` / ``log_success`` / ``log_warning`` / ``log_error`` emit through
  standard logging, so library users (and pytest's ``caplog``) see every
  diagnostic without any handler setup.
- ``configure_logging`` attaches a `RichHandler` bound to the shared console.
  It is called by the CLI; library code never installs handlers itself.
- The console can be swapped (``set_console``) to capture output, e.g. in tests.

Attributes:
    console (Console): The active Rich Console (bound to stderr).
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

logger = logging.getLogger("fetcher_wrap")

# Between INFO and WARNING
SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

_THEME = Theme(
  {
    "logging.level.success": "green",
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "bold blue",
    "code": "bold magenta",
  }
)

# Diagnostics go to stderr; stdout carries module text only
console = Console(theme=_THEME, stderr=True)


def set_console(new_console: Console) -> None:
  """
  Replaces the shared console and re-binds the logging handler to it.

  Args:
      new_console (Console): The configured Rich console to use globally.
  """
  global console
  console = new_console
  if any(isinstance(h, RichHandler) for h in logger.handlers):
    configure_logging()


def get_console() -> Console:
  """
  Retrieves the currently active console.

  Returns:
      Console: The active Rich Console.
  """
  return console


def configure_logging(level: int = logging.INFO, verbose: Optional[bool] = None) -> None:
  """
  Attaches a RichHandler for the package logger, replacing any previous one.

  Args:
      level (int): Minimum level to display.
      verbose (Optional[bool]): If True, forces DEBUG level.
  """
  for handler in list(logger.handlers):
    if isinstance(handler, RichHandler):
      logger.removeHandler(handler)

  rich_handler = RichHandler(
    console=console,
    show_time=False,
    omit_repeated_times=False,
    show_path=False,
    markup=True,
    rich_tracebacks=True,
  )
  logger.setLevel(logging.DEBUG if verbose else level)
  logger.addHandler(rich_handler)


def log_info(msg: str) -> None:
  """
  Logs an informational message.

  Args:
      msg (str): The message content. Can include rich markup like [bold].
  """
  logger.info(msg, extra={"markup": True})


def log_success(msg: str) -> None:
  """
  Logs a success message.

  Args:
      msg (str): The message content.
  """
  logger.log(SUCCESS_LEVEL_NUM, msg, extra={"markup": True})


def log_warning(msg: str) -> None:
  """
  Logs a warning message.

  Args:
      msg (str): The message content.
  """
  logger.warning(msg, extra={"markup": True})


def log_error(msg: str) -> None:
  """
  Logs an error message.

  Args:
      msg (str): The message content.
  """
  logger.error(msg, extra={"markup": True})

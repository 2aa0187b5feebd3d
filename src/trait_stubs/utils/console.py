"""
Central Logging and Console Utilities.

Output goes through the standard `logging` library, rendered by `rich`.

The console is held behind a proxy so the destination (stdout, a file, an
in-memory buffer in tests) can be swapped at runtime with `set_console`
while modules keep importing the same `console` object.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Between INFO (20) and WARNING (30).
SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

logger = logging.getLogger("trait_stubs")

THEME = Theme(
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


class _ConsoleProxy:
  """
  Forwards to a swappable `rich.console.Console` backend.

  Swapping the backend also re-targets the package logger's `RichHandler`.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=THEME)
    self._configure_logging()

  def set_backend(self, new_console: Console) -> None:
    self._backend = new_console
    self._configure_logging()

  def reset(self) -> None:
    self.set_backend(Console(theme=THEME))

  @property
  def backend(self) -> Console:
    return self._backend

  def _configure_logging(self) -> None:
    for handler in list(logger.handlers):
      if isinstance(handler, RichHandler):
        logger.removeHandler(handler)

    logger.addHandler(
      RichHandler(
        console=self._backend,
        show_time=False,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
      )
    )
    logger.setLevel(logging.INFO)
    logger.propagate = False

  def print(self, *args: Any, **kwargs: Any) -> None:
    self._backend.print(*args, **kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Injects a console instance for both printing and logging.

  Args:
      new_console (Console): The configured Rich console to use.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  console.reset()


def log_info(msg: str) -> None:
  logger.info(msg, extra={"markup": True})


def log_success(msg: str) -> None:
  logger.log(SUCCESS_LEVEL_NUM, msg, extra={"markup": True})


def log_warning(msg: str) -> None:
  logger.warning(msg, extra={"markup": True})


def log_error(msg: str) -> None:
  logger.error(msg, extra={"markup": True})

"""
Build-Tool Loader Entry Point.

Adapts the engine to the shape of a bundler loader: the build tool hands over a
module's raw text along with a context object (the module's path, the loader
options, and a callback used to register extra files the output depends on).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from fetcher_wrap.config import LoaderConfig
from fetcher_wrap.core.engine import WrapEngine, mentions_tracked_function


def _ignore_dependency(path: str) -> None:
  return None


@dataclass
class LoaderContext:
  """
  What the build tool passes to the loader for one module.

  Attributes:
      resource_path (Path): Absolute path of the module being loaded.
      options (Dict[str, Any]): Loader options; ``projectDir`` is required,
          ``templatePath`` and ``aliasPrefix`` are optional.
      add_dependency (Callable[[str], None]): Registers a file whose changes
          must trigger a rebuild of this module.
  """

  resource_path: Path
  options: Dict[str, Any] = field(default_factory=dict)
  add_dependency: Callable[[str], None] = _ignore_dependency

  def to_config(self) -> LoaderConfig:
    """
    Builds the engine configuration from the loader options.

    Returns:
        LoaderConfig: The resolved configuration.
    """
    template = self.options.get("templatePath")
    return LoaderConfig.load(
      project_dir=Path(self.options["projectDir"]),
      template_path=Path(template) if template else None,
      alias_prefix=self.options.get("aliasPrefix"),
    )


def data_fetchers_loader(context: LoaderContext, user_code: str, engine: Optional[WrapEngine] = None) -> str:
  """
  Wraps ``getServerSideProps``, ``getStaticProps`` and ``getStaticPaths`` (if
  present) in the given page code.

  Args:
      context (LoaderContext): Module path, options and dependency callback.
      user_code (str): The page module text.
      engine (Optional[WrapEngine]): Pre-built engine; one is built from the options if None.

  Returns:
      str: The module text to emit.
  """
  if not mentions_tracked_function(user_code):
    return user_code

  engine = engine or WrapEngine(config=context.to_config())

  # so watch mode rebuilds pages when the template changes
  context.add_dependency(str(engine.template_path))

  filepath = engine.config.relative_path(context.resource_path)
  return engine.run(user_code, filepath).code

"""
fetcher-wrap Package.

A source-to-source rewriter that wraps a Next.js page's data-fetching functions
(``getServerSideProps``, ``getStaticProps``, ``getStaticPaths``).

The page's own functions are renamed out of the way (``getStaticProps`` becomes
``_getStaticProps``) with a rename pass that leaves external labels alone
(imported names, object keys, member properties), and a template exporting
wrapped versions under the original names is appended to the module.

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import fetcher_wrap
    code = "export async function getStaticProps() { return { props: {} } }"
    print(fetcher_wrap.wrap_data_fetchers(code, "pages/index.js"))

Advanced Usage (Engine)
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from fetcher_wrap import LoaderConfig, WrapEngine

    engine = WrapEngine(config=LoaderConfig(alias_prefix="$"))
    res = engine.run(code, "pages/index.tsx")
    if res.modified:
        print(res.aliases)
"""

from fetcher_wrap.config import LoaderConfig
from fetcher_wrap.core.engine import WrapEngine, WrapResult, wrap_data_fetchers
from fetcher_wrap.core.errors import FetcherWrapError, ParseError, TemplateError

__version__ = "0.1.0"

__all__ = [
  "FetcherWrapError",
  "LoaderConfig",
  "ParseError",
  "TemplateError",
  "WrapEngine",
  "WrapResult",
  "wrap_data_fetchers",
  "__version__",
]

"""Build navigable static documentation sites from Asciidoctor sources.

This package exposes the CLI entry points used by the ``adocsite`` console
script to render a source tree, inject the shared navigation, and validate
the links of the generated site.

Exports
-------
- ``app``: Cyclopts application entry.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from adocsite import main
>>> main()  # doctest: +SKIP
>>> from adocsite import app
>>> callable(app)
True
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]

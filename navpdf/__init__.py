"""Print built documentation sites as navigation-shaped PDF documents.

This package exposes the CLI entry point used after a static site build to
render one PDF per page, one per section, and one for the whole navigation
tree, plus the ``pdfs.json`` index that maps each page to its documents.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from navpdf import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]

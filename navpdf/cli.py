"""Cyclopts CLI entrypoint for printing a built documentation site to PDF.

The ``navpdf`` console script reads the site configuration, checks the build
gate, and runs the generation pipeline over the site build directory. It is
meant to run right after the static site build, locally or in CI, where the
``BUILD_PDF`` environment variable can switch generation off (``0``) or force
it on (``1``) regardless of the ``auto_build`` option.

Examples
--------
Generate every configured PDF:

>>> from navpdf.cli import main
>>> main()  # doctest: +SKIP

Generate from a different build directory and keep the debug HTML files:

>>> from navpdf.cli import app
>>> app(
...     ["generate", "--build-dir", "site/build", "--keep-debug-htmls"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import os
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import BUILD_GATE_ENV
from .config import load_site_config
from .logging_config import setup_logging
from .pipeline import generate_pdf_files

DEFAULT_CONFIG = Path("navpdf.yaml")

logger = logging.getLogger(__name__)

app = App(name="navpdf", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def should_build(auto_build: bool, gate: str | None = None) -> bool:  # noqa: FBT001
    """Return whether PDFs should be generated for this run.

    Parameters
    ----------
    auto_build : bool
        Value of the ``auto_build`` option.
    gate : str, optional
        Value of the ``BUILD_PDF`` environment variable; read from the
        environment when ``None``.

    Examples
    --------
    >>> should_build(True, "0")
    False
    >>> should_build(False, "1")
    True
    >>> should_build(True, "")
    True
    """
    value = os.environ.get(BUILD_GATE_ENV, "") if gate is None else gate
    if value.startswith("1"):
        return True
    return auto_build and not value.startswith("0")


@app.command(help="Print the built documentation site to PDF documents.")
def generate(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to the navpdf config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    build_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the site build directory", env_var="INPUT_BUILD_DIR"),
    ] = None,
    keep_debug_htmls: typ.Annotated[
        bool,
        Parameter(
            help="Keep the combined HTML next to each PDF",
            env_var="INPUT_KEEP_DEBUG_HTMLS",
        ),
    ] = False,
    log_level: typ.Annotated[
        str, Parameter(help="Logging level", env_var="INPUT_LOG_LEVEL")
    ] = "INFO",
) -> None:
    """Generate PDFs for every configured version and sidebar.

    Parameters
    ----------
    config : Path, optional
        Path to the ``navpdf.yaml`` configuration file (overridable via
        ``INPUT_CONFIG``).
    build_dir : Path or None, optional
        Site build directory overriding ``site.build_dir``.
    keep_debug_htmls : bool, optional
        Keep the final combined HTML of each document for inspection.
    log_level : str, optional
        Name of the logging level, ``INFO`` by default.

    Raises
    ------
    NavPdfError
        Propagated from the pipeline; any failure aborts the run.
    """
    setup_logging(log_level)
    site_config = load_site_config(config, build_dir=build_dir)
    if keep_debug_htmls:
        site_config.options = dc.replace(site_config.options, keep_debug_htmls=True)

    if not should_build(site_config.options.auto_build):
        logger.info("PDF generation disabled (auto_build off or %s=0)", BUILD_GATE_ENV)
        return

    result = generate_pdf_files(site_config)
    for path in result.written:
        print(f"wrote {_format_path(path)}")
    print(f"wrote {_format_path(result.index_path)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the `navpdf` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()

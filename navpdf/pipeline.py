"""Generate every configured PDF for a built documentation site.

The pipeline validates the build directory, serves it locally, launches one
headless Chromium, then walks and composes each sidebar of each selected
version in turn. Documents are produced strictly one after another; a failure
anywhere aborts the run.

Example
-------
>>> from pathlib import Path
>>> from navpdf.config import load_site_config
>>> from navpdf.pipeline import generate_pdf_files
>>> site = load_site_config(Path("navpdf.yaml"))  # doctest: +SKIP
>>> result = generate_pdf_files(site)  # doctest: +SKIP
>>> result.index_path  # doctest: +SKIP
PosixPath('build/pdfs.json')
"""

from __future__ import annotations

import contextlib
import dataclasses as dc
import logging
import shutil
import typing as typ

from playwright.sync_api import sync_playwright

from .errors import ConfigurationError
from .generator.page_generator import DocumentComposer
from .generator.renderer import PlaywrightRenderer
from .generator.tree_walker import TreeWalker
from .naming import GenerationContext
from .navigation import build_sidebar_tree
from .pdf_index import UrlToDocumentIndex
from .server import StaticSiteServer

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .config import SiteConfig, VersionConfig
    from .generator.renderer import PdfRenderer

logger = logging.getLogger(__name__)

REQUIRED_BUILD_FILES = ("index.html", "404.html")
BROWSER_ARGS = ("--no-sandbox", "--disable-setuid-sandbox", "--disable-web-security")


@dc.dataclass(slots=True)
class GenerationResult:
    """Files written by one generation run."""

    written: list[Path]
    index_path: Path


def validate_build_dir(build_dir: Path) -> None:
    """Ensure ``build_dir`` looks like a finished site build.

    Raises
    ------
    ConfigurationError
        If the directory or one of its required files is missing.
    """
    for name in REQUIRED_BUILD_FILES:
        if not (build_dir / name).is_file():
            msg = (
                f"No valid site build found in '{build_dir}' ({name} is missing). "
                "Build the site before generating PDFs."
            )
            raise ConfigurationError(msg)


def prepare_pdf_dir(build_dir: Path, pdf_dir: str) -> Path:
    """Empty and recreate the PDF output directory below ``build_dir``."""
    target = build_dir / pdf_dir
    logger.info("Clean pdf build folder '%s'", target)
    if target.exists():
        shutil.rmtree(target)
    target.mkdir(parents=True)
    return target


@contextlib.contextmanager
def _launch_renderer(origin: str) -> cabc.Iterator[PdfRenderer]:
    with sync_playwright() as playwright:
        browser = playwright.chromium.launch(headless=True, args=list(BROWSER_ARGS))
        try:
            yield PlaywrightRenderer(browser, origin=origin)
        finally:
            browser.close()


def generate_pdf_files(
    site: SiteConfig, *, renderer: PdfRenderer | None = None
) -> GenerationResult:
    """Generate the PDFs of every selected version and sidebar of ``site``.

    Parameters
    ----------
    site : SiteConfig
        Loaded site configuration.
    renderer : PdfRenderer, optional
        Print engine to use instead of launching headless Chromium.

    Returns
    -------
    GenerationResult
        The merged PDF paths in generation order and the ``pdfs.json`` path.
    """
    validate_build_dir(site.build_dir)
    pdf_root = prepare_pdf_dir(site.build_dir, site.options.pdf_dir)
    index = UrlToDocumentIndex()
    written: list[Path] = []

    with StaticSiteServer(
        site.build_dir,
        base_url=site.base_url,
        extra_paths=site.options.use_extra_paths,
    ) as server, contextlib.ExitStack() as stack:
        if renderer is None:
            renderer = stack.enter_context(_launch_renderer(server.site_address))
        single_version = len(site.versions) == 1
        for version in site.selected_versions():
            logger.info("Processing version '%s'", version.label)
            version_label = version.label
            if single_version and site.options.product_version:
                version_label = site.options.product_version
            written.extend(
                _generate_version(
                    site,
                    version,
                    renderer,
                    origin=server.origin,
                    pdf_root=pdf_root,
                    version_label=version_label,
                    index=index,
                )
            )

    index_path = index.write(site.build_dir)
    logger.info("PDF generation finished")
    return GenerationResult(written=written, index_path=index_path)


def _generate_version(
    site: SiteConfig,
    version: VersionConfig,
    renderer: PdfRenderer,
    *,
    origin: str,
    pdf_root: Path,
    version_label: str,
    index: UrlToDocumentIndex,
) -> list[Path]:
    options = site.options
    sidebar_names = options.sidebar_names or list(version.sidebars)
    walker = TreeWalker(site, version, origin=origin)
    written: list[Path] = []
    for position, sidebar_name in enumerate(sidebar_names):
        if sidebar_name not in version.sidebars:
            logger.info(
                "Sidebar '%s' doesn't exist in version '%s', continue without it",
                sidebar_name,
                version.label,
            )
            continue
        logger.info(
            "Start processing sidebar named '%s' in version '%s'",
            sidebar_name,
            version.label,
        )
        subfolder = options.subfolder_for(position)
        pdf_path = "/".join(
            part for part in (options.pdf_dir, version.path, subfolder) if part
        )
        build_dir = pdf_root.joinpath(*[p for p in (version.path, subfolder) if p])
        build_dir.mkdir(parents=True, exist_ok=True)

        root = build_sidebar_tree(version, sidebar_name, project_name=site.project_name)
        walked = walker.walk(root)
        ctx = GenerationContext()
        composer = DocumentComposer(
            site,
            version,
            renderer,
            ctx=ctx,
            build_dir=build_dir,
            pdf_path=pdf_path,
            product_title=options.product_title_for(position),
            version_label=version_label,
        )
        _, composed = composer.compose(walked)
        index.add_tree(composed)
        written.extend(ctx.written)
    return written


__all__ = [
    "GenerationResult",
    "generate_pdf_files",
    "prepare_pdf_dir",
    "validate_build_dir",
]

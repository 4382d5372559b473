"""Print HTML to PDF, extract PDF text, and merge PDF files.

The composer only talks to the :class:`PdfRenderer` protocol, so tests can
substitute an in-memory double while production uses headless Chromium via
Playwright and pypdf for text extraction and merging.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PyPdfError

from navpdf.errors import MergeFailure

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from playwright.sync_api import Browser

logger = logging.getLogger(__name__)

PAGE_FORMAT = "A4"


@dc.dataclass(slots=True)
class PrintRequest:
    """Everything the print engine needs to produce one PDF."""

    html: str
    output: Path
    margins: dict[str, str]
    header_template: str = "<span />"
    footer_template: str = "<span />"
    timeout: int = 30_000


class PdfRenderer(typ.Protocol):
    """Print engine used to render, read back, and merge PDF files."""

    def render_pdf(self, request: PrintRequest) -> Path:
        """Print ``request.html`` to ``request.output`` and return the path."""
        ...

    def extract_text(self, pdf_path: Path) -> str:
        """Return the plain text of every page of ``pdf_path``."""
        ...

    def merge_pdfs(self, sources: cabc.Sequence[Path], output: Path) -> Path:
        """Concatenate ``sources`` into ``output`` and return the path."""
        ...


def extract_pdf_text(pdf_path: Path) -> str:
    """Return the text of each page of ``pdf_path`` separated by blank lines."""
    reader = PdfReader(str(pdf_path))
    return "\n\n".join(page.extract_text() or "" for page in reader.pages)


def merge_pdf_files(sources: cabc.Sequence[Path], output: Path) -> Path:
    """Write the pages of ``sources``, in order, into ``output``.

    Raises
    ------
    MergeFailure
        If a source cannot be read or the merged file cannot be written. No
        partial ``output`` is left behind.
    """
    writer = PdfWriter()
    try:
        for source in sources:
            writer.append(str(source))
        with output.open("wb") as handle:
            writer.write(handle)
    except (OSError, PyPdfError) as exc:
        names = ", ".join(str(source) for source in sources)
        output.unlink(missing_ok=True)
        msg = f"Could not merge {names} into {output}: {exc}"
        raise MergeFailure(msg) from exc
    finally:
        writer.close()
    return output


class PlaywrightRenderer:
    """Render PDFs with a shared headless Chromium instance.

    A fresh page is opened for every document so state from one document
    (scripts, styles, scroll position) never leaks into the next. The page is
    first pointed at the local site server so relative asset URLs resolve.
    """

    def __init__(self, browser: Browser, *, origin: str) -> None:
        self.browser = browser
        self.origin = origin

    def render_pdf(self, request: PrintRequest) -> Path:
        """Print ``request.html`` with the configured headers, footers, and margins."""
        page = self.browser.new_page()
        try:
            page.goto(self.origin, timeout=request.timeout)
            page.set_content(request.html, timeout=request.timeout)
            page.pdf(
                path=str(request.output),
                format=PAGE_FORMAT,
                display_header_footer=True,
                header_template=request.header_template,
                footer_template=request.footer_template,
                print_background=True,
                margin=request.margins,
                scale=1,
            )
        finally:
            page.close()
        logger.debug("Printed %s", request.output)
        return request.output

    def extract_text(self, pdf_path: Path) -> str:
        """Return the text layer of ``pdf_path``."""
        return extract_pdf_text(pdf_path)

    def merge_pdfs(self, sources: cabc.Sequence[Path], output: Path) -> Path:
        """Merge ``sources`` into ``output``."""
        return merge_pdf_files(sources, output)


__all__ = [
    "PAGE_FORMAT",
    "PdfRenderer",
    "PlaywrightRenderer",
    "PrintRequest",
    "extract_pdf_text",
    "merge_pdf_files",
]

r"""Resolve table-of-contents page numbers from a rendered PDF's text.

Print engines do not report where an element ends up after pagination. The
only signal available is the text of an already paginated render, so the
composer renders each document twice: once with placeholder page numbers,
then again after this module has located every heading in the extracted text.

Pages are delimited by the page footer line, whose text the caller templates
and therefore describes with a regular expression. The print engine extracts
the page header as the line right above it, so both go together. Headings are
searched page by page, never moving backwards; a heading that cannot be found
reuses the page of the previous match so numbers never decrease.

Example
-------
>>> import re
>>> text = "Contents\nIntro_\nDemo\nF 1/2\n1  Intro\nbody\nDemo\nF 2/2"
>>> resolve_page_numbers(["Intro"], text, re.compile(r"F \d+/\d+")).numbers
[2]
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from navpdf._constants import CONTENTS_HEADING, PAGE_NUMBER_PLACEHOLDER, PAGE_NUMBER_SPAN
from navpdf.generator.models import TocReconciliationMiss

if typ.TYPE_CHECKING:
    import collections.abc as cabc

_ZERO_WIDTH_PATTERN = re.compile(r"[\u200b-\u200d\ufeff]")
_WHITESPACE_CHAR = re.compile(r"\s")
_LINE_BREAK_TOLERANT_SPACE = r"(?:\s|\s\n)"

_HEADING_TEMPLATES = (
    r"^\d+\s{{2}}{heading}{space}?$",
    r"^\d+\.\d+\s{{2}}{heading}{space}?$",
    r"^\d+\.\d+\.\d+\s{{2}}{heading}{space}?$",
    r"^{heading}$",
)


@dc.dataclass(slots=True)
class PageResolution:
    """Resolved 1-based page numbers, one per heading, plus misses."""

    numbers: list[int]
    misses: list[TocReconciliationMiss] = dc.field(default_factory=list)


def normalize_heading(text: str) -> str:
    """Drop zero-width characters from already decoded heading ``text``."""
    return _ZERO_WIDTH_PATTERN.sub("", text)


def heading_patterns(heading: str) -> list[re.Pattern[str]]:
    """Return the numbered and unnumbered line patterns for ``heading``.

    Patterns are tried in order: ``1  Heading``, ``1.2  Heading``,
    ``1.2.3  Heading``, then an exact ``Heading`` line. Every whitespace
    character of the heading also matches a space followed by a line break, so
    headings the print engine wrapped still match.
    """
    tokens = _WHITESPACE_CHAR.split(heading)
    escaped = _LINE_BREAK_TOLERANT_SPACE.join(re.escape(token) for token in tokens)
    return [
        re.compile(
            template.format(heading=escaped, space=_LINE_BREAK_TOLERANT_SPACE),
            re.MULTILINE,
        )
        for template in _HEADING_TEMPLATES
    ]


def split_pages(text: str, page_delimiter: re.Pattern[str]) -> list[str]:
    """Split extracted text into physical pages without their header/footer.

    Each ``page_delimiter`` match ends a page; the match and the line right
    above it (the page header) are left out of every page.
    """
    header_footer = re.compile(
        rf"(?:[^\n]*\n)?(?:{page_delimiter.pattern})", page_delimiter.flags
    )
    pages: list[str] = []
    cursor = 0
    for match in header_footer.finditer(text):
        if match.end() == match.start():
            continue
        pages.append(text[cursor : match.start()])
        cursor = match.end()
    pages.append(text[cursor:])
    return pages


def _strip_toc_lines(pages: list[str], entry_count: int) -> list[str]:
    """Blank the Contents heading and the TOC entry lines that follow it.

    The table of contents repeats every heading text, so its lines would
    otherwise match before the headings in the body do. Only the first
    ``Contents`` line is considered; text before it is kept.
    """
    remaining: int | None = None
    stripped: list[str] = []
    for page in pages:
        kept: list[str] = []
        for line in page.split("\n"):
            visible = line.replace(PAGE_NUMBER_PLACEHOLDER, "").strip()
            if remaining is None and visible == CONTENTS_HEADING:
                remaining = entry_count
                continue
            if remaining and visible:
                remaining -= 1
                continue
            kept.append(line)
        stripped.append("\n".join(kept))
    return stripped


def resolve_page_numbers(
    headings: cabc.Sequence[str],
    text: str,
    page_delimiter: re.Pattern[str],
) -> PageResolution:
    """Locate every heading in the paginated text and return its page number.

    Parameters
    ----------
    headings : Sequence[str]
        TOC heading texts in document order, as visible text (entities
        already decoded).
    text : str
        Plain text extracted from the first render of the document.
    page_delimiter : re.Pattern[str]
        Pattern matching the page header/footer text that ends each page.

    Returns
    -------
    PageResolution
        One 1-based page number per heading. Headings that cannot be located
        reuse the previous heading's page (page 1 for the first heading) and
        are reported in ``misses``; the search cursor does not move for them.
    """
    pages = _strip_toc_lines(split_pages(text, page_delimiter), len(headings))
    resolution = PageResolution(numbers=[])
    page_index = 0
    last_page_index = 0
    for position, heading in enumerate(headings):
        patterns = heading_patterns(normalize_heading(heading))
        found = False
        while page_index < len(pages):
            page = pages[page_index]
            if any(pattern.search(page) for pattern in patterns):
                found = True
                break
            page_index += 1
        if found:
            last_page_index = page_index
            resolution.numbers.append(page_index + 1)
            continue
        fallback = last_page_index + 1
        resolution.numbers.append(fallback)
        resolution.misses.append(
            TocReconciliationMiss(index=position, heading=heading, fallback_page=fallback)
        )
        page_index = last_page_index
    return resolution


def apply_page_numbers(html_content: str, numbers: cabc.Iterable[int]) -> str:
    """Replace placeholder page numbers in ``html_content``, first to last."""
    placeholder = PAGE_NUMBER_SPAN.format(value=PAGE_NUMBER_PLACEHOLDER)
    for number in numbers:
        html_content = html_content.replace(
            placeholder, PAGE_NUMBER_SPAN.format(value=number), 1
        )
    return html_content


__all__ = [
    "PageResolution",
    "apply_page_numbers",
    "heading_patterns",
    "normalize_heading",
    "resolve_page_numbers",
    "split_pages",
]

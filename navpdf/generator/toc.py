"""Combine article bodies and synthesize a paginated table of contents.

The table of contents lists every level 1 to 3 heading of the combined body
in document order. Each entry ends with a dotted leader and a placeholder
page number that the reconciler replaces after a first render.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from html import escape

from bs4 import BeautifulSoup, Tag

from navpdf._constants import (
    CHROME_SELECTORS,
    CONTENTS_HEADING,
    PAGE_NUMBER_PLACEHOLDER,
    PAGE_NUMBER_SPAN,
    TOC_HEADING_SELECTORS,
)
from navpdf.generator.models import TocEntry
from navpdf.naming import slugify

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from navpdf.generator.models import Article

_ZERO_WIDTH_PATTERN = re.compile(r"[\u200b-\u200d\ufeff]")
_WHITESPACE_PATTERN = re.compile(r"\s+")


@dc.dataclass(slots=True)
class TableOfContents:
    """Rendered TOC markup, its entries, and the body it was built from."""

    html: str
    entries: list[TocEntry]
    body_html: str


def combine_articles(
    articles: cabc.Sequence[Article], ignored_ids: cabc.Collection[str]
) -> str:
    """Concatenate article bodies, skipping ignored pages in merged documents.

    A page listed in ``ignored_ids`` still produces its own single-page
    document; it is only left out when ``articles`` holds more than one page.
    """
    merged = len(articles) > 1
    return "".join(
        article.html
        for article in articles
        if not (merged and article.node_id in ignored_ids)
    )


def clean_body(html: str, ignore_selectors: cabc.Iterable[str] = ()) -> str:
    """Strip site chrome from combined article HTML.

    Removes ``<header>`` wrappers (keeping their content), blanks visible
    ``#`` hash-link glyphs while keeping the links, and drops elements matching
    ``ignore_selectors`` plus breadcrumbs, version badges, and mobile TOCs.
    """
    soup = BeautifulSoup(html, "html.parser")
    for header in soup.find_all("header"):
        header.unwrap()
    for link in soup.find_all("a"):
        if link.string is not None and link.string.strip() == "#":
            link.string = " "
    for selector in (*ignore_selectors, *CHROME_SELECTORS):
        for element in soup.select(selector):
            element.decompose()
    return str(soup)


def build_table_of_contents(body_html: str) -> TableOfContents:
    """Return the TOC markup and entries for level 1 to 3 headings of ``body_html``.

    Headings without an ``id`` receive a unique one so every entry can link to
    its target; the returned ``body_html`` carries those ids.
    """
    soup = BeautifulSoup(body_html, "html.parser")
    headings = [h for h in soup.select(TOC_HEADING_SELECTORS) if isinstance(h, Tag)]
    used = {str(tag["id"]) for tag in soup.find_all(id=True)}
    entries: list[TocEntry] = []
    for heading in headings:
        text = heading_text(heading)
        anchor = heading.get("id")
        if not anchor:
            anchor = _unique_anchor(slugify(text) or "heading", used)
            heading["id"] = anchor
        entries.append(TocEntry(text=text, anchor=str(anchor), level=int(heading.name[1])))
    return TableOfContents(
        html=render_toc(entries), entries=entries, body_html=str(soup)
    )


def heading_text(heading: Tag) -> str:
    """Return the visible text of a heading without hash-link glyphs."""
    parts: list[str] = []
    for piece in heading.find_all(string=True):
        parent = piece.parent
        if isinstance(parent, Tag) and parent.name == "a" and "hash-link" in (
            parent.get("class") or []
        ):
            continue
        parts.append(str(piece))
    text = _ZERO_WIDTH_PATTERN.sub("", "".join(parts))
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


def render_toc(entries: cabc.Sequence[TocEntry]) -> str:
    """Render nested ``toc-headings`` lists with placeholder page numbers."""
    parts = [f'<h1 class="ignoreCounter">{CONTENTS_HEADING}</h1>']
    stack: list[int] = []
    for entry in entries:
        while stack and stack[-1] > entry.level:
            parts.append("</li></ul>")
            stack.pop()
        if stack and stack[-1] == entry.level:
            parts.append("</li>")
        else:
            parts.append('<ul class="toc-headings">')
            stack.append(entry.level)
        page = PAGE_NUMBER_SPAN.format(value=PAGE_NUMBER_PLACEHOLDER)
        parts.append(
            f'<li><a href="#{escape(entry.anchor, quote=True)}">'
            f"<span>{escape(entry.text)}</span>"
            f'<span class="dotLeader"></span>{page}</a>'
        )
    while stack:
        parts.append("</li></ul>")
        stack.pop()
    return "".join(parts)


def _unique_anchor(base: str, used: set[str]) -> str:
    """Return a unique anchor, appending numeric suffixes and mutating ``used``."""
    candidate = base
    suffix = 2
    while candidate in used:
        candidate = f"{base}-{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


__all__ = [
    "TableOfContents",
    "build_table_of_contents",
    "clean_body",
    "combine_articles",
    "heading_text",
    "render_toc",
]

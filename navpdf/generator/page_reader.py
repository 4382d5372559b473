"""Read rendered site pages and cut out the parts that go into a PDF.

Every function here works on raw HTML strings with regular expressions; the
site build's markup is stable enough that a full parse is not needed until
documents are composed.
"""

from __future__ import annotations

import re
import typing as typ
from pathlib import Path

from navpdf._constants import CONTENT_MARKER, FOOTER_MARKER, TITLE_SEPARATOR
from navpdf.errors import AssetDiscoveryError, MissingContentFileError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

ARTICLE_PATTERN = re.compile(r"<article>.*</article>", re.DOTALL)
H1_PATTERN = re.compile(r"(<h1(?:\s[^>]*)?>)(.*?)(</h1>)", re.DOTALL)
LAZY_LOADING_PATTERN = re.compile(r'loading="lazy"')
STYLESHEET_PATTERN = re.compile(r'href="?([^"<>\s]*styles[^"<>\s]*?\.css)"?')
SCRIPT_PATTERN = re.compile(r'src="?([^"<>\s]*styles[^"<>\s]*?\.js)"?')


def resolve_html_path(build_dir: Path, permalink: str, base_url: str) -> Path:
    """Return the HTML file the site build wrote for ``permalink``.

    Parameters
    ----------
    build_dir : Path
        Root of the static site build.
    permalink : str
        Page URL path including the site base URL.
    base_url : str
        Site base URL, stripped from the permalink before joining.

    Raises
    ------
    MissingContentFileError
        If neither ``<path>/index.html`` nor ``<path>.html`` exists.
    """
    relative = permalink
    if relative.startswith(base_url):
        relative = relative[len(base_url) :]
    relative = relative.strip("/")
    page_dir = build_dir / relative if relative else build_dir
    candidates = [page_dir / "index.html"]
    if relative:
        candidates.append(build_dir / f"{relative}.html")
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    msg = f"Could not find the rendered page for '{permalink}' at '{candidates[0]}'."
    raise MissingContentFileError(msg, path=str(candidates[0]))


def extract_article(html: str) -> str:
    """Return the main article body of a rendered page.

    The article is narrowed to the markdown content region when the content
    marker exists and precedes the article footer. Lazy images are switched
    to eager loading so the print engine sees them.
    """
    body = ""
    match = ARTICLE_PATTERN.search(html)
    if match:
        body = match.group(0)
        content_pos = body.find(CONTENT_MARKER)
        footer_pos = body.find(FOOTER_MARKER)
        if content_pos > 0 and footer_pos > content_pos:
            body = body[content_pos:footer_pos]
    return LAZY_LOADING_PATTERN.sub('loading="eager"', body)


def prefix_title(html: str, parent_titles: cabc.Sequence[str]) -> str:
    """Prefix the first level-1 heading with the ancestor breadcrumb.

    The synthetic root label (``parent_titles[0]``) is never shown, and pages
    without a level-1 heading are returned unchanged.
    """
    match = H1_PATTERN.search(html)
    if not match or len(parent_titles) < 2:
        return html
    breadcrumb = TITLE_SEPARATOR.join(parent_titles[1:])
    title = f"{breadcrumb}{TITLE_SEPARATOR}{match.group(2)}"
    replaced = f"{match.group(1)}{title}{match.group(3)}"
    return html[: match.start()] + replaced + html[match.end() :]


def _asset_url(origin: str, file_path: str) -> str:
    if file_path.startswith(("http://", "https://")):
        return file_path
    return f"{origin.rstrip('/')}/{file_path.lstrip('/')}"


def discover_stylesheet(html: str, origin: str) -> str:
    """Return the absolute URL of the site's main stylesheet.

    Raises
    ------
    AssetDiscoveryError
        If no ``styles*.css`` reference exists in ``html``.
    """
    match = STYLESHEET_PATTERN.search(html)
    if not match or not match.group(1):
        msg = "The href attribute of the 'styles*.css' file could not be found!"
        raise AssetDiscoveryError(msg)
    return _asset_url(origin, match.group(1))


def discover_script(html: str, origin: str) -> str:
    """Return the absolute URL of the site's script bundle, or ``""``."""
    match = SCRIPT_PATTERN.search(html)
    if not match or not match.group(1):
        return ""
    return _asset_url(origin, match.group(1))


__all__ = [
    "discover_script",
    "discover_stylesheet",
    "extract_article",
    "prefix_title",
    "resolve_html_path",
]

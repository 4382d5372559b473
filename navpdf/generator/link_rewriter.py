"""Helpers for rewriting site-relative links to absolute public URLs."""

from __future__ import annotations

import typing as typ

from bs4 import BeautifulSoup

if typ.TYPE_CHECKING:
    from navpdf.config import SiteConfig, VersionConfig

_KEEP_PREFIXES = ("http", "mailto:", "tel:", "data:", "javascript:")


def _build_link_rewriter(site: SiteConfig, version: VersionConfig) -> AbsoluteLinkRewriter:
    """Return an AbsoluteLinkRewriter configured for pages of ``version``."""
    version_segment = "" if version.is_last else version.path
    return AbsoluteLinkRewriter(
        site.url, site.base_url, site.route_base_path, version_segment
    )


class AbsoluteLinkRewriter:
    """Rewrite links in extracted page HTML so they work outside the site.

    Merged PDFs lose the page they were extracted from, so every link that
    relies on the page's location is turned into an absolute URL on the
    public site. In-page anchors stay untouched because they may point at
    any heading of the combined document.
    """

    def __init__(
        self, site_url: str, base_url: str, route_base_path: str, version_path: str
    ) -> None:
        self.site_url = site_url.rstrip("/")
        self.base_url = base_url
        self.route_base_path = route_base_path.strip("/")
        self.version_path = version_path.strip("/")

    def rewrite_html(self, html: str) -> str:
        """Rewrite every anchor ``href`` in ``html`` that needs an absolute URL."""
        soup = BeautifulSoup(html, "html.parser")
        for element in soup.find_all("a", href=True):
            rewritten = self._rewrite(str(element["href"]))
            if rewritten:
                element["href"] = rewritten
        return str(soup)

    def _rewrite(self, target: str | None) -> str | None:
        """Return the absolute URL for ``target``, or None when it stays as is."""
        if not target:
            return None

        lower = target.lower()
        keep = lower.startswith(_KEEP_PREFIXES)
        if target.startswith(("#", "//", "./")) or "://" in target:
            keep = True
        if keep:
            return None

        if target.startswith(self.base_url):
            return f"{self.site_url}{target}"

        prefix = f"{self.site_url}{self.base_url}"
        if self.route_base_path:
            prefix = f"{prefix}{self.route_base_path}/"
        if self.version_path:
            prefix = f"{prefix}{self.version_path}/"
        return f"{prefix}{target}"


__all__ = ["AbsoluteLinkRewriter", "_build_link_rewriter"]

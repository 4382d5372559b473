"""Annotate a navigation tree with the content of its rendered pages."""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from navpdf.errors import MissingContentFileError
from navpdf.generator.link_rewriter import _build_link_rewriter
from navpdf.generator.page_reader import (
    discover_script,
    discover_stylesheet,
    extract_article,
    prefix_title,
    resolve_html_path,
)

if typ.TYPE_CHECKING:
    from navpdf.config import SiteConfig, VersionConfig
    from navpdf.generator.models import NavigationNode

logger = logging.getLogger(__name__)


class TreeWalker:
    """Read page HTML for every node of a navigation tree, in pre-order."""

    def __init__(self, site: SiteConfig, version: VersionConfig, *, origin: str) -> None:
        """Initialize the walker.

        Parameters
        ----------
        site : SiteConfig
            Site configuration providing the build directory and URLs.
        version : VersionConfig
            Version the walked sidebar belongs to; non-default versions get
            their path segment inserted into rewritten links.
        origin : str
            Origin (scheme, host, port) of the server the pages are rendered
            from; discovered asset paths resolve against it.
        """
        self.site = site
        self.version = version
        self.origin = origin
        self.link_rewriter = _build_link_rewriter(site, version)

    def walk(
        self, node: NavigationNode, parent_titles: tuple[str, ...] = ()
    ) -> NavigationNode:
        """Return a copy of ``node`` and its subtree with page content filled in.

        Raises
        ------
        MissingContentFileError
            If a page of the tree has no rendered HTML file.
        AssetDiscoveryError
            If a page does not reference the site stylesheet.
        """
        if not node.is_category:
            return self._read_page(node, parent_titles)

        has_page = node.permalink is not None
        annotated = self._read_page(node, parent_titles) if has_page else node
        style_path = annotated.style_path
        script_path = annotated.script_path
        child_titles = (*parent_titles, node.label)
        children: list[NavigationNode] = []
        for child in node.children:
            walked = self.walk(child, child_titles)
            children.append(walked)
            if not has_page and not style_path:
                style_path = walked.style_path
                script_path = walked.script_path
        return dc.replace(
            annotated,
            children=tuple(children),
            style_path=style_path,
            script_path=script_path,
            parent_titles=parent_titles,
        )

    def _read_page(
        self, node: NavigationNode, parent_titles: tuple[str, ...]
    ) -> NavigationNode:
        """Return ``node`` with article HTML, title, and asset URLs set."""
        if node.permalink is None:
            msg = f"Navigation node '{node.label}' has no permalink."
            raise MissingContentFileError(msg)
        html_path = resolve_html_path(
            self.site.build_dir, node.permalink, self.site.base_url
        )
        logger.info("Reading file %s", html_path)
        raw_html = html_path.read_text(encoding="utf-8")

        style_path = discover_stylesheet(raw_html, self.origin)
        script_path = discover_script(raw_html, self.origin)

        article = extract_article(raw_html)
        article = prefix_title(article, parent_titles)
        article = self.link_rewriter.rewrite_html(article)
        return dc.replace(
            node,
            article_html=article,
            style_path=style_path,
            script_path=script_path,
            parent_titles=parent_titles,
        )


__all__ = ["TreeWalker"]

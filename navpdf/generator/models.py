"""Shared dataclasses used by the PDF generation pipeline."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

NodeKind = typ.Literal["category", "leaf"]


@dc.dataclass(slots=True)
class NavigationNode:
    """A node of the documentation navigation tree.

    The loader fills the identity fields; the tree walker returns a copy with
    the content fields populated. Passes never mutate a node they receive.

    Attributes
    ----------
    kind : {"category", "leaf"}
        Whether the node groups other nodes or stands for a single page.
    label : str
        Display label used in titles and download menus.
    node_id : str
        Stable identifier passed to naming functions and matched against
        ``ignore_docs``.
    doc_id : str or None
        Full document id for nodes backed by a page.
    permalink : str or None
        Canonical URL path of the node's page, including the site base URL.
    children : tuple[NavigationNode, ...]
        Ordered child nodes; always empty for leaves.
    article_html : str
        Extracted and normalized article body.
    style_path : str
        Absolute URL of the site stylesheet discovered for this node.
    script_path : str
        Absolute URL of the site script bundle, or empty when absent.
    parent_titles : tuple[str, ...]
        Labels of the ancestors, root first.
    """

    kind: NodeKind
    label: str
    node_id: str
    doc_id: str | None = None
    permalink: str | None = None
    children: tuple[NavigationNode, ...] = ()
    article_html: str = ""
    style_path: str = ""
    script_path: str = ""
    parent_titles: tuple[str, ...] = ()

    @property
    def is_category(self) -> bool:
        """Return ``True`` when the node groups other nodes."""
        return self.kind == "category"


@dc.dataclass(frozen=True, slots=True)
class Article:
    """One page body contributing to a combined document."""

    node_id: str
    label: str
    html: str
    style_path: str = ""
    script_path: str = ""

    @classmethod
    def from_node(cls, node: NavigationNode) -> Article:
        """Build an article from a walked navigation node."""
        return cls(
            node_id=node.node_id,
            label=node.label,
            html=node.article_html,
            style_path=node.style_path,
            script_path=node.script_path,
        )


@dc.dataclass(slots=True)
class TocEntry:
    """A heading captured for the table of contents."""

    text: str
    anchor: str
    level: int
    page: int | None = None


@dc.dataclass(frozen=True, slots=True)
class TocReconciliationMiss:
    """A heading the reconciler could not locate in the extracted text."""

    index: int
    heading: str
    fallback_page: int


@dc.dataclass(frozen=True, slots=True)
class OutputDocument:
    """A generated PDF and where it lives.

    Attributes
    ----------
    title : str
        Document title printed on the cover and in page headers.
    version : str
        Version label printed on the cover.
    slug : str
        Unique file stem.
    build_dir : Path
        Directory the PDF was written to.
    file : str
        Site-relative path of the PDF, used by download links.
    """

    title: str
    version: str
    slug: str
    build_dir: Path
    file: str

    @property
    def path(self) -> Path:
        """Return the filesystem path of the final PDF."""
        return self.build_dir / f"{self.slug}.pdf"


@dc.dataclass(frozen=True, slots=True)
class ComposedNode:
    """Output-descriptor tree mirroring the navigation tree."""

    node: NavigationNode
    document: OutputDocument | None
    children: tuple[ComposedNode, ...] = ()

    def iter_documents(self) -> typ.Iterator[OutputDocument]:
        """Yield every document of the subtree in generation order."""
        for child in self.children:
            yield from child.iter_documents()
        if self.document is not None:
            yield self.document


__all__ = [
    "Article",
    "ComposedNode",
    "NavigationNode",
    "NodeKind",
    "OutputDocument",
    "TocEntry",
    "TocReconciliationMiss",
]

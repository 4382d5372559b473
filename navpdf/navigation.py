r"""Build navigation trees from the site build's sidebar metadata.

Sidebars arrive as nested item lists in the shape the static-site generator
emits (``{"type": "doc", "id": ...}`` and ``{"type": "category", "label":
..., "items": [...]}``). This module resolves every doc reference against the
version's document list and wraps the result in a synthetic root category
named after the project, which becomes the whole-tree document.

Example
-------
>>> from navpdf.config import DocMetadata, VersionConfig
>>> version = VersionConfig(
...     name="current",
...     label="Next",
...     docs=[DocMetadata("guide/intro", "Intro", "/docs/guide/intro")],
...     sidebars={"docs": [{"type": "doc", "id": "guide/intro"}]},
... )
>>> root = build_sidebar_tree(version, "docs", project_name="Demo")
>>> [child.node_id for child in root.children]
['intro']
"""

from __future__ import annotations

import logging
import typing as typ

from ._constants import UNNAMED_PROJECT, UNTITLED_CATEGORY
from .errors import MissingContentFileError
from .generator.models import NavigationNode

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import VersionConfig

logger = logging.getLogger(__name__)


def unversioned_id(doc_id: str) -> str:
    """Return the last path component of ``doc_id``.

    ``index`` documents are named after their directory so that
    ``guide/index`` and ``guide/intro`` yield ``guide`` and ``intro``.
    """
    parts = doc_id.split("/")
    last = parts.pop()
    if last == "index" and parts:
        last = parts.pop()
    return last


def build_sidebar_tree(
    version: VersionConfig, sidebar_name: str, *, project_name: str | None
) -> NavigationNode:
    """Return the synthetic root category for one sidebar of ``version``.

    Raises
    ------
    KeyError
        If the version has no sidebar called ``sidebar_name``.
    MissingContentFileError
        If a sidebar item references a document the version does not list.
    """
    items = version.sidebars[sidebar_name]
    label = project_name
    if not label:
        logger.info("Project name not set, using placeholder %r", UNNAMED_PROJECT)
        label = UNNAMED_PROJECT
    return NavigationNode(
        kind="category",
        label=label,
        node_id=label,
        children=_build_items(items, version),
    )


def _build_items(
    items: cabc.Iterable[typ.Mapping[str, typ.Any]], version: VersionConfig
) -> tuple[NavigationNode, ...]:
    nodes: list[NavigationNode] = []
    for item in items:
        node = _build_item(item, version)
        if node is not None:
            nodes.append(node)
    return tuple(nodes)


def _build_item(
    item: typ.Mapping[str, typ.Any], version: VersionConfig
) -> NavigationNode | None:
    """Build one node, or ``None`` for item types that carry no page."""
    match item.get("type"):
        case "doc":
            doc_id = str(item.get("id", ""))
            doc = version.find_doc(doc_id)
            if doc is None:
                msg = f"Sidebar references unknown document '{doc_id}'."
                raise MissingContentFileError(msg)
            return NavigationNode(
                kind="leaf",
                label=doc.title,
                node_id=unversioned_id(doc.id),
                doc_id=doc.id,
                permalink=doc.permalink,
            )
        case "category":
            label = str(item.get("label") or "")
            children = _build_items(item.get("items") or [], version)
            link = item.get("link") or {}
            if link.get("type") == "doc":
                doc_id = str(link.get("id", ""))
                doc = version.find_doc(doc_id)
                if doc is None:
                    msg = f"Category '{label}' links unknown document '{doc_id}'."
                    raise MissingContentFileError(msg)
                return NavigationNode(
                    kind="category",
                    label=label,
                    node_id=unversioned_id(doc.id),
                    doc_id=doc.id,
                    permalink=doc.permalink,
                    children=children,
                )
            return NavigationNode(
                kind="category",
                label=label,
                node_id=label or UNTITLED_CATEGORY,
                children=children,
            )
        case _:
            return None


__all__ = ["build_sidebar_tree", "unversioned_id"]

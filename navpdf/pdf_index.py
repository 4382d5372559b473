"""Map page permalinks to the PDF documents that contain them.

The index is written as ``pdfs.json`` next to the site build so a download
menu can offer, for the page being read, the whole-project document, every
enclosing section document, and the page's own chapter document:

.. code-block:: json

    {"/docs/guide/intro": [
        {"label": "Demo", "file": "pdfs/demo.pdf", "type": "root"},
        {"label": "Guide", "file": "pdfs/guide.pdf", "type": "section"},
        {"label": "Intro", "file": "pdfs/guide-intro.pdf", "type": "chapter"}
    ]}
"""

from __future__ import annotations

import json
import logging
import typing as typ

from ._constants import PDF_INDEX_FILENAME

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .generator.models import ComposedNode

logger = logging.getLogger(__name__)

RecordType = typ.Literal["root", "section", "chapter"]


class DocumentRecord(typ.TypedDict):
    """One document offered for a page, outermost first."""

    label: str
    file: str | None
    type: RecordType


def _record(composed: ComposedNode, kind: RecordType) -> DocumentRecord:
    document = composed.document
    return {
        "label": composed.node.label,
        "file": document.file if document is not None else None,
        "type": kind,
    }


class UrlToDocumentIndex:
    """Accumulate permalink-to-document chains across sidebars and versions."""

    def __init__(self) -> None:
        self.entries: dict[str, list[DocumentRecord]] = {}

    def add_tree(self, root: ComposedNode) -> None:
        """Record every page below the synthetic ``root`` of a composed sidebar."""
        self._add_children(root, [_record(root, "root")])

    def _add_children(
        self, composed: ComposedNode, parents: list[DocumentRecord]
    ) -> None:
        for child in composed.children:
            permalink = child.node.permalink
            if permalink is not None:
                key = permalink.removesuffix("/")
                self.entries[key] = [*parents, _record(child, "chapter")]
            if child.node.is_category:
                self._add_children(child, [*parents, _record(child, "section")])

    def write(self, build_dir: Path) -> Path:
        """Write the index as JSON into ``build_dir`` and return its path."""
        path = build_dir / PDF_INDEX_FILENAME
        path.write_text(json.dumps(self.entries), encoding="utf-8")
        logger.info("Wrote %d page mappings to %s", len(self.entries), path)
        return path


__all__ = ["DocumentRecord", "UrlToDocumentIndex"]

"""Deterministic, collision-free naming for generated PDF documents.

A :class:`GenerationContext` owns the slug table for one generation pass, so
two nodes whose naming function output collides still end up in different
files while a repeated run over an unchanged tree yields identical names.

Examples
--------
>>> ctx = GenerationContext()
>>> ctx.slugger.slug("Getting Started")
'getting-started'
>>> ctx.slugger.slug("Getting started!")
'getting-started-2'
"""

from __future__ import annotations

import dataclasses as dc
import re
import threading
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from navpdf.config import PdfOptions, SiteConfig

_DROP_PATTERN = re.compile(r"[^\w\- ]+")
_SPACE_PATTERN = re.compile(r"\s+")


class FileNameFunction(typ.Protocol):
    """Callable deriving the un-slugged base name of a node's PDF."""

    def __call__(
        self,
        site: SiteConfig,
        options: PdfOptions,
        *,
        title: str,
        page_id: str,
        parent_titles: cabc.Sequence[str],
        parent_ids: cabc.Sequence[str],
        version: str,
        version_path: str,
    ) -> str: ...


def default_pdf_filename(
    site: SiteConfig,  # noqa: ARG001
    options: PdfOptions,  # noqa: ARG001
    *,
    title: str,  # noqa: ARG001
    page_id: str,
    parent_titles: cabc.Sequence[str],  # noqa: ARG001
    parent_ids: cabc.Sequence[str],
    version: str,  # noqa: ARG001
    version_path: str,  # noqa: ARG001
) -> str:
    """Join the ancestor ids below the synthetic root with the node id."""
    return "-".join([*parent_ids[1:], page_id])


def slugify(value: str) -> str:
    """Convert ``value`` into a lowercase, hyphen-separated slug."""
    lowered = value.strip().lower()
    cleaned = _DROP_PATTERN.sub("", lowered)
    return _SPACE_PATTERN.sub("-", cleaned)


class Slugger:
    """Slugify strings while keeping every returned slug unique."""

    def __init__(self) -> None:
        self._used: set[str] = set()
        self._lock = threading.Lock()

    def slug(self, value: str) -> str:
        """Return a unique slug for ``value``, appending ``-2``, ``-3``... on reuse."""
        base = slugify(value) or "document"
        with self._lock:
            candidate = base
            suffix = 2
            while candidate in self._used:
                candidate = f"{base}-{suffix}"
                suffix += 1
            self._used.add(candidate)
        return candidate


@dc.dataclass(slots=True)
class GenerationContext:
    """State shared by every document built during one generation pass."""

    slugger: Slugger = dc.field(default_factory=Slugger)
    written: list[Path] = dc.field(default_factory=list)


__all__ = [
    "FileNameFunction",
    "GenerationContext",
    "Slugger",
    "default_pdf_filename",
    "slugify",
]

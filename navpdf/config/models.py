"""Typed dataclasses describing navpdf site, version, and PDF options."""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from pathlib import Path

from navpdf._constants import DEFAULT_PDF_DIR
from navpdf.errors import ConfigurationError

if typ.TYPE_CHECKING:
    from navpdf.naming import FileNameFunction


class SiteConfigError(ConfigurationError):
    """Raised when the site configuration is invalid or incomplete."""


DEFAULT_FOOTER_PARSER = re.compile(r"©[^\n]*?\s*\d+/\d+", re.MULTILINE)


@dc.dataclass(slots=True)
class Margins:
    """Page margins expressed as CSS lengths."""

    top: str = "5cm"
    right: str = "2cm"
    bottom: str = "2.3cm"
    left: str = "2cm"

    def as_dict(self) -> dict[str, str]:
        """Return the margins in the mapping shape the print engine expects."""
        return {
            "top": self.top,
            "right": self.right,
            "bottom": self.bottom,
            "left": self.left,
        }


def _default_cover_margins() -> Margins:
    return Margins(top="10cm", right="2cm", bottom="3cm", left="2cm")


@dc.dataclass(slots=True)
class ExtraPath:
    """Additional directory served next to the site build while rendering."""

    server_path: str
    local_path: Path


@dc.dataclass(slots=True)
class DocMetadata:
    """One rendered documentation page as reported by the site build."""

    id: str
    title: str
    permalink: str


@dc.dataclass(slots=True)
class VersionConfig:
    """A documentation version with its pages and sidebars.

    Attributes
    ----------
    name : str
        Version identifier (for example ``"current"`` or ``"2.0"``).
    label : str
        Human readable label printed on cover pages.
    path : str
        URL path segment of the version below the docs route; empty for the
        default version.
    is_last : bool
        ``True`` for the default version, whose URLs carry no version segment.
    docs : list[DocMetadata]
        Every page of the version.
    sidebars : dict[str, list[dict[str, Any]]]
        Raw sidebar item lists keyed by sidebar name.
    """

    name: str
    label: str
    path: str = ""
    is_last: bool = True
    docs: list[DocMetadata] = dc.field(default_factory=list)
    sidebars: dict[str, list[dict[str, typ.Any]]] = dc.field(default_factory=dict)

    def find_doc(self, doc_id: str) -> DocMetadata | None:
        """Return the document registered under ``doc_id`` or ``None``."""
        for doc in self.docs:
            if doc.id == doc_id:
                return doc
        return None


@dc.dataclass(slots=True)
class PdfOptions:
    """Options controlling which documents are produced and how they look."""

    filename_function: FileNameFunction
    sidebar_names: list[str] = dc.field(default_factory=list)
    versions: list[str] = dc.field(default_factory=list)
    subfolders: list[str] = dc.field(default_factory=list)
    product_titles: list[str] = dc.field(default_factory=list)
    product_version: str = ""
    ignore_docs: list[str] = dc.field(default_factory=list)
    stylesheets: list[str] = dc.field(default_factory=list)
    always_include_site_styles: bool = False
    scripts: list[str] = dc.field(default_factory=list)
    ignore_css_selectors: list[str] = dc.field(default_factory=list)
    keep_debug_htmls: bool = False
    render_timeout: int = 30_000
    footer_parser: re.Pattern[str] = DEFAULT_FOOTER_PARSER
    margins: Margins = dc.field(default_factory=Margins)
    cover_margins: Margins = dc.field(default_factory=_default_cover_margins)
    author: str = ""
    cover_page_header: str = "<span />"
    cover_page_footer: str = "<span />"
    cover_template: Path | None = None
    header_template: Path | None = None
    footer_template: Path | None = None
    use_extra_paths: list[ExtraPath] = dc.field(default_factory=list)
    pdf_dir: str = DEFAULT_PDF_DIR
    auto_build: bool = True

    def subfolder_for(self, index: int) -> str:
        """Return the output subfolder configured for the ``index``-th sidebar."""
        if index < len(self.subfolders):
            return self.subfolders[index]
        return ""

    def product_title_for(self, index: int) -> str:
        """Return the product title configured for the ``index``-th sidebar."""
        if index < len(self.product_titles):
            return self.product_titles[index]
        return ""


@dc.dataclass(slots=True)
class SiteConfig:
    """Site identity, build location, PDF options, and loaded versions."""

    url: str
    project_name: str | None
    build_dir: Path
    options: PdfOptions
    versions: list[VersionConfig]
    base_url: str = "/"
    route_base_path: str = "docs"

    def selected_versions(self) -> list[VersionConfig]:
        """Return the versions requested in options, or every version."""
        if not self.options.versions:
            return list(self.versions)
        return [v for v in self.versions if v.name in self.options.versions]


__all__ = [
    "DEFAULT_FOOTER_PARSER",
    "DocMetadata",
    "ExtraPath",
    "Margins",
    "PdfOptions",
    "SiteConfig",
    "SiteConfigError",
    "VersionConfig",
]

"""Load and validate navpdf configuration YAML.

This subpackage parses the project's ``navpdf.yaml`` file describing the site
(public URL, base URL, build directory), the PDF options (sidebars, versions,
templates, margins, ignored pages), and the versions with their documents and
sidebars. The primary entry point is :func:`load_site_config`, which applies
defaults and returns a :class:`SiteConfig` ready for PDF generation.

Examples
--------
>>> from pathlib import Path
>>> from navpdf.config import load_site_config
>>> site = load_site_config(Path("navpdf.yaml"))  # doctest: +SKIP
>>> site.options.pdf_dir  # doctest: +SKIP
'pdfs'
"""

from .loader import load_site_config
from .models import (
    DEFAULT_FOOTER_PARSER,
    DocMetadata,
    ExtraPath,
    Margins,
    PdfOptions,
    SiteConfig,
    SiteConfigError,
    VersionConfig,
)

__all__ = [
    "DEFAULT_FOOTER_PARSER",
    "DocMetadata",
    "ExtraPath",
    "Margins",
    "PdfOptions",
    "SiteConfig",
    "SiteConfigError",
    "VersionConfig",
    "load_site_config",
]

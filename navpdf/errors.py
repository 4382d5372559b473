"""Exception types raised while building PDF documents.

Every fatal condition aborts the whole run; callers are expected to let these
propagate to the CLI. Reconciliation misses are not errors and are reported
through :class:`navpdf.generator.models.TocReconciliationMiss` records.
"""

from __future__ import annotations


class NavPdfError(RuntimeError):
    """Base class for errors raised by the PDF generation pipeline."""


class ConfigurationError(NavPdfError, ValueError):
    """Raised when configuration or required build output is missing or invalid."""


class MissingContentFileError(NavPdfError):
    """Raised when a navigation node's rendered page cannot be located."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class AssetDiscoveryError(NavPdfError):
    """Raised when the site stylesheet link cannot be found in page HTML."""


class MergeFailure(NavPdfError):
    """Raised when cover and content PDFs cannot be merged into one file."""


__all__ = [
    "AssetDiscoveryError",
    "ConfigurationError",
    "MergeFailure",
    "MissingContentFileError",
    "NavPdfError",
]

"""Common literal values used across navpdf.

These constants keep filenames, markers, and selectors centralized so the
walker, composer, reconciler, and tests can import the same values without
drifting. Intended for internal use within the navpdf package.

Examples
--------
>>> from navpdf import _constants
>>> _constants.PDF_INDEX_FILENAME
'pdfs.json'
>>> _constants.TITLE_SEPARATOR.join(["Guide", "Setup"])
'Guide / Setup'
"""

PDF_INDEX_FILENAME = "pdfs.json"
DEFAULT_PDF_DIR = "pdfs"
UNNAMED_PROJECT = "Unnamed project"
UNTITLED_CATEGORY = "untitled"
TITLE_SEPARATOR = " / "

CONTENT_MARKER = '<div class="theme-doc-markdown markdown">'
FOOTER_MARKER = "<footer "

PAGE_NUMBER_PLACEHOLDER = "_"
PAGE_NUMBER_SPAN = '<span class="pageNumber">{value}</span>'
CONTENTS_HEADING = "Contents"
TOC_HEADING_SELECTORS = "h1, h2, h3"

CHROME_SELECTORS = (
    ".theme-doc-breadcrumbs",
    ".theme-doc-version-badge",
    ".theme-doc-toc-mobile",
    ".buttonGroup__atx",
)

BUILD_GATE_ENV = "BUILD_PDF"

"""Shared fixtures: a fake site build on disk and a renderer that needs no browser."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

import pytest

from navpdf.config import DocMetadata, PdfOptions, SiteConfig, VersionConfig
from navpdf.naming import default_pdf_filename

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from navpdf.generator.renderer import PrintRequest

SITE_URL = "https://docs.example.com"
ORIGIN = "http://127.0.0.1:8123"

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<link rel="stylesheet" href="/assets/css/styles.4f2a.css">
<script src="/assets/js/styles.91b0.js"></script>
</head>
<body>
<nav class="navbar">navigation</nav>
<article><nav class="theme-doc-breadcrumbs">crumbs</nav>
<div class="theme-doc-markdown markdown"><header><h1>{title}</h1></header>
{body}
</div>
<footer class="theme-doc-footer">edit this page</footer>
</article>
</body>
</html>
"""


def page_html(title: str, body: str) -> str:
    """Return a rendered page in the site build's markup."""
    return PAGE_TEMPLATE.format(title=title, body=body)


def write_page(build_dir: Path, permalink: str, title: str, body: str) -> Path:
    """Write ``<build_dir>/<permalink>/index.html`` for a page."""
    target = build_dir / permalink.strip("/") / "index.html"
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(page_html(title, body), encoding="utf-8")
    return target


@dc.dataclass
class FakeRenderer:
    """Record print requests and write the printed HTML as the PDF body."""

    text: str = ""
    requests: list[PrintRequest] = dc.field(default_factory=list)
    merges: list[list[Path]] = dc.field(default_factory=list)

    def render_pdf(self, request: PrintRequest) -> Path:
        self.requests.append(request)
        request.output.write_text(request.html, encoding="utf-8")
        return request.output

    def extract_text(self, pdf_path: Path) -> str:
        assert pdf_path.exists()
        return self.text

    def merge_pdfs(self, sources: cabc.Sequence[Path], output: Path) -> Path:
        self.merges.append(list(sources))
        output.write_text(
            "".join(source.read_text(encoding="utf-8") for source in sources),
            encoding="utf-8",
        )
        return output


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()


def guide_version(path: str = "", *, is_last: bool = True) -> VersionConfig:
    """Return a version with a "Guide" category holding "Intro" and "Setup"."""
    prefix = f"/docs/{path}/" if path else "/docs/"
    return VersionConfig(
        name=path or "current",
        label=path or "Next",
        path=path,
        is_last=is_last,
        docs=[
            DocMetadata("guide/intro", "Intro", f"{prefix}guide/intro"),
            DocMetadata("guide/setup", "Setup", f"{prefix}guide/setup"),
        ],
        sidebars={
            "docs": [
                {
                    "type": "category",
                    "label": "Guide",
                    "items": [
                        {"type": "doc", "id": "guide/intro"},
                        {"type": "doc", "id": "guide/setup"},
                    ],
                },
                {"type": "link", "label": "Home", "href": "https://example.com"},
            ]
        },
    )


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    """Return a site build with the guide pages, index.html, and 404.html."""
    root = tmp_path / "build"
    root.mkdir()
    (root / "index.html").write_text("<html></html>", encoding="utf-8")
    (root / "404.html").write_text("<html></html>", encoding="utf-8")
    write_page(
        root,
        "/docs/guide/intro",
        "Intro",
        '<p>Intro body</p><h2 id="first-steps">First steps</h2>'
        '<a href="../other">other</a> <a href="#section">here</a>',
    )
    write_page(root, "/docs/guide/setup", "Setup", "<p>Setup body</p>")
    return root


def make_site(
    build_dir: Path,
    site_versions: list[VersionConfig] | None = None,
    **options: typ.Any,  # noqa: ANN401
) -> SiteConfig:
    """Return a site config over ``build_dir`` with the given PDF options."""
    return SiteConfig(
        url=SITE_URL,
        project_name="Demo",
        build_dir=build_dir,
        options=PdfOptions(filename_function=default_pdf_filename, **options),
        versions=site_versions or [guide_version()],
    )


@pytest.fixture
def site(build_dir: Path) -> SiteConfig:
    return make_site(build_dir)

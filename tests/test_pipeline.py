"""Tests for the generation pipeline, the local server, and the pdfs.json index."""

from __future__ import annotations

import json
import logging
import typing as typ
import urllib.request

import pytest

from conftest import FakeRenderer, guide_version, make_site, write_page
from navpdf.config import ExtraPath
from navpdf.errors import ConfigurationError
from navpdf.generator.models import ComposedNode, NavigationNode, OutputDocument
from navpdf.pdf_index import UrlToDocumentIndex
from navpdf.pipeline import generate_pdf_files
from navpdf.server import StaticSiteServer

if typ.TYPE_CHECKING:
    from pathlib import Path

    from navpdf.config import SiteConfig


def _doc(slug: str, tmp_path: Path) -> OutputDocument:
    return OutputDocument(
        title=slug, version="Next", slug=slug, build_dir=tmp_path, file=f"pdfs/{slug}.pdf"
    )


def test_index_records_root_sections_and_chapter(tmp_path: Path) -> None:
    intro = NavigationNode(kind="leaf", label="Intro", node_id="intro", permalink="/docs/guide/intro/")
    guide = NavigationNode(kind="category", label="Guide", node_id="Guide", children=(intro,))
    root = NavigationNode(kind="category", label="Demo", node_id="Demo", children=(guide,))
    composed = ComposedNode(
        node=root,
        document=_doc("demo", tmp_path),
        children=(
            ComposedNode(
                node=guide,
                document=_doc("guide", tmp_path),
                children=(ComposedNode(node=intro, document=_doc("guide-intro", tmp_path)),),
            ),
        ),
    )
    index = UrlToDocumentIndex()

    index.add_tree(composed)
    path = index.write(tmp_path)

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "/docs/guide/intro": [
            {"label": "Demo", "file": "pdfs/demo.pdf", "type": "root"},
            {"label": "Guide", "file": "pdfs/guide.pdf", "type": "section"},
            {"label": "Intro", "file": "pdfs/guide-intro.pdf", "type": "chapter"},
        ]
    }


def test_pipeline_writes_documents_and_index(site: SiteConfig, build_dir: Path) -> None:
    stale = build_dir / "pdfs" / "old.pdf"
    stale.parent.mkdir()
    stale.write_text("old", encoding="utf-8")

    result = generate_pdf_files(site, renderer=FakeRenderer())

    assert not stale.exists()
    assert [p.name for p in result.written] == [
        "guide-intro.pdf",
        "guide-setup.pdf",
        "guide.pdf",
        "demo.pdf",
    ]
    assert all(p.parent == build_dir / "pdfs" for p in result.written)
    index = json.loads(result.index_path.read_text(encoding="utf-8"))
    assert sorted(index) == ["/docs/guide/intro", "/docs/guide/setup"]
    assert [r["type"] for r in index["/docs/guide/setup"]] == ["root", "section", "chapter"]
    assert index["/docs/guide/setup"][-1]["file"] == "pdfs/guide-setup.pdf"


def test_pipeline_uses_version_path_and_subfolders(build_dir: Path) -> None:
    write_page(build_dir, "/docs/v2/guide/intro", "Intro", "<p>Intro v2</p>")
    write_page(build_dir, "/docs/v2/guide/setup", "Setup", "<p>Setup v2</p>")
    site = make_site(
        build_dir,
        site_versions=[guide_version(), guide_version("v2", is_last=False)],
        versions=["v2"],
        subfolders=["manual"],
        product_version="9.9",
    )
    renderer = FakeRenderer()

    result = generate_pdf_files(site, renderer=renderer)

    assert {p.parent for p in result.written} == {build_dir / "pdfs" / "v2" / "manual"}
    index = json.loads(result.index_path.read_text(encoding="utf-8"))
    assert index["/docs/v2/guide/intro"][-1]["file"] == "pdfs/v2/manual/guide-intro.pdf"
    # two versions exist, so the version label stays
    cover = renderer.requests[0].html
    assert "v2" in cover
    assert "9.9" not in cover


def test_single_version_uses_product_version(build_dir: Path) -> None:
    site = make_site(build_dir, product_version="9.9")
    renderer = FakeRenderer()

    generate_pdf_files(site, renderer=renderer)

    assert "9.9" in renderer.requests[0].html


def test_missing_sidebar_is_skipped(
    build_dir: Path, caplog: pytest.LogCaptureFixture
) -> None:
    site = make_site(build_dir, sidebar_names=["api", "docs"])

    with caplog.at_level(logging.INFO, logger="navpdf.pipeline"):
        result = generate_pdf_files(site, renderer=FakeRenderer())

    assert "Sidebar 'api' doesn't exist" in caplog.text
    assert len(result.written) == 4


def test_pipeline_requires_a_site_build(site: SiteConfig, build_dir: Path) -> None:
    (build_dir / "404.html").unlink()

    with pytest.raises(ConfigurationError, match=r"404\.html"):
        generate_pdf_files(site, renderer=FakeRenderer())


def test_server_serves_build_and_extra_paths(build_dir: Path, tmp_path: Path) -> None:
    shared = tmp_path / "shared"
    shared.mkdir()
    (shared / "logo.svg").write_text("<svg/>", encoding="utf-8")

    with StaticSiteServer(
        build_dir,
        base_url="/site/",
        extra_paths=[ExtraPath(server_path="/shared/", local_path=shared)],
    ) as server:
        assert server.site_address.endswith("/site/")
        with urllib.request.urlopen(f"{server.site_address}docs/guide/intro/") as resp:  # noqa: S310
            page = resp.read().decode("utf-8")
        with urllib.request.urlopen(f"{server.origin}/shared/logo.svg") as resp:  # noqa: S310
            logo = resp.read().decode("utf-8")

    assert "Intro body" in page
    assert logo == "<svg/>"

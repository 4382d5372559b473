"""Tests for reading rendered pages and annotating navigation trees."""

from __future__ import annotations

import typing as typ

import pytest
from bs4 import BeautifulSoup

from conftest import ORIGIN, SITE_URL, guide_version, make_site, write_page
from navpdf.errors import AssetDiscoveryError, MissingContentFileError
from navpdf.generator.link_rewriter import AbsoluteLinkRewriter
from navpdf.generator.page_reader import (
    discover_script,
    discover_stylesheet,
    extract_article,
    prefix_title,
    resolve_html_path,
)
from navpdf.generator.tree_walker import TreeWalker
from navpdf.navigation import build_sidebar_tree

if typ.TYPE_CHECKING:
    from pathlib import Path

    from navpdf.config import SiteConfig


def test_extract_article_narrows_to_markdown_region() -> None:
    html = (
        '<article><nav>crumbs</nav><div class="theme-doc-markdown markdown">'
        '<p>body</p><img loading="lazy" src="a.png"></div>'
        '<footer class="x">edit</footer></article>'
    )

    article = extract_article(html)

    assert article.startswith('<div class="theme-doc-markdown markdown">')
    assert "crumbs" not in article
    assert "edit" not in article
    assert 'loading="eager"' in article


def test_extract_article_without_article_is_empty() -> None:
    assert extract_article("<main>nothing</main>") == ""


def test_prefix_title_skips_the_project_root_label() -> None:
    html = prefix_title("<h1 class='t'>Intro</h1><p>x</p>", ("Demo", "Guide"))

    assert html.startswith("<h1 class='t'>Guide / Intro</h1>")
    assert prefix_title("<h1>Guide</h1>", ("Demo",)) == "<h1>Guide</h1>"


def test_prefix_title_without_h1_is_unchanged() -> None:
    assert prefix_title("<p>x</p>", ("Demo", "Guide")) == "<p>x</p>"


def test_resolve_html_path_falls_back_to_html_file(tmp_path: Path) -> None:
    (tmp_path / "docs").mkdir()
    flat = tmp_path / "docs" / "faq.html"
    flat.write_text("<html></html>", encoding="utf-8")

    assert resolve_html_path(tmp_path, "/base/docs/faq", "/base/") == flat


def test_resolve_html_path_raises_for_missing_page(tmp_path: Path) -> None:
    with pytest.raises(MissingContentFileError) as excinfo:
        resolve_html_path(tmp_path, "/docs/missing/", "/")

    assert excinfo.value.path is not None
    assert excinfo.value.path.endswith("index.html")


def test_stylesheet_is_required_and_script_optional() -> None:
    html = '<link href="/assets/css/styles.1.css"><script src="/assets/js/main.js">'

    assert discover_stylesheet(html, ORIGIN) == f"{ORIGIN}/assets/css/styles.1.css"
    assert discover_script(html, ORIGIN) == ""
    with pytest.raises(AssetDiscoveryError):
        discover_stylesheet("<p>no styles</p>", ORIGIN)


@pytest.mark.parametrize(
    ("href", "expected"),
    [
        ("#section", None),
        ("https://other.example.com/x", None),
        ("mailto:team@example.com", None),
        ("./local", None),
        ("//cdn.example.com/x.js", None),
        ("/docs/guide/setup", f"{SITE_URL}/docs/guide/setup"),
        ("../other", f"{SITE_URL}/docs/v2/../other"),
        ("setup", f"{SITE_URL}/docs/v2/setup"),
    ],
)
def test_link_rewriter_targets(href: str, expected: str | None) -> None:
    rewriter = AbsoluteLinkRewriter(SITE_URL, "/", "docs", "v2")

    assert rewriter._rewrite(href) == expected


def test_rewrite_html_updates_only_anchor_hrefs() -> None:
    rewriter = AbsoluteLinkRewriter(SITE_URL, "/", "docs", "")
    html = (
        "<p><a class='x' href='setup'>setup</a> <a href=\"#top\">top</a>"
        '<a name="bare">no href</a><img src="img/a.png"></p>'
    )

    soup = BeautifulSoup(rewriter.rewrite_html(html), "html.parser")

    links = soup.find_all("a")
    assert links[0]["href"] == f"{SITE_URL}/docs/setup"
    assert links[0]["class"] == ["x"]
    assert links[1]["href"] == "#top"
    assert not links[2].has_attr("href")
    assert soup.img["src"] == "img/a.png"


def test_walker_returns_annotated_copy(site: SiteConfig) -> None:
    version = site.versions[0]
    root = build_sidebar_tree(version, "docs", project_name=site.project_name)

    walked = TreeWalker(site, version, origin=ORIGIN).walk(root)

    guide = walked.children[0]
    intro, setup = guide.children
    assert root.children[0].children[0].article_html == ""
    assert intro.parent_titles == ("Demo", "Guide")
    assert BeautifulSoup(intro.article_html, "html.parser").h1.get_text() == "Guide / Intro"
    assert "Setup body" in setup.article_html
    assert intro.style_path == f"{ORIGIN}/assets/css/styles.4f2a.css"
    assert intro.script_path == f"{ORIGIN}/assets/js/styles.91b0.js"


def test_link_less_category_adopts_first_child_assets(site: SiteConfig) -> None:
    version = site.versions[0]
    root = build_sidebar_tree(version, "docs", project_name=site.project_name)

    walked = TreeWalker(site, version, origin=ORIGIN).walk(root)

    guide = walked.children[0]
    assert guide.permalink is None
    assert guide.article_html == ""
    assert guide.style_path == guide.children[0].style_path
    assert walked.style_path == guide.style_path


def test_walker_rewrites_links_for_non_default_version(build_dir: Path) -> None:
    version = guide_version("v2", is_last=False)
    write_page(
        build_dir,
        "/docs/v2/guide/intro",
        "Intro",
        '<a href="../other">other</a> <a href="#section">here</a>',
    )
    write_page(build_dir, "/docs/v2/guide/setup", "Setup", "<p>Setup body</p>")
    site = make_site(build_dir, site_versions=[version])
    root = build_sidebar_tree(version, "docs", project_name="Demo")

    walked = TreeWalker(site, version, origin=ORIGIN).walk(root)

    links = BeautifulSoup(walked.children[0].children[0].article_html, "html.parser").find_all("a")
    assert [link["href"] for link in links] == [
        f"{SITE_URL}/docs/v2/../other",
        "#section",
    ]


def test_walker_fails_for_missing_page(site: SiteConfig, build_dir: Path) -> None:
    (build_dir / "docs" / "guide" / "setup" / "index.html").unlink()
    version = site.versions[0]
    root = build_sidebar_tree(version, "docs", project_name=site.project_name)

    with pytest.raises(MissingContentFileError):
        TreeWalker(site, version, origin=ORIGIN).walk(root)

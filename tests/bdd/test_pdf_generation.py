"""Behaviour tests for printing a navigation tree to PDF documents.

These scenarios drive the walker and the composer over a small site build
written to a temporary directory. A recording renderer stands in for the
headless browser: it writes the printed HTML as the "PDF" body and returns a
canned text for extraction, so the assertions can inspect what each merged
document would contain and which page numbers its table of contents received.

The scenarios live in ``features/pdf_generation.feature``.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, scenarios, then, when

from conftest import ORIGIN, FakeRenderer, guide_version, make_site, write_page
from navpdf.generator.page_generator import DocumentComposer
from navpdf.generator.tree_walker import TreeWalker
from navpdf.naming import GenerationContext
from navpdf.navigation import build_sidebar_tree

if typ.TYPE_CHECKING:
    from navpdf.generator.models import NavigationNode

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "pdf_generation.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, typ.Any]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {"options": {}, "renderer": FakeRenderer()}


def _documents(scenario_state: dict[str, typ.Any]) -> dict[str, str]:
    return {
        doc.slug: doc.path.read_text(encoding="utf-8")
        for doc in scenario_state["composed"].iter_documents()
    }


def _page_links(scenario_state: dict[str, typ.Any], title: str) -> list[str]:
    walked: NavigationNode = scenario_state["walked"]
    page = next(leaf for leaf in walked.children[0].children if leaf.label == title)
    soup = BeautifulSoup(page.article_html, "html.parser")
    return [link["href"] for link in soup.find_all("a")]


@given('a site build with a "Guide" section holding "Intro" and "Setup"')
def given_guide_build(build_dir: Path, scenario_state: dict[str, typ.Any]) -> None:
    scenario_state["build_dir"] = build_dir


@given('the page "setup" is ignored')
def given_ignored_setup(scenario_state: dict[str, typ.Any]) -> None:
    scenario_state["options"]["ignore_docs"] = ["setup"]


@given('the "Setup" page has a "Getting Started" section')
def given_setup_section(scenario_state: dict[str, typ.Any]) -> None:
    write_page(
        scenario_state["build_dir"],
        "/docs/guide/setup",
        "Setup",
        '<p>Setup body</p><h2 id="getting-started">Getting Started</h2><p>Steps</p>',
    )


@given('the printed text shows "1  Getting Started" on page 3')
def given_printed_text(scenario_state: dict[str, typ.Any]) -> None:
    pages = [
        "Contents\nGuide / Setup_\nGetting Started_",
        "Guide / Setup\nSetup body",
        "1  Getting Started\nSteps",
    ]
    scenario_state["renderer"] = FakeRenderer(
        text="\n\n".join(
            f"{body}\nGuide / Setup\n© Demo {number}/3"
            for number, body in enumerate(pages, start=1)
        )
    )


@given('a site build of version "v2" with a page linking "../other" and "#section"')
def given_versioned_build(build_dir: Path, scenario_state: dict[str, typ.Any]) -> None:
    write_page(
        build_dir,
        "/docs/v2/guide/intro",
        "Intro",
        '<p>Intro v2</p><a href="../other">other</a> <a href="#section">here</a>',
    )
    write_page(build_dir, "/docs/v2/guide/setup", "Setup", "<p>Setup v2</p>")
    scenario_state["build_dir"] = build_dir


@when("I compose the documents of the docs sidebar")
def when_compose(tmp_path: Path, scenario_state: dict[str, typ.Any]) -> None:
    site = make_site(scenario_state["build_dir"], **scenario_state["options"])
    version = site.versions[0]
    root = build_sidebar_tree(version, "docs", project_name=site.project_name)
    walked = TreeWalker(site, version, origin=ORIGIN).walk(root)
    composer = DocumentComposer(
        site,
        version,
        scenario_state["renderer"],
        ctx=GenerationContext(),
        build_dir=tmp_path / "pdfs",
        pdf_path="pdfs",
    )
    _, scenario_state["composed"] = composer.compose(walked)


@when('I walk the docs sidebar of version "v2"')
def when_walk_v2(scenario_state: dict[str, typ.Any]) -> None:
    version = guide_version("v2", is_last=False)
    site = make_site(scenario_state["build_dir"], site_versions=[version])
    root = build_sidebar_tree(version, "docs", project_name=site.project_name)
    scenario_state["walked"] = TreeWalker(site, version, origin=ORIGIN).walk(root)


@then('the "guide" document contains "Intro body"')
def then_guide_has_intro(scenario_state: dict[str, typ.Any]) -> None:
    assert "Intro body" in _documents(scenario_state)["guide"]


@then('the "guide" document does not contain "Setup body"')
def then_guide_lacks_setup(scenario_state: dict[str, typ.Any]) -> None:
    assert "Setup body" not in _documents(scenario_state)["guide"]


@then('the "guide-setup" document contains "Setup body"')
def then_setup_document_has_body(scenario_state: dict[str, typ.Any]) -> None:
    assert "Setup body" in _documents(scenario_state)["guide-setup"]


@then('the "guide-setup" contents list "Getting Started" on page 3')
def then_getting_started_on_page_three(scenario_state: dict[str, typ.Any]) -> None:
    renderer: FakeRenderer = scenario_state["renderer"]
    final = next(
        request
        for request in renderer.requests
        if request.output.name == "guide-setup.content.pdf"
    )
    soup = BeautifulSoup(final.html, "html.parser")
    entries = {
        entry.find("span").get_text(): entry.select_one(".pageNumber").get_text()
        for entry in soup.select(".toc-headings li > a")
    }
    assert entries["Getting Started"] == "3"
    assert entries["Guide / Setup"] == "2"


@then('the "Intro" page links to "https://docs.example.com/docs/v2/../other"')
def then_relative_link_rewritten(scenario_state: dict[str, typ.Any]) -> None:
    assert "https://docs.example.com/docs/v2/../other" in _page_links(scenario_state, "Intro")


@then('the "Intro" page links to "#section"')
def then_fragment_untouched(scenario_state: dict[str, typ.Any]) -> None:
    assert "#section" in _page_links(scenario_state, "Intro")

"""Compose and print one PDF per navigation node.

This module walks an annotated navigation tree depth-first and, for every node
whose collected article list is non-empty, builds a combined HTML document,
prints it twice through a :class:`~navpdf.generator.renderer.PdfRenderer` so
the table of contents carries real page numbers, and merges a cover page in
front. It exposes :class:`DocumentComposer`, which returns a
:class:`~navpdf.generator.models.ComposedNode` tree describing every document
it wrote.

Example
-------
>>> from navpdf.generator import DocumentComposer
>>> composer = DocumentComposer(site, version, renderer, ctx=ctx,
...                             build_dir=out_dir, pdf_path="pdfs")  # doctest: +SKIP
>>> articles, composed = composer.compose(walked_root)  # doctest: +SKIP
>>> [doc.file for doc in composed.iter_documents()]  # doctest: +SKIP
['pdfs/guide-intro.pdf', 'pdfs/guide.pdf', 'pdfs/my-project.pdf']
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, Template, select_autoescape

from navpdf._constants import TITLE_SEPARATOR
from navpdf.generator.models import Article, ComposedNode, OutputDocument
from navpdf.generator.reconciler import apply_page_numbers, resolve_page_numbers
from navpdf.generator.renderer import PrintRequest
from navpdf.generator.toc import build_table_of_contents, clean_body, combine_articles

if typ.TYPE_CHECKING:
    from navpdf.config import SiteConfig, VersionConfig
    from navpdf.generator.models import NavigationNode
    from navpdf.generator.renderer import PdfRenderer
    from navpdf.naming import GenerationContext

logger = logging.getLogger(__name__)


class DocumentComposer:
    """Collect articles per node and print the matching PDF documents."""

    def __init__(
        self,
        site: SiteConfig,
        version: VersionConfig,
        renderer: PdfRenderer,
        *,
        ctx: GenerationContext,
        build_dir: Path,
        pdf_path: str,
        product_title: str = "",
        version_label: str | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the composer for one sidebar of one version.

        Parameters
        ----------
        site : SiteConfig
            Site configuration; its options drive naming, styling, and layout.
        version : VersionConfig
            Version the composed sidebar belongs to.
        renderer : PdfRenderer
            Print engine used for cover, measuring, and final renders.
        ctx : GenerationContext
            Per-pass context owning the slug table and the written-file list.
        build_dir : Path
            Directory the PDFs of this sidebar are written to.
        pdf_path : str
            Site-relative directory of ``build_dir``, used in download links.
        product_title : str, optional
            Title prefixed to every document title of this sidebar.
        version_label : str, optional
            Label printed on covers; defaults to the version's label.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package templates.
        """
        self.site = site
        self.options = site.options
        self.version = version
        self.renderer = renderer
        self.ctx = ctx
        self.build_dir = build_dir
        self.pdf_path = pdf_path
        self.product_title = product_title
        self.version_label = version_label or version.label
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.content_template = self.env.get_template("content_document.jinja")
        self.cover_template = self._template(self.options.cover_template, "cover_page.jinja")
        self.header_template = self._template(
            self.options.header_template, "page_header.jinja"
        )
        self.footer_template = self._template(
            self.options.footer_template, "page_footer.jinja"
        )

    def _template(self, override: Path | None, default_name: str) -> Template:
        """Return the template at ``override`` or the packaged ``default_name``."""
        if override is None:
            return self.env.get_template(default_name)
        return self.env.from_string(override.read_text(encoding="utf-8"))

    def compose(
        self,
        node: NavigationNode,
        parent_titles: tuple[str, ...] = (),
        parent_ids: tuple[str, ...] = (),
    ) -> tuple[list[Article], ComposedNode]:
        """Print the documents of ``node`` and its subtree, children first.

        Returns
        -------
        tuple[list[Article], ComposedNode]
            The node's articles in pre-order (the node's own page, then each
            child's articles in child order) and the output-descriptor tree.

        Raises
        ------
        MergeFailure
            Raised when the cover and content PDFs cannot be merged.
        """
        articles: list[Article] = []
        children: list[ComposedNode] = []
        if node.is_category:
            if node.permalink is not None:
                articles.append(Article.from_node(node))
            child_titles = (*parent_titles, node.label)
            child_ids = (*parent_ids, node.node_id)
            for child in node.children:
                child_articles, composed_child = self.compose(
                    child, child_titles, child_ids
                )
                articles.extend(child_articles)
                children.append(composed_child)
        else:
            articles.append(Article.from_node(node))

        slug = self.ctx.slugger.slug(self._base_name(node, parent_titles, parent_ids))
        document: OutputDocument | None = None
        if articles:
            document = OutputDocument(
                title=self.document_title(node.label, parent_titles),
                version=self.version_label,
                slug=slug,
                build_dir=self.build_dir,
                file=f"{self.pdf_path}/{slug}.pdf",
            )
            self.create_pdf(document, articles)
        return articles, ComposedNode(node=node, document=document, children=tuple(children))

    def _base_name(
        self,
        node: NavigationNode,
        parent_titles: tuple[str, ...],
        parent_ids: tuple[str, ...],
    ) -> str:
        return self.options.filename_function(
            self.site,
            self.options,
            title=node.label,
            page_id=node.node_id,
            parent_titles=parent_titles,
            parent_ids=parent_ids,
            version=self.version.name,
            version_path=self.version.path,
        )

    def document_title(self, label: str, parent_titles: tuple[str, ...]) -> str:
        """Return ``label`` prefixed by the product title and ancestor labels."""
        parts = [*parent_titles[1:], label]
        if self.product_title:
            parts.insert(0, self.product_title)
        return TITLE_SEPARATOR.join(parts)

    def build_content_html(self, title: str, articles: list[Article]) -> tuple[str, list[str]]:
        """Return the combined content document and its TOC heading texts."""
        combined = combine_articles(articles, self.options.ignore_docs)
        body = clean_body(combined, self.options.ignore_css_selectors)
        toc = build_table_of_contents(body)
        html = self.content_template.render(
            title=title,
            stylesheets=self._stylesheets(articles[0]),
            scripts=self._scripts(articles[0]),
            toc_html=toc.html,
            body_html=toc.body_html,
        )
        return html, [entry.text for entry in toc.entries]

    def _stylesheets(self, article: Article) -> list[str]:
        custom = list(self.options.stylesheets)
        if (not custom or self.options.always_include_site_styles) and article.style_path:
            custom.append(article.style_path)
        return custom

    def _scripts(self, article: Article) -> list[str]:
        if self.options.scripts:
            return list(self.options.scripts)
        return [article.script_path] if article.script_path else []

    def _page_context(self, document: OutputDocument) -> dict[str, str]:
        return {
            "title": document.title,
            "version": document.version,
            "author": self.options.author,
            "project_name": self.site.project_name or "",
        }

    def create_pdf(self, document: OutputDocument, articles: list[Article]) -> Path:
        """Render the cover and two-pass content PDFs of ``document`` and merge them."""
        logger.info("Creating PDF %s", document.path)
        self.build_dir.mkdir(parents=True, exist_ok=True)
        title_pdf = self.build_dir / f"{document.slug}.title.pdf"
        raw_pdf = self.build_dir / f"{document.slug}.content.raw.pdf"
        content_pdf = self.build_dir / f"{document.slug}.content.pdf"
        content_html = self.build_dir / f"{document.slug}.content.html"

        page_context = self._page_context(document)
        self.renderer.render_pdf(
            PrintRequest(
                html=self.cover_template.render(**page_context),
                output=title_pdf,
                margins=self.options.cover_margins.as_dict(),
                header_template=self.options.cover_page_header,
                footer_template=self.options.cover_page_footer,
                timeout=self.options.render_timeout,
            )
        )

        html, headings = self.build_content_html(document.title, articles)
        header = self.header_template.render(**page_context)
        footer = self.footer_template.render(**page_context)

        def _content_request(content: str, output: Path) -> PrintRequest:
            return PrintRequest(
                html=content,
                output=output,
                margins=self.options.margins.as_dict(),
                header_template=header,
                footer_template=footer,
                timeout=self.options.render_timeout,
            )

        self.renderer.render_pdf(_content_request(html, raw_pdf))
        text = self.renderer.extract_text(raw_pdf)
        resolution = resolve_page_numbers(headings, text, self.options.footer_parser)
        for miss in resolution.misses:
            logger.warning(
                "Heading '%s' not found in %s; using page %d",
                miss.heading,
                raw_pdf.name,
                miss.fallback_page,
            )
        html = apply_page_numbers(html, resolution.numbers)
        self.renderer.render_pdf(_content_request(html, content_pdf))
        content_html.write_text(html, encoding="utf-8")

        self.renderer.merge_pdfs([title_pdf, content_pdf], document.path)

        for leftover in (title_pdf, raw_pdf, content_pdf):
            leftover.unlink(missing_ok=True)
        if not self.options.keep_debug_htmls:
            content_html.unlink(missing_ok=True)
        self.ctx.written.append(document.path)
        return document.path


__all__ = ["DocumentComposer"]

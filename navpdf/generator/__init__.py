"""Utilities for walking navigation trees and printing them as PDF documents."""

from .link_rewriter import AbsoluteLinkRewriter
from .models import ComposedNode, NavigationNode, OutputDocument
from .page_generator import DocumentComposer
from .renderer import PdfRenderer, PlaywrightRenderer
from .tree_walker import TreeWalker

__all__ = [
    "AbsoluteLinkRewriter",
    "ComposedNode",
    "DocumentComposer",
    "NavigationNode",
    "OutputDocument",
    "PdfRenderer",
    "PlaywrightRenderer",
    "TreeWalker",
]

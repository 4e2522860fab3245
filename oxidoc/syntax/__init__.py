"""Syntax adapter: parses source files into trees the extractor can walk."""

from oxidoc.syntax.rust import RUST_LANGUAGE, RustNode, RustParser, RustSyntaxTree
from oxidoc.syntax.tree import Span, SyntaxNode, SyntaxParser, SyntaxTree

__all__ = [
    "RUST_LANGUAGE",
    "RustNode",
    "RustParser",
    "RustSyntaxTree",
    "Span",
    "SyntaxNode",
    "SyntaxParser",
    "SyntaxTree",
]

"""Parser-independent view of a syntax tree.

The declaration extractor depends only on these protocols, never on the
concrete parser's node objects.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Span:
    """Source location of a node. Lines and columns are 1-based."""

    path: Path
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def __str__(self) -> str:
        return f"{self.path}:{self.start_line}:{self.start_column}"


@runtime_checkable
class SyntaxNode(Protocol):
    """A node of a parsed source tree."""

    @property
    def kind(self) -> str:
        """Grammar node type, e.g. ``function_item``."""
        ...

    @property
    def children(self) -> Sequence["SyntaxNode"]:
        """All children in source order, named and anonymous."""
        ...

    @property
    def span(self) -> Span: ...

    @property
    def text(self) -> str:
        """Exact source text covered by the node."""
        ...

    def field(self, name: str) -> "SyntaxNode | None":
        """Child stored under a grammar field name, if present."""
        ...


@runtime_checkable
class SyntaxTree(Protocol):
    """A parsed package entry file with its pretty-printer."""

    @property
    def root(self) -> SyntaxNode: ...

    def render_signature(self, node: SyntaxNode) -> str:
        """Render a declaration node's signature without its body."""
        ...


class SyntaxParser(Protocol):
    """Anything that turns an entry source file into a SyntaxTree."""

    def parse(self, path: Path) -> SyntaxTree:
        """Parse ``path``; raise ParseError on failure or diagnosed errors."""
        ...

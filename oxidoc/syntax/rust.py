"""Rust syntax adapter backed by tree-sitter.

Parses a crate's entry file together with every out-of-line module it
declares (``mod foo;`` resolved to ``foo.rs`` or ``foo/mod.rs``, or to a
``#[path = "..."]`` target). Each loaded module file is grafted into the tree
as an extra child of its ``mod_item`` so the extractor sees one tree per crate.

Tree-sitter always produces a tree; ``ERROR`` and missing nodes are turned
into diagnostics and the whole parse is rejected when any are present.
"""

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

import tree_sitter_rust
from tree_sitter import Language, Node, Parser

from oxidoc.exceptions import Diagnostic, ParseError
from oxidoc.logging import get_logger
from oxidoc.syntax.tree import Span, SyntaxNode

logger = get_logger(__name__)

RUST_LANGUAGE = Language(tree_sitter_rust.language())

_COMMENT_KINDS: frozenset[str] = frozenset({"line_comment", "block_comment"})
# Leaves whose inner structure the grammar may hide; always taken verbatim.
_ATOMIC_KINDS: frozenset[str] = frozenset({"string_literal", "raw_string_literal", "char_literal"})
_PATH_ATTRIBUTE = re.compile(r'#\s*\[\s*path\s*=\s*"([^"]+)"\s*\]')

_ModuleKey = tuple[Path, int]


@dataclass(frozen=True)
class _SourceFile:
    path: Path
    source: bytes

    def text(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


class RustNode:
    """SyntaxNode over a tree-sitter node."""

    __slots__ = ("_file", "_modules", "_node")

    def __init__(self, node: Node, file: _SourceFile, modules: dict[_ModuleKey, "RustNode"]) -> None:
        self._node = node
        self._file = file
        self._modules = modules

    @property
    def kind(self) -> str:
        return self._node.type

    @property
    def children(self) -> Sequence["RustNode"]:
        kids = [RustNode(child, self._file, self._modules) for child in self._node.children]
        if self._node.type == "mod_item":
            module = self._modules.get((self._file.path, self._node.start_byte))
            if module is not None:
                kids.append(module)
        return kids

    @property
    def span(self) -> Span:
        start_row, start_col = self._node.start_point
        end_row, end_col = self._node.end_point
        return Span(self._file.path, start_row + 1, start_col + 1, end_row + 1, end_col + 1)

    @property
    def text(self) -> str:
        return self._file.text(self._node)

    def field(self, name: str) -> "RustNode | None":
        child = self._node.child_by_field_name(name)
        if child is None:
            return None
        return RustNode(child, self._file, self._modules)

    def render_signature(self) -> str:
        """Declaration text up to the body, one line, comments dropped."""
        body = self._node.child_by_field_name("body")
        pieces: list[str] = []
        prev_end: int | None = None
        for leaf in _signature_leaves(self._node, body):
            if prev_end is not None and leaf.start_byte > prev_end:
                pieces.append(" ")
            pieces.append(self._file.text(leaf))
            prev_end = leaf.end_byte
        return _tidy_signature("".join(pieces))

    def __repr__(self) -> str:
        return f"RustNode({self.kind!r} at {self.span})"


@dataclass(frozen=True)
class RustSyntaxTree:
    """Parsed crate: the entry file's root plus every module file it pulled in."""

    root: RustNode
    files: tuple[Path, ...]

    def render_signature(self, node: SyntaxNode) -> str:
        if not isinstance(node, RustNode):
            raise TypeError(f"Expected a RustNode, got {type(node).__name__}")
        return node.render_signature()


class RustParser:
    """Parses Rust crate sources into RustSyntaxTree objects."""

    def __init__(self) -> None:
        self._parser = Parser(RUST_LANGUAGE)

    def parse(self, path: Path) -> RustSyntaxTree:
        """Parse ``path`` and the module files it declares.

        Raises:
            ParseError: a file could not be read, a module file is missing,
                or the source contains syntax errors. ``diagnostics`` lists
                every problem found.
        """
        modules: dict[_ModuleKey, RustNode] = {}
        diagnostics: list[Diagnostic] = []
        loaded: list[Path] = []
        root = self._load_file(path, path.parent, modules, diagnostics, loaded)
        if root is None or diagnostics:
            for diagnostic in diagnostics:
                logger.debug("%s", diagnostic)
            raise ParseError(f"Failed to parse {path}: {len(diagnostics)} error(s)", diagnostics)
        logger.debug("Parsed %s (%d files)", path, len(loaded))
        return RustSyntaxTree(root=root, files=tuple(loaded))

    def _load_file(
        self,
        path: Path,
        child_dir: Path,
        modules: dict[_ModuleKey, RustNode],
        diagnostics: list[Diagnostic],
        loaded: list[Path],
    ) -> RustNode | None:
        resolved = path.resolve()
        if resolved in loaded:
            diagnostics.append(Diagnostic(path, 1, 1, "module file is included more than once"))
            return None
        loaded.append(resolved)

        try:
            source = path.read_bytes()
        except OSError as e:
            diagnostics.append(Diagnostic(path, 1, 1, f"cannot read source file: {e}"))
            return None

        tree = self._parser.parse(source)
        file = _SourceFile(path, source)
        diagnostics.extend(_syntax_diagnostics(tree.root_node, file))
        self._load_modules(tree.root_node, file, child_dir, path.parent, modules, diagnostics, loaded)
        return RustNode(tree.root_node, file, modules)

    def _load_modules(
        self,
        container: Node,
        file: _SourceFile,
        directory: Path,
        attr_dir: Path,
        modules: dict[_ModuleKey, RustNode],
        diagnostics: list[Diagnostic],
        loaded: list[Path],
    ) -> None:
        for child in container.named_children:
            if child.type != "mod_item":
                continue
            name_node = child.child_by_field_name("name")
            if name_node is None:
                continue
            name = file.text(name_node).removeprefix("r#")

            body = child.child_by_field_name("body")
            if body is not None:
                nested = directory / name
                self._load_modules(body, file, nested, nested, modules, diagnostics, loaded)
                continue

            located = _locate_module_file(child, file, directory, attr_dir, name)
            if located is None:
                row, col = child.start_point
                diagnostics.append(Diagnostic(file.path, row + 1, col + 1, f"file not found for module `{name}`"))
                continue
            module_path, is_mod_rs = located
            child_dir = module_path.parent if is_mod_rs else module_path.parent / module_path.stem
            module_root = self._load_file(module_path, child_dir, modules, diagnostics, loaded)
            if module_root is not None:
                modules[(file.path, child.start_byte)] = module_root


def _locate_module_file(mod_item: Node, file: _SourceFile, directory: Path, attr_dir: Path, name: str) -> tuple[Path, bool] | None:
    """Return (module file, whether it resolves children like a mod.rs file)."""
    sibling = mod_item.prev_named_sibling
    while sibling is not None and (sibling.type == "attribute_item" or sibling.type in _COMMENT_KINDS):
        if sibling.type == "attribute_item" and (match := _PATH_ATTRIBUTE.fullmatch(file.text(sibling).strip())):
            target = attr_dir / match.group(1)
            return (target, True) if target.is_file() else None
        sibling = sibling.prev_named_sibling

    flat = directory / f"{name}.rs"
    if flat.is_file():
        return flat, False
    nested = directory / name / "mod.rs"
    if nested.is_file():
        return nested, True
    return None


def _syntax_diagnostics(root: Node, file: _SourceFile) -> list[Diagnostic]:
    if not root.has_error:
        return []
    found: list[Diagnostic] = []
    stack = [root]
    while stack:
        node = stack.pop()
        row, col = node.start_point
        if node.type == "ERROR":
            snippet = (file.text(node).strip().splitlines() or [""])[0][:40]
            found.append(Diagnostic(file.path, row + 1, col + 1, f"syntax error near {snippet!r}"))
            continue
        if node.is_missing:
            found.append(Diagnostic(file.path, row + 1, col + 1, f"missing `{node.type}`"))
            continue
        if node.has_error:
            stack.extend(reversed(node.children))
    return found


def _signature_leaves(node: Node, body: Node | None) -> Iterator[Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        if body is not None and current == body:
            continue
        if current.type in _COMMENT_KINDS:
            continue
        if current.child_count == 0 or current.type in _ATOMIC_KINDS:
            yield current
            continue
        stack.extend(reversed(current.children))


def _tidy_signature(raw: str) -> str:
    # Trailing commas before a line break ("a: u32,\n)") are formatting, unlike "(u32,)".
    text = re.sub(r",\s+([)\]>])", r"\1", raw)
    text = re.sub(r"([(\[])\s+", r"\1", text)
    text = re.sub(r"\s+([)\],])", r"\1", text)
    return text.strip().rstrip(",;").rstrip()

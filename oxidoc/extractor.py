"""Free-function extraction from a parsed syntax tree.

Walks the tree in pre-order and emits one FunctionDoc per free function.
Methods, trait items, foreign functions and closures are recognized and
skipped; the walk still descends into their bodies so nested functions and
modules are found. Macro invocations and macro definitions are opaque.
"""

from dataclasses import dataclass
from enum import StrEnum

from oxidoc.exceptions import UnsupportedModifierError
from oxidoc.logging import get_logger
from oxidoc.models import Abi, Constness, FunctionDoc, Unsafety, Visibility
from oxidoc.syntax.tree import SyntaxNode, SyntaxTree

logger = get_logger(__name__)


class DeclarationKind(StrEnum):
    """Function-like declarations the walk distinguishes."""

    FREE_FUNCTION = "free_function"
    METHOD = "method"
    FOREIGN_FUNCTION = "foreign_function"
    CLOSURE = "closure"


class _Container(StrEnum):
    """Owner of the innermost item list a node sits in."""

    MODULE = "module"
    IMPL = "impl"
    TRAIT = "trait"
    FOREIGN = "foreign"
    FUNCTION = "function"


_OPAQUE_KINDS: frozenset[str] = frozenset({"macro_invocation", "macro_definition"})
_CONTAINER_OF: dict[str, _Container] = {
    "source_file": _Container.MODULE,
    "mod_item": _Container.MODULE,
    "impl_item": _Container.IMPL,
    "trait_item": _Container.TRAIT,
    "foreign_mod_item": _Container.FOREIGN,
    "function_item": _Container.FUNCTION,
    "function_signature_item": _Container.FUNCTION,
    "closure_expression": _Container.FUNCTION,
    # Initializer expressions can declare items even inside impl and trait bodies.
    "const_item": _Container.FUNCTION,
    "static_item": _Container.FUNCTION,
    "block": _Container.FUNCTION,
}

# Every grammar visibility form, mapped explicitly. Restricted forms are not public.
_VISIBILITY: dict[str, Visibility] = {
    "pub": Visibility.PUBLIC,
    "pub(crate)": Visibility.PRIVATE,
    "pub(self)": Visibility.PRIVATE,
    "pub(super)": Visibility.PRIVATE,
    "crate": Visibility.PRIVATE,
}


@dataclass(frozen=True)
class _Frame:
    node: SyntaxNode
    scope: tuple[str, ...]
    container: _Container


def crate_segment(package_name: str) -> str:
    """Crate identifier Rust derives from a package name (``serde-json`` -> ``serde_json``)."""
    return package_name.replace("-", "_")


def classify(node: SyntaxNode, container: _Container) -> DeclarationKind | None:
    """Classify a node as a function-like declaration, or None for anything else."""
    match node.kind:
        case "closure_expression":
            return DeclarationKind.CLOSURE
        case "function_item" | "function_signature_item" if container in (_Container.IMPL, _Container.TRAIT):
            return DeclarationKind.METHOD
        case "function_item" | "function_signature_item" if container is _Container.FOREIGN:
            return DeclarationKind.FOREIGN_FUNCTION
        case "function_item":
            return DeclarationKind.FREE_FUNCTION
        case _:
            return None


def extract_functions(tree: SyntaxTree, crate_name: str | None = None) -> list[FunctionDoc]:
    """Extract free functions in pre-order, depth-first source order.

    Args:
        tree: Parsed crate.
        crate_name: Package name; when given, its crate identifier is the
            first segment of every symbol path.

    Raises:
        UnsupportedModifierError: a function carries a visibility, qualifier
            or ABI with no mapping in the closed enumerations.
    """
    root_scope = (crate_segment(crate_name),) if crate_name else ()
    docs: list[FunctionDoc] = []
    skipped = 0
    stack = [_Frame(tree.root, root_scope, _Container.MODULE)]

    while stack:
        frame = stack.pop()
        node = frame.node
        if node.kind in _OPAQUE_KINDS:
            continue

        child_scope = frame.scope
        kind = classify(node, frame.container)
        match kind:
            case DeclarationKind.FREE_FUNCTION:
                name = _declared_name(node)
                if name is not None:
                    docs.append(_function_doc(tree, node, frame.scope + (name,)))
                    child_scope = frame.scope + (name,)
            case DeclarationKind.METHOD | DeclarationKind.FOREIGN_FUNCTION:
                skipped += 1
                if (name := _declared_name(node)) is not None:
                    child_scope = frame.scope + (name,)
            case DeclarationKind.CLOSURE:
                skipped += 1
            case None:
                if node.kind == "mod_item" and (name := _declared_name(node)) is not None:
                    child_scope = frame.scope + (name,)

        child_container = _CONTAINER_OF.get(node.kind, frame.container)
        stack.extend(_Frame(child, child_scope, child_container) for child in reversed(node.children))

    logger.debug("Extracted %d free functions (%d other function-like declarations skipped)", len(docs), skipped)
    return docs


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _declared_name(node: SyntaxNode) -> str | None:
    name_node = node.field("name")
    if name_node is None:
        return None
    return name_node.text.removeprefix("r#")


def _function_doc(tree: SyntaxTree, node: SyntaxNode, path: tuple[str, ...]) -> FunctionDoc:
    unsafety, constness, abi = _qualifiers(node)
    return FunctionDoc(
        symbol_path=path,
        signature=tree.render_signature(node),
        unsafety=unsafety,
        constness=constness,
        visibility=_visibility(node),
        calling_convention=abi,
    )


def _visibility(node: SyntaxNode) -> Visibility:
    modifier = next((c for c in node.children if c.kind == "visibility_modifier"), None)
    if modifier is None:
        return Visibility.PRIVATE
    text = "".join(modifier.text.split())
    if text in _VISIBILITY:
        return _VISIBILITY[text]
    if text.startswith("pub(in"):
        return Visibility.PRIVATE
    raise UnsupportedModifierError(f"Unsupported visibility {modifier.text!r} at {modifier.span}")


def _qualifiers(node: SyntaxNode) -> tuple[Unsafety, Constness, Abi]:
    unsafety = Unsafety.NORMAL
    constness = Constness.NOT_CONST
    abi = Abi.RUST
    for child in node.children:
        if child.kind != "function_modifiers":
            continue
        for modifier in child.children:
            match modifier.kind:
                case "unsafe":
                    unsafety = Unsafety.UNSAFE
                case "const":
                    constness = Constness.CONST
                case "extern_modifier":
                    abi = _abi(modifier)
                case "async" | "default":
                    pass
                case _:
                    raise UnsupportedModifierError(f"Unsupported function qualifier {modifier.text!r} at {modifier.span}")
    return unsafety, constness, abi


def _abi(modifier: SyntaxNode) -> Abi:
    literal = next((c for c in modifier.children if c.kind in ("string_literal", "raw_string_literal")), None)
    if literal is None:
        # Bare `extern fn` defaults to the C ABI.
        return Abi.C
    text = literal.text
    if text.startswith("r"):
        text = text[1:].strip("#")
    name = text.strip('"')
    try:
        return Abi(name)
    except ValueError as e:
        raise UnsupportedModifierError(f"Unsupported ABI {name!r} at {modifier.span}") from e

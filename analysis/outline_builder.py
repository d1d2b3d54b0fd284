# Ethan Doughty
# outline_builder.py
"""Build the outline tree from a parsed Go file.

Each top-level declaration becomes one or more OutlineNodes under a single
package root:

    func / method           -> function (receiverType for methods)
    import (...)            -> one import per spec, labelled by the path literal
    type (...)              -> one type per spec, members not expanded
    const (...) / var (...) -> one constant/variable per bound name

Anything else is a hard error; no partial outline is ever returned.
"""

from __future__ import annotations
import logging
from typing import Any, Iterator, List, Optional

from frontend.go_parser import ParsedFile
from frontend.render import receiver_type_node, render_type
from ir.errors import RenderError, UnknownDeclarationError, UnknownSpecError
from ir.outline import (
    OutlineNode, Span,
    PACKAGE, IMPORT, TYPE, FUNCTION, VARIABLE, CONSTANT,
)

logger = logging.getLogger(__name__)

Node = Any

# Grouped declaration node type -> declaration token
_GEN_DECL_TOKENS = {
    "import_declaration": "import",
    "type_declaration": "type",
    "const_declaration": "const",
    "var_declaration": "var",
}

_FUNC_DECLS = {"function_declaration", "method_declaration"}

# Parenthesized spec groups that wrap specs in their own node
_SPEC_LISTS = {"import_spec_list", "var_spec_list", "const_spec_list", "type_spec_list"}

_TYPE_SPECS = {"type_spec", "type_alias"}
_VALUE_SPECS = {"const_spec", "var_spec"}


def _span(parsed: ParsedFile, node: Node) -> Span:
    return Span(parsed.start(node), parsed.end(node))


def _ident_span(parsed: ParsedFile, node: Optional[Node]) -> Optional[Span]:
    """Span of an identifier node, or None for an empty slot."""
    if node is None or node.end_byte <= node.start_byte:
        return None
    return _span(parsed, node)


def _label(parsed: ParsedFile, node: Optional[Node]) -> str:
    return parsed.text(node) if node is not None else ""


def _iter_specs(decl: Node) -> Iterator[Node]:
    """Yield the specs of a grouped declaration in source order."""
    for child in decl.named_children:
        if child.type == "comment":
            continue
        if child.type in _SPEC_LISTS:
            yield from _iter_specs(child)
        else:
            yield child


def _function_node(parsed: ParsedFile, decl: Node) -> OutlineNode:
    name = decl.child_by_field_name("name")
    receiver_type = None
    if decl.type == "method_declaration":
        try:
            receiver = decl.child_by_field_name("receiver")
            if receiver is None:
                raise RenderError(f"method has no receiver @ {parsed.start(decl)}",
                                  pos=parsed.start(decl))
            receiver_type = render_type(receiver_type_node(receiver), parsed.source)
        except RenderError as e:
            raise RenderError(f"failed to parse receiver type: {e}", pos=e.pos) from e

    return OutlineNode(
        label=_label(parsed, name),
        kind=FUNCTION,
        receiver_type=receiver_type,
        range=_span(parsed, decl),
        identifier_range=_ident_span(parsed, name),
    )


def _spec_nodes(parsed: ParsedFile, token: str, spec: Node) -> List[OutlineNode]:
    """Outline nodes for one spec of a grouped declaration."""
    if spec.type == "import_spec":
        path = spec.child_by_field_name("path")
        return [OutlineNode(
            label=_label(parsed, path),
            kind=IMPORT,
            range=_span(parsed, spec),
            identifier_range=_ident_span(parsed, spec.child_by_field_name("name")),
        )]

    if spec.type in _TYPE_SPECS:
        # Struct fields and interface methods are not outlined
        name = spec.child_by_field_name("name")
        return [OutlineNode(
            label=_label(parsed, name),
            kind=TYPE,
            range=_span(parsed, spec),
            identifier_range=_ident_span(parsed, name),
        )]

    if spec.type in _VALUE_SPECS:
        kind = CONSTANT if token == "const" else VARIABLE
        nodes = []
        # Several names can share one spec; each gets its own node and span
        # const_spec tags its comma separators with the name field too
        idents = [n for n in spec.children_by_field_name("name") if n.is_named]
        for ident in idents:
            nodes.append(OutlineNode(
                label=_label(parsed, ident),
                kind=kind,
                range=_span(parsed, ident),
                identifier_range=_ident_span(parsed, ident),
            ))
        return nodes

    raise UnknownSpecError(token, spec.type, parsed.start(spec),
                           where=str(parsed.position(parsed.start(spec))))


def declaration_nodes(parsed: ParsedFile, decl: Node) -> List[OutlineNode]:
    """Outline nodes for one top-level declaration.

    Raises:
        RenderError: method receiver type cannot be rendered
        UnknownSpecError: unrecognized spec inside a grouped declaration
        UnknownDeclarationError: decl is not a recognized declaration
    """
    if decl.type in _FUNC_DECLS:
        return [_function_node(parsed, decl)]

    token = _GEN_DECL_TOKENS.get(decl.type)
    if token is not None:
        nodes: List[OutlineNode] = []
        for spec in _iter_specs(decl):
            nodes.extend(_spec_nodes(parsed, token, spec))
        return nodes

    raise UnknownDeclarationError(decl.type, parsed.start(decl),
                                  where=str(parsed.position(parsed.start(decl))))


def build_outline(parsed: ParsedFile) -> List[OutlineNode]:
    """Build the outline for a parsed file.

    Args:
        parsed: Output of parse_go / acquire_source

    Returns:
        One-element list holding the package root node

    Raises:
        RenderError, UnknownSpecError, UnknownDeclarationError
    """
    children: List[OutlineNode] = []
    for decl in parsed.decls:
        children.extend(declaration_nodes(parsed, decl))

    name = parsed.package_name
    # File extent runs from the package keyword to the last declaration kept
    last = parsed.decls[-1] if parsed.decls else (name or parsed.package)
    root = OutlineNode(
        label=_label(parsed, name),
        kind=PACKAGE,
        range=Span(parsed.start(parsed.package), parsed.end(last)),
        identifier_range=_ident_span(parsed, name),
        children=children,
    )
    logger.debug("Outlined %s: %d declarations -> %d nodes",
                 parsed.path, len(parsed.decls), len(children))
    return [root]

"""Document symbol provider for outline view."""
from __future__ import annotations
from typing import List

from lsprotocol import types

from frontend.go_parser import ParsedFile
from ir.outline import (
    NO_POS, OutlineNode, Span,
    PACKAGE, IMPORT, TYPE, FUNCTION, VARIABLE, CONSTANT,
)

SYMBOL_KINDS = {
    PACKAGE: types.SymbolKind.Package,
    IMPORT: types.SymbolKind.Module,
    TYPE: types.SymbolKind.Class,
    FUNCTION: types.SymbolKind.Function,
    VARIABLE: types.SymbolKind.Variable,
    CONSTANT: types.SymbolKind.Constant,
}


def to_lsp_position(parsed: ParsedFile, pos: int) -> types.Position:
    """Convert a file position to an LSP position (0-based line, UTF-16 character)."""
    if pos <= NO_POS:
        return types.Position(line=0, character=0)
    resolved = parsed.position(pos)
    line_start = parsed.line_start(resolved.line)
    prefix = parsed.source[line_start:line_start + resolved.column - 1]
    character = len(prefix.decode("utf-8", errors="replace").encode("utf-16-le")) // 2
    return types.Position(line=resolved.line - 1, character=character)


def to_lsp_range(parsed: ParsedFile, span: Span) -> types.Range:
    return types.Range(
        start=to_lsp_position(parsed, span.start),
        end=to_lsp_position(parsed, span.end),
    )


def _symbol(node: OutlineNode, parsed: ParsedFile) -> types.DocumentSymbol:
    kind = SYMBOL_KINDS[node.kind]
    if node.is_method:
        kind = types.SymbolKind.Method

    full_range = to_lsp_range(parsed, node.range)
    # Selection range: the name, falling back to the whole declaration
    if node.identifier_range is not None:
        selection_range = to_lsp_range(parsed, node.identifier_range)
    else:
        selection_range = full_range

    return types.DocumentSymbol(
        name=node.label or "_",
        kind=kind,
        range=full_range,
        selection_range=selection_range,
        detail=node.receiver_type,
        children=[_symbol(c, parsed) for c in node.children] or None,
    )


def get_document_symbols(outline: List[OutlineNode], parsed: ParsedFile) -> list[types.DocumentSymbol]:
    """Convert an outline to LSP document symbols.

    Args:
        outline: Outline as returned by build_outline
        parsed: The ParsedFile the outline was built from (for positions)

    Returns:
        One DocumentSymbol per root node, with declarations as children
    """
    return [_symbol(node, parsed) for node in outline]

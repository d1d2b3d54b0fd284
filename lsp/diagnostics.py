"""Convert outline failures to LSP Diagnostic objects."""
from __future__ import annotations

from typing import Optional

from lsprotocol import types

from frontend.go_parser import ParsedFile
from ir.errors import (
    OutlineError, ParseError, RenderError, UnknownDeclarationError, UnknownSpecError,
)

# Error class -> diagnostic code
ERROR_CODES = {
    ParseError: "E_PARSE",
    RenderError: "E_RECEIVER_RENDER",
    UnknownDeclarationError: "E_UNKNOWN_DECLARATION",
    UnknownSpecError: "E_UNKNOWN_SPEC",
}


def _error_code(err: OutlineError) -> str:
    for cls, code in ERROR_CODES.items():
        if isinstance(err, cls):
            return code
    return "E_OUTLINE"


def _line_range(source_lines: list[str], line_num: int, start_char: int) -> types.Range:
    if 0 <= line_num < len(source_lines):
        end_char = len(source_lines[line_num])
    else:
        end_char = 0
    return types.Range(
        start=types.Position(line=line_num, character=min(start_char, end_char)),
        end=types.Position(line=line_num, character=end_char),
    )


def to_lsp_diagnostic(
    err: OutlineError,
    source_lines: list[str],
    parsed: Optional[ParsedFile] = None,
) -> types.Diagnostic:
    """Convert an outline failure to an LSP Diagnostic.

    Args:
        err: The failure raised while outlining
        source_lines: Document text split into lines
        parsed: ParsedFile for resolving the error position, when parsing got that far

    Returns:
        Error-severity Diagnostic spanning the rest of the offending line
        (line 0 when the error carries no position)
    """
    pos = getattr(err, "pos", 0) or 0
    line_num, start_char = 0, 0
    if pos > 0:
        if parsed is not None:
            resolved = parsed.position(pos)
            line_num, start_char = resolved.line - 1, resolved.column - 1
        else:
            # Count lines in the raw text up to the byte offset
            src = "\n".join(source_lines).encode("utf-8")[:pos - 1]
            line_num = src.count(b"\n")
            start_char = len(src) - (src.rfind(b"\n") + 1)

    return types.Diagnostic(
        range=_line_range(source_lines, line_num, start_char),
        severity=types.DiagnosticSeverity.Error,
        code=_error_code(err),
        source="gooutline",
        message=str(err),
    )

"""Outline tree types and error hierarchy."""

from ir.outline import (
    OutlineKind, OutlineNode, Span, KINDS, NO_POS,
    PACKAGE, IMPORT, TYPE, FUNCTION, VARIABLE, CONSTANT,
)
from ir.errors import (
    OutlineError, AcquisitionError, DecodeError, ArchiveLookupError,
    ParseError, RenderError, UnknownDeclarationError, UnknownSpecError,
)

__all__ = [
    "OutlineKind", "OutlineNode", "Span", "KINDS", "NO_POS",
    "PACKAGE", "IMPORT", "TYPE", "FUNCTION", "VARIABLE", "CONSTANT",
    "OutlineError", "AcquisitionError", "DecodeError", "ArchiveLookupError",
    "ParseError", "RenderError", "UnknownDeclarationError", "UnknownSpecError",
]

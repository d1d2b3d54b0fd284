# Ethan Doughty
# outline.py
"""Outline tree for a single Go source file.

One OutlineNode per top-level declaration, hung under a single package
root. Positions are opaque file offsets (byte offset + 1, the way a
single-file Go token.FileSet numbers them); resolve them with the
ParsedFile that produced the tree.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

OutlineKind = str

PACKAGE = "package"
IMPORT = "import"
TYPE = "type"
FUNCTION = "function"
VARIABLE = "variable"
CONSTANT = "constant"

KINDS = frozenset({PACKAGE, IMPORT, TYPE, FUNCTION, VARIABLE, CONSTANT})

# Position value meaning "no position"
NO_POS = 0


@dataclass(frozen=True)
class Span:
    """Half-open source span [start, end) in file positions."""
    start: int
    end: int

    def contains(self, other: Span) -> bool:
        return self.start <= other.start and other.end <= self.end


@dataclass(frozen=True)
class OutlineNode:
    """One entry in the outline tree.

    Fields:
        label: Identifier, or the import path literal as written (quotes kept)
        kind: One of KINDS
        range: Full span of the declaration
        identifier_range: Span of the name alone, None when there is no name
        receiver_type: Rendered receiver type for methods, None otherwise
        children: Nested nodes (only the package root has any)
    """
    label: str
    kind: OutlineKind
    range: Span
    identifier_range: Optional[Span] = None
    receiver_type: Optional[str] = None
    children: List[OutlineNode] = field(default_factory=list)

    def __post_init__(self):
        if self.kind not in KINDS:
            raise ValueError(f"unknown outline kind {self.kind!r}")
        if self.receiver_type is not None and self.kind != FUNCTION:
            raise ValueError(f"receiver type set on {self.kind} node {self.label!r}")

    @property
    def is_method(self) -> bool:
        return self.receiver_type is not None

    def walk(self):
        """Yield this node and every descendant, depth first, in source order."""
        yield self
        for child in self.children:
            yield from child.walk()

# Ethan Doughty
# go_parser.py
"""Go parsing via the tree-sitter Go grammar.

Wraps the concrete syntax tree in a ParsedFile: the package clause, the
ordered top-level declarations, and the position context needed to turn
file positions back into line/column.
"""

from __future__ import annotations
import bisect
import functools
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from tree_sitter_language_pack import get_parser

from ir.errors import ParseError
from ir.outline import NO_POS

logger = logging.getLogger(__name__)

# tree-sitter node (duck-typed so tests can supply stand-ins)
Node = Any

COMMENT = "comment"
PACKAGE_CLAUSE = "package_clause"
IMPORT_DECLARATION = "import_declaration"


@functools.lru_cache(maxsize=1)
def _go_parser():
    return get_parser("go")


@dataclass(frozen=True)
class Position:
    """Resolved source position (1-based line, 1-based byte column)."""
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        if self.line == 0:
            return self.filename or "-"
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass
class ParsedFile:
    """Parsed Go file plus its position-resolution context.

    Fields:
        path: File name used for messages and position resolution
        source: Raw source bytes that were parsed
        package: package_clause node
        decls: Top-level declaration nodes in source order (comments removed)
        imports_only: True if decls were cut after the import prefix
    """
    path: str
    source: bytes
    package: Node
    decls: List[Node]
    imports_only: bool = False
    _line_starts: List[int] = field(default_factory=list, repr=False)

    def __post_init__(self):
        if not self._line_starts:
            starts = [0]
            idx = self.source.find(b"\n")
            while idx != -1:
                starts.append(idx + 1)
                idx = self.source.find(b"\n", idx + 1)
            self._line_starts = starts

    # -- positions --

    @staticmethod
    def pos(offset: int) -> int:
        """Byte offset -> file position (base 1)."""
        return offset + 1

    def start(self, node: Node) -> int:
        return self.pos(node.start_byte)

    def end(self, node: Node) -> int:
        return self.pos(node.end_byte)

    def offset(self, pos: int) -> int:
        """File position -> byte offset."""
        return pos - 1

    def position(self, pos: int) -> Position:
        """Resolve a file position to line/column.

        Position 0 (no position) resolves to line 0.
        """
        if pos <= NO_POS:
            return Position(self.path, 0, 0)
        off = min(self.offset(pos), len(self.source))
        line_idx = bisect.bisect_right(self._line_starts, off) - 1
        return Position(self.path, line_idx + 1, off - self._line_starts[line_idx] + 1)

    def line_start(self, line: int) -> int:
        """Byte offset of the first byte of a 1-based line."""
        return self._line_starts[line - 1]

    # -- text --

    def text(self, node: Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    @property
    def package_name(self) -> Optional[Node]:
        for child in self.package.named_children:
            if child.type in ("package_identifier", "identifier"):
                return child
        return None


def _first_error(node: Node) -> Optional[Node]:
    """Find the first ERROR or MISSING node beneath node, in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        if not current.has_error:
            continue
        # Reverse so the leftmost child is examined first
        stack.extend(reversed(current.children))
    return None


def _check_errors(path: str, source: bytes, nodes: List[Node]) -> None:
    for node in nodes:
        if not node.has_error:
            continue
        bad = _first_error(node) or node
        row, col = bad.start_point
        if bad.is_missing:
            msg = f"{row + 1}:{col + 1}: missing {bad.type}"
        else:
            snippet = source[bad.start_byte:bad.end_byte].decode("utf-8", errors="replace")
            snippet = snippet.splitlines()[0] if snippet else ""
            msg = f"{row + 1}:{col + 1}: syntax error near {snippet!r}"
        raise ParseError(path, msg, pos=bad.start_byte + 1)


def parse_go(path: str, content: bytes, imports_only: bool = False) -> ParsedFile:
    """Parse Go source.

    Args:
        path: File name (used in messages and positions)
        content: Source bytes
        imports_only: Stop after the import declarations following the
            package clause; later declarations are neither returned nor
            checked for syntax errors

    Returns:
        ParsedFile

    Raises:
        ParseError: Missing package clause or a syntax error
    """
    tree = _go_parser().parse(content)
    root = tree.root_node

    top = [n for n in root.named_children if n.type != COMMENT]
    if not top or top[0].type != PACKAGE_CLAUSE:
        where = top[0].start_point if top else (0, 0)
        raise ParseError(path, f"{where[0] + 1}:{where[1] + 1}: expected 'package'",
                         pos=(top[0].start_byte + 1) if top else 0)

    package, decls = top[0], top[1:]
    if imports_only:
        prefix = []
        for decl in decls:
            if decl.type != IMPORT_DECLARATION:
                break
            prefix.append(decl)
        decls = prefix
        _check_errors(path, content, [package] + decls)
    else:
        _check_errors(path, content, [root])

    logger.debug("Parsed %s: %d top-level declarations (imports_only=%s)",
                 path, len(decls), imports_only)
    return ParsedFile(path=path, source=content, package=package,
                      decls=decls, imports_only=imports_only)

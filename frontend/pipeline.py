# frontend/pipeline.py
"""Convenience functions for the outline pipeline."""

from __future__ import annotations
from typing import List, Union

from frontend.go_parser import ParsedFile, parse_go
from analysis.outline_builder import build_outline
from ir import OutlineNode


def parse_syntax(path: str, src: Union[str, bytes], imports_only: bool = False) -> ParsedFile:
    """Parse Go source text held in memory.

    Args:
        path: File name for messages and positions
        src: Source text (str is encoded as UTF-8)
        imports_only: Stop after the import declarations

    Returns:
        ParsedFile
    """
    if isinstance(src, str):
        src = src.encode("utf-8")
    return parse_go(path, src, imports_only=imports_only)


def outline_source(path: str, src: Union[str, bytes], imports_only: bool = False) -> List[OutlineNode]:
    """Parse and outline Go source text held in memory.

    Returns:
        One-element list holding the package root
    """
    return build_outline(parse_syntax(path, src, imports_only=imports_only))

# Ethan Doughty
# analysis/__init__.py
"""Analysis package — outline extraction for Go source files."""

from __future__ import annotations
from typing import BinaryIO, List, Optional

from analysis.outline_builder import build_outline, declaration_nodes
from frontend.source import OutlineConfig, acquire_source
from ir import OutlineNode


def outline_file(config: OutlineConfig, stdin: Optional[BinaryIO] = None) -> List[OutlineNode]:
    """Acquire, parse, and outline the file named by config.

    Args:
        config: Run configuration (path, imports-only, modified mode)
        stdin: Overlay archive stream for modified mode

    Returns:
        One-element list holding the package root

    Raises:
        OutlineError: any acquisition, parse, or build failure
    """
    parsed = acquire_source(config, stdin)
    return build_outline(parsed)


__all__ = ["build_outline", "declaration_nodes", "outline_file"]

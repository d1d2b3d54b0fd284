# Ethan Doughty
# errors.py
"""Errors raised while acquiring, parsing, or outlining a Go file.

Every one of them is terminal for the run: callers report str(err) once
and produce no outline.
"""

from __future__ import annotations
from typing import Optional


class OutlineError(Exception):
    """Base class for all outline failures."""
    pass


class AcquisitionError(OutlineError):
    """Source text could not be obtained (unreadable file, bad archive)."""
    pass


class DecodeError(AcquisitionError):
    """Overlay archive on the input stream is malformed."""
    pass


class ArchiveLookupError(AcquisitionError, LookupError):
    """Requested path is not present in the overlay archive."""

    def __init__(self, path: str):
        super().__init__(f"couldn't find {path} in archive")
        self.path = path


class ParseError(OutlineError):
    """Source is not valid Go per the parser.

    Fields:
        path: File name given to the parser
        message: Underlying parser message (includes line:col)
        pos: File position of the first error, 0 when unknown
    """

    def __init__(self, path: str, message: str, pos: int = 0):
        super().__init__(f"could not parse file {path}: {message}")
        self.path = path
        self.message = message
        self.pos = pos


class RenderError(OutlineError):
    """Receiver type expression could not be rendered back to source."""

    def __init__(self, message: str, pos: int = 0):
        super().__init__(message)
        self.pos = pos


class UnknownDeclarationError(OutlineError):
    """Top-level construct that is not an import/type/const/var/func declaration."""

    def __init__(self, node_type: str, pos: int, where: Optional[str] = None):
        super().__init__(f"unknown declaration {node_type} @ {where or pos}")
        self.node_type = node_type
        self.pos = pos


class UnknownSpecError(OutlineError):
    """Spec inside a grouped declaration that is none of import/type/value."""

    def __init__(self, token: str, node_type: str, pos: int, where: Optional[str] = None):
        super().__init__(f"unknown {token} spec {node_type} @ {where or pos}")
        self.token = token
        self.node_type = node_type
        self.pos = pos

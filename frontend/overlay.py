# Ethan Doughty
# overlay.py
"""Overlay archive decoder for outlining unsaved editor buffers.

An archive is a sequence of entries, each laid out as:

    <file name>\\n
    <decimal size in bytes>\\n
    <size bytes of file content>

Editors write one entry per modified buffer to the tool's standard input.
File names are trimmed and normalized so lookups match regardless of
redundant separators or '.' components.
"""

from __future__ import annotations
import logging
import posixpath
from typing import BinaryIO, Dict

from ir.errors import ArchiveLookupError, DecodeError

logger = logging.getLogger(__name__)

# Sizes are parsed as 32-bit unsigned, like the editor-side encoder writes them
MAX_ENTRY_SIZE = 2 ** 32 - 1


def clean_path(path: str) -> str:
    """Normalize a path the way archive keys are normalized."""
    path = path.strip()
    if not path:
        return "."
    return posixpath.normpath(path.replace("\\", "/"))


def parse_overlay_archive(stream: BinaryIO) -> Dict[str, bytes]:
    """Decode an overlay archive from a binary stream.

    Args:
        stream: Readable binary stream positioned at the first entry

    Returns:
        Dict mapping cleaned file name -> replacement content

    Raises:
        DecodeError: Truncated entry or malformed size line
    """
    overlay: Dict[str, bytes] = {}
    while True:
        name_line = stream.readline()
        if not name_line.strip() and not name_line.endswith(b"\n"):
            break  # end of archive (trailing whitespace allowed)
        if not name_line.endswith(b"\n"):
            raise DecodeError(f"reading archive file name: unexpected EOF after {name_line!r}")
        try:
            filename = clean_path(name_line.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise DecodeError(f"reading archive file name: {e}") from e

        size_line = stream.readline()
        if not size_line.endswith(b"\n"):
            raise DecodeError(f"reading size of archive file {filename}: unexpected EOF")
        size_text = size_line.strip().decode("ascii", errors="replace")
        if not size_text.isdigit():
            raise DecodeError(f"parsing size of archive file {filename}: invalid size {size_text!r}")
        size = int(size_text)
        if size > MAX_ENTRY_SIZE:
            raise DecodeError(f"parsing size of archive file {filename}: size {size} out of range")

        content = stream.read(size)
        if len(content) != size:
            raise DecodeError(
                f"reading archive file {filename}: expected {size} bytes, got {len(content)}"
            )
        overlay[filename] = content

    logger.debug("Decoded overlay archive with %d entries", len(overlay))
    return overlay


def lookup(overlay: Dict[str, bytes], path: str) -> bytes:
    """Return the archive content for path.

    Raises:
        ArchiveLookupError: path has no entry in the archive
    """
    content = overlay.get(clean_path(path))
    if content is None:
        raise ArchiveLookupError(path)
    return content


def encode_overlay_archive(files: Dict[str, bytes]) -> bytes:
    """Encode files into archive form (the inverse of parse_overlay_archive)."""
    parts = []
    for name, content in files.items():
        parts.append(f"{name}\n{len(content)}\n".encode("utf-8"))
        parts.append(content)
    return b"".join(parts)

# Ethan Doughty
# source.py
"""Source acquisition: disk or overlay archive, then parse."""

from __future__ import annotations
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from frontend.go_parser import ParsedFile, parse_go
from frontend.overlay import lookup, parse_overlay_archive
from ir.errors import AcquisitionError, DecodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutlineConfig:
    """Per-run settings, built once from the command line.

    Fields:
        file: Path of the Go file to outline
        imports_only: Only outline the package clause and imports
        modified: Read the file content from an overlay archive on stdin
    """
    file: str
    imports_only: bool = False
    modified: bool = False


def read_source(config: OutlineConfig, stdin: Optional[BinaryIO] = None) -> bytes:
    """Return the raw bytes to outline for config.file.

    Raises:
        AcquisitionError: file unreadable
        DecodeError: overlay archive malformed (modified mode)
        ArchiveLookupError: file missing from the overlay archive (modified mode)
    """
    if config.modified:
        stream = stdin if stdin is not None else sys.stdin.buffer
        logger.debug("Reading overlay archive for %s", config.file)
        try:
            archive = parse_overlay_archive(stream)
        except DecodeError as e:
            raise DecodeError(f"failed to parse -modified archive: {e}") from e
        return lookup(archive, config.file)

    logger.debug("Reading %s from disk", config.file)
    try:
        return Path(config.file).read_bytes()
    except OSError as e:
        raise AcquisitionError(f"could not read file {config.file}: {e.strerror or e}") from e


def acquire_source(config: OutlineConfig, stdin: Optional[BinaryIO] = None) -> ParsedFile:
    """Read and parse the file named by config.

    Args:
        config: Run configuration
        stdin: Binary stream carrying the overlay archive (modified mode);
            defaults to the process's standard input

    Returns:
        ParsedFile ready for the outline builder

    Raises:
        AcquisitionError: see read_source
        ParseError: content is not valid Go
    """
    content = read_source(config, stdin)
    return parse_go(config.file, content, imports_only=config.imports_only)

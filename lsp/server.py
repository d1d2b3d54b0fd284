"""LSP server for gooutline Go outline extractor."""
from __future__ import annotations

import asyncio
import hashlib
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import urlparse, unquote

from pygls.lsp.server import LanguageServer
from lsprotocol import types

from frontend.go_parser import ParsedFile
from frontend.pipeline import parse_syntax
from analysis.outline_builder import build_outline
from ir import OutlineNode, OutlineError, ParseError
from lsp.diagnostics import to_lsp_diagnostic
from lsp.symbols import get_document_symbols

logger = logging.getLogger(__name__)


@dataclass
class OutlineCache:
    """Last-good outline per document."""

    outline: List[OutlineNode]
    parsed: ParsedFile
    source_hash: str
    settings_hash: str  # Hash of settings used when outlining


# Global cache: URI -> OutlineCache
outline_cache: Dict[str, OutlineCache] = {}

# Debouncing: URI -> asyncio.Task
debounce_tasks: Dict[str, asyncio.Task] = {}

# Server settings (updated via workspace/didChangeConfiguration or initializationOptions)
server_settings: Dict[str, object] = {
    "imports_only": False,
    "outline_on_change": True,
}

# Create server instance
server = LanguageServer(
    "gooutline", "v1.0", text_document_sync_kind=types.TextDocumentSyncKind.Full
)


def _compute_hash(source: str) -> str:
    """Compute hash of source text for cache validation."""
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def _compute_settings_hash() -> str:
    """Compute hash of current server settings for cache validation."""
    settings_str = f"{server_settings['imports_only']}"
    return hashlib.sha256(settings_str.encode("utf-8")).hexdigest()


def uri_to_path(uri: str) -> Path:
    """Convert file:// URI to filesystem Path.

    Args:
        uri: File URI (e.g., file:///path/to/file.go)

    Returns:
        Path object for the file
    """
    parsed = urlparse(uri)
    # Unquote percent-encoded characters
    path_str = unquote(parsed.path)
    return Path(path_str)


def _apply_settings(options: Optional[dict]) -> None:
    if not isinstance(options, dict):
        return
    if "importsOnly" in options:
        server_settings["imports_only"] = bool(options["importsOnly"])
    if "outlineOnChange" in options:
        server_settings["outline_on_change"] = bool(options["outlineOnChange"])


def _outline(ls: LanguageServer, uri: str, source: str, force: bool = False) -> Optional[OutlineCache]:
    """Outline an open document and publish diagnostics.

    The document text is the editor's buffer, saved or not.

    Args:
        ls: Language server instance
        uri: Document URI
        source: Document source text
        force: If True, bypass cache and force re-outlining

    Returns:
        Cache entry for the document: the new outline on success, the last
        good outline (or None) on failure
    """
    start_time = time.time()
    source_hash = _compute_hash(source)
    settings_hash = _compute_settings_hash()

    # Check cache: skip re-outlining if source and settings unchanged
    cached = outline_cache.get(uri)
    if not force and cached is not None:
        if cached.source_hash == source_hash and cached.settings_hash == settings_hash:
            logger.info("Cache hit for %s (source unchanged)", uri)
            return cached

    logger.info("Outlining %s", uri)
    source_lines = source.split("\n")
    path = str(uri_to_path(uri))
    parsed = None
    try:
        parsed = parse_syntax(path, source, imports_only=bool(server_settings["imports_only"]))
        outline = build_outline(parsed)
    except OutlineError as e:
        error_parsed = None if isinstance(e, ParseError) else parsed
        ls.text_document_publish_diagnostics(
            types.PublishDiagnosticsParams(
                uri=uri, diagnostics=[to_lsp_diagnostic(e, source_lines, error_parsed)]
            )
        )
        logger.error("Outline failed for %s: %s", uri, e)
        return cached

    ls.text_document_publish_diagnostics(
        types.PublishDiagnosticsParams(uri=uri, diagnostics=[])
    )
    entry = OutlineCache(
        outline=outline,
        parsed=parsed,
        source_hash=source_hash,
        settings_hash=settings_hash,
    )
    outline_cache[uri] = entry

    elapsed = time.time() - start_time
    logger.info("Outline complete: %s (%.3fs, %d nodes)",
                uri, elapsed, len(outline[0].children))
    return entry


@server.feature(types.INITIALIZE)
def initialize(ls: LanguageServer, params: types.InitializeParams):
    """Handle initialize request: apply initialization options."""
    logger.info("Server initialized")
    _apply_settings(params.initialization_options)


@server.feature(types.TEXT_DOCUMENT_DID_OPEN)
async def did_open(ls: LanguageServer, params: types.DidOpenTextDocumentParams):
    """Handle document open: outline immediately."""
    _outline(ls, params.text_document.uri, params.text_document.text)


@server.feature(types.TEXT_DOCUMENT_DID_SAVE)
async def did_save(ls: LanguageServer, params: types.DidSaveTextDocumentParams):
    """Handle document save: outline immediately (no debounce)."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    _outline(ls, params.text_document.uri, doc.source)


@server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
async def did_change(ls: LanguageServer, params: types.DidChangeTextDocumentParams):
    """Handle document change: debounce outlining by 300ms (if enabled)."""
    if not server_settings["outline_on_change"]:
        return

    uri = params.text_document.uri

    # Cancel existing debounce task if any
    if uri in debounce_tasks:
        debounce_tasks[uri].cancel()

    async def debounced_outline():
        """Wait 300ms then outline."""
        await asyncio.sleep(0.3)
        doc = ls.workspace.get_text_document(uri)
        _outline(ls, uri, doc.source)
        if uri in debounce_tasks:
            del debounce_tasks[uri]

    debounce_tasks[uri] = asyncio.create_task(debounced_outline())


@server.feature(types.TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: LanguageServer, params: types.DidCloseTextDocumentParams):
    """Handle document close: drop cached outline and pending work."""
    uri = params.text_document.uri
    outline_cache.pop(uri, None)
    task = debounce_tasks.pop(uri, None)
    if task is not None:
        task.cancel()


@server.feature(types.TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(
    ls: LanguageServer, params: types.DocumentSymbolParams
) -> Optional[list[types.DocumentSymbol]]:
    """Handle document symbol request: return the outline of the current buffer."""
    uri = params.text_document.uri
    doc = ls.workspace.get_text_document(uri)

    entry = _outline(ls, uri, doc.source)
    if entry is None:
        return None
    return get_document_symbols(entry.outline, entry.parsed)


@server.feature(types.WORKSPACE_DID_CHANGE_CONFIGURATION)
def did_change_configuration(
    ls: LanguageServer, params: types.DidChangeConfigurationParams
):
    """Handle configuration changes from the client."""
    settings = getattr(params, "settings", None)
    if settings and isinstance(settings, dict):
        _apply_settings(settings.get("gooutline"))

    # Re-outline all open documents with new settings
    for uri in list(outline_cache.keys()):
        doc = ls.workspace.get_text_document(uri)
        _outline(ls, uri, doc.source, force=True)

#!/usr/bin/env python3
# Entry point for the outline language server: python3 -m lsp

import logging
import sys
from pathlib import Path

try:
    from lsp.server import server
except ImportError:
    # Running from a repo checkout without pip install
    repo_root = Path(__file__).resolve().parent.parent
    sys.path.insert(0, str(repo_root))
    from lsp.server import server


def main() -> None:
    # stdout carries the LSP stream; logs go to stderr
    logging.basicConfig(stream=sys.stderr, level=logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")
    server.start_io()


if __name__ == "__main__":
    main()

# Ethan Doughty
# gooutline.py
"""Command-line interface for gooutline — Go source outline extractor."""

import argparse
import logging
import sys
from typing import BinaryIO, Optional, TextIO

from analysis import outline_file
from frontend.outline_json import outline_to_json
from frontend.source import OutlineConfig
from ir.errors import OutlineError

logger = logging.getLogger("gooutline")


def report_error(err: object, stderr: TextIO) -> None:
    print("error:", err, file=stderr)


def run_file(config: OutlineConfig, stdin: Optional[BinaryIO] = None,
             stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None) -> int:
    """Outline a single Go file and write the JSON outline.

    Args:
        config: Run configuration
        stdin: Overlay archive stream (modified mode); defaults to sys.stdin.buffer
        stdout: Destination for the JSON line
        stderr: Destination for the error line

    Returns:
        Exit code (0 for success, 1 for error). On error nothing is
        written to stdout.
    """
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr

    try:
        outline = outline_file(config, stdin)
    except OutlineError as e:
        logger.debug("Outline failed for %s", config.file, exc_info=True)
        report_error(e, stderr)
        return 1

    # Serialize fully before writing so a failure never leaves partial output
    line = outline_to_json(outline) + "\n"
    buffer = getattr(stdout, "buffer", None)
    if buffer is not None:
        # UTF-8 regardless of the locale encoding of the text stream
        stdout.flush()
        buffer.write(line.encode("utf-8"))
        buffer.flush()
    else:
        stdout.write(line)
        stdout.flush()
    return 0


def run_tests(verbose: bool = False) -> int:
    """Run the golden fixture suite.

    Returns:
        Exit code (0 for all fixtures passed, 1 otherwise)
    """
    import run_all_tests
    return run_all_tests.main(return_code=True, verbose=verbose)


def main(argv=None) -> int:
    """Main entry point for the gooutline CLI tool.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = argparse.ArgumentParser(
        prog="gooutline",
        description="gooutline — emit a JSON outline of a Go source file"
    )
    parser.add_argument("-f", "--file", dest="file", default="",
                        help="the path to the file to outline")
    parser.add_argument(
        "-imports-only", "--imports-only",
        action="store_true",
        help="parse imports only"
    )
    parser.add_argument(
        "-modified", "--modified",
        action="store_true",
        help="read an archive of the modified file from standard input"
    )
    parser.add_argument(
        "--tests",
        action="store_true",
        help="Run the fixture test suite"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to standard error"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.tests:
        return run_tests(verbose=args.verbose)

    if not args.file:
        report_error("no file given (use -f PATH)", sys.stderr)
        return 1

    config = OutlineConfig(
        file=args.file,
        imports_only=args.imports_only,
        modified=args.modified,
    )
    return run_file(config)


if __name__ == "__main__":
    raise SystemExit(main())

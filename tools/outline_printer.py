# Ethan Doughty
# outline_printer.py
"""Print the outline of a Go file with resolved line:col ranges."""
import sys
from pathlib import Path

# Allow running as python3 tools/outline_printer.py from a checkout
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from analysis.outline_builder import build_outline
from frontend.go_parser import ParsedFile, parse_go
from ir import OutlineError, OutlineNode, Span


def fmt_span(parsed: ParsedFile, span: Span) -> str:
    start = parsed.position(span.start)
    end = parsed.position(span.end)
    return f"{start.line}:{start.column}-{end.line}:{end.column}"


def fmt_outline(node: OutlineNode, parsed: ParsedFile, indent: int = 0) -> str:
    """Pretty-format an outline node and its children, one per line."""
    pad = "  " * indent
    parts = [f"{pad}{node.kind} {node.label}"]
    if node.receiver_type is not None:
        parts.append(f"recv={node.receiver_type}")
    parts.append(f"[{fmt_span(parsed, node.range)}]")
    if node.identifier_range is not None:
        parts.append(f"id=[{fmt_span(parsed, node.identifier_range)}]")
    lines = [" ".join(parts)]
    for child in node.children:
        lines.append(fmt_outline(child, parsed, indent + 1))
    return "\n".join(lines)


def usage() -> None:
    print("Usage: python3 tools/outline_printer.py [--imports-only] <file.go>")
    sys.exit(1)


def main():
    args = sys.argv[1:]
    imports_only = False

    while args and args[0].startswith("--"):
        if args[0] == "--imports-only":
            imports_only = True
        else:
            usage()
        args = args[1:]

    if len(args) != 1:
        usage()

    path = args[0]
    try:
        parsed = parse_go(path, Path(path).read_bytes(), imports_only=imports_only)
        outline = build_outline(parsed)
    except (OSError, OutlineError) as e:
        print(f"Error while outlining {path}: {e}")
        sys.exit(1)

    print(f"==== Outline for {path}")
    for root in outline:
        print(fmt_outline(root, parsed))

    print(f"\n==== {len(outline[0].children)} top-level entries")


if __name__ == "__main__":
    main()

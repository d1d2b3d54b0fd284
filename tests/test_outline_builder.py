"""Unit tests for the outline builder.

Run with:

    python3 tests/test_outline_builder.py
"""
import sys
import os

# Ensure project root is on the path regardless of working directory.
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from analysis.outline_builder import build_outline
from frontend.go_parser import ParsedFile
from frontend.pipeline import outline_source
from ir import (
    Span, OutlineNode, RenderError, UnknownDeclarationError, UnknownSpecError,
    PACKAGE, IMPORT, TYPE, FUNCTION, VARIABLE, CONSTANT,
)


class FakeNode:
    """Minimal stand-in for a tree-sitter node."""

    def __init__(self, type, start, end, children=(), fields=None, is_named=True):
        self.type = type
        self.start_byte = start
        self.end_byte = end
        self.children = list(children)
        self.named_children = [c for c in children if c.is_named]
        self._fields = fields or {}
        self.is_missing = False
        self.has_error = False
        self.is_named = is_named

    def child_by_field_name(self, name):
        nodes = self._fields.get(name)
        return nodes[0] if nodes else None

    def children_by_field_name(self, name):
        return list(self._fields.get(name, []))


_FAKE_SRC = b"package p\nvar x = 1\n"


def _fake_file(decls):
    package = FakeNode("package_clause", 0, 9, [FakeNode("package_identifier", 8, 9)])
    return ParsedFile(path="fake.go", source=_FAKE_SRC, package=package, decls=decls)


def _root(src: str, imports_only: bool = False) -> OutlineNode:
    outline = outline_source("test.go", src, imports_only=imports_only)
    assert len(outline) == 1, f"Expected one root, got {len(outline)}"
    return outline[0]


def test_package_only():
    """A file with only a package clause outlines to a childless root."""
    root = _root("package p\n")
    assert root.kind == PACKAGE
    assert root.label == "p"
    assert root.children == [], f"Expected no children, got {root.children!r}"
    assert root.range == Span(1, 10), f"range mismatch: {root.range}"
    assert root.identifier_range == Span(9, 10), f"identifier range mismatch: {root.identifier_range}"
    print("PASS: package-only file has an empty root")


def test_root_ranges_span_declarations():
    """Root range runs from the package keyword to the last declaration."""
    src = "// leading comment\npackage p\n\nvar x int\n\n// trailing\n"
    root = _root(src)
    package_pos = src.index("package") + 1
    decl_end = src.index("var x int") + len("var x int") + 1
    assert root.range == Span(package_pos, decl_end), f"range mismatch: {root.range}"
    print("PASS: root range spans package clause to last declaration")


def test_function_without_receiver():
    """Free functions have no receiver type and name-only identifier range."""
    root = _root("package p\nfunc F() {}\n")
    (fn,) = root.children
    assert fn.kind == FUNCTION
    assert fn.label == "F"
    assert fn.receiver_type is None, f"Expected no receiver, got {fn.receiver_type!r}"
    assert fn.range == Span(11, 22), f"range mismatch: {fn.range}"
    assert fn.identifier_range == Span(16, 17), f"identifier range mismatch: {fn.identifier_range}"
    print("PASS: free function has no receiver type")


def test_method_receivers():
    """Methods carry the rendered receiver type, normalized like gofmt."""
    src = (
        "package p\n"
        "type T struct{}\n"
        "func (t T) Value() {}\n"
        "func (t * T) Pointer() {}\n"
        "func (T) Anonymous() {}\n"
    )
    root = _root(src)
    methods = [n for n in root.children if n.kind == FUNCTION]
    receivers = [(m.label, m.receiver_type) for m in methods]
    assert receivers == [("Value", "T"), ("Pointer", "*T"), ("Anonymous", "T")], (
        f"receiver mismatch: {receivers!r}"
    )
    print("PASS: method receivers render as T / *T")


def test_const_block_one_line_three_names():
    """Three names in one const spec become three sibling constants."""
    root = _root("package p\n\nconst A, B, C = 1, 2, 3\n")
    labels = [(c.label, c.kind) for c in root.children]
    assert labels == [("A", CONSTANT), ("B", CONSTANT), ("C", CONSTANT)], f"got {labels!r}"

    spans = [c.identifier_range for c in root.children]
    assert spans == [Span(18, 19), Span(21, 22), Span(24, 25)], f"spans mismatch: {spans!r}"
    for c in root.children:
        assert c.range == c.identifier_range, f"{c.label}: range should equal identifier range"
        assert root.range.contains(c.range), f"{c.label} outside the package range"
    for left, right in zip(spans, spans[1:]):
        assert left.end <= right.start, f"overlapping spans {left} / {right}"
    assert root.range == Span(1, 35), f"root range mismatch: {root.range}"
    print("PASS: const spec with three names yields three constants")


def test_var_and_const_kinds():
    """Kind follows the declaration token, not the spec shape."""
    root = _root("package p\nvar (\n\ta, b = 1, 2\n)\nconst c = 3\n")
    kinds = [(n.label, n.kind) for n in root.children]
    assert kinds == [("a", VARIABLE), ("b", VARIABLE), ("c", CONSTANT)], f"got {kinds!r}"
    print("PASS: var/const kinds follow the declaration token")


def test_imports_labels_and_aliases():
    """Import labels keep their quotes; only aliased imports have identifier ranges."""
    src = 'package p\nimport (\n\t"fmt"\n\tstr "strings"\n\t. "math"\n\t_ "embed"\n)\n'
    root = _root(src)
    imports = root.children
    assert [i.label for i in imports] == ['"fmt"', '"strings"', '"math"', '"embed"']
    assert all(i.kind == IMPORT for i in imports)
    assert imports[0].identifier_range is None, "unaliased import must not have an identifier range"

    alias = imports[1]
    alias_start = src.index("str ") + 1
    assert alias.identifier_range == Span(alias_start, alias_start + 3), (
        f"alias span mismatch: {alias.identifier_range}"
    )
    assert alias.range.start == alias_start, "aliased import range starts at the alias"
    assert imports[2].identifier_range is not None, "dot import has an identifier range"
    assert imports[3].identifier_range is not None, "blank import has an identifier range"
    print("PASS: import labels and alias ranges")


def test_types_are_not_expanded():
    """Struct fields and interface methods are not outlined."""
    src = "package p\ntype (\n\tS struct{ A, B int }\n\tI interface{ M() }\n)\n"
    root = _root(src)
    assert [(t.label, t.kind) for t in root.children] == [("S", TYPE), ("I", TYPE)]
    assert all(t.children == [] for t in root.children), "types must have no children"
    start = src.index("S struct") + 1
    assert root.children[0].range == Span(start, start + len("S struct{ A, B int }")), (
        f"type range mismatch: {root.children[0].range}"
    )
    print("PASS: types are leaves")


def test_source_order_preserved():
    """Children follow declaration order across declaration kinds."""
    src = (
        "package p\n"
        "import \"os\"\n"
        "var v = os.Args\n"
        "func f() {}\n"
        "type T int\n"
        "const c = 1\n"
    )
    root = _root(src)
    assert [n.kind for n in root.children] == [IMPORT, VARIABLE, FUNCTION, TYPE, CONSTANT]
    starts = [n.range.start for n in root.children]
    assert starts == sorted(starts), f"children out of order: {starts}"
    print("PASS: source order preserved")


def test_imports_only_mode():
    """Imports-only mode keeps just the imports that follow the package clause."""
    src = (
        "package p\n"
        "import \"fmt\"\n"
        "import (\n\t\"os\"\n)\n"
        "type T int\n"
        "func F() { fmt.Println(os.Args) }\n"
        "import \"late\"\n"
    )
    root = _root(src, imports_only=True)
    assert [n.kind for n in root.children] == [IMPORT, IMPORT], f"got {root.children!r}"
    assert [n.label for n in root.children] == ['"fmt"', '"os"']
    print("PASS: imports-only mode keeps only imports")


def test_imports_only_ignores_later_syntax_errors():
    """Syntax errors after the imports do not matter in imports-only mode."""
    root = _root("package p\nimport \"fmt\"\nfunc broken( {\n", imports_only=True)
    assert [n.label for n in root.children] == ['"fmt"']
    print("PASS: imports-only mode ignores errors after imports")


def test_range_nesting_invariant():
    """Every identifier range lies inside its node's range."""
    src = (
        "package p\n"
        "import f \"fmt\"\n"
        "type T struct{}\n"
        "var a, b int\n"
        "func (t *T) M() { f.Println() }\n"
    )
    for node in _root(src).walk():
        if node.identifier_range is not None:
            assert node.range.contains(node.identifier_range), (
                f"{node.label}: {node.identifier_range} not within {node.range}"
            )
    print("PASS: identifier ranges nest inside ranges")


def test_unknown_top_level_statement():
    """A top-level statement aborts the whole outline."""
    try:
        outline_source("test.go", "package p\nfunc F() {}\nx := 1\n")
    except UnknownDeclarationError as e:
        assert "short_var_declaration" in str(e), f"message should name the construct: {e}"
        assert "test.go:3:1" in str(e), f"message should carry the position: {e}"
    else:
        assert False, "Expected UnknownDeclarationError"
    print("PASS: unknown top-level construct is a hard error")


def test_unknown_spec_fake_node():
    """An unrecognized spec shape inside a grouped declaration is a hard error."""
    decl = FakeNode("var_declaration", 10, 19, [FakeNode("mystery_spec", 14, 19)])
    try:
        build_outline(_fake_file([decl]))
    except UnknownSpecError as e:
        assert "mystery_spec" in str(e), f"message should name the construct: {e}"
        assert e.token == "var"
        assert e.pos == 15
    else:
        assert False, "Expected UnknownSpecError"
    print("PASS: unknown spec is a hard error")


def test_unknown_declaration_after_valid_one():
    """The first failure aborts; no partial outline is returned."""
    name = FakeNode("identifier", 14, 15)
    func = FakeNode("function_declaration", 10, 19, fields={"name": [name]})
    bogus = FakeNode("grammar_extension", 19, 20)
    result = None
    try:
        result = build_outline(_fake_file([func, bogus]))
    except UnknownDeclarationError as e:
        assert e.pos == 20
    assert result is None, "no outline may be produced on failure"
    print("PASS: build is all-or-nothing")


def test_empty_identifier_slot():
    """A zero-width name yields no identifier range."""
    empty = FakeNode("identifier", 14, 14)
    spec = FakeNode("var_spec", 14, 19, [empty], fields={"name": [empty]})
    decl = FakeNode("var_declaration", 10, 19, [spec])
    (root,) = build_outline(_fake_file([decl]))
    (var,) = root.children
    assert var.kind == VARIABLE
    assert var.identifier_range is None, f"Expected no identifier range, got {var.identifier_range}"
    print("PASS: empty identifier slot has no identifier range")


def test_const_spec_separators_in_name_field():
    """Comma tokens tagged with the name field are not outlined as constants."""
    src = b"package p\nconst A, B = 1, 2\n"
    a = FakeNode("identifier", 16, 17)
    comma = FakeNode(",", 17, 18, is_named=False)
    b = FakeNode("identifier", 19, 20)
    spec = FakeNode("const_spec", 16, 27, [a, comma, b],
                    fields={"name": [a, comma, b]})
    decl = FakeNode("const_declaration", 10, 27, [spec])
    package = FakeNode("package_clause", 0, 9, [FakeNode("package_identifier", 8, 9)])
    parsed = ParsedFile(path="fake.go", source=src, package=package, decls=[decl])
    (root,) = build_outline(parsed)
    got = [(c.label, c.kind, c.range) for c in root.children]
    assert got == [
        ("A", CONSTANT, Span(17, 18)),
        ("B", CONSTANT, Span(20, 21)),
    ], f"got {got}"
    print("PASS: const spec separators are skipped")


def test_method_without_receiver_fake_node():
    """A method whose receiver list is empty cannot be rendered."""
    receiver = FakeNode("parameter_list", 15, 17)
    name = FakeNode("field_identifier", 18, 19)
    method = FakeNode("method_declaration", 10, 19,
                      fields={"receiver": [receiver], "name": [name]})
    try:
        build_outline(_fake_file([method]))
    except RenderError as e:
        assert str(e).startswith("failed to parse receiver type"), f"unexpected message: {e}"
    else:
        assert False, "Expected RenderError"
    print("PASS: missing receiver is a render error")


if __name__ == '__main__':
    test_package_only()
    test_root_ranges_span_declarations()
    test_function_without_receiver()
    test_method_receivers()
    test_const_block_one_line_three_names()
    test_var_and_const_kinds()
    test_imports_labels_and_aliases()
    test_types_are_not_expanded()
    test_source_order_preserved()
    test_imports_only_mode()
    test_imports_only_ignores_later_syntax_errors()
    test_range_nesting_invariant()
    test_unknown_top_level_statement()
    test_unknown_spec_fake_node()
    test_unknown_declaration_after_valid_one()
    test_empty_identifier_slot()
    test_const_spec_separators_in_name_field()
    test_method_without_receiver_fake_node()
    print("\nAll tests passed.")

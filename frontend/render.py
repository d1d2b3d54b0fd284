# Ethan Doughty
# render.py
"""Render Go type expressions back to source text.

Used for method receiver labels: `func (s *Server[T]) Run()` renders its
receiver type as `*Server[T]`, and `func (m map[string]int) Get()` as
`map[string]int`. Output is gofmt-style (canonical spacing),
independent of how the source was spaced.
"""

from __future__ import annotations
from typing import Any

from ir.errors import RenderError

Node = Any

# Leaf node types whose text is the rendering
_NAME_TYPES = {
    "type_identifier",
    "identifier",
    "field_identifier",
    "package_identifier",
    "blank_identifier",
}


def _text(node: Node, source: bytes) -> str:
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def _named(node: Node) -> list:
    return [c for c in node.named_children if c.type != "comment"]


def _flat_text(node: Node, source: bytes) -> str:
    return " ".join(_text(node, source).split())


def _field(node: Node, name: str, pos: int) -> Node:
    child = node.child_by_field_name(name)
    if child is None:
        raise RenderError(f"malformed {node.type} @ {pos}", pos=pos)
    return child


def _names(node: Node, source: bytes) -> str:
    return ", ".join(_text(n, source) for n in node.children_by_field_name("name")
                     if n.is_named)


def _parameter(param: Node, source: bytes) -> str:
    names = _names(param, source)
    text = render_type(_field(param, "type", param.start_byte + 1), source)
    if param.type == "variadic_parameter_declaration":
        text = "..." + text
    return f"{names} {text}" if names else text


def _parameters(params: Node, source: bytes) -> str:
    return "(" + ", ".join(_parameter(p, source) for p in _named(params)) + ")"


def _signature(node: Node, source: bytes) -> str:
    """Parameters and result of a func type or interface method: (a int) error"""
    text = _parameters(_field(node, "parameters", node.start_byte + 1), source)
    result = node.child_by_field_name("result")
    if result is None:
        return text
    if result.type == "parameter_list":
        return text + " " + _parameters(result, source)
    return text + " " + render_type(result, source)


def _field_decl(decl: Node, source: bytes) -> str:
    names = _names(decl, source)
    text = render_type(_field(decl, "type", decl.start_byte + 1), source)
    if not names and any(c.type == "*" for c in decl.children):
        # Embedded pointer field: struct{ *T }
        text = "*" + text
    if names:
        text = f"{names} {text}"
    tag = decl.child_by_field_name("tag")
    if tag is not None:
        text += " " + _text(tag, source)
    return text


def _interface_elem(elem: Node, source: bytes) -> str:
    if elem.type in ("method_elem", "method_spec"):
        return _text(_field(elem, "name", elem.start_byte + 1), source) + _signature(elem, source)
    return render_type(elem, source)


def render_type(node: Node, source: bytes) -> str:
    """Render a type expression node as source text.

    Raises:
        RenderError: node is missing or malformed
    """
    if node is None:
        raise RenderError("missing type expression")
    kind = node.type
    pos = node.start_byte + 1

    if kind == "ERROR" or node.is_missing:
        raise RenderError(f"malformed type expression @ {pos}", pos=pos)

    if kind in _NAME_TYPES:
        return _text(node, source)

    if kind == "pointer_type":
        inner = _named(node)
        if len(inner) != 1:
            raise RenderError(f"malformed pointer type @ {pos}", pos=pos)
        return "*" + render_type(inner[0], source)

    if kind == "qualified_type":
        pkg = node.child_by_field_name("package")
        name = node.child_by_field_name("name")
        if pkg is None or name is None:
            raise RenderError(f"malformed qualified type @ {pos}", pos=pos)
        return f"{_text(pkg, source)}.{_text(name, source)}"

    if kind == "generic_type":
        base = node.child_by_field_name("type")
        args = node.child_by_field_name("type_arguments")
        if base is None or args is None:
            raise RenderError(f"malformed generic type @ {pos}", pos=pos)
        return render_type(base, source) + render_type(args, source)

    if kind == "type_arguments":
        return "[" + ", ".join(render_type(a, source) for a in _named(node)) + "]"

    if kind == "type_elem":
        # Constraint element: A | ~B
        return " | ".join(render_type(t, source) for t in _named(node))

    if kind == "negated_type":
        inner = _named(node)
        if len(inner) != 1:
            raise RenderError(f"malformed approximation element @ {pos}", pos=pos)
        return "~" + render_type(inner[0], source)

    if kind == "parenthesized_type":
        inner = _named(node)
        if len(inner) != 1:
            raise RenderError(f"malformed parenthesized type @ {pos}", pos=pos)
        return "(" + render_type(inner[0], source) + ")"

    if kind == "slice_type":
        return "[]" + render_type(_field(node, "element", pos), source)

    if kind == "array_type":
        length = _flat_text(_field(node, "length", pos), source)
        return f"[{length}]" + render_type(_field(node, "element", pos), source)

    if kind == "implicit_length_array_type":
        return "[...]" + render_type(_field(node, "element", pos), source)

    if kind == "map_type":
        key = render_type(_field(node, "key", pos), source)
        return f"map[{key}]" + render_type(_field(node, "value", pos), source)

    if kind == "channel_type":
        value = render_type(_field(node, "value", pos), source)
        tokens = [c.type for c in node.children if not c.is_named]
        if tokens[:1] == ["<-"]:
            return "<-chan " + value
        if "<-" in tokens:
            return "chan<- " + value
        return "chan " + value

    if kind == "function_type":
        return "func" + _signature(node, source)

    if kind == "struct_type":
        fields = []
        for field_list in _named(node):
            fields.extend(_field_decl(f, source) for f in _named(field_list))
        return "struct{ " + "; ".join(fields) + " }" if fields else "struct{}"

    if kind == "interface_type":
        elems = [_interface_elem(e, source) for e in _named(node)]
        return "interface{ " + "; ".join(elems) + " }" if elems else "interface{}"

    if node.has_error:
        raise RenderError(f"malformed type expression @ {pos}", pos=pos)
    return _flat_text(node, source)


def receiver_type_node(receiver: Node) -> Node:
    """Return the type node of the first parameter in a receiver list.

    Raises:
        RenderError: the receiver list has no parameter
    """
    params = [p for p in _named(receiver)
              if p.type in ("parameter_declaration", "variadic_parameter_declaration")]
    if not params:
        raise RenderError(f"method has no receiver @ {receiver.start_byte + 1}",
                          pos=receiver.start_byte + 1)
    type_node = params[0].child_by_field_name("type")
    if type_node is None:
        raise RenderError(f"receiver has no type @ {params[0].start_byte + 1}",
                          pos=params[0].start_byte + 1)
    return type_node

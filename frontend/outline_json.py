# Ethan Doughty
# outline_json.py
"""JSON serializer and deserializer for the outline tree.

Wire format (one object per node, keys in this order):

    {"label": ..., "kind": ..., "receiverType": ...,
     "range": {"start": N, "end": N},
     "identifierRange": {"start": N, "end": N},
     "children": [...]}

receiverType and identifierRange are omitted entirely when not set.

Usage:
    from frontend.outline_json import outline_to_json, outline_from_json
    json_str = outline_to_json(outline)       # [OutlineNode] -> JSON string
    outline  = outline_from_json(json_str)    # JSON string -> [OutlineNode]
"""

import json
from typing import Any, Dict, List

from ir.outline import OutlineNode, Span


# ---------------------------------------------------------------------------
# Serializer
# ---------------------------------------------------------------------------

def _ser_span(span: Span) -> Dict:
    return {"start": span.start, "end": span.end}


def _ser_node(node: OutlineNode) -> Dict:
    """Serialize one node and its children, omitting unset optional fields."""
    d: Dict[str, Any] = {"label": node.label, "kind": node.kind}
    if node.receiver_type is not None:
        d["receiverType"] = node.receiver_type
    d["range"] = _ser_span(node.range)
    if node.identifier_range is not None:
        d["identifierRange"] = _ser_span(node.identifier_range)
    d["children"] = [_ser_node(c) for c in node.children]
    return d


def outline_to_data(outline: List[OutlineNode]) -> List[Dict]:
    """Convert an outline to plain JSON-ready lists and dicts."""
    return [_ser_node(n) for n in outline]


def outline_to_json(outline: List[OutlineNode], indent=None) -> str:
    """Serialize an outline to a JSON string.

    Args:
        outline: Outline as returned by build_outline
        indent: None for the compact single-line form written by the CLI

    Returns:
        JSON string (no trailing newline)
    """
    separators = (",", ":") if indent is None else None
    return json.dumps(outline_to_data(outline), indent=indent,
                      separators=separators, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Deserializer
# ---------------------------------------------------------------------------

def _build_span(d: Dict) -> Span:
    return Span(start=d["start"], end=d["end"])


def _build_node(d: Dict) -> OutlineNode:
    ident = d.get("identifierRange")
    return OutlineNode(
        label=d["label"],
        kind=d["kind"],
        receiver_type=d.get("receiverType"),
        range=_build_span(d["range"]),
        identifier_range=_build_span(ident) if ident is not None else None,
        children=[_build_node(c) for c in d.get("children", [])],
    )


def outline_from_json(json_str: str) -> List[OutlineNode]:
    """Deserialize a JSON string produced by outline_to_json."""
    data = json.loads(json_str)
    assert isinstance(data, list), f"Expected a JSON array, got {type(data).__name__}"
    return [_build_node(d) for d in data]

"""
JSON compatible (de)serialization of node trees.

A node becomes ``{"type": tag, <field>: <value>, ...}``; ``Loc`` values become
``[begin, end]`` pairs and ``None`` fields are omitted. The format is what the
parse cache stores and what the command line accepts as a pre-parsed tree.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict

from .tree import NODE_TYPES, Loc, Node


class NodeFormatError(ValueError):
    """Raised when a serialized tree does not describe known node kinds."""


def node_to_dict(node: Node) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"type": node.type}
    for item in fields(node):
        value = _dump_value(getattr(node, item.name))
        if value is not None:
            payload[item.name] = value
    return payload


def _dump_value(value: Any) -> Any:
    if isinstance(value, Node):
        return node_to_dict(value)
    if isinstance(value, Loc):
        return [value.begin, value.end]
    if isinstance(value, list):
        return [_dump_value(element) for element in value]
    return value


def node_from_dict(payload: Dict[str, Any]) -> Node:
    """Rebuild a node tree from the output of ``node_to_dict``."""
    if not isinstance(payload, dict) or "type" not in payload:
        raise NodeFormatError(f"Expected a node object, got {payload!r}")
    tag = payload["type"]
    node_class = NODE_TYPES.get(tag)
    if node_class is None:
        raise NodeFormatError(f"Unknown node type: {tag}")

    kwargs: Dict[str, Any] = {}
    for item in fields(node_class):
        if item.name not in payload:
            continue
        raw = payload[item.name]
        if item.name.endswith("_l"):
            kwargs[item.name] = _load_loc(raw)
        else:
            kwargs[item.name] = _load_value(raw)

    try:
        return node_class(**kwargs)
    except TypeError as exc:
        raise NodeFormatError(f"Malformed {tag} node: {exc}") from exc


def _load_loc(raw: Any) -> Loc:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise NodeFormatError(f"Expected [begin, end] location, got {raw!r}")
    return Loc(int(raw[0]), int(raw[1]))


def _load_value(raw: Any) -> Any:
    if isinstance(raw, dict):
        return node_from_dict(raw)
    if isinstance(raw, list):
        return [_load_value(element) for element in raw]
    return raw


__all__ = ["NodeFormatError", "node_from_dict", "node_to_dict"]

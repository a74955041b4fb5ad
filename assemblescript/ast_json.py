"""JSON serialization/deserialization for the AssembleScript AST.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. Each node becomes a dict holding its
class name under "type", its fields, and its source line under "line"
when known.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, Type

from . import ast
from .ast import Literal, Node


NODE_TYPES: Dict[str, Type[Node]] = {
    cls.__name__: cls
    for cls in vars(ast).values()
    if isinstance(cls, type) and issubclass(cls, Node) and cls is not Node
}


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None or isinstance(node, (bool, int, float, str)):
        return node
    if isinstance(node, list):
        return [ast_to_obj(item) for item in node]
    if isinstance(node, Node):
        obj: Dict[str, Any] = {"type": type(node).__name__}
        for f in fields(node):
            obj[f.name] = ast_to_obj(getattr(node, f.name))
        if node.line is not None:
            obj["line"] = node.line
        return obj
    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, list):
        return [ast_from_obj(item) for item in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    cls = NODE_TYPES.get(t)
    if cls is None:
        raise ValueError(f"Unknown AST node type: {t}")
    kwargs = {f.name: ast_from_obj(obj[f.name]) for f in fields(cls) if f.name in obj}
    node = cls(**kwargs)
    if cls is Literal and node.literal_type == 'number':
        # JSON may hand back whole numbers as int
        node.value = float(node.value)
    if obj.get("line") is not None:
        node.line = obj["line"]
    return node


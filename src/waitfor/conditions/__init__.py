"""Conditions — primitive checks and the AND/OR tree that combines them."""

from waitfor.conditions.primitives import (
    Condition,
    Custom,
    Elapsed,
    Exists,
    FileSize,
    HttpGet,
    TcpHost,
    Update,
    UpdateSince,
)
from waitfor.conditions.tree import And, Leaf, Node, Or, as_node, both, either

__all__ = [
    "And",
    "Condition",
    "Custom",
    "Elapsed",
    "Exists",
    "FileSize",
    "HttpGet",
    "Leaf",
    "Node",
    "Or",
    "TcpHost",
    "Update",
    "UpdateSince",
    "as_node",
    "both",
    "either",
]

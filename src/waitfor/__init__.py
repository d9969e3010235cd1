"""waitfor — poll until a condition (or an AND/OR tree of them) is met."""

from waitfor.conditions import (
    And,
    Condition,
    Custom,
    Elapsed,
    Exists,
    FileSize,
    HttpGet,
    Leaf,
    Node,
    Or,
    TcpHost,
    Update,
    UpdateSince,
    both,
    either,
)
from waitfor.core.driver import wait
from waitfor.formats import parse_duration, parse_http_get, validate_tcp

__version__ = "0.4.0"

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
    "both",
    "either",
    "parse_duration",
    "parse_http_get",
    "validate_tcp",
    "wait",
]

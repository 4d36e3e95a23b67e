"""--debug tree dump to stderr."""

from __future__ import annotations

import io
import sys
from typing import Any, TextIO

from lml.names import format_name
from lml.nodes import NodeKind, classify, split_node


def dump_tree(value: Any, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable LML tree to *file*."""
    _dump_node(value, 0, file)


def format_tree(value: Any) -> str:
    """Return the dump of *value* as a string."""
    buf = io.StringIO()
    _dump_node(value, 0, buf)
    return buf.getvalue()


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_node(value: Any, depth: int, f: TextIO) -> None:
    kind = classify(value)
    if kind == NodeKind.TEXT:
        f.write(f"{_indent(depth)}Text({value!r})\n")
    elif kind == NodeKind.FRAGMENT:
        f.write(f"{_indent(depth)}Fragment\n")
        for child in value:
            _dump_node(child, depth + 1, f)
    elif kind == NodeKind.INVALID:
        f.write(f"{_indent(depth)}Invalid {value!r}\n")
    else:
        parts = split_node(value)
        label = "Element" if kind == NodeKind.ELEMENT else "Component"
        f.write(f"{_indent(depth)}{label} {format_name(parts.descriptor)}\n")
        for name, attr in (parts.attributes or {}).items():
            f.write(f"{_indent(depth + 1)}Attr {name}={attr!r}\n")
        for child in parts.children:
            _dump_node(child, depth + 1, f)

"""Node classification for decoded LML values."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from lml.names import NameDescriptor, NameKind, parse_name


class NodeKind(Enum):
    TEXT = auto()
    FRAGMENT = auto()
    ELEMENT = auto()
    COMPONENT = auto()
    INVALID = auto()


@dataclass(frozen=True, slots=True)
class NodeParts:
    """An element or component list split into its three positions."""

    descriptor: NameDescriptor
    attributes: dict[str, Any] | None
    children: list[Any]


def classify(value: Any) -> NodeKind:
    """Decide which kind of node a decoded JSON value is."""
    if isinstance(value, str):
        return NodeKind.TEXT
    if not isinstance(value, list):
        return NodeKind.INVALID
    if not value:
        return NodeKind.FRAGMENT

    head = value[0]
    if not isinstance(head, str):
        return NodeKind.FRAGMENT
    desc = parse_name(head)
    if not isinstance(desc, NameDescriptor):
        return NodeKind.FRAGMENT

    if desc.kind == NameKind.ELEMENT:
        return NodeKind.ELEMENT
    if desc.kind == NameKind.COMPONENT:
        return NodeKind.COMPONENT
    return NodeKind.INVALID


def child_offset(value: list[Any]) -> int:
    """Index of the first child in an element or component list."""
    if len(value) > 1 and isinstance(value[1], dict):
        return 2
    return 1


def split_node(value: list[Any]) -> NodeParts:
    """Split an element or component into name, attributes and children.

    The caller must have classified *value* as ELEMENT or COMPONENT.
    """
    desc = parse_name(value[0])
    if not isinstance(desc, NameDescriptor):
        raise ValueError(f"not an element or component: {value[0]!r}")
    offset = child_offset(value)
    attributes = value[1] if offset == 2 else None
    return NodeParts(desc, attributes, value[offset:])


def node_key(value: Any) -> str | None:
    """Return the key carried by an element or component name, if any."""
    if classify(value) not in (NodeKind.ELEMENT, NodeKind.COMPONENT):
        return None
    desc = parse_name(value[0])
    return desc.key if isinstance(desc, NameDescriptor) else None


def children_of(value: Any) -> tuple[list[Any] | None, int]:
    """Return ``(container, start)`` for the child sequence of a node.

    Text and invalid nodes have no children and return ``(None, 0)``.
    """
    kind = classify(value)
    if kind == NodeKind.FRAGMENT:
        return value, 0
    if kind in (NodeKind.ELEMENT, NodeKind.COMPONENT):
        return value, child_offset(value)
    return None, 0


def iter_keyed(value: Any) -> Iterator[tuple[str, Any]]:
    """Yield ``(key, node)`` pairs in document order.

    Only child positions are visited; attribute values are data, not markup.
    """
    key = node_key(value)
    if key is not None:
        yield key, value
    container, start = children_of(value)
    if container is None:
        return
    for child in container[start:]:
        yield from iter_keyed(child)


def find_duplicate_keys(value: Any) -> list[str]:
    """Return keys used more than once, in order of their second occurrence."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for key, _ in iter_keyed(value):
        if key in seen and key not in duplicates:
            duplicates.append(key)
        seen.add(key)
    return duplicates

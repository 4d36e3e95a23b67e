"""Sanitizing tree walk that builds output through a construct callback."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from lml.names import NameDescriptor, format_name
from lml.nodes import NodeKind, classify, split_node
from lml.sanitize import DEFAULT_CONFIG, Report, SanitizationConfig, sanitize

Construct = Callable[..., Any]
Lookup = Callable[[str, str | None], Any]

# Attribute receiving the node key in the merged attribute map
KEY_ATTRIBUTE = "key"


def transform(
    node: Any,
    construct: Construct,
    lookup: Lookup | None = None,
    report: Report | None = None,
    config: SanitizationConfig = DEFAULT_CONFIG,
) -> Any:
    """Transform an LML tree into the consumer's output tree.

    Text is returned as-is, a fragment becomes a flat list, and elements and
    components become ``construct(type, attrs, *children)``. A dropped root
    yields an empty list.
    """
    walker = _Walker(construct, lookup, report, config)
    kind = classify(node)
    if kind == NodeKind.TEXT:
        return node
    if kind == NodeKind.FRAGMENT:
        return walker.walk_children(node)
    result = walker.walk(node)
    return result[0] if result else []


@dataclass(frozen=True, slots=True)
class Hooks:
    """The three external capabilities used by the transform."""

    construct: Construct
    lookup: Lookup | None = None
    report: Report | None = None

    def transform(self, node: Any, config: SanitizationConfig = DEFAULT_CONFIG) -> Any:
        return transform(node, self.construct, self.lookup, self.report, config)


def merge_attributes(desc: NameDescriptor, explicit: dict[str, Any]) -> dict[str, Any]:
    """Combine name-derived attributes with the explicit attribute map.

    Explicit entries win, except that an explicit ``class`` string is appended
    to the classes given in the name.
    """
    merged: dict[str, Any] = {}
    if desc.classes:
        merged["class"] = " ".join(desc.classes)
    if desc.type_attribute is not None:
        merged["type"] = desc.type_attribute
    if desc.key is not None:
        merged[KEY_ATTRIBUTE] = desc.key

    for name, value in explicit.items():
        if name == "class" and "class" in merged and isinstance(value, str):
            merged["class"] = f"{merged['class']} {value}" if value else merged["class"]
        else:
            merged[name] = value
    return merged


class _Walker:
    def __init__(
        self,
        construct: Construct,
        lookup: Lookup | None,
        report: Report | None,
        config: SanitizationConfig,
    ) -> None:
        self._construct = construct
        self._lookup = lookup
        self._report = report
        self._config = config

    def _error(self, message: str) -> None:
        if self._report is not None:
            self._report(message)

    def walk_children(self, children: list[Any]) -> list[Any]:
        result: list[Any] = []
        for child in children:
            result.extend(self.walk(child))
        return result

    def walk(self, node: Any) -> list[Any]:
        """Transform one node into zero or more output items."""
        kind = classify(node)
        if kind == NodeKind.TEXT:
            return [node]
        if kind == NodeKind.FRAGMENT:
            return self.walk_children(node)
        if kind == NodeKind.INVALID:
            self._error(f"invalid node: {_describe(node)}")
            return []

        parts = split_node(node)
        desc = parts.descriptor

        target: Any = desc.tag
        if kind == NodeKind.COMPONENT:
            target = self._lookup(desc.tag, desc.namespace) if self._lookup is not None else None
            if target is None:
                self._error(f"unresolved component: {format_name(desc)}")
                return []

        checked = sanitize(kind, desc, parts.attributes, self._config, self._report)
        if not checked.allowed:
            return []

        children = self.walk_children(parts.children)
        attrs = merge_attributes(desc, checked.attributes)
        return [self._construct(target, attrs, *children)]


def _describe(node: Any) -> str:
    text = repr(node)
    if len(text) > 60:
        text = text[:57] + "..."
    return text

"""HTML backend: a construct callback and serializer for transform output."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from lml.sanitize import is_attribute_name
from lml.transform import KEY_ATTRIBUTE

VOID_ELEMENTS: frozenset[str] = frozenset(
    ["area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"]
)


@dataclass(frozen=True, slots=True)
class HtmlElement:
    """One constructed HTML element."""

    tag: str
    attributes: dict[str, Any]
    children: tuple[Any, ...]


def construct_html(type: Any, attributes: dict[str, Any], *children: Any) -> HtmlElement:
    """Construct callback building HtmlElement values.

    Component targets resolved to a string are used as the tag name; any other
    target is rendered through its ``tag`` attribute, or ``div``.
    """
    if isinstance(type, str):
        tag = type
    else:
        tag = getattr(type, "tag", "div")
    return HtmlElement(tag, dict(attributes), children)


def to_html(output: Any) -> str:
    """Serialize transform output (element, text, or list of both) to HTML."""
    if isinstance(output, str):
        return _escape_html(output)
    if isinstance(output, (list, tuple)):
        return "".join(to_html(item) for item in output)
    if isinstance(output, HtmlElement):
        return _render_element(output)
    return ""


# ---------------------------------------------------------------------------
# HTML escaping
# ---------------------------------------------------------------------------


def _escape_html(text: str) -> str:
    """Escape text for HTML body content. Also encodes non-ASCII as entities."""
    result: list[str] = []
    for ch in text:
        if ch == "&":
            result.append("&amp;")
        elif ch == "<":
            result.append("&lt;")
        elif ch == ">":
            result.append("&gt;")
        elif ord(ch) > 0x7F:
            result.append(f"&#x{ord(ch):X};")
        else:
            result.append(ch)
    return "".join(result)


def _escape_attr(text: str) -> str:
    """Escape text for HTML attribute values."""
    return _escape_html(text).replace('"', "&quot;")


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------


def _attr_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return json.dumps(value, separators=(",", ":"))


def _render_attrs(attributes: dict[str, Any]) -> str:
    parts: list[str] = []
    for name, value in attributes.items():
        if name == KEY_ATTRIBUTE or value is None or value is False:
            continue
        if not is_attribute_name(name):
            continue
        if value is True:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{_escape_attr(_attr_text(value))}"')
    return "".join(parts)


def _render_element(el: HtmlElement) -> str:
    attrs = _render_attrs(el.attributes)
    if el.tag in VOID_ELEMENTS:
        return f"<{el.tag}{attrs}>"
    inner = "".join(to_html(child) for child in el.children)
    return f"<{el.tag}{attrs}>{inner}</{el.tag}>"

"""Rule-based tag and attribute filtering.

The sanitizer never raises for policy violations. Each dropped element or
attribute produces exactly one call to the ``report`` callback (when one is
supplied) and processing continues.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass, field
from typing import Any

from lml.names import NameDescriptor, format_name
from lml.nodes import NodeKind

Report = Callable[[str], None]


@dataclass(frozen=True, slots=True)
class SanitizationConfig:
    """Allow-list driven sanitization rules.

    - Element tags not in `allowed_elements` are dropped with their subtree.
      Components are resolved by the caller's lookup and never tag-filtered.
    - Attributes in `forbidden_element_attributes` are always stripped.
    - With `forbid_event_handlers`, attributes named ``on*`` (any case) are
      stripped.
    - Attributes in `url_attributes` are kept only if their value starts with
      one of `allowed_url_prefixes`.
    """

    allowed_elements: Collection[str]
    forbidden_element_attributes: Collection[str] = field(default_factory=frozenset)
    forbid_event_handlers: bool = True
    url_attributes: Collection[str] = field(default_factory=frozenset)
    allowed_url_prefixes: Collection[str] = ()

    def __post_init__(self) -> None:
        # Accept lists/sets from user code, normalize for internal use.
        if not isinstance(self.allowed_elements, frozenset):
            object.__setattr__(self, "allowed_elements", frozenset(self.allowed_elements))
        if not isinstance(self.forbidden_element_attributes, frozenset):
            object.__setattr__(
                self,
                "forbidden_element_attributes",
                frozenset(self.forbidden_element_attributes),
            )
        if not isinstance(self.url_attributes, frozenset):
            object.__setattr__(self, "url_attributes", frozenset(self.url_attributes))
        if not isinstance(self.allowed_url_prefixes, tuple):
            object.__setattr__(self, "allowed_url_prefixes", tuple(self.allowed_url_prefixes))


DEFAULT_ALLOWED_ELEMENTS: frozenset[str] = frozenset(
    [
        # Structure
        "div",
        "span",
        "p",
        "section",
        "article",
        "aside",
        "header",
        "footer",
        "main",
        "nav",
        "address",
        # Headings
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        # Lists
        "ul",
        "ol",
        "li",
        "dl",
        "dt",
        "dd",
        # Text formatting
        "a",
        "abbr",
        "b",
        "bdi",
        "bdo",
        "cite",
        "code",
        "data",
        "del",
        "dfn",
        "em",
        "i",
        "ins",
        "kbd",
        "mark",
        "q",
        "s",
        "samp",
        "small",
        "strong",
        "sub",
        "sup",
        "time",
        "u",
        "var",
        "ruby",
        "rp",
        "rt",
        # Quotes/code
        "blockquote",
        "pre",
        # Line breaks
        "br",
        "hr",
        "wbr",
        # Media
        "img",
        "picture",
        "source",
        "figure",
        "figcaption",
        # Tables
        "table",
        "caption",
        "colgroup",
        "col",
        "thead",
        "tbody",
        "tfoot",
        "tr",
        "th",
        "td",
        # Disclosure
        "details",
        "summary",
    ]
)

DEFAULT_URL_ATTRIBUTES: frozenset[str] = frozenset(
    [
        "href",
        "src",
        "action",
        "formaction",
        "cite",
        "poster",
        "background",
        "longdesc",
        "usemap",
        "manifest",
        "codebase",
        "data",
        "xlink:href",
    ]
)

# data:text/* is deliberately absent: only image data URLs are accepted.
DEFAULT_URL_PREFIXES: tuple[str, ...] = (
    "/",
    "./",
    "http://",
    "https://",
    "mailto://",
    "tel://",
    "data:image/",
)

DEFAULT_CONFIG: SanitizationConfig = SanitizationConfig(
    allowed_elements=DEFAULT_ALLOWED_ELEMENTS,
    forbidden_element_attributes=["style", "srcset"],
    forbid_event_handlers=True,
    url_attributes=DEFAULT_URL_ATTRIBUTES,
    allowed_url_prefixes=DEFAULT_URL_PREFIXES,
)


@dataclass(frozen=True, slots=True)
class SanitizeResult:
    """Outcome of sanitizing one node."""

    allowed: bool
    attributes: dict[str, Any]


def is_event_handler(name: str) -> bool:
    """Return True for attribute names following the ``on*`` convention."""
    return name[:2].lower() == "on"


# Characters HTML does not accept inside an attribute name
_NAME_BREAKERS = frozenset(" \t\n\f\r\"'>/=")


def is_attribute_name(name: Any) -> bool:
    """Return True if *name* can be written as a single HTML attribute name."""
    if not isinstance(name, str) or not name:
        return False
    return not any(ch in _NAME_BREAKERS or not ch.isprintable() for ch in name)


def _emit(report: Report | None, message: str) -> None:
    if report is not None:
        report(message)


def sanitize(
    kind: NodeKind,
    desc: NameDescriptor,
    attributes: Mapping[str, Any] | None,
    config: SanitizationConfig = DEFAULT_CONFIG,
    report: Report | None = None,
) -> SanitizeResult:
    """Filter one element or component against *config*."""
    if kind == NodeKind.ELEMENT and desc.tag not in config.allowed_elements:
        _emit(report, f"element not allowed: {format_name(desc)}")
        return SanitizeResult(False, {})

    kept: dict[str, Any] = {}
    if not attributes:
        return SanitizeResult(True, kept)

    for name, value in attributes.items():
        reason = _attribute_violation(kind, name, value, config)
        if reason is not None:
            _emit(report, f"{reason} {name!r} removed from {format_name(desc)}")
            continue
        kept[name] = value

    return SanitizeResult(True, kept)


def _attribute_violation(
    kind: NodeKind, name: str, value: Any, config: SanitizationConfig
) -> str | None:
    """Return a short description of why an attribute must go, or None."""
    if not is_attribute_name(name):
        return "invalid attribute name"
    if name in config.forbidden_element_attributes:
        return "forbidden attribute"
    if config.forbid_event_handlers and is_event_handler(name):
        return "event handler attribute"
    if name in config.url_attributes:
        # Component props under URL-ish names may hold structured data
        if isinstance(value, str):
            if not value.startswith(tuple(config.allowed_url_prefixes)):
                return "unsafe URL in attribute"
        elif kind == NodeKind.ELEMENT:
            return "unsafe URL in attribute"
    return None

"""Element-name micro-grammar: ``#ns:tag+type.cls1.cls2!key``."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class NameKind(Enum):
    ELEMENT = "element"  # #
    COMPONENT = "component"  # *
    RESERVED = "reserved"  # ! or @


_SIGILS: dict[str, NameKind] = {
    "#": NameKind.ELEMENT,
    "*": NameKind.COMPONENT,
    "!": NameKind.RESERVED,
    "@": NameKind.RESERVED,
}


@dataclass(frozen=True, slots=True)
class NameDescriptor:
    """Decomposed element or component name."""

    kind: NameKind
    prefix: str
    tag: str
    namespace: str | None = None
    type_attribute: str | None = None
    classes: tuple[str, ...] = ()
    key: str | None = None


@dataclass(frozen=True, slots=True)
class ParseFailure:
    """A name that does not match the grammar. ``position`` is 0-based."""

    name: str
    message: str
    position: int


def is_word_char(ch: str) -> bool:
    """Return True if ch may appear in a namespace, tag, type or class segment."""
    return ch.isascii() and (ch.isalnum() or ch == "_" or ch == "-")


class _Scanner:
    """Single-pass scanner over one name string."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._pos = 0

    def _peek(self) -> str:
        if self._pos < len(self._name):
            return self._name[self._pos]
        return ""

    def _at_end(self) -> bool:
        return self._pos >= len(self._name)

    def _word(self, what: str) -> str | ParseFailure:
        start = self._pos
        while not self._at_end() and is_word_char(self._name[self._pos]):
            self._pos += 1
        if self._pos == start:
            return self._fail(f"expected {what}")
        return self._name[start : self._pos]

    def _fail(self, message: str) -> ParseFailure:
        return ParseFailure(self._name, message, self._pos)

    def scan(self) -> NameDescriptor | ParseFailure:
        prefix = self._peek()
        kind = _SIGILS.get(prefix)
        if kind is None:
            return self._fail("name must start with '#', '*', '!' or '@'")
        self._pos += 1

        namespace: str | None = None
        tag = self._word("tag name")
        if isinstance(tag, ParseFailure):
            return tag
        if self._peek() == ":":
            self._pos += 1
            namespace = tag
            tag = self._word("tag name after namespace")
            if isinstance(tag, ParseFailure):
                return tag

        type_attribute: str | None = None
        if self._peek() == "+":
            self._pos += 1
            word = self._word("type attribute after '+'")
            if isinstance(word, ParseFailure):
                return word
            type_attribute = word

        classes: list[str] = []
        while self._peek() == ".":
            self._pos += 1
            word = self._word("class name after '.'")
            if isinstance(word, ParseFailure):
                return word
            classes.append(word)

        key: str | None = None
        if self._peek() == "!":
            self._pos += 1
            if self._at_end():
                return self._fail("expected key after '!'")
            # The key swallows everything up to the end, delimiters included
            key = self._name[self._pos :]
            self._pos = len(self._name)

        if not self._at_end():
            return self._fail(f"unexpected character {self._peek()!r}")

        return NameDescriptor(
            kind=kind,
            prefix=prefix,
            tag=tag,
            namespace=namespace,
            type_attribute=type_attribute,
            classes=tuple(classes),
            key=key,
        )


def parse_name(name: str) -> NameDescriptor | ParseFailure:
    """Parse an element name. Never raises; returns ParseFailure on mismatch."""
    if not isinstance(name, str):
        return ParseFailure(repr(name), "name must be a string", 0)
    return _Scanner(name).scan()


def is_name(value: object) -> bool:
    """Return True if value is a string that parses as a name (of any kind)."""
    return isinstance(value, str) and isinstance(parse_name(value), NameDescriptor)


def format_name(desc: NameDescriptor) -> str:
    """Rebuild the textual form of a descriptor."""
    parts = [desc.prefix]
    if desc.namespace is not None:
        parts.append(f"{desc.namespace}:")
    parts.append(desc.tag)
    if desc.type_attribute is not None:
        parts.append(f"+{desc.type_attribute}")
    for cls in desc.classes:
        parts.append(f".{cls}")
    if desc.key is not None:
        parts.append(f"!{desc.key}")
    return "".join(parts)

"""Keyed, path-addressed edits applied to an LML tree.

``apply_updates`` works on a private deep copy of the tree, so the caller's
value is never modified. The returned tree must be used afterwards: when the
root itself is replaced, deleted or wrapped by an insertion, a new value is
returned.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from lml.errors import DuplicateKeyError, InstructionError
from lml.nodes import child_offset, children_of, find_duplicate_keys, node_key
from lml.sanitize import Report


class Action(Enum):
    INSERT_BEFORE = "insertBefore"
    INSERT_AFTER = "insertAfter"
    REPLACE = "replace"
    APPEND = "append"
    PREPEND = "prepend"
    DELETE = "delete"


# Actions that work on a list reached through a path
_LIST_ACTIONS = frozenset({Action.APPEND, Action.PREPEND})


@dataclass(frozen=True, slots=True)
class UpdateInstruction:
    """One edit: ``action`` applied to the node keyed ``node``."""

    action: Action
    node: str
    path: str | None = None
    content: Any = None

    @classmethod
    def from_dict(cls, data: Any, index: int | None = None) -> UpdateInstruction:
        """Build an instruction from its JSON record form."""
        if not isinstance(data, Mapping):
            raise InstructionError("instruction must be an object", index)

        raw_action = data.get("action")
        try:
            action = Action(raw_action)
        except ValueError:
            raise InstructionError(f"unknown action: {raw_action!r}", index) from None

        key = data.get("node")
        if not isinstance(key, str) or not key:
            raise InstructionError("instruction 'node' must be a non-empty string", index)

        path = data.get("path")
        if path is not None and not isinstance(path, str):
            raise InstructionError("instruction 'path' must be a string", index)

        if action != Action.DELETE and "content" not in data:
            raise InstructionError(f"{action.value} requires 'content'", index)

        return cls(action, key, path, data.get("content"))


def parse_instructions(value: Any) -> list[UpdateInstruction]:
    """Validate a decoded update batch. Raises InstructionError."""
    if not isinstance(value, list):
        raise InstructionError("update batch must be a list of instructions")
    return [UpdateInstruction.from_dict(item, i) for i, item in enumerate(value)]


def apply_updates(
    root: Any,
    instructions: Iterable[UpdateInstruction | Mapping[str, Any]],
    report: Report | None = None,
    *,
    strict: bool = False,
) -> Any:
    """Apply *instructions* in order and return the updated tree.

    Instructions that cannot be resolved are reported and skipped. With
    *strict*, a tree carrying duplicate keys is rejected up front.
    """
    if strict:
        duplicates = find_duplicate_keys(root)
        if duplicates:
            raise DuplicateKeyError(duplicates)

    updater = _Updater(copy.deepcopy(root), report)
    for i, item in enumerate(instructions):
        if not isinstance(item, UpdateInstruction):
            try:
                item = UpdateInstruction.from_dict(item, i)
            except InstructionError as exc:
                updater.error(f"{exc.message} (instruction #{i})")
                continue
        updater.apply(item)
    return updater.root


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class _Location:
    """A matched node and its position in the parent's child sequence."""

    node: list[Any]
    parent: list[Any] | None
    index: int


def find_node(root: Any, key: str) -> _Location | None:
    """Depth-first search for the first node carrying *key*."""
    return _find(root, key, None, 0)


def _find(value: Any, key: str, parent: list[Any] | None, index: int) -> _Location | None:
    if node_key(value) == key:
        return _Location(value, parent, index)
    container, start = children_of(value)
    if container is None:
        return None
    for i in range(start, len(container)):
        found = _find(container[i], key, container, i)
        if found is not None:
            return found
    return None


def split_path(path: str) -> list[str] | None:
    """Split a ``/``-separated path; None if it has an empty segment."""
    segments = path.strip("/").split("/")
    if any(not s for s in segments):
        return None
    return segments


def _is_index(segment: str) -> bool:
    return segment.isascii() and segment.isdigit()


_MISSING = object()


def _walk_path(start: Any, segments: list[str]) -> Any:
    current = start
    for seg in segments:
        if isinstance(current, dict) and seg in current:
            current = current[seg]
        elif isinstance(current, list) and _is_index(seg) and int(seg) < len(current):
            current = current[int(seg)]
        else:
            return _MISSING
    return current


def _is_node_content(value: Any) -> bool:
    return isinstance(value, (str, list))


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


class _Updater:
    def __init__(self, root: Any, report: Report | None) -> None:
        self.root = root
        self._report = report

    def error(self, message: str) -> None:
        if self._report is not None:
            self._report(message)

    def apply(self, instr: UpdateInstruction) -> None:
        loc = find_node(self.root, instr.node)
        if loc is None:
            self.error(f"node not found: {instr.node}")
            return

        if instr.action in _LIST_ACTIONS and instr.path is None:
            self.error(f"{instr.action.value} on node {instr.node} requires a path")
            return

        match instr.action:
            case Action.INSERT_BEFORE:
                self._insert(instr, loc, after=False)
            case Action.INSERT_AFTER:
                self._insert(instr, loc, after=True)
            case Action.REPLACE:
                self._replace(instr, loc)
            case Action.APPEND:
                self._push(instr, loc, front=False)
            case Action.PREPEND:
                self._push(instr, loc, front=True)
            case Action.DELETE:
                self._delete(instr, loc)

    # -- helpers ------------------------------------------------------------

    def _node_content(self, instr: UpdateInstruction) -> Any:
        if not _is_node_content(instr.content):
            self.error(f"content for {instr.action.value} on node {instr.node} must be a node")
            return _MISSING
        return copy.deepcopy(instr.content)

    def _resolve(self, instr: UpdateInstruction, loc: _Location, segments: list[str]) -> Any:
        if child_offset(loc.node) != 2:
            self.error(f"node {instr.node} has no attributes for path {instr.path!r}")
            return _MISSING
        target = _walk_path(loc.node[1], segments)
        if target is _MISSING:
            self.error(f"path {instr.path!r} not found in node {instr.node}")
        return target

    def _resolve_list(self, instr: UpdateInstruction, loc: _Location) -> Any:
        segments = split_path(instr.path or "")
        if segments is None:
            self.error(f"invalid path {instr.path!r} for node {instr.node}")
            return _MISSING
        target = self._resolve(instr, loc, segments)
        if target is _MISSING:
            return _MISSING
        if not isinstance(target, list):
            self.error(f"path {instr.path!r} in node {instr.node} does not lead to a list")
            return _MISSING
        return target

    # -- actions ------------------------------------------------------------

    def _insert(self, instr: UpdateInstruction, loc: _Location, *, after: bool) -> None:
        if instr.path is not None:
            self.error(f"{instr.action.value} does not take a path")
            return
        content = self._node_content(instr)
        if content is _MISSING:
            return
        if loc.parent is None:
            self.root = [loc.node, content] if after else [content, loc.node]
            return
        loc.parent.insert(loc.index + 1 if after else loc.index, content)

    def _replace(self, instr: UpdateInstruction, loc: _Location) -> None:
        if instr.path is not None:
            target = self._resolve_list(instr, loc)
            if target is _MISSING:
                return
            if not isinstance(instr.content, list):
                self.error(f"replace at path {instr.path!r} needs list content")
                return
            target[:] = copy.deepcopy(instr.content)
            return

        content = self._node_content(instr)
        if content is _MISSING:
            return
        if loc.parent is None:
            self.root = content
        else:
            loc.parent[loc.index] = content

    def _push(self, instr: UpdateInstruction, loc: _Location, *, front: bool) -> None:
        target = self._resolve_list(instr, loc)
        if target is _MISSING:
            return
        content = copy.deepcopy(instr.content)
        if front:
            target.insert(0, content)
        else:
            target.append(content)

    def _delete(self, instr: UpdateInstruction, loc: _Location) -> None:
        if instr.path is None:
            if loc.parent is None:
                self.root = []
            else:
                del loc.parent[loc.index]
            return

        segments = split_path(instr.path)
        if segments is None:
            self.error(f"invalid path {instr.path!r} for node {instr.node}")
            return
        container = self._resolve(instr, loc, segments[:-1])
        if container is _MISSING:
            return
        last = segments[-1]
        if not isinstance(container, list) or not _is_index(last) or int(last) >= len(container):
            self.error(f"path {instr.path!r} in node {instr.node} does not name a list entry")
            return
        del container[int(last)]

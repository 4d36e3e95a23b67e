"""Shared test fixtures and helpers."""

from __future__ import annotations

from typing import Any

import pytest


def h(type: Any, attrs: dict[str, Any], *children: Any) -> tuple[Any, dict[str, Any], tuple[Any, ...]]:
    """Construct callback producing plain tuples, easy to compare in asserts."""
    return (type, attrs, children)


class Recorder:
    """Construct callback that also records every call in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, dict[str, Any], tuple[Any, ...]]] = []

    def __call__(self, type: Any, attrs: dict[str, Any], *children: Any) -> tuple[Any, ...]:
        node = h(type, attrs, *children)
        self.calls.append(node)
        return node


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def reports() -> list[str]:
    """A list to pass as ``reports.append`` for the report callback."""
    return []


def simpsons() -> list[Any]:
    """Sample tree used by the update tests."""
    return [
        "#div",
        "Hello",
        ["#span.firstName!FN", "Bart"],
        ["#span.lastName!LN", "Simpson"],
    ]

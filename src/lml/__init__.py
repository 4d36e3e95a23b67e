"""LML JSON markup trees: classify, sanitize, transform and update."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lml.names import NameDescriptor, NameKind, ParseFailure, format_name, parse_name
from lml.nodes import NodeKind, classify
from lml.sanitize import DEFAULT_CONFIG, SanitizationConfig, sanitize
from lml.transform import Hooks, transform
from lml.update import Action, UpdateInstruction, apply_updates

if TYPE_CHECKING:
    from lml.sanitize import Report

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "Action",
    "Hooks",
    "NameDescriptor",
    "NameKind",
    "NodeKind",
    "ParseFailure",
    "SanitizationConfig",
    "UpdateInstruction",
    "apply_updates",
    "classify",
    "format_name",
    "parse_name",
    "render_html",
    "sanitize",
    "transform",
]


def render_html(
    value: Any,
    config: SanitizationConfig = DEFAULT_CONFIG,
    components: dict[str, Any] | None = None,
    report: Report | None = None,
) -> str:
    """Sanitize and transform an LML tree to an HTML string."""
    from lml.registry import ComponentRegistry
    from lml.render import construct_html, to_html

    registry = ComponentRegistry(dict(components or {}))
    return to_html(transform(value, construct_html, registry.lookup, report, config))

"""Command-line interface for LML."""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lml.errors import DocumentError, DuplicateKeyError, InstructionError
from lml.sanitize import DEFAULT_CONFIG, SanitizationConfig


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    updates_file: Path | None
    output_format: str
    sanitization: SanitizationConfig
    components: dict[str, str]
    strict_keys: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="lml",
        description="Sanitize, update and render LML JSON markup",
    )
    p.add_argument("input", help="Input .json document")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-u",
        "--updates",
        metavar="FILE",
        help="JSON list of update instructions to apply before output",
    )
    p.add_argument(
        "-f",
        "--format",
        choices=("html", "json"),
        default="html",
        help="Output HTML (default) or the updated LML tree as JSON",
    )
    p.add_argument(
        "--allow",
        action="append",
        default=[],
        metavar="TAG",
        help="Additionally allow an element tag (repeatable)",
    )
    p.add_argument(
        "--component",
        action="append",
        default=[],
        metavar="NAME=TAG",
        help="Render component NAME (or ns:NAME) as TAG (repeatable)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover lml.toml)",
    )
    p.add_argument(
        "--strict-keys",
        action="store_true",
        help="Reject documents in which a node key is used twice",
    )
    p.add_argument("--debug", action="store_true", help="Dump the LML tree to stderr")
    return p


def parse_component_arg(s: str) -> tuple[str, str]:
    """Parse a NAME=TAG string into (name, tag)."""
    if "=" not in s:
        raise argparse.ArgumentTypeError(f"invalid component format (expected NAME=TAG): {s}")
    name, _, tag = s.partition("=")
    return name, tag


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "lml.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def _string_list(value: Any) -> list[str] | None:
    if isinstance(value, list):
        return [str(v) for v in value]
    return None


def sanitization_from_config(section: Any, extra_elements: list[str]) -> SanitizationConfig:
    """Apply a ``[sanitize]`` config table and extra allowed tags to the defaults."""
    cfg = section if isinstance(section, dict) else {}
    changes: dict[str, Any] = {}

    allowed = _string_list(cfg.get("allowed_elements"))
    elements = set(allowed) if allowed is not None else set(DEFAULT_CONFIG.allowed_elements)
    elements.update(_string_list(cfg.get("extra_elements")) or [])
    elements.update(extra_elements)
    changes["allowed_elements"] = elements

    forbidden = _string_list(cfg.get("forbidden_attributes"))
    if forbidden is not None:
        changes["forbidden_element_attributes"] = forbidden
    handlers = cfg.get("forbid_event_handlers")
    if isinstance(handlers, bool):
        changes["forbid_event_handlers"] = handlers
    url_attrs = _string_list(cfg.get("url_attributes"))
    if url_attrs is not None:
        changes["url_attributes"] = url_attrs
    prefixes = _string_list(cfg.get("allowed_url_prefixes"))
    if prefixes is not None:
        changes["allowed_url_prefixes"] = prefixes

    return dataclasses.replace(DEFAULT_CONFIG, **changes)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    sanitization = sanitization_from_config(config.get("sanitize"), args.allow)

    # Components: config < CLI
    components: dict[str, str] = {}
    cfg_components = config.get("components")
    if isinstance(cfg_components, dict):
        for k, v in cfg_components.items():
            components[str(k)] = str(v)
    for raw in args.component:
        name, tag = parse_component_arg(raw)
        components[name] = tag

    return CliOptions(
        input_file=input_file,
        output_file=Path(args.output) if args.output else None,
        updates_file=Path(args.updates) if args.updates else None,
        output_format=args.format,
        sanitization=sanitization,
        components=components,
        strict_keys=args.strict_keys,
        debug=args.debug,
    )


def warn(message: str) -> None:
    """Report callback printing to stderr."""
    print(f"warning: {message}", file=sys.stderr)


def compile_file(options: CliOptions) -> str:
    """Read, update, sanitize and render an LML document."""
    from lml.debug import dump_tree
    from lml.loader import load_document, load_instructions
    from lml.registry import ComponentRegistry
    from lml.render import construct_html, to_html
    from lml.transform import transform
    from lml.update import apply_updates

    source = options.input_file.read_text(encoding="utf-8")
    tree = load_document(source, str(options.input_file))

    instructions = []
    if options.updates_file is not None:
        instructions = load_instructions(
            options.updates_file.read_text(encoding="utf-8"),
            str(options.updates_file),
        )

    tree = apply_updates(tree, instructions, warn, strict=options.strict_keys)

    if options.debug:
        dump_tree(tree, file=sys.stderr)

    if options.output_format == "json":
        return json.dumps(tree, indent=2, ensure_ascii=False) + "\n"

    registry = ComponentRegistry(dict(options.components))
    output = transform(tree, construct_html, registry.lookup, warn, options.sanitization)
    return to_html(output) + "\n"


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        text = compile_file(options)
    except (DocumentError, InstructionError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except DuplicateKeyError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)

    return 0

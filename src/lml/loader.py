"""Decode LML documents and update batches from JSON text."""

from __future__ import annotations

import json
from typing import Any

from lml.errors import DocumentError
from lml.update import UpdateInstruction, parse_instructions


def load_document(source: str, filename: str = "input.json") -> Any:
    """Decode a JSON document. Raises DocumentError if it is not JSON."""
    try:
        return json.loads(source)
    except json.JSONDecodeError as exc:
        raise DocumentError(exc.msg.lower(), exc.lineno, exc.colno, source, filename) from None


def load_instructions(source: str, filename: str = "updates.json") -> list[UpdateInstruction]:
    """Decode and validate an update batch.

    Raises DocumentError for bad JSON and InstructionError for bad records.
    """
    return parse_instructions(load_document(source, filename))

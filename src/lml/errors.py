"""Error types for conditions that cannot be handled by reporting and skipping."""

from __future__ import annotations


class LmlError(Exception):
    """Base class for hard LML failures."""


class DocumentError(LmlError):
    """Raised when input is not JSON at all, with position and source context."""

    def __init__(
        self,
        message: str,
        line: int,
        column: int,
        source: str,
        filename: str = "input.json",
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        self.source = source
        self.filename = filename
        super().__init__(self.format())

    def format(self) -> str:
        filename = self.filename
        lines = self.source.splitlines(keepends=True)
        line_idx = self.line - 1
        col = self.column

        # Build the source line (strip trailing newline for display)
        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        pad = " " * (col - 1)

        line_num = str(self.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}^"
        )


class InstructionError(LmlError):
    """Raised when an update batch is not a list of well-formed records."""

    def __init__(self, message: str, index: int | None = None) -> None:
        self.message = message
        self.index = index
        super().__init__(self.format())

    def format(self) -> str:
        if self.index is None:
            return f"error: {self.message}"
        return f"error: {self.message}\n  in instruction #{self.index}"


class DuplicateKeyError(LmlError):
    """Raised in strict mode when a key is carried by more than one node."""

    def __init__(self, keys: list[str]) -> None:
        self.keys = keys
        super().__init__(self.format())

    def format(self) -> str:
        listing = ", ".join(repr(k) for k in self.keys)
        return f"error: duplicate node keys: {listing}"

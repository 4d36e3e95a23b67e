"""Minimal LSP server for LML documents: diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from lml import __version__
from lml.errors import DocumentError
from lml.loader import load_document
from lml.nodes import find_duplicate_keys
from lml.transform import transform

server = LanguageServer("lml-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)

_DOC_START = Range(start=Position(line=0, character=0), end=Position(line=0, character=1))


def _discard(type: object, attributes: object, *children: object) -> None:
    return None


def _warning(message: str) -> Diagnostic:
    return Diagnostic(
        range=_DOC_START,
        message=message,
        severity=DiagnosticSeverity.Warning,
        source="lml",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Run the sanitizing transform and publish what it reports."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    try:
        tree = load_document(source, filename)
    except DocumentError as exc:
        line = exc.line - 1
        col = exc.column - 1
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=line, character=col),
                    end=Position(line=line, character=col + 1),
                ),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="lml",
            )
        )
    else:
        messages: list[str] = []
        # Components are resolved by the host application; accept any name here.
        transform(tree, _discard, lambda tag, namespace: tag, messages.append)
        diagnostics.extend(_warning(m) for m in messages)
        for key in find_duplicate_keys(tree):
            diagnostics.append(_warning(f"duplicate node key: {key}"))

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()

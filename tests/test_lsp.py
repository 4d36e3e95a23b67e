"""Tests for the LSP server: diagnostic generation."""

from __future__ import annotations

import pytest
from lsprotocol.types import (
    DiagnosticSeverity,
    PublishDiagnosticsParams,
    TextDocumentItem,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygls.workspace import Workspace

from lml.lsp import _validate


@pytest.fixture
def lsp_env():
    """Create a LanguageServer with an initialized workspace and captured diagnostics."""
    ls = LanguageServer("test", "v0", text_document_sync_kind=TextDocumentSyncKind.Full)
    ws = Workspace(None)
    ls.protocol._workspace = ws

    published: list[PublishDiagnosticsParams] = []
    ls.text_document_publish_diagnostics = lambda params: published.append(params)

    def put(source: str, uri: str = "file:///test.json") -> None:
        ws.put_text_document(
            TextDocumentItem(uri=uri, language_id="json", version=0, text=source)
        )

    return ls, published, put


# ---------------------------------------------------------------------------
# JSON errors → Error severity
# ---------------------------------------------------------------------------


class TestJsonErrors:
    def test_invalid_json(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put('["#div", oops]')
        _validate(ls, "file:///test.json")

        assert len(published) == 1
        diags = published[0].diagnostics
        assert len(diags) == 1
        d = diags[0]
        assert d.severity == DiagnosticSeverity.Error
        assert d.message == "expecting value"
        assert d.source == "lml"
        assert d.range.start.line == 0
        assert d.range.start.character == 9

    def test_error_on_second_line(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put('["#div",\noops]')
        _validate(ls, "file:///test.json")

        d = published[0].diagnostics[0]
        # Line 2 (1-based) → LSP line 1 (0-based)
        assert d.range.start.line == 1
        assert d.range.start.character == 0


# ---------------------------------------------------------------------------
# Transform reports → Warning severity
# ---------------------------------------------------------------------------


class TestWarnings:
    def test_disallowed_element(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put('["#div", ["#script", "x"], ["#a", {"href": "javascript:x"}]]')
        _validate(ls, "file:///test.json")

        diags = published[0].diagnostics
        assert len(diags) == 2
        assert all(d.severity == DiagnosticSeverity.Warning for d in diags)
        assert "#script" in diags[0].message
        assert "'href'" in diags[1].message

    def test_components_are_not_reported(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put('["*ui:card", "x"]')
        _validate(ls, "file:///test.json")
        assert published[0].diagnostics == []

    def test_duplicate_keys(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put('["#div", ["#p!A"], ["#p!A"]]')
        _validate(ls, "file:///test.json")

        diags = published[0].diagnostics
        assert len(diags) == 1
        assert diags[0].message == "duplicate node key: A"


class TestCleanDocument:
    def test_valid_document(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put('["#div", {"class": "x"}, "Hello", ["#span!K", "World"]]')
        _validate(ls, "file:///test.json")

        assert len(published) == 1
        assert published[0].diagnostics == []

"""Minimal LSP server for lexdfa: lexical diagnostics only."""

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

from lexdfa import __version__
from lexdfa.errors import LexicalError
from lexdfa.lexer import analyze_code

server = LanguageServer("lexdfa-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)


def _error_range(err: LexicalError) -> Range:
    """Convert an error's 1-based start and its lexeme into a 0-based range."""
    line = err.line - 1
    col = err.column - 1
    text = err.lexeme or " "
    parts = text.split("\n")
    if len(parts) == 1:
        end = Position(line=line, character=col + len(text))
    else:
        end = Position(line=line + len(parts) - 1, character=len(parts[-1]))
    return Range(start=Position(line=line, character=col), end=end)


def _validate(ls: LanguageServer, uri: str) -> None:
    """Analyze the document and publish one diagnostic per lexical error."""
    doc = ls.workspace.get_text_document(uri)
    result = analyze_code(doc.source)

    diagnostics = [
        Diagnostic(
            range=_error_range(err),
            message=err.message,
            severity=DiagnosticSeverity.Error,
            source="lexdfa",
        )
        for err in result.errors
    ]

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

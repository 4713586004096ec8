"""Shared parse exception handling for the pipeline and the CLI."""
from __future__ import annotations

from lark import UnexpectedInput

from mirrorc.internals import errors as er
from mirrorc.internals.report import Reporter, Span
from mirrorc.semantics.ast_builder import MalformedLiteralError


def handle_parse_exception(exc: Exception, reporter: Reporter) -> bool:
    """Handle a parse exception by emitting diagnostics through the reporter.

    Returns:
        True if the exception was handled, False otherwise.
    """
    from mirrorc.internals.parser import improve_parse_error

    if isinstance(exc, MalformedLiteralError):
        er.emit(reporter, er.ERR.CE3001, exc.span, detail=str(exc))
        return True

    if isinstance(exc, UnexpectedInput):
        line = getattr(exc, "line", None)
        col = getattr(exc, "column", None)
        span = Span(line, col, line, col) if isinstance(line, int) and isinstance(col, int) and line > 0 else None
        er.emit(reporter, er.ERR.CE3001, span, detail=improve_parse_error(exc))
        return True

    return False

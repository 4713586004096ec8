"""Custom exceptions for AST building errors."""
from __future__ import annotations
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from mirrorc.internals.report import Span


class MalformedLiteralError(Exception):
    """Exception raised when a literal token cannot be converted to a value."""
    def __init__(self, literal: str, span: Optional['Span'] = None):
        super().__init__(f"malformed literal {literal}")
        self.literal = literal
        self.span = span

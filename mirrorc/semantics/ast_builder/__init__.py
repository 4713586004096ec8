"""Lark parse tree to AST conversion."""
from mirrorc.semantics.ast_builder.builder import ASTBuilder
from mirrorc.semantics.ast_builder.exceptions import MalformedLiteralError

__all__ = ["ASTBuilder", "MalformedLiteralError"]

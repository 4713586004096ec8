"""Lark parser setup and AST construction."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from lark import Lark, Tree, UnexpectedInput

from mirrorc.semantics.ast import Program
from mirrorc.semantics.ast_builder import ASTBuilder

GRAMMAR_PATH = Path(__file__).parent.parent / "grammar.lark"


@lru_cache(maxsize=1)
def get_parser() -> Lark:
    return Lark.open(
        str(GRAMMAR_PATH),
        parser="lalr",
        propagate_positions=True,
        maybe_placeholders=False,
    )


def improve_parse_error(e: UnexpectedInput) -> str:
    """Improve parsing error messages for common cases."""
    expected = getattr(e, "expected", None) or getattr(e, "allowed", None) or set()
    line = getattr(e, "line", -1)
    where = f"line {line}, column {e.column}" if isinstance(line, int) and line > 0 else "end of input"

    if "RPAR" in expected and "COMMA" in expected:
        return f"{where}: unclosed pattern; add ')' or separate sub-patterns with ','"
    if "MINUS_MORETHAN" in expected:
        return f"{where}: each match arm needs '-> label'"
    if expected:
        return f"{where}: expected one of {', '.join(sorted(expected))}"
    return f"{where}: unexpected input"


def parse_to_ast(src: str, unit_name: Optional[str] = None) -> tuple[Program, Tree]:
    """Parse source code into an AST.

    Returns:
        Tuple of (ast, parse_tree).
    """
    tree = get_parser().parse(src)
    ast = ASTBuilder().build(tree, unit_name=unit_name)
    return ast, tree

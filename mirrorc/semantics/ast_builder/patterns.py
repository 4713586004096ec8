"""Pattern parsing."""
from __future__ import annotations
import json
from typing import List, Union

from lark import Tree, Token

from mirrorc.semantics.ast import (
    Pattern, Deconstruct, Binding, WildcardPattern, LiteralPattern,
)
from mirrorc.semantics.ast_builder.exceptions import MalformedLiteralError
from mirrorc.semantics.ast_builder.tree_navigation import first_name, first_tree
from mirrorc.internals.report import span_of


def parse_pattern(t: Tree) -> Pattern:
    """Parse any pattern node: deconstruct | binding | wildcard | literal."""
    kind = t.data
    if kind == "deconstruct":
        return parse_deconstruct(t)
    if kind == "binding":
        name = first_name(t.children)
        assert name is not None
        return Binding(name=str(name), loc=span_of(t))
    if kind == "wildcard":
        return WildcardPattern(loc=span_of(t))
    if kind in ("number_lit", "string_lit", "true_lit", "false_lit"):
        return LiteralPattern(value=parse_literal(t), loc=span_of(t))
    raise NotImplementedError(f"unhandled pattern node: {kind}")


def parse_deconstruct(t: Tree) -> Deconstruct:
    """Parse deconstruct: NAME "(" [pattern_list] ")"

    - Point(x, y)            - binders
    - Point(0, _)            - literal and wildcard
    - Line(Point(a, b), end) - nested deconstruction
    """
    assert t.data == "deconstruct"
    type_tok = first_name(t.children)
    assert type_tok is not None

    args: List[Pattern] = []
    pattern_list = first_tree(t.children, "pattern_list")
    if pattern_list is not None:
        for child in pattern_list.children:
            if isinstance(child, Tree):
                args.append(parse_pattern(child))

    return Deconstruct(
        type_name=str(type_tok),
        args=args,
        type_span=span_of(type_tok),
        loc=span_of(t),
    )


def parse_literal(t: Tree) -> Union[int, float, str, bool]:
    if t.data == "true_lit":
        return True
    if t.data == "false_lit":
        return False
    tok = t.children[0]
    assert isinstance(tok, Token)
    if t.data == "string_lit":
        return parse_string_token(tok)
    text = str(tok)
    if any(ch in text for ch in ".eE"):
        return float(text)
    return int(text)


def parse_string_token(tok: Token) -> str:
    """Decode an ESCAPED_STRING token, quotes included."""
    try:
        return json.loads(str(tok))
    except ValueError as exc:
        raise MalformedLiteralError(str(tok), span_of(tok)) from exc

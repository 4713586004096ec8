"""Declaration parsing: unit header, structs, foreign aliases, pattern sites."""
from __future__ import annotations
from typing import List

from lark import Tree

from mirrorc.semantics.ast import (
    StructDef, FieldDef, ForeignDef, LetDef, MatchDef, MatchArm,
)
from mirrorc.semantics.ast_builder.patterns import parse_pattern, parse_string_token
from mirrorc.semantics.ast_builder.tree_navigation import first_name, first_tree, names, trees
from mirrorc.internals.report import span_of


def parse_unit_decl(t: Tree) -> str:
    """Parse unit_decl: "unit" NAME ("." NAME)*"""
    return ".".join(str(tok) for tok in names(t.children))


def parse_struct_def(t: Tree) -> StructDef:
    """Parse struct_def: "struct" NAME "(" [field_list] ")" """
    name_tok = first_name(t.children)
    assert name_tok is not None

    fields: List[FieldDef] = []
    field_list = first_tree(t.children, "field_list")
    if field_list is not None:
        for f in trees(field_list.children, "field"):
            label, type_name = names(f.children)
            fields.append(FieldDef(
                name=str(label),
                type_name=str(type_name),
                type_span=span_of(type_name),
                loc=span_of(f),
            ))

    return StructDef(name=str(name_tok), fields=fields, name_span=span_of(name_tok), loc=span_of(t))


def parse_foreign_def(t: Tree) -> ForeignDef:
    """Parse foreign_def: "foreign" NAME "=" STRING"""
    name_tok = first_name(t.children)
    assert name_tok is not None
    string_tok = t.children[-1]
    return ForeignDef(
        name=str(name_tok),
        identity=parse_string_token(string_tok),
        name_span=span_of(name_tok),
        loc=span_of(t),
    )


def parse_let_def(t: Tree) -> LetDef:
    """Parse let_def: "let" NAME "=" pattern"""
    name_tok = first_name(t.children)
    assert name_tok is not None
    pattern_tree = t.children[-1]
    assert isinstance(pattern_tree, Tree)
    return LetDef(
        name=str(name_tok),
        pattern=parse_pattern(pattern_tree),
        name_span=span_of(name_tok),
        loc=span_of(t),
    )


def parse_match_def(t: Tree) -> MatchDef:
    """Parse match_def: "match" NAME "{" match_arm+ "}" """
    name_tok = first_name(t.children)
    assert name_tok is not None
    arms = [parse_match_arm(a) for a in trees(t.children, "match_arm")]
    return MatchDef(name=str(name_tok), arms=arms, name_span=span_of(name_tok), loc=span_of(t))


def parse_match_arm(t: Tree) -> MatchArm:
    """Parse match_arm: pattern "->" NAME"""
    pattern_tree = t.children[0]
    assert isinstance(pattern_tree, Tree)
    label_tok = t.children[-1]
    return MatchArm(pattern=parse_pattern(pattern_tree), label=str(label_tok), loc=span_of(t))

"""Main ASTBuilder for the mirrorc compiler.

Turns the Lark parse tree of one source unit into a Program. Declarations
are dispatched by tree tag to the parsers in
mirrorc.semantics.ast_builder.declarations, patterns to
mirrorc.semantics.ast_builder.patterns.
"""
from __future__ import annotations
from typing import Optional

from lark import Tree

from mirrorc.semantics.ast import Program
from mirrorc.semantics.ast_builder import declarations as decl
from mirrorc.internals.report import span_of


class ASTBuilder:
    def build(self, tree: Tree, unit_name: Optional[str] = None) -> Program:
        """Build a Program from a `start` tree.

        Args:
            tree: Parse tree produced by the grammar's `start` rule.
            unit_name: Fallback unit name when the source has no `unit` header.
        """
        assert tree.data == "start", tree.data
        program = Program(unit=unit_name, loc=span_of(tree))

        for child in tree.children:
            if not isinstance(child, Tree):
                continue
            kind = child.data
            if kind == "unit_decl":
                program.unit = decl.parse_unit_decl(child)
            elif kind == "struct_def":
                program.structs.append(decl.parse_struct_def(child))
            elif kind == "foreign_def":
                program.foreigns.append(decl.parse_foreign_def(child))
            elif kind == "let_def":
                program.lets.append(decl.parse_let_def(child))
            elif kind == "match_def":
                program.matches.append(decl.parse_match_def(child))
            else:
                raise NotImplementedError(f"unhandled declaration: {kind}")

        return program

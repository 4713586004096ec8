from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Union

from mirrorc.internals.report import Span

@dataclass
class Node:
    loc: Optional[Span]

# === Program structure ===

@dataclass
class Program(Node):
    unit: Optional[str]
    structs: List["StructDef"] = field(default_factory=list)
    foreigns: List["ForeignDef"] = field(default_factory=list)
    lets: List["LetDef"] = field(default_factory=list)
    matches: List["MatchDef"] = field(default_factory=list)

# === Declarations ===

@dataclass
class FieldDef(Node):
    name: str
    type_name: str
    type_span: Optional[Span] = None

@dataclass
class StructDef(Node):
    """struct Name(label: type, ...) - a native structural product type."""
    name: str
    fields: List[FieldDef]
    name_span: Optional[Span] = None

@dataclass
class ForeignDef(Node):
    """foreign Name = "module:Qual.Name" - binds a local name to a host class."""
    name: str
    identity: str
    name_span: Optional[Span] = None

# === Patterns ===

@dataclass
class Pattern(Node):
    pass

@dataclass
class Deconstruct(Pattern):
    """TypeName(p1, p2, ...) - matches an instance and destructures it positionally.

    Sub-patterns may themselves be deconstructions:
    - Line(Point(x1, y1), Point(x2, y2))
    - Line(start, _)
    """
    type_name: str
    args: List[Pattern]
    type_span: Optional[Span] = None

@dataclass
class Binding(Pattern):
    """A lower-case name: matches anything and binds it."""
    name: str

@dataclass
class WildcardPattern(Pattern):
    """_ - matches anything, binds nothing"""
    pass

@dataclass
class LiteralPattern(Pattern):
    value: Union[int, float, str, bool]

# === Pattern sites ===

@dataclass
class LetDef(Node):
    """let name = pattern - value destructuring; failing to match is an error."""
    name: str
    pattern: Pattern
    name_span: Optional[Span] = None

@dataclass
class MatchArm(Node):
    """Single arm in a match declaration: pattern -> label"""
    pattern: Pattern
    label: str

@dataclass
class MatchDef(Node):
    """match name { pattern -> label ... } - first matching arm wins."""
    name: str
    arms: List[MatchArm]
    name_span: Optional[Span] = None


def render_pattern(p: Pattern) -> str:
    if isinstance(p, Deconstruct):
        return f"{p.type_name}({', '.join(render_pattern(a) for a in p.args)})"
    if isinstance(p, Binding):
        return p.name
    if isinstance(p, WildcardPattern):
        return "_"
    if isinstance(p, LiteralPattern):
        if isinstance(p.value, bool):
            return "true" if p.value else "false"
        return repr(p.value) if not isinstance(p.value, str) else '"' + p.value + '"'
    return type(p).__name__

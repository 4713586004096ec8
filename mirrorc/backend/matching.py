"""
Pattern emission.

Compiles a PatternPlan into a matcher: a closure taking the scrutinee and
a binding environment, returning True when the value matches (and the
environment holds the bound names) or False otherwise. All lookups happen
while emitting; the closures only test, bind and recurse.

Deconstruction of a value:
1. Check the value is an instance of the deconstructed type
2. Call the contract's bind once to obtain every component
3. Check the component count against the contract arity
4. Match each sub-pattern against the component at its position
"""
from __future__ import annotations
from typing import Any, Callable, Dict, Mapping

from mirrorc.internals.errors import raise_internal_error
from mirrorc.semantics.passes.matching import (
    BindPlan, DeconstructPlan, LiteralPlan, PatternPlan, WildcardPlan,
)

Matcher = Callable[[Any, Dict[str, Any]], bool]


def emit_pattern(plan: PatternPlan, handles: Mapping[str, type]) -> Matcher:
    """Compile `plan`; `handles` maps type identities to their runtime classes."""
    if isinstance(plan, BindPlan):
        return _emit_binding(plan.name)
    if isinstance(plan, WildcardPlan):
        return _match_any
    if isinstance(plan, LiteralPlan):
        return _emit_literal(plan.value)
    if isinstance(plan, DeconstructPlan):
        return _emit_deconstruct(plan, handles)
    raise_internal_error("CE0001", node=type(plan).__name__)


def _match_any(value: Any, env: Dict[str, Any]) -> bool:
    return True


def _emit_binding(name: str) -> Matcher:
    def match(value: Any, env: Dict[str, Any]) -> bool:
        env[name] = value
        return True
    return match


def _emit_literal(literal: Any) -> Matcher:
    # true must not match 1, and 1 must not match true
    want_bool = isinstance(literal, bool)

    def match(value: Any, env: Dict[str, Any]) -> bool:
        return isinstance(value, bool) == want_bool and value == literal
    return match


def _emit_deconstruct(plan: DeconstructPlan, handles: Mapping[str, type]) -> Matcher:
    handle = handles.get(plan.identity)
    if handle is None:
        raise_internal_error("CE0004", identity=plan.identity)

    identity = plan.identity
    contract = plan.contract
    bind = contract.bind
    arity = contract.arity
    subs = tuple(emit_pattern(arg, handles) for arg in plan.args)

    def match(value: Any, env: Dict[str, Any]) -> bool:
        if not isinstance(value, handle):
            return False
        parts = bind(value)
        if len(parts) != arity:
            raise_internal_error("CE0003", identity=identity, expected=arity, got=len(parts))
        for sub, part in zip(subs, parts):
            if not sub(part, env):
                return False
        return True

    match.__qualname__ = f"match<{plan.type_name}>"
    return match

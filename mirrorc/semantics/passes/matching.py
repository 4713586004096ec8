# semantics/passes/matching.py
"""
Pattern binding for let and match sites.

Turns source patterns into PatternPlans: a tree the backend can compile
without looking anything up again. Validation happens here, once:
- the deconstructed type exists and is a structural product type
- the number of sub-patterns equals the contract arity (CE2001)
- literal and nested sub-patterns fit the component type at their position
- every binder appears once per pattern
- match arms after a catch-all are flagged as unreachable
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from mirrorc.internals.errors import ERR, raise_internal_error
from mirrorc.internals.report import Reporter, Span
from mirrorc.mirror.model import DestructuringContract
from mirrorc.semantics.ast import (
    Binding, Deconstruct, LetDef, LiteralPattern, MatchDef, Pattern, WildcardPattern, render_pattern,
)
from mirrorc.semantics.error_reporter import PassErrorReporter
from mirrorc.semantics.passes.collect import TypeTable
from mirrorc.semantics.passes.destructure import ContractSynthesizer
from mirrorc.semantics.typesys import BuiltinType, RecordType, Type, UnknownType, accepts_literal


# === Plans ===

@dataclass(frozen=True)
class BindPlan:
    name: str


@dataclass(frozen=True)
class WildcardPlan:
    pass


@dataclass(frozen=True)
class LiteralPlan:
    value: Union[int, float, str, bool]


@dataclass(frozen=True)
class DeconstructPlan:
    identity: str
    type_name: str
    contract: DestructuringContract = field(compare=False, repr=False)
    args: Tuple["PatternPlan", ...] = ()


PatternPlan = Union[BindPlan, WildcardPlan, LiteralPlan, DeconstructPlan]


@dataclass
class LetPlan:
    name: str
    source: str
    pattern: PatternPlan
    binders: Tuple[str, ...]


@dataclass
class ArmPlan:
    label: str
    source: str
    pattern: PatternPlan
    binders: Tuple[str, ...]


@dataclass
class CasePlan:
    name: str
    arms: List[ArmPlan]


def is_catch_all(pattern: Pattern) -> bool:
    return isinstance(pattern, (Binding, WildcardPattern))


class PatternBinder:
    def __init__(self, reporter: Reporter, types: TypeTable, contracts: ContractSynthesizer) -> None:
        self.r = reporter
        self.err = PassErrorReporter(reporter)
        self.types = types
        self.contracts = contracts

    def bind_let(self, let: LetDef) -> Optional[LetPlan]:
        bound = self.bind(let.pattern)
        if bound is None:
            return None
        plan, binders = bound
        return LetPlan(let.name, render_pattern(let.pattern), plan, binders)

    def bind_match(self, match: MatchDef) -> Optional[CasePlan]:
        arms: List[ArmPlan] = []
        failed = False
        catch_all = False
        for arm in match.arms:
            if catch_all:
                self.err.emit(ERR.CW2001, arm.loc, label=arm.label)
            catch_all = catch_all or is_catch_all(arm.pattern)

            bound = self.bind(arm.pattern)
            if bound is None:
                failed = True
                continue
            plan, binders = bound
            arms.append(ArmPlan(arm.label, render_pattern(arm.pattern), plan, binders))
        if failed:
            return None
        return CasePlan(match.name, arms)

    def bind(self, pattern: Pattern, expected: Type = BuiltinType.ANY) -> Optional[Tuple[PatternPlan, Tuple[str, ...]]]:
        """Bind one top-level pattern; None when it produced any error."""
        before = len(self.r.errors)
        seen: Dict[str, Optional[Span]] = {}
        plan = self._bind(pattern, expected, "value", seen)
        if plan is None or len(self.r.errors) > before:
            return None
        return plan, tuple(seen)

    def _bind(self, p: Pattern, expected: Type, label: str, seen: Dict[str, Optional[Span]]) -> Optional[PatternPlan]:
        if isinstance(p, Binding):
            if p.name in seen:
                self.err.emit(ERR.CE2005, p.loc, name=p.name)
            else:
                seen[p.name] = p.loc
            return BindPlan(p.name)

        if isinstance(p, WildcardPattern):
            return WildcardPlan()

        if isinstance(p, LiteralPattern):
            if not isinstance(expected, UnknownType) and not accepts_literal(expected, p.value):
                self.err.emit(ERR.CE2003, p.loc, literal=render_pattern(p), label=label, expected=str(expected))
                return None
            return LiteralPlan(p.value)

        if isinstance(p, Deconstruct):
            return self._bind_deconstruct(p, expected, label, seen)

        raise_internal_error("CE0001", node=type(p).__name__)

    def _bind_deconstruct(self, p: Deconstruct, expected: Type, label: str,
                          seen: Dict[str, Optional[Span]]) -> Optional[PatternPlan]:
        span = p.type_span or p.loc
        entry = self.types.lookup(p.type_name)
        if entry is None:
            if BuiltinType.by_name(p.type_name) is not None:
                self.err.emit(ERR.CE2002, span, type=p.type_name)
            else:
                self.err.emit(ERR.CE1001, span, name=p.type_name)
            return None

        if not self._fits(expected, entry.identity):
            self.err.emit(ERR.CE2004, span, type=p.type_name, label=label, expected=str(expected))
            return None

        if not self.contracts.available(entry):
            # Foreign declaration already reported as undescribable
            return None
        contract = self.contracts.contract_for(entry)

        if len(p.args) != contract.arity:
            self.err.emit(ERR.CE2001, span, type=p.type_name, expected=contract.arity, got=len(p.args))
            return None

        args: List[Optional[PatternPlan]] = [
            self._bind(arg, contract.type_at(i), contract.label_at(i), seen)
            for i, arg in enumerate(p.args)
        ]
        if any(a is None for a in args):
            return None
        return DeconstructPlan(entry.identity, p.type_name, contract, tuple(args))  # type: ignore[arg-type]

    @staticmethod
    def _fits(expected: Type, identity: str) -> bool:
        if isinstance(expected, RecordType):
            return expected.identity == identity
        if isinstance(expected, BuiltinType):
            return expected is BuiltinType.ANY
        # Opaque host annotations and unresolved names cannot rule a deconstruction out
        return True

# semantics/semantic_analyzer.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from mirrorc.internals.errors import ERR
from mirrorc.internals.report import Reporter
from mirrorc.mirror.model import DestructuringContract
from mirrorc.mirror.synth import MirrorSynthesizer
from mirrorc.semantics.ast import Program
from mirrorc.semantics.error_reporter import PassErrorReporter
from mirrorc.semantics.passes.collect import TypeCollector, TypeTable
from mirrorc.semantics.passes.destructure import ContractSynthesizer, ContractTable
from mirrorc.semantics.passes.matching import CasePlan, LetPlan, PatternBinder


@dataclass
class Analysis:
    """Everything the backend needs, produced only when no pass reported an error."""
    unit: str
    types: TypeTable
    contracts: ContractTable
    lets: Dict[str, LetPlan] = field(default_factory=dict)
    cases: Dict[str, CasePlan] = field(default_factory=dict)


class SemanticAnalyzer:
    """
    Semantic analysis coordinator.

    Pass execution order:
      - Pass 0: Type collection (structs, foreign types described through the mirror synthesizer)
      - Pass 1: Pattern binding (contract synthesis per type, arity and component-type checks)
    """

    def __init__(self, reporter: Reporter, synthesizer: MirrorSynthesizer,
                 contracts: Optional[Mapping[str, DestructuringContract]] = None) -> None:
        self.reporter = reporter
        self.err = PassErrorReporter(reporter)
        self.synthesizer = synthesizer
        self.user_contracts = dict(contracts or {})
        self.types: Optional[TypeTable] = None
        self.contracts: Optional[ContractSynthesizer] = None

    def check(self, program: Program, unit: str) -> Optional[Analysis]:
        # Pass 0: collect types
        collector = TypeCollector(self.reporter, self.synthesizer, supplied=self.user_contracts)
        self.types = collector.run(program, unit)

        # Pass 1: bind pattern sites
        self.contracts = ContractSynthesizer(self.user_contracts)
        binder = PatternBinder(self.reporter, self.types, self.contracts)
        analysis = Analysis(unit, self.types, self.contracts.table)

        seen: set[str] = set()
        for let in program.lets:
            if self._claim(let.name, let.name_span or let.loc, seen):
                plan = binder.bind_let(let)
                if plan is not None:
                    analysis.lets[let.name] = plan
        for match in program.matches:
            if self._claim(match.name, match.name_span or match.loc, seen):
                case = binder.bind_match(match)
                if case is not None:
                    analysis.cases[match.name] = case

        if self.reporter.has_errors:
            return None
        return analysis

    def _claim(self, name: str, span, seen: set[str]) -> bool:
        if name in seen:
            self.err.emit(ERR.CE1005, span, name=name)
            return False
        seen.add(name)
        return True

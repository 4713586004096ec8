from __future__ import annotations

import logging
from typing import Dict

from mirrorc.backend.matching import emit_pattern
from mirrorc.backend.records import emit_records
from mirrorc.backend.runtime import Arm, CaseDispatch, CompiledUnit, Destructure
from mirrorc.mirror.synth import NATIVE_MARK, MirrorSynthesizer
from mirrorc.semantics.semantic_analyzer import Analysis

logger = logging.getLogger(__name__)


class Codegen:
    """Turns an analysed unit into live Python objects.

    Order matters: record classes first (patterns test against them), then
    let sites, then match sites.
    """

    def __init__(self, synthesizer: MirrorSynthesizer) -> None:
        self.synthesizer = synthesizer

    def emit(self, analysis: Analysis) -> CompiledUnit:
        unit = CompiledUnit(analysis.unit)
        unit.records = emit_records(analysis.types, analysis.unit, self.synthesizer)

        handles: Dict[str, type] = {}
        for name in analysis.types.order:
            entry = analysis.types.by_name[name]
            if entry.native:
                cls = unit.records[name]
                handles[entry.identity] = cls
                unit.mirrors[name] = cls.__dict__[NATIVE_MARK]
                continue
            if entry.handle is not None:
                handles[entry.identity] = entry.handle
            if entry.metadata is not None:
                unit.mirrors[name] = entry.metadata

        for name, let in analysis.lets.items():
            unit.destructures[name] = Destructure(
                name, let.source, let.binders, emit_pattern(let.pattern, handles))

        for name, case in analysis.cases.items():
            arms = tuple(
                Arm(arm.label, arm.source, arm.binders, emit_pattern(arm.pattern, handles))
                for arm in case.arms
            )
            unit.cases[name] = CaseDispatch(name, arms)

        logger.info("unit %s: %d record(s), %d let site(s), %d match site(s)",
                    unit.name, len(unit.records), len(unit.destructures), len(unit.cases))
        return unit

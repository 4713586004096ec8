"""Compilation orchestration: parse, analyse, emit."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

from mirrorc.backend.codegen import Codegen
from mirrorc.backend.runtime import CompiledUnit
from mirrorc.compiler.errors import CompilationError
from mirrorc.internals.config import get_effective_cwd
from mirrorc.internals.parse_errors import handle_parse_exception
from mirrorc.internals.parser import parse_to_ast
from mirrorc.internals.report import Reporter
from mirrorc.mirror.model import DestructuringContract
from mirrorc.mirror.reflection import PythonReflection
from mirrorc.mirror.synth import MirrorSynthesizer, default_synthesizer
from mirrorc.semantics.ast import Program
from mirrorc.semantics.semantic_analyzer import SemanticAnalyzer

logger = logging.getLogger(__name__)

DEFAULT_UNIT = "main"


@dataclass
class CompileOptions:
    """
    Attributes:
        search_paths: Extra directories for foreign modules. Setting these
            gives the compilation a private synthesizer (and descriptor cache).
        contracts: Destructuring contracts by type identity; they take
            precedence over anything synthesized.
        synthesizer: Mirror synthesizer to use; the process-wide one by default.
    """
    search_paths: Sequence[str] = ()
    contracts: Mapping[str, DestructuringContract] = field(default_factory=dict)
    synthesizer: Optional[MirrorSynthesizer] = None

    def resolve_synthesizer(self) -> MirrorSynthesizer:
        if self.synthesizer is not None:
            return self.synthesizer
        if self.search_paths:
            self.synthesizer = MirrorSynthesizer(reflection=PythonReflection(self.search_paths))
            return self.synthesizer
        return default_synthesizer()


def parse_source(src: str, reporter: Reporter, unit_name: Optional[str] = None) -> Optional[Program]:
    """Parse into a Program, reporting syntax errors instead of raising them."""
    try:
        program, _ = parse_to_ast(src, unit_name=unit_name)
    except Exception as exc:
        if handle_parse_exception(exc, reporter):
            return None
        raise
    return program


def compile_program(program: Program, reporter: Reporter,
                    options: Optional[CompileOptions] = None) -> Optional[CompiledUnit]:
    """Analyse and emit a parsed unit; None when any error was reported."""
    options = options or CompileOptions()
    synthesizer = options.resolve_synthesizer()
    unit = program.unit or DEFAULT_UNIT

    analyzer = SemanticAnalyzer(reporter, synthesizer, contracts=options.contracts)
    analysis = analyzer.check(program, unit)
    if analysis is None:
        logger.info("unit %s: %d error(s)", unit, len(reporter.errors))
        return None
    return Codegen(synthesizer).emit(analysis)


def compile_source(text: str, unit_name: Optional[str] = None, *,
                   options: Optional[CompileOptions] = None,
                   filename: str = "<input>") -> CompiledUnit:
    """Compile source text, raising CompilationError on any error.

    A `unit` header in the source takes precedence over `unit_name`.
    """
    reporter = Reporter(source=text, filename=filename)
    program = parse_source(text, reporter, unit_name=unit_name)
    compiled = compile_program(program, reporter, options) if program is not None else None
    if compiled is None:
        raise CompilationError.from_reporter(reporter)
    return compiled


def compile_file(path: Union[str, Path], *, options: Optional[CompileOptions] = None) -> CompiledUnit:
    """Compile a .mrc file; the unit name defaults to the file stem."""
    src_path = resolve_source_path(path)
    text = src_path.read_text(encoding="utf-8")
    return compile_source(text, src_path.stem, options=options, filename=str(src_path))


def resolve_source_path(path: Union[str, Path]) -> Path:
    src_path = Path(path)
    if not src_path.is_absolute():
        src_path = get_effective_cwd() / src_path
    return src_path.resolve()

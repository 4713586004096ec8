"""Exceptions raised by the programmatic compile entry points."""
from __future__ import annotations

from typing import List

from mirrorc.internals.report import Diagnostic, Reporter


class CompilationError(Exception):
    """The unit had errors; no artifact was produced.

    `diagnostics` holds every error, in the order the passes reported them.
    """

    def __init__(self, diagnostics: List[Diagnostic], reporter: Reporter | None = None):
        self.diagnostics = list(diagnostics)
        self.reporter = reporter
        summary = "; ".join(f"[{d.code}] {d.message}" for d in self.diagnostics)
        super().__init__(summary or "compilation failed")

    @property
    def codes(self) -> List[str]:
        return [d.code for d in self.diagnostics]

    @classmethod
    def from_reporter(cls, reporter: Reporter) -> "CompilationError":
        errors = reporter.errors
        for d in errors:
            if d.code == "CE2001":
                return PatternArityError(errors, reporter)
        return cls(errors, reporter)


class PatternArityError(CompilationError):
    """A deconstruction pattern has the wrong number of sub-patterns.

    `expected` and `got` describe the first such pattern in the unit.
    """

    def __init__(self, diagnostics: List[Diagnostic], reporter: Reporter | None = None):
        super().__init__(diagnostics, reporter)
        first = next(d for d in self.diagnostics if d.code == "CE2001")
        self.type_name: str = first.details.get("type", "")
        self.expected: int = first.details.get("expected", -1)
        self.got: int = first.details.get("got", -1)
        self.span = first.span

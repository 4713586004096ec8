"""
Error emission helper for semantic passes.

Binds the reporter once so passes can write

    self.err.emit(er.ERR.CE2001, span, type="Point", expected=2, got=3)

instead of threading self.reporter through every er.emit() call.
"""

from typing import Optional
from mirrorc.internals.report import Span, Reporter
from mirrorc.internals import errors as er


class PassErrorReporter:
    def __init__(self, reporter: Reporter):
        self.reporter = reporter

    def emit(self, error_msg: er.ErrorMessage, span: Optional[Span], **kwargs) -> None:
        """Emit an error or warning.

        Args:
            error_msg: The error message from er.ERR (e.g., er.ERR.CE2001)
            span: Source location span (can be None for some errors)
            **kwargs: Format parameters for the error message
        """
        er.emit(self.reporter, error_msg, span, **kwargs)

    @property
    def has_errors(self) -> bool:
        return self.reporter.has_errors

# internals/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, NoReturn

from mirrorc.internals.report import Span, Reporter


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    GENERAL   = "general"
    SYNTAX    = "syntax"
    NAME      = "name"
    TYPE      = "type"
    PATTERN   = "pattern"
    INTERNAL  = "internal"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    severity: Severity
    text: str
    category: Category = Category.GENERAL
    doc: str = ""


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]


ERR = _ErrorCatalog(REGISTRY)

def emit(r: Reporter, em: ErrorMessage, span: Optional[Span], **kwargs) -> None:
    text = _fmt(em.code, **kwargs)
    if em.severity == Severity.ERROR:
        r.error(em.code, text, span, details=kwargs)
    else:
        r.warn(em.code, text, span, details=kwargs)

def raise_internal_error(code: str, **kwargs) -> NoReturn:
    """Raise a RuntimeError for internal compiler errors.

    Internal errors (CE0xxx codes) indicate compiler or metadata-producer bugs,
    not user code issues.

    Args:
        code: Error code (e.g., "CE0001")
        **kwargs: Format parameters for the error message

    Raises:
        RuntimeError: Always raises with formatted error message
    """
    text = _fmt(code, **kwargs)
    raise RuntimeError(f"{code}: {text}")


#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")

def _fmt(code: str, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None

#
# --- Registry population
#

# Internal errors - CE0xxx range
_add(ErrorMessage("CE0001", Severity.ERROR,
    "unknown pattern node '{node}'",
    Category.INTERNAL, "Found an unexpected pattern node (bug or unsupported feature)."))

_add(ErrorMessage("CE0002", Severity.ERROR,
    "descriptor for '{identity}' requested again while it is being computed by the same thread",
    Category.INTERNAL, "Re-entrant descriptor computation would wait on itself forever."))

_add(ErrorMessage("CE0003", Severity.ERROR,
    "destructuring contract for '{identity}' returned {got} component(s), declared arity is {expected}",
    Category.INTERNAL, "A bind operation violated its own arity."))

_add(ErrorMessage("CE0004", Severity.ERROR,
    "no destructuring contract synthesized for '{identity}'",
    Category.INTERNAL, "Backend reached a pattern whose type was never bound by the semantic passes."))

# Declarations - CE1xxx range
_add(ErrorMessage("CE1001", Severity.ERROR,
    "undefined type '{name}'",
    Category.NAME, "A type name used in a declaration or pattern is not declared."))

_add(ErrorMessage("CE1002", Severity.ERROR,
    "type '{name}' is already declared",
    Category.NAME, "Struct and foreign declarations share one namespace per unit."))

_add(ErrorMessage("CE1003", Severity.ERROR,
    "component '{label}' appears more than once in struct '{name}'",
    Category.TYPE, "Component labels of a struct must be unique."))

_add(ErrorMessage("CE1004", Severity.ERROR,
    "cannot describe foreign type '{name}' ({identity}): {reason}",
    Category.TYPE, "Reflective introspection could not establish the shape of a foreign type."))

_add(ErrorMessage("CE1005", Severity.ERROR,
    "pattern site '{name}' is already defined",
    Category.NAME, "let and match declarations share one namespace per unit."))

# Patterns - CE2xxx range
_add(ErrorMessage("CE2001", Severity.ERROR,
    "pattern for '{type}' expects {expected} sub-pattern(s), got {got}",
    Category.PATTERN, "PatternArityError: the pattern argument count must equal the contract arity."))

_add(ErrorMessage("CE2002", Severity.ERROR,
    "type '{type}' cannot be destructured",
    Category.PATTERN, "Only structural product types offer a destructuring contract."))

_add(ErrorMessage("CE2003", Severity.ERROR,
    "literal {literal} does not fit component '{label}' of type {expected}",
    Category.PATTERN, "Literal sub-patterns must agree with the component type."))

_add(ErrorMessage("CE2004", Severity.ERROR,
    "pattern '{type}' does not fit component '{label}' of type {expected}",
    Category.PATTERN, "Nested deconstruction must name the component's own type."))

_add(ErrorMessage("CE2005", Severity.ERROR,
    "name '{name}' is bound more than once in the same pattern",
    Category.PATTERN, "Each binder may appear once per pattern."))

_add(ErrorMessage("CW2001", Severity.WARNING,
    "arm '{label}' is unreachable: an earlier arm matches everything",
    Category.PATTERN, "Arms after a catch-all binder or wildcard never run."))

# Syntax - CE3xxx range
_add(ErrorMessage("CE3001", Severity.ERROR,
    "syntax error: {detail}",
    Category.SYNTAX, "The source could not be parsed."))

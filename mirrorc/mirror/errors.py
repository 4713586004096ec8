"""Exceptions raised while describing, constructing or reflecting product types."""
from __future__ import annotations


class MirrorError(Exception):
    """Base class for every descriptor-related failure."""


class MalformedMetadata(MirrorError):
    """A metadata producer built an inconsistent descriptor (a bug, not user error)."""


class ShapeDiscoveryError(MirrorError):
    """Reflection could not establish the shape of a type.

    These are permanent for the lifetime of the process: the descriptor cache
    records them and re-raises them to every caller.
    """
    def __init__(self, identity: str, message: str):
        super().__init__(f"{identity}: {message}")
        self.identity = identity
        self.reason = message


class TypeNotFound(ShapeDiscoveryError):
    def __init__(self, identity: str, detail: str = "no such type"):
        super().__init__(identity, detail)


class NoCanonicalConstructor(ShapeDiscoveryError):
    def __init__(self, identity: str, candidates: int):
        if candidates:
            detail = f"{candidates} constructors claim to be canonical"
        else:
            detail = "no canonical constructor"
        super().__init__(identity, detail)
        self.candidates = candidates


class AccessorMismatch(ShapeDiscoveryError):
    def __init__(self, identity: str, parameter: str):
        super().__init__(identity, f"no accessor for constructor parameter '{parameter}'")
        self.parameter = parameter


class ArityMismatch(MirrorError, TypeError):
    """The wrong number of component values was handed to a constructor."""
    def __init__(self, identity: str, expected: int, got: int):
        super().__init__(f"{identity} takes {expected} component(s), got {got}")
        self.identity = identity
        self.expected = expected
        self.got = got


class ReflectiveInvocationError(MirrorError):
    """The canonical constructor raised; the original exception is the __cause__."""
    def __init__(self, identity: str, cause: BaseException):
        super().__init__(f"constructing {identity} failed: {cause!r}")
        self.identity = identity
        self.cause = cause

"""Runtime objects produced by compiling a unit."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from mirrorc.backend.matching import Matcher
from mirrorc.mirror.model import TypeMetadata


class MatchFailure(ValueError):
    """A value did not fit a let pattern, or no arm of a match accepted it."""

    def __init__(self, site: str, pattern: str, value: Any):
        super().__init__(f"{site}: {value!r} does not match {pattern}")
        self.site = site
        self.pattern = pattern
        self.value = value


@dataclass(frozen=True)
class Destructure:
    """A compiled `let NAME = PATTERN`."""
    name: str
    pattern: str
    binders: Tuple[str, ...]
    matcher: Matcher = field(repr=False, compare=False)

    def match(self, value: Any) -> Optional[Dict[str, Any]]:
        env: Dict[str, Any] = {}
        if self.matcher(value, env):
            return env
        return None

    def __call__(self, value: Any) -> Dict[str, Any]:
        env = self.match(value)
        if env is None:
            raise MatchFailure(self.name, self.pattern, value)
        return env


@dataclass(frozen=True)
class Arm:
    label: str
    pattern: str
    binders: Tuple[str, ...]
    matcher: Matcher = field(repr=False, compare=False)


@dataclass(frozen=True)
class CaseDispatch:
    """A compiled `match NAME { ... }`: arms are tried top to bottom, first match wins."""
    name: str
    arms: Tuple[Arm, ...]

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(arm.label for arm in self.arms)

    def match(self, value: Any) -> Optional[Tuple[str, Dict[str, Any]]]:
        for arm in self.arms:
            env: Dict[str, Any] = {}
            if arm.matcher(value, env):
                return arm.label, env
        return None

    def __call__(self, value: Any) -> Tuple[str, Dict[str, Any]]:
        result = self.match(value)
        if result is None:
            raise MatchFailure(self.name, " | ".join(arm.pattern for arm in self.arms), value)
        return result


@dataclass
class CompiledUnit:
    name: str
    records: Dict[str, type] = field(default_factory=dict)
    destructures: Dict[str, Destructure] = field(default_factory=dict)
    cases: Dict[str, CaseDispatch] = field(default_factory=dict)
    mirrors: Dict[str, TypeMetadata] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Any:
        for table in (self.records, self.destructures, self.cases):
            if name in table:
                return table[name]
        raise KeyError(name)

    def __contains__(self, name: str) -> bool:
        return name in self.records or name in self.destructures or name in self.cases

    def mirror(self, name: str) -> TypeMetadata:
        return self.mirrors[name]

"""
Type metadata ("mirrors") and destructuring contracts.

A TypeMetadata describes one structural product type: its identity, the
ordered component labels and types, a constructor taking the components in
order, and one accessor per component. Two producers build them (direct
synthesis from compiler metadata, and the reflective bridge); consumers never
need to know which one did.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from mirrorc.mirror.errors import ArityMismatch, MalformedMetadata
from mirrorc.semantics.typesys import BuiltinType, Type


Constructor = Callable[[Sequence[Any]], Any]
Accessor = Callable[[Any], Any]


def checked_constructor(identity: str, arity: int, invoke: Callable[[Sequence[Any]], Any]) -> Constructor:
    """Wrap `invoke` so that it refuses a component sequence of the wrong length."""
    def construct(values: Sequence[Any]) -> Any:
        values = tuple(values)
        if len(values) != arity:
            raise ArityMismatch(identity, arity, len(values))
        return invoke(values)
    construct.arity = arity  # type: ignore[attr-defined]
    construct.__qualname__ = f"construct<{identity}>"
    return construct


@dataclass(frozen=True)
class TypeMetadata:
    identity: str
    labels: tuple[str, ...]
    types: tuple[Type, ...]
    construct: Constructor = field(compare=False, repr=False)
    accessors: tuple[Accessor, ...] = field(compare=False, repr=False)
    handle: Optional[type] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "labels", tuple(self.labels))
        object.__setattr__(self, "types", tuple(self.types))
        object.__setattr__(self, "accessors", tuple(self.accessors))
        if len(self.labels) != len(self.types):
            raise MalformedMetadata(
                f"{self.identity}: {len(self.labels)} label(s) but {len(self.types)} type(s)")
        if len(self.accessors) != len(self.labels):
            raise MalformedMetadata(
                f"{self.identity}: {len(self.labels)} label(s) but {len(self.accessors)} accessor(s)")
        declared = getattr(self.construct, "arity", None)
        if declared is not None and declared != len(self.labels):
            raise MalformedMetadata(
                f"{self.identity}: constructor takes {declared} value(s) for {len(self.labels)} component(s)")

    @property
    def name(self) -> str:
        return self.identity.rpartition(":")[2]

    @property
    def arity(self) -> int:
        return len(self.labels)

    def component(self, instance: Any, index: int) -> Any:
        return self.accessors[index](instance)

    def components(self, instance: Any) -> tuple[Any, ...]:
        """Read every component of `instance`, in canonical order."""
        return tuple(accessor(instance) for accessor in self.accessors)

    def describe(self) -> str:
        inner = ", ".join(f"{label}: {ty}" for label, ty in zip(self.labels, self.types))
        return f"{self.identity}({inner})"


@dataclass(frozen=True)
class DestructuringContract:
    """What the pattern compiler needs from a type: how many parts, and how to get them."""
    identity: str
    arity: int
    bind: Callable[[Any], tuple[Any, ...]] = field(compare=False, repr=False)
    component_types: tuple[Type, ...] = ()
    labels: tuple[str, ...] = ()

    def type_at(self, index: int) -> Type:
        if self.component_types:
            return self.component_types[index]
        return BuiltinType.ANY

    def label_at(self, index: int) -> str:
        if self.labels:
            return self.labels[index]
        return f"#{index}"


def contract_from(metadata: TypeMetadata) -> DestructuringContract:
    accessors = metadata.accessors

    def bind(instance: Any) -> tuple[Any, ...]:
        return tuple(accessor(instance) for accessor in accessors)

    return DestructuringContract(
        identity=metadata.identity,
        arity=metadata.arity,
        bind=bind,
        component_types=metadata.types,
        labels=metadata.labels,
    )

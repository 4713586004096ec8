from __future__ import annotations
from enum import Enum
from typing import Optional, Union
from dataclasses import dataclass

class BuiltinType(Enum):
    INT = "int"
    FLOAT = "float"
    STRING = "str"
    BOOL = "bool"
    ANY = "any"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def by_name(cls, name: str) -> Optional["BuiltinType"]:
        for member in cls:
            if member.value == name:
                return member
        return None

@dataclass(frozen=True)
class UnknownType:
    name: str

    def __str__(self) -> str:
        return self.name

@dataclass(frozen=True)
class RecordType:
    """Reference to a structural product type by identity.

    Component types use references rather than full definitions, so a
    descriptor built from compiler metadata and one built by reflection
    compare equal whenever they name the same type.
    """
    identity: str  # "module:qualname"

    @property
    def name(self) -> str:
        return self.identity.rpartition(":")[2]

    def __str__(self) -> str:
        return self.name

@dataclass(frozen=True)
class OpaqueType:
    """A host annotation with no counterpart here (unions, generic aliases, ...)."""
    text: str

    def __str__(self) -> str:
        return self.text

@dataclass(frozen=True)
class StructType:
    """A struct declared in a source unit.

    Field order is the canonical constructor order.
    """
    name: str                               # Struct name (e.g., "Point")
    identity: str                           # Unit-qualified identity (e.g., "geometry:Point")
    fields: tuple[tuple[str, "Type"], ...]  # Immutable sequence of (label, type) tuples

    def __str__(self) -> str:
        return self.name

    def ref(self) -> RecordType:
        return RecordType(self.identity)

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(label for label, _ in self.fields)

    @property
    def types(self) -> tuple["Type", ...]:
        return tuple(ty for _, ty in self.fields)

    def get_field_type(self, label: str) -> Optional["Type"]:
        """Get the type of a field by label, or None if the field doesn't exist."""
        for name, ty in self.fields:
            if name == label:
                return ty
        return None


Type = Union[BuiltinType, UnknownType, RecordType, OpaqueType, StructType]


def identity_of(cls: type) -> str:
    return f"{cls.__module__}:{cls.__qualname__}"


def accepts_literal(ty: "Type", value: object) -> bool:
    """Whether a literal sub-pattern can ever match a component of type `ty`."""
    if ty is BuiltinType.ANY or isinstance(ty, OpaqueType):
        return True
    if ty is BuiltinType.BOOL:
        return isinstance(value, bool)
    if ty is BuiltinType.INT:
        return isinstance(value, int) and not isinstance(value, bool)
    if ty is BuiltinType.FLOAT:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if ty is BuiltinType.STRING:
        return isinstance(value, str)
    return False

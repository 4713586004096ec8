# semantics/passes/collect.py
"""Phase 0 collection pass: every type name a unit can mention.

Struct declarations become StructTypes with resolved component types.
Foreign declarations are described right away through the mirror
synthesizer, so shape problems of host classes surface as diagnostics at the
declaration instead of failures at the first pattern that uses them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from mirrorc.internals.report import Reporter, Span
from mirrorc.internals.errors import ERR
from mirrorc.mirror.errors import ShapeDiscoveryError, TypeNotFound
from mirrorc.mirror.model import DestructuringContract, TypeMetadata
from mirrorc.mirror.synth import MirrorSynthesizer
from mirrorc.semantics.ast import ForeignDef, Program, StructDef
from mirrorc.semantics.error_reporter import PassErrorReporter
from mirrorc.semantics.typesys import BuiltinType, RecordType, StructType, Type, UnknownType


@dataclass
class TypeEntry:
    """A type name visible in the unit, struct or foreign."""
    name: str
    identity: str
    native: bool
    name_span: Optional[Span] = None
    struct: Optional[StructType] = None
    metadata: Optional[TypeMetadata] = None
    handle: Optional[type] = None
    # Set when the class defines __unapply__, whether or not its shape is discoverable
    user_contract: Optional[DestructuringContract] = None

    def ref(self) -> RecordType:
        return RecordType(self.identity)

    @property
    def arity(self) -> Optional[int]:
        if self.struct is not None:
            return len(self.struct.fields)
        if self.metadata is not None:
            return self.metadata.arity
        return None


@dataclass
class TypeTable:
    """Registry of all types collected in Phase 0, in declaration order."""
    by_name: Dict[str, TypeEntry] = field(default_factory=dict)
    order: List[str] = field(default_factory=list)

    def lookup(self, name: str) -> Optional[TypeEntry]:
        return self.by_name.get(name)

    def by_identity(self, identity: str) -> Optional[TypeEntry]:
        for entry in self.by_name.values():
            if entry.identity == identity:
                return entry
        return None

    def structs(self) -> List[TypeEntry]:
        return [self.by_name[n] for n in self.order if self.by_name[n].native]

    def foreigns(self) -> List[TypeEntry]:
        return [self.by_name[n] for n in self.order if not self.by_name[n].native]


class TypeCollector:
    """Collects struct and foreign declarations into a TypeTable.

    Validates:
    - one declaration per type name (CE1002)
    - unique component labels per struct (CE1003)
    - component types name a builtin or a declared type (CE1001)
    - foreign types can be described (CE1004)
    """

    def __init__(self, reporter: Reporter, synthesizer: MirrorSynthesizer,
                 supplied: Iterable[str] = ()) -> None:
        self.r = reporter
        self.supplied = frozenset(supplied)  # identities the caller brings a contract for
        self.err = PassErrorReporter(reporter)
        self.synthesizer = synthesizer
        self.types = TypeTable()

    def run(self, program: Program, unit: str) -> TypeTable:
        # Names first, so component types may refer to types declared later
        for struct in program.structs:
            self._declare(struct.name, f"{unit}:{struct.name}", True, struct.name_span or struct.loc)
        for foreign in program.foreigns:
            self._declare(foreign.name, foreign.identity, False, foreign.name_span or foreign.loc)

        for struct in program.structs:
            self._collect_struct(struct)
        for foreign in program.foreigns:
            self._collect_foreign(foreign)
        return self.types

    def _declare(self, name: str, identity: str, native: bool, span: Optional[Span]) -> None:
        if name in self.types.by_name or BuiltinType.by_name(name) is not None:
            self.err.emit(ERR.CE1002, span, name=name)
            return
        self.types.by_name[name] = TypeEntry(name, identity, native, name_span=span)
        self.types.order.append(name)

    def _collect_struct(self, struct: StructDef) -> None:
        entry = self.types.by_name.get(struct.name)
        if entry is None or not entry.native or entry.struct is not None:
            # Duplicate declaration; the first one owns the name
            return

        fields: List[tuple[str, Type]] = []
        seen: set[str] = set()
        for f in struct.fields:
            if f.name in seen:
                self.err.emit(ERR.CE1003, f.loc, label=f.name, name=struct.name)
                continue
            seen.add(f.name)
            fields.append((f.name, self.resolve_type_name(f.type_name, f.type_span or f.loc)))

        entry.struct = StructType(name=struct.name, identity=entry.identity, fields=tuple(fields))

    def _collect_foreign(self, foreign: ForeignDef) -> None:
        entry = self.types.by_name.get(foreign.name)
        if entry is None or entry.native or entry.identity != foreign.identity:
            return
        if entry.metadata is not None or entry.user_contract is not None:
            return

        try:
            entry.metadata = self.synthesizer.foreign(foreign.identity)
            entry.handle = entry.metadata.handle
            if entry.handle is not None:
                # A class that destructures itself wins over its reflected shape
                entry.user_contract = self.synthesizer.reflection.user_contract(entry.handle)
            return
        except ShapeDiscoveryError as exc:
            failure = exc

        if not isinstance(failure, TypeNotFound):
            reflection = self.synthesizer.reflection
            try:
                handle = reflection.resolve(foreign.identity)
            except TypeNotFound:
                handle = None
            contract = reflection.user_contract(handle) if handle is not None else None
            if contract is not None or (handle is not None and foreign.identity in self.supplied):
                entry.handle = handle
                entry.user_contract = contract
                return

        self.err.emit(ERR.CE1004, entry.name_span, name=foreign.name,
                      identity=foreign.identity, reason=failure.reason)

    def resolve_type_name(self, name: str, span: Optional[Span]) -> Type:
        builtin = BuiltinType.by_name(name)
        if builtin is not None:
            return builtin
        entry = self.types.by_name.get(name)
        if entry is not None:
            return entry.ref()
        self.err.emit(ERR.CE1001, span, name=name)
        return UnknownType(name)

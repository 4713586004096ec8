"""
Record class emission.

Every struct of a unit becomes a frozen dataclass whose field order is the
canonical constructor order. The class carries the descriptor built from
compiler metadata under NATIVE_MARK, and is registered with the synthesizer
so lookups by identity find the latest class compiled under that identity.
"""
from __future__ import annotations

import dataclasses
import logging
import typing
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from mirrorc.mirror.synth import NATIVE_MARK
from mirrorc.semantics.typesys import BuiltinType, RecordType, StructType

if TYPE_CHECKING:
    from mirrorc.mirror.synth import MirrorSynthesizer
    from mirrorc.semantics.passes.collect import TypeTable

logger = logging.getLogger(__name__)

_PYTHON_TYPES: Dict[BuiltinType, Any] = {
    BuiltinType.INT: int,
    BuiltinType.FLOAT: float,
    BuiltinType.STRING: str,
    BuiltinType.BOOL: bool,
    BuiltinType.ANY: typing.Any,
}


def emit_records(types: 'TypeTable', unit: str, synthesizer: 'MirrorSynthesizer') -> Dict[str, type]:
    """Create the record classes of a unit, keyed by struct name."""
    handles: Dict[str, Any] = {
        entry.identity: entry.handle for entry in types.foreigns() if entry.handle is not None
    }
    records: Dict[str, type] = {}
    pending: List[tuple[type, StructType]] = []

    for entry in types.structs():
        struct = entry.struct
        assert struct is not None
        cls = dataclasses.make_dataclass(
            struct.name,
            [(label, _annotation(ty, handles)) for label, ty in struct.fields],
            frozen=True,
        )
        cls.__module__ = unit
        cls.__qualname__ = struct.name
        handles[struct.identity] = cls
        records[struct.name] = cls
        pending.append((cls, struct))

    # Components referring to structs declared later get their classes now
    for cls, struct in pending:
        _patch_forward_references(cls, struct, handles)
        setattr(cls, NATIVE_MARK, synthesizer.native(struct, cls))
        synthesizer.register_native(cls)
        logger.debug("emitted record %s.%s", unit, struct.name)

    return records


def _annotation(ty: Any, handles: Dict[str, Any]) -> Any:
    if isinstance(ty, BuiltinType):
        return _PYTHON_TYPES[ty]
    if isinstance(ty, RecordType):
        return handles.get(ty.identity, ty.name)
    return typing.Any


def _patch_forward_references(cls: type, struct: StructType, handles: Dict[str, Any]) -> None:
    annotations = dict(cls.__annotations__)
    fields = {f.name: f for f in dataclasses.fields(cls)}
    for label, ty in struct.fields:
        if not isinstance(annotations.get(label), str):
            continue
        resolved: Optional[Any] = handles.get(ty.identity) if isinstance(ty, RecordType) else None
        if resolved is None:
            continue
        annotations[label] = resolved
        fields[label].type = resolved
    cls.__annotations__ = annotations

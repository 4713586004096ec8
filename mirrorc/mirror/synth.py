"""
Mirror synthesis.

Two ways to obtain the TypeMetadata of a structural product type:

- native: the type was declared in a compiled unit, so the compiler already
  knows its shape. The descriptor is built directly from the StructType and
  the generated record class carries it.
- foreign: nothing but the type itself is available. The descriptor comes from
  the reflective bridge, through the descriptor cache, so the reflective cost
  is paid once per identity for the whole process.

Both produce equal descriptors for the same type.
"""
from __future__ import annotations

import logging
import threading
from operator import attrgetter
from typing import Any, Optional, Sequence, Union

from mirrorc.internals.config import get_search_paths
from mirrorc.mirror.bridge import ReflectiveBridge
from mirrorc.mirror.cache import DescriptorCache
from mirrorc.mirror.model import TypeMetadata, checked_constructor
from mirrorc.mirror.reflection import PythonReflection
from mirrorc.semantics.typesys import StructType

logger = logging.getLogger(__name__)

NATIVE_MARK = "__mirrorc_native__"


class MirrorSynthesizer:
    def __init__(self, cache: Optional[DescriptorCache] = None,
                 reflection: Optional[PythonReflection] = None) -> None:
        self.reflection = reflection or PythonReflection(get_search_paths())
        if cache is None:
            cache = DescriptorCache(ReflectiveBridge(self.reflection).introspect)
        self.cache = cache
        self._natives: dict[str, TypeMetadata] = {}
        self._natives_lock = threading.Lock()

    def native(self, struct: StructType, handle: type) -> TypeMetadata:
        """Build the descriptor of a compiled struct from compiler metadata alone."""
        arity = len(struct.fields)
        logger.debug("native mirror for %s", struct.identity)

        def invoke(values: Sequence[Any]) -> Any:
            return handle(*values)

        return TypeMetadata(
            identity=struct.identity,
            labels=struct.labels,
            types=tuple(_component_ref(ty) for ty in struct.types),
            construct=checked_constructor(struct.identity, arity, invoke),
            accessors=tuple(attrgetter(label) for label in struct.labels),
            handle=handle,
        )

    def register_native(self, cls: type) -> str:
        """Publish a generated record class under its identity.

        Recompiling a unit replaces the earlier class, so identity lookups
        and class lookups keep answering with the same descriptor.
        """
        metadata = cls.__dict__[NATIVE_MARK]
        identity = self.reflection.remember(cls)
        with self._natives_lock:
            replaced = self._natives.get(identity)
            self._natives[identity] = metadata
        if replaced is not None and replaced.handle is not cls:
            logger.debug("native record %s replaced by a recompiled class", identity)
        return identity

    def foreign(self, identity: str) -> TypeMetadata:
        with self._natives_lock:
            native = self._natives.get(identity)
        if native is not None:
            return native
        return self.cache.get_or_compute(identity)

    def mirror_of(self, target: Union[type, str]) -> TypeMetadata:
        """Descriptor for a class or a "module:qualname" identity."""
        if isinstance(target, str):
            return self.foreign(target)
        native = target.__dict__.get(NATIVE_MARK)
        if isinstance(native, TypeMetadata):
            return native
        identity = self.reflection.remember(target)
        return self.foreign(identity)


def _component_ref(ty):
    return ty.ref() if isinstance(ty, StructType) else ty


_default: Optional[MirrorSynthesizer] = None
_default_lock = threading.Lock()


def default_synthesizer() -> MirrorSynthesizer:
    """The process-wide synthesizer; its cache starts empty and only grows."""
    global _default
    with _default_lock:
        if _default is None:
            _default = MirrorSynthesizer()
        return _default


def mirror_of(target: Union[type, str]) -> TypeMetadata:
    return default_synthesizer().mirror_of(target)

"""
Reflective introspection bridge.

Establishes the shape of a type that arrives with no compiler metadata:
resolve the identity, find the canonical constructor, pair every constructor
parameter with an accessor, and build the descriptor. Every reflective
lookup happens here, once; the constructor closure handed out afterwards
only checks arity and invokes.

The bridge caches nothing. Route requests through a DescriptorCache.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from mirrorc.mirror.errors import AccessorMismatch, NoCanonicalConstructor
from mirrorc.mirror.model import TypeMetadata, checked_constructor
from mirrorc.mirror.reflection import PythonReflection, Reflection

logger = logging.getLogger(__name__)


class ReflectiveBridge:
    def __init__(self, reflection: Optional[Reflection] = None) -> None:
        self.reflection = reflection or PythonReflection()

    def introspect(self, identity: str) -> TypeMetadata:
        """Describe `identity`, or raise a ShapeDiscoveryError subclass."""
        reflection = self.reflection
        handle = reflection.resolve(identity)

        candidates = reflection.find_canonical_constructor(handle)
        if len(candidates) != 1:
            raise NoCanonicalConstructor(identity, len(candidates))
        constructor = candidates[0]

        accessors = []
        for parameter in constructor.parameters:
            accessor = reflection.find_accessor(handle, parameter.name)
            if accessor is None:
                raise AccessorMismatch(identity, parameter.name)
            accessors.append(accessor)

        labels = tuple(p.name for p in constructor.parameters)
        types = reflection.component_types(handle, constructor)

        def invoke(values: Sequence[Any]) -> Any:
            return reflection.invoke(identity, constructor, values)

        metadata = TypeMetadata(
            identity=identity,
            labels=labels,
            types=types,
            construct=checked_constructor(identity, constructor.arity, invoke),
            accessors=tuple(accessors),
            handle=handle,
        )
        logger.debug("introspected %s via %s", metadata.describe(), constructor.name)
        return metadata

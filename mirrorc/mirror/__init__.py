"""Type mirrors: descriptors of structural product types, native or reflected."""
from mirrorc.mirror.errors import (
    MirrorError, MalformedMetadata, ShapeDiscoveryError, TypeNotFound,
    NoCanonicalConstructor, AccessorMismatch, ArityMismatch, ReflectiveInvocationError,
)
from mirrorc.mirror.model import TypeMetadata, DestructuringContract, contract_from
from mirrorc.mirror.reflection import PythonReflection, Reflection, canonical
from mirrorc.mirror.bridge import ReflectiveBridge
from mirrorc.mirror.cache import DescriptorCache, EntryState
from mirrorc.mirror.synth import MirrorSynthesizer, default_synthesizer, mirror_of

__all__ = [
    "MirrorError", "MalformedMetadata", "ShapeDiscoveryError", "TypeNotFound",
    "NoCanonicalConstructor", "AccessorMismatch", "ArityMismatch", "ReflectiveInvocationError",
    "TypeMetadata", "DestructuringContract", "contract_from",
    "PythonReflection", "Reflection", "canonical",
    "ReflectiveBridge", "DescriptorCache", "EntryState",
    "MirrorSynthesizer", "default_synthesizer", "mirror_of",
]

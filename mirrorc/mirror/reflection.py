"""
Reflection capability used by the introspection bridge.

The bridge never touches the host runtime directly; it asks a Reflection
for four things (resolve an identity, list canonical constructor candidates,
find an accessor, invoke a constructor) plus the declared component types.
PythonReflection answers them with importlib, inspect and dataclasses.

Python classes count as structural product types when the runtime marks one
constructor as canonical for their category:

- a factory decorated with @canonical (takes precedence over everything else)
- NamedTuple classes: the generated __new__
- dataclasses with init=True: the generated __init__
- plain classes whose __init__ positional parameters equal __match_args__
"""
from __future__ import annotations

import dataclasses
import importlib
import importlib.machinery
import importlib.util
import inspect
import logging
import sys
import threading
import types
import typing
from abc import ABC, abstractmethod
from dataclasses import dataclass
from operator import attrgetter, methodcaller
from typing import Any, Callable, Iterable, Optional, Sequence

from mirrorc.mirror.errors import ReflectiveInvocationError, TypeNotFound
from mirrorc.mirror.model import Accessor, DestructuringContract
from mirrorc.semantics.typesys import BuiltinType, OpaqueType, RecordType, Type, identity_of

logger = logging.getLogger(__name__)

CANONICAL_MARK = "__mirrorc_canonical__"

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)

_BUILTINS: dict[Any, BuiltinType] = {
    int: BuiltinType.INT,
    float: BuiltinType.FLOAT,
    str: BuiltinType.STRING,
    bool: BuiltinType.BOOL,
}


def canonical(factory):
    """Mark a factory (usually a classmethod) as the canonical constructor of its class."""
    target = factory.__func__ if isinstance(factory, (classmethod, staticmethod)) else factory
    setattr(target, CANONICAL_MARK, True)
    return factory


@dataclass(frozen=True)
class Constructor:
    name: str
    parameters: tuple[inspect.Parameter, ...]
    target: Callable[..., Any]

    @property
    def arity(self) -> int:
        return len(self.parameters)


def python_type_to_type(annotation: Any) -> Type:
    """Map a Python annotation onto a component type."""
    if annotation is inspect.Parameter.empty or annotation is typing.Any:
        return BuiltinType.ANY
    if typing.get_origin(annotation) is not None:
        return OpaqueType(str(annotation))
    if isinstance(annotation, type) and annotation in _BUILTINS:
        return _BUILTINS[annotation]
    if isinstance(annotation, type):
        return RecordType(identity_of(annotation))
    if isinstance(annotation, str):
        return OpaqueType(annotation)
    return OpaqueType(getattr(annotation, "__name__", None) or repr(annotation))


class Reflection(ABC):
    """What the introspection bridge needs from the host runtime."""

    @abstractmethod
    def resolve(self, identity: str) -> Any:
        """Return a loadable type handle, or raise TypeNotFound."""

    @abstractmethod
    def find_canonical_constructor(self, handle: Any) -> list[Constructor]:
        """Every constructor the runtime marks as canonical (ideally exactly one)."""

    @abstractmethod
    def find_accessor(self, handle: Any, name: str) -> Optional[Accessor]:
        """A zero-argument accessor for component `name`, or None."""

    @abstractmethod
    def invoke(self, identity: str, constructor: Constructor, values: Sequence[Any]) -> Any:
        """Call the constructor; failures surface as ReflectiveInvocationError."""

    @abstractmethod
    def component_types(self, handle: Any, constructor: Constructor) -> tuple[Type, ...]:
        """Declared types of the constructor parameters, in order."""

    def user_contract(self, handle: Any) -> Optional[DestructuringContract]:
        return None


class PythonReflection(Reflection):
    def __init__(self, search_paths: Iterable[str] = ()) -> None:
        self.search_paths = tuple(str(p) for p in search_paths)
        self._known: dict[str, type] = {}
        self._lock = threading.Lock()

    def remember(self, cls: type) -> str:
        """Make `cls` resolvable by identity without importing anything."""
        identity = identity_of(cls)
        with self._lock:
            self._known[identity] = cls
        return identity

    # ------------------------------------------------------------------
    # Reflection interface
    # ------------------------------------------------------------------

    def resolve(self, identity: str) -> type:
        with self._lock:
            known = self._known.get(identity)
        if known is not None:
            return known

        module_name, sep, qualname = identity.partition(":")
        if not sep or not module_name or not qualname:
            raise TypeNotFound(identity, "identity must look like 'module:Qual.Name'")

        try:
            obj: Any = self._import(module_name)
        except ImportError as exc:
            raise TypeNotFound(identity, f"cannot import module '{module_name}': {exc}") from exc

        for part in qualname.split("."):
            try:
                obj = getattr(obj, part)
            except AttributeError as exc:
                raise TypeNotFound(identity, f"'{module_name}' has no attribute '{qualname}'") from exc

        if not isinstance(obj, type):
            raise TypeNotFound(identity, f"'{qualname}' is not a class")
        return obj

    def find_canonical_constructor(self, handle: type) -> list[Constructor]:
        marked = self._marked_factories(handle)
        if len(marked) > 1:
            # Two marked factories are ambiguous even if one of them is unusable
            return marked
        candidates = marked or self._category_constructors(handle)
        return [c for c in candidates if _is_positional(c.parameters)]

    def find_accessor(self, handle: type, name: str) -> Optional[Accessor]:
        if dataclasses.is_dataclass(handle):
            if name in {f.name for f in dataclasses.fields(handle)}:
                return attrgetter(name)
        if issubclass(handle, tuple) and name in getattr(handle, "_fields", ()):
            return attrgetter(name)

        raw = inspect.getattr_static(handle, name, None)
        if isinstance(raw, (property, types.MemberDescriptorType, types.GetSetDescriptorType)):
            return attrgetter(name)
        if name in getattr(handle, "__match_args__", ()):
            return attrgetter(name)
        if inspect.isfunction(raw) and _takes_only_self(raw):
            return methodcaller(name)
        return None

    def invoke(self, identity: str, constructor: Constructor, values: Sequence[Any]) -> Any:
        try:
            return constructor.target(*values)
        except Exception as exc:
            raise ReflectiveInvocationError(identity, exc) from exc

    def component_types(self, handle: type, constructor: Constructor) -> tuple[Type, ...]:
        hints = _hints(constructor.target)
        if inspect.isclass(constructor.target):
            # Annotations on __init__ fill in for classes that declare none in the body
            hints = {**_hints(constructor.target.__init__), **hints}
        return tuple(
            python_type_to_type(hints.get(p.name, p.annotation))
            for p in constructor.parameters
        )

    def user_contract(self, handle: type) -> Optional[DestructuringContract]:
        if inspect.getattr_static(handle, "__unapply__", None) is None:
            return None
        match_args = getattr(handle, "__match_args__", None)
        if match_args is None:
            return None
        unapply = getattr(handle, "__unapply__")
        identity = identity_of(handle)

        def bind(instance: Any) -> tuple[Any, ...]:
            return tuple(unapply(instance))

        logger.debug("%s supplies its own destructuring contract", identity)
        return DestructuringContract(identity, len(match_args), bind, labels=tuple(match_args))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _import(self, module_name: str) -> types.ModuleType:
        try:
            return importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            top = module_name.partition(".")[0]
            if not self.search_paths or exc.name != top or top in sys.modules:
                raise
        spec = importlib.machinery.PathFinder.find_spec(top, list(self.search_paths))
        if spec is None or spec.loader is None:
            raise ModuleNotFoundError(f"No module named '{top}' on {list(self.search_paths)}", name=top)
        logger.debug("loading '%s' from %s", top, spec.origin)
        module = importlib.util.module_from_spec(spec)
        sys.modules[top] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            del sys.modules[top]
            raise
        return importlib.import_module(module_name)

    def _marked_factories(self, handle: type) -> list[Constructor]:
        seen: set[str] = set()
        found: list[Constructor] = []
        for klass in handle.__mro__:
            for name, raw in vars(klass).items():
                if name in seen:
                    continue
                seen.add(name)
                func = getattr(raw, "__func__", raw)
                if getattr(func, CANONICAL_MARK, False):
                    found.extend(_constructor(name, getattr(handle, name)))
        return found

    def _category_constructors(self, handle: type) -> list[Constructor]:
        if issubclass(handle, tuple) and hasattr(handle, "_fields"):
            return _constructor("__new__", handle)
        if dataclasses.is_dataclass(handle):
            if handle.__dataclass_params__.init:
                return _constructor("__init__", handle)
            return []
        match_args = getattr(handle, "__match_args__", None)
        if match_args is not None and handle.__init__ is not object.__init__:
            found = _constructor("__init__", handle)
            if found and tuple(p.name for p in found[0].parameters) == tuple(match_args):
                return found
        return []


def _constructor(name: str, target: Callable[..., Any]) -> list[Constructor]:
    """A one-element candidate list, or nothing when the signature is not introspectable."""
    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError):
        logger.debug("signature of %r is not introspectable", target)
        return []
    return [Constructor(name, tuple(signature.parameters.values()), target)]


def _is_positional(parameters: Sequence[inspect.Parameter]) -> bool:
    return all(p.kind in _POSITIONAL for p in parameters)


def _takes_only_self(func: Callable[..., Any]) -> bool:
    params = list(inspect.signature(func).parameters.values())
    return len(params) == 1 and params[0].kind in _POSITIONAL


def _hints(obj: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError) as exc:
        # Unresolvable forward references keep their raw annotation text
        logger.debug("type hints of %r unavailable: %s", obj, exc)
        return dict(getattr(obj, "__annotations__", {}) or {})

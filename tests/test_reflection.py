from __future__ import annotations

import sys
import textwrap

import pytest

from mirrorc.mirror import (
    AccessorMismatch, NoCanonicalConstructor, PythonReflection, ReflectiveBridge,
    ReflectiveInvocationError, TypeNotFound,
)
from mirrorc.semantics.typesys import BuiltinType, RecordType

import shapes


@pytest.fixture
def bridge() -> ReflectiveBridge:
    return ReflectiveBridge(PythonReflection())


def test_point_descriptor(bridge):
    meta = bridge.introspect("shapes:Point")
    assert meta.labels == ("x", "y")
    assert meta.types == (BuiltinType.INT, BuiltinType.INT)
    assert meta.construct([5, 6]) == shapes.Point(5, 6)
    assert meta.handle is shapes.Point


def test_nested_components_are_references(bridge):
    meta = bridge.introspect("shapes:Line")
    assert meta.types == (RecordType("shapes:Point"), RecordType("shapes:Point"))


def test_namedtuple(bridge):
    meta = bridge.introspect("shapes:Vec")
    assert meta.labels == ("dx", "dy")
    assert meta.types == (BuiltinType.FLOAT, BuiltinType.FLOAT)
    assert meta.components(shapes.Vec(1.5, -2.0)) == (1.5, -2.0)


def test_match_args_class_without_annotations(bridge):
    meta = bridge.introspect("shapes:Pair")
    assert meta.labels == ("left", "right")
    assert meta.types == (BuiltinType.ANY, BuiltinType.ANY)
    assert meta.construct(["a", "b"]) == shapes.Pair("a", "b")


def test_canonical_factory_wins(bridge):
    meta = bridge.introspect("shapes:Polar")
    assert meta.labels == ("r", "theta")
    assert meta.types == (BuiltinType.FLOAT, BuiltinType.FLOAT)
    polar = meta.construct([2.0, 0.5])
    assert isinstance(polar, shapes.Polar)
    assert meta.components(polar) == (2.0, 0.5)


def test_two_canonical_factories(bridge):
    with pytest.raises(NoCanonicalConstructor) as excinfo:
        bridge.introspect("shapes:Ambiguous")
    assert excinfo.value.candidates == 2


def test_two_canonical_factories_even_if_one_is_keyword_only(bridge):
    with pytest.raises(NoCanonicalConstructor) as excinfo:
        bridge.introspect("shapes:HalfMarked")
    assert excinfo.value.candidates == 2


def test_no_canonical_constructor(bridge):
    with pytest.raises(NoCanonicalConstructor) as excinfo:
        bridge.introspect("shapes:Blob")
    assert excinfo.value.candidates == 0


def test_parameter_without_accessor(bridge):
    with pytest.raises(AccessorMismatch) as excinfo:
        bridge.introspect("shapes:Sealed")
    assert excinfo.value.parameter == "secret"
    assert excinfo.value.identity == "shapes:Sealed"


@pytest.mark.parametrize("identity", [
    "shapes:Missing",
    "shapes:NOT_A_CLASS",
    "no_such_module_for_mirrorc_tests:Thing",
    "not-an-identity",
])
def test_unresolvable_identities(bridge, identity):
    with pytest.raises(TypeNotFound):
        bridge.introspect(identity)


def test_constructor_failure_is_wrapped(bridge):
    meta = bridge.introspect("shapes:Positive")
    with pytest.raises(ReflectiveInvocationError) as excinfo:
        meta.construct([0])
    assert isinstance(excinfo.value.cause, ValueError)
    assert excinfo.value.__cause__ is excinfo.value.cause


def test_user_contract_hook():
    reflection = PythonReflection()
    contract = reflection.user_contract(shapes.Temperature)
    assert contract is not None
    assert contract.arity == 1
    assert contract.labels == ("celsius",)
    assert contract.bind(shapes.Temperature(273.15)) == (0.0,)
    assert reflection.user_contract(shapes.Point) is None


def test_user_contract_on_describable_class():
    contract = PythonReflection().user_contract(shapes.Celsius)
    assert contract is not None
    assert contract.labels == ("kelvin",)
    assert contract.bind(shapes.Celsius(300.0)) == (27.0,)


def test_remembered_class_needs_no_import():
    class Local:
        __match_args__ = ("a",)

        def __init__(self, a):
            self.a = a

    reflection = PythonReflection()
    identity = reflection.remember(Local)
    assert reflection.resolve(identity) is Local
    meta = ReflectiveBridge(reflection).introspect(identity)
    assert meta.labels == ("a",)


def test_search_paths(tmp_path, monkeypatch):
    module = "mirrorc_search_path_fixture"
    (tmp_path / f"{module}.py").write_text(textwrap.dedent("""
        from dataclasses import dataclass

        @dataclass
        class Box:
            width: int
            height: int
    """), encoding="utf-8")
    monkeypatch.delitem(sys.modules, module, raising=False)

    with pytest.raises(TypeNotFound):
        PythonReflection().resolve(f"{module}:Box")

    reflection = PythonReflection([str(tmp_path)])
    try:
        meta = ReflectiveBridge(reflection).introspect(f"{module}:Box")
    finally:
        sys.modules.pop(module, None)
    assert meta.labels == ("width", "height")
    assert meta.types == (BuiltinType.INT, BuiltinType.INT)

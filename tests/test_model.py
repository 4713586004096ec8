from __future__ import annotations

from operator import attrgetter

import pytest

from mirrorc.mirror import ArityMismatch, MalformedMetadata, TypeMetadata, contract_from
from mirrorc.mirror.model import checked_constructor
from mirrorc.semantics.typesys import BuiltinType

import shapes


def _point_metadata() -> TypeMetadata:
    return TypeMetadata(
        identity="shapes:Point",
        labels=("x", "y"),
        types=(BuiltinType.INT, BuiltinType.INT),
        construct=checked_constructor("shapes:Point", 2, lambda values: shapes.Point(*values)),
        accessors=(attrgetter("x"), attrgetter("y")),
        handle=shapes.Point,
    )


def test_metadata_basics():
    meta = _point_metadata()
    assert meta.name == "Point"
    assert meta.arity == 2
    assert meta.components(shapes.Point(3, 4)) == (3, 4)
    assert meta.component(shapes.Point(3, 4), 1) == 4
    assert meta.describe() == "shapes:Point(x: int, y: int)"


def test_metadata_equality_ignores_behaviour():
    a = _point_metadata()
    b = TypeMetadata(
        identity="shapes:Point",
        labels=["x", "y"],
        types=[BuiltinType.INT, BuiltinType.INT],
        construct=checked_constructor("shapes:Point", 2, lambda values: None),
        accessors=[attrgetter("x"), attrgetter("y")],
    )
    assert a == b


def test_constructor_checks_count():
    meta = _point_metadata()
    assert meta.construct([5, 6]) == shapes.Point(5, 6)
    with pytest.raises(ArityMismatch) as excinfo:
        meta.construct([5])
    assert excinfo.value.expected == 2
    assert excinfo.value.got == 1
    assert isinstance(excinfo.value, TypeError)


def test_inconsistent_metadata_is_rejected():
    with pytest.raises(MalformedMetadata):
        TypeMetadata("m:T", ("a", "b"), (BuiltinType.INT,), checked_constructor("m:T", 2, tuple),
                     (attrgetter("a"), attrgetter("b")))
    with pytest.raises(MalformedMetadata):
        TypeMetadata("m:T", ("a",), (BuiltinType.INT,), checked_constructor("m:T", 1, tuple), ())
    with pytest.raises(MalformedMetadata):
        TypeMetadata("m:T", ("a",), (BuiltinType.INT,), checked_constructor("m:T", 3, tuple),
                     (attrgetter("a"),))


def test_contract_from_metadata():
    contract = contract_from(_point_metadata())
    assert contract.identity == "shapes:Point"
    assert contract.arity == 2
    assert contract.bind(shapes.Point(7, 8)) == (7, 8)
    assert contract.type_at(0) is BuiltinType.INT
    assert contract.label_at(1) == "y"

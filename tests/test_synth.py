from __future__ import annotations

import pytest

from mirrorc import compile_source, mirror_of
from mirrorc.mirror import MirrorSynthesizer, TypeNotFound, default_synthesizer
from mirrorc.mirror.synth import NATIVE_MARK
from mirrorc.semantics.typesys import BuiltinType, RecordType, identity_of

import shapes

SHAPES_UNIT = """
unit drawing
struct Segment(a: Point, b: Point)
struct Point(x: int, y: float)
struct Label(text: str, at: Point, visible: bool, extra: any)
"""


@pytest.fixture
def unit(options):
    return compile_source(SHAPES_UNIT, options=options)


def test_native_descriptor(unit):
    meta = unit.mirrors["Point"]
    assert meta.identity == "drawing:Point"
    assert meta.labels == ("x", "y")
    assert meta.types == (BuiltinType.INT, BuiltinType.FLOAT)
    assert meta.handle is unit.records["Point"]
    assert unit.records["Point"].__dict__[NATIVE_MARK] is meta


def test_component_types_reference_records(unit):
    assert unit.mirrors["Segment"].types == (RecordType("drawing:Point"), RecordType("drawing:Point"))
    assert unit.mirrors["Label"].types == (
        BuiltinType.STRING, RecordType("drawing:Point"), BuiltinType.BOOL, BuiltinType.ANY,
    )


@pytest.mark.parametrize("name", ["Point", "Segment", "Label"])
def test_native_and_reflected_descriptors_agree(unit, synthesizer, name):
    cls = unit.records[name]
    native = unit.mirrors[name]
    reflected = synthesizer.cache.get_or_compute(identity_of(cls))

    assert reflected is not native
    assert reflected == native


def test_mirror_of_prefers_native_metadata(unit, synthesizer):
    cls = unit.records["Point"]
    assert synthesizer.mirror_of(cls) is unit.mirrors["Point"]
    assert mirror_of(cls) is unit.mirrors["Point"]


def test_identity_lookup_serves_native_metadata(unit, synthesizer):
    assert synthesizer.mirror_of("drawing:Point") is unit.mirrors["Point"]
    assert "drawing:Point" not in synthesizer.cache


def test_recompiled_struct_replaces_descriptor(options, synthesizer):
    first = compile_source("struct P(x: int, y: int)\n", options=options)
    assert synthesizer.mirror_of("main:P").labels == ("x", "y")

    second = compile_source("struct P(name: str)\n", options=options)
    cls = second.records["P"]
    assert synthesizer.mirror_of("main:P") is second.mirrors["P"]
    assert synthesizer.mirror_of(cls) is synthesizer.mirror_of("main:P")
    assert synthesizer.mirror_of("main:P").labels == ("name",)
    # Classes of the earlier compilation keep their own descriptor
    assert synthesizer.mirror_of(first.records["P"]).labels == ("x", "y")


def test_mirror_of_foreign_class(synthesizer):
    meta = synthesizer.mirror_of(shapes.Point)
    assert meta.identity == "shapes:Point"
    assert synthesizer.mirror_of("shapes:Point") is meta


def test_foreign_point_scenario(synthesizer):
    meta = synthesizer.foreign("shapes:Point")
    assert list(meta.labels) == ["x", "y"]
    assert list(meta.types) == [BuiltinType.INT, BuiltinType.INT]
    assert meta.construct([5, 6]) == shapes.Point(5, 6)


def test_default_synthesizer_is_shared():
    assert default_synthesizer() is default_synthesizer()
    assert mirror_of("shapes:Vec") is mirror_of("shapes:Vec")


def test_unknown_identity(synthesizer):
    with pytest.raises(TypeNotFound):
        synthesizer.mirror_of("shapes:DoesNotExist")


@pytest.mark.parametrize("make", [
    lambda u: u.records["Point"](3, 4.5),
    lambda u: u.records["Segment"](u.records["Point"](0, 0.0), u.records["Point"](1, 1.0)),
    lambda u: u.records["Label"]("origin", u.records["Point"](0, 0.0), True, None),
])
def test_native_round_trip(unit, make):
    value = make(unit)
    meta = unit.mirrors[type(value).__qualname__]
    assert meta.construct(meta.components(value)) == value


@pytest.mark.parametrize("value", [
    shapes.Point(3, 4),
    shapes.Line(shapes.Point(0, 0), shapes.Point(-1, 7)),
    shapes.Vec(0.5, 2.0),
    shapes.Pair("left", ["right"]),
    shapes.Polar.of(1.0, 3.14),
])
def test_foreign_round_trip(synthesizer, value):
    meta = synthesizer.mirror_of(type(value))
    assert meta.construct(meta.components(value)) == value


def test_synthesizers_do_not_share_caches():
    first, second = MirrorSynthesizer(), MirrorSynthesizer()
    assert first.foreign("shapes:Point") == second.foreign("shapes:Point")
    assert first.foreign("shapes:Point") is not second.foreign("shapes:Point")

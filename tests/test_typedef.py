"""Tests for record field tables."""

import dataclasses
from dataclasses import dataclass
from typing import Any, List, Optional

import pytest

from zpl_core.errors import InvalidTargetError
from zpl_core.model import (
    DYNAMIC,
    ListShape,
    MapShape,
    OptionalShape,
    RecordShape,
    UnsupportedShape,
)
from zpl_core.typedef import (
    register_typedef,
    resolve_typedef,
    shape_of,
    zpl_field,
)
from zpl_core.values import SCALAR_SHAPES, Float32


@dataclass
class Endpoint:
    address: str = zpl_field("addr", default="")
    port: int = zpl_field("port", default=0)
    note: str = ""


@dataclass
class Registry:
    endpoints: dict[str, Endpoint] = zpl_field("*", default_factory=dict)
    version: Float32 | None = zpl_field("version", default=None)
    tags: list[str] = zpl_field("tag", default_factory=list)


@dataclass
class TwoSquash:
    a: dict[str, str] = zpl_field("*", default_factory=dict)
    b: dict[str, str] = zpl_field("*", default_factory=dict)


@dataclass
class ScalarSquash:
    a: str = zpl_field("*", default="")


# ---------------------------------------------------------------------------
# zpl_field
# ---------------------------------------------------------------------------

def test_zpl_field_sets_metadata():
    f = dataclasses.fields(Endpoint)[0]
    assert f.metadata["zpl"] == "addr"

def test_zpl_field_keeps_other_metadata():
    f = zpl_field("x", default=1, metadata={"doc": "hello"})
    assert f.metadata["zpl"] == "x"
    assert f.metadata["doc"] == "hello"


# ---------------------------------------------------------------------------
# shape_of
# ---------------------------------------------------------------------------

def test_shape_scalars():
    assert shape_of(int) == SCALAR_SHAPES[int]
    assert shape_of(Float32) == SCALAR_SHAPES[Float32]

def test_shape_optional():
    assert shape_of(int | None) == OptionalShape(SCALAR_SHAPES[int])
    assert shape_of(Optional[List[str]]) == OptionalShape(ListShape(SCALAR_SHAPES[str]))

def test_shape_list():
    assert shape_of(list[int]) == ListShape(SCALAR_SHAPES[int])
    assert shape_of(list) == ListShape(SCALAR_SHAPES[str])

def test_shape_maps():
    assert shape_of(dict[str, Endpoint]) == MapShape(RecordShape(Endpoint))
    assert shape_of(dict[str, bool]) == MapShape(SCALAR_SHAPES[bool])
    assert shape_of(dict[str, Any]) == MapShape(DYNAMIC)
    assert shape_of(dict) == MapShape(DYNAMIC)

def test_shape_dynamic():
    assert shape_of(Any) is DYNAMIC

@pytest.mark.parametrize("tp", [dict[int, str], set[str], list[Endpoint], int | str, bytes])
def test_shape_unsupported(tp):
    assert isinstance(shape_of(tp), UnsupportedShape)


# ---------------------------------------------------------------------------
# TypeDef
# ---------------------------------------------------------------------------

def test_typedef_members_in_declaration_order():
    td = resolve_typedef(Endpoint)
    assert [m.name for m in td.members] == ["addr", "port"]
    assert [m.attr for m in td.members] == ["address", "port"]
    assert td.name == "Endpoint"

def test_typedef_member_lookup():
    td = resolve_typedef(Endpoint)
    assert td.member("addr").attr == "address"
    assert td.member("address") is None
    assert td.member("note") is None

def test_typedef_squash():
    td = resolve_typedef(Registry)
    assert td.squash is not None
    assert td.squash.attr == "endpoints"
    assert td.squash.squash
    assert td.member("*") is None
    assert [m.name for m in td.members] == ["*", "version", "tag"]

def test_typedef_is_cached():
    assert resolve_typedef(Registry) is resolve_typedef(Registry)

def test_register_typedef_decorator():
    @register_typedef
    @dataclass
    class Local:
        x: int = zpl_field("x", default=0)

    td = resolve_typedef(Local)
    assert td.cls is Local
    assert td.member("x").shape == SCALAR_SHAPES[int]

def test_two_squash_fields_rejected():
    with pytest.raises(InvalidTargetError, match="more than one squash"):
        resolve_typedef(TwoSquash)

def test_scalar_squash_rejected():
    with pytest.raises(InvalidTargetError, match="squash"):
        resolve_typedef(ScalarSquash)

def test_non_dataclass_rejected():
    with pytest.raises(InvalidTargetError):
        resolve_typedef(int)

def test_string_annotations_resolve_per_field():
    @dataclass
    class Local:
        port: "int" = zpl_field("port", default=0)
        scratch: "LocalOnly" = None  # noqa: F821

    td = resolve_typedef(Local)
    assert td.member("port").shape == SCALAR_SHAPES[int]

def test_unresolvable_annotation_rejected():
    @dataclass
    class Inner:
        port: int = zpl_field("port", default=0)

    @dataclass
    class Outer:
        inner: "Inner | None" = zpl_field("inner", default=None)

    with pytest.raises(InvalidTargetError, match="cannot resolve annotation") as exc:
        resolve_typedef(Outer)
    assert "Outer" in str(exc.value)

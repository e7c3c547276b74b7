"""TypeDef and MemberDef: per-record field tables used by the builder and encoder.

A record is a dataclass whose fields opt in to ZPL by declaring a name::

    @dataclass
    class Endpoint:
        address: str = zpl_field("addr", default="")
        port: int = zpl_field("port", default=0)

Fields without a declared name are invisible to ZPL.  The name ``*`` marks
the squash field: a ``dict[str, ...]`` that receives every section whose
name matches no other field, directly under the record.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import types
from dataclasses import dataclass, field
from typing import Any, Union, get_args, get_origin, get_type_hints

from .errors import InvalidTargetError
from .model import (
    DYNAMIC,
    ListShape,
    MapShape,
    OptionalShape,
    RecordShape,
    ScalarShape,
    Shape,
    UnsupportedShape,
    unwrap,
)
from .values import SCALAR_SHAPES


ZPL_KEY = "zpl"
SQUASH = "*"

_LIST_ORIGINS = (list, collections.abc.Sequence, collections.abc.MutableSequence)
_MAP_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def zpl_field(name: str, **kwargs: Any) -> Any:
    """``dataclasses.field`` that binds the field to the ZPL key *name*."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[ZPL_KEY] = name
    return field(metadata=metadata, **kwargs)


# ---------------------------------------------------------------------------
# Annotation -> Shape
# ---------------------------------------------------------------------------

def _label(tp: object) -> str:
    return getattr(tp, "__name__", None) or repr(tp)


def shape_of(tp: object) -> Shape:
    """Translate a type annotation into the Shape the builder works with."""
    if tp is Any or tp is object:
        return DYNAMIC
    try:
        scalar = SCALAR_SHAPES.get(tp)
    except TypeError:
        scalar = None
    if scalar is not None:
        return scalar

    origin, args = get_origin(tp), get_args(tp)

    if origin is Union or origin is types.UnionType:
        rest = [a for a in args if a is not type(None)]
        if len(rest) == 1 and len(rest) < len(args):
            return OptionalShape(shape_of(rest[0]))
        return UnsupportedShape(repr(tp))

    if tp is list or origin in _LIST_ORIGINS:
        item = shape_of(args[0]) if args else SCALAR_SHAPES[str]
        if isinstance(item, ScalarShape):
            return ListShape(item)
        return UnsupportedShape(repr(tp))

    if tp is dict or origin in _MAP_ORIGINS:
        if not args:
            return MapShape(DYNAMIC)
        key, value = args
        if key is not str:
            return UnsupportedShape(repr(tp))
        return MapShape(shape_of(value))

    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        return RecordShape(tp)

    return UnsupportedShape(_label(tp))


# ---------------------------------------------------------------------------
# MemberDef / TypeDef
# ---------------------------------------------------------------------------

@dataclass
class MemberDef:
    attr: str   # Python attribute name
    name: str   # ZPL key, or "*" for the squash field
    shape: Shape

    @property
    def squash(self) -> bool:
        return self.name == SQUASH


@dataclass
class TypeDef:
    cls: type
    members: list[MemberDef]  # declaration order, squash field included
    squash: MemberDef | None = None
    _by_name: dict[str, MemberDef] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._by_name = {}
        for m in self.members:
            if not m.squash:
                self._by_name.setdefault(m.name, m)

    @property
    def name(self) -> str:
        return self.cls.__name__

    def member(self, name: str) -> MemberDef | None:
        return self._by_name.get(name)


def _field_types(cls: type) -> dict[str, Any]:
    """Resolved annotations of *cls*, falling back to the raw field types.

    Names that only exist in a local scope cannot be resolved.  Untagged
    fields with such annotations are ignored; tagged ones make the record
    unusable.
    """
    try:
        return get_type_hints(cls)
    except NameError:
        pass
    hints: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if not isinstance(f.type, str):
            hints[f.name] = f.type
            continue
        # resolve one annotation at a time against the defining module
        single = type(cls.__name__, (), {
            "__module__": cls.__module__,
            "__annotations__": {f.name: f.type},
        })
        try:
            hints[f.name] = get_type_hints(single)[f.name]
        except NameError as exc:
            if f.metadata.get(ZPL_KEY):
                raise InvalidTargetError(
                    cls.__name__,
                    f"cannot resolve annotation {f.type!r} of field {f.name!r}",
                ) from exc
    return hints


def _build_typedef(cls: type) -> TypeDef:
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise InvalidTargetError(_label(cls), "records must be dataclasses")
    hints = _field_types(cls)
    members: list[MemberDef] = []
    squash: MemberDef | None = None
    for f in dataclasses.fields(cls):
        name = f.metadata.get(ZPL_KEY)
        if not name:
            continue
        member = MemberDef(f.name, name, shape_of(hints.get(f.name, f.type)))
        if member.squash:
            if squash is not None:
                raise InvalidTargetError(cls.__name__, "more than one squash field")
            if not isinstance(unwrap(member.shape), MapShape):
                raise InvalidTargetError(
                    cls.__name__, f"squash field {f.name!r} must be a str-keyed dict"
                )
            squash = member
        members.append(member)
    return TypeDef(cls, members, squash)


_TYPEDEFS: dict[type, TypeDef] = {}


def register_typedef(cls: type) -> type:
    """Build and cache the field table for *cls*; usable as a class decorator."""
    _TYPEDEFS[cls] = _build_typedef(cls)
    return cls


def resolve_typedef(cls: type) -> TypeDef:
    """Return the cached field table for *cls*, building it on first use."""
    td = _TYPEDEFS.get(cls)
    if td is None:
        td = _TYPEDEFS[cls] = _build_typedef(cls)
    return td

"""Tree builder: projects parse events onto a decode target.

Every target is wrapped in a *sink* exposing two operations:

- ``resolve_child(name)`` returns the sink for a nested section, allocating
  whatever container the slot needs;
- ``set_leaf(name, value)`` stores one property value, coerced to the
  slot's declared type.

:class:`TreeBuilder` keeps one sink per open section and is written only
against those two operations.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, MutableMapping
from functools import partial
from typing import Any, Callable, Protocol

from .document import Section
from .errors import (
    InvalidTargetError,
    TypeConflictError,
    UnknownFieldError,
    ZplError,
    ZplTypeError,
)
from .events import EnterSection, Event, ExitSection, LeafValue
from .model import (
    DYNAMIC,
    DynamicShape,
    ListShape,
    MapShape,
    RecordShape,
    ScalarShape,
    Shape,
    UnsupportedShape,
    accepts_leaves,
    unwrap,
)
from .typedef import resolve_typedef, shape_of
from .values import coerce


Store = Callable[[Any], None]


class Sink(Protocol):
    def resolve_child(self, name: str) -> Sink: ...

    def set_leaf(self, name: str, value: str) -> None: ...


# ---------------------------------------------------------------------------
# Slot rules shared by mappings and records
# ---------------------------------------------------------------------------

def _coerce(raw: str, shape: ScalarShape, name: str) -> object:
    try:
        return coerce(raw, shape)
    except ValueError:
        raise ZplTypeError(name, shape.describe(), raw) from None


def _allocate(shape: RecordShape, name: str) -> object:
    try:
        return shape.allocate()
    except TypeError:
        raise ZplTypeError(name, f"{shape.describe()} (needs constructor arguments)") from None


def _enter(shape: Shape, current: Any, store: Store, name: str) -> Sink:
    """Resolve a section named *name* into a slot currently holding *current*."""
    shape = unwrap(shape)

    if isinstance(shape, (DynamicShape, MapShape)):
        if current is None:
            current = {}
            store(current)
        elif not isinstance(current, MutableMapping):
            raise TypeConflictError(name, type(current).__name__)
        if isinstance(shape, MapShape):
            return MappingSink(current, shape.value)
        return MappingSink(current)

    if isinstance(shape, RecordShape):
        if current is None:
            current = _allocate(shape, name)
            store(current)
        return RecordSink(current)

    raise ZplTypeError(name, shape.describe())


def _assign(shape: Shape, current: Any, store: Store, name: str, value: str) -> None:
    """Store one property value into a slot currently holding *current*."""
    shape = unwrap(shape)

    if isinstance(shape, ScalarShape):
        # last write wins
        store(_coerce(value, shape, name))
    elif isinstance(shape, ListShape):
        item = _coerce(value, shape.item, name)
        if current is None:
            store([item])
        elif isinstance(current, list):
            current.append(item)
        else:
            store([*current, item])
    elif isinstance(shape, DynamicShape):
        if current is None:
            store([value])
        elif isinstance(current, list):
            current.append(value)
        elif isinstance(current, Mapping):
            raise ZplTypeError(name, "a property (already a section)", value)
        else:
            store([current, value])
    else:
        raise ZplTypeError(name, shape.describe(), value)


# ---------------------------------------------------------------------------
# Sinks
# ---------------------------------------------------------------------------

class MappingSink:
    """A str-keyed mapping whose entries all share one shape.

    With the default dynamic shape sections become nested dicts and values
    accumulate as lists of strings.
    """

    def __init__(self, mapping: MutableMapping[str, Any], shape: Shape = DYNAMIC) -> None:
        self.mapping = mapping
        self.shape = shape

    def resolve_child(self, name: str) -> Sink:
        store = partial(self.mapping.__setitem__, name)
        return _enter(self.shape, self.mapping.get(name), store, name)

    def set_leaf(self, name: str, value: str) -> None:
        store = partial(self.mapping.__setitem__, name)
        _assign(self.shape, self.mapping.get(name), store, name, value)


class RecordSink:
    """A dataclass instance, addressed through its TypeDef."""

    def __init__(self, record: Any) -> None:
        self.record = record
        self.typedef = resolve_typedef(type(record))

    def _squash(self) -> MappingSink:
        member = self.typedef.squash
        current = getattr(self.record, member.attr, None)
        if current is None:
            current = {}
            setattr(self.record, member.attr, current)
        return MappingSink(current, unwrap(member.shape).value)

    def resolve_child(self, name: str) -> Sink:
        member = self.typedef.member(name)
        if member is None:
            if self.typedef.squash is None:
                raise UnknownFieldError(name, self.typedef.name)
            return self._squash().resolve_child(name)
        store = partial(setattr, self.record, member.attr)
        return _enter(member.shape, getattr(self.record, member.attr, None), store, name)

    def set_leaf(self, name: str, value: str) -> None:
        member = self.typedef.member(name)
        if member is None:
            squash = self.typedef.squash
            if squash is None or not accepts_leaves(unwrap(squash.shape).value):
                raise UnknownFieldError(name, self.typedef.name)
            self._squash().set_leaf(name, value)
            return
        store = partial(setattr, self.record, member.attr)
        _assign(member.shape, getattr(self.record, member.attr, None), store, name, value)


class SectionSink:
    def __init__(self, section: Section) -> None:
        self.section = section

    def resolve_child(self, name: str) -> Sink:
        return SectionSink(self.section.section(name))

    def set_leaf(self, name: str, value: str) -> None:
        self.section.add_value(name, value)


def sink_for(target: Any, value_type: Any = None) -> Sink:
    """Wrap a decode target in the matching sink.

    *value_type* declares the entry type when *target* is a mapping; without
    it the mapping is filled dynamically.  Raises
    :class:`InvalidTargetError` for anything that cannot be decoded into.
    """
    if target is None:
        raise InvalidTargetError("None")
    if isinstance(target, Section):
        return SectionSink(target)
    if isinstance(target, MutableMapping):
        for key in target:
            if not isinstance(key, str):
                raise InvalidTargetError(
                    f"dict with {type(key).__name__} keys", "keys must be str"
                )
        shape = DYNAMIC if value_type is None else shape_of(value_type)
        if isinstance(shape, UnsupportedShape):
            raise InvalidTargetError(f"dict of {shape.describe()}", "unsupported entry type")
        return MappingSink(target, shape)
    if isinstance(target, type):
        raise InvalidTargetError(f"class {target.__name__}", "expected an instance")
    if dataclasses.is_dataclass(target):
        return RecordSink(target)
    raise InvalidTargetError(type(target).__name__)


# ---------------------------------------------------------------------------
# TreeBuilder
# ---------------------------------------------------------------------------

class TreeBuilder:
    """Consumes events one at a time, keeping a stack of open sections."""

    def __init__(self, target: Any, *, value_type: Any = None) -> None:
        self.stack: list[Sink] = [sink_for(target, value_type)]

    @property
    def depth(self) -> int:
        return len(self.stack) - 1

    def consume(self, event: Event) -> None:
        try:
            if isinstance(event, LeafValue):
                self.stack[-1].set_leaf(event.name, event.value)
            elif isinstance(event, EnterSection):
                self.stack.append(self.stack[-1].resolve_child(event.name))
            elif isinstance(event, ExitSection):
                if len(self.stack) == 1:
                    raise ZplError("end of section without an open section")
                self.stack.pop()
            else:
                raise ZplError(f"unsupported event {event!r}")
        except ZplError as exc:
            if exc.line is None and getattr(event, "line", 0):
                exc.line = event.line
            raise

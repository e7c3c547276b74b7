"""Shapes: what a declared field type can hold once decoded."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Union


# ---------------------------------------------------------------------------
# PrimitiveKind
# ---------------------------------------------------------------------------

class PrimitiveKind(Enum):
    Bool = auto()
    Int = auto()
    Float = auto()
    Text = auto()


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ScalarShape:
    kind: PrimitiveKind
    bits: int | None = None  # None: unbounded int / native float
    signed: bool = True
    label: str = ""

    def describe(self) -> str:
        return self.label or self.kind.name.lower()


@dataclass(frozen=True, slots=True)
class ListShape:
    item: ScalarShape

    def describe(self) -> str:
        return f"list[{self.item.describe()}]"


@dataclass(frozen=True, slots=True)
class MapShape:
    """String-keyed dict; *value* is the shape of every entry."""
    value: Shape

    def describe(self) -> str:
        return f"dict[str, {self.value.describe()}]"


@dataclass(frozen=True, slots=True)
class RecordShape:
    cls: type

    def describe(self) -> str:
        return self.cls.__name__

    def allocate(self) -> object:
        return self.cls()


@dataclass(frozen=True, slots=True)
class OptionalShape:
    inner: Shape

    def describe(self) -> str:
        return f"{self.inner.describe()} | None"


@dataclass(frozen=True, slots=True)
class DynamicShape:
    """Untyped slot: sections become dicts, leaves accumulate as lists of str."""

    def describe(self) -> str:
        return "Any"


@dataclass(frozen=True, slots=True)
class UnsupportedShape:
    """A declared type the codec cannot fill; decoding into it is a type error."""
    label: str

    def describe(self) -> str:
        return self.label


Shape = Union[
    ScalarShape,
    ListShape,
    MapShape,
    RecordShape,
    OptionalShape,
    DynamicShape,
    UnsupportedShape,
]

DYNAMIC = DynamicShape()


def unwrap(shape: Shape) -> Shape:
    """Strip Optional layers; ``None`` is treated as an unset slot anyway."""
    while isinstance(shape, OptionalShape):
        shape = shape.inner
    return shape


def accepts_leaves(shape: Shape) -> bool:
    return isinstance(unwrap(shape), (ScalarShape, ListShape, DynamicShape))

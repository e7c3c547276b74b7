"""Scalar value types: width markers, coercion from ZPL text and rendering back."""

from __future__ import annotations

import math
import re
from typing import NewType

from .model import PrimitiveKind, ScalarShape


Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)
UInt8 = NewType("UInt8", int)
UInt16 = NewType("UInt16", int)
UInt32 = NewType("UInt32", int)
UInt64 = NewType("UInt64", int)
Float32 = NewType("Float32", float)
Float64 = NewType("Float64", float)

SCALAR_SHAPES: dict[object, ScalarShape] = {
    bool: ScalarShape(PrimitiveKind.Bool, label="bool"),
    int: ScalarShape(PrimitiveKind.Int, label="int"),
    float: ScalarShape(PrimitiveKind.Float, label="float"),
    str: ScalarShape(PrimitiveKind.Text, label="str"),
    Int8: ScalarShape(PrimitiveKind.Int, 8, True, "Int8"),
    Int16: ScalarShape(PrimitiveKind.Int, 16, True, "Int16"),
    Int32: ScalarShape(PrimitiveKind.Int, 32, True, "Int32"),
    Int64: ScalarShape(PrimitiveKind.Int, 64, True, "Int64"),
    UInt8: ScalarShape(PrimitiveKind.Int, 8, False, "UInt8"),
    UInt16: ScalarShape(PrimitiveKind.Int, 16, False, "UInt16"),
    UInt32: ScalarShape(PrimitiveKind.Int, 32, False, "UInt32"),
    UInt64: ScalarShape(PrimitiveKind.Int, 64, False, "UInt64"),
    Float32: ScalarShape(PrimitiveKind.Float, 32, label="Float32"),
    Float64: ScalarShape(PrimitiveKind.Float, 64, label="Float64"),
}

_BOOLS = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}

_INT_RE = re.compile(r"^[+-]?[0-9]+$")
_FLOAT_RE = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")
_FLOAT_WORDS = {"inf", "infinity", "nan"}
_FLOAT32_MAX = 3.4028234663852886e38


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------

def _parse_int(raw: str, shape: ScalarShape) -> int:
    if not _INT_RE.match(raw):
        raise ValueError(f"invalid integer {raw!r}")
    n = int(raw)
    if shape.bits is None:
        return n
    if shape.signed:
        lo, hi = -(1 << (shape.bits - 1)), (1 << (shape.bits - 1)) - 1
    else:
        lo, hi = 0, (1 << shape.bits) - 1
    if not lo <= n <= hi:
        raise ValueError(f"{raw} out of range for {shape.describe()}")
    return n


def _parse_float(raw: str, shape: ScalarShape) -> float:
    word = raw.lstrip("+-").lower()
    if word in _FLOAT_WORDS:
        return float(raw)
    if not _FLOAT_RE.match(raw):
        raise ValueError(f"invalid float {raw!r}")
    x = float(raw)
    limit = _FLOAT32_MAX if shape.bits == 32 else math.inf
    if math.isinf(x) or abs(x) > limit:
        raise ValueError(f"{raw} out of range for {shape.describe()}")
    return x


def coerce(raw: str, shape: ScalarShape) -> object:
    """Convert the text of a ZPL value to the Python value *shape* declares.

    Raises ``ValueError`` when *raw* is not valid for the kind or does not
    fit the declared width.
    """
    if shape.kind is PrimitiveKind.Text:
        return raw
    if shape.kind is PrimitiveKind.Bool:
        try:
            return _BOOLS[raw]
        except KeyError:
            raise ValueError(f"invalid boolean {raw!r}") from None
    if shape.kind is PrimitiveKind.Int:
        return _parse_int(raw, shape)
    return _parse_float(raw, shape)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _render_text(value: str) -> str:
    # a bare value loses edge whitespace and ends at "#"; quotes keep both
    bare = bool(value) and value == value.strip() and "#" not in value
    if bare or '"' in value:
        return value
    return f'"{value}"'


def render(value: object) -> str | None:
    """Format a scalar for output; ``None`` when *value* is not a scalar."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        return _render_text(value)
    return None

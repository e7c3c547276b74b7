"""Section: a generic, untyped ZPL document tree."""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import NotFoundError, ZplTypeError
from .model import ScalarShape
from .values import SCALAR_SHAPES, Float32, Int32, coerce


@dataclass
class Section:
    """One node of a ZPL document.

    ``properties`` maps each key to its values in document order;
    ``sections`` maps each child section name to its node.  Decoding into
    a Section that already has content merges into it, so several
    documents can be layered onto one tree.
    """

    properties: dict[str, list[str]] = field(default_factory=dict)
    sections: dict[str, Section] = field(default_factory=dict)

    # -- Building -------------------------------------------------------

    def add_value(self, name: str, value: str) -> None:
        self.properties.setdefault(name, []).append(value)

    def section(self, name: str) -> Section:
        """Return the child section *name*, creating it if needed."""
        child = self.sections.get(name)
        if child is None:
            child = self.sections[name] = Section()
        return child

    # -- Typed accessors ------------------------------------------------

    def _single(self, name: str) -> str:
        values = self.properties.get(name)
        if not values:
            raise NotFoundError(name)
        if len(values) != 1:
            raise ZplTypeError(name, f"a single value (found {len(values)})", values[-1])
        return values[0]

    def _get(self, name: str, shape: ScalarShape):
        raw = self._single(name)
        try:
            return coerce(raw, shape)
        except ValueError:
            raise ZplTypeError(name, shape.describe(), raw) from None

    def get_bool(self, name: str) -> bool:
        return self._get(name, SCALAR_SHAPES[bool])

    def get_int(self, name: str) -> int:
        """Single value of *name* as a 32-bit signed integer."""
        return self._get(name, SCALAR_SHAPES[Int32])

    def get_float(self, name: str) -> float:
        """Single value of *name*, range-checked as a 32-bit float."""
        return self._get(name, SCALAR_SHAPES[Float32])

    def get_string(self, name: str) -> str:
        return self._single(name)

    def get_values(self, name: str) -> list[str]:
        """All values of *name*, in document order."""
        if name not in self.properties:
            raise NotFoundError(name)
        return list(self.properties[name])

"""Encoding entry points: records, mappings and Sections back to ZPL text."""

from __future__ import annotations

import dataclasses
import io
from collections.abc import Mapping
from typing import Any, BinaryIO

from structlog import get_logger

from .document import Section
from .errors import InvalidTargetError
from .reader import DEFAULT_ENCODING, INDENT, is_key
from .typedef import SQUASH, resolve_typedef
from .values import render

logger = get_logger()


def _items(value: Any) -> list[tuple[str, Any]] | None:
    """Named children of a container, or ``None`` if *value* is not one."""
    if isinstance(value, Section):
        return [*value.properties.items(), *value.sections.items()]
    if isinstance(value, Mapping):
        return [(k, v) for k, v in value.items() if isinstance(k, str)]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        td = resolve_typedef(type(value))
        return [(m.name, getattr(value, m.attr, None)) for m in td.members]
    return None


class Encoder:
    """Writes ZPL to a binary stream.

    Mappings are written in iteration order, records in field declaration
    order.  Names that are not valid ZPL keys are skipped.  Strings with
    edge whitespace or ``#`` are quoted; one holding both a quote and such
    text, or a line break, will not read back unchanged.
    """

    def __init__(self, stream: BinaryIO, *, encoding: str = DEFAULT_ENCODING) -> None:
        self.stream = stream
        self.encoding = encoding
        self.log = logger.new()
        self._path: set[int] = set()
        self._lines = 0

    def encode(self, value: Any) -> None:
        if value is None:
            return
        items = _items(value)
        if items is None:
            raise InvalidTargetError(type(value).__name__, "expected a mapping or a record")
        self.log.debug("encode start", value=type(value).__name__)
        self._lines = 0
        self._path = {id(value)}
        self._write_items(items, 0)
        self.log.debug("encode done", lines=self._lines)

    def _write(self, depth: int, text: str) -> None:
        self.stream.write(f"{INDENT * depth}{text}\n".encode(self.encoding))
        self._lines += 1

    def _write_items(self, items: list[tuple[str, Any]], depth: int) -> None:
        for name, value in items:
            self._write_property(name, value, depth)

    def _write_property(self, name: str, value: Any, depth: int) -> None:
        if value is None:
            return
        text = render(value)
        if text is not None:
            if is_key(name):
                self._write(depth, f"{name} = {text}")
            return
        if name != SQUASH and not is_key(name):
            return  # the name cannot be read back

        is_seq = isinstance(value, (list, tuple))
        items = None if is_seq else _items(value)
        if not is_seq and items is None:
            return  # not representable in ZPL
        if id(value) in self._path:
            return  # cycle
        self._path.add(id(value))
        try:
            if is_seq:
                for item in value:
                    self._write_property(name, item, depth)
            elif name == SQUASH:
                self._write_items(items, depth)
            else:
                self._write(depth, name)
                self._write_items(items, depth + 1)
        finally:
            self._path.discard(id(value))


def encode(value: Any, *, encoding: str = DEFAULT_ENCODING) -> bytes:
    """Return the ZPL encoding of *value*."""
    buf = io.BytesIO()
    Encoder(buf, encoding=encoding).encode(value)
    return buf.getvalue()

"""Decoding entry points."""

from __future__ import annotations

from typing import Any, Iterator

from structlog import get_logger

from .builder import TreeBuilder
from .errors import ZplError
from .events import Event, iter_events
from .reader import DEFAULT_CHUNK_SIZE, DEFAULT_ENCODING, Source

logger = get_logger()


class Decoder:
    """Reads ZPL from a byte source and applies it to decode targets.

    *stream* may be ``bytes``, ``str`` or a binary file object; file objects
    are read lazily in *chunk_size* pieces.  A stream can be consumed once.
    """

    def __init__(
        self,
        stream: Source,
        *,
        encoding: str = DEFAULT_ENCODING,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.stream = stream
        self.encoding = encoding
        self.chunk_size = chunk_size
        self.log = logger.new()

    def events(self) -> Iterator[Event]:
        return iter_events(self.stream, chunk_size=self.chunk_size, encoding=self.encoding)

    def decode(self, target: Any, *, value_type: Any = None) -> Any:
        """Populate *target* in place and return it.

        *target* is a str-keyed mapping, a dataclass instance or a
        :class:`~zpl_core.Section`.  Stops at the first error; whatever was
        decoded before it stays in *target*.
        """
        self.log.debug("decode start", target=type(target).__name__)
        count = 0
        try:
            builder = TreeBuilder(target, value_type=value_type)
            for event in self.events():
                builder.consume(event)
                count += 1
        except ZplError as exc:
            self.log.debug("decode failed", error=exc.message, line=exc.line, events=count)
            raise
        self.log.debug("decode done", events=count)
        return target


def decode(
    source: Source,
    target: Any,
    *,
    value_type: Any = None,
    encoding: str = DEFAULT_ENCODING,
) -> Any:
    """Decode the ZPL document in *source* into *target* and return *target*."""
    return Decoder(source, encoding=encoding).decode(target, value_type=value_type)

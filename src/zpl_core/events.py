"""Parse events and the indentation state machine that produces them."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterator, Union

from .reader import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_ENCODING,
    MatchedLine,
    Source,
    match_line,
    scan_lines,
)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class EnterSection:
    name: str
    line: int = 0


@dataclass(frozen=True, slots=True)
class LeafValue:
    name: str
    value: str
    line: int = 0


@dataclass(frozen=True, slots=True)
class ExitSection:
    line: int = 0


Event = Union[EnterSection, LeafValue, ExitSection]


# ---------------------------------------------------------------------------
# Sequencer
# ---------------------------------------------------------------------------

class EventSequencer:
    """Turns matched lines into a depth-first stream of events.

    Only indentation is tracked here.  A line indented more than one level
    below its parent is accepted and treated as a direct child.
    """

    def __init__(self) -> None:
        self.depth = 0
        self._queue: deque[Event] = deque()

    def feed(self, matched: MatchedLine) -> None:
        while matched.depth < self.depth:
            self._queue.append(ExitSection(matched.line))
            self.depth -= 1
        if matched.value is not None:
            self._queue.append(LeafValue(matched.key, matched.value, matched.line))
        else:
            self._queue.append(EnterSection(matched.key, matched.line))
            self.depth += 1

    def finish(self, line: int = 0) -> None:
        """Close every section that is still open at end of input."""
        while self.depth > 0:
            self._queue.append(ExitSection(line))
            self.depth -= 1

    def drain(self) -> Iterator[Event]:
        while self._queue:
            yield self._queue.popleft()


def iter_events(
    source: Source,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    encoding: str = DEFAULT_ENCODING,
) -> Iterator[Event]:
    """Lazily parse *source* into events, one line at a time."""
    seq = EventSequencer()
    last = 0
    for line_no, text in scan_lines(source, chunk_size=chunk_size, encoding=encoding):
        last = line_no
        seq.feed(match_line(text, line_no))
        yield from seq.drain()
    seq.finish(last)
    yield from seq.drain()

"""Tests for the event sequencer."""

import pytest

from zpl_core.errors import ZplSyntaxError
from zpl_core.events import (
    EnterSection,
    EventSequencer,
    ExitSection,
    LeafValue,
    iter_events,
)
from zpl_core.reader import MatchedLine


def events(data):
    return list(iter_events(data))


# ---------------------------------------------------------------------------
# iter_events
# ---------------------------------------------------------------------------

def test_leaf_then_section():
    assert events(b"a = 1\nsec\n    b = 2\n") == [
        LeafValue("a", "1", 1),
        EnterSection("sec", 2),
        LeafValue("b", "2", 3),
        ExitSection(3),
    ]

def test_two_levels_closed_by_one_line():
    data = b"a\n    b\n        c = 1\nd = 2\n"
    assert events(data) == [
        EnterSection("a", 1),
        EnterSection("b", 2),
        LeafValue("c", "1", 3),
        ExitSection(4),
        ExitSection(4),
        LeafValue("d", "2", 4),
    ]

def test_deeper_jump_counts_as_one_level():
    data = b"a\n        b = 1\nc = 2\n"
    assert events(data) == [
        EnterSection("a", 1),
        LeafValue("b", "1", 2),
        ExitSection(3),
        LeafValue("c", "2", 3),
    ]

def test_open_sections_closed_at_end_of_input():
    assert events(b"a\n    b\n") == [
        EnterSection("a", 1),
        EnterSection("b", 2),
        ExitSection(2),
        ExitSection(2),
    ]

def test_comments_only_yield_nothing():
    assert events(b"# nothing here\n\n    # still nothing\n") == []

def test_events_are_lazy():
    it = iter_events(b"a = 1\nbad line here\n")
    assert next(it) == LeafValue("a", "1", 1)
    with pytest.raises(ZplSyntaxError) as exc:
        next(it)
    assert exc.value.line == 2

def test_repeated_keys_keep_order():
    values = [e.value for e in events(b"a = 1\na = 2\na = 3\n")]
    assert values == ["1", "2", "3"]


# ---------------------------------------------------------------------------
# EventSequencer
# ---------------------------------------------------------------------------

def test_sequencer_tracks_depth():
    seq = EventSequencer()
    seq.feed(MatchedLine(0, "a", None, 1))
    seq.feed(MatchedLine(1, "b", None, 2))
    assert seq.depth == 2
    assert list(seq.drain()) == [EnterSection("a", 1), EnterSection("b", 2)]
    seq.feed(MatchedLine(0, "c", "x", 3))
    assert seq.depth == 0
    assert list(seq.drain()) == [ExitSection(3), ExitSection(3), LeafValue("c", "x", 3)]

def test_sequencer_finish():
    seq = EventSequencer()
    seq.feed(MatchedLine(0, "a", None, 1))
    list(seq.drain())
    seq.finish(5)
    assert list(seq.drain()) == [ExitSection(5)]
    assert seq.depth == 0

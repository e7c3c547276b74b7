"""Reader layer: splits raw ZPL bytes into logical lines and classifies them."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Union

from .errors import ZplSyntaxError


INDENT = "    "
DEFAULT_CHUNK_SIZE = 4096
DEFAULT_ENCODING = "utf-8"

Source = Union[bytes, bytearray, memoryview, str, BinaryIO]

_EOL_RE = re.compile(rb"\r\n|\n\r|\r|\n")

_KEY = r"[A-Za-z0-9][A-Za-z0-9/]*"
_QUOTED_RE = re.compile(r'^(?P<key>' + _KEY + r')\s*=\s*"(?P<value>[^"]*)"\s*(?:#.*)?$')
_BARE_RE = re.compile(r"^(?P<key>" + _KEY + r")\s*=\s*(?P<value>[^\s\"#][^#]*)(?:#.*)?$")
_SECTION_RE = re.compile(r"^(?P<key>" + _KEY + r")\s*(?:#.*)?$")
_KEY_RE = re.compile(_KEY)


# ---------------------------------------------------------------------------
# Line scanner
# ---------------------------------------------------------------------------

def _read_chunks(source: Source, chunk_size: int, encoding: str) -> Iterator[bytes]:
    if isinstance(source, str):
        yield source.encode(encoding)
        return
    if isinstance(source, (bytes, bytearray, memoryview)):
        yield bytes(source)
        return
    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            return
        yield chunk


def _split_physical(
    source: Source, chunk_size: int, encoding: str
) -> Iterator[bytes]:
    """Yield physical lines without their terminators.

    Each chunk is scanned once.  Pieces of a line that spans several chunks
    are collected and joined when its terminator arrives.
    """
    pending: list[bytes] = []
    carry = b""
    for chunk in _read_chunks(source, chunk_size, encoding):
        data = carry + chunk
        carry = b""
        start, end = 0, len(data)
        for m in _EOL_RE.finditer(data):
            # A lone CR or LF at the end of the chunk may be the first half
            # of a CRLF / LFCR pair split across reads.
            if m.end() == len(data) and len(m.group()) == 1:
                carry = m.group()
                end = m.start()
                break
            pending.append(data[start:m.start()])
            yield b"".join(pending)
            pending = []
            start = m.end()
        pending.append(data[start:end])
    tail = b"".join(pending)
    if tail or carry:
        yield tail


def scan_lines(
    source: Source,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    encoding: str = DEFAULT_ENCODING,
) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, text)`` for every line that carries data.

    Blank lines and comment lines are skipped but still counted, so the
    1-based line numbers always refer to physical lines in *source*.
    """
    line_no = 0
    for raw in _split_physical(source, chunk_size, encoding):
        line_no += 1
        try:
            text = raw.decode(encoding)
        except UnicodeDecodeError as exc:
            raise ZplSyntaxError(f"invalid {encoding} data: {exc.reason}", line_no) from exc
        stripped = text.strip()
        if not stripped or stripped.startswith("#"):
            continue
        yield line_no, text


# ---------------------------------------------------------------------------
# Line matcher
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class MatchedLine:
    depth: int
    key: str
    value: str | None
    line: int

    @property
    def is_section(self) -> bool:
        return self.value is None


def _split_indent(text: str, line: int) -> tuple[int, str]:
    body = text.lstrip(" ")
    spaces = len(text) - len(body)
    if body[:1].isspace():
        raise ZplSyntaxError("indentation must use spaces only", line)
    if spaces % len(INDENT):
        raise ZplSyntaxError(
            f"indentation of {spaces} spaces is not a multiple of {len(INDENT)}", line
        )
    return spaces // len(INDENT), body


def match_line(text: str, line: int) -> MatchedLine:
    """Classify one data line as a key-value pair or a section header.

    Raises :class:`ZplSyntaxError` when the line fits neither shape.
    """
    depth, body = _split_indent(text.rstrip("\r\n"), line)

    m = _QUOTED_RE.match(body)
    if m:
        return MatchedLine(depth, m.group("key"), m.group("value"), line)

    m = _BARE_RE.match(body)
    if m:
        value = m.group("value").rstrip()
        return MatchedLine(depth, m.group("key"), value, line)

    m = _SECTION_RE.match(body)
    if m:
        return MatchedLine(depth, m.group("key"), None, line)

    raise ZplSyntaxError(f"invalid line: {body.strip()!r}", line)


def is_key(name: str) -> bool:
    """True if *name* can be written as a ZPL key or section name."""
    return _KEY_RE.fullmatch(name) is not None

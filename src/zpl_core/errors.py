"""Error types raised by zpl_core."""

from __future__ import annotations


class ZplError(Exception):
    """Base class for every error raised while decoding or encoding ZPL."""

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line is None:
            return f"zpl: {self.message}"
        return f"zpl: line {self.line}: {self.message}"


class ZplSyntaxError(ZplError):
    """A line matches none of the ZPL line shapes."""

    def __init__(self, message: str, line: int) -> None:
        super().__init__(message, line)


class InvalidTargetError(ZplError, TypeError):
    """The decode target (or encode root) is not a mapping or a record."""

    def __init__(self, target_type: str, reason: str | None = None) -> None:
        self.target_type = target_type
        message = f"cannot use {target_type} as a ZPL target"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnknownFieldError(ZplError):
    """A key matches no declared field and the record has no squash field."""

    def __init__(self, key: str, record: str, line: int | None = None) -> None:
        self.key = key
        self.record = record
        super().__init__(f"unknown key {key!r} for {record}", line)


class ZplTypeError(ZplError):
    """A value cannot be stored in the slot it resolved to."""

    def __init__(
        self,
        key: str,
        expected: str,
        value: str | None = None,
        line: int | None = None,
    ) -> None:
        self.key = key
        self.expected = expected
        self.value = value
        if value is None:
            message = f"section {key!r} cannot be stored as {expected}"
        else:
            message = f"cannot store {key} = {value!r} as {expected}"
        super().__init__(message, line)


class TypeConflictError(ZplTypeError):
    """A section name resolves to a dynamic slot that already holds a non-mapping."""

    def __init__(self, key: str, found: str, line: int | None = None) -> None:
        self.found = found
        super().__init__(key, "a section", line=line)
        self.message = f"section {key!r} conflicts with existing {found} value"


class NotFoundError(ZplError, KeyError):
    """A Section property lookup found no value."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"property {name!r} not found")

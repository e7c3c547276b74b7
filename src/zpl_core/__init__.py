"""ZPL Core: codec for the ZeroMQ Property Language (rfc.zeromq.org/spec:4)."""

from .builder import MappingSink, RecordSink, SectionSink, TreeBuilder, sink_for
from .decoder import Decoder, decode
from .document import Section
from .encoder import Encoder, encode
from .errors import (
    InvalidTargetError,
    NotFoundError,
    TypeConflictError,
    UnknownFieldError,
    ZplError,
    ZplSyntaxError,
    ZplTypeError,
)
from .events import EnterSection, Event, EventSequencer, ExitSection, LeafValue, iter_events
from .typedef import MemberDef, TypeDef, register_typedef, resolve_typedef, zpl_field
from .values import (
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)

__all__ = [
    "decode",
    "encode",
    "Decoder",
    "Encoder",
    "Section",
    "iter_events",
    "Event",
    "EnterSection",
    "LeafValue",
    "ExitSection",
    "EventSequencer",
    "TreeBuilder",
    "MappingSink",
    "RecordSink",
    "SectionSink",
    "sink_for",
    "zpl_field",
    "register_typedef",
    "resolve_typedef",
    "TypeDef",
    "MemberDef",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Float32",
    "Float64",
    "ZplError",
    "ZplSyntaxError",
    "InvalidTargetError",
    "UnknownFieldError",
    "ZplTypeError",
    "TypeConflictError",
    "NotFoundError",
]

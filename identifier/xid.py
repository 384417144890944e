"""
XID - globally unique, time-sortable 12-byte identifier.

Layout (big-endian):
    4 bytes  unix seconds
    3 bytes  machine discriminator
    2 bytes  process discriminator
    3 bytes  counter
"""

import struct
from datetime import datetime, timezone
from functools import total_ordering

from core.errors import MalformedInput
from identifier import codec

_HEAD = struct.Struct(">I3sH")


@total_ordering
class XID:
    __slots__ = ("_raw",)

    NIL = None

    def __init__(self, raw):
        raw = bytes(raw)
        if len(raw) != codec.RAW_LEN:
            raise MalformedInput(
                f"XID must be {codec.RAW_LEN} bytes, got {len(raw)}",
                value=raw.hex(),
                reason="length",
            )
        object.__setattr__(self, "_raw", raw)

    def __setattr__(self, name, value):
        raise AttributeError("XID is immutable")

    @classmethod
    def pack(cls, timestamp, machine, process, counter):
        """Build an XID from its four fields."""
        head = _HEAD.pack(timestamp & 0xFFFFFFFF, bytes(machine), process & 0xFFFF)
        return cls(head + (counter & 0xFFFFFF).to_bytes(3, "big"))

    @classmethod
    def from_bytes(cls, raw):
        return cls(raw)

    @classmethod
    def from_string(cls, text):
        return cls(codec.decode(text))

    @property
    def timestamp(self):
        """Unix seconds at generation time."""
        return _HEAD.unpack_from(self._raw)[0]

    def time(self):
        """Generation time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    @property
    def machine(self):
        return _HEAD.unpack_from(self._raw)[1]

    @property
    def pid(self):
        return _HEAD.unpack_from(self._raw)[2]

    @property
    def counter(self):
        return int.from_bytes(self._raw[9:], "big")

    def is_nil(self):
        return self._raw == bytes(codec.RAW_LEN)

    def to_dict(self):
        return {
            "id": str(self),
            "time": self.timestamp,
            "machine": self.machine.hex(),
            "process": self.pid,
            "counter": self.counter,
        }

    def __bytes__(self):
        return self._raw

    def __str__(self):
        return codec.encode(self._raw)

    def __repr__(self):
        return f"XID({str(self)!r})"

    def __eq__(self, other):
        if not isinstance(other, XID):
            return NotImplemented
        return self._raw == other._raw

    def __lt__(self, other):
        if not isinstance(other, XID):
            return NotImplemented
        return self._raw < other._raw

    def __hash__(self):
        return hash(self._raw)


XID.NIL = XID(bytes(codec.RAW_LEN))

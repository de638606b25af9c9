"""ArtDmx (Output) command body.

Layout after the Art-Net envelope::

    +---------+----------+----------+--------------+---------+----------------+
    | Version | Sequence | Physical | Port-Address | Length  |      Data      |
    | 2 B, BE | 1 byte   | 1 byte   | 2 B, LE      | 2 B, BE | 2-512 B (even) |
    +---------+----------+----------+--------------+---------+----------------+

- Sequence: 0x01-0xFF to let receivers reorder packets, 0x00 disables it
- Physical: input port the data came from, informational only
- Length: always computed from the padded data when serializing
- Data: DMX512 channel levels, padded with one zero byte if odd
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Optional

from .constants import ARTNET_PROTOCOL_VERSION, OpCode
from .convert import Convertable, Cursor, FixedBytes, Structure, UInt, wire
from .errors import PayloadSizeInvalid
from .port_address import PortAddress

MAX_DMX_CHANNELS = 512
ALLOWED_DATA_SIZE = range(2, MAX_DMX_CHANNELS + 1)


@dataclass
class PaddedData(Convertable[Any]):
    """DMX channel data, padded to an even length on the wire."""

    inner: bytes = b""

    def __post_init__(self) -> None:
        self.inner = bytes(self.inner)

    def __len__(self) -> int:
        return len(self.inner)

    def __bytes__(self) -> bytes:
        return self.inner

    def padded_length(self) -> int:
        """Length on the wire: the raw length rounded up to even."""
        length = len(self.inner)
        if length % 2:
            length += 1
        return length

    @classmethod
    def from_cursor(cls, cursor: Cursor) -> PaddedData:
        # One datagram is one packet, so the data runs to its end.
        return cls(cursor.read_remaining())

    def into_buffer(self, buffer: bytearray, context: Any) -> None:
        length = len(self.inner)
        if length == 0:
            # a single byte gets padded up to 2, but nothing at all is invalid
            raise PayloadSizeInvalid(b"", ALLOWED_DATA_SIZE)
        if length > MAX_DMX_CHANNELS:
            raise PayloadSizeInvalid(self.inner, ALLOWED_DATA_SIZE)

        buffer += self.inner
        if length % 2:
            buffer.append(0)

    @classmethod
    def test_value(cls) -> PaddedData:
        return cls(b"\x01\x02\x03\x04")

    def __repr__(self) -> str:
        return f"PaddedData({list(self.inner)!r})"


@dataclass
class BigEndianLength(Convertable["Output"]):
    """Length of the data field, derived from the owning command on write.

    After parsing it holds the value read from the wire, which is not checked
    against the data. Before that it holds nothing; serialization always
    writes ``context.data.padded_length()`` and ignores any parsed value.
    """

    parsed_length: Optional[int] = None

    @classmethod
    def from_cursor(cls, cursor: Cursor) -> BigEndianLength:
        return cls(cursor.read_uint(2, "big"))

    def into_buffer(self, buffer: bytearray, context: Output) -> None:
        buffer += context.data.padded_length().to_bytes(2, "big")

    def equal_for_testing(self, other: Any) -> bool:
        if not isinstance(other, BigEndianLength):
            return False
        if (self.parsed_length is None) != (other.parsed_length is None):
            # only one side has been through a parse, its value can't be known
            # on the other side before encoding
            return True
        return self.parsed_length == other.parsed_length

    def __int__(self) -> int:
        return self.parsed_length if self.parsed_length is not None else 0

    def __repr__(self) -> str:
        if self.parsed_length is None:
            return "BigEndianLength(Unknown (set during serialization))"
        return f"BigEndianLength({self.parsed_length})"


@dataclass
class Output(Structure):
    """ArtDmx: transfers one universe of DMX512 data.

    The format is identical for node to controller, node to node and
    controller to node. ``port_address`` accepts a plain int and ``data``
    any bytes-like value or list of ints::

        Output(port_address=1, data=[255, 128, 0])
    """

    OPCODE: ClassVar[OpCode] = OpCode.OUTPUT

    version: bytes = wire(FixedBytes(2), default=ARTNET_PROTOCOL_VERSION)
    sequence: int = wire(UInt(1), default=0)
    physical: int = wire(UInt(1), default=0)
    port_address: PortAddress = wire(PortAddress, default=PortAddress(1))
    length: BigEndianLength = wire(BigEndianLength, default_factory=BigEndianLength)
    data: PaddedData = wire(PaddedData, default_factory=PaddedData)

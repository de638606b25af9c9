"""Art-Net envelope constants and OpCode identifiers.

Every Art-Net packet starts with an 8-byte ID followed by a 16-bit OpCode::

    +----------------------+----------+------------------+
    | ID "Art-Net\\0"       | OpCode   |   Command body   |
    | 8 bytes              | 2 bytes  |   variable       |
    +----------------------+----------+------------------+

The OpCode is transmitted low byte first; the protocol version inside the
command bodies is transmitted high byte first.
"""

from __future__ import annotations

from enum import IntEnum

ARTNET_HEADER = b"Art-Net\x00"
ARTNET_PROTOCOL_VERSION = b"\x00\x0e"  # 14
OPCODE_SIZE = 2
OPCODE_BYTEORDER = "little"


class OpCode(IntEnum):
    """Command body identifiers."""

    OUTPUT = 0x5000  # ArtDmx
    TIMECODE = 0x9700  # ArtTimeCode

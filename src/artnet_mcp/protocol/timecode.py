"""ArtTimeCode command body.

Layout after the Art-Net envelope::

    +---------+--------+----------+--------+---------+---------+-------+------+
    | Version | Filler | StreamId | Frames | Seconds | Minutes | Hours | Type |
    | 2 B, BE | 1 byte | 1 byte   | 1 byte | 1 byte  | 1 byte  | 1 byte| 1 B  |
    +---------+--------+----------+--------+---------+---------+-------+------+
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from .constants import ARTNET_PROTOCOL_VERSION, OpCode
from .convert import FixedBytes, Structure, UInt, wire


class KeyType(IntEnum):
    """Timecode frame rate."""

    FILM = 0  # 24 fps
    EBU = 1  # 25 fps
    DF = 2  # 29.97 fps
    SMPTE = 3  # 30 fps


FRAME_RATES: dict[KeyType, float] = {
    KeyType.FILM: 24.0,
    KeyType.EBU: 25.0,
    KeyType.DF: 29.97,
    KeyType.SMPTE: 30.0,
}


@dataclass
class Timecode(Structure):
    """ArtTimeCode: distributes timecode to nodes.

    Values are sent as-is; frames run 0-29 depending on ``key_type``,
    seconds and minutes 0-59, hours 0-23. A ``stream_id`` of 0 is the master.
    """

    OPCODE: ClassVar[OpCode] = OpCode.TIMECODE

    version: bytes = wire(FixedBytes(2), default=ARTNET_PROTOCOL_VERSION)
    filler1: int = wire(UInt(1), default=0)
    stream_id: int = wire(UInt(1), default=0)
    frames: int = wire(UInt(1), default=0)
    seconds: int = wire(UInt(1), default=0)
    minutes: int = wire(UInt(1), default=0)
    hours: int = wire(UInt(1), default=0)
    key_type: int = wire(UInt(1), default=KeyType.FILM)

    @property
    def frame_rate(self) -> float | None:
        """Frames per second for ``key_type``, or None if it is unknown."""
        try:
            return FRAME_RATES[KeyType(self.key_type)]
        except ValueError:
            return None

    def __str__(self) -> str:
        return (
            f"{self.hours:02d}:{self.minutes:02d}:"
            f"{self.seconds:02d}:{self.frames:02d}"
        )

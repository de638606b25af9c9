"""Tests for the ArtTimeCode command body."""

import pytest

from artnet_mcp.protocol.command import from_buffer, into_buffer
from artnet_mcp.protocol.errors import EndOfInput
from artnet_mcp.protocol.timecode import KeyType, Timecode

HEADER = [65, 114, 116, 45, 78, 101, 116, 0]
TIMECODE_OPCODE = [0x00, 0x97]


def test_defaults():
    timecode = Timecode()
    assert timecode.version == b"\x00\x0e"
    assert timecode.filler1 == 0
    assert timecode.stream_id == 0
    assert timecode.key_type == KeyType.FILM


def test_serialize_layout():
    command = Timecode(
        stream_id=1, frames=24, seconds=59, minutes=30, hours=23,
        key_type=KeyType.SMPTE,
    )
    assert list(into_buffer(command)) == (
        HEADER + TIMECODE_OPCODE + [0, 14, 0, 1, 24, 59, 30, 23, 3]
    )


def test_parse():
    packet = bytes(HEADER + TIMECODE_OPCODE + [0, 14, 0, 0, 12, 34, 56, 1, 1])
    timecode = from_buffer(packet)
    assert isinstance(timecode, Timecode)
    assert timecode.frames == 12
    assert timecode.seconds == 34
    assert timecode.minutes == 56
    assert timecode.hours == 1
    assert timecode.key_type == KeyType.EBU


def test_round_trip_exact():
    packet = bytes(HEADER + TIMECODE_OPCODE + [0, 0, 0, 2, 1, 2, 3, 4, 2])
    assert into_buffer(from_buffer(packet)) == packet


def test_parse_truncated():
    packet = bytes(HEADER + TIMECODE_OPCODE + [0, 14, 0, 0, 12, 34])
    with pytest.raises(EndOfInput):
        from_buffer(packet)


def test_field_out_of_byte_range():
    with pytest.raises(ValueError):
        Timecode(hours=256)


def test_str():
    assert str(Timecode(hours=1, minutes=2, seconds=3, frames=4)) == "01:02:03:04"


def test_frame_rate():
    assert Timecode(key_type=KeyType.DF).frame_rate == 29.97
    assert Timecode(key_type=9).frame_rate is None


def test_trailing_bytes_ignored():
    """Bytes after the fixed-size body do not change the parsed value."""
    body = HEADER + TIMECODE_OPCODE + [0, 14, 0, 0, 12, 34, 56, 1, 1]
    with_trailer = from_buffer(bytes(body + [0xAA, 0xBB]))
    assert with_trailer == from_buffer(bytes(body))
    assert into_buffer(with_trailer) == bytes(body)

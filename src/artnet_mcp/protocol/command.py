"""Art-Net envelope: header check and OpCode dispatch to command bodies."""

from __future__ import annotations

from typing import Union

from .constants import ARTNET_HEADER, OPCODE_BYTEORDER, OPCODE_SIZE, OpCode
from .convert import Cursor, Structure
from .errors import SignatureMismatch, UnsupportedOperation
from .output import Output
from .timecode import Timecode

ArtCommand = Union[Output, Timecode]

# OpCode -> command body
COMMANDS: dict[OpCode, type[Structure]] = {
    OpCode.OUTPUT: Output,
    OpCode.TIMECODE: Timecode,
}


def is_artnet(data: bytes) -> bool:
    """Return True if ``data`` starts with the Art-Net header."""
    return data[: len(ARTNET_HEADER)] == ARTNET_HEADER


def from_buffer(data: bytes) -> ArtCommand:
    """Parse one complete Art-Net datagram into a command value.

    Raises:
        EndOfInput: If the datagram is truncated.
        SignatureMismatch: If the header is not ``Art-Net\\0``.
        UnsupportedOperation: If no command body handles the OpCode.
        AddressOutOfRange: If an ArtDmx Port-Address has bit 15 set.
    """
    cursor = Cursor(data)
    header = cursor.read(len(ARTNET_HEADER))
    if header != ARTNET_HEADER:
        raise SignatureMismatch(header)

    opcode = cursor.read_uint(OPCODE_SIZE, OPCODE_BYTEORDER)
    body = COMMANDS.get(opcode)
    if body is None:
        raise UnsupportedOperation(opcode)
    return body.from_cursor(cursor)


def into_buffer(command: ArtCommand) -> bytes:
    """Serialize a command value into a complete Art-Net datagram.

    Raises:
        PayloadSizeInvalid: If ArtDmx data is empty or over 512 bytes.
        TypeError: If ``command`` is not a registered command body.
    """
    opcode = getattr(command, "OPCODE", None)
    if COMMANDS.get(opcode) is not type(command):
        raise TypeError(f"Not an Art-Net command: {command!r}")

    buffer = bytearray(ARTNET_HEADER)
    buffer += int(opcode).to_bytes(OPCODE_SIZE, OPCODE_BYTEORDER)
    command.into_buffer(buffer, command)
    return bytes(buffer)

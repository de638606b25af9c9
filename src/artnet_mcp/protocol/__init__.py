"""Protocol layer: field conversion, command bodies and Art-Net envelope."""

from .command import ArtCommand, COMMANDS, from_buffer, into_buffer, is_artnet
from .constants import ARTNET_HEADER, ARTNET_PROTOCOL_VERSION, OpCode
from .errors import (
    AddressOutOfRange,
    ArtNetError,
    EndOfInput,
    PayloadSizeInvalid,
    SignatureMismatch,
    UnsupportedOperation,
)
from .output import BigEndianLength, Output, PaddedData
from .port_address import PortAddress
from .timecode import KeyType, Timecode

"""The 15-bit Port-Address used to route DMX data to a universe.

Bit layout::

    bit 15   | bits 14-8 | bits 7-4 | bits 3-0
    always 0 | Net       | Sub-Net  | Universe

On the wire the Port-Address is sent low byte first (SubUni, then Net),
unlike the big-endian version and length fields around it.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Any

from .convert import Convertable, Cursor
from .errors import AddressOutOfRange

MAX_PORT_ADDRESS = 0x7FFF
PORT_ADDRESS_SIZE = 2
PORT_ADDRESS_BYTEORDER = "little"


@dataclass(frozen=True)
class PortAddress(Convertable[Any]):
    """A validated Port-Address (0-32767)."""

    value: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", operator.index(self.value))
        if not 0 <= self.value <= MAX_PORT_ADDRESS:
            raise AddressOutOfRange(self.value, MAX_PORT_ADDRESS)

    @classmethod
    def from_parts(cls, net: int, sub_net: int, universe: int) -> PortAddress:
        """Compose a Port-Address from its Net (0-127), Sub-Net and Universe (0-15)."""
        if not 0 <= net <= 0x7F:
            raise AddressOutOfRange(net, 0x7F)
        if not 0 <= sub_net <= 0x0F:
            raise AddressOutOfRange(sub_net, 0x0F)
        if not 0 <= universe <= 0x0F:
            raise AddressOutOfRange(universe, 0x0F)
        return cls((net << 8) | (sub_net << 4) | universe)

    @property
    def net(self) -> int:
        return (self.value >> 8) & 0x7F

    @property
    def sub_net(self) -> int:
        return (self.value >> 4) & 0x0F

    @property
    def universe(self) -> int:
        return self.value & 0x0F

    @classmethod
    def from_cursor(cls, cursor: Cursor) -> PortAddress:
        return cls(cursor.read_uint(PORT_ADDRESS_SIZE, PORT_ADDRESS_BYTEORDER))

    def into_buffer(self, buffer: bytearray, context: Any) -> None:
        buffer += self.value.to_bytes(PORT_ADDRESS_SIZE, PORT_ADDRESS_BYTEORDER)

    @classmethod
    def test_value(cls) -> PortAddress:
        return cls(1)

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

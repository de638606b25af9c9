"""Exceptions raised by the Art-Net codec.

Every failure is fail-fast: the first field that cannot be read or written
aborts the whole parse or serialization and nothing partial is returned.
"""

from __future__ import annotations


class ArtNetError(Exception):
    """Base class for all codec errors."""


class EndOfInput(ArtNetError):
    """The datagram ended before a field could be fully read."""

    def __init__(self, needed: int, available: int) -> None:
        self.needed = needed
        self.available = available
        super().__init__(
            f"Unexpected end of datagram: needed {needed} bytes, "
            f"{available} available"
        )


class SignatureMismatch(ArtNetError):
    """The first 8 bytes are not the Art-Net header."""

    def __init__(self, received: bytes) -> None:
        self.received = received
        super().__init__(f"Invalid Art-Net header: {received!r}")


class UnsupportedOperation(ArtNetError):
    """The OpCode does not map to a known command body."""

    def __init__(self, opcode: int) -> None:
        self.opcode = opcode
        super().__init__(f"Unsupported OpCode 0x{opcode:04X}")


class PayloadSizeInvalid(ArtNetError, ValueError):
    """DMX payload is empty or longer than 512 bytes."""

    def __init__(self, message: bytes, allowed_size: range) -> None:
        self.message = message
        self.allowed_size = allowed_size
        super().__init__(
            f"DMX payload must be between {allowed_size.start} and "
            f"{allowed_size.stop - 1} bytes, got {len(message)}"
        )


class AddressOutOfRange(ArtNetError, ValueError):
    """A Port-Address does not fit in 15 bits."""

    def __init__(self, value: int, limit: int = 0x7FFF) -> None:
        self.value = value
        self.limit = limit
        super().__init__(f"Value must be 0-{limit}, got {value}")

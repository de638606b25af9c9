"""Field-by-field conversion between command values and wire bytes.

A command body is a dataclass whose fields are declared with :func:`wire`.
Each field carries a codec describing how it is read from a :class:`Cursor`
and appended to an output buffer. Serialization passes the owning command
as *context*, so a field's encoding may depend on its siblings::

    @dataclass
    class Output(Structure):
        sequence: int = wire(UInt(1), default=0)
        length: BigEndianLength = wire(BigEndianLength, default_factory=BigEndianLength)
        data: PaddedData = wire(PaddedData, default_factory=PaddedData)

Fields are parsed and written strictly in declaration order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import Field, field, fields
from typing import Any, Generic, TypeVar

from .errors import EndOfInput

C = TypeVar("C")
T = TypeVar("T", bound="Convertable")


class Cursor:
    """Position-tracked read view over a single datagram."""

    def __init__(self, data: bytes, position: int = 0) -> None:
        self._data = bytes(data)
        self._position = position

    @property
    def position(self) -> int:
        return self._position

    def remaining(self) -> int:
        return len(self._data) - self._position

    def read(self, size: int) -> bytes:
        """Read exactly ``size`` bytes and advance.

        Raises:
            EndOfInput: If fewer than ``size`` bytes are left.
        """
        available = self.remaining()
        if size > available:
            raise EndOfInput(size, available)
        chunk = self._data[self._position : self._position + size]
        self._position += size
        return chunk

    def read_uint(self, size: int, byteorder: str = "big") -> int:
        return int.from_bytes(self.read(size), byteorder)

    def read_remaining(self) -> bytes:
        """Consume everything up to the end of the datagram."""
        return self.read(self.remaining())


class Convertable(ABC, Generic[C]):
    """A value that knows its own wire representation.

    ``C`` is the context type handed to :meth:`into_buffer`, normally the
    command body that owns the field.
    """

    @classmethod
    @abstractmethod
    def from_cursor(cls: type[T], cursor: Cursor) -> T:
        """Read this value from ``cursor``, advancing it."""

    @abstractmethod
    def into_buffer(self, buffer: bytearray, context: C) -> None:
        """Append this value's wire bytes to ``buffer``."""

    def equal_for_testing(self, other: Any) -> bool:
        """Equality as seen after a full encode/decode round trip."""
        return self == other

    @classmethod
    def coerce(cls: type[T], value: Any) -> T:
        """Implicit conversion applied when a command is composed."""
        if isinstance(value, cls):
            return value
        return cls(value)

    @classmethod
    def test_value(cls: type[T]) -> T:
        return cls()


class FieldCodec:
    """Describes how one dataclass field maps to wire bytes."""

    def read(self, cursor: Cursor) -> Any:
        raise NotImplementedError

    def write(self, value: Any, buffer: bytearray, context: Any) -> None:
        raise NotImplementedError

    def coerce(self, value: Any) -> Any:
        return value

    def equal(self, a: Any, b: Any) -> bool:
        return a == b

    def test_value(self) -> Any:
        raise NotImplementedError


class UInt(FieldCodec):
    """Unsigned integer of a fixed byte width."""

    def __init__(self, size: int = 1, byteorder: str = "big") -> None:
        self.size = size
        self.byteorder = byteorder
        self.max_value = (1 << (8 * size)) - 1

    def read(self, cursor: Cursor) -> int:
        return cursor.read_uint(self.size, self.byteorder)

    def write(self, value: int, buffer: bytearray, context: Any) -> None:
        buffer += value.to_bytes(self.size, self.byteorder)

    def coerce(self, value: Any) -> int:
        value = int(value)
        if not 0 <= value <= self.max_value:
            raise ValueError(f"Value must be 0-{self.max_value}, got {value}")
        return value

    def test_value(self) -> int:
        return 1

    def __repr__(self) -> str:
        return f"UInt(size={self.size}, byteorder={self.byteorder!r})"


class FixedBytes(FieldCodec):
    """Raw byte array of a fixed length, copied verbatim."""

    def __init__(self, size: int) -> None:
        self.size = size

    def read(self, cursor: Cursor) -> bytes:
        return cursor.read(self.size)

    def write(self, value: bytes, buffer: bytearray, context: Any) -> None:
        buffer += value

    def coerce(self, value: Any) -> bytes:
        value = bytes(value)
        if len(value) != self.size:
            raise ValueError(f"Expected {self.size} bytes, got {len(value)}")
        return value

    def test_value(self) -> bytes:
        return bytes(range(1, self.size + 1))

    def __repr__(self) -> str:
        return f"FixedBytes(size={self.size})"


class Nested(FieldCodec):
    """Delegates to a :class:`Convertable` field type."""

    def __init__(self, cls: type[Convertable]) -> None:
        self.cls = cls

    def read(self, cursor: Cursor) -> Convertable:
        return self.cls.from_cursor(cursor)

    def write(self, value: Convertable, buffer: bytearray, context: Any) -> None:
        value.into_buffer(buffer, context)

    def coerce(self, value: Any) -> Convertable:
        return self.cls.coerce(value)

    def equal(self, a: Convertable, b: Convertable) -> bool:
        return a.equal_for_testing(b)

    def test_value(self) -> Convertable:
        return self.cls.test_value()

    def __repr__(self) -> str:
        return f"Nested({self.cls.__name__})"


def wire(codec: FieldCodec | type[Convertable], **kwargs: Any) -> Any:
    """Declare a dataclass field together with its wire codec.

    ``codec`` may be a :class:`FieldCodec` or a :class:`Convertable`
    subclass. Remaining keyword arguments go to :func:`dataclasses.field`.
    """
    if isinstance(codec, type) and issubclass(codec, Convertable):
        codec = Nested(codec)
    return field(metadata={"codec": codec}, **kwargs)


def _codec(f: Field) -> FieldCodec:
    try:
        return f.metadata["codec"]
    except KeyError:
        raise TypeError(f"Field {f.name!r} was not declared with wire()") from None


class Structure(Convertable[Any]):
    """Base class for command bodies built from :func:`wire` fields.

    Subclasses must be dataclasses. Each field is coerced on construction,
    parsed in declaration order and serialized in declaration order with the
    structure itself passed as context.
    """

    def __post_init__(self) -> None:
        for f in fields(self):
            setattr(self, f.name, _codec(f).coerce(getattr(self, f.name)))

    @classmethod
    def from_cursor(cls, cursor: Cursor):
        values = {}
        for f in fields(cls):
            values[f.name] = _codec(f).read(cursor)
        return cls(**values)

    def into_buffer(self, buffer: bytearray, context: Any = None) -> None:
        for f in fields(self):
            _codec(f).write(getattr(self, f.name), buffer, self)

    def to_bytes(self) -> bytes:
        """Serialize the body alone, without the Art-Net envelope."""
        buffer = bytearray()
        self.into_buffer(buffer, self)
        return bytes(buffer)

    def equal_for_testing(self, other: Any) -> bool:
        if type(other) is not type(self):
            return False
        return all(
            _codec(f).equal(getattr(self, f.name), getattr(other, f.name))
            for f in fields(self)
        )

    @classmethod
    def test_value(cls):
        return cls(**{f.name: _codec(f).test_value() for f in fields(cls)})

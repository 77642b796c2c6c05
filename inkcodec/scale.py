"""Low level SCALE codec primitives: compact integers, strings and fixed-width integers."""

from __future__ import annotations

from inkcodec.registry import Primitive, TranscodeError

_INT_LAYOUT = {
    Primitive.U8: (1, False),
    Primitive.U16: (2, False),
    Primitive.U32: (4, False),
    Primitive.U64: (8, False),
    Primitive.U128: (16, False),
    Primitive.I8: (1, True),
    Primitive.I16: (2, True),
    Primitive.I32: (4, True),
    Primitive.I64: (8, True),
    Primitive.I128: (16, True),
}
# The big-integer mode stores up to 4 + 63 bytes.
_MAX_COMPACT_BYTES = 67


class ByteReader:
    """Consumes bytes from the front of a buffer."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def read(self, n: int) -> bytes:
        """Return the next ``n`` bytes; raise if fewer are left."""
        if n < 0:
            raise ValueError("Cannot read a negative number of bytes")
        end = self._pos + n
        if end > len(self._data):
            raise TranscodeError("Not enough data to fill buffer")
        chunk = self._data[self._pos : end]
        self._pos = end
        return chunk

    def read_byte(self) -> int:
        return self.read(1)[0]

    def remaining(self) -> bytes:
        """The bytes not read yet."""
        return self._data[self._pos :]

    def __len__(self) -> int:
        return len(self._data) - self._pos


def encode_compact(number: int) -> bytes:
    """SCALE compact encoding of a non-negative integer."""
    if number < 0:
        raise TranscodeError("Compact encoding requires a non-negative integer")
    if number < 1 << 6:
        return bytes([number << 2])
    if number < 1 << 14:
        return ((number << 2) | 1).to_bytes(2, "little")
    if number < 1 << 30:
        return ((number << 2) | 2).to_bytes(4, "little")
    length = max(4, (number.bit_length() + 7) // 8)
    if length > _MAX_COMPACT_BYTES:
        raise TranscodeError("Integer too large for compact encoding")
    return bytes([((length - 4) << 2) | 3]) + number.to_bytes(length, "little")


def decode_compact(reader: ByteReader) -> int:
    """Read a canonically encoded compact integer."""
    first = reader.read_byte()
    mode = first & 3
    if mode == 0:
        return first >> 2
    if mode == 1:
        value = int.from_bytes(bytes([first]) + reader.read(1), "little") >> 2
        if value < 1 << 6:
            raise TranscodeError("out of range decoding Compact")
        return value
    if mode == 2:
        value = int.from_bytes(bytes([first]) + reader.read(3), "little") >> 2
        if value < 1 << 14:
            raise TranscodeError("out of range decoding Compact")
        return value
    length = (first >> 2) + 4
    raw = reader.read(length)
    value = int.from_bytes(raw, "little")
    if (length == 4 and value < 1 << 30) or (length > 4 and raw[-1] == 0):
        raise TranscodeError("out of range decoding Compact")
    return value


def encode_str(text: str) -> bytes:
    """UTF-8 bytes prefixed with their compact encoded length."""
    data = text.encode("utf-8")
    return encode_compact(len(data)) + data


def decode_str(reader: ByteReader) -> str:
    length = decode_compact(reader)
    try:
        return reader.read(length).decode("utf-8")
    except UnicodeDecodeError:
        raise TranscodeError("Invalid utf8 sequence") from None


def _layout(primitive: Primitive) -> tuple:
    try:
        return _INT_LAYOUT[primitive]
    except KeyError:
        if primitive in (Primitive.U256, Primitive.I256):
            raise TranscodeError(f"{primitive.name} currently not supported") from None
        raise TranscodeError(f"{primitive.name} is not an integer type") from None


def encode_int(number: int, primitive: Primitive) -> bytes:
    """Little endian fixed-width encoding of an integer primitive."""
    width, signed = _layout(primitive)
    try:
        return int(number).to_bytes(width, "little", signed=signed)
    except OverflowError:
        raise TranscodeError("out of range integral type conversion attempted") from None


def decode_int(reader: ByteReader, primitive: Primitive) -> int:
    width, signed = _layout(primitive)
    return int.from_bytes(reader.read(width), "little", signed=signed)
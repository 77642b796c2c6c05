import pytest

from inkcodec.registry import Primitive, TranscodeError
from inkcodec.scale import (
    ByteReader,
    decode_compact,
    decode_int,
    decode_str,
    encode_compact,
    encode_int,
    encode_str,
)


def test_reader_reads_in_order():
    reader = ByteReader(b"abc")
    assert reader.read(2) == b"ab"
    assert reader.remaining() == b"c"
    assert reader.read_byte() == ord("c")
    assert reader.remaining() == b""


def test_reader_past_end_raises():
    reader = ByteReader(b"ab")
    with pytest.raises(TranscodeError, match="Not enough data"):
        reader.read(3)
    assert reader.remaining() == b"ab"


@pytest.mark.parametrize(
    "number",
    [0, 1, 63, 64, 16383, 16384, (1 << 30) - 1, 1 << 30, (1 << 32) - 1, 1 << 64, (1 << 128) - 1],
)
def test_compact_roundtrip(number):
    reader = ByteReader(encode_compact(number) + b"\xaa")
    assert decode_compact(reader) == number
    assert reader.remaining() == b"\xaa"


def test_compact_pinned_bytes():
    assert encode_compact(0) == b"\x00"
    assert encode_compact(64) == b"\x01\x01"
    assert encode_compact(1 << 30) == b"\x03\x00\x00\x00\x40"


def test_compact_length_grows_at_mode_boundaries():
    assert len(encode_compact(63)) < len(encode_compact(64))
    assert len(encode_compact(16383)) < len(encode_compact(16384))
    assert len(encode_compact((1 << 30) - 1)) < len(encode_compact(1 << 30))


def test_compact_negative_raises():
    with pytest.raises(TranscodeError):
        encode_compact(-1)


def test_compact_non_canonical_rejected():
    with pytest.raises(TranscodeError, match="out of range"):
        decode_compact(ByteReader(b"\x01\x00"))


@pytest.mark.parametrize("text", ["", "ink!", "の𝄞"])
def test_str_roundtrip(text):
    encoded = encode_str(text)
    assert encoded.startswith(encode_compact(len(text.encode("utf-8"))))
    reader = ByteReader(encoded)
    assert decode_str(reader) == text
    assert reader.remaining() == b""


def test_str_invalid_utf8_raises():
    with pytest.raises(TranscodeError, match="Invalid utf8"):
        decode_str(ByteReader(encode_compact(1) + b"\xff"))


@pytest.mark.parametrize(
    "primitive, number",
    [
        (Primitive.U8, 255),
        (Primitive.U16, 0xDEAD),
        (Primitive.U32, 0xDEADBEEF),
        (Primitive.U64, 0xDEADBEEF12345678),
        (Primitive.U128, 0xDEADBEEF0123456789ABCDEF01234567),
        (Primitive.I8, -128),
        (Primitive.I16, 32767),
        (Primitive.I32, -2147483648),
        (Primitive.I64, 9223372036854775807),
        (Primitive.I128, -170141183460469231731687303715884105728),
    ],
)
def test_int_roundtrip(primitive, number):
    reader = ByteReader(encode_int(number, primitive))
    assert decode_int(reader, primitive) == number
    assert reader.remaining() == b""


@pytest.mark.parametrize(
    "primitive, number",
    [(Primitive.U8, 256), (Primitive.U32, -1), (Primitive.I128, 1 << 127), (Primitive.I8, -129)],
)
def test_int_out_of_range(primitive, number):
    with pytest.raises(TranscodeError, match="out of range"):
        encode_int(number, primitive)


def test_wide_ints_unsupported():
    with pytest.raises(TranscodeError, match="U256 currently not supported"):
        encode_int(1, Primitive.U256)
    with pytest.raises(TranscodeError, match="I256 currently not supported"):
        decode_int(ByteReader(bytes(32)), Primitive.I256)


def test_decode_int_short_input_raises():
    with pytest.raises(TranscodeError):
        decode_int(ByteReader(b"\x01\x02"), Primitive.U32)
import pytest

from inkcodec.scon_parse import SconParseError, parse_value
from inkcodec.value import (
    Bool,
    Char,
    Hex,
    Int,
    Literal,
    Map,
    Seq,
    Str,
    Tuple,
    UInt,
    Unit,
)

ALICE = "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"
BOB = "5FHneW46xGXgs5mUiveU4sbTyGBzmstUspZC92UhjJM694ty"
U128_MAX = 340282366920938463463374607431768211455


def test_parse_value_bool():
    assert parse_value("true") == Bool(True)
    assert parse_value("false") == Bool(False)


def test_unit():
    assert parse_value("()") == Unit()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("42", UInt(42)),
        ("-123", Int(-123)),
        ("+456", Int(456)),
        ("0", UInt(0)),
        ("01", UInt(1)),
        ("340282366920938463463374607431768211455", UInt(U128_MAX)),
        ("1_000_000", UInt(1_000_000)),
        ("-2_000_000", Int(-2_000_000)),
        ("+3_000_000", Int(3_000_000)),
        ("340_282_366_920_938_463_463_374_607_431_768_211_455", UInt(U128_MAX)),
        ("-170141183460469231731687303715884105728", Int(-(1 << 127))),
    ],
)
def test_integer(text, expected):
    assert parse_value(text) == expected


def test_integer_too_many_digits_is_not_an_integer():
    # Forty digits overflow u128; the text is then taken as an alphanumeric literal.
    text = "3402823669209384634633746074317682114550"
    assert parse_value(text) == Literal(text)


def test_signed_integer_overflow_is_an_error():
    with pytest.raises(SconParseError):
        parse_value("-3402823669209384634633746074317682114550")


@pytest.mark.parametrize(
    "text, expected",
    [
        ('""', ""),
        ('"Hello"', "Hello"),
        ('"の"', "の"),
        ('"𝄞"', "𝄞"),
        (r'"  \\  "', "  \\  "),
        (r'"  \"  "', '  "  '),
        (r'"\u0000"', "\x00"),
        (r'"\u00DF"', "ß"),
        (r'"\uD834\uDD1E"', "𝄞"),
        (r'"a\/b\tc\n"', "a/b\tc\n"),
    ],
)
def test_string(text, expected):
    assert parse_value(text) == Str(expected)


@pytest.mark.parametrize(
    "text",
    [
        r'"\ud800"',
        r'"\x"',
        r'"\u"',
        r'"\u001"',
        r'"\x0a"',
        r'"\"',
        '"unterminated',
    ],
)
def test_invalid_string(text):
    with pytest.raises(SconParseError):
        parse_value(text)


def test_seq():
    assert parse_value("[ ]") == Seq([])
    assert parse_value("[ 1 ]") == Seq([UInt(1)])
    assert parse_value(' [ 1 , "x" ] ') == Seq([UInt(1), Str("x")])
    assert parse_value('["a", "b",]') == Seq([Str("a"), Str("b")])


def test_unterminated_seq_is_an_error():
    with pytest.raises(SconParseError, match="Error parsing Value"):
        parse_value("[1, 2")


def test_empty_input_is_an_error():
    with pytest.raises(SconParseError):
        parse_value("")


@pytest.mark.parametrize("ident", ["a", "Ok", "_ok", "im_ok", "im_ok_", "im_ok_123abc"])
def test_identifier_alone_is_unit_tuple(ident):
    assert parse_value(ident) == Tuple(ident, [])


def test_literal():
    assert parse_value(ALICE) == Literal(ALICE)


def test_short_alphanumeric_is_not_a_literal():
    assert parse_value("abc123") == Tuple("abc123", [])


def test_map():
    assert parse_value("Foo {}") == Map("Foo", [])
    assert parse_value("Foo{}") == Map("Foo", [])
    assert parse_value("(a: 1)") == Map(None, [(Str("a"), UInt(1))])
    assert parse_value('A (a: 1, b: "bar")') == Map(
        "A", [(Str("a"), UInt(1)), (Str("b"), Str("bar"))]
    )
    assert parse_value("B(a: 1)") == Map("B", [(Str("a"), UInt(1))])
    assert parse_value("Struct { a : 1 }") == Map("Struct", [(Str("a"), UInt(1))])


def test_map_mixed_keys():
    text = """Mixed {
            1: "a",
            "b": 2,
            c: true,
        }"""
    assert parse_value(text) == Map(
        "Mixed",
        [
            (UInt(1), Str("a")),
            (Str("b"), UInt(2)),
            (Str("c"), Bool(True)),
        ],
    )


def test_map_order_matters():
    parsed = parse_value("S(b: 1, a: 2)")
    assert [k for k, _ in parsed.items()] == [Str("b"), Str("a")]


def test_map_with_literal_values():
    text = f"""S(
                no_alias: {ALICE},
                aliased: {BOB},
             )"""
    assert parse_value(text) == Map(
        "S",
        [
            (Str("no_alias"), Literal(ALICE)),
            (Str("aliased"), Literal(BOB)),
        ],
    )


def test_nested_struct():
    assert parse_value("S { nested: Nested(33) }") == Map(
        "S", [(Str("nested"), Tuple("Nested", [UInt(33)]))]
    )


def test_tuple():
    assert parse_value("Foo ()") == Tuple("Foo", [])
    assert parse_value("Foo()") == Tuple("Foo", [])
    assert parse_value("Foo") == Tuple("Foo", [])
    assert parse_value('B("a")') == Tuple("B", [Str("a")])
    assert parse_value('B("a", 10, true)') == Tuple(
        "B", [Str("a"), UInt(10), Bool(True)]
    )
    assert parse_value('Mixed ("a", 10, ["a", "b", "c"],)') == Tuple(
        "Mixed",
        [Str("a"), UInt(10), Seq([Str("a"), Str("b"), Str("c")])],
    )
    assert parse_value('(Nested("a", 10))') == Tuple(
        None, [Tuple("Nested", [Str("a"), UInt(10)])]
    )


def test_option():
    assert parse_value('Some("a")') == Tuple("Some", [Str("a")])
    assert parse_value("None") == Tuple("None", [])


def test_char():
    assert parse_value("'c'") == Char("c")


def test_bytes():
    assert parse_value("0x0000") == Hex.from_str("0x0000")
    long_hex = "0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF"
    assert parse_value(long_hex) == Hex.from_str(long_hex)


def test_hex_keeps_digits_and_bytes():
    parsed = parse_value("0xDEADBEEF")
    assert parsed.as_str() == "DEADBEEF"
    assert bytes(parsed) == b"\xde\xad\xbe\xef"


def test_hex_tuple_of_uints():
    text = "S (0xDE, 0xDEAD, 0xDEADBEEF)"
    assert parse_value(text) == Tuple(
        "S",
        [Hex.from_str("DE"), Hex.from_str("DEAD"), Hex.from_str("DEADBEEF")],
    )


def test_trailing_text_is_ignored():
    assert parse_value("[1, 2] rest") == Seq([UInt(1), UInt(2)])


def test_seq_of_literals():
    text = f"""[
                {ALICE},
                {BOB},
             ]"""
    assert parse_value(text) == Seq([Literal(ALICE), Literal(BOB)])
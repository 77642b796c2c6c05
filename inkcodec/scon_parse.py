"""Parser for the SCALE object notation (SCON) text format."""

from __future__ import annotations

import string
from collections.abc import Callable
from typing import Optional

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
    Value,
)

_WHITESPACE = " \t\r\n"
_HEX_DIGITS = frozenset(string.hexdigits)
_DEC_DIGITS = frozenset(string.digits)
_ESCAPE_CHARS = frozenset('"\\/bfnrtu')
_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}
# Literals must be longer than the decimal representation of the largest u128.
_MAX_UINT_LEN = 39
_U128_LIMIT = 1 << 128
_I128_MIN = -(1 << 127)
_I128_MAX = (1 << 127) - 1


class SconParseError(ValueError):
    """Raised when text cannot be parsed as a SCON value."""


class _NoMatch(Exception):
    """A parser alternative did not match at the given position."""


def parse_value(text: str) -> Value:
    """Parse a SCON value from the start of ``text``; trailing text is ignored."""
    parser = _Parser(text)
    try:
        value, _ = parser.value(0)
    except _NoMatch:
        pos, expected = parser.furthest
        raise SconParseError(
            f"Error parsing Value: expected {expected} at position {pos}"
        ) from None
    return value


def _unescape(raw: str) -> str:
    """Resolve the escape sequences allowed in a JSON string body."""
    out = []
    pos = 0
    while pos < len(raw):
        ch = raw[pos]
        if ch != "\\":
            out.append(ch)
            pos += 1
            continue
        if pos + 1 >= len(raw):
            raise ValueError("Incomplete escape sequence")
        esc = raw[pos + 1]
        if esc in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[esc])
            pos += 2
        elif esc == "u":
            code, pos = _read_code_unit(raw, pos + 2)
            if 0xD800 <= code < 0xDC00:
                if raw[pos : pos + 2] != "\\u":
                    raise ValueError("Unpaired surrogate")
                low, pos = _read_code_unit(raw, pos + 2)
                if not 0xDC00 <= low < 0xE000:
                    raise ValueError("Invalid low surrogate")
                code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
            elif 0xDC00 <= code < 0xE000:
                raise ValueError("Unpaired surrogate")
            out.append(chr(code))
        else:
            raise ValueError(f"Unknown escape {esc!r}")
    return "".join(out)


def _read_code_unit(raw: str, pos: int) -> tuple:
    digits = raw[pos : pos + 4]
    if len(digits) != 4 or not all(d in _HEX_DIGITS for d in digits):
        raise ValueError("Expected four hex digits")
    return int(digits, 16), pos + 4


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.furthest = (0, "a value")

    # --- primitives -----------------------------------------------------------

    def _fail(self, pos: int, expected: str) -> None:
        if pos >= self.furthest[0]:
            self.furthest = (pos, expected)
        raise _NoMatch()

    def _span(self, pos: int, accept: Callable[[str], bool]) -> int:
        text = self.text
        while pos < len(text) and accept(text[pos]):
            pos += 1
        return pos

    def _ws(self, pos: int) -> int:
        return self._span(pos, lambda c: c in _WHITESPACE)

    def _tag(self, pos: int, tag: str) -> int:
        if self.text.startswith(tag, pos):
            return pos + len(tag)
        self._fail(pos, repr(tag))
        raise AssertionError("unreachable")

    def _ws_char(self, pos: int, chars: str) -> int:
        pos = self._ws(pos)
        if pos < len(self.text) and self.text[pos] in chars:
            return self._ws(pos + 1)
        self._fail(pos, " or ".join(repr(c) for c in chars))
        raise AssertionError("unreachable")

    def _separated(self, pos: int, item: Callable[[int], tuple]) -> tuple:
        items: list = []
        try:
            value, pos = item(pos)
        except _NoMatch:
            return items, pos
        items.append(value)
        while True:
            try:
                after_sep = self._ws_char(pos, ",")
                value, end = item(after_sep)
            except _NoMatch:
                return items, pos
            items.append(value)
            pos = end

    def _body(self, pos: int, opening: str, closing: str, item) -> tuple:
        pos = self._ws_char(pos, opening)
        items, pos = self._separated(pos, item)
        try:
            pos = self._ws_char(pos, ",")
        except _NoMatch:
            pass
        pos = self._ws_char(pos, closing)
        return items, pos

    def _ident(self, pos: int) -> tuple:
        text = self.text
        if pos >= len(text) or not (
            (text[pos].isascii() and text[pos].isalpha()) or text[pos] == "_"
        ):
            self._fail(pos, "an identifier")
        end = self._span(pos, lambda c: c.isalnum() or c == "_")
        return text[pos:end], end

    def _opt_ident(self, pos: int) -> tuple:
        try:
            ident, end = self._ident(self._ws(pos))
        except _NoMatch:
            return None, pos
        return ident, self._ws(end)

    # --- values ---------------------------------------------------------------

    def value(self, pos: int) -> tuple:
        start = self._ws(pos)
        alternatives = (
            self._unit,
            self._hex,
            self._seq,
            self._tuple,
            self._map,
            self._string,
            self._literal,
            self._integer,
            self._bool,
            self._char,
            self._unit_tuple,
        )
        for alternative in alternatives:
            try:
                value, end = alternative(start)
            except _NoMatch:
                continue
            return value, self._ws(end)
        self._fail(start, "a value")
        raise AssertionError("unreachable")

    def _unit(self, pos: int) -> tuple:
        return Unit(), self._tag(pos, "()")

    def _hex(self, pos: int) -> tuple:
        start = self._tag(pos, "0x")
        end = self._span(start, lambda c: c in _HEX_DIGITS)
        if end == start:
            self._fail(start, "hex digits")
        try:
            hex_value = Hex.from_str(self.text[start:end])
        except ValueError:
            self._fail(start, "an even number of hex digits")
        return hex_value, end

    def _seq(self, pos: int) -> tuple:
        items, end = self._body(pos, "[", "]", self.value)
        return Seq(items), end

    def _tuple(self, pos: int) -> tuple:
        ident, pos = self._opt_ident(pos)
        items, end = self._body(pos, "(", ")", self.value)
        return Tuple(ident, items), end

    def _map(self, pos: int) -> tuple:
        ident, pos = self._opt_ident(pos)
        entries, end = self._body(pos, "({", ")}", self._map_entry)
        return Map(ident, entries), end

    def _map_entry(self, pos: int) -> tuple:
        key, pos = self._map_key(pos)
        pos = self._ws_char(pos, ":")
        value, pos = self.value(pos)
        return (key, value), pos

    def _map_key(self, pos: int) -> tuple:
        start = self._ws(pos)
        for alternative in (self._ident_key, self._string, self._integer):
            try:
                key, end = alternative(start)
            except _NoMatch:
                continue
            return key, self._ws(end)
        self._fail(start, "a map key")
        raise AssertionError("unreachable")

    def _ident_key(self, pos: int) -> tuple:
        ident, end = self._ident(pos)
        return Str(ident), end

    def _string(self, pos: int) -> tuple:
        text = self.text
        start = self._tag(pos, '"')
        end = start
        while end < len(text):
            ch = text[end]
            if ch == "\\":
                if end + 1 < len(text) and text[end + 1] in _ESCAPE_CHARS:
                    end += 2
                    continue
                break
            if ord(ch) < 0x20 or ch == '"':
                break
            end += 1
        close = self._tag(end, '"')
        try:
            return Str(_unescape(text[start:end])), close
        except ValueError:
            self._fail(start, "a valid escaped string")
        raise AssertionError("unreachable")

    def _literal(self, pos: int) -> tuple:
        end = self._span(pos, lambda c: c.isascii() and c.isalnum())
        if end - pos <= _MAX_UINT_LEN:
            self._fail(pos, "a literal")
        return Literal(self.text[pos:end]), end

    def _integer(self, pos: int) -> tuple:
        text = self.text
        sign: Optional[str] = None
        if pos < len(text) and text[pos] in "+-":
            sign = text[pos]
            pos += 1
        parts = []
        end = self._span(pos, lambda c: c in _DEC_DIGITS)
        if end > pos:
            parts.append(text[pos:end])
            while end < len(text) and text[end] == "_":
                run_end = self._span(end + 1, lambda c: c in _DEC_DIGITS)
                if run_end == end + 1:
                    break
                parts.append(text[end + 1 : run_end])
                end = run_end
        digits = "".join(parts)
        if not digits:
            self._fail(pos, "digits")
        if sign is not None:
            number = int(sign + digits)
            if not _I128_MIN <= number <= _I128_MAX:
                self._fail(pos, "an integer within the i128 range")
            return Int(number), end
        number = int(digits)
        if number >= _U128_LIMIT:
            self._fail(pos, "an integer within the u128 range")
        return UInt(number), end

    def _bool(self, pos: int) -> tuple:
        if self.text.startswith("false", pos):
            return Bool(False), pos + 5
        if self.text.startswith("true", pos):
            return Bool(True), pos + 4
        self._fail(pos, "a bool")
        raise AssertionError("unreachable")

    def _char(self, pos: int) -> tuple:
        pos = self._tag(pos, "'")
        if pos >= len(self.text):
            self._fail(pos, "a character")
        ch = self.text[pos]
        end = self._tag(pos + 1, "'")
        return Char(ch), end

    def _unit_tuple(self, pos: int) -> tuple:
        ident, end = self._ident(pos)
        return Tuple(ident, ()), end
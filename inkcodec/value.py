"""Values of the SCALE object notation (SCON) and their text rendering."""

from __future__ import annotations

import string
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Optional

_HEX_DIGITS = frozenset(string.hexdigits)
_INDENT = "    "


def _strip_hex_prefix(text: str) -> str:
    while text.startswith("0x"):
        text = text[2:]
    return text


def decode_hex(text: str) -> bytes:
    """Decode a hex string, with or without ``0x`` prefixes, into bytes."""
    digits = _strip_hex_prefix(text)
    if len(digits) % 2:
        raise ValueError("Odd number of digits")
    for index, ch in enumerate(digits):
        if ch not in _HEX_DIGITS:
            raise ValueError(f"Invalid character {_char_debug(ch)} at position {index}")
    return bytes.fromhex(digits)


class Value:
    """Base class of every SCON value."""

    def __str__(self) -> str:
        return display(self)

    def __format__(self, spec: str) -> str:
        if spec == "":
            return display(self)
        if spec == "#":
            return display(self, alternate=True)
        raise ValueError(f"Unsupported format specifier {spec!r} for a SCON value")


@dataclass(frozen=True)
class Bool(Value):
    value: bool


@dataclass(frozen=True)
class Char(Value):
    value: str


@dataclass(frozen=True)
class UInt(Value):
    value: int


@dataclass(frozen=True)
class Int(Value):
    value: int


@dataclass(frozen=True)
class Str(Value):
    value: str


@dataclass(frozen=True)
class Literal(Value):
    value: str


@dataclass(frozen=True)
class Unit(Value):
    pass


@dataclass(frozen=True)
class Seq(Value):
    elems: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "elems", tuple(self.elems))

    def __len__(self) -> int:
        return len(self.elems)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.elems)

    def __getitem__(self, index: int) -> Value:
        return self.elems[index]


@dataclass(frozen=True)
class Tuple(Value):
    ident: Optional[str] = None
    values: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.values)


@dataclass(frozen=True)
class Map(Value):
    """An ordered map of values; equality takes the order of entries into account."""

    ident: Optional[str] = None
    entries: tuple = ()

    def __post_init__(self) -> None:
        pairs = self.entries.items() if isinstance(self.entries, Mapping) else self.entries
        # A repeated key keeps its first position and takes the last value.
        object.__setattr__(self, "entries", tuple(dict(pairs).items()))

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self.entries)

    def __getitem__(self, key: Value) -> Value:
        for k, v in self.entries:
            if k == key:
                return v
        raise KeyError(key)

    def get_by_str(self, key: str) -> Optional[Value]:
        """Return the value stored under the string key, or None."""
        wanted = Str(key)
        for k, v in self.entries:
            if k == wanted:
                return v
        return None

    def values(self) -> Iterator[Value]:
        return (v for _, v in self.entries)

    def items(self) -> Iterator[tuple]:
        return iter(self.entries)


@dataclass(frozen=True)
class Hex(Value):
    """Hex encoded bytes, keeping the digits as they were written."""

    s: str
    data: bytes

    @classmethod
    def from_str(cls, text: str) -> "Hex":
        digits = _strip_hex_prefix(text)
        return cls(digits, decode_hex(digits))

    def as_str(self) -> str:
        return self.s

    def __bytes__(self) -> bytes:
        return self.data


def display(value: Value, alternate: bool = False) -> str:
    """Render a value in human readable form; ``alternate`` pretty-prints it."""
    if isinstance(value, Str):
        return value.value
    return _show(value, alternate)


# --- rendering helpers --------------------------------------------------------

_ESCAPES = {"\t": "\\t", "\r": "\\r", "\n": "\\n", "\\": "\\\\", "\0": "\\0"}


def _escape(ch: str, quote: str) -> str:
    if ch in _ESCAPES:
        return _ESCAPES[ch]
    if ch == quote:
        return "\\" + ch
    if not ch.isprintable():
        return f"\\u{{{ord(ch):x}}}"
    return ch


def _char_debug(ch: str) -> str:
    return "'" + _escape(ch, "'") + "'"


def _str_debug(text: str) -> str:
    return '"' + "".join(_escape(ch, '"') for ch in text) + '"'


def _indent(text: str) -> str:
    return text.replace("\n", "\n" + _INDENT)


def _struct(name: str, fields: list, alt: bool) -> str:
    if not fields:
        return name
    if alt:
        body = "".join(f"\n{_INDENT}{_indent(k)}: {_indent(v)}," for k, v in fields)
        return f"{name} {{{body}\n}}"
    return f"{name} {{ " + ", ".join(f"{k}: {v}" for k, v in fields) + " }"


def _tuple(name: str, items: list, alt: bool) -> str:
    if not items:
        return name
    if alt:
        body = "".join(f"\n{_INDENT}{_indent(v)}," for v in items)
        return f"{name}({body}\n)"
    trailing = "," if len(items) == 1 and not name else ""
    return f"{name}(" + ", ".join(items) + trailing + ")"


def _list(items: list, alt: bool) -> str:
    if not items:
        return "[]"
    if alt:
        return "[" + "".join(f"\n{_INDENT}{_indent(v)}," for v in items) + "\n]"
    return "[" + ", ".join(items) + "]"


def _map(pairs: list, alt: bool) -> str:
    if not pairs:
        return "{}"
    if alt:
        body = "".join(f"\n{_INDENT}{_indent(k)}: {_indent(v)}," for k, v in pairs)
        return "{" + body + "\n}"
    return "{" + ", ".join(f"{k}: {v}" for k, v in pairs) + "}"


def _show(value: Value, alt: bool) -> str:
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, Char):
        return _char_debug(value.value)
    if isinstance(value, (UInt, Int)):
        return str(value.value)
    if isinstance(value, Map):
        if value.ident is not None:
            fields = [(display(k), _show(v, alt)) for k, v in value.entries]
            return _struct(value.ident, fields, alt)
        return _map([(_debug(k, alt), _show(v, alt)) for k, v in value.entries], alt)
    if isinstance(value, Tuple):
        return _tuple(value.ident or "", [_show(v, alt) for v in value.values], alt)
    if isinstance(value, (Str, Literal)):
        return value.value
    if isinstance(value, Seq):
        return _list([_show(v, alt) for v in value.elems], alt)
    if isinstance(value, Hex):
        return "0x" + value.data.hex()
    if isinstance(value, Unit):
        return "()"
    raise TypeError(f"Not a SCON value: {value!r}")


def _option_debug(ident: Optional[str], alt: bool) -> str:
    if ident is None:
        return "None"
    return _tuple("Some", [_str_debug(ident)], alt)


def _debug(value: Value, alt: bool) -> str:
    """Structural rendering, used for the keys of maps without an identifier."""
    if isinstance(value, Bool):
        return _tuple("Bool", ["true" if value.value else "false"], alt)
    if isinstance(value, Char):
        return _tuple("Char", [_char_debug(value.value)], alt)
    if isinstance(value, UInt):
        return _tuple("UInt", [str(value.value)], alt)
    if isinstance(value, Int):
        return _tuple("Int", [str(value.value)], alt)
    if isinstance(value, Map):
        inner = _map([(_debug(k, alt), _debug(v, alt)) for k, v in value.entries], alt)
        fields = [("ident", _option_debug(value.ident, alt)), ("map", inner)]
        return _tuple("Map", [_struct("Map", fields, alt)], alt)
    if isinstance(value, Tuple):
        inner = _list([_debug(v, alt) for v in value.values], alt)
        fields = [("ident", _option_debug(value.ident, alt)), ("values", inner)]
        return _tuple("Tuple", [_struct("Tuple", fields, alt)], alt)
    if isinstance(value, Str):
        return _tuple("String", [_str_debug(value.value)], alt)
    if isinstance(value, Seq):
        inner = _list([_debug(v, alt) for v in value.elems], alt)
        return _tuple("Seq", [_struct("Seq", [("elems", inner)], alt)], alt)
    if isinstance(value, Hex):
        return _tuple("Hex", ["0x" + value.data.hex()], alt)
    if isinstance(value, Literal):
        return _tuple("Literal", [_str_debug(value.value)], alt)
    if isinstance(value, Unit):
        return "Unit"
    raise TypeError(f"Not a SCON value: {value!r}")
"""A 32-byte account identifier with SS58 text encoding."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import Enum

_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_INDEX = {ch: i for i, ch in enumerate(_ALPHABET)}

_SUBSTRATE_SS58_PREFIX = 42
_CHECKSUM_LEN = 2
_BODY_LEN = 32


def b58encode(data: bytes) -> str:
    """Encode bytes as base58 using the Bitcoin alphabet."""
    zeros = len(data) - len(data.lstrip(b"\0"))
    number = int.from_bytes(data, "big")
    digits = []
    while number:
        number, rem = divmod(number, 58)
        digits.append(_ALPHABET[rem])
    return "1" * zeros + "".join(reversed(digits))


def b58decode(text: str) -> bytes:
    """Decode base58 text; raise ValueError on characters outside the alphabet."""
    number = 0
    for ch in text:
        try:
            number = number * 58 + _INDEX[ch]
        except KeyError:
            raise ValueError(f"Invalid base58 character {ch!r}") from None
    zeros = len(text) - len(text.lstrip("1"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big")
    return b"\0" * zeros + body


def ss58hash(data: bytes) -> bytes:
    """Blake2b-512 of the SS58 prefix followed by ``data``."""
    ctx = hashlib.blake2b(digest_size=64)
    ctx.update(b"SS58PRE")
    ctx.update(data)
    return ctx.digest()


class Ss58ErrorKind(Enum):
    BAD_BASE58 = "Base 58 requirement is violated"
    BAD_LENGTH = "Length is bad"
    INVALID_CHECKSUM = "Invalid checksum"
    INVALID_PREFIX = "Invalid SS58 prefix byte."


class FromSs58Error(ValueError):
    """Raised when a string is not a valid SS58 encoded account."""

    def __init__(self, kind: Ss58ErrorKind) -> None:
        super().__init__(kind.value)
        self.kind = kind


@dataclass(frozen=True, order=True)
class AccountId32:
    """A 32-byte cryptographic identifier."""

    data: bytes

    def __post_init__(self) -> None:
        data = bytes(self.data)
        if len(data) != _BODY_LEN:
            raise ValueError(f"AccountId32 needs exactly 32 bytes, got {len(data)}")
        object.__setattr__(self, "data", data)

    @classmethod
    def from_bytes(cls, data: bytes) -> "AccountId32":
        return cls(bytes(data))

    def encode(self) -> bytes:
        """SCALE encoding: the raw 32 bytes."""
        return self.data

    def __bytes__(self) -> bytes:
        return self.data

    def to_ss58check(self) -> str:
        payload = bytes([_SUBSTRATE_SS58_PREFIX]) + self.data
        payload += ss58hash(payload)[:_CHECKSUM_LEN]
        return b58encode(payload)

    @classmethod
    def from_ss58check(cls, text: str) -> "AccountId32":
        try:
            data = b58decode(text)
        except ValueError:
            raise FromSs58Error(Ss58ErrorKind.BAD_BASE58) from None
        if len(data) < 2:
            raise FromSs58Error(Ss58ErrorKind.BAD_LENGTH)
        if data[0] <= 63:
            prefix_len = 1
        elif data[0] <= 127:
            prefix_len = 2
        else:
            raise FromSs58Error(Ss58ErrorKind.INVALID_PREFIX)
        end = prefix_len + _BODY_LEN
        if len(data) != end + _CHECKSUM_LEN:
            raise FromSs58Error(Ss58ErrorKind.BAD_LENGTH)
        if data[end:] != ss58hash(data[:end])[:_CHECKSUM_LEN]:
            raise FromSs58Error(Ss58ErrorKind.INVALID_CHECKSUM)
        return cls(data[prefix_len:end])

    def __str__(self) -> str:
        return self.to_ss58check()
"""Custom encoders and decoders for environment types such as account ids and hashes."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Optional

from inkcodec.account_id import AccountId32, FromSs58Error
from inkcodec.registry import TranscodeError
from inkcodec.scale import ByteReader
from inkcodec.value import Hex, Literal, Str, Value

_log = logging.getLogger(__name__)


class CustomTypeEncoder(ABC):
    """Encodes a value of a specific registry type in a custom way."""

    @abstractmethod
    def encode_value(self, value: Value) -> bytes:
        """Return the SCALE encoding of ``value``."""


class CustomTypeDecoder(ABC):
    """Decodes a value of a specific registry type in a custom way."""

    @abstractmethod
    def decode_value(self, reader: ByteReader) -> Value:
        """Read one value from ``reader``."""


class AccountIdTranscoder(CustomTypeEncoder, CustomTypeDecoder):
    """Accepts and displays account ids as SS58 encoded literals."""

    def encode_value(self, value: Value) -> bytes:
        if isinstance(value, Literal):
            try:
                account = AccountId32.from_ss58check(value.value)
            except FromSs58Error as exc:
                raise TranscodeError(
                    f"Error parsing AccountId from literal `{value.value}`: {exc}"
                ) from exc
        elif isinstance(value, Str):
            try:
                account = AccountId32.from_ss58check(value.value)
            except FromSs58Error as exc:
                raise TranscodeError(
                    f"Error parsing AccountId from string '{value.value}': {exc}"
                ) from exc
        elif isinstance(value, Hex):
            try:
                account = AccountId32.from_bytes(value.data)
            except ValueError:
                listed = ", ".join(str(b) for b in value.data)
                raise TranscodeError(
                    f"Error converting hex bytes `[{listed}]` to AccountId"
                ) from None
        else:
            raise TranscodeError("Expected a string or a literal for an AccountId")
        return account.encode()

    def decode_value(self, reader: ByteReader) -> Value:
        account = AccountId32(reader.read(32))
        return Literal(account.to_ss58check())


class HashDecoder(CustomTypeDecoder):
    """Displays 32-byte hashes as hex strings."""

    def decode_value(self, reader: ByteReader) -> Value:
        data = reader.read(32)
        return Hex.from_str("0x" + data.hex())


class EnvTypesTranscoder:
    """Dispatches encoding and decoding of registered type ids to custom codecs."""

    def __init__(
        self,
        encoders: Optional[Mapping[int, CustomTypeEncoder]] = None,
        decoders: Optional[Mapping[int, CustomTypeDecoder]] = None,
    ) -> None:
        self.encoders = dict(encoders or {})
        self.decoders = dict(decoders or {})

    def try_encode(self, type_id: int, value: Value, output: bytearray) -> bool:
        """Encode with a custom encoder into ``output``; False if none is registered."""
        encoder = self.encoders.get(type_id)
        if encoder is None:
            return False
        _log.debug("Encoding type %r with custom encoder", type_id)
        try:
            encoded = encoder.encode_value(value)
        except TranscodeError as exc:
            raise TranscodeError(f"Error encoding custom type: {exc}") from exc
        output.extend(encoded)
        return True

    def try_decode(self, type_id: int, reader: ByteReader) -> Optional[Value]:
        """Decode with a custom decoder; None if none is registered."""
        decoder = self.decoders.get(type_id)
        if decoder is None:
            _log.debug("No custom decoder found for type %r", type_id)
            return None
        _log.debug("Decoding type %r with custom decoder", type_id)
        return decoder.decode_value(reader)
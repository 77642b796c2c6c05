"""Decoding of SCALE encoded bytes into SCON values, driven by type metadata."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional

from inkcodec.env_types import EnvTypesTranscoder
from inkcodec.registry import (
    ArrayDef,
    BitSequenceDef,
    CompactDef,
    CompositeDef,
    CompositeTypeFields,
    Field,
    FieldsKind,
    Primitive,
    SequenceDef,
    TranscodeError,
    TupleDef,
    TypeInfo,
    TypeRegistry,
    VariantDef,
)
from inkcodec.scale import ByteReader, decode_compact, decode_int, decode_str
from inkcodec.value import Bool, Int, Map, Seq, Str, Tuple, UInt, Value

_log = logging.getLogger(__name__)

_UNSIGNED_BITS = {
    Primitive.U8: 8,
    Primitive.U16: 16,
    Primitive.U32: 32,
    Primitive.U64: 64,
    Primitive.U128: 128,
}
_SIGNED = frozenset(
    {Primitive.I8, Primitive.I16, Primitive.I32, Primitive.I64, Primitive.I128}
)


def _primitive_debug(primitive: Primitive) -> str:
    return primitive.name.capitalize()


def _read_compact(reader: ByteReader, bits: int) -> int:
    number = decode_compact(reader)
    if number >= 1 << bits:
        raise TranscodeError("out of range decoding Compact")
    return number


class Decoder:
    """Decodes values of registry types, consulting custom decoders first."""

    def __init__(self, registry: TypeRegistry, env_types: EnvTypesTranscoder) -> None:
        self.registry = registry
        self.env_types = env_types

    def _resolve(self, type_id: int) -> TypeInfo:
        ty = self.registry.resolve(type_id)
        if ty is None:
            raise TranscodeError(f"Failed to resolve type with id `{type_id}`")
        return ty

    def decode(self, type_id: int, reader: ByteReader) -> Value:
        """Read one value of the type ``type_id`` from ``reader``."""
        ty = self._resolve(type_id)
        _log.debug(
            "Decoding input with type id `%r` and definition `%r`", type_id, ty
        )
        custom = self.env_types.try_decode(type_id, reader)
        if custom is not None:
            return custom
        return self._decode_type(type_id, ty, reader)

    def _decode_seq(self, type_id: int, length: int, reader: ByteReader) -> Value:
        ty = self.registry.resolve(type_id)
        if ty is None:
            raise TranscodeError(f"Failed to find type with id '{type_id}'")
        return Seq([self._decode_type(type_id, ty, reader) for _ in range(length)])

    def _decode_type(self, type_id: int, ty: TypeInfo, reader: ByteReader) -> Value:
        try:
            return self._decode_def(ty, reader)
        except TranscodeError as exc:
            path = "::".join(ty.path)
            raise TranscodeError(f"Error decoding type {type_id}: {path}") from exc

    def _decode_def(self, ty: TypeInfo, reader: ByteReader) -> Value:
        type_def = ty.type_def
        if isinstance(type_def, CompositeDef):
            ident = ty.path[-1] if ty.path else None
            return self.decode_composite(ident, type_def.fields, reader)
        if isinstance(type_def, TupleDef):
            return Tuple(None, [self.decode(field, reader) for field in type_def.fields])
        if isinstance(type_def, VariantDef):
            return self._decode_variant(type_def, reader)
        if isinstance(type_def, ArrayDef):
            return self._decode_seq(type_def.type_param, type_def.length, reader)
        if isinstance(type_def, SequenceDef):
            length = _read_compact(reader, 32)
            return self._decode_seq(type_def.type_param, length, reader)
        if isinstance(type_def, Primitive):
            return self._decode_primitive(type_def, reader)
        if isinstance(type_def, CompactDef):
            return self._decode_compact(type_def, reader)
        if isinstance(type_def, BitSequenceDef):
            raise TranscodeError("bitvec decoding not yet supported")
        raise TranscodeError(f"Unknown type definition {type_def!r}")

    def decode_composite(
        self, ident: Optional[str], fields: Iterable[Field], reader: ByteReader
    ) -> Value:
        """Decode the fields of a struct into a Map (named) or a Tuple (unnamed)."""
        struct_type = CompositeTypeFields.from_fields(fields)
        if struct_type.kind is FieldsKind.NAMED:
            entries = [
                (Str(field.name), self.decode(field.type_id, reader))
                for field in struct_type
            ]
            return Map(ident, entries)
        if struct_type.kind is FieldsKind.UNNAMED:
            return Tuple(ident, [self.decode(field.type_id, reader) for field in struct_type])
        return Tuple(ident, ())

    def _decode_variant(self, variant_def: VariantDef, reader: ByteReader) -> Value:
        discriminant = reader.read_byte()
        variant = next(
            (v for v in variant_def.variants if v.index == discriminant), None
        )
        if variant is None:
            raise TranscodeError(f"No variant found with discriminant {discriminant}")
        named = []
        unnamed = []
        for field in variant.fields:
            value = self.decode(field.type_id, reader)
            if field.name is not None:
                named.append((Str(field.name), value))
            else:
                unnamed.append(value)
        if named and unnamed:
            raise TranscodeError(
                "Variant must have either all named or all unnamed fields"
            )
        if named:
            return Map(variant.name, named)
        return Tuple(variant.name, unnamed)

    def _decode_primitive(self, primitive: Primitive, reader: ByteReader) -> Value:
        if primitive is Primitive.BOOL:
            byte = reader.read_byte()
            if byte > 1:
                raise TranscodeError("Invalid boolean representation")
            return Bool(byte == 1)
        if primitive is Primitive.CHAR:
            raise TranscodeError("scale codec not implemented for char")
        if primitive is Primitive.STR:
            return Str(decode_str(reader))
        if primitive in _UNSIGNED_BITS:
            return UInt(decode_int(reader, primitive))
        if primitive in _SIGNED:
            return Int(decode_int(reader, primitive))
        raise TranscodeError(f"{primitive.name} currently not supported")

    def _decode_compact_primitive(
        self, primitive: Primitive, reader: ByteReader
    ) -> Value:
        bits = _UNSIGNED_BITS.get(primitive)
        if bits is None:
            raise TranscodeError(
                f"{_primitive_debug(primitive)} not supported. "
                "Expected unsigned int primitive."
            )
        return UInt(_read_compact(reader, bits))

    def _decode_compact(self, compact: CompactDef, reader: ByteReader) -> Value:
        ty = self._resolve(compact.type_param)
        type_def = ty.type_def
        if isinstance(type_def, Primitive):
            return self._decode_compact_primitive(type_def, reader)
        if isinstance(type_def, CompositeDef):
            if len(type_def.fields) != 1:
                raise TranscodeError("Composite type must have a single field")
            (field,) = type_def.fields
            field_ty = self._resolve(field.type_id)
            if not isinstance(field_ty.type_def, Primitive):
                raise TranscodeError(
                    "Composite type must have a single primitive field"
                )
            ident = ty.path[-1] if ty.path else None
            value = self._decode_compact_primitive(field_ty.type_def, reader)
            if field.name is not None:
                return Map(ident, [(Str(field.name), value)])
            return Tuple(ident, [value])
        raise TranscodeError("Compact type must be a primitive or a composite type")
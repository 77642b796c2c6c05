"""Type metadata used to drive SCALE encoding and decoding."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class TranscodeError(Exception):
    """Raised when a value cannot be encoded or decoded for a type."""


class Primitive(Enum):
    """Primitive types known to the SCALE codec."""

    BOOL = "bool"
    CHAR = "char"
    STR = "str"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    U256 = "u256"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    I128 = "i128"
    I256 = "i256"


@dataclass(frozen=True)
class Field:
    """A field of a composite type or of an enum variant."""

    type_id: int
    name: Optional[str] = None
    type_name: Optional[str] = None


@dataclass(frozen=True)
class Variant:
    """One variant of an enum type."""

    name: str
    index: int
    fields: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))


@dataclass(frozen=True)
class CompositeDef:
    """A struct: named or unnamed fields."""

    fields: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))


@dataclass(frozen=True)
class VariantDef:
    """An enum: a list of variants, each with its own index."""

    variants: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "variants", tuple(self.variants))


@dataclass(frozen=True)
class ArrayDef:
    """A fixed length array of one element type."""

    length: int
    type_param: int


@dataclass(frozen=True)
class SequenceDef:
    """A length prefixed sequence of one element type."""

    type_param: int


@dataclass(frozen=True)
class TupleDef:
    """An anonymous tuple; ``fields`` holds the type ids of its elements."""

    fields: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))


@dataclass(frozen=True)
class CompactDef:
    """A compact encoded integer, or a single-field struct wrapping one."""

    type_param: int


@dataclass(frozen=True)
class BitSequenceDef:
    """A bit sequence with its storage and order types."""

    store_type: int
    order_type: int


TypeDef = Union[
    CompositeDef,
    VariantDef,
    ArrayDef,
    SequenceDef,
    TupleDef,
    Primitive,
    CompactDef,
    BitSequenceDef,
]


@dataclass(frozen=True)
class TypeInfo:
    """A type definition together with its path, e.g. ``("sp_core", "crypto", "AccountId32")``."""

    type_def: TypeDef
    path: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))


class TypeRegistry:
    """Types addressed by consecutive integer ids."""

    def __init__(self) -> None:
        self._types: list = []

    def add(self, type_def: TypeDef, path: Iterable[str] = ()) -> int:
        """Add a type and return its id. Ids of types not yet added may be referenced."""
        self._types.append(TypeInfo(type_def, tuple(path)))
        return len(self._types) - 1

    def resolve(self, type_id: int) -> Optional[TypeInfo]:
        """Return the type with the given id, or None when there is none."""
        if 0 <= type_id < len(self._types):
            return self._types[type_id]
        return None

    def items(self) -> Iterator[tuple]:
        """Iterate over ``(type_id, TypeInfo)`` pairs in id order."""
        return iter(enumerate(self._types))

    def __len__(self) -> int:
        return len(self._types)


class FieldsKind(Enum):
    NAMED = "named"
    UNNAMED = "unnamed"
    NO_FIELDS = "no_fields"


@dataclass(frozen=True)
class CompositeTypeFields:
    """The fields of a composite, classified as all named, all unnamed or none."""

    kind: FieldsKind
    fields: tuple = ()

    @classmethod
    def from_fields(cls, fields: Iterable[Field]) -> "CompositeTypeFields":
        fields = tuple(fields)
        if not fields:
            return cls(FieldsKind.NO_FIELDS, ())
        if all(f.name is not None for f in fields):
            return cls(FieldsKind.NAMED, fields)
        if all(f.name is None for f in fields):
            return cls(FieldsKind.UNNAMED, fields)
        raise TranscodeError("Struct fields should either be all named or all unnamed")

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)
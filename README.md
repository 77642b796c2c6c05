# inkcodec

Turn SCALE-encoded smart contract data into readable values, using a type
registry as the guide. Also parse and print those values in SCON (SCALE Object
Notation). SCON looks like the literal syntax used to build values in contract
source code:

```
Foo { a: false, b: [0, 1, 2], c: "bar", d: (0, 1) }
```

## Modules

- `inkcodec.value`: the SCON value model. The types are `Bool`, `Char`, `UInt`,
  `Int`, `Str`, `Literal`, `Unit`, `Seq`, `Tuple`, `Map` (ordered; equality
  depends on entry order) and `Hex`. `display(value, alternate=False)` renders a
  value, indented when `alternate` is true. `format(value, "#")` does the same.
  `decode_hex(text)` decodes hex with or without a `0x` prefix.
- `inkcodec.scon_parse`: `parse_value(text)` parses SCON text into a `Value`.
  It raises `SconParseError` (a `ValueError`) when the text is not valid.
- `inkcodec.registry`: type definitions and the `TypeRegistry` that stores them
  under consecutive integer ids. The definitions are `CompositeDef`,
  `VariantDef`, `ArrayDef`, `SequenceDef`, `TupleDef`, `CompactDef`,
  `BitSequenceDef` and the `Primitive` enum. `TranscodeError` and
  `CompositeTypeFields` also live here.
- `inkcodec.scale`: low-level SCALE helpers. `ByteReader` reads bytes from a
  buffer. The codec functions are `encode_compact` / `decode_compact`,
  `encode_str` / `decode_str` and `encode_int` / `decode_int`.
- `inkcodec.account_id`: `AccountId32`, which encodes to and decodes from SS58
  with `to_ss58check` and `from_ss58check`. Bad input raises `FromSs58Error`,
  whose `kind` is an `Ss58ErrorKind`. The helpers `b58encode`, `b58decode` and
  `ss58hash` are also here.
- `inkcodec.env_types`: custom codecs. `AccountIdTranscoder` handles account ids
  as SS58 literals. `HashDecoder` shows 32-byte hashes as `Hex`.
  `EnvTypesTranscoder` sends each registered type id to its custom codec.
- `inkcodec.decode`: `Decoder`, which reads values of registry types from a
  `ByteReader` and checks the custom decoders first.

## Example

```python
from inkcodec.decode import Decoder
from inkcodec.env_types import EnvTypesTranscoder
from inkcodec.registry import Primitive, SequenceDef, TypeRegistry
from inkcodec.scale import ByteReader, encode_compact, encode_int

registry = TypeRegistry()
u32 = registry.add(Primitive.U32)
vec_u32 = registry.add(SequenceDef(u32))

data = encode_compact(3) + b"".join(encode_int(n, Primitive.U32) for n in (1, 2, 3))

decoder = Decoder(registry, EnvTypesTranscoder())
print(decoder.decode(vec_u32, ByteReader(data)))  # [1, 2, 3]
```

Parsing and printing SCON:

```python
from inkcodec.scon_parse import parse_value
from inkcodec.value import display

value = parse_value('M { a: 1 }')
print(display(value))                  # M { a: 1 }
print(display(value, alternate=True))  # M {\n    a: 1,\n}
```

Account ids:

```python
from inkcodec.account_id import AccountId32

account = AccountId32.from_ss58check("5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY")
assert account.to_ss58check() == "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"
```

To have account ids or hashes decoded in their readable form, register the
custom decoders under the registry ids of those types. For example:
`EnvTypesTranscoder(decoders={account_type_id: AccountIdTranscoder()})`.

## What it does not do

The package does not encode a SCON `Value` against a type from the registry.
There is no registry-driven encoder and no builder that finds custom codecs by
type path. To encode, call the `inkcodec.scale` functions,
`AccountId32.encode`, `AccountIdTranscoder.encode_value` or
`EnvTypesTranscoder.try_encode` yourself.

Bit sequences, `char`, and 256-bit integers cannot be decoded. Trying raises
`TranscodeError`.

## Errors

Decoding raises `inkcodec.registry.TranscodeError` in three cases: the bytes do
not match the expected layout, a type id does not resolve, or a type is not
supported. The message explains the problem. Errors in inner types are chained
to the outer error with `raise ... from`.

## Running the tests

```
pip install -e .[test]
pytest
```
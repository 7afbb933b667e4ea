"""
Type system: thrift IDL type names mapped to Rust types and to the
serialization protocol's read/write operations.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .errors import UnmappedTypeError


class Primitive(Enum):
    BOOL   = "bool"
    BYTE   = "byte"
    I8     = "i8"
    I16    = "i16"
    I32    = "i32"
    I64    = "i64"
    DOUBLE = "double"
    STRING = "string"
    BINARY = "binary"
    VOID   = "void"


@dataclass(frozen=True)
class NamedType:
    """A user-defined type (struct, enum, typedef, ...) referenced by name."""
    name: str


Ty = Union[Primitive, NamedType]


# IDL primitive → Rust type name.
RUST_TYPES = {
    Primitive.BOOL:   "bool",
    Primitive.BYTE:   "i8",
    Primitive.I8:     "i8",
    Primitive.I16:    "i16",
    Primitive.I32:    "i32",
    Primitive.I64:    "i64",
    Primitive.DOUBLE: "f64",
    Primitive.STRING: "String",
    Primitive.BINARY: "Vec<u8>",
    Primitive.VOID:   "()",
}

# IDL primitive → protocol suffix for serialize_*/deserialize_*.
# void has no wire form.
PROTOCOL_NAMES = {
    Primitive.BOOL:   "bool",
    Primitive.BYTE:   "i8",
    Primitive.I8:     "i8",
    Primitive.I16:    "i16",
    Primitive.I32:    "i32",
    Primitive.I64:    "i64",
    Primitive.DOUBLE: "f64",
    Primitive.STRING: "str",
    Primitive.BINARY: "bytes",
}

_BY_SPELLING = {p.value: p for p in Primitive}


def parse_ty(spelling: str) -> Ty:
    """Resolve a raw type spelling to a primitive or a named type."""
    return _BY_SPELLING.get(spelling) or NamedType(spelling)


def is_primitive(spelling: str) -> bool:
    return isinstance(parse_ty(spelling), Primitive)


def _primitive(spelling: str, table: dict, what: str) -> str:
    ty = parse_ty(spelling)
    if ty not in table:
        raise UnmappedTypeError(f"no {what} for type {spelling!r}")
    return table[ty]


def to_rust(spelling: str) -> str:
    """Map a primitive IDL type to its Rust spelling."""
    return _primitive(spelling, RUST_TYPES, "Rust type")


def to_protocol(spelling: str) -> str:
    """Name of the protocol write operation for a primitive IDL type."""
    return "serialize_" + _primitive(spelling, PROTOCOL_NAMES, "protocol write")


def read_expr(spelling: str) -> str:
    """Rust expression that reads a primitive IDL type off a deserializer ``de``."""
    return f"de.deserialize_{_primitive(spelling, PROTOCOL_NAMES, 'protocol read')}()"


def rust_type(spelling: str) -> str:
    """
    Rust spelling for any IDL type.

    Primitives go through ``to_rust``; named types are user-defined items in
    the same generated module and keep their IDL name.
    """
    ty = parse_ty(spelling)
    if isinstance(ty, NamedType):
        return ty.name
    return to_rust(spelling)


def const_type(spelling: str, value) -> str:
    """
    Rust type for a ``const`` declaration holding ``value``.

    A number literal only has a Rust spelling for primitive types; a named
    type given a number raises UnmappedTypeError.
    """
    if isinstance(value, int) and not is_primitive(spelling):
        raise UnmappedTypeError(f"no Rust literal for number {value} of type {spelling!r}")
    return rust_type(spelling)

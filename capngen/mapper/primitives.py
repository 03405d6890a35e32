"""Closed table of Go primitive types and their Cap'n Proto counterparts."""

from typing import Optional

GO_TO_CAPNP = {
    "bool": "Bool",
    "int8": "Int8",
    "int16": "Int16",
    "int32": "Int32",
    "rune": "Int32",
    "int64": "Int64",
    "int": "Int64",
    "uint8": "UInt8",
    "byte": "UInt8",
    "uint16": "UInt16",
    "uint32": "UInt32",
    "uint64": "UInt64",
    "uint": "UInt64",
    "float32": "Float32",
    "float64": "Float64",
    "string": "Text",
}

# []byte collapses to Data instead of List(UInt8)
BLOB_ELEMENT = "byte"
BLOB_IDL = "Data"

# Go type returned/accepted by the capn accessors of each scalar
CAPNP_GO_TYPE = {
    "Bool": "bool",
    "Int8": "int8",
    "Int16": "int16",
    "Int32": "int32",
    "Int64": "int64",
    "UInt8": "uint8",
    "UInt16": "uint16",
    "UInt32": "uint32",
    "UInt64": "uint64",
    "Float32": "float32",
    "Float64": "float64",
    "Text": "string",
    "Data": "[]byte",
}

# capn list type holding elements of each scalar
CAPNP_LIST_TYPE = {
    "Bool": "BitList",
    "Int8": "Int8List",
    "Int16": "Int16List",
    "Int32": "Int32List",
    "Int64": "Int64List",
    "UInt8": "UInt8List",
    "UInt16": "UInt16List",
    "UInt32": "UInt32List",
    "UInt64": "UInt64List",
    "Float32": "Float32List",
    "Float64": "Float64List",
    "Text": "TextList",
    "Data": "DataList",
}

RESERVED_WORDS = frozenset({
    # builtin types
    "Void", "Bool", "Int8", "Int16", "Int32", "Int64",
    "UInt8", "UInt16", "UInt32", "UInt64", "Float32", "Float64",
    "Text", "Data", "List", "AnyPointer", "AnyStruct", "Capability",
    # keywords
    "struct", "union", "group", "enum", "interface", "annotation",
    "const", "using", "import", "extends", "true", "false", "inf", "nan",
    "void",
})


def map_primitive(name: str) -> Optional[str]:
    return GO_TO_CAPNP.get(name)


def is_primitive(name: str) -> bool:
    return name in GO_TO_CAPNP


def is_reserved(identifier: str) -> bool:
    return identifier in RESERVED_WORDS


def capnp_go_type(idl_scalar: str) -> str:
    return CAPNP_GO_TYPE[idl_scalar]


def capnp_list_type(idl_scalar: str) -> str:
    return CAPNP_LIST_TYPE[idl_scalar]


def iter_primitives():
    """Return the supported Go primitive names in table order."""
    return tuple(GO_TO_CAPNP)

from .mapped_type import Kind, MappedType
from .primitives import (BLOB_ELEMENT, BLOB_IDL, GO_TO_CAPNP, RESERVED_WORDS,
                         is_primitive, is_reserved, map_primitive)
from .type_registry import EntryKind, RegistryEntry, TypeRegistry

__all__ = [
    'BLOB_ELEMENT',
    'BLOB_IDL',
    'EntryKind',
    'GO_TO_CAPNP',
    'Kind',
    'MappedType',
    'RESERVED_WORDS',
    'RegistryEntry',
    'TypeRegistry',
    'is_primitive',
    'is_reserved',
    'map_primitive',
]

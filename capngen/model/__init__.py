from .field_info import UNRESOLVED, FieldDescriptor
from .field_order import resolve_order
from .struct_info import StructDescriptor, StructState
from .type_sequence import ListOf, Named, Pointer, TypeSequence, TypeToken

__all__ = [
    'UNRESOLVED',
    'FieldDescriptor',
    'ListOf',
    'Named',
    'Pointer',
    'StructDescriptor',
    'StructState',
    'TypeSequence',
    'TypeToken',
    'resolve_order',
]

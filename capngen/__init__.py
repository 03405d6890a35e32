from .capngen import Capngen, GeneratedCode
from .errors import (AnnotationError, CapngenError, CapnpCompileError,
                     DescriptorError, FieldOrderError, ReservedWordError,
                     StructStateError, TypeSequenceError, UnsupportedTypeError)
from .extractor import Extractor
from .options import GeneratorOptions

__all__ = [
    'AnnotationError',
    'Capngen',
    'CapngenError',
    'CapnpCompileError',
    'DescriptorError',
    'Extractor',
    'FieldOrderError',
    'GeneratedCode',
    'GeneratorOptions',
    'ReservedWordError',
    'StructStateError',
    'TypeSequenceError',
    'UnsupportedTypeError',
]

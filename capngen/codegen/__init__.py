from .conversions import capn_to_go_name, go_to_capn_name
from .list_helpers import HelperCache, HelperPair, ListHelperGenerator
from .schema_writer import SchemaWriter
from .translator import TranslatorWriter

__all__ = [
    'HelperCache',
    'HelperPair',
    'ListHelperGenerator',
    'SchemaWriter',
    'TranslatorWriter',
    'capn_to_go_name',
    'go_to_capn_name',
]

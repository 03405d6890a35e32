from typing import Iterable

from capngen import logging as capngen_logging
from capngen.extractor import Extractor

from .reports import (AliasReport, Declaration, FieldReport, SourceUnit,
                      StructReport)

logger = capngen_logging.get_logger(__name__)


def feed(extractor: Extractor, declarations: Iterable[Declaration]) -> int:
    """Report ``declarations`` to ``extractor``; returns the number of structs.

    Aliases are reported and struct names reserved before any struct is
    opened, so that fields may use a named type declared further down the
    file.
    """
    declarations = list(declarations)
    for decl in declarations:
        if isinstance(decl, AliasReport):
            extractor.report_alias(decl.name, decl.target)
    for decl in declarations:
        if isinstance(decl, StructReport):
            extractor.declare_struct(decl.name, decl.comment, decl.rename)

    count = 0
    for decl in declarations:
        if not isinstance(decl, StructReport):
            continue
        extractor.open_struct(decl.name, decl.comment, decl.rename)
        for fld in decl.fields:
            extractor.report_field(
                fld.name,
                fld.type,
                tag=fld.tag,
                rename=fld.rename,
                order=fld.order,
                skip=fld.skip,
                embedded=fld.embedded,
                fixed_array=fld.fixed_array,
                struct_name=decl.name,
            )
        extractor.close_struct(decl.name)
        count += 1
    logger.debug("fed %d struct(s) into the extractor", count)
    return count


__all__ = [
    'AliasReport',
    'Declaration',
    'FieldReport',
    'SourceUnit',
    'StructReport',
    'feed',
]

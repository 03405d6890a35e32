"""Go marshaling code emission (pass two)."""

from typing import Iterable

from capngen import logging as capngen_logging
from capngen.codegen.conversions import (capn_to_go_name, go_to_capn_name,
                                         to_host_expr, to_idl_expr)
from capngen.codegen.go_templates import (StructTranslatorContext,
                                          TranslatorHeaderContext,
                                          render_struct_translator,
                                          render_translator_header)
from capngen.codegen.list_helpers import ListHelperGenerator
from capngen.mapper.mapped_type import Kind
from capngen.model.field_info import FieldDescriptor
from capngen.model.struct_info import StructDescriptor
from capngen.naming import uppercase_first

logger = capngen_logging.get_logger(__name__)


def to_capn_lines(field: FieldDescriptor) -> list[str]:
    mapped = field.mapped
    assert mapped is not None, f"field {field.host_name} was never mapped"
    host_expr = f"src.{field.host_name}"
    setter = f"dest.Set{uppercase_first(field.idl_name)}"
    if mapped.pointer:
        call = f"{setter}({to_idl_expr(mapped, host_expr)})"
        return [f"if {host_expr} != nil {{", f"\t{call}", "}"]
    if field.fixed_array:
        host_expr += "[:]"
    return [f"{setter}({to_idl_expr(mapped, host_expr)})"]


def to_go_lines(field: FieldDescriptor) -> list[str]:
    mapped = field.mapped
    assert mapped is not None, f"field {field.host_name} was never mapped"
    target = f"dest.{field.host_name}"
    value = to_host_expr(mapped, f"src.{uppercase_first(field.idl_name)}()")
    if mapped.pointer and mapped.kind == Kind.SCALAR:
        return ["{", f"\tv := {value}", f"\t{target} = &v", "}"]
    if field.fixed_array:
        return [f"copy({target}[:], {value})"]
    return [f"{target} = {value}"]


class TranslatorWriter:
    def __init__(self, package: str):
        self.package = package

    def render_struct(self, struct: StructDescriptor) -> str:
        to_go: list[str] = []
        to_capn: list[str] = []
        for field in struct.fields_by_final_order():
            to_go.extend(to_go_lines(field))
            to_capn.extend(to_capn_lines(field))
        return render_struct_translator(
            StructTranslatorContext.create(
                host_name=struct.host_name,
                idl_name=struct.idl_name,
                capn_to_go=capn_to_go_name(struct.host_name),
                go_to_capn=go_to_capn_name(struct.host_name),
                to_go_lines=to_go,
                to_capn_lines=to_capn,
            )
        )

    def render(self, structs: Iterable[StructDescriptor], helpers: ListHelperGenerator) -> str:
        """Header, per-struct converters, then every list helper.

        Field order must already be resolved.
        """
        structs = list(structs)
        sections = [render_translator_header(TranslatorHeaderContext(self.package, bool(structs)))]
        sections.extend(self.render_struct(struct) for struct in structs)
        sections.extend(helpers.dump())
        logger.debug(
            "rendered translator with %d struct(s) and %d helper pair(s)",
            len(structs), len(helpers.cache),
        )
        return "\n\n".join(sections) + "\n"

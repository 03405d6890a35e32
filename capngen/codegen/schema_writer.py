"""Cap'n Proto schema emission (pass one)."""

from typing import Iterable

from capngen import logging as capngen_logging
from capngen.codegen.go_templates import (SchemaContext, SchemaStructBlock,
                                          render_schema)
from capngen.model.field_order import resolve_order
from capngen.model.struct_info import StructDescriptor

logger = capngen_logging.get_logger(__name__)

DEFAULT_FIELD_PREFIX = "   "


def pad_spaces(longest: int, length: int) -> str:
    if length >= longest:
        return ""
    return " " * (longest - length)


def extra_spaces(position: int) -> str:
    if position < 10:
        return "  "
    if position < 100:
        return " "
    return ""


def format_schema_id(schema_id: int) -> str:
    return f"0x{schema_id:016x}"


class SchemaWriter:
    def __init__(
        self,
        package: str,
        import_path: str,
        schema_id: int,
        field_prefix: str = DEFAULT_FIELD_PREFIX,
    ):
        self.package = package
        self.import_path = import_path
        self.schema_id = schema_id
        self.field_prefix = field_prefix

    def struct_lines(self, struct: StructDescriptor) -> tuple[str, ...]:
        lines = []
        for position, field in enumerate(struct.fields_by_final_order()):
            spaces = pad_spaces(struct.longest_field, len(field.idl_name))
            lines.append(
                f"{self.field_prefix}{field.idl_name}  {spaces}@{field.final_order}: "
                f"{extra_spaces(position)}{field.display_type};"
            )
        return tuple(lines)

    def render(self, structs: Iterable[StructDescriptor], header: bool = True) -> str:
        """Resolve field order of every struct, then render the schema text.

        ``structs`` must already be sorted the way they should appear.
        """
        blocks = []
        for struct in structs:
            resolve_order(struct)
            blocks.append(SchemaStructBlock(struct.idl_name, self.struct_lines(struct)))
        logger.debug("rendered schema with %d struct(s)", len(blocks))
        return render_schema(
            SchemaContext(
                schema_id=format_schema_id(self.schema_id),
                package=self.package,
                import_path=self.import_path,
                structs=tuple(blocks),
                header=header,
            )
        ) + "\n"

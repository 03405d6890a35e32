"""Ingestion of struct declarations into the intermediate model."""

from typing import Optional, Union

from capngen import logging as capngen_logging
from capngen.codegen.list_helpers import ListHelperGenerator
from capngen.codegen.schema_writer import SchemaWriter
from capngen.codegen.translator import TranslatorWriter
from capngen.errors import AnnotationError, StructStateError, UnsupportedTypeError
from capngen.mapper.type_mapper import TypeMapper
from capngen.mapper.type_registry import EntryKind, TypeRegistry
from capngen.model.field_info import FieldDescriptor
from capngen.model.field_order import resolve_order
from capngen.model.struct_info import StructDescriptor
from capngen.model.type_sequence import TypeSequence
from capngen.naming import (derive_field_name, derive_struct_name,
                            parse_field_tag, parse_order_value)
from capngen.options import GeneratorOptions
from capngen.utils import derive_schema_id

logger = capngen_logging.get_logger(__name__)

HostType = Union[TypeSequence, str]


def _as_sequence(host_type: HostType) -> TypeSequence:
    if isinstance(host_type, TypeSequence):
        return host_type
    return TypeSequence.parse(host_type)


class Extractor:
    """Accumulates structs reported one field at a time.

    Every struct goes through OPEN -> ACCUMULATING -> CLOSED and only one
    struct may be open at a time. The registry and helper cache live as long
    as the extractor, so later structs may refer to earlier ones and share
    list helpers with them.
    """

    def __init__(
        self,
        options: Optional[GeneratorOptions] = None,
        registry: Optional[TypeRegistry] = None,
        helpers: Optional[ListHelperGenerator] = None,
    ):
        self.options = options or GeneratorOptions()
        self.registry = registry if registry is not None else TypeRegistry()
        self.helpers = helpers if helpers is not None else ListHelperGenerator()
        self.mapper = TypeMapper(self.registry, self.helpers, self.options.struct_suffix)
        self._structs: dict[str, StructDescriptor] = {}
        self._idl_owners: dict[str, str] = {}
        self._current: Optional[StructDescriptor] = None

    @property
    def structs(self) -> dict[str, StructDescriptor]:
        return dict(self._structs)

    @property
    def current(self) -> Optional[StructDescriptor]:
        return self._current

    def declare_struct(self, host_name: str, comment: str = "", rename: Optional[str] = None) -> str:
        """Reserve the capnp name of a struct that is opened later.

        Fields mapped before the struct itself is reported then refer to it by
        its final name, ``capname`` renames included.
        """
        entry = self.registry.lookup(host_name)
        if entry is not None and entry.kind != EntryKind.PLACEHOLDER:
            return entry.idl_name
        idl_name = derive_struct_name(host_name, comment, self.options.struct_suffix, rename)
        if entry is not None and entry.idl_name != idl_name:
            raise AnnotationError(
                f"struct '{host_name}' was referenced as '{entry.idl_name}' before it was "
                f"declared as '{idl_name}'")
        self.registry.register_placeholder(host_name, idl_name)
        return idl_name

    def open_struct(self, host_name: str, comment: str = "", rename: Optional[str] = None) -> StructDescriptor:
        if self._current is not None:
            raise StructStateError(
                f"cannot open struct '{host_name}' while struct '{self._current.host_name}' is still open")
        if host_name in self._structs:
            raise StructStateError(f"struct '{host_name}' was already reported")
        entry = self.registry.lookup(host_name)
        if entry is not None and entry.kind in (EntryKind.ALIAS, EntryKind.PRIMITIVE):
            raise StructStateError(f"'{host_name}' is already declared as a non-struct type")

        idl_name = derive_struct_name(host_name, comment, self.options.struct_suffix, rename)
        owner = self._idl_owners.get(idl_name)
        if owner is not None:
            raise AnnotationError(
                f"struct '{host_name}' maps to capnp name '{idl_name}', which struct '{owner}' "
                f"already uses; please add a capname annotation to one of them")

        struct = StructDescriptor(host_name, idl_name, comment)
        self.registry.register_struct(host_name, idl_name)
        self._idl_owners[idl_name] = host_name
        self._structs[host_name] = struct
        self._current = struct
        logger.debug("opened struct %s as %s", host_name, idl_name)
        return struct

    def _require_open(self, host_name: Optional[str], action: str) -> StructDescriptor:
        if self._current is None:
            raise StructStateError(f"cannot {action}: no struct is open")
        if host_name is not None and self._current.host_name != host_name:
            raise StructStateError(
                f"cannot {action} for struct '{host_name}': struct '{self._current.host_name}' is open")
        return self._current

    def report_field(
        self,
        host_name: str,
        host_type: HostType,
        tag: str = "",
        rename: Optional[str] = None,
        order=None,
        skip: bool = False,
        embedded: bool = False,
        fixed_array: bool = False,
        struct_name: Optional[str] = None,
    ) -> Optional[FieldDescriptor]:
        """Record one field of the open struct.

        Returns None when the field is skipped. ``order`` accepts the same
        values as a ``capid`` tag and wins over the tag.
        """
        struct = self._require_open(struct_name, f"report field '{host_name}'")
        parsed = parse_field_tag(tag, host_name, struct.host_name)
        explicit_order, tag_skip = parsed.order, parsed.skip
        if order is not None:
            explicit_order, tag_skip = parse_order_value(order, host_name, struct.host_name)

        if skip or tag_skip:
            logger.info("skipping field %s of struct %s", host_name, struct.host_name)
            return None

        idl_name = derive_field_name(host_name, rename or parsed.rename)
        if any(existing.idl_name == idl_name for existing in struct.fields):
            raise AnnotationError(
                f"field '{host_name}' in struct '{struct.host_name}' maps to capnp name "
                f"'{idl_name}', which another field already uses")

        sequence = _as_sequence(host_type)
        try:
            mapped = self.mapper.map_type(sequence)
        except UnsupportedTypeError as exc:
            raise UnsupportedTypeError(
                f"field '{host_name}' in struct '{struct.host_name}': {exc}") from exc

        field = FieldDescriptor(
            host_name=host_name,
            host_type=sequence,
            idl_name=idl_name,
            declaration_index=len(struct.fields),
            explicit_order=explicit_order,
            tag=parsed.text,
            embedded=embedded,
            fixed_array=fixed_array,
            mapped=mapped,
        )
        struct.add_field(field)
        logger.debug("field %s.%s %s -> %s", struct.host_name, host_name, sequence.host_text(), mapped.display)
        return field

    def close_struct(self, host_name: str) -> StructDescriptor:
        struct = self._require_open(host_name, "close struct")
        struct.close()
        self._current = None
        logger.debug("closed struct %s with %d field(s)", host_name, len(struct.fields))
        return struct

    def report_alias(self, host_name: str, target: HostType) -> None:
        if host_name in self._structs:
            raise StructStateError(f"'{host_name}' is already declared as a struct")
        sequence = _as_sequence(target)
        self.registry.register_alias(host_name, sequence, self.mapper.describe(sequence))
        logger.debug("alias %s = %s", host_name, sequence.host_text())

    def sorted_structs(self) -> list[StructDescriptor]:
        if self._current is not None:
            raise StructStateError(f"struct '{self._current.host_name}' was never closed")
        return [self._structs[name] for name in sorted(self._structs)]

    def _warn_undeclared(self) -> None:
        for host_name, idl_name in sorted(self.registry.structs().items()):
            if host_name not in self._structs:
                logger.warning("type %s is referenced but never declared; it is emitted as %s",
                               host_name, idl_name)

    def schema_id(self) -> int:
        if self.options.schema_id is not None:
            return self.options.schema_id
        return derive_schema_id(self.options.resolved_package)

    def render_schema(self, header: bool = True) -> str:
        structs = self.sorted_structs()
        self._warn_undeclared()
        writer = SchemaWriter(
            package=self.options.resolved_package,
            import_path=self.options.resolved_import_path,
            schema_id=self.schema_id(),
            field_prefix=self.options.field_prefix,
        )
        return writer.render(structs, header=header)

    def render_translator(self) -> str:
        structs = self.sorted_structs()
        for struct in structs:
            resolve_order(struct)
        return TranslatorWriter(self.options.resolved_package).render(structs, self.helpers)

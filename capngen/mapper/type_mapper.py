"""Recursive translation of host type sequences into IDL type sequences."""

from dataclasses import replace
from typing import Optional

from capngen import logging as capngen_logging
from capngen.codegen.conversions import list_go_type
from capngen.codegen.list_helpers import ListHelperGenerator, shape_signature
from capngen.errors import UnsupportedTypeError
from capngen.mapper.mapped_type import Kind, MappedType
from capngen.mapper.primitives import (BLOB_ELEMENT, BLOB_IDL, capnp_go_type,
                                       map_primitive)
from capngen.mapper.type_registry import EntryKind, TypeRegistry
from capngen.model.type_sequence import ListOf, Named, Pointer, TypeSequence
from capngen.naming import DEFAULT_STRUCT_SUFFIX, check_reserved, default_struct_name

logger = capngen_logging.get_logger(__name__)


class TypeMapper:
    def __init__(
        self,
        registry: TypeRegistry,
        helpers: ListHelperGenerator,
        struct_suffix: str = DEFAULT_STRUCT_SUFFIX,
    ):
        self.registry = registry
        self.helpers = helpers
        self.struct_suffix = struct_suffix

    def map_type(self, host: TypeSequence) -> MappedType:
        return self._map(host, frozenset())

    def describe(self, host: TypeSequence) -> str:
        """IDL text for ``host`` without registering names or generating helpers."""
        base = host.base
        wrappers = host.wrappers
        idl_base = map_primitive(base)
        if idl_base is None:
            entry = self.registry.lookup(base)
            idl_base = entry.idl_name if entry is not None else default_struct_name(base, self.struct_suffix)
        elif base == BLOB_ELEMENT and wrappers and isinstance(wrappers[-1], ListOf):
            wrappers = wrappers[:-1]
            idl_base = BLOB_IDL
        return TypeSequence(wrappers + (Named(idl_base),)).idl_text()

    def _map(self, host: TypeSequence, seen: frozenset[str]) -> MappedType:
        match host.tokens[0]:
            case ListOf():
                return self._map_list(host, seen)
            case Pointer():
                return self._map_pointer(host, seen)
            case Named(name=name):
                return self._resolve_named(name, seen)
        raise UnsupportedTypeError(f"cannot map type '{host.host_text()}'")

    def _map_list(self, host: TypeSequence, seen: frozenset[str]) -> MappedType:
        element_seq = host.inner()
        if element_seq == TypeSequence.named(BLOB_ELEMENT):
            return MappedType(
                host=host,
                idl=TypeSequence.named(BLOB_IDL),
                kind=Kind.BLOB,
                host_go_type=host.host_text(),
                idl_go_type=capnp_go_type(BLOB_IDL),
                base_host=host.host_text(),
            )

        element = self._map(element_seq, seen)
        if element.pointer and element.kind != Kind.STRUCT:
            raise UnsupportedTypeError(
                f"type '{host.host_text()}': lists of pointers are only supported for structs")

        idl = element.idl.wrap(ListOf())
        pair = self.helpers.ensure_helpers(shape_signature(host), idl, host, element)
        return MappedType(
            host=host,
            idl=idl,
            kind=Kind.LIST,
            host_go_type=host.host_text(),
            idl_go_type=list_go_type(element),
            element=element,
            helpers=pair,
        )

    def _map_pointer(self, host: TypeSequence, seen: frozenset[str]) -> MappedType:
        inner = host.inner()
        if not isinstance(inner.tokens[0], Named):
            raise UnsupportedTypeError(
                f"type '{host.host_text()}': only pointers to named types are supported")
        target = self._resolve_named(inner.base, seen)
        if target.kind not in (Kind.SCALAR, Kind.STRUCT) or target.pointer:
            raise UnsupportedTypeError(
                f"type '{host.host_text()}': pointer to '{inner.base}' is not supported")
        return replace(target, host=host, host_go_type=host.host_text(), pointer=True)

    def _resolve_named(self, name: str, seen: frozenset[str]) -> MappedType:
        host = TypeSequence.named(name)
        idl_scalar = map_primitive(name)
        if idl_scalar is not None:
            return MappedType(
                host=host,
                idl=TypeSequence.named(idl_scalar),
                kind=Kind.SCALAR,
                host_go_type=name,
                idl_go_type=capnp_go_type(idl_scalar),
                base_host=name,
            )

        if "." in name:
            raise UnsupportedTypeError(
                f"type '{name}' is declared in another package and cannot be translated")

        entry = self.registry.lookup(name)
        if entry is not None and entry.kind == EntryKind.ALIAS:
            return self._resolve_alias(name, entry.target, seen)

        if entry is None:
            idl_name = default_struct_name(name, self.struct_suffix)
            check_reserved(
                idl_name,
                f"after uppercasing the first letter, type '{name}' becomes '{idl_name}' but this "
                f"is a reserved capnp word, so please use a different type name",
            )
            entry = self.registry.register_placeholder(name, idl_name)

        return MappedType(
            host=host,
            idl=TypeSequence.named(entry.idl_name),
            kind=Kind.STRUCT,
            host_go_type=name,
            idl_go_type=entry.idl_name,
            base_host=name,
            struct_host=name,
        )

    def _resolve_alias(self, name: str, target: Optional[TypeSequence], seen: frozenset[str]) -> MappedType:
        if name in seen:
            raise UnsupportedTypeError(f"type alias cycle through '{name}'")
        assert target is not None
        resolved = self._map(target, seen | {name})
        if resolved.pointer:
            raise UnsupportedTypeError(
                f"type '{name}' aliases pointer type '{target.host_text()}', which is not supported")
        host = TypeSequence.named(name)
        match resolved.kind:
            case Kind.SCALAR | Kind.BLOB | Kind.STRUCT:
                return replace(resolved, host=host, host_go_type=name, base_host=name)
            case Kind.LIST:
                # slices of the underlying shape are assignable to the named type
                return replace(resolved, host=host, host_go_type=name)
        raise UnsupportedTypeError(f"cannot map alias '{name}'")

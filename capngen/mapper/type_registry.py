from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from capngen import logging as capngen_logging
from capngen.errors import AnnotationError
from capngen.mapper.primitives import GO_TO_CAPNP
from capngen.model.type_sequence import TypeSequence

logger = capngen_logging.get_logger(__name__)


class EntryKind(Enum):
    PRIMITIVE = auto()
    STRUCT = auto()
    ALIAS = auto()
    PLACEHOLDER = auto()


@dataclass
class RegistryEntry:
    host_name: str
    idl_name: str
    kind: EntryKind
    target: Optional[TypeSequence] = None


class TypeRegistry:
    """Host type name -> IDL type name, shared by every file of one run."""

    def __init__(self):
        self._entries: dict[str, RegistryEntry] = {
            host: RegistryEntry(host, idl, EntryKind.PRIMITIVE)
            for host, idl in GO_TO_CAPNP.items()
        }

    def lookup(self, host_name: str) -> Optional[RegistryEntry]:
        return self._entries.get(host_name)

    def idl_name(self, host_name: str) -> Optional[str]:
        entry = self._entries.get(host_name)
        return entry.idl_name if entry is not None else None

    def register_struct(self, host_name: str, idl_name: str) -> RegistryEntry:
        previous = self._entries.get(host_name)
        if previous is not None and previous.kind == EntryKind.PLACEHOLDER and previous.idl_name != idl_name:
            raise AnnotationError(
                f"struct '{host_name}' was referenced as '{previous.idl_name}' before its declaration "
                f"renamed it to '{idl_name}'; declare it before its first use")
        entry = RegistryEntry(host_name, idl_name, EntryKind.STRUCT)
        self._entries[host_name] = entry
        return entry

    def register_alias(self, host_name: str, target: TypeSequence, idl_name: str) -> RegistryEntry:
        previous = self._entries.get(host_name)
        if previous is not None and previous.kind == EntryKind.PLACEHOLDER:
            logger.warning(
                "type %s was used as struct %s before it was declared as an alias of %s; "
                "earlier references keep the struct mapping",
                host_name, previous.idl_name, target.host_text(),
            )
        entry = RegistryEntry(host_name, idl_name, EntryKind.ALIAS, target=target)
        self._entries[host_name] = entry
        return entry

    def register_placeholder(self, host_name: str, idl_name: str) -> RegistryEntry:
        logger.debug("forward reference to %s, using placeholder %s", host_name, idl_name)
        entry = RegistryEntry(host_name, idl_name, EntryKind.PLACEHOLDER)
        self._entries[host_name] = entry
        return entry

    def structs(self) -> dict[str, str]:
        return {
            name: entry.idl_name
            for name, entry in self._entries.items()
            if entry.kind in (EntryKind.STRUCT, EntryKind.PLACEHOLDER)
        }

    def __contains__(self, host_name: str) -> bool:
        return host_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

from capngen.model.type_sequence import TypeSequence

if TYPE_CHECKING:
    from capngen.codegen.list_helpers import HelperPair


class Kind(Enum):
    SCALAR = auto()
    BLOB = auto()
    STRUCT = auto()
    LIST = auto()


@dataclass(frozen=True)
class MappedType:
    """Result of mapping one host type sequence.

    ``base_host`` is the host name used for casts (an alias name when the
    field was declared through an alias), ``struct_host`` the struct whose
    converters are called for STRUCT kinds.
    """

    host: TypeSequence
    idl: TypeSequence
    kind: Kind
    host_go_type: str
    idl_go_type: str
    base_host: str = ""
    struct_host: str = ""
    pointer: bool = False
    element: Optional["MappedType"] = None
    helpers: Optional["HelperPair"] = None

    @property
    def display(self) -> str:
        return self.idl.idl_text()

    @property
    def idl_base(self) -> str:
        return self.idl.base

    @property
    def is_list(self) -> bool:
        return self.kind == Kind.LIST

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from capngen.model.type_sequence import TypeSequence

if TYPE_CHECKING:
    from capngen.mapper.mapped_type import MappedType

UNRESOLVED = -1


@dataclass
class FieldDescriptor:
    host_name: str
    host_type: TypeSequence
    idl_name: str
    declaration_index: int
    explicit_order: Optional[int] = None
    tag: str = ""
    embedded: bool = False
    fixed_array: bool = False
    mapped: Optional["MappedType"] = None
    final_order: int = UNRESOLVED

    @property
    def idl_type(self) -> Optional[TypeSequence]:
        return self.mapped.idl if self.mapped is not None else None

    @property
    def display_type(self) -> str:
        return self.mapped.display if self.mapped is not None else ""

    def __repr__(self):
        return f"FieldDescriptor({self.host_name} {self.host_type.host_text()} @{self.final_order})"

from __future__ import annotations

from enum import Enum, auto

from capngen.errors import FieldOrderError, StructStateError
from capngen.model.field_info import FieldDescriptor


class StructState(Enum):
    OPEN = auto()
    ACCUMULATING = auto()
    CLOSED = auto()


class StructDescriptor:
    def __init__(self, host_name: str, idl_name: str, comment: str = ""):
        self.host_name = host_name
        self.idl_name = idl_name
        self.comment = comment
        self.fields: list[FieldDescriptor] = []
        self.explicit_orders: dict[int, FieldDescriptor] = {}
        self.longest_field = 0
        self.state = StructState.OPEN

    def add_field(self, field: FieldDescriptor) -> None:
        if self.state == StructState.CLOSED:
            raise StructStateError(
                f"struct '{self.host_name}' is closed, cannot add field '{field.host_name}'")
        if field.explicit_order is not None:
            claimant = self.explicit_orders.get(field.explicit_order)
            if claimant is not None:
                raise FieldOrderError(
                    f"problem in capid tag '{field.tag}' on field '{field.host_name}' in struct "
                    f"'{self.host_name}': number '{field.explicit_order}' is already taken by "
                    f"field '{claimant.host_name}'",
                    self.host_name,
                    [claimant.host_name, field.host_name],
                    field.explicit_order,
                )
            self.explicit_orders[field.explicit_order] = field
        self.fields.append(field)
        self.longest_field = max(self.longest_field, len(field.idl_name))
        self.state = StructState.ACCUMULATING

    def close(self) -> None:
        self.state = StructState.CLOSED

    @property
    def is_closed(self) -> bool:
        return self.state == StructState.CLOSED

    def fields_by_final_order(self) -> list[FieldDescriptor]:
        return sorted(self.fields, key=lambda f: f.final_order)

    def __hash__(self):
        return hash(self.host_name)

    def __eq__(self, other):
        return isinstance(other, StructDescriptor) and self.host_name == other.host_name

    def __repr__(self):
        return f"StructDescriptor({self.host_name} -> {self.idl_name})"

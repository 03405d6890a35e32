"""Reconcile explicit ``capid`` requests with declaration order."""

from typing import Optional

from capngen import logging as capngen_logging
from capngen.errors import FieldOrderError
from capngen.model.field_info import UNRESOLVED, FieldDescriptor
from capngen.model.struct_info import StructDescriptor

logger = capngen_logging.get_logger(__name__)


def _advance_write(cursor: int, slots: list[Optional[FieldDescriptor]]) -> int:
    """Return the first empty slot at or after ``cursor``, or len(slots) when full."""
    while cursor < len(slots) and slots[cursor] is not None:
        cursor += 1
    return cursor


def resolve_order(struct: StructDescriptor) -> None:
    """Assign ``final_order`` to every field of ``struct``, 0..len(fields)-1.

    Fields carrying an explicit order get exactly that slot. The rest keep
    their relative declaration order and fill the remaining slots. Nothing
    is written back unless the whole assignment is valid.
    """
    fields = struct.fields
    if not fields:
        return
    max_index = len(fields) - 1

    for field in fields:
        if field.explicit_order is not None and field.explicit_order > max_index:
            raise FieldOrderError(
                f"problem in capid tag '{field.tag}' on field '{field.host_name}' in struct "
                f"'{struct.host_name}': number '{field.explicit_order}' is beyond the count of "
                f"fields we have, largest available is {max_index}",
                struct.host_name,
                [field.host_name],
                field.explicit_order,
            )

    if len(fields) == 1:
        fields[0].final_order = 0
        return

    slots: list[Optional[FieldDescriptor]] = [None] * len(fields)
    for field in fields:
        if field.explicit_order is None:
            continue
        claimant = slots[field.explicit_order]
        if claimant is not None:
            raise FieldOrderError(
                f"problem in capid tag '{field.tag}' on field '{field.host_name}' in struct "
                f"'{struct.host_name}': number '{field.explicit_order}' is already taken by "
                f"field '{claimant.host_name}'",
                struct.host_name,
                [claimant.host_name, field.host_name],
                field.explicit_order,
            )
        slots[field.explicit_order] = field

    appearance = sorted(fields, key=lambda f: f.declaration_index)
    write = 0
    for field in appearance:
        if field.explicit_order is not None:
            continue
        write = _advance_write(write, slots)
        # explicit requests are unique and in range, so a free slot remains
        assert write < len(slots)
        slots[write] = field

    for field in fields:
        field.final_order = UNRESOLVED
    for index, field in enumerate(slots):
        field.final_order = index

    logger.debug(
        "resolved field order for %s: %s",
        struct.host_name,
        ", ".join(f"{f.host_name}@{f.final_order}" for f in appearance),
    )

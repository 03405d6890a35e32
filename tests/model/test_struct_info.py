import pytest

from capngen.errors import StructStateError
from capngen.model import FieldDescriptor, StructDescriptor, StructState, TypeSequence


def field(name, index, idl_name=None):
    return FieldDescriptor(name, TypeSequence.named("int"), idl_name or name.lower(), index)


def test_lifecycle():
    struct = StructDescriptor("S", "SCapn")
    assert struct.state == StructState.OPEN
    struct.add_field(field("A", 0))
    assert struct.state == StructState.ACCUMULATING
    struct.close()
    assert struct.is_closed
    with pytest.raises(StructStateError):
        struct.add_field(field("B", 1))


def test_longest_field():
    struct = StructDescriptor("S", "SCapn")
    struct.add_field(field("A", 0, "short"))
    struct.add_field(field("B", 1, "muchLonger"))
    assert struct.longest_field == len("muchLonger")


def test_fields_by_final_order():
    struct = StructDescriptor("S", "SCapn")
    a, b = field("A", 0), field("B", 1)
    struct.add_field(a)
    struct.add_field(b)
    a.final_order, b.final_order = 1, 0
    assert struct.fields_by_final_order() == [b, a]

import pytest

from capngen.errors import FieldOrderError
from capngen.model import (UNRESOLVED, FieldDescriptor, StructDescriptor,
                           TypeSequence, resolve_order)


def make_struct(*orders, name="S"):
    struct = StructDescriptor(name, f"{name}Capn")
    for i, order in enumerate(orders):
        struct.add_field(FieldDescriptor(
            host_name=f"F{i}",
            host_type=TypeSequence.named("int"),
            idl_name=f"f{i}",
            declaration_index=i,
            explicit_order=order,
            tag=f'capid:"{order}"' if order is not None else "",
        ))
    return struct


def final_orders(struct):
    return [f.final_order for f in struct.fields]


def test_identity_without_tags():
    struct = make_struct(None, None, None, None)
    resolve_order(struct)
    assert final_orders(struct) == [0, 1, 2, 3]


def test_single_field_gets_zero():
    struct = make_struct(None)
    resolve_order(struct)
    assert final_orders(struct) == [0]


def test_second_field_pinned_to_zero():
    struct = make_struct(None, 0)
    resolve_order(struct)
    assert final_orders(struct) == [1, 0]


def test_explicit_orders_win_their_slot():
    struct = make_struct(None, 3, None, 0, None)
    resolve_order(struct)
    assert final_orders(struct) == [1, 3, 2, 0, 4]


def test_untagged_keep_relative_order():
    struct = make_struct(None, None, 1, None, None, 2)
    resolve_order(struct)
    orders = final_orders(struct)
    untagged = [orders[i] for i in (0, 1, 3, 4)]
    assert untagged == sorted(untagged)
    assert orders[2] == 1 and orders[5] == 2


@pytest.mark.parametrize("orders", [
    (None, None, None),
    (2, 1, 0),
    (None, 4, None, None, None),
    (None, 0, None, 1),
])
def test_result_is_a_permutation(orders):
    struct = make_struct(*orders)
    resolve_order(struct)
    assert sorted(final_orders(struct)) == list(range(len(orders)))


def test_out_of_range_request_fails_and_leaves_unresolved():
    struct = make_struct(None, 2)
    with pytest.raises(FieldOrderError) as excinfo:
        resolve_order(struct)
    assert "largest available is 1" in str(excinfo.value)
    assert excinfo.value.struct_name == "S"
    assert excinfo.value.index == 2
    assert final_orders(struct) == [UNRESOLVED, UNRESOLVED]


def test_out_of_range_request_on_single_field():
    struct = make_struct(1)
    with pytest.raises(FieldOrderError):
        resolve_order(struct)
    assert final_orders(struct) == [UNRESOLVED]


def test_duplicate_order_in_one_struct_fails():
    with pytest.raises(FieldOrderError) as excinfo:
        make_struct(0, 0)
    assert excinfo.value.field_names == ["F0", "F1"]
    assert excinfo.value.index == 0


def test_same_order_in_two_structs_is_fine():
    first = make_struct(0, None, name="A")
    second = make_struct(0, None, name="B")
    resolve_order(first)
    resolve_order(second)
    assert final_orders(first) == [0, 1]
    assert final_orders(second) == [0, 1]


def test_empty_struct():
    struct = make_struct()
    resolve_order(struct)
    assert struct.fields == []

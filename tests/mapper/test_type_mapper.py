import pytest

from capngen.codegen import ListHelperGenerator
from capngen.errors import ReservedWordError, UnsupportedTypeError
from capngen.mapper import EntryKind, Kind, TypeRegistry
from capngen.mapper.type_mapper import TypeMapper
from capngen.model import TypeSequence


@pytest.fixture
def mapper():
    return TypeMapper(TypeRegistry(), ListHelperGenerator())


def map_text(mapper, text):
    return mapper.map_type(TypeSequence.parse(text))


def test_scalar(mapper):
    mapped = map_text(mapper, "int")
    assert mapped.kind == Kind.SCALAR
    assert mapped.display == "Int64"
    assert mapped.idl_go_type == "int64"
    assert mapped.helpers is None


def test_blob(mapper):
    mapped = map_text(mapper, "[]byte")
    assert mapped.kind == Kind.BLOB
    assert mapped.display == "Data"
    assert len(mapper.helpers.cache) == 0


def test_list_of_blobs(mapper):
    mapped = map_text(mapper, "[][]byte")
    assert mapped.display == "List(Data)"
    assert mapped.idl_go_type == "capn.DataList"


def test_nested_list(mapper):
    mapped = map_text(mapper, "[][]int")
    assert mapped.kind == Kind.LIST
    assert mapped.display == "List(List(Int64))"
    assert mapped.idl_go_type == "capn.PointerList"
    assert mapped.helpers.to_idl == "SliceSliceIntToInt64ListList"
    # the inner shape gets its own pair
    assert mapper.helpers.cache.get("[]int") is not None
    assert len(mapper.helpers.cache) == 2


def test_struct_placeholder_and_pointer(mapper):
    mapped = map_text(mapper, "*big")
    assert mapped.kind == Kind.STRUCT
    assert mapped.pointer
    assert mapped.display == "BigCapn"
    assert mapped.struct_host == "big"
    assert mapper.registry.lookup("big").kind == EntryKind.PLACEHOLDER


def test_pointer_to_scalar(mapper):
    mapped = map_text(mapper, "*int32")
    assert mapped.kind == Kind.SCALAR
    assert mapped.pointer
    assert mapped.display == "Int32"


def test_list_of_struct_pointers(mapper):
    mapped = map_text(mapper, "[]*Big")
    assert mapped.display == "List(BigCapn)"
    assert mapped.idl_go_type == "BigCapn_List"
    assert mapped.helpers.to_idl == "SlicePtrBigToBigCapnList"


@pytest.mark.parametrize("text", ["[]*int", "**Big", "*[]int", "pkg.Type", "[]time.Time"])
def test_unsupported(mapper, text):
    with pytest.raises(UnsupportedTypeError):
        map_text(mapper, text)


def test_alias_of_scalar(mapper):
    mapper.registry.register_alias("Celsius", TypeSequence.named("float64"), "Float64")
    mapped = map_text(mapper, "Celsius")
    assert mapped.kind == Kind.SCALAR
    assert mapped.display == "Float64"
    assert mapped.base_host == "Celsius"


def test_alias_of_list(mapper):
    mapper.registry.register_alias("Ints", TypeSequence.parse("[]int"), "List(Int64)")
    mapped = map_text(mapper, "Ints")
    assert mapped.kind == Kind.LIST
    assert mapped.host_go_type == "Ints"
    assert mapped.helpers.to_idl == "SliceIntToInt64List"


def test_alias_cycle(mapper):
    mapper.registry.register_alias("A", TypeSequence.named("B"), "BCapn")
    mapper.registry.register_alias("B", TypeSequence.named("A"), "ACapn")
    with pytest.raises(UnsupportedTypeError) as excinfo:
        map_text(mapper, "A")
    assert "cycle" in str(excinfo.value)


def test_alias_of_pointer(mapper):
    mapper.registry.register_alias("BigPtr", TypeSequence.parse("*Big"), "BigCapn")
    with pytest.raises(UnsupportedTypeError):
        map_text(mapper, "BigPtr")


def test_placeholder_with_reserved_name():
    mapper = TypeMapper(TypeRegistry(), ListHelperGenerator(), struct_suffix="")
    with pytest.raises(ReservedWordError):
        map_text(mapper, "data")


def test_describe_has_no_side_effects(mapper):
    assert mapper.describe(TypeSequence.parse("[][]byte")) == "List(Data)"
    assert mapper.describe(TypeSequence.parse("[]*big")) == "List(BigCapn)"
    assert "big" not in mapper.registry
    assert len(mapper.helpers.cache) == 0

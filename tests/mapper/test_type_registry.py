import pytest

from capngen.errors import AnnotationError
from capngen.mapper import EntryKind, TypeRegistry
from capngen.model import TypeSequence


def test_primitives_preloaded():
    registry = TypeRegistry()
    assert registry.idl_name("int32") == "Int32"
    assert registry.lookup("int32").kind == EntryKind.PRIMITIVE
    assert "Big" not in registry


def test_struct_replaces_placeholder():
    registry = TypeRegistry()
    registry.register_placeholder("big", "BigCapn")
    assert registry.lookup("big").kind == EntryKind.PLACEHOLDER
    registry.register_struct("big", "BigCapn")
    entry = registry.lookup("big")
    assert entry.kind == EntryKind.STRUCT
    assert entry.idl_name == "BigCapn"


def test_struct_renamed_after_placeholder():
    registry = TypeRegistry()
    registry.register_placeholder("big", "BigCapn")
    with pytest.raises(AnnotationError):
        registry.register_struct("big", "Huge")
    assert registry.lookup("big").kind == EntryKind.PLACEHOLDER


def test_structs_lists_structs_and_placeholders():
    registry = TypeRegistry()
    registry.register_struct("a", "ACapn")
    registry.register_placeholder("b", "BCapn")
    registry.register_alias("Ints", TypeSequence.parse("[]int"), "List(Int64)")
    assert registry.structs() == {"a": "ACapn", "b": "BCapn"}


def test_alias_keeps_target():
    registry = TypeRegistry()
    target = TypeSequence.parse("[]int")
    entry = registry.register_alias("Ints", target, "List(Int64)")
    assert entry.target == target
    assert registry.idl_name("Ints") == "List(Int64)"

import pytest

from capngen.errors import TypeSequenceError
from capngen.model import ListOf, Named, Pointer, TypeSequence


def test_parse_nested_slices():
    seq = TypeSequence.parse("[][]int")
    assert seq.tokens == (ListOf(), ListOf(), Named("int"))
    assert seq.list_depth == 2
    assert seq.base == "int"
    assert seq.host_text() == "[][]int"
    assert seq.idl_text() == "List(List(int))"


def test_parse_pointer_and_array():
    assert TypeSequence.parse("[]*Big").tokens == (ListOf(), Pointer(), Named("Big"))
    assert TypeSequence.parse("[4][]int").host_text() == "[][]int"
    assert TypeSequence.parse("pkg.Type").base == "pkg.Type"


def test_idl_text_drops_pointers():
    assert TypeSequence.parse("*Big").idl_text() == "Big"
    assert TypeSequence.parse("[]*Big").idl_text() == "List(Big)"


def test_from_words():
    seq = TypeSequence.from_words(["list", "pointer", "Big"])
    assert seq == TypeSequence.parse("[]*Big")
    # a type may itself be called "list" when it is last
    assert TypeSequence.from_words(["list"]).base == "list"


@pytest.mark.parametrize("tokens", [
    (),
    (ListOf(),),
    (Named("a"), ListOf()),
    (Named("a"), Named("b")),
    (Named(""),),
])
def test_invalid_sequences(tokens):
    with pytest.raises(TypeSequenceError):
        TypeSequence(tokens)


def test_parse_rejects_garbage():
    with pytest.raises(TypeSequenceError):
        TypeSequence.parse("map[string]int")


def test_inner_and_wrap():
    seq = TypeSequence.parse("[]*Big")
    assert seq.inner() == TypeSequence.parse("*Big")
    assert seq.inner().wrap(ListOf()) == seq
    with pytest.raises(TypeSequenceError):
        TypeSequence.named("int").inner()


def test_hashable():
    seen = {TypeSequence.parse("[]int"), TypeSequence.parse("[]int")}
    assert len(seen) == 1

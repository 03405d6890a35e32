import pytest

from capngen.errors import DescriptorError, UnsupportedTypeError
from capngen.frontend import AliasReport, StructReport
from capngen.frontend.go_parser import GoParser, mask_declarations, parse_go_string
from capngen.model import TypeSequence

MODEL_SRC = '''package model

import (
	"io"
	capn "github.com/glycerine/go-capnproto"
)

// capname:"Renamed"
type s1 struct {
	MyInts []int `capid:"1"`
	Name   string
	hidden int
	A, B   int32
	_      int
	Big
	*Other `capname:"other"`
}

func (s *s1) Len() int {
	type local struct{ X int }
	return len(s.MyInts)
}

var registry = map[string]int{"a": 1}

const limit = 3
'''


def fields_by_name(struct):
    return {f.name: f for f in struct.fields}


def test_package_and_imports():
    unit = parse_go_string(MODEL_SRC)
    assert unit.package == "model"
    assert unit.imports == ["io", "github.com/glycerine/go-capnproto"]
    assert unit.origin == "<string>"


def test_struct_fields():
    unit = parse_go_string(MODEL_SRC)
    assert len(unit.declarations) == 1
    struct = unit.declarations[0]
    assert isinstance(struct, StructReport)
    assert struct.name == "s1"
    assert [f.name for f in struct.fields] == ["MyInts", "Name", "A", "B", "Big", "Other"]
    fields = fields_by_name(struct)
    assert fields["MyInts"].type == TypeSequence.parse("[]int")
    assert fields["MyInts"].tag == 'capid:"1"'
    assert fields["B"].type == TypeSequence.named("int32")
    assert fields["Big"].embedded
    assert fields["Other"].embedded
    assert fields["Other"].type == TypeSequence.parse("*Other")
    assert fields["Other"].tag == 'capname:"other"'


def test_doc_comment_is_attached():
    struct = parse_go_string(MODEL_SRC).declarations[0]
    assert struct.comment == '// capname:"Renamed"'


def test_private_fields_on_request():
    struct = parse_go_string(MODEL_SRC, extract_private=True).declarations[0]
    assert "hidden" in fields_by_name(struct)
    assert "_" not in fields_by_name(struct)


def test_unexported_embedded_field_is_kept():
    src = "type s struct {\n\tinner\n\t*other\n\tY int\n}\n"
    fields = fields_by_name(parse_go_string(src).declarations[0])
    assert list(fields) == ["inner", "other", "Y"]
    assert fields["inner"].embedded
    assert fields["other"].type == TypeSequence.parse("*other")


def test_masking_keeps_lines():
    src = "func f() {\n\treturn\n}\ntype T struct{}\n"
    masked = mask_declarations(src)
    assert masked.count("\n") == src.count("\n")
    assert "func" not in masked
    assert masked.endswith("type T struct{}\n")


def test_masking_ignores_keywords_in_strings_and_comments():
    src = 'type T struct {\n\tA string `json:"func"`\n}\n// var x\n'
    assert mask_declarations(src) == src


def test_snippet_without_package_clause():
    unit = parse_go_string("type s1 struct { MyInts []int }")
    assert unit.package is None
    assert unit.declarations[0].fields[0].name == "MyInts"


def test_grouped_type_declarations():
    src = '''
type (
	Celsius float64
	Ints    []int
	Names = []string
	Handler func(int) error
	Lookup  map[string]int
	Reader  interface{ Read() }
)
'''
    decls = parse_go_string(src).declarations
    assert all(isinstance(d, AliasReport) for d in decls)
    assert {d.name: d.target.host_text() for d in decls} == {
        "Celsius": "float64",
        "Ints": "[]int",
        "Names": "[]string",
    }


def test_multi_line_block_doc_comment():
    src = '''
/*
capname:"Point3"
*/
type point struct {
	X int64
}
'''
    struct = parse_go_string(src).declarations[0]
    assert 'capname:"Point3"' in struct.comment


def test_comment_not_adjacent_is_ignored():
    src = '// capname:"Far"\n\ntype point struct {\n\tX int64\n}\n'
    assert parse_go_string(src).declarations[0].comment == ""


def test_double_quoted_tag():
    src = 'type s struct {\n\tA int "capid:\\"1\\""\n}\n'
    field = parse_go_string(src).declarations[0].fields[0]
    assert field.tag == 'capid:"1"'


@pytest.mark.parametrize("type_text, kind", [
    ("map[string]int", "map"),
    ("chan int", "channel"),
    ("func() error", "func"),
    ("interface{}", "interface"),
    ("struct{ X int }", "anonymous struct"),
    ("[2][3]int", "nested fixed size array"),
])
def test_unsupported_field_types(type_text, kind):
    src = f"type s struct {{\n\tBad {type_text}\n}}\n"
    with pytest.raises(UnsupportedTypeError) as excinfo:
        parse_go_string(src, origin="model.go")
    message = str(excinfo.value)
    assert message.startswith("model.go:2:")
    assert kind in message
    assert 'capid:"skip"' in message


def test_unsupported_field_types_can_be_skipped():
    src = '''
type s struct {
	M map[string]int `capid:"skip"`
	C chan int       `capid:"-"`
	F func()         `capid:"skip"`
	X int
}
'''
    struct = parse_go_string(src).declarations[0]
    assert [f.name for f in struct.fields] == ["X"]


def test_fixed_arrays():
    src = '''
type Vec [3]float64

type s struct {
	Arr  [4]int
	Rows [2][]int
}
'''
    decls = parse_go_string(src).declarations
    assert len(decls) == 1
    fields = fields_by_name(decls[0])
    assert fields["Arr"].fixed_array
    assert fields["Arr"].type == TypeSequence.parse("[]int")
    assert fields["Rows"].fixed_array
    assert fields["Rows"].type == TypeSequence.parse("[][]int")


def test_qualified_type_names_are_kept():
    src = "type s struct {\n\tWhen time.Time\n}\n"
    field = parse_go_string(src).declarations[0].fields[0]
    assert field.type == TypeSequence.named("time.Time")


def test_syntax_error():
    src = "type s struct {\n\tA int int\n}\n"
    with pytest.raises(DescriptorError) as excinfo:
        GoParser().parse_string(src, origin="bad.go")
    assert str(excinfo.value).startswith("bad.go:2:")
    assert "cannot parse Go declarations" in str(excinfo.value)


def test_parse_file(tmp_path):
    path = tmp_path / "model.go"
    path.write_text(MODEL_SRC)
    unit = GoParser().parse_file(str(path))
    assert unit.origin == str(path)
    assert unit.declarations[0].name == "s1"

from capngen import Extractor, GeneratorOptions
from capngen.codegen.schema_writer import (extra_spaces, format_schema_id,
                                           pad_spaces)


def test_spacing_helpers():
    assert pad_spaces(6, 1) == "     "
    assert pad_spaces(6, 6) == ""
    assert extra_spaces(0) == "  "
    assert extra_spaces(9) == "  "
    assert extra_spaces(10) == " "
    assert extra_spaces(99) == " "
    assert extra_spaces(100) == ""


def test_format_schema_id():
    assert format_schema_id(0x8000000000000001) == "0x8000000000000001"
    assert format_schema_id(1 << 63) == "0x8000000000000000"


def make_extractor(**options):
    options.setdefault("package", "model")
    options.setdefault("schema_id", 0x8000000000000001)
    return Extractor(GeneratorOptions(**options))


def test_full_schema():
    extractor = make_extractor()
    extractor.open_struct("s1")
    extractor.report_field("MyInts", "[]int")
    extractor.report_field("B", "bool")
    extractor.close_struct("s1")
    assert extractor.render_schema() == (
        "@0x8000000000000001;\n"
        "using Go = import \"go.capnp\";\n"
        "$Go.package(\"model\");\n"
        "$Go.import(\"model\");\n"
        "\n"
        "struct S1Capn {\n"
        "   myInts  @0:   List(Int64);\n"
        "   b       @1:   Bool;\n"
        "}\n"
    )


def test_import_path_and_prefix():
    extractor = make_extractor(import_path="example.com/model", field_prefix="\t")
    extractor.open_struct("p")
    extractor.report_field("X", "float64")
    extractor.close_struct("p")
    schema = extractor.render_schema()
    assert "$Go.import(\"example.com/model\");" in schema
    assert "\tx  @0:   Float64;" in schema


def test_structs_sorted_and_empty_struct():
    extractor = make_extractor()
    for name in ("zed", "alpha"):
        extractor.open_struct(name)
        extractor.close_struct(name)
    assert extractor.render_schema(header=False) == (
        "struct AlphaCapn {\n"
        "}\n"
        "\n"
        "struct ZedCapn {\n"
        "}\n"
    )


def test_lines_follow_final_order():
    extractor = make_extractor()
    extractor.open_struct("s")
    extractor.report_field("First", "int", tag='capid:"1"')
    extractor.report_field("Second", "int", tag='capid:"0"')
    extractor.close_struct("s")
    schema = extractor.render_schema(header=False)
    assert schema.index("second") < schema.index("first")
    assert "   second  @0:   Int64;" in schema
    assert "   first   @1:   Int64;" in schema


def test_wide_struct_spacing():
    extractor = make_extractor()
    extractor.open_struct("w")
    for i in range(11):
        extractor.report_field(f"F{i}", "int")
    extractor.close_struct("w")
    schema = extractor.render_schema(header=False)
    assert "   f9   @9:   Int64;" in schema
    assert "   f10  @10:  Int64;" in schema

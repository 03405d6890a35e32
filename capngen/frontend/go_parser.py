"""Go source front end: struct and named type declarations.

Only the package clause, imports and ``type`` declarations are parsed.
Function, variable and constant declarations are blanked out first so the
grammar never has to understand statements or expressions.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from lark import Lark, Token, Transformer, UnexpectedInput, v_args

from capngen import logging as capngen_logging
from capngen.logging import at_source, format_position
from capngen.errors import DescriptorError, UnsupportedTypeError
from capngen.frontend.reports import (AliasReport, Declaration, FieldReport,
                                      SourceUnit, StructReport)
from capngen.model.type_sequence import ListOf, Named, Pointer, TypeSequence
from capngen.naming import parse_field_tag
from capngen.utils import read_file

logger = capngen_logging.get_logger(__name__)

GRAMMAR_PATH = Path(__file__).with_name("go_decls.lark")

_MASKED_KEYWORDS = frozenset({"func", "var", "const"})


def _parse(masked: str, comments: list[Token]):
    parser = Lark.open(
        str(GRAMMAR_PATH),
        parser="lalr",
        propagate_positions=True,
        maybe_placeholders=False,
        lexer_callbacks={"COMMENT": comments.append},
    )
    return parser.parse(masked)


def _skip_literal(src: str, start: int) -> int:
    quote = src[start]
    i = start + 1
    while i < len(src):
        c = src[i]
        if quote != "`" and c == "\\":
            i += 2
            continue
        if c == quote:
            return i + 1
        if c == "\n" and quote != "`":
            return i
        i += 1
    return len(src)


def _blank(chars: list[str], start: int, end: int) -> None:
    for i in range(start, end):
        if chars[i] != "\n":
            chars[i] = " "


def mask_declarations(src: str) -> str:
    """Blank every top-level func, var and const declaration, keeping newlines."""
    chars = list(src)
    depth = 0
    line_start = True
    mask_from: Optional[int] = None
    i, n = 0, len(src)
    while i < n:
        c = src[i]
        if src.startswith("//", i):
            end = src.find("\n", i)
            i = n if end < 0 else end
            continue
        if src.startswith("/*", i):
            end = src.find("*/", i + 2)
            i = n if end < 0 else end + 2
            continue
        if c in "\"'`":
            i = _skip_literal(src, i)
            line_start = False
            continue
        if c in "([{":
            depth += 1
        elif c in ")]}":
            depth = max(depth - 1, 0)
        elif c in "\n;" and depth == 0:
            if mask_from is not None:
                _blank(chars, mask_from, i)
                mask_from = None
            line_start = True
            i += 1
            continue
        elif c.isalpha() or c == "_":
            end = i
            while end < n and (src[end].isalnum() or src[end] == "_"):
                end += 1
            word = src[i:end]
            if depth == 0 and line_start and mask_from is None and word in _MASKED_KEYWORDS:
                mask_from = i
            line_start = False
            i = end
            continue
        if not c.isspace():
            line_start = False
        i += 1
    if mask_from is not None:
        _blank(chars, mask_from, n)
    return "".join(chars)


@dataclass(frozen=True)
class _TypeRepr:
    tokens: tuple = ()
    unsupported: Optional[str] = None
    fixed_array: bool = False

    def wrap(self, token) -> "_TypeRepr":
        if self.unsupported:
            return self
        if self.fixed_array:
            return _unsupported("nested fixed size array")
        return _TypeRepr((token,) + self.tokens)


@dataclass
class _RawField:
    names: list[str]
    type: Union[_TypeRepr, "_RawStruct"]
    tag: str
    embedded: bool
    line: int


@dataclass
class _RawStruct:
    fields: list[_RawField] = field(default_factory=list)


@dataclass
class _RawTypeSpec:
    name: str
    type: Union[_TypeRepr, _RawStruct]
    alias: bool
    line: int


def _unsupported(kind: str) -> _TypeRepr:
    return _TypeRepr(unsupported=kind)


def _as_repr(value) -> _TypeRepr:
    if isinstance(value, _RawStruct):
        return _unsupported("anonymous struct")
    return value


def _unquote_tag(token: Optional[Token]) -> str:
    if token is None:
        return ""
    text = str(token)
    if text.startswith("`"):
        return text[1:-1]
    return bytes(text[1:-1], "utf-8").decode("unicode_escape")


def _split_tag(children) -> tuple[list, Optional[Token]]:
    if children and isinstance(children[-1], Token) and children[-1].type == "STRING":
        return list(children[:-1]), children[-1]
    return list(children), None


class _DeclTransformer(Transformer):
    def __init__(self):
        super().__init__()
        self.package: Optional[str] = None
        self.imports: list[str] = []
        self.type_specs: list[_RawTypeSpec] = []

    def package_clause(self, children):
        self.package = str(children[0])

    def import_spec(self, children):
        self.imports.append(str(children[-1])[1:-1])

    def type_name(self, children):
        return _TypeRepr((Named(".".join(str(c) for c in children)),))

    def pointer_type(self, children):
        return _as_repr(children[0]).wrap(Pointer())

    def slice_type(self, children):
        return _as_repr(children[0]).wrap(ListOf())

    def array_type(self, children):
        inner = _as_repr(children[-1]).wrap(ListOf())
        if inner.unsupported:
            return inner
        return _TypeRepr(inner.tokens, fixed_array=True)

    def array_len(self, children):
        return children[0] if children else None

    def map_type(self, children):
        return _unsupported("map")

    def chan_type(self, children):
        return _unsupported("channel")

    def func_type(self, children):
        return _unsupported("func")

    def func_result(self, children):
        return children[0]

    def interface_type(self, children):
        return _unsupported("interface")

    def struct_type(self, children):
        fields: list[_RawField] = []
        for child in children:
            fields.extend(child)
        return _RawStruct(fields)

    def name_list(self, children):
        return [str(c) for c in children]

    @v_args(meta=True)
    def named_field(self, meta, children):
        parts, tag = _split_tag(children)
        names, type_expr = parts
        return [_RawField(names, type_expr, _unquote_tag(tag), False, meta.line)]

    @v_args(meta=True)
    def embedded_field(self, meta, children):
        parts, tag = _split_tag(children)
        type_repr = parts[0]
        name = type_repr.tokens[-1].name.rsplit(".", 1)[-1]
        return [_RawField([name], type_repr, _unquote_tag(tag), True, meta.line)]

    @v_args(meta=True)
    def embedded_pointer_field(self, meta, children):
        parts, tag = _split_tag(children)
        type_repr = parts[0].wrap(Pointer())
        name = type_repr.tokens[-1].name.rsplit(".", 1)[-1]
        return [_RawField([name], type_repr, _unquote_tag(tag), True, meta.line)]

    @v_args(meta=True)
    def type_def(self, meta, children):
        self.type_specs.append(_RawTypeSpec(str(children[0]), children[1], False, meta.line))

    @v_args(meta=True)
    def alias_def(self, meta, children):
        self.type_specs.append(_RawTypeSpec(str(children[0]), children[1], True, meta.line))


def _doc_comment(comments: list[Token], line: int) -> str:
    """Text of the comment group whose last line is just above ``line``."""
    by_end = {c.end_line: c for c in comments}
    group: list[Token] = []
    wanted = line - 1
    while wanted in by_end:
        comment = by_end[wanted]
        group.append(comment)
        wanted = comment.line - 1
    return "\n".join(str(c) for c in reversed(group))


def _is_exported(name: str) -> bool:
    return name[:1].isupper()


class GoParser:
    """Read struct declarations out of Go source text."""

    def __init__(self, extract_private: bool = False):
        self.extract_private = extract_private

    def parse_file(self, path: str) -> SourceUnit:
        return self.parse_string(read_file(path), origin=str(path))

    def parse_string(self, src: str, origin: str = "<string>") -> SourceUnit:
        comments: list[Token] = []
        masked = mask_declarations(src)
        try:
            tree = _parse(masked, comments)
        except UnexpectedInput as exc:
            context = exc.get_context(masked).rstrip()
            raise DescriptorError(
                f"{format_position(origin, exc.line)}:{exc.column}: cannot parse Go declarations\n{context}") from exc

        transformer = _DeclTransformer()
        transformer.transform(tree)

        declarations: list[Declaration] = []
        for spec in transformer.type_specs:
            decl = self._declaration(spec, comments, origin)
            if decl is not None:
                declarations.append(decl)
        at_source(logger, origin).debug("found %d declaration(s) in package %s", len(declarations), transformer.package)
        return SourceUnit(
            origin=origin,
            declarations=declarations,
            package=transformer.package,
            imports=transformer.imports,
        )

    def _declaration(self, spec: _RawTypeSpec, comments: list[Token], origin: str) -> Optional[Declaration]:
        if isinstance(spec.type, _RawStruct):
            if spec.alias:
                at_source(logger, origin, spec.line).debug("skipping alias %s of an anonymous struct", spec.name)
                return None
            return StructReport(
                name=spec.name,
                fields=self._fields(spec, origin),
                comment=_doc_comment(comments, spec.line),
                line=spec.line,
            )

        if spec.type.unsupported:
            at_source(logger, origin, spec.line).debug("ignoring %s type %s", spec.type.unsupported, spec.name)
            return None
        if spec.type.fixed_array:
            at_source(logger, origin, spec.line).warning(
                "ignoring fixed size array type %s; fields of this type cannot be translated", spec.name)
            return None
        return AliasReport(spec.name, TypeSequence(spec.type.tokens), line=spec.line)

    def _fields(self, spec: _RawTypeSpec, origin: str) -> list[FieldReport]:
        reports: list[FieldReport] = []
        for raw in spec.type.fields:
            for name in raw.names:
                if name == "_":
                    continue
                if not raw.embedded and not self.extract_private and not _is_exported(name):
                    at_source(logger, origin, raw.line).debug("dropping unexported field %s.%s", spec.name, name)
                    continue
                type_repr = _as_repr(raw.type)
                if type_repr.unsupported:
                    if parse_field_tag(raw.tag, name, spec.name).skip:
                        logger.info("skipping field %s of struct %s", name, spec.name)
                        continue
                    raise UnsupportedTypeError(
                        f"{format_position(origin, raw.line)}: field '{name}' in struct '{spec.name}' has a "
                        f"{type_repr.unsupported} type, which cannot be translated; "
                        f"tag it with capid:\"skip\" to leave it out")
                if type_repr.fixed_array:
                    at_source(logger, origin, raw.line).warning(
                        "fixed size array field %s.%s is treated as a list", spec.name, name)
                reports.append(FieldReport(
                    name=name,
                    type=TypeSequence(type_repr.tokens),
                    tag=raw.tag,
                    embedded=raw.embedded,
                    fixed_array=type_repr.fixed_array,
                    line=raw.line,
                ))
        return reports


def parse_go_file(path: str, extract_private: bool = False) -> SourceUnit:
    return GoParser(extract_private).parse_file(path)


def parse_go_string(src: str, extract_private: bool = False, origin: str = "<string>") -> SourceUnit:
    return GoParser(extract_private).parse_string(src, origin)

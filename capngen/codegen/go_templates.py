from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Optional

from jinja2 import Environment, FileSystemLoader

_TEMPLATE_DIR = Path(__file__).with_name("templates")


@lru_cache(maxsize=None)
def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(_TEMPLATE_DIR),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
    )


def _normalize_lines(lines: Iterable[str]) -> tuple[str, ...]:
    normalized: list[str] = []
    for entry in lines:
        if entry is None:
            continue
        parts = str(entry).splitlines()
        if not parts:
            normalized.append("")
            continue
        normalized.extend(parts)
    return tuple(normalized)


@dataclass(frozen=True)
class TranslatorHeaderContext:
    package: str
    has_structs: bool

    def as_template_args(self) -> dict[str, Any]:
        return {"package": self.package, "has_structs": self.has_structs}


@dataclass(frozen=True)
class StructTranslatorContext:
    """Template inputs for one struct's Save/Load methods and converters."""

    host_name: str
    idl_name: str
    capn_to_go: str
    go_to_capn: str
    to_go_lines: tuple[str, ...]
    to_capn_lines: tuple[str, ...]

    @classmethod
    def create(
        cls,
        *,
        host_name: str,
        idl_name: str,
        capn_to_go: str,
        go_to_capn: str,
        to_go_lines: Iterable[str],
        to_capn_lines: Iterable[str],
    ) -> "StructTranslatorContext":
        return cls(
            host_name=host_name,
            idl_name=idl_name,
            capn_to_go=capn_to_go,
            go_to_capn=go_to_capn,
            to_go_lines=_normalize_lines(to_go_lines),
            to_capn_lines=_normalize_lines(to_capn_lines),
        )

    def as_template_args(self) -> dict[str, Any]:
        return {
            "host_name": self.host_name,
            "idl_name": self.idl_name,
            "capn_to_go": self.capn_to_go,
            "go_to_capn": self.go_to_capn,
            "to_go_lines": self.to_go_lines,
            "to_capn_lines": self.to_capn_lines,
        }


def render_translator_header(context: TranslatorHeaderContext) -> str:
    template = _get_env().get_template("translator_header.go.j2")
    return template.render(context.as_template_args()).rstrip("\n")


def render_struct_translator(context: StructTranslatorContext) -> str:
    template = _get_env().get_template("struct_translator.go.j2")
    return template.render(context.as_template_args()).rstrip("\n")


@lru_cache(maxsize=None)
def _get_list_helper_module():
    template = _get_env().get_template("list_helpers.go.j2")
    return template.module


def render_list_helper(macro_name: str, /, **params: Any) -> str:
    module = _get_list_helper_module()
    try:
        macro = getattr(module, macro_name)
    except AttributeError as exc:
        raise ValueError(f"unknown list helper macro: {macro_name}") from exc
    rendered = macro(**params)
    if not isinstance(rendered, str):
        rendered = str(rendered)
    return rendered.strip("\n")


def render_to_idl_helper(
    *,
    name: str,
    host_go_type: str,
    idl_go_type: str,
    constructor: str,
    element_expr: str,
    guard: Optional[str] = None,
) -> str:
    return render_list_helper(
        "to_idl",
        name=name,
        host_go_type=host_go_type,
        idl_go_type=idl_go_type,
        constructor=constructor,
        element_expr=element_expr,
        guard=guard or "",
    )


def render_to_host_helper(
    *,
    name: str,
    host_go_type: str,
    idl_go_type: str,
    element_expr: str,
    text_export: bool = False,
) -> str:
    return render_list_helper(
        "to_host",
        name=name,
        host_go_type=host_go_type,
        idl_go_type=idl_go_type,
        element_expr=element_expr,
        text_export=text_export,
    )


@dataclass(frozen=True)
class SchemaStructBlock:
    idl_name: str
    lines: tuple[str, ...]


@dataclass(frozen=True)
class SchemaContext:
    schema_id: str
    package: str
    import_path: str
    structs: tuple[SchemaStructBlock, ...]
    header: bool = True

    def as_template_args(self) -> dict[str, Any]:
        return {
            "schema_id": self.schema_id,
            "package": self.package,
            "import_path": self.import_path,
            "structs": self.structs,
            "header": self.header,
        }


def render_schema(context: SchemaContext) -> str:
    template = _get_env().get_template("schema.capnp.j2")
    return template.render(context.as_template_args()).strip("\n")

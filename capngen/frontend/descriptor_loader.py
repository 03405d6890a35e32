"""JSON descriptor front end.

A descriptor file lists struct and alias declarations without any Go
syntax; field types are token arrays such as ``["list", "pointer", "Big"]``
or Go type text such as ``"[]*Big"``.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Union

from jsonschema import Draft202012Validator  # type: ignore

from capngen import logging as capngen_logging
from capngen.errors import DescriptorError, TypeSequenceError
from capngen.frontend.reports import (AliasReport, Declaration, FieldReport,
                                      SourceUnit, StructReport)
from capngen.model.type_sequence import TypeSequence
from capngen.utils import read_file

logger = capngen_logging.get_logger(__name__)

SCHEMA_PATH = Path(__file__).with_name("descriptors.schema.json")


@lru_cache(maxsize=None)
def load_schema() -> dict:
    with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
        return json.load(f)


def _validator() -> Draft202012Validator:
    return Draft202012Validator(load_schema())


def _error_path(error) -> str:
    return "/".join(str(part) for part in error.absolute_path) or "<root>"


def validate_descriptor(document: Any, origin: str = "<descriptor>") -> None:
    errors = sorted(_validator().iter_errors(document), key=lambda e: list(e.absolute_path))
    if errors:
        details = "\n".join(f"  {_error_path(e)}: {e.message}" for e in errors)
        raise DescriptorError(f"{origin}: invalid descriptor\n{details}")


def _type_sequence(spec: Union[list, str], where: str) -> TypeSequence:
    try:
        if isinstance(spec, str):
            return TypeSequence.parse(spec)
        return TypeSequence.from_words(spec)
    except TypeSequenceError as exc:
        raise DescriptorError(f"{where}: {exc}") from exc


def _field(entry: dict, struct_name: str, origin: str) -> FieldReport:
    where = f"{origin}: field '{entry['name']}' of struct '{struct_name}'"
    return FieldReport(
        name=entry["name"],
        type=_type_sequence(entry["type"], where),
        tag=entry.get("tag", ""),
        rename=entry.get("rename"),
        order=entry.get("order"),
        skip=entry.get("skip", False),
        embedded=entry.get("embedded", False),
    )


def load_descriptor(document: dict, origin: str = "<descriptor>") -> SourceUnit:
    validate_descriptor(document, origin)
    declarations: list[Declaration] = []
    for entry in document["declarations"]:
        match entry["kind"]:
            case "struct":
                declarations.append(StructReport(
                    name=entry["name"],
                    fields=[_field(f, entry["name"], origin) for f in entry["fields"]],
                    comment=entry.get("comment", ""),
                    rename=entry.get("rename"),
                ))
            case "alias":
                declarations.append(AliasReport(
                    name=entry["name"],
                    target=_type_sequence(entry["target"], f"{origin}: alias '{entry['name']}'"),
                ))
    capngen_logging.at_source(logger, origin).debug("loaded %d declaration(s)", len(declarations))
    return SourceUnit(origin=origin, declarations=declarations, package=document.get("package"))


def load_descriptor_string(text: str, origin: str = "<descriptor>") -> SourceUnit:
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DescriptorError(f"{origin}:{exc.lineno}:{exc.colno}: {exc.msg}") from exc
    return load_descriptor(document, origin)


def load_descriptor_file(path: str) -> SourceUnit:
    return load_descriptor_string(read_file(path), origin=str(path))

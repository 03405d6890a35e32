"""Identifier derivation, rename annotations and reserved-word checks."""

import re
from dataclasses import dataclass
from typing import Optional

from capngen.errors import AnnotationError, ReservedWordError
from capngen.mapper.primitives import is_reserved

DEFAULT_STRUCT_SUFFIX = "Capn"

CAPNAME_RE = re.compile(r'capname:[ \t]*"([^"]+)"')
CAPID_RE = re.compile(r'capid:[ \t]*"([^"]+)"')

_SKIP_VALUES = {"skip", "-"}


@dataclass(frozen=True)
class FieldTag:
    rename: Optional[str] = None
    order: Optional[int] = None
    skip: bool = False
    text: str = ""


def uppercase_first(name: str) -> str:
    if not name:
        return name
    return name[0].upper() + name[1:]


def lowercase_first(name: str) -> str:
    if not name:
        return name
    return name[0].lower() + name[1:]


def under_to_camel_case(name: str) -> str:
    """``my_field_name`` -> ``myFieldName``; leading underscores are dropped."""
    parts = [p for p in name.split("_") if p]
    if not parts:
        return name
    return parts[0] + "".join(uppercase_first(p) for p in parts[1:])


def find_capname(text: str) -> Optional[str]:
    if not text:
        return None
    m = CAPNAME_RE.search(text)
    return m.group(1) if m else None


def default_struct_name(host_name: str, suffix: str = DEFAULT_STRUCT_SUFFIX) -> str:
    return uppercase_first(host_name) + suffix


def derive_struct_name(host_name: str, comment: str = "", suffix: str = DEFAULT_STRUCT_SUFFIX,
                       rename: Optional[str] = None) -> str:
    capname = rename or find_capname(comment)
    if capname:
        idl_name = capname
        check_reserved(
            idl_name,
            f"the capname annotation on struct '{host_name}' gives '{idl_name}' but this is a "
            f"reserved capnp word, so please use a *different* comment annotation "
            f"(e.g. // capname:\"capName\") to rename it",
        )
        return idl_name

    idl_name = default_struct_name(host_name, suffix)
    check_reserved(
        idl_name,
        f"after uppercasing the first letter, struct '{host_name}' becomes '{idl_name}' but this "
        f"is a reserved capnp word, so please write a comment annotation just before the struct "
        f"definition in go (e.g. // capname:\"capName\") to rename it",
    )
    return idl_name


def derive_field_name(host_name: str, rename: Optional[str] = None) -> str:
    if rename:
        check_reserved(
            rename,
            f"problem detected after applying the capname tag on field '{host_name}': "
            f"'{rename}' is a reserved capnp word, so please use a *different* struct field tag "
            f"(e.g. capname:\"capnpName\") to rename it",
        )
        return rename

    lowered = under_to_camel_case(lowercase_first(host_name))
    check_reserved(
        lowered,
        f"after lowercasing the first letter, field '{host_name}' becomes '{lowered}' but this is "
        f"a reserved capnp word, so please use a struct field tag (e.g. capname:\"capnpName\") "
        f"to rename it",
    )
    return lowered


def check_reserved(identifier: str, message: str) -> None:
    if is_reserved(identifier):
        raise ReservedWordError(message, identifier)


def parse_order_value(value, field_name: str, struct_name: str) -> tuple[Optional[int], bool]:
    """Interpret a capid value. Returns ``(order, skip)``."""
    if value is None:
        return None, False
    if isinstance(value, bool):
        raise AnnotationError(
            f"problem in capid tag '{value}' on field '{field_name}' in struct '{struct_name}': "
            f"could not convert to number")
    if isinstance(value, int):
        return (None, True) if value < 0 else (value, False)
    text = str(value).strip()
    if text in _SKIP_VALUES:
        return None, True
    try:
        number = int(text)
    except ValueError as exc:
        raise AnnotationError(
            f"problem in capid tag '{text}' on field '{field_name}' in struct '{struct_name}': "
            f"could not convert to number, error: '{exc}'") from exc
    if number < 0:
        return None, True
    return number, False


def parse_field_tag(tag: str, field_name: str = "", struct_name: str = "") -> FieldTag:
    """Read ``capname`` and ``capid`` out of a Go struct tag."""
    if not tag:
        return FieldTag()
    rename = find_capname(tag)
    m = CAPID_RE.search(tag)
    order, skip = parse_order_value(m.group(1) if m else None, field_name, struct_name)
    return FieldTag(rename=rename, order=order, skip=skip, text=tag)

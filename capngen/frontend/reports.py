from dataclasses import dataclass, field
from typing import Optional, Union

from capngen.model.type_sequence import TypeSequence


@dataclass
class FieldReport:
    name: str
    type: TypeSequence
    tag: str = ""
    rename: Optional[str] = None
    order: Optional[Union[int, str]] = None
    skip: bool = False
    embedded: bool = False
    fixed_array: bool = False
    line: Optional[int] = None


@dataclass
class StructReport:
    name: str
    fields: list[FieldReport] = field(default_factory=list)
    comment: str = ""
    rename: Optional[str] = None
    line: Optional[int] = None


@dataclass
class AliasReport:
    name: str
    target: TypeSequence
    line: Optional[int] = None


Declaration = Union[StructReport, AliasReport]


@dataclass
class SourceUnit:
    """Declarations read from one input, plus where they came from."""

    origin: str
    declarations: list[Declaration]
    package: Optional[str] = None
    imports: list[str] = field(default_factory=list)

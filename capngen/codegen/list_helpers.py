"""Memoized Go helpers converting slices to capn lists and back.

One pair of functions is generated per distinct host list shape, keyed by
the host rendering of that shape (``[][]int``, ``[]*Big``). Every field in
every struct sharing a shape calls the same pair.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from capngen import logging as capngen_logging
from capngen.codegen.conversions import (list_constructor, list_element_read,
                                         list_element_write, list_go_type,
                                         to_host_expr)
from capngen.codegen.go_templates import (render_to_host_helper,
                                          render_to_idl_helper)
from capngen.mapper.mapped_type import Kind, MappedType
from capngen.model.type_sequence import ListOf, Named, Pointer, TypeSequence
from capngen.naming import uppercase_first

logger = capngen_logging.get_logger(__name__)


@dataclass(frozen=True)
class HelperPair:
    signature: str
    to_idl: str
    to_host: str
    to_idl_body: str
    to_host_body: str


def shape_signature(host_seq: TypeSequence) -> str:
    return host_seq.host_text()


def host_shape_name(host_seq: TypeSequence) -> str:
    parts = []
    for token in host_seq:
        match token:
            case ListOf():
                parts.append("Slice")
            case Pointer():
                parts.append("Ptr")
            case Named(name=name):
                parts.append(uppercase_first(name))
    return "".join(parts)


def idl_shape_name(idl_seq: TypeSequence) -> str:
    return idl_seq.base + "List" * idl_seq.list_depth


class HelperCache:
    def __init__(self):
        self._pairs: dict[str, HelperPair] = {}
        self._names: dict[str, str] = {}

    def get(self, signature: str) -> Optional[HelperPair]:
        return self._pairs.get(signature)

    def owner(self, function_name: str) -> Optional[str]:
        """Signature whose pair defines ``function_name``, if any."""
        return self._names.get(function_name)

    def put(self, pair: HelperPair) -> None:
        if pair.signature in self._pairs:
            raise ValueError(f"helper pair for '{pair.signature}' already generated")
        for function_name in (pair.to_idl, pair.to_host):
            owner = self._names.get(function_name)
            if owner is not None:
                raise ValueError(f"helper {function_name} already generated for '{owner}'")
        self._pairs[pair.signature] = pair
        self._names[pair.to_idl] = pair.signature
        self._names[pair.to_host] = pair.signature

    def sorted_pairs(self) -> list[HelperPair]:
        return sorted(self._pairs.values(), key=lambda p: p.to_idl)

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[HelperPair]:
        return iter(self.sorted_pairs())


class ListHelperGenerator:
    def __init__(self, cache: Optional[HelperCache] = None):
        self.cache = cache if cache is not None else HelperCache()
        self.generated = 0

    def ensure_helpers(
        self,
        signature: str,
        idl_seq: TypeSequence,
        host_seq: TypeSequence,
        element: MappedType,
    ) -> HelperPair:
        cached = self.cache.get(signature)
        if cached is not None:
            return cached

        base_name = host_shape_name(host_seq)
        idl_name = idl_shape_name(idl_seq)
        host_name = base_name
        # []Celsius and []celsius share a shape name
        suffix = 2
        while (self.cache.owner(f"{host_name}To{idl_name}") is not None
               or self.cache.owner(f"{idl_name}To{host_name}") is not None):
            host_name = f"{base_name}{suffix}"
            suffix += 1
        if host_name != base_name:
            logger.info("helpers for shape %s renamed to %s to avoid a clash", signature, host_name)
        to_idl = f"{host_name}To{idl_name}"
        to_host = f"{idl_name}To{host_name}"
        host_go_type = host_seq.host_text()
        capn_type = list_go_type(element)

        guard = None
        if element.kind == Kind.STRUCT and element.pointer:
            guard = "m[i] != nil"

        text_export = (
            element.kind == Kind.SCALAR
            and element.idl_base == "Text"
            and element.host_go_type == "string"
        )

        pair = HelperPair(
            signature=signature,
            to_idl=to_idl,
            to_host=to_host,
            to_idl_body=render_to_idl_helper(
                name=to_idl,
                host_go_type=host_go_type,
                idl_go_type=capn_type,
                constructor=list_constructor(element, "len(m)"),
                element_expr=list_element_write(element),
                guard=guard,
            ),
            to_host_body=render_to_host_helper(
                name=to_host,
                host_go_type=host_go_type,
                idl_go_type=capn_type,
                element_expr=to_host_expr(element, list_element_read(element)),
                text_export=text_export,
            ),
        )
        self.cache.put(pair)
        self.generated += 1
        logger.debug("generated list helpers %s / %s for shape %s", to_idl, to_host, signature)
        return pair

    def dump(self) -> list[str]:
        """Every helper body, pairs sorted by function name."""
        bodies: list[str] = []
        for pair in self.cache.sorted_pairs():
            bodies.append(pair.to_idl_body)
            bodies.append(pair.to_host_body)
        return bodies

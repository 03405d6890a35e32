"""Go expressions converting single values between host and capn form."""

from capngen.mapper.mapped_type import Kind, MappedType
from capngen.mapper.primitives import capnp_list_type


def capn_to_go_name(host_name: str) -> str:
    return f"{host_name}CapnToGo"


def go_to_capn_name(host_name: str) -> str:
    return f"{host_name}GoToCapn"


def list_go_type(element: MappedType) -> str:
    """capn type of a list holding ``element`` values."""
    match element.kind:
        case Kind.SCALAR | Kind.BLOB:
            return f"capn.{capnp_list_type(element.idl_base)}"
        case Kind.STRUCT:
            return f"{element.idl_go_type}_List"
        case Kind.LIST:
            return "capn.PointerList"
    raise ValueError(f"unknown kind: {element.kind}")


def list_constructor(element: MappedType, length: str) -> str:
    match element.kind:
        case Kind.SCALAR | Kind.BLOB:
            return f"seg.New{capnp_list_type(element.idl_base)}({length})"
        case Kind.STRUCT:
            return f"New{element.idl_go_type}List(seg, {length})"
        case Kind.LIST:
            return f"seg.NewPointerList({length})"
    raise ValueError(f"unknown kind: {element.kind}")


def to_idl_expr(mapped: MappedType, expr: str) -> str:
    """Expression turning the host value ``expr`` into its capn value."""
    match mapped.kind:
        case Kind.SCALAR:
            value = f"*{expr}" if mapped.pointer else expr
            if mapped.base_host == mapped.idl_go_type:
                return value
            return f"{mapped.idl_go_type}({value})"
        case Kind.BLOB:
            if mapped.host_go_type == "[]byte":
                return expr
            return f"[]byte({expr})"
        case Kind.STRUCT:
            arg = expr if mapped.pointer else f"&{expr}"
            if mapped.base_host != mapped.struct_host:
                arg = f"(*{mapped.struct_host})({arg})"
            return f"{go_to_capn_name(mapped.struct_host)}(seg, {arg})"
        case Kind.LIST:
            assert mapped.helpers is not None
            return f"{mapped.helpers.to_idl}(seg, {expr})"
    raise ValueError(f"unknown kind: {mapped.kind}")


def to_host_expr(mapped: MappedType, expr: str) -> str:
    """Expression turning the capn value ``expr`` into its host value.

    Pointers to scalars yield the pointed-to value; callers take its address.
    """
    match mapped.kind:
        case Kind.SCALAR:
            if mapped.base_host == mapped.idl_go_type:
                return expr
            return f"{mapped.base_host}({expr})"
        case Kind.BLOB:
            if mapped.host_go_type == "[]byte":
                return expr
            return f"{mapped.host_go_type}({expr})"
        case Kind.STRUCT:
            call = f"{capn_to_go_name(mapped.struct_host)}({expr}, nil)"
            aliased = mapped.base_host != mapped.struct_host
            if mapped.pointer:
                return f"(*{mapped.base_host})({call})" if aliased else call
            return f"{mapped.base_host}(*{call})" if aliased else f"*{call}"
        case Kind.LIST:
            assert mapped.helpers is not None
            return f"{mapped.helpers.to_host}({expr})"
    raise ValueError(f"unknown kind: {mapped.kind}")


def list_element_read(element: MappedType) -> str:
    """Read element ``i`` of a capn list named ``p``."""
    if element.kind == Kind.LIST:
        return f"{element.idl_go_type}(p.At(i))"
    return "p.At(i)"


def list_element_write(element: MappedType) -> str:
    """Value stored at index ``i`` of a capn list built from host slice ``m``."""
    value = to_idl_expr(element, "m[i]")
    if element.kind == Kind.LIST:
        return f"capn.Object({value})"
    return value

from .capnp import CapnpCompiler
from .thirdparty import ThirdParty


def check_all_requirements() -> list[str]:
    result = []
    result.extend(CapnpCompiler.check_requirements())
    return result


__all__ = [
    'CapnpCompiler',
    'ThirdParty',
    'check_all_requirements',
]

import pytest

from capngen.utils import load_default_config


def strip_whitespace(text: str) -> str:
    return "".join(text.split())


def starts_with_modulo_whitespace(actual: str, expected: str) -> bool:
    return strip_whitespace(actual).startswith(strip_whitespace(expected))


def contains_modulo_whitespace(actual: str, expected: str) -> bool:
    return strip_whitespace(expected) in strip_whitespace(actual)


@pytest.fixture
def config():
    return load_default_config()

"""Token sequences describing a field type, outermost wrapper first."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Sequence, Union

from capngen.errors import TypeSequenceError


@dataclass(frozen=True)
class Pointer:
    pass


@dataclass(frozen=True)
class ListOf:
    pass


@dataclass(frozen=True)
class Named:
    name: str


TypeToken = Union[Pointer, ListOf, Named]

_ARRAY_PREFIX_RE = re.compile(r"\[[^\]]*\]")
_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)?")

_TOKEN_WORDS = {"pointer": Pointer(), "list": ListOf()}


class TypeSequence:
    """Ordered wrappers terminated by exactly one ``Named`` token."""

    __slots__ = ("_tokens",)

    def __init__(self, tokens: Sequence[TypeToken]):
        tokens = tuple(tokens)
        if not tokens:
            raise TypeSequenceError("type sequence is empty")
        for position, token in enumerate(tokens):
            is_last = position == len(tokens) - 1
            match token:
                case Named(name=name):
                    if not is_last:
                        raise TypeSequenceError(
                            f"named type '{name}' must be the last token of the sequence")
                    if not name:
                        raise TypeSequenceError("named type has an empty name")
                case Pointer() | ListOf():
                    if is_last:
                        raise TypeSequenceError(
                            "type sequence must end with a named type")
                case _:
                    raise TypeSequenceError(f"unknown type token: {token!r}")
        self._tokens = tokens

    @classmethod
    def of(cls, *tokens: TypeToken) -> "TypeSequence":
        return cls(tokens)

    @classmethod
    def named(cls, name: str) -> "TypeSequence":
        return cls((Named(name),))

    @classmethod
    def parse(cls, text: str) -> "TypeSequence":
        """Build a sequence from Go type text such as ``[]*Big`` or ``[4][]int``."""
        rest = text.strip()
        tokens: list[TypeToken] = []
        while rest:
            if rest.startswith("*"):
                tokens.append(Pointer())
                rest = rest[1:].lstrip()
                continue
            m = _ARRAY_PREFIX_RE.match(rest)
            if m:
                tokens.append(ListOf())
                rest = rest[m.end():].lstrip()
                continue
            m = _NAME_RE.fullmatch(rest)
            if not m:
                raise TypeSequenceError(f"cannot parse type '{text}'")
            tokens.append(Named(rest))
            rest = ""
        return cls(tokens)

    @classmethod
    def from_words(cls, words: Sequence[str]) -> "TypeSequence":
        """Build a sequence from descriptor words: ``["list", "pointer", "Big"]``."""
        tokens: list[TypeToken] = []
        for position, word in enumerate(words):
            if position < len(words) - 1 and word in _TOKEN_WORDS:
                tokens.append(_TOKEN_WORDS[word])
            else:
                tokens.append(Named(word))
        return cls(tokens)

    @property
    def tokens(self) -> tuple[TypeToken, ...]:
        return self._tokens

    @property
    def wrappers(self) -> tuple[TypeToken, ...]:
        return self._tokens[:-1]

    @property
    def base(self) -> str:
        last = self._tokens[-1]
        assert isinstance(last, Named)
        return last.name

    @property
    def list_depth(self) -> int:
        return sum(1 for token in self._tokens if isinstance(token, ListOf))

    def inner(self) -> "TypeSequence":
        """Drop the outermost wrapper."""
        if len(self._tokens) == 1:
            raise TypeSequenceError(f"'{self.host_text()}' has no wrapper to drop")
        return TypeSequence(self._tokens[1:])

    def wrap(self, token: TypeToken) -> "TypeSequence":
        return TypeSequence((token,) + self._tokens)

    def host_text(self) -> str:
        parts = []
        for token in self._tokens:
            match token:
                case Pointer():
                    parts.append("*")
                case ListOf():
                    parts.append("[]")
                case Named(name=name):
                    parts.append(name)
        return "".join(parts)

    def idl_text(self) -> str:
        text = self.base
        for token in reversed(self.wrappers):
            match token:
                case ListOf():
                    text = f"List({text})"
                case Pointer():
                    # the IDL has no pointers
                    continue
        return text

    def __iter__(self) -> Iterator[TypeToken]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeSequence):
            return NotImplemented
        return self._tokens == other._tokens

    def __hash__(self) -> int:
        return hash(self._tokens)

    def __repr__(self) -> str:
        return f"TypeSequence({self.host_text()!r})"

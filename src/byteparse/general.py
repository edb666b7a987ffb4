
from __future__ import annotations
from typing import Any, Final, TypeVar

from collections.abc import Iterable, Mapping

from byteparse import *

_T = TypeVar("_T")


def _byte_value(value: int | bytes) -> int:
    if isinstance(value, int):
        if not 0 <= value <= 255:
            raise ValueError(f"Not a byte: {value}")
        return value
    if len(value) != 1:
        raise ValueError(f"Expected a single byte, got {value!r}.")
    return value[0]

# single bytes

def byte(value: int | bytes) -> Parser[int]:
    """Matches one specific byte. (`byte(b"a")` or `byte(97)`)"""
    expected = _byte_value(value)
    return require(lambda c: c == expected, readchar())

def byte_in(values: Iterable[int]) -> Parser[int]:
    """Matches any byte from the set. (`byte_in(b"abc")`, `byte_in(const.DECIMAL)`)"""
    allowed = frozenset(values)
    return require(lambda c: c in allowed, readchar())

def byte_not_in(values: Iterable[int]) -> Parser[int]:
    """Matches any byte that isn't in the set. Fails at the end of the input."""
    forbidden = frozenset(values)
    return require(lambda c: c not in forbidden, readchar())

def tag(literal: bytes) -> Parser[bytes]:
    """Matches the exact byte string."""
    return process(bytes, concat([byte(b) for b in literal]))

# zero width

class ConstParser(Parser[_T]):
    """Create using `succeed()`."""

    def __init__(self, value: _T) -> None:
        self.value: Final[_T] = value

    def create(self) -> ConstParser[_T]:
        return ConstParser(self.value)

    def parse(self, pos: int, src: ByteSource) -> Outcome[_T]:
        return Success(pos, self.value)

    def __repr__(self) -> str:
        return f"succeed({self.value!r})"

class EofParser(Parser[None]):
    """Create using `eof()`."""

    def create(self) -> EofParser:
        return EofParser()

    def parse(self, pos: int, src: ByteSource) -> Outcome[None]:
        if pos >= len(src):
            return Success(pos, None)
        return FAIL

    def __repr__(self) -> str:
        return "eof()"

def succeed(value: _T) -> Parser[_T]:
    """
    Always matches without consuming anything.

    `value` is returned as-is on every match, so it shouldn't be mutated.
    """
    return ConstParser(value)

def eof() -> Parser[None]:
    """Matches (without consuming) only at the end of the input."""
    return EofParser()

# shortcuts

def constant(value: _T, parser: Parser[Any]) -> Parser[_T]:
    """Replaces the value of the parser."""
    return process(lambda _: value, parser)

def optional(parser: Parser[_T], default: _T | None = None) -> Parser[_T | None]:
    """
    Returns a parser that matches no matter what.

    If the parser didn't match, nothing is consumed and the value is `default`.
    """
    return oneof([parser, succeed(default)])

def many1(parser: Parser[_T]) -> Parser[list[_T]]:
    """Like `star()`, but at least one repetition has to match."""
    return require(bool, star(parser))

def chain(*parsers: Parser[Any]) -> Parser[tuple[Any, ...]]:
    """
    All the given parsers must match in sequence.

    Unlike `concat()`, the parsers can have different value types. Returns a tuple of their values.
    """
    return process(tuple, concat(parsers))

def sep_by(parser: Parser[_T], separator: Parser[Any]) -> Parser[list[_T]]:
    """
    Zero or more matches of `parser`, separated by `separator`.

    A trailing separator is not consumed.
    """
    rest = star(process(lambda r: r[1], chain(separator, parser)))
    items = process(lambda r: [r[0], *r[1]], chain(parser, rest))
    return process(lambda r: [] if r is None else r, optional(items))

# whitespace

def ws0() -> Parser[bytes]:
    """Zero or more whitespaces."""
    return process(bytes, star(byte_in(const.WHITESPACES)))

def ws1() -> Parser[bytes]:
    """One or more whitespaces."""
    return process(bytes, many1(byte_in(const.WHITESPACES)))

# numbers

def integer() -> Parser[int]:
    """Decimal integer with an optional `-` sign."""
    def to_int(r: tuple[Any, ...]) -> int:
        sign, digits = r
        value = int(bytes(digits))
        return -value if sign is not None else value
    return process(to_int, chain(optional(byte(b"-")), many1(byte_in(const.DECIMAL))))

# quoted string

GENERAL_ESCAPES: Final[Mapping[bytes, bytes]] = {
    b'b': b'\b',
    b'f': b'\f',
    b'n': b'\n',
    b'r': b'\r',
    b't': b'\t',
}

def quoted_string(
    quote: int | bytes = b'"',
    escape: int | bytes = b'\\',
    custom_escapes: Mapping[bytes, bytes] = GENERAL_ESCAPES,
) -> Parser[str]:
    """
    A string between two quotes.

    After `escape`, the bytes in `custom_escapes` are replaced. Any other byte is taken literally. (`\\"` is a quote)

    The contents are decoded as UTF-8, with invalid sequences replaced.
    """
    quote_byte = _byte_value(quote)
    escape_byte = _byte_value(escape)
    escapes = dict(custom_escapes)

    def unescape(r: tuple[Any, ...]) -> bytes:
        char = bytes([r[1]])
        return escapes.get(char, char)

    escaped = process(unescape, chain(byte(escape_byte), readchar()))
    plain = process(lambda c: bytes([c]), byte_not_in((quote_byte, escape_byte)))
    body = star(oneof([escaped, plain]))
    return process(
        lambda r: b"".join(r[1]).decode("utf-8", errors="replace"),
        chain(byte(quote_byte), body, byte(quote_byte)),
    )

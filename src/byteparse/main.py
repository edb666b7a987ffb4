"""
The implementations of the main classes.
"""

from __future__ import annotations
from typing import Any, Literal, TypeVar, Generic, SupportsIndex, Final, Callable, Protocol

from abc import ABC, abstractmethod
from collections.abc import Iterator, Iterable
import logging


logger = logging.getLogger(__name__)


_T = TypeVar("_T")
_U = TypeVar("_U")
_DataCovT = TypeVar("_DataCovT", covariant=True)



class ByteSource(Protocol):
    """
    Anything that can be parsed: `bytes`, `bytearray`, `memoryview`...

    Only read, never modified.
    """
    def __len__(self) -> int: ...
    def __getitem__(self, key: SupportsIndex, /) -> int: ...


class ParseFailure:
    """
    When returned from a parser, indicates that it has failed.

    Carries no data. All failures are equal, so there's usually no reason to create one: use `FAIL`.

    ```
    r = parser.parse(0, src)
    if r:
        ... # `r` is a `Success` object
    else:
        ... # `r` is a `ParseFailure` object
    ```
    """

    def __bool__(self) -> Literal[False]:
        return False

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ParseFailure)

    def __hash__(self) -> int:
        return hash(ParseFailure)

    def __repr__(self) -> str:
        return "ParseFailure()"

FAIL: Final[ParseFailure] = ParseFailure()
"""The shared failure value."""

class Success(Generic[_DataCovT]):
    """
    When returned from a parser, indicates that it has succeeded.

    ```
    r = parser.parse(0, src)
    if r:
        r.pos       # the position right after the consumed input
        r.value     # the parsed value
    ```

    Can be unpacked: `pos, value = r`
    """
    def __init__(self, pos: int, value: _DataCovT) -> None:
        self.pos: Final[int] = pos
        self.value: Final[_DataCovT] = value

    def __bool__(self) -> Literal[True]:
        return True

    def __iter__(self) -> Iterator[Any]:
        yield self.pos
        yield self.value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Success):
            return self.pos == other.pos and self.value == other.value
        return NotImplemented

    def __repr__(self) -> str:
        return f"Success({self.pos!r}, {self.value!r})"

Outcome = Success[_T] | ParseFailure

class ParseError(Exception):
    """
    Raised by `parse_all()` when the input can't be parsed as a whole.

    Parsers themselves never raise this. Inside a grammar, failing is done by returning `FAIL`.
    """

    def __init__(self, msg: str | None = None, remaining: int = 0) -> None:
        """
        `msg`: The reason for the error.
        `remaining`: The amount of bytes that were left unconsumed. 0 if the parser failed outright.
        """
        if msg is None:
            super().__init__()
        else:
            super().__init__(msg)
        self.remaining: int = remaining



class Parser(ABC, Generic[_DataCovT]):
    """
    The base class of all parsers.

    A parser is immutable once created, and `parse()` is a pure function of its arguments, so a single parser can be reused freely.

    Defining a new kind of parser:
    ```
    class Nothing(Parser[None]):
        def create(self) -> Nothing:
            return Nothing()

        def parse(self, pos: int, src: ByteSource) -> Outcome[None]:
            return Success(pos, None)
    ```
    """

    @abstractmethod
    def parse(self, pos: int, src: ByteSource) -> Outcome[_DataCovT]:
        """
        Attempts to match at `pos`. (`0 <= pos <= len(src)`)

        Returns a `Success` holding the position after the match, or `FAIL`.
        """
        raise NotImplementedError

    @abstractmethod
    def create(self) -> Parser[_DataCovT]:
        """
        Creates an independent parser that behaves the same as this one.

        Combinators call this on their sub-parsers when they're constructed, so that they own their children.
        """
        raise NotImplementedError

    def __copy__(self) -> Parser[_DataCovT]:
        return self.create()


class CharParser(Parser[int]):
    """Consumes a single byte. Create using `readchar()`."""

    def create(self) -> CharParser:
        return CharParser()

    def parse(self, pos: int, src: ByteSource) -> Outcome[int]:
        if pos < len(src):
            return Success(pos + 1, src[pos])
        return FAIL

    def __repr__(self) -> str:
        return "readchar()"

class SeqParser(Parser[list[_T]]):
    """Create using `concat()`."""

    def __init__(self, parsers: Iterable[Parser[_T]]) -> None:
        self.parsers: Final[tuple[Parser[_T], ...]] = tuple(parser.create() for parser in parsers)

    def create(self) -> SeqParser[_T]:
        return SeqParser(self.parsers)

    def parse(self, pos: int, src: ByteSource) -> Outcome[list[_T]]:
        cursor = pos
        values: list[_T] = []
        for parser in self.parsers:
            r = parser.parse(cursor, src)
            if not r:
                return FAIL
            values.append(r.value)
            cursor = r.pos
        return Success(cursor, values)

    def __repr__(self) -> str:
        return f"concat({list(self.parsers)!r})"

class OneOfParser(Parser[_T]):
    """Create using `oneof()`."""

    def __init__(self, parsers: Iterable[Parser[_T]]) -> None:
        self.parsers: Final[tuple[Parser[_T], ...]] = tuple(parser.create() for parser in parsers)

    def create(self) -> OneOfParser[_T]:
        return OneOfParser(self.parsers)

    def parse(self, pos: int, src: ByteSource) -> Outcome[_T]:
        for parser in self.parsers:
            if r := parser.parse(pos, src):
                return r
        return FAIL

    def __repr__(self) -> str:
        return f"oneof({list(self.parsers)!r})"

class FilterParser(Parser[_T]):
    """Create using `require()`."""

    def __init__(self, predicate: Callable[[_T], bool], parser: Parser[_T]) -> None:
        self.predicate: Final[Callable[[_T], bool]] = predicate
        self.parser: Final[Parser[_T]] = parser.create()

    def create(self) -> FilterParser[_T]:
        return FilterParser(self.predicate, self.parser)

    def parse(self, pos: int, src: ByteSource) -> Outcome[_T]:
        r = self.parser.parse(pos, src)
        if r and self.predicate(r.value):
            return r
        return FAIL

    def __repr__(self) -> str:
        return f"require({self.predicate!r}, {self.parser!r})"

class MapParser(Parser[_U], Generic[_T, _U]):
    """Create using `process()`."""

    def __init__(self, function: Callable[[_T], _U], parser: Parser[_T]) -> None:
        self.function: Final[Callable[[_T], _U]] = function
        self.parser: Final[Parser[_T]] = parser.create()

    def create(self) -> MapParser[_T, _U]:
        return MapParser(self.function, self.parser)

    def parse(self, pos: int, src: ByteSource) -> Outcome[_U]:
        r = self.parser.parse(pos, src)
        if not r:
            return FAIL
        return Success(r.pos, self.function(r.value))

    def __repr__(self) -> str:
        return f"process({self.function!r}, {self.parser!r})"

class StarParser(Parser[list[_T]]):
    """Create using `star()`."""

    def __init__(self, parser: Parser[_T]) -> None:
        self.parser: Final[Parser[_T]] = parser.create()

    def create(self) -> StarParser[_T]:
        return StarParser(self.parser)

    def parse(self, pos: int, src: ByteSource) -> Outcome[list[_T]]:
        cursor = pos
        values: list[_T] = []
        while r := self.parser.parse(cursor, src):
            if r.pos <= cursor:
                # would loop forever
                logger.debug("%r matched without consuming input at position %d, stopping.", self.parser, cursor)
                break
            values.append(r.value)
            cursor = r.pos
        return Success(cursor, values)

    def __repr__(self) -> str:
        return f"star({self.parser!r})"

class LazyParser(Parser[_T]):
    """Create using `lazy()`."""

    def __init__(self, thunk: Callable[[], Parser[_T]]) -> None:
        self.thunk: Final[Callable[[], Parser[_T]]] = thunk

    def create(self) -> LazyParser[_T]:
        return LazyParser(self.thunk)

    def parse(self, pos: int, src: ByteSource) -> Outcome[_T]:
        return self.thunk().parse(pos, src)

    def __repr__(self) -> str:
        # don't resolve, the grammar may be recursive
        return f"lazy({self.thunk!r})"



def readchar() -> Parser[int]:
    """
    Consumes one byte and returns it as an `int`.

    Fails at the end of the input.
    """
    return CharParser()

def concat(parsers: Iterable[Parser[_T]]) -> Parser[list[_T]]:
    """
    All the given parsers must match in sequence for the parser to succeed.

    Returns the list of their values. An empty sequence matches without consuming anything.
    """
    return SeqParser(parsers)

def oneof(parsers: Iterable[Parser[_T]]) -> Parser[_T]:
    """
    Attempts to match any of the parsers, in order, from the same starting position.

    The first one that matches wins, even if a later one would match more. If none match (or there are none), fails.
    """
    return OneOfParser(parsers)

def require(predicate: Callable[[_T], bool], parser: Parser[_T]) -> Parser[_T]:
    """
    Only succeeds if the parser matches and its value passes the predicate.

    `predicate` should be a pure function.
    ```
    digit = require(lambda c: c in const.DECIMAL, readchar())
    ```
    """
    return FilterParser(predicate, parser)

def process(function: Callable[[_T], _U], parser: Parser[_T]) -> Parser[_U]:
    """
    Applies the function to the value of the parser if it matches.

    `function` should be pure and work on any value the parser can produce. Exceptions raised from it aren't caught.
    ```
    text = process(lambda bs: bytes(bs).decode(), star(readchar()))
    ```
    """
    return MapParser(function, parser)

def star(parser: Parser[_T]) -> Parser[list[_T]]:
    """
    Repeatedly matches the given parser until it fails. Never fails itself.

    Returns the list of the values, which may be empty.

    Stops if the parser matches without consuming anything, since it would match the same way forever. That value is not included.
    """
    return StarParser(parser)

def lazy(thunk: Callable[[], Parser[_T]]) -> Parser[_T]:
    """
    Calls `thunk` to get the parser every time it's used.

    For recursive grammars, where a parser needs to refer to itself or to one that's defined later:
    ```
    # nesting depth of balanced parentheses
    group = process(lambda r: r[1] + 1, concat([open_paren, lazy(lambda: depth), close_paren]))
    depth = process(lambda ds: max(ds, default=0), star(group))
    ```

    `thunk` should always return the same parser.
    """
    return LazyParser(thunk)

def parse_all(parser: Parser[_T], src: ByteSource, pos: int = 0) -> _T:
    """
    Parses the whole input, starting from `pos`, and returns the value.

    Raises `ParseError` if the parser fails or doesn't consume everything.
    """
    if not 0 <= pos <= len(src):
        raise ValueError(f"Starting position {pos} is outside of the input. (Length: {len(src)})")
    r = parser.parse(pos, src)
    if not r:
        logger.debug("%r failed.", parser)
        raise ParseError("Failed to parse.")
    if r.pos < len(src):
        remaining = len(src) - r.pos
        logger.debug("%r left %d bytes unconsumed.", parser, remaining)
        raise ParseError(f"Failed to parse the entire input. {remaining} bytes remaining.", remaining)
    return r.value

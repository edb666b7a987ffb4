# tests/test_general.py

import pytest

from byteparse import FAIL, Success, const, parse_all, readchar
from byteparse.general import (
    byte,
    byte_in,
    byte_not_in,
    chain,
    constant,
    eof,
    integer,
    many1,
    optional,
    quoted_string,
    sep_by,
    succeed,
    tag,
    ws0,
    ws1,
)


class TestBytes:
    def test_byte(self) -> None:
        assert byte(b"a").parse(0, b"abc") == Success(1, ord("a"))
        assert byte(ord("a")).parse(0, b"abc") == Success(1, ord("a"))
        assert byte(b"b").parse(0, b"abc") == FAIL

    def test_byte_invalid(self) -> None:
        with pytest.raises(ValueError):
            byte(b"ab")
        with pytest.raises(ValueError):
            byte(256)

    def test_byte_in(self) -> None:
        digit = byte_in(const.DECIMAL)
        assert digit.parse(0, b"7x") == Success(1, ord("7"))
        assert digit.parse(1, b"7x") == FAIL

    def test_byte_not_in(self) -> None:
        p = byte_not_in(b'"')
        assert p.parse(0, b'a"') == Success(1, ord("a"))
        assert p.parse(1, b'a"') == FAIL
        assert p.parse(2, b'a"') == FAIL

    def test_tag(self) -> None:
        assert tag(b"let").parse(0, b"let x") == Success(3, b"let")
        assert tag(b"let").parse(0, b"lex") == FAIL
        assert tag(b"").parse(1, b"abc") == Success(1, b"")


class TestZeroWidth:
    def test_succeed(self) -> None:
        assert succeed(42).parse(2, b"abc") == Success(2, 42)

    def test_eof(self) -> None:
        assert eof().parse(3, b"abc") == Success(3, None)
        assert eof().parse(1, b"abc") == FAIL

    def test_optional(self) -> None:
        sign = optional(byte(b"-"), default=0)
        assert sign.parse(0, b"-1") == Success(1, ord("-"))
        assert sign.parse(0, b"1") == Success(0, 0)


class TestShortcuts:
    def test_constant(self) -> None:
        assert constant(True, tag(b"true")).parse(0, b"true") == Success(4, True)

    def test_many1(self) -> None:
        digits = many1(byte_in(const.DECIMAL))
        assert digits.parse(0, b"12a") == Success(2, [ord("1"), ord("2")])
        assert digits.parse(0, b"a12") == FAIL

    def test_chain(self) -> None:
        p = chain(tag(b"x="), integer())
        assert p.parse(0, b"x=12") == Success(4, (b"x=", 12))
        assert p.parse(0, b"x=") == FAIL

    def test_sep_by(self) -> None:
        numbers = sep_by(integer(), byte(b","))
        assert numbers.parse(0, b"1,-2,3") == Success(6, [1, -2, 3])
        assert numbers.parse(0, b"1,2,") == Success(3, [1, 2])
        assert numbers.parse(0, b"") == Success(0, [])

    def test_sep_by_results_are_independent(self) -> None:
        numbers = sep_by(integer(), byte(b","))
        first = numbers.parse(0, b"").value
        first.append(1)
        assert numbers.parse(0, b"").value == []


class TestWhitespace:
    def test_ws0(self) -> None:
        assert ws0().parse(0, b" \t\nx") == Success(3, b" \t\n")
        assert ws0().parse(0, b"x") == Success(0, b"")

    def test_ws1(self) -> None:
        assert ws1().parse(0, b"  x") == Success(2, b"  ")
        assert ws1().parse(0, b"x") == FAIL


class TestInteger:
    @pytest.mark.parametrize(
        ("src", "expected"),
        [
            (b"0", 0),
            (b"42", 42),
            (b"-17", -17),
            (b"007", 7),
        ],
    )
    def test_values(self, src: bytes, expected: int) -> None:
        assert parse_all(integer(), src) == expected

    def test_stops_at_non_digit(self) -> None:
        assert integer().parse(0, b"12ab") == Success(2, 12)

    def test_sign_alone(self) -> None:
        assert integer().parse(0, b"-") == FAIL
        assert integer().parse(0, b"-x") == FAIL


class TestQuotedString:
    def test_simple(self) -> None:
        assert quoted_string().parse(0, b'"hello" rest') == Success(7, "hello")

    def test_escapes(self) -> None:
        src = rb'"a\"b\\c\nd"'
        assert quoted_string().parse(0, src) == Success(len(src), 'a"b\\c\nd')

    def test_unterminated(self) -> None:
        assert quoted_string().parse(0, b'"abc') == FAIL

    def test_utf8(self) -> None:
        src = '"日本"'.encode()
        assert quoted_string().parse(0, src) == Success(len(src), "日本")

    def test_custom_quote(self) -> None:
        assert quoted_string(quote=b"'").parse(0, b"'x'") == Success(3, "x")


class TestGrammar:
    def test_key_value_list(self) -> None:
        key = tag(b"k")
        entry = chain(key, ws0(), byte(b"="), ws0(), integer())
        entries = sep_by(entry, chain(ws0(), byte(b";"), ws0()))
        values = [e[4] for e in parse_all(entries, b"k = 1; k=2 ;k= -3")]
        assert values == [1, 2, -3]

    def test_readchar_composes_with_general(self) -> None:
        p = chain(byte(b"a"), readchar(), eof())
        assert p.parse(0, b"ab") == Success(2, (ord("a"), ord("b"), None))

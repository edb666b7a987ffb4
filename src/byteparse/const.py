"""
General use constants.

Byte sets, as the integers that indexing a `bytes` object gives.
"""

from __future__ import annotations
from typing import Final

WHITESPACES: Final[frozenset[int]] = frozenset(b" \t\n\r\f")
BINARY: Final[frozenset[int]] = frozenset(b"01")
OCTAL: Final[frozenset[int]] = frozenset(b"01234567")
DECIMAL: Final[frozenset[int]] = frozenset(b"0123456789")
HEXADECIMAL: Final[frozenset[int]] = DECIMAL | frozenset(b"abcdefABCDEF")
ALPHABETIC: Final[frozenset[int]] = frozenset(b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
ALNUM: Final[frozenset[int]] = ALPHABETIC | DECIMAL

"""
Library of composable parsers over byte sequences.

See the objects for more explanations.

See the `byteparse.general` module for general purpose parsers you can use as examples.

Defining parsers:
```
digit = require(lambda c: c in const.DECIMAL, readchar())
number = process(lambda ds: int(bytes(ds)), concat([digit, digit]))
word = process(bytes, star(require(lambda c: c in const.ALPHABETIC, readchar())))
either = oneof([number, word])
```

Using parsers:
```
result = either.parse(0, b"42")
if result:
    ... # `result` is a `Success` object: `result.pos`, `result.value`
else:
    ... # `result` is a `ParseFailure` object

value = parse_all(either, b"42")     # raises `ParseError` unless everything is consumed
```
"""

import byteparse.const as const
import byteparse.main
from byteparse.main import (
    ByteSource,
    ParseFailure,
    FAIL,
    Success,
    Outcome,
    ParseError,
    Parser,
    readchar,
    concat,
    oneof,
    require,
    process,
    star,
    lazy,
    parse_all,
)
import byteparse.general as general

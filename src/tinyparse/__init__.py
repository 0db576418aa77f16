"""
Small library of composable parser objects.

See the objects for more explanations.

See the `tinyparse.general` module for ready-made parsers you can build on.

Defining parsers:
```
digit = char_range("0", "9")
number = +digit                             # one or more
signed = ~literal("-") & number             # optional sign, then a number
pair = signed & "," & signed
```

Using parsers:
```
result = pair.parse("12,-3 rest")

if result:
    ... # matched, `result.remainder` is " rest"
else:
    ... # didn't match, `result.remainder` is the whole input
```

Reacting to matches:
```
values = []
number = (+digit).with_callback(lambda s: values.append(int(s)))
```
"""

import tinyparse.main
from tinyparse.main import (
    MatchResult,
    ParseError,
    Parser,
    LiteralParser,
    RangeParser,
    AnyParser,
    SequenceParser,
    AlternativeParser,
    OptionalParser,
    ZeroOrMoreParser,
    ExactCountParser,
    AtLeastParser,
    AtMostParser,
    literal,
    char_range,
    any_char,
    sequence,
    alternative,
    optional,
    zero_or_more,
    exactly,
    at_least,
    at_most,
)
import tinyparse.general as general

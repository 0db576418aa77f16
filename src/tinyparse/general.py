"""
Ready-made parsers.

These are shared module constants. `with_callback()` and `named()` change a parser in place,
so copy them first:
```
byte = general.whole_number.copy().with_callback(on_byte).named("byte")
```
"""

from __future__ import annotations

from tinyparse.main import Parser, LiteralParser, char_range

# numbers

digit: Parser = char_range("0", "9").named("digit")

whole_number: Parser = (+digit).named("whole_number")
"""One or more digits."""

integer: Parser = (~LiteralParser("-") & whole_number).named("integer")
"""A whole number with an optional leading `-`."""

decimal: Parser = (integer & "." & whole_number).named("decimal")
"""An integer, a dot and the fractional digits. Both sides are required."""

number: Parser = (decimal | integer).named("number")
"""A decimal or an integer. The decimal is tried first so the fraction isn't left over."""

# letters

lower_case_character: Parser = char_range("a", "z").named("lower_case_character")

upper_case_character: Parser = char_range("A", "Z").named("upper_case_character")

letter: Parser = (lower_case_character | upper_case_character).named("letter")

alphanumeric: Parser = (letter | digit).named("alphanumeric")

# single characters

dash: Parser = LiteralParser("-")

dot: Parser = LiteralParser(".")

underscore: Parser = LiteralParser("_")

space: Parser = LiteralParser(" ")

tab: Parser = LiteralParser("\t")

newline: Parser = LiteralParser("\n")

carriage_return: Parser = LiteralParser("\r")

whitespace: Parser = (space | tab | newline | carriage_return).named("whitespace")

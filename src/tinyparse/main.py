"""
The implementations of the main classes.
"""

from __future__ import annotations
from typing import Self, ClassVar, Callable

import copy
import logging

log = logging.getLogger("tinyparse")

debug = False
"""When `True`, every `Parser.parse()` call is traced on the `tinyparse` logger at debug level."""


Callback = Callable[[str], object]
"""Called with the substring a parser consumed on a successful match."""



def _quoted(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class MatchResult:
    """
    The outcome of a parser attempt.

    ```
    r = parser.parse("abc")
    if r:
        ... # matched, `r.remainder` is what's left
    else:
        ... # didn't match, `r.remainder` is the original input
    ```
    """

    def __init__(self, remainder: str, success: bool) -> None:
        self.remainder: str = remainder
        """The unconsumed suffix of the input."""
        self.success: bool = success

    def consumed_from(self, text: str) -> str:
        """The prefix of `text` that was matched to produce this result."""
        return text[:len(text) - len(self.remainder)]

    def __bool__(self) -> bool:
        return self.success

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MatchResult):
            return self.remainder == other.remainder and self.success == other.success
        elif isinstance(other, tuple):
            return (self.remainder, self.success) == other
        else:
            return NotImplemented

    def __hash__(self) -> int:
        return hash((self.remainder, self.success))

    def __rshift__(self, parser: Parser) -> MatchResult:
        """Continues parsing from the remainder: `result >> parser`."""
        return parser.parse(self.remainder)

    def __str__(self) -> str:
        return "{" + _quoted(str(self.remainder)) + ", " + ("true" if self.success else "false") + "}"

    def __repr__(self) -> str:
        return f"MatchResult({self.remainder!r}, {self.success!r})"


class ParseError(Exception):
    """
    Raised by `Parser.parse_all()` when the input isn't matched completely.

    Matching itself never raises, a failed match is just a falsy `MatchResult`.
    The position is also added as a note, with the offending line and a caret under the column.
    """

    def __init__(self, src: str, pos: int, msg: str | None = None) -> None:
        """
        `src`: The string that was being parsed.
        `pos`: The position of the error. Clamped to the length of `src`.
        `msg`: The reason for the error.
        """
        if msg is None:
            super().__init__()
        else:
            super().__init__(msg)
        self.src: str = src
        self.pos: int = min(pos, len(src))
        self.line: int = src.count("\n", 0, self.pos) + 1
        self.column: int = self.pos - src.rfind("\n", 0, self.pos) # rfind gives -1 on the first line
        self.add_note(self._location())

    def _location(self) -> str:
        start = self.src.rfind("\n", 0, self.pos) + 1
        end = self.src.find("\n", self.pos)
        line_str = self.src[start:] if end == -1 else self.src[start:end]
        return (
            f"At position {self.pos} (line {self.line}, column {self.column})\n"
            f"{line_str}\n{' '*(self.column-1)}^"
        )



class Parser:
    """
    Base class of every parser.

    Subclasses implement `attempt()` and `minimum_length()`. Users call `parse()`, which also
    fires the bound callback.

    Composition:
    ```
    a & b       # sequence
    a | b       # alternative
    ~a          # optional
    +a          # one or more
    3 * a       # exactly 3 times
    "abc" >> a  # same as a.parse("abc")
    ```
    """

    _children: ClassVar[tuple[str, ...]] = ()
    """Names of the attributes holding child parsers. Used by `copy()`."""

    def __init__(self) -> None:
        self.callback: Callback | None = None
        self.name: str | None = None

    def attempt(self, text: str) -> MatchResult:
        """
        Matches a prefix of `text` without firing this parser's own callback.

        The returned remainder is always a suffix of `text`, and is `text` itself on failure.
        """
        raise NotImplementedError

    def minimum_length(self) -> int:
        """The smallest number of characters a complete match consumes."""
        raise NotImplementedError

    def parse(self, text: str) -> MatchResult:
        """
        Matches a prefix of `text`.

        If it matched, calls the bound callback with the consumed substring before returning.
        Exceptions raised by the callback propagate to the caller.
        """
        if debug:
            log.debug("trying %s on %r", self, text)
        result = self.attempt(text)
        if result.success:
            if debug:
                log.debug("matched %s, remainder %r", self, result.remainder)
            if self.callback is not None:
                self.callback(result.consumed_from(text))
        elif debug:
            log.debug("failed %s", self)
        return result

    def parse_all(self, text: str) -> MatchResult:
        """
        Like `parse()`, but the whole input must be consumed.

        Raises `ParseError` otherwise.
        """
        result = self.parse(text)
        if not result.success:
            raise ParseError(text, 0, "Failed to match.")
        if result.remainder:
            raise ParseError(text, len(text) - len(result.remainder), "Unexpected trailing input.")
        return result

    def with_callback(self, callback: Callback | None) -> Self:
        """
        Binds the callback that's called with the matched substring on every successful `parse()`.

        Replaces the previous callback. Pass `None` to remove it. Returns the parser itself.

        Shared parsers (such as the ones in `tinyparse.general`) should be copied first:
        ```
        byte = general.whole_number.copy().with_callback(on_byte)
        ```
        """
        self.callback = callback
        return self

    def named(self, name: str) -> Self:
        """
        Sets the name shown in the debug log. Returns the parser itself.

        Like `with_callback()`, this changes the parser in place, so copy shared parsers first:
        ```
        port = general.whole_number.copy().named("port")
        ```
        """
        self.name = name
        return self

    def copy(self) -> Self:
        """
        Copies the parser and all of its children.

        Callbacks are shared with the original, not copied.
        """
        clone = copy.copy(self)
        for attr in self._children:
            child = getattr(self, attr)
            if isinstance(child, tuple):
                setattr(clone, attr, tuple(parser.copy() for parser in child))
            else:
                setattr(clone, attr, child.copy())
        return clone

    def _parts(self, kind: type[Parser]) -> tuple[Parser, ...]:
        # an anonymous chain without a callback can be extended in place of nesting
        if type(self) is kind and self.callback is None and self.name is None:
            return self.parsers # type: ignore[attr-defined]
        return (self,)

    def __and__(self, other: Parser | str) -> SequenceParser:
        return SequenceParser(*self._parts(SequenceParser), convert_parameter(other))

    def __rand__(self, other: str) -> SequenceParser:
        return SequenceParser(convert_parameter(other), *self._parts(SequenceParser))

    def __or__(self, other: Parser | str) -> AlternativeParser:
        return AlternativeParser(*self._parts(AlternativeParser), convert_parameter(other))

    def __ror__(self, other: str) -> AlternativeParser:
        return AlternativeParser(convert_parameter(other), *self._parts(AlternativeParser))

    def __invert__(self) -> OptionalParser:
        return OptionalParser(self)

    def __pos__(self) -> AtLeastParser:
        return AtLeastParser(0, self)

    def __mul__(self, times: int) -> ExactCountParser:
        if not isinstance(times, int):
            return NotImplemented
        return ExactCountParser(times, self)

    __rmul__ = __mul__

    def __rrshift__(self, text: str) -> MatchResult:
        return self.parse(text)

    def __str__(self) -> str:
        return self.name if self.name is not None else repr(self)


def _check_char(value: str, what: str) -> None:
    if len(value) != 1:
        raise ValueError(f"{what} must be a single character, got {value!r}.")

def _check_count(count: int) -> None:
    if count < 0:
        raise ValueError(f"Repetition count can't be negative, got {count}.")


# primitives

class LiteralParser(Parser):
    """Matches a single character equal to `char`."""

    def __init__(self, char: str) -> None:
        super().__init__()
        _check_char(char, "Literal")
        self.char: str = char

    def attempt(self, text: str) -> MatchResult:
        if text[:1] == self.char:
            return MatchResult(text[1:], True)
        return MatchResult(text, False)

    def minimum_length(self) -> int:
        return 1

    def __repr__(self) -> str:
        return f"LiteralParser({self.char!r})"

class RangeParser(Parser):
    """Matches a single character between `low` and `high`, inclusive."""

    def __init__(self, low: str, high: str) -> None:
        super().__init__()
        _check_char(low, "Range lower bound")
        _check_char(high, "Range upper bound")
        if low > high:
            raise ValueError(f"Empty range: {low!r} is greater than {high!r}.")
        self.low: str = low
        self.high: str = high

    def attempt(self, text: str) -> MatchResult:
        if text and self.low <= text[:1] <= self.high:
            return MatchResult(text[1:], True)
        return MatchResult(text, False)

    def minimum_length(self) -> int:
        return 1

    def __repr__(self) -> str:
        return f"RangeParser({self.low!r}, {self.high!r})"

class AnyParser(Parser):
    """Matches any single character. Fails only on empty input."""

    def attempt(self, text: str) -> MatchResult:
        if text:
            return MatchResult(text[1:], True)
        return MatchResult(text, False)

    def minimum_length(self) -> int:
        return 1

    def __repr__(self) -> str:
        return "AnyParser()"


# combinators

class SequenceParser(Parser):
    """
    Matches each of `parsers` in turn, each on what the previous one left.

    If any of them fails, the whole input is given back. (Callbacks of the parts that matched have already fired by then.)
    """

    _children = ("parsers",)

    def __init__(self, first: Parser, second: Parser, *rest: Parser) -> None:
        super().__init__()
        self.parsers: tuple[Parser, ...] = tuple(parser.copy() for parser in (first, second, *rest))

    def attempt(self, text: str) -> MatchResult:
        remainder = text
        for parser in self.parsers:
            result = parser.parse(remainder)
            if not result.success:
                return MatchResult(text, False)
            remainder = result.remainder
        return MatchResult(remainder, True)

    def minimum_length(self) -> int:
        return sum(parser.minimum_length() for parser in self.parsers)

    def __repr__(self) -> str:
        return "(" + " & ".join(repr(parser) for parser in self.parsers) + ")"

class AlternativeParser(Parser):
    """Matches the first of `parsers` that matches. Later ones aren't tried once one matches."""

    _children = ("parsers",)

    def __init__(self, first: Parser, second: Parser, *rest: Parser) -> None:
        super().__init__()
        self.parsers: tuple[Parser, ...] = tuple(parser.copy() for parser in (first, second, *rest))

    def attempt(self, text: str) -> MatchResult:
        for parser in self.parsers:
            result = parser.parse(text)
            if result.success:
                return result
        return MatchResult(text, False)

    def minimum_length(self) -> int:
        return min(parser.minimum_length() for parser in self.parsers)

    def __repr__(self) -> str:
        return "(" + " | ".join(repr(parser) for parser in self.parsers) + ")"

class OptionalParser(Parser):
    """Matches `inner` if possible. Always succeeds."""

    _children = ("inner",)

    def __init__(self, inner: Parser) -> None:
        super().__init__()
        self.inner: Parser = inner.copy()

    def attempt(self, text: str) -> MatchResult:
        return MatchResult(self.inner.parse(text).remainder, True)

    def minimum_length(self) -> int:
        return 0

    def __repr__(self) -> str:
        return f"~{self.inner!r}"

class ZeroOrMoreParser(Parser):
    """
    Matches `inner` as many times as possible. Always succeeds.

    Stops at the first failure, or at a match that didn't consume anything.
    """

    _children = ("inner",)

    def __init__(self, inner: Parser) -> None:
        super().__init__()
        self.inner: Parser = inner.copy()

    def attempt(self, text: str) -> MatchResult:
        remainder = text
        while True:
            result = self.inner.parse(remainder)
            if not result.success or len(result.remainder) >= len(remainder):
                break
            remainder = result.remainder
        return MatchResult(remainder, True)

    def minimum_length(self) -> int:
        return 0

    def __repr__(self) -> str:
        return f"zero_or_more({self.inner!r})"

class ExactCountParser(Parser):
    """Matches `inner` exactly `count` times in a row."""

    _children = ("inner",)

    def __init__(self, count: int, inner: Parser) -> None:
        super().__init__()
        _check_count(count)
        self.count: int = count
        self.inner: Parser = inner.copy()

    def attempt(self, text: str) -> MatchResult:
        remainder = text
        for _ in range(self.count):
            result = self.inner.parse(remainder)
            if not result.success:
                return MatchResult(text, False)
            remainder = result.remainder
        return MatchResult(remainder, True)

    def minimum_length(self) -> int:
        return self.count * self.inner.minimum_length()

    def __repr__(self) -> str:
        return f"({self.count} * {self.inner!r})"

class AtLeastParser(Parser):
    """
    Matches `inner` repeatedly, succeeding only if it matched *more than* `count` times.

    `AtLeastParser(0, p)` is "one or more".
    """

    _children = ("inner",)

    def __init__(self, count: int, inner: Parser) -> None:
        super().__init__()
        _check_count(count)
        self.count: int = count
        self.inner: Parser = inner.copy()

    def attempt(self, text: str) -> MatchResult:
        matches = 0
        remainder = text
        while True:
            result = self.inner.parse(remainder)
            if not result.success:
                break
            if len(result.remainder) >= len(remainder):
                # an empty match repeats forever, so any count is reached
                return MatchResult(remainder, True)
            matches += 1
            remainder = result.remainder
        if matches > self.count:
            return MatchResult(remainder, True)
        return MatchResult(text, False)

    def minimum_length(self) -> int:
        return (self.count + 1) * self.inner.minimum_length()

    def __repr__(self) -> str:
        return f"at_least({self.count}, {self.inner!r})"

class AtMostParser(Parser):
    """
    Matches `inner` at least once and *fewer than* `count` times. (At most once when `count` is 2 or less.)

    Consumes as many repetitions as allowed.
    """

    _children = ("inner",)

    def __init__(self, count: int, inner: Parser) -> None:
        super().__init__()
        _check_count(count)
        self.count: int = count
        self.inner: Parser = inner.copy()

    def attempt(self, text: str) -> MatchResult:
        result = self.inner.parse(text)
        if not result.success:
            return MatchResult(text, False)
        remainder = result.remainder
        # the first attempt is done, stop before the count-th one
        for _ in range(2, self.count):
            result = self.inner.parse(remainder)
            if not result.success or len(result.remainder) >= len(remainder):
                break
            remainder = result.remainder
        return MatchResult(remainder, True)

    def minimum_length(self) -> int:
        return 0

    def __repr__(self) -> str:
        return f"at_most({self.count}, {self.inner!r})"



ParserParameter = Parser | str

def convert_parameter(parser: ParserParameter) -> Parser:
    if isinstance(parser, str):
        return literal(parser)
    elif isinstance(parser, Parser):
        return parser
    else:
        raise TypeError(f"Expected a parser or a string, got {type(parser).__name__}.")

def convert_parameters(parsers: tuple[ParserParameter, ...]) -> tuple[Parser, ...]:
    return tuple(convert_parameter(parser) for parser in parsers)



def literal(value: str) -> Parser:
    """
    Parser factory for `LiteralParser`.

    A string longer than one character becomes a sequence of literals.
    """
    if len(value) <= 0:
        raise ValueError("At least one character required.")
    if len(value) == 1:
        return LiteralParser(value)
    return sequence(*value)

def char_range(low: str, high: str) -> RangeParser:
    """Parser factory for `RangeParser`."""
    return RangeParser(low, high)

def any_char() -> AnyParser:
    """Parser factory for `AnyParser`."""
    return AnyParser()


def sequence(*parsers: ParserParameter) -> SequenceParser:
    """
    A parser factory.

    All the given parsers must match in sequence for the parser to succeed.
    """
    if len(parsers) < 2:
        raise ValueError("At least two parsers required.")
    return SequenceParser(*convert_parameters(parsers))

def alternative(*parsers: ParserParameter) -> AlternativeParser:
    """
    A parser factory.

    Attempts to match the parsers in order, until one matches. If none match, fails.
    """
    if len(parsers) < 2:
        raise ValueError("At least two parsers required.")
    return AlternativeParser(*convert_parameters(parsers))

def optional(parser: ParserParameter) -> OptionalParser:
    """A parser factory. Matches the parser if it can, succeeds either way."""
    return OptionalParser(convert_parameter(parser))

def zero_or_more(parser: ParserParameter) -> ZeroOrMoreParser:
    """A parser factory. Repeatedly matches the given parser until it fails."""
    return ZeroOrMoreParser(convert_parameter(parser))

def exactly(count: int, parser: ParserParameter) -> ExactCountParser:
    """A parser factory. Matches the given parser exactly `count` times."""
    return ExactCountParser(count, convert_parameter(parser))

def at_least(count: int, parser: ParserParameter) -> AtLeastParser:
    """A parser factory. Matches the given parser more than `count` times."""
    return AtLeastParser(count, convert_parameter(parser))

def at_most(count: int, parser: ParserParameter) -> AtMostParser:
    """A parser factory. Matches the given parser at least once and fewer than `count` times."""
    return AtMostParser(count, convert_parameter(parser))

"""
Ready-made parsers for common actions, built on the core combinators.

See the error coercion rules in `pyparsa.Combinators` for how their failure
kinds combine.
"""
from typing import Callable, TypeVar

from .Combinators import Rewind
from .Cursor import Cursor
from .Errors import Never, ParseFailure
from .Parser import Parser, parser
from .Result import Ok, Err, Result, catching

N = TypeVar('N', int, float)

# The Unicode White_Space property. `str.isspace` also accepts \x1c-\x1f.
UNICODE_WHITESPACE = frozenset(
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)


# --- Failure kinds ---

class CharError(ParseFailure):
    """A single-character parser failed."""


class EndOfInput(CharError):
    message = "unexpected end of input"


class Unexpected(CharError):
    def __init__(self, found: str, expected: str = ""):
        super().__init__(found, expected)
        self.found = found
        self.expected = expected

    def __str__(self) -> str:
        if self.expected:
            return f"unexpected {self.found!r}, expecting {self.expected}"
        return f"unexpected {self.found!r}"


class WordError(ParseFailure):
    """A `word` parser found no characters."""
    message = "found no characters"


class TakeError(ParseFailure):
    """A `literal` parser failed."""


class NoSpace(TakeError):
    def __init__(self, expected: str):
        super().__init__(expected)
        self.expected = expected

    def __str__(self) -> str:
        return f"ran out of space while expecting {self.expected!r}"


class NoMatch(TakeError):
    def __init__(self, expected: str, found: str):
        super().__init__(expected, found)
        self.expected = expected
        self.found = found

    def __str__(self) -> str:
        return f"expected {self.expected!r}, found {self.found!r}"


class DelimitedError(ParseFailure):
    """A `delimited` parser failed."""


class MissingOpener(DelimitedError):
    def __init__(self, opener: str):
        super().__init__(opener)
        self.opener = opener

    def __str__(self) -> str:
        return f"expected opening {self.opener!r}"


class MissingCloser(DelimitedError):
    def __init__(self, closer: str):
        super().__init__(closer)
        self.closer = closer

    def __str__(self) -> str:
        return f"closing {self.closer!r} not found before end of input"


class NumberError(ParseFailure):
    """A numeric parser failed. `source` holds the underlying failure."""


@NumberError.variant(WordError)
class NoWord(NumberError):
    pass


@NumberError.variant(ValueError)
class MalformedNumber(NumberError):
    pass


class ExpectedEnd(ParseFailure):
    def __init__(self, remaining: str):
        super().__init__(remaining)
        self.remaining = remaining

    def __str__(self) -> str:
        preview = self.remaining[:30] + ('...' if len(self.remaining) > 30 else '')
        return f"expected end of input, found {preview!r}"


# --- Character parsers ---

# 1. next_char: Reads a single character
@parser(err=EndOfInput)
def next_char(cursor: Cursor) -> Result[str, EndOfInput]:
    """Returns the next character, failing with `EndOfInput` if there is none."""
    c = cursor.try_take(1)
    if c is None:
        return Err(EndOfInput())
    return Ok(c)


# 2. satisfy: Reads a character matching a predicate
def satisfy(pred: Callable[[str], bool], label: str = "") -> Parser[str]:
    """
    Reads one character if `pred` accepts it. A rejected character is not consumed.
    """
    def parse(cursor: Cursor) -> Result[str, CharError]:
        c = cursor.peek()
        if not c:
            return Err(EndOfInput())
        if not pred(c):
            return Err(Unexpected(c, label))
        cursor.take(1)
        return Ok(c)
    return Parser(parse, CharError, label or "satisfy")


# 3. char: Reads one specific character
def char(c: str) -> Parser[str]:
    return satisfy(lambda x: x == c, repr(c))


# --- Word and whitespace ---

# 4. word: Greedy run of non-whitespace characters
@parser(err=WordError)
def word(cursor: Cursor) -> Result[str, WordError]:
    """
    Reads characters up to whitespace (any `UNICODE_WHITESPACE` character) or
    end of input. The whitespace character that stops it is left in place.
    Fails if nothing was read.
    """
    out = []
    while True:
        c = cursor.try_take(1)
        if c is None:
            break
        if c in UNICODE_WHITESPACE:
            cursor.unchecked.give_back(1)
            break
        out.append(c)
    if not out:
        return Err(WordError())
    return Ok(''.join(out))


# 5. whitespace: Skips ASCII spaces
@parser(err=Never)
def whitespace(cursor: Cursor) -> Result[int, Never]:
    """Skips leading ' ' characters and returns how many. Never fails."""
    count = 0
    while cursor.peek() == ' ':
        cursor.take(1)
        count += 1
    return Ok(count)


# --- Literals and segments ---

# 6. literal: Matches a fixed delimiter
def literal(delim: str) -> Parser[str]:
    """
    Takes `len(delim)` characters and checks them against `delim`.

    On `NoMatch` the characters stay consumed; wrap in `rewind_on_failure()`
    (or use it inside an alternation) to put them back. On `NoSpace` nothing
    is consumed.
    """
    def parse(cursor: Cursor) -> Result[str, TakeError]:
        head = cursor.try_take(len(delim))
        if head is None:
            return Err(NoSpace(delim))
        if head != delim:
            return Err(NoMatch(delim, head))
        return Ok(delim)
    return Parser(parse, TakeError, repr(delim))


# 7. delimited: Text between an opener and a closer
def delimited(opener: str, closer: str) -> Parser[str]:
    """
    Reads `opener`, then everything up to the next `closer`, then the closer,
    returning the text in between.

    Fails with `MissingOpener` if the input does not start with `opener`
    (nothing consumed), or with `MissingCloser` if `closer` never appears
    (only the opener consumed).
    """
    open_p = Rewind(literal(opener))

    def parse(cursor: Cursor) -> Result[str, DelimitedError]:
        if isinstance(open_p.run(cursor), Err):
            return Err(MissingOpener(opener))
        end = cursor.remaining().find(closer)
        if end < 0:
            return Err(MissingCloser(closer))
        segment = cursor.take(end)
        cursor.take(len(closer))
        return Ok(segment)
    return Parser(parse, DelimitedError, f"delimited({opener!r}, {closer!r})")


# --- Numbers ---

# 8. number: A word converted by a numeric constructor
def number(convert: Callable[[str], N]) -> Parser[N]:
    """
    Reads a `word` and converts it with `convert` (e.g. `int`, `float`).
    Fails with `NoWord` if there is no word, or `MalformedNumber` if the
    conversion raises `ValueError`. The word stays consumed on `MalformedNumber`.
    """
    return word.convert_errors_to(NumberError).and_then(catching(convert, ValueError))


integer: Parser[int] = number(int)
floating: Parser[float] = number(float)


# --- End of input ---

@parser(err=ExpectedEnd)
def eof(cursor: Cursor) -> Result[None, ExpectedEnd]:
    """Succeeds only when no input remains."""
    if cursor.at_end():
        return Ok(None)
    return Err(ExpectedEnd(cursor.remaining()))
